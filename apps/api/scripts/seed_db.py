#!/usr/bin/env python
"""
Reset the database to a demo state: the product catalog plus one demo user.

Usage:
    python scripts/seed_db.py

Demo login:
    demo@gripinvest.in / Passw0rd!
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete, insert

from config import get_settings
from core.auth import hash_password
from core.database import Database
from core.logging import get_logger, setup_logging
from domain.audit.models import TransactionLog
from domain.investment.models import Investment
from domain.product.descriptions import generate_description
from domain.product.models import InvestmentProduct, InvestmentType, RiskLevel
from domain.user.models import DEFAULT_PREFERENCES, User

logger = get_logger(__name__)

DEMO_USER = {
    "email": "demo@gripinvest.in",
    "password": "Passw0rd!",
    "first_name": "Demo",
    "last_name": "User",
    "risk_appetite": RiskLevel.moderate,
}

# (name, type, tenure months, annual yield %, risk, min, max)
CATALOG = [
    ("NIFTY 50 Index ETF", InvestmentType.etf, 0, 12.5, RiskLevel.moderate, 1000, 1000000),
    ("S&P 500 Index ETF", InvestmentType.etf, 0, 10.0, RiskLevel.moderate, 1000, 1000000),
    ("NASDAQ 100 ETF", InvestmentType.etf, 0, 14.2, RiskLevel.high, 1000, 1000000),
    ("HDFC Corporate Bond Fund", InvestmentType.mf, 36, 7.2, RiskLevel.low, 1000, 500000),
    ("ICICI Prudential Bluechip Fund", InvestmentType.mf, 24, 11.8, RiskLevel.moderate, 1000, 1000000),
    ("SBI Small Cap Fund", InvestmentType.mf, 60, 16.5, RiskLevel.high, 1000, 500000),
    ("Government Securities (G-Sec) 10Y", InvestmentType.bond, 120, 7.0, RiskLevel.low, 5000, 10000000),
    ("Corporate Bond AAA 5Y", InvestmentType.bond, 60, 8.5, RiskLevel.low, 10000, 5000000),
    ("HDFC Bank Fixed Deposit", InvestmentType.fd, 12, 6.5, RiskLevel.low, 1000, 2000000),
    ("SBI Fixed Deposit", InvestmentType.fd, 24, 7.2, RiskLevel.low, 1000, 2000000),
    ("Apple Inc (AAPL)", InvestmentType.other, 0, 12.0, RiskLevel.moderate, 1000, 1000000),
    ("NVIDIA (NVDA)", InvestmentType.other, 0, 18.0, RiskLevel.high, 1000, 1000000),
    ("Tesla (TSLA)", InvestmentType.other, 0, 16.0, RiskLevel.high, 1000, 1000000),
    ("HDFC Bank", InvestmentType.other, 0, 10.0, RiskLevel.moderate, 1000, 1000000),
    ("Reliance Industries", InvestmentType.other, 0, 11.0, RiskLevel.moderate, 1000, 1000000),
    ("Infosys", InvestmentType.other, 0, 9.5, RiskLevel.moderate, 1000, 1000000),
    ("Tech Growth Basket", InvestmentType.other, 0, 15.0, RiskLevel.high, 1000, 1000000),
    ("Real Estate Investment Trust (REIT)", InvestmentType.other, 0, 8.5, RiskLevel.moderate, 5000, 2000000),
    ("Gold ETF", InvestmentType.etf, 0, 6.0, RiskLevel.low, 1000, 1000000),
]


def catalog_rows() -> list[dict]:
    """Column values for every catalog product."""
    return [
        {
            "name": name,
            "investment_type": investment_type,
            "tenure_months": tenure,
            "annual_yield": annual_yield,
            "risk_level": risk,
            "min_investment": float(min_investment),
            "max_investment": float(max_investment),
            "description": generate_description(name, investment_type, risk),
        }
        for name, investment_type, tenure, annual_yield, risk, min_investment, max_investment in CATALOG
    ]


async def seed(settings=None):
    """Wipe every table and insert the demo data in one transaction."""
    settings = settings or get_settings()
    database = Database(settings)
    try:
        await database.create_all()

        demo = dict(DEMO_USER)
        password = demo.pop("password")
        demo["password_hash"] = hash_password(password)
        demo["preferences"] = dict(DEFAULT_PREFERENCES)

        statements = [
            delete(TransactionLog),
            delete(Investment),
            delete(InvestmentProduct),
            delete(User),
            insert(User).values(**demo),
        ]
        statements.extend(insert(InvestmentProduct).values(**row) for row in catalog_rows())

        await database.run_transaction(statements)
        logger.info("Seed completed", demo_user=DEMO_USER["email"], products=len(CATALOG))
    finally:
        await database.dispose()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(seed())
