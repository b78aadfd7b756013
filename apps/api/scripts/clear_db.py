#!/usr/bin/env python
"""
Delete all investments and transaction logs, keeping users and products.

Usage:
    python scripts/clear_db.py
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import delete

from config import get_settings
from core.database import Database
from core.logging import get_logger, setup_logging
from domain.audit.models import TransactionLog
from domain.investment.models import Investment

logger = get_logger(__name__)


async def clear(settings=None):
    """Delete investments and transaction logs in one transaction."""
    database = Database(settings or get_settings())
    try:
        logs, investments = await database.run_transaction(
            [delete(TransactionLog), delete(Investment)]
        )
        logger.info(
            "Cleared investments and transaction logs",
            investments=investments,
            transaction_logs=logs,
        )
    finally:
        await database.dispose()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(clear())
