"""
Test portfolio calculations.
"""

from datetime import datetime

import pytest

from domain.investment.analytics import (
    Holding,
    add_months,
    calculate_expected_return,
    calculate_maturity_date,
    summarize_portfolio,
)
from domain.product.models import RiskLevel


def test_expected_return_is_principal_plus_one_year_yield():
    assert calculate_expected_return(10000, 12.5) == pytest.approx(11250)
    assert calculate_expected_return(5000, 7.2) == pytest.approx(5360)


def test_maturity_date_clamps_to_month_end():
    assert add_months(datetime(2024, 1, 31), 1) == datetime(2024, 2, 29)
    assert calculate_maturity_date(datetime(2024, 3, 15), 12) == datetime(2025, 3, 15)


def test_open_ended_products_have_no_maturity():
    assert calculate_maturity_date(datetime(2024, 3, 15), 0) is None


def test_empty_portfolio():
    summary = summarize_portfolio([])

    assert summary.total == 0
    assert summary.count == 0
    assert summary.breakdown == {}
    assert summary.risk_distribution == {}
    assert summary.diversification_score == 0
    assert summary.average_return == 0
    assert "no investments" in summary.ai_summary


def test_portfolio_aggregates():
    holdings = [
        Holding(amount=3000, expected_return=3480, risk_level=RiskLevel.high),
        Holding(amount=1000, expected_return=1065, risk_level=RiskLevel.low),
    ]

    summary = summarize_portfolio(holdings)

    assert summary.total == 4000
    assert summary.count == 2
    assert list(summary.breakdown) == ["low", "high"]
    assert summary.breakdown == {"low": 1000, "high": 3000}
    assert summary.risk_distribution["low"]["percentage"] == pytest.approx(25)
    assert summary.risk_distribution["high"]["percentage"] == pytest.approx(75)
    assert summary.diversification_score == 2
    assert summary.expected_total_return == pytest.approx(545)
    assert summary.average_return == pytest.approx(272.5)
    assert "₹4,000.00" in summary.ai_summary
    assert "Good diversification" in summary.ai_summary


def test_portfolio_invariants():
    holdings = [
        Holding(amount=1200, expected_return=1350, risk_level="moderate"),
        Holding(amount=800, expected_return=None, risk_level="moderate"),
        Holding(amount=500, expected_return=560, risk_level="low"),
    ]

    summary = summarize_portfolio(holdings)

    assert sum(summary.breakdown.values()) == pytest.approx(summary.total)
    assert sum(share["percentage"] for share in summary.risk_distribution.values()) == pytest.approx(100)
    assert summary.diversification_score == len(summary.risk_distribution)
    assert summary.expected_total_return == pytest.approx(150 + 60)


def test_single_bucket_suggests_diversifying():
    summary = summarize_portfolio([Holding(amount=100, expected_return=110, risk_level="low")])

    assert summary.diversification_score == 1
    assert "Consider diversifying" in summary.ai_summary
