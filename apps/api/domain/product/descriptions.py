"""Templated product copy and risk-appetite matching."""

from .models import InvestmentType, RiskLevel

RISK_DESCRIPTIONS = {
    RiskLevel.low: "conservative investment with stable returns and minimal volatility",
    RiskLevel.moderate: "balanced investment offering moderate risk with steady growth potential",
    RiskLevel.high: "aggressive investment with higher volatility but significant growth opportunities",
}

TYPE_DESCRIPTIONS = {
    InvestmentType.bond: "government or corporate bonds providing fixed income",
    InvestmentType.fd: "fixed deposit offering guaranteed returns with capital protection",
    InvestmentType.mf: "mutual fund providing diversified exposure across asset classes",
    InvestmentType.etf: "exchange-traded fund tracking market indices with low costs",
    InvestmentType.other: "alternative investment vehicle with unique risk-return profile",
}

INVESTOR_GOALS = {
    RiskLevel.low: "capital preservation",
    RiskLevel.moderate: "balanced returns",
    RiskLevel.high: "aggressive growth",
}

# Risk levels a user of a given appetite is offered
RECOMMENDED_RISK_LEVELS = {
    RiskLevel.low: [RiskLevel.low],
    RiskLevel.moderate: [RiskLevel.low, RiskLevel.moderate],
    RiskLevel.high: [RiskLevel.moderate, RiskLevel.high],
}


def generate_description(name: str, investment_type: InvestmentType, risk_level: RiskLevel) -> str:
    """Describe a product from its name, type and risk level."""
    investment_type = InvestmentType(investment_type)
    risk_level = RiskLevel(risk_level)
    return (
        f"{name} is a {TYPE_DESCRIPTIONS[investment_type]} designed as a "
        f"{RISK_DESCRIPTIONS[risk_level]}. This investment opportunity is suitable for "
        f"investors seeking {INVESTOR_GOALS[risk_level]} and can be an excellent addition "
        "to a well-diversified portfolio. The product offers professional management and "
        "follows industry best practices for risk management."
    )


def recommended_risk_levels(risk_appetite: RiskLevel) -> list[RiskLevel]:
    """Risk levels suitable for ``risk_appetite``."""
    return RECOMMENDED_RISK_LEVELS.get(
        RiskLevel(risk_appetite), RECOMMENDED_RISK_LEVELS[RiskLevel.moderate]
    )
