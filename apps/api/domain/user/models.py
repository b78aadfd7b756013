"""User domain models."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, Float, String

from core.database import Base
from domain.product.models import RiskLevel

DEFAULT_PREFERENCES = {
    "emailNotifications": True,
    "smsNotifications": False,
    "marketUpdates": True,
    "portfolioAlerts": True,
}


class User(Base):
    """User model."""

    __tablename__ = "users"

    # Primary key
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    # Profile
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(30), nullable=True)

    # Investing profile
    risk_appetite = Column(
        Enum(RiskLevel, native_enum=False),
        default=RiskLevel.moderate,
        nullable=False,
    )
    investment_goal = Column(String(255), nullable=True)
    monthly_investment = Column(Float, nullable=True)

    # Two-factor authentication
    two_factor_secret = Column(String(64), nullable=True)
    two_factor_enabled = Column(Boolean, default=False, nullable=False)

    # Settings
    preferences = Column(JSON, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at = Column(
        DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"

    @property
    def effective_preferences(self) -> dict:
        """Stored preferences, falling back to defaults."""
        return self.preferences if self.preferences is not None else dict(DEFAULT_PREFERENCES)
