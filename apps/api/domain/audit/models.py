"""Audit trail models."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Index, Integer, String, Text

from core.database import Base


class TransactionLog(Base):
    """One row per completed HTTP request. Append-only."""

    __tablename__ = "transaction_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Caller identity, when the request was authenticated
    user_id = Column(String(36), nullable=True)
    email = Column(String(255), nullable=True)

    endpoint = Column(String(500), nullable=False)
    http_method = Column(String(10), nullable=False)
    status_code = Column(Integer, nullable=False)
    error_message = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=datetime.utcnow, nullable=False)

    __table_args__ = (Index("ix_transaction_logs_user_created", "user_id", "created_at"),)

    def __repr__(self):
        return (
            f"<TransactionLog(id={self.id}, {self.http_method} {self.endpoint} "
            f"-> {self.status_code})>"
        )
