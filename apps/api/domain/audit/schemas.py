"""Audit log response schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from core.schemas import CamelModel


class TransactionLogResponse(CamelModel):
    """A log row as returned to clients."""

    id: int
    user_id: Optional[str] = None
    email: Optional[str] = None
    endpoint: str
    http_method: str
    status_code: int
    error_message: Optional[str] = None
    created_at: datetime


class LoginHistoryItem(BaseModel):
    id: int
    endpoint: str
    method: str
    status: int
    timestamp: datetime
    success: bool


class LoginHistoryResponse(BaseModel):
    login_history: list[LoginHistoryItem] = Field(serialization_alias="loginHistory")


class LogSummaryResponse(BaseModel):
    summary: str
