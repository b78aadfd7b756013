"""Audit log views.

Requests under this router are not themselves audited.
"""

import time

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import Principal, get_current_principal
from core.database import get_session
from domain.audit.repository import TransactionLogRepository, summarize_errors
from domain.audit.schemas import LogSummaryResponse, TransactionLogResponse

router = APIRouter()

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


# Registered ahead of "/user/{user_id}" so "me" is not taken as an id
@router.get("/user/me", response_model=list[TransactionLogResponse])
async def my_logs(
    response: Response,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """The caller's own recent requests, never cached."""
    rows = await TransactionLogRepository(session).list_for_user(
        principal.user_id, limit=500, exclude_endpoint="/api/logs/user/me"
    )
    response.headers.update(NO_CACHE_HEADERS)
    response.headers["X-Timestamp"] = str(int(time.time() * 1000))
    return rows


@router.get("/user/{user_id}", response_model=list[TransactionLogResponse])
async def user_logs(
    user_id: str,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    return await TransactionLogRepository(session).list_for_user(user_id, limit=200)


@router.get("/summary/{user_id}", response_model=LogSummaryResponse)
async def log_summary(
    user_id: str,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Error count and most frequent error status over recent requests."""
    rows = await TransactionLogRepository(session).list_for_user(user_id, limit=500)
    return LogSummaryResponse(summary=summarize_errors(rows))
