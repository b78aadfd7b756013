"""Read side of the audit trail."""

from collections import Counter
from typing import Iterable, Optional, Sequence

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import TransactionLog

LOGIN_ENDPOINT = "/api/auth/login"


class TransactionLogRepository:
    """Queries over ``transaction_logs``. Rows are never updated or deleted here."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_for_user(
        self,
        user_id: str,
        limit: int = 200,
        exclude_endpoint: Optional[str] = None,
    ) -> Sequence[TransactionLog]:
        """Get a user's log rows, newest first."""
        query = select(TransactionLog).where(TransactionLog.user_id == user_id)
        if exclude_endpoint:
            query = query.where(TransactionLog.endpoint != exclude_endpoint)
        query = query.order_by(desc(TransactionLog.created_at), desc(TransactionLog.id)).limit(limit)
        result = await self.session.execute(query)
        return result.scalars().all()

    async def login_history(self, user_id: str, limit: int = 50) -> Sequence[TransactionLog]:
        """Get a user's login attempts, newest first."""
        query = (
            select(TransactionLog)
            .where(
                TransactionLog.user_id == user_id,
                TransactionLog.endpoint == LOGIN_ENDPOINT,
            )
            .order_by(desc(TransactionLog.created_at), desc(TransactionLog.id))
            .limit(limit)
        )
        result = await self.session.execute(query)
        return result.scalars().all()


def most_common_status(status_codes: Iterable[int]) -> Optional[int]:
    """Mode of ``status_codes``; ties go to the code seen first."""
    counts = Counter(status_codes)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def summarize_errors(logs: Iterable[TransactionLog]) -> str:
    """One-line error summary for a user's recent requests."""
    errors = [log.status_code for log in logs if log.status_code >= 400]
    mode = most_common_status(errors)
    return (
        f"You had {len(errors)} error(s). "
        f"Most common status: {mode if mode is not None else 'n/a'}."
    )
