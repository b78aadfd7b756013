"""Best-effort persistence of audit rows."""

import asyncio
from dataclasses import asdict, dataclass
from typing import Optional

from core.database import Database
from core.logging import LoggerMixin
from domain.audit.models import TransactionLog


@dataclass(frozen=True)
class AuditEntry:
    """Values for one ``transaction_logs`` row."""

    user_id: Optional[str]
    email: Optional[str]
    endpoint: str
    http_method: str
    status_code: int
    error_message: Optional[str]


def build_audit_entry(
    method: str,
    path: str,
    status_code: int,
    duration_ms: int,
    user_id: Optional[str] = None,
    email: Optional[str] = None,
) -> AuditEntry:
    """Describe a finished request; failures (status >= 400) get a message."""
    error_message = None
    if status_code >= 400:
        error_message = f"{method} {path} failed in {duration_ms}ms"
    return AuditEntry(
        user_id=user_id,
        email=email,
        endpoint=path,
        http_method=method,
        status_code=status_code,
        error_message=error_message,
    )


class AuditLogWriter(LoggerMixin):
    """Writes audit rows without ever raising into the request path.

    Rows written with :meth:`schedule` run as background tasks on the event
    loop; :meth:`drain` waits for them at shutdown.
    """

    def __init__(self, database: Database):
        self.database = database
        self._pending: set[asyncio.Task] = set()

    async def record(self, entry: AuditEntry) -> bool:
        """Insert ``entry``. Returns False when the write failed."""
        try:
            async with self.database.session() as session:
                session.add(TransactionLog(**asdict(entry)))
        except Exception as e:
            self.log_warning(
                "audit_log_write_failed",
                error=str(e),
                endpoint=entry.endpoint,
                method=entry.http_method,
                status_code=entry.status_code,
            )
            return False
        return True

    def schedule(self, entry: AuditEntry) -> None:
        """Record ``entry`` without waiting for it."""
        task = asyncio.get_running_loop().create_task(self.record(entry))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for scheduled writes to finish."""
        if self._pending:
            self.log_info("Draining audit log writes", pending=len(self._pending))
            await asyncio.gather(*self._pending, return_exceptions=True)
