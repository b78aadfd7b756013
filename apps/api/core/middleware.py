"""Custom middleware for the application."""

import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from domain.audit.writer import AuditLogWriter, build_audit_entry


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for structured request logging."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log details."""
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        # Clear and bind context variables
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        logger = structlog.get_logger()
        logger.info("request_started")

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                error=str(e),
                process_time_ms=round((time.time() - start_time) * 1000, 2),
                exc_info=True,
            )
            raise

        process_time = time.time() - start_time
        logger.info(
            "request_completed",
            status_code=response.status_code,
            process_time_ms=round(process_time * 1000, 2),
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(process_time)
        return response


class AuditLogMiddleware:
    """Record one ``transaction_logs`` row per HTTP request.

    The row is written once the downstream app has returned, i.e. after the
    final body chunk went out, so it never delays or alters the response.
    Write failures are logged by :class:`AuditLogWriter` and dropped. Paths
    under ``excluded_prefix`` (the log-reading API) are never recorded.
    """

    def __init__(self, app: ASGIApp, excluded_prefix: str = "/api/logs/"):
        self.app = app
        self.excluded_prefix = excluded_prefix

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["path"].startswith(self.excluded_prefix):
            await self.app(scope, receive, send)
            return

        writer: AuditLogWriter | None = getattr(scope["app"].state, "audit_writer", None)
        if writer is None:
            await self.app(scope, receive, send)
            return

        # Shared with request.state, where the auth dependency puts the caller
        state = scope.setdefault("state", {})
        status_code = 500
        start = time.perf_counter()

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            # The error response is produced further out; don't hold it up.
            writer.schedule(self._entry(scope, state, status_code, start))
            raise

        await writer.record(self._entry(scope, state, status_code, start))

    @staticmethod
    def _entry(scope: Scope, state: dict, status_code: int, start: float):
        duration_ms = int((time.perf_counter() - start) * 1000)
        return build_audit_entry(
            method=scope["method"],
            path=scope["path"],
            status_code=status_code,
            duration_ms=duration_ms,
            user_id=state.get("user_id"),
            email=state.get("user_email"),
        )
