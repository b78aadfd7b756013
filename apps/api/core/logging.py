"""Structured logging configuration."""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.typing import EventDict, FilteringBoundLogger, WrappedLogger

from config import Settings, get_settings

# Event keys whose values must never reach a log sink
MASKED_KEYS = frozenset(
    {"password", "password_hash", "new_password", "current_password", "token", "otp", "secret"}
)
MASK = "***"


def mask_credentials(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace credential values bound to an event."""
    for key in MASKED_KEYS.intersection(event_dict):
        event_dict[key] = MASK
    return event_dict


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure structlog and the stdlib root logger from ``settings``."""
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        mask_credentials,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    # Access lines are already covered by LoggingMiddleware; SQL echo is opt-in
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: Optional[str] = None) -> FilteringBoundLogger:
    """Get a structured logger, bound to ``name`` when given."""
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger


class LoggerMixin:
    """Gives a class a ``logger`` bound to its class name."""

    @property
    def logger(self) -> FilteringBoundLogger:
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger

    def log_info(self, message: str, **kwargs: Any) -> None:
        self.logger.info(message, **kwargs)

    def log_warning(self, message: str, **kwargs: Any) -> None:
        self.logger.warning(message, **kwargs)
