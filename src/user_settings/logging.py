"""
Structured logging for the user settings service

Every log line emitted while serving a request carries the request id and the
caller-supplied actor id. Inside a settings update the owning user id is bound
as well, so the upsert, notify and failure lines of one batch can be joined.
"""

import logging
import secrets
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

import structlog

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
actor_id_ctx: ContextVar[str | None] = ContextVar("actor_id", default=None)
settings_owner_ctx: ContextVar[str | None] = ContextVar("settings_owner", default=None)

# Log field name -> context variable supplying it
CONTEXT_FIELDS: dict[str, ContextVar[str | None]] = {
    "request_id": request_id_ctx,
    "actor_id": actor_id_ctx,
    "user_id": settings_owner_ctx,
}

# Libraries whose INFO output drowns the request log
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")


class RequestContextFilter:
    """Stamp request, actor and settings-owner ids onto each event.

    Fields passed explicitly to the log call win over the context values.
    """

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        _ = logger, method_name
        for field, var in CONTEXT_FIELDS.items():
            value = var.get()
            if value:
                event_dict.setdefault(field, value)
        return event_dict


def configure_logging(debug: bool = False, sql_echo: bool = False) -> None:
    """Configure structlog over the stdlib root logger.

    Args:
        debug: Console renderer at DEBUG level instead of JSON at INFO
        sql_echo: Let SQLAlchemy engine statements through
    """
    log_level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if sql_echo else logging.WARNING)

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        RequestContextFilter(),
        structlog.processors.TimeStamper(fmt="ISO", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """Random 16-character urlsafe id for requests without an ``X-Request-ID``."""
    return secrets.token_urlsafe(12)


def set_request_context(request_id: str | None = None, actor_id: str | None = None) -> str:
    """Bind the request and actor ids; returns the request id in use."""
    request_id = request_id or generate_request_id()
    request_id_ctx.set(request_id)
    actor_id_ctx.set(actor_id)
    return request_id


def clear_request_context() -> None:
    for var in CONTEXT_FIELDS.values():
        var.set(None)


@contextmanager
def settings_owner_context(user_id: str) -> Iterator[None]:
    """Bind ``user_id`` as the owner of the settings being written."""
    token = settings_owner_ctx.set(user_id)
    try:
        yield
    finally:
        settings_owner_ctx.reset(token)


def get_request_id() -> str | None:
    return request_id_ctx.get()


def get_actor_id() -> str | None:
    return actor_id_ctx.get()
