"""
Structured logging for the API, the gateway and the CLI.

Loggers accept keyword fields::

    logger.info("Bill closed", session_id=12, grand_total=1284.0)

Fields travel on ``record.fields``. Production renders one JSON object
per line; other environments print a compact coloured line. Records
written during an HTTP request carry its ``X-Request-ID``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from shared.config.settings import settings


class StructuredLogger(logging.Logger):
    """Logger whose methods take arbitrary keyword fields."""

    def _log(self, level, msg, args, exc_info=None, extra=None, stack_info=False, stacklevel=1, **fields):
        extra = dict(extra or {})
        extra["fields"] = fields or None
        super()._log(level, msg, args, exc_info=exc_info, extra=extra, stack_info=stack_info, stacklevel=stacklevel)

    def log_fields(self, level: int, msg: str, **fields: Any) -> None:
        if self.isEnabledFor(level):
            self._log(level, msg, (), **fields)


def _fields_of(record: logging.LogRecord) -> dict | None:
    return getattr(record, "fields", None)


def _request_id_of(record: logging.LogRecord) -> str | None:
    request_id = getattr(record, "request_id", None)
    return request_id if request_id and request_id != "-" else None


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if request_id := _request_id_of(record):
            entry["request_id"] = request_id
        if fields := _fields_of(record):
            entry.update({k: v for k, v in fields.items() if k not in entry})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, color: bool = True):
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:8}"
        if self.color:
            level = f"{self.COLORS.get(record.levelname, '')}{level}{self.RESET}"
        stamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        line = f"{stamp} {level} {record.name}: {record.getMessage()}"
        if request_id := _request_id_of(record):
            line += f" [{request_id[:8]}]"
        if fields := _fields_of(record):
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


logging.setLoggerClass(StructuredLogger)


def setup_logging() -> None:
    """Install one stdout handler on the root logger. Safe to call twice."""
    from shared.infrastructure.correlation import CorrelationIdFilter

    level = logging.DEBUG if settings.debug else logging.INFO
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    if settings.environment == "production":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(ConsoleFormatter(color=sys.stdout.isatty()))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers[:] = [handler]

    for noisy in ("uvicorn.access", "httpx", "httpcore", "multipart"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    return logging.getLogger(name)  # type: ignore[return-value]


def mask_username(username: str | None) -> str | None:
    """Keep the first two characters: cashier01 becomes ca***."""
    if not username:
        return None
    return username[:2] + "***"


api_logger = get_logger("mooprompt_api")
billing_logger = get_logger("mooprompt_api.billing")
kitchen_logger = get_logger("mooprompt_api.kitchen")
ws_gateway_logger = get_logger("ws_gateway")
security_audit_logger = get_logger("security.audit")


def audit_ws_connection(
    event_type: str,
    endpoint: str,
    user_id: int | str | None = None,
    origin: str | None = None,
    reason: str | None = None,
) -> None:
    """CONNECT / DISCONNECT / AUTH_FAILED / REJECTED on the gateway socket."""
    security_audit_logger.info(
        f"ws {event_type.lower()}",
        event_type=event_type,
        endpoint=endpoint,
        user_id=user_id,
        origin=origin,
        reason=reason,
    )


def audit_auth_event(
    event_type: str,
    user_id: int | str | None = None,
    username: str | None = None,
    success: bool = True,
    reason: str | None = None,
    ip_address: str | None = None,
) -> None:
    """Sign-in and sign-out trail. Failures are logged at WARNING."""
    security_audit_logger.log_fields(
        logging.INFO if success else logging.WARNING,
        f"auth {event_type.lower()}",
        event_type=event_type,
        user_id=user_id,
        username=mask_username(username),
        success=success,
        reason=reason,
        ip_address=ip_address,
    )
