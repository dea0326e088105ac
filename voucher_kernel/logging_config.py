"""
Structured JSON logging for the voucher kernel.

Every record under the ``voucher_kernel`` logger is written as one JSON
object per line.  Voucher-scoped fields (correlation, actor, voucher and
document number) travel in context variables so services can bind them
once around an operation instead of repeating them in every ``extra``.

Usage:
    configure_logging(level="INFO")
    logger = get_logger("services.voucher")
    with LogContext.bind(voucher_id=record.id, doc_no=record.doc_no):
        logger.info("voucher_posted", extra={"total_amount": record.total_amount})
"""

__all__ = [
    "CONTEXT_FIELDS",
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterator

_LOGGER_PREFIX = "voucher_kernel"

# Context fields merged into every record, in output order
CONTEXT_FIELDS: tuple[str, ...] = ("correlation_id", "actor_id", "voucher_id", "doc_no")

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"voucher_log_{name}", default=None) for name in CONTEXT_FIELDS
}


def _check_fields(fields: dict[str, Any]) -> None:
    unknown = set(fields) - set(CONTEXT_FIELDS)
    if unknown:
        raise TypeError(f"Unknown log context fields: {sorted(unknown)}")


class LogContext:
    """Context-variable holder for voucher-scoped log fields.

    Values are per thread and per asyncio task.  None means "unset".
    """

    @staticmethod
    def set(**fields: str | None) -> None:
        """Set the given fields; None values leave the current value alone."""
        _check_fields(fields)
        for name, value in fields.items():
            if value is not None:
                _CONTEXT_VARS[name].set(value)

    @staticmethod
    def get_all() -> dict[str, str]:
        return {
            name: value
            for name in CONTEXT_FIELDS
            if (value := _CONTEXT_VARS[name].get()) is not None
        }

    @staticmethod
    def clear() -> None:
        for var in _CONTEXT_VARS.values():
            var.set(None)

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[None]:
        """Set fields for the duration of a block, restoring prior values."""
        _check_fields(fields)
        tokens = [
            (_CONTEXT_VARS[name], _CONTEXT_VARS[name].set(value))
            for name, value in fields.items()
            if value is not None
        ]
        try:
            yield
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# ---------------------------------------------------------------------------
# JSON formatting
# ---------------------------------------------------------------------------

# Attributes every LogRecord carries; anything else came from ``extra``
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _encode(obj: Any) -> Any:
    """JSON fallback for the value types voucher code logs."""
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    # UUIDs and anything else unforeseen
    return str(obj)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    # Public attributes of kernel errors (doc_no, messages, lock date ...)
    fields.update(
        (f"exc_{name}", value)
        for name, value in vars(exc).items()
        if not name.startswith("_") and name != "code"
    )
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record: envelope, context, extras, exception."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_encode, ensure_ascii=False)


def get_logger(name: str) -> logging.Logger:
    """Logger under the voucher_kernel namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

_lock = threading.Lock()
_installed: list[logging.Handler] = []


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> logging.Handler | None:
    """
    Attach a JSON handler to the voucher_kernel logger.

    Idempotent: once configured, later calls change nothing and return
    None until ``reset_logging``.  ``level`` accepts a name ("DEBUG") or
    a number.  Returns the installed handler.
    """
    with _lock:
        if _installed:
            return None
        h = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
        h.setFormatter(StructuredFormatter())
        kernel_logger = logging.getLogger(_LOGGER_PREFIX)
        kernel_logger.setLevel(level.upper() if isinstance(level, str) else level)
        kernel_logger.propagate = False
        kernel_logger.addHandler(h)
        _installed.append(h)
        return h


def reset_logging() -> None:
    """Detach the handler installed by configure_logging. FOR TESTING ONLY."""
    with _lock:
        kernel_logger = logging.getLogger(_LOGGER_PREFIX)
        for h in _installed:
            kernel_logger.removeHandler(h)
        _installed.clear()
        kernel_logger.setLevel(logging.WARNING)
