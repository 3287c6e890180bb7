"""
Structured logging for the ledger.

Every record is written as one JSON object per line::

    {"ts": "...", "level": "INFO", "logger": "ledger_kernel.services.journal",
     "event": "journal_entry_created", "entry_id": "3", "entry_number": "JE003",
     "line_count": 2, "total_debits": "250.00", ...}

Services log snake_case event names and pass their data through ``extra``.
JournalService binds the entry id and number around the events it emits for
one entry (``bind_entry``), so those two fields appear without each call
repeating them.  When a record carries an exception, the ledger error's
code and structured attributes land under ``error``.
"""

import json
import logging
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, TextIO

__all__ = [
    "LedgerLogFormatter",
    "bind_entry",
    "bound_fields",
    "configure_logging",
    "get_logger",
    "reset_logging",
]

ROOT_LOGGER = "ledger_kernel"

_EMPTY: Mapping[str, str] = MappingProxyType({})
_bound: ContextVar[Mapping[str, str]] = ContextVar("ledger_log_fields", default=_EMPTY)


@contextmanager
def bind_entry(entry_id: int | str, entry_number: str) -> Iterator[None]:
    """Attach a journal entry's id and number to every record logged inside."""
    token = _bound.set(
        MappingProxyType(
            {**_bound.get(), "entry_id": str(entry_id), "entry_number": entry_number}
        )
    )
    try:
        yield
    finally:
        _bound.reset(token)


def bound_fields() -> Mapping[str, str]:
    return _bound.get()


def _to_json(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return dict(value)
    return str(value)


# Attributes every LogRecord has; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _describe_error(exc: BaseException, traceback: str) -> dict[str, Any]:
    error: dict[str, Any] = {"type": type(exc).__name__, "message": str(exc)}
    code = getattr(exc, "code", None)
    if code is not None:
        error["code"] = code
    for name, value in vars(exc).items():
        if not name.startswith("_"):
            error[name] = value
    error["traceback"] = traceback
    return error


class LedgerLogFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
            **_bound.get(),
        }
        line.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and key not in line
        )
        if record.exc_info and record.exc_info[1] is not None:
            line["error"] = _describe_error(
                record.exc_info[1], self.formatException(record.exc_info)
            )
        return json.dumps(line, default=_to_json)


def get_logger(name: str) -> logging.Logger:
    """Logger ``ledger_kernel.<name>``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def _ledger_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if isinstance(h.formatter, LedgerLogFormatter)]


def configure_logging(
    level: int | str = logging.INFO,
    *,
    stream: TextIO | None = None,
    handler: logging.Handler | None = None,
) -> logging.Logger:
    """
    Send ``ledger_kernel`` records to ``handler`` (or a stream) as JSON lines.

    Calling it again once a JSON handler is attached changes nothing.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if _ledger_handlers(root):
        return root

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(LedgerLogFormatter())

    root.setLevel(level)
    root.propagate = False
    root.addHandler(handler)
    return root


def reset_logging() -> None:
    """Detach the JSON handlers; used between tests."""
    root = logging.getLogger(ROOT_LOGGER)
    for handler in _ledger_handlers(root):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
    root.propagate = True
