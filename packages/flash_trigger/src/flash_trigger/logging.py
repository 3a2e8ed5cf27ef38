from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar, Token
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Generator, Optional, Union

from .config import trigger_settings

if TYPE_CHECKING:
    from .resolver import LogEntry

# Workflow run currently being evaluated, injected into every record
run_id: ContextVar[Optional[str]] = ContextVar("run_id", default=None)

_ENTRY_LEVELS = {
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class TraceFormatter(logging.Formatter):
    """
    Formatter that injects the workflow run id and enforces UTC.
    """

    def __init__(self, fmt: str | None = None, datefmt: str | None = None):
        super().__init__(fmt, datefmt)
        self.converter = time.gmtime

    def formatTime(self, record, datefmt=None):
        """ISO-8601 UTC timestamps with millisecond precision."""
        ct = self.converter(record.created)
        if datefmt:
            return time.strftime(datefmt, ct)
        t = time.strftime("%Y-%m-%d %H:%M:%S", ct)
        return "%s.%03dZ" % (t, record.msecs)

    def format(self, record: logging.LogRecord) -> str:
        rid = run_id.get()
        # Distinct attribute name so extra={} cannot collide with it
        record.trace_str = f"[{rid}] " if rid else ""
        return super().format(record)


def get_logger(name: str) -> logging.Logger:
    """
    Returns a standard logger instance.

    >>> logger = get_logger(__name__)
    """
    return logging.getLogger(name)


def setup_logging(
    level: Union[int, str, None] = None,
    log_file: Optional[Union[str, Path]] = None,
    max_bytes: int = 10_485_760,  # 10MB
    backup_count: int = 10,
    capture_roots: bool = False,
    module_name: str = "flash_trigger",
) -> None:
    """
    Configure logging for the engine.

    Args:
        level: Logging level. Defaults to ``trigger_settings.LOG_LEVEL``.
        log_file: Optional path for a rotating log file.
        capture_roots: If True, configures the root logger instead of the
                       ``flash_trigger`` namespace.
    """
    if level is None:
        level = trigger_settings.LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    target_logger = (
        logging.getLogger() if capture_roots else logging.getLogger(module_name)
    )

    # Reset handlers so tests can reconfigure
    target_logger.handlers.clear()
    target_logger.setLevel(level)

    log_format = "%(asctime)s %(levelname)-8s %(trace_str)s%(name)s: %(message)s"
    formatter = TraceFormatter(log_format)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    target_logger.addHandler(console)

    if log_file:
        file_path = Path(log_file).resolve()
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                file_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            file_handler.setFormatter(formatter)
            target_logger.addHandler(file_handler)
        except OSError as e:
            # Read-only filesystems keep the console handler only
            sys.stderr.write(f"Failed to setup log file: {e}\n")

    if not capture_roots:
        target_logger.propagate = False


def set_run_id(value: str) -> Token:
    """
    Sets the workflow run id and returns a token for cleanup.

    >>> token = set_run_id("run-42")
    >>> reset_run_id(token)
    """
    return run_id.set(value)


def reset_run_id(token: Token) -> None:
    run_id.reset(token)


@contextmanager
def scoped_run_id(value: str) -> Generator[None, None, None]:
    """
    Context manager for auto-cleaning run ids.

    >>> with scoped_run_id("run-42"):
    ...     pass
    """
    token = set_run_id(value)
    try:
        yield
    finally:
        reset_run_id(token)


def emit_log_entry(entry: LogEntry, logger: logging.Logger | None = None) -> None:
    """
    Write a resolver ``LogEntry`` as a WARNING or ERROR record.

    The resolver only describes the entry; the runtime decides where it goes.
    """
    target = logger or logging.getLogger("flash_trigger.dataflow")
    target.log(
        _ENTRY_LEVELS[entry.level.value],
        entry.message,
        extra={
            "error_kind": entry.error_kind.value,
            "strategy": entry.strategy.value,
        },
    )
