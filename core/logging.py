# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Log formatting with per-task context
# PURPOSE: Tag cycle and deployment log lines, human or JSON output
# CREATED: 14 OCT 2026
# ============================================================================
"""
Structured Logging

Modules log through plain ``logging.getLogger(__name__)``. What this
module adds:

- ``log_context``: tags every line emitted inside the block with the
  health check cycle, target or deployment it belongs to. The tags live
  in a context variable, so concurrent cycles and completion tasks do
  not see each other's tags.
- Two formatters picked by ``configure_logging``: one line per record for
  development, JSON (LOG_FORMAT=json) for log aggregation.
- ``log_checkpoint``: named lifecycle markers such as "cycle_completed".

Usage:
    with log_context(cycle_id="c-42", component="monitor"):
        logger.info("Probing 5 targets")
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class LogContext:
    """Tags attached to log lines of the current asyncio task."""
    cycle_id: Optional[str] = None
    target: Optional[str] = None
    deployment_id: Optional[int] = None
    component: Optional[str] = None

    def tags(self) -> Dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


_current: ContextVar[LogContext] = ContextVar("fleetwatch_log_context", default=LogContext())


def get_current_context() -> LogContext:
    return _current.get()


@contextmanager
def log_context(**tags):
    """
    Add tags for the duration of the block, on top of any outer tags.

    Unknown tag names raise TypeError.
    """
    context = replace(_current.get(), **tags)
    token = _current.set(context)
    try:
        yield context
    finally:
        _current.reset(token)


def _checkpoint_data(record: logging.LogRecord) -> Optional[Dict[str, Any]]:
    return getattr(record, "checkpoint", None)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        tags = get_current_context().tags()
        if tags:
            log_data["context"] = tags

        checkpoint = _checkpoint_data(record)
        if checkpoint:
            log_data["data"] = checkpoint

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """
    ``2026-10-16 09:00:00 INFO     orchestrator.cycle [cycle=ab12cd34]: message``
    """

    _LABELS = (
        ("cycle_id", "cycle"),
        ("target", "target"),
        ("deployment_id", "deployment"),
    )

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)

        tags = get_current_context().tags()
        parts = [f"{label}={tags[key]}" for key, label in self._LABELS if key in tags]
        context_str = f" [{', '.join(parts)}]" if parts else ""

        result = f"{timestamp} {level} {record.name}{context_str}: {record.getMessage()}"

        checkpoint = _checkpoint_data(record)
        if checkpoint:
            result += f" {checkpoint}"

        if record.exc_info:
            result += f"\n{self.formatException(record.exc_info)}"

        return result


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: Use JSON format; LOG_FORMAT=json also enables it
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_output or os.getenv("LOG_FORMAT", "").lower() == "json":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = HumanFormatter()

    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root.addHandler(handler)

    # httpx logs every request at INFO, one line per target per cycle
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """Log a named lifecycle marker, e.g. "deployment_completed"."""
    if logger is None:
        logger = logging.getLogger("checkpoint")

    checkpoint: Dict[str, Any] = {"checkpoint": name}
    if data:
        checkpoint["data"] = data

    logger.info(f"CHECKPOINT: {name}", extra={"checkpoint": checkpoint})


__all__ = [
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
