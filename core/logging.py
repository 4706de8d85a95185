# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Core - Structured logging with event context
# PURPOSE: Consistent, queryable logging for every replication step
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Provides structured logging for the blob replicator. The Functions host
forwards records to Application Insights; JSON output is for local runs
and log aggregation.

Features:
- Contextual fields (event_id, container, blob_name, event_type)
- JSON or human-readable output
- Named checkpoints for replication milestones

Usage:
    from core.logging import log_context, log_checkpoint

    with log_context(event_id="evt-1", container="demo", blob_name="a.txt"):
        logger.info("Copying blob")
        log_checkpoint("copy_started", {"source": url})
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Union


@dataclass
class LogContext:
    """
    Context for structured logging.

    One stack per asyncio task, so concurrent invocations in the same
    worker process do not see each other's fields.
    """
    event_id: Optional[str] = None
    event_type: Optional[str] = None
    container: Optional[str] = None
    blob_name: Optional[str] = None
    invocation_id: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict, excluding None values."""
        result = {}
        for key, value in asdict(self).items():
            if value is not None and key != "extra":
                result[key] = value
        if self.extra:
            result.update(self.extra)
        return result


_context_stack: ContextVar[Tuple[LogContext, ...]] = ContextVar(
    "replication_log_context", default=()
)


def get_current_context() -> LogContext:
    """Get current logging context."""
    stack = _context_stack.get()
    if stack:
        return stack[-1]
    return LogContext()


@contextmanager
def log_context(**kwargs):
    """
    Context manager for adding logging context.

    Args:
        **kwargs: Context fields to add

    Example:
        with log_context(event_id="evt-1", operation="copy"):
            logger.info("Polling copy state")
    """
    parent = get_current_context()
    new_context = LogContext(
        event_id=kwargs.get("event_id", parent.event_id),
        event_type=kwargs.get("event_type", parent.event_type),
        container=kwargs.get("container", parent.container),
        blob_name=kwargs.get("blob_name", parent.blob_name),
        invocation_id=kwargs.get("invocation_id", parent.invocation_id),
        operation=kwargs.get("operation", parent.operation),
        extra={**parent.extra, **kwargs.get("extra", {})},
    )

    token = _context_stack.set(_context_stack.get() + (new_context,))
    try:
        yield new_context
    finally:
        _context_stack.reset(token)


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON for easy parsing by log aggregators.
    """

    def __init__(self, include_context: bool = True, include_source: bool = True):
        super().__init__()
        self.include_context = include_context
        self.include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_context:
            context_dict = get_current_context().to_dict()
            if context_dict:
                log_data["context"] = context_dict

        if getattr(record, "checkpoint", None):
            log_data["data"] = record.checkpoint

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.include_source:
            log_data["source"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """
    Human-readable formatter for development.

    Includes context fields inline for easy reading.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for human reading."""
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)

        context = get_current_context()
        context_parts = []
        if context.event_id:
            context_parts.append(f"event={context.event_id}")
        if context.container and context.blob_name:
            context_parts.append(f"blob={context.container}/{context.blob_name}")
        if context.operation:
            context_parts.append(f"op={context.operation}")

        context_str = f" [{', '.join(context_parts)}]" if context_parts else ""

        result = f"{timestamp} {level} {record.name}{context_str}: {record.getMessage()}"

        checkpoint = getattr(record, "checkpoint", None)
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
    Configure logging for local runs.

    On the Functions host the worker installs its own handler; this only
    adjusts the root level there.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: Use JSON format (also enabled by LOG_FORMAT=json)
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    # Host-managed handlers stay in place
    if os.getenv("FUNCTIONS_WORKER_RUNTIME"):
        return

    if json_output or os.getenv("LOG_FORMAT", "").lower() == "json":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = HumanFormatter()

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root.addHandler(handler)


# ============================================================================
# CHECKPOINT LOGGING
# ============================================================================

def log_checkpoint(
    name: str,
    data: Optional[Dict[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a named checkpoint.

    Checkpoints mark replication milestones (copy_started, copy_completed,
    replica_deleted, ...) so a failed invocation can be traced to the last
    step that worked.

    Args:
        name: Checkpoint name
        data: Optional checkpoint data
        logger: Optional specific logger to use
    """
    if logger is None:
        logger = logging.getLogger("checkpoint")

    checkpoint_data: Dict[str, Any] = {"checkpoint": name}
    checkpoint_data.update(get_current_context().to_dict())
    if data:
        checkpoint_data["data"] = data

    logger.info(f"CHECKPOINT: {name}", extra={"checkpoint": checkpoint_data})


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "configure_logging",
    "log_context",
    "get_current_context",
    "log_checkpoint",
]
