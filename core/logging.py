# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Request tracing fields on every log record
# PURPOSE: Tie gateway log lines to the workspace and workflow they concern
# CREATED: 03 MAR 2026
# ============================================================================
"""
Structured Logging

Every record handled by the root handler is stamped with the trace fields
of the call being served:

    workspace_id   workspace named in the request path
    workflow_id    engine workflow id, for single-workflow reads
    operation      submit_workflow, query_workflows, parse_inputs, ...

Trace fields are thread-local. Gateway routes are sync, so FastAPI serves
each request on one threadpool thread. Modules keep using plain
logging.getLogger(__name__); the handler filter adds the fields.

Usage:
    from core.logging import log_checkpoint, log_context

    with log_context(workspace_id=workspace_id, operation="submit_workflow"):
        ...
        log_checkpoint("bundle_assembled", {"has_dependencies": True})

LOG_FORMAT=json selects one JSON object per line; anything else is the
human-readable format.
"""

import json
import logging
import sys
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Mapping, Optional, Union


TRACE_FIELDS = ("workspace_id", "workflow_id", "operation")

_TRACE_LABELS = {"workspace_id": "workspace", "workflow_id": "workflow", "operation": "op"}

_local = threading.local()


def current_trace() -> Dict[str, str]:
    """Trace fields of the current request (empty outside log_context)."""
    return dict(getattr(_local, "trace", {}))


@contextmanager
def log_context(**fields: Any) -> Iterator[Dict[str, str]]:
    """
    Set trace fields for the duration of the block.

    Nested blocks inherit the outer fields and may override them. None
    values leave the inherited field as it was.

    Raises:
        TypeError: a field outside TRACE_FIELDS was given
    """
    unknown = set(fields) - set(TRACE_FIELDS)
    if unknown:
        raise TypeError(f"Unknown trace fields: {sorted(unknown)}")

    merged = current_trace()
    merged.update({key: str(value) for key, value in fields.items() if value is not None})
    outer = getattr(_local, "trace", {})
    _local.trace = merged
    try:
        yield dict(merged)
    finally:
        _local.trace = outer


class TraceFilter(logging.Filter):
    """Copy the current trace fields onto each record as record.trace."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace"):
            record.trace = current_trace()
        return True


def _timestamp(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, trace fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": _timestamp(record).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "trace", None) or {})

        checkpoint = getattr(record, "checkpoint", None)
        if checkpoint is not None:
            entry["checkpoint"] = checkpoint
            entry["data"] = getattr(record, "checkpoint_data", None) or {}

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """Single-line format for local runs: time, level, logger, [trace], message."""

    def format(self, record: logging.LogRecord) -> str:
        trace = getattr(record, "trace", None) or {}
        tags = ", ".join(
            f"{_TRACE_LABELS[key]}={trace[key]}" for key in TRACE_FIELDS if key in trace
        )

        prefix = f"{_timestamp(record):%Y-%m-%d %H:%M:%S} {record.levelname:<8} {record.name}"
        if tags:
            prefix += f" [{tags}]"
        line = f"{prefix}: {record.getMessage()}"
        checkpoint_data = getattr(record, "checkpoint_data", None)
        if checkpoint_data:
            line += f" {checkpoint_data}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(level: Union[str, int] = "INFO", json_output: bool = False) -> None:
    """Replace the root handlers with one stdout handler carrying trace fields."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if json_output else HumanFormatter())
    handler.addFilter(TraceFilter())

    root = logging.getLogger()
    root.setLevel(level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)


# ============================================================================
# CHECKPOINT LOGGING
# ============================================================================

def log_checkpoint(
    name: str,
    data: Optional[Mapping[str, Any]] = None,
    logger: Optional[logging.Logger] = None,
) -> None:
    """
    Log a named pipeline milestone (e.g. "bundle_assembled",
    "submission_forwarded"). The JSON format emits the name and data as
    their own keys so a submission can be followed across lines.
    """
    (logger or logging.getLogger("checkpoint")).info(
        f"CHECKPOINT: {name}",
        extra={"checkpoint": name, "checkpoint_data": dict(data or {})},
    )


__all__ = [
    "TRACE_FIELDS",
    "TraceFilter",
    "StructuredFormatter",
    "HumanFormatter",
    "configure_logging",
    "current_trace",
    "log_context",
    "log_checkpoint",
]
