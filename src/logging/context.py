# src/logging/context.py — v2
"""Contextual logging support — attach run_id, tx_hash, tool to log records."""

from __future__ import annotations

import contextvars
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per pipeline run.
_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_tx_hash: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "tx_hash", default=None
)
_tool: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "tool", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    run_id: str | None = None
    tx_hash: str | None = None
    tool: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        run_id=_run_id.get(),
        tx_hash=_tx_hash.get(),
        tool=_tool.get(),
        step=_step.get(),
    )


def set_run_context(run_id: str, tx_hash: str | None = None) -> None:
    """Set run-level context (called once per pipeline run)."""
    _run_id.set(run_id)
    _tx_hash.set(tx_hash or None)


def set_tool_context(tool: str | None, step: str | None = None) -> None:
    """Set tool-level context (called per tool execution)."""
    _tool.set(tool)
    _step.set(step)


@contextmanager
def tool_context(tool: str, step: str | None = None) -> Iterator[None]:
    """Scope tool-level context to a block, restoring the previous values."""
    tool_token = _tool.set(tool)
    step_token = _step.set(step)
    try:
        yield
    finally:
        _step.reset(step_token)
        _tool.reset(tool_token)


def clear_context() -> None:
    """Reset all context variables."""
    _run_id.set(None)
    _tx_hash.set(None)
    _tool.set(None)
    _step.set(None)
