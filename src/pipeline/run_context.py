# src/pipeline/run_context.py — v1
"""Per-run context: identity, cancellation signal and optional deadline.

The same RunContext is passed to every tool of a run. Tools check it
around their own blocking operations; the pipeline checks it before
starting each tool.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field


class RunCancelledError(Exception):
    """Raised by RunContext.raise_if_cancelled()."""


@dataclass
class RunContext:
    """Cancellation and identity for one pipeline run.

    Args:
        run_id: Identifier used in logs and results.
        tx_hash: Transaction being enriched, when known.
        network_id: Chain id of the transaction, when known.
        timeout_s: Seconds from creation after which the run counts as expired.
    """

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    tx_hash: str = ""
    network_id: int = 0
    timeout_s: float | None = None
    _cancelled: bool = field(default=False, init=False, repr=False)
    _deadline: float | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.timeout_s is not None:
            self._deadline = time.monotonic() + self.timeout_s

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def done(self) -> bool:
        """True once cancelled or past the deadline."""
        return self._cancelled or self.expired

    @property
    def remaining_s(self) -> float | None:
        """Seconds left before the deadline, or None without one."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    @property
    def reason(self) -> str | None:
        if self._cancelled:
            return "cancelled"
        if self.expired:
            return "deadline exceeded"
        return None

    def raise_if_cancelled(self) -> None:
        """Raise RunCancelledError if the run should stop."""
        reason = self.reason
        if reason is not None:
            raise RunCancelledError(f"Run {self.run_id} {reason}")
