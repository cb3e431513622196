# tests/unit/pipeline/test_run_context.py — v1
"""Tests for pipeline/run_context.py."""

from __future__ import annotations

import pytest

from txflow.pipeline.run_context import RunCancelledError, RunContext


class TestRunContext:
    def test_defaults(self):
        ctx = RunContext()
        assert len(ctx.run_id) == 12
        assert not ctx.done
        assert ctx.reason is None
        assert ctx.remaining_s is None
        ctx.raise_if_cancelled()

    def test_unique_run_ids(self):
        assert RunContext().run_id != RunContext().run_id

    def test_cancel(self):
        ctx = RunContext(run_id="r1")
        ctx.cancel()
        assert ctx.cancelled
        assert ctx.done
        assert ctx.reason == "cancelled"
        with pytest.raises(RunCancelledError, match="r1 cancelled"):
            ctx.raise_if_cancelled()

    def test_zero_timeout_is_expired(self):
        ctx = RunContext(timeout_s=0.0)
        assert ctx.expired
        assert ctx.reason == "deadline exceeded"
        assert ctx.remaining_s == 0.0

    def test_generous_timeout(self):
        ctx = RunContext(timeout_s=3600)
        assert not ctx.expired
        assert 0 < ctx.remaining_s <= 3600
