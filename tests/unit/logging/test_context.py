# tests/unit/logging/test_context.py — v1
"""Tests for logging/context.py."""

from __future__ import annotations

import pytest

from txflow.logging.context import (
    clear_context,
    get_context,
    set_run_context,
    set_tool_context,
    tool_context,
)


@pytest.fixture(autouse=True)
def _clean_context():
    clear_context()
    yield
    clear_context()


class TestLogContext:
    def test_empty_by_default(self):
        assert get_context().as_dict() == {}

    def test_run_context(self):
        set_run_context("run_1", "0xabc")
        assert get_context().as_dict() == {"run_id": "run_1", "tx_hash": "0xabc"}

    def test_empty_tx_hash_omitted(self):
        set_run_context("run_1", "")
        assert "tx_hash" not in get_context().as_dict()

    def test_set_tool_context(self):
        set_tool_context("token_transfer_extractor", "parse")
        ctx = get_context()
        assert ctx.tool == "token_transfer_extractor"
        assert ctx.step == "parse"

    def test_tool_context_restores_previous(self):
        set_tool_context("outer")
        with tool_context("inner", step="s1"):
            assert get_context().tool == "inner"
        assert get_context().tool == "outer"
        assert get_context().step is None

    def test_tool_context_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with tool_context("failing"):
                raise RuntimeError("boom")
        assert get_context().tool is None
