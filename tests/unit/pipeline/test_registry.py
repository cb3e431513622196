# tests/unit/pipeline/test_registry.py — v3
"""Tests for pipeline/registry.py — ToolRegistry."""

from __future__ import annotations

import pytest

from txflow.pipeline.errors import DuplicateToolError
from txflow.pipeline.registry import RegistryError, ToolRegistry


class TestToolRegistry:
    def test_add_and_get(self, stub_tool):
        reg = ToolRegistry()
        tool = stub_tool("fetch")
        reg.add(tool)
        assert "fetch" in reg
        assert reg.get("fetch") is tool
        assert len(reg) == 1

    def test_get_nonexistent_returns_none(self):
        assert ToolRegistry().get("nonexistent") is None

    def test_get_or_raise(self):
        with pytest.raises(RegistryError, match="not found"):
            ToolRegistry().get_or_raise("missing")

    def test_duplicate_rejected(self, stub_tool):
        reg = ToolRegistry()
        first = stub_tool("fetch")
        reg.add(first)
        with pytest.raises(DuplicateToolError, match="already registered"):
            reg.add(stub_tool("fetch"))
        assert reg.get("fetch") is first

    def test_names_keep_registration_order(self, stub_tool):
        reg = ToolRegistry()
        for name in ("price", "decode", "fetch"):
            reg.add(stub_tool(name))
        assert reg.tool_names == ["price", "decode", "fetch"]

    def test_validate_dependencies(self, stub_tool):
        reg = ToolRegistry()
        reg.add(stub_tool("decode", deps=["fetch"]))
        errors = reg.validate_dependencies()
        assert len(errors) == 1
        assert "fetch" in errors[0]
        reg.add(stub_tool("fetch"))
        assert reg.validate_dependencies() == []

    def test_dependency_map_is_a_copy(self, stub_tool):
        reg = ToolRegistry()
        reg.add(stub_tool("decode", deps=["fetch"]))
        dep_map = reg.get_dependency_map()
        dep_map["decode"].append("other")
        assert reg.get_dependency_map() == {"decode": ["fetch"]}

    def test_remove_unknown_is_noop(self):
        reg = ToolRegistry()
        reg.remove("ghost")
        assert len(reg) == 0

