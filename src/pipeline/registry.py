# src/pipeline/registry.py — v3
"""Tool registry — name-keyed store of pipeline tools.

Keeps tools in registration order, which is the tie-break order used by
the DAG builder.
"""

from __future__ import annotations

import logging

from txflow.pipeline.errors import DuplicateToolError, PipelineError
from txflow.pipeline.plugin_kit.base_tool import BaseTool

logger = logging.getLogger(__name__)


class RegistryError(PipelineError):
    """Raised when a tool lookup fails."""


class ToolRegistry:
    """Registry of the tools of one pipeline."""

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def tools(self) -> dict[str, BaseTool]:
        """Return mapping of tool_name -> tool, in registration order."""
        return dict(self._tools)

    @property
    def tool_names(self) -> list[str]:
        """Return tool names in registration order."""
        return list(self._tools)

    def add(self, tool: BaseTool) -> None:
        """Add a tool.

        Raises:
            DuplicateToolError: If a tool with the same name exists.
        """
        if tool.name in self._tools:
            raise DuplicateToolError(tool.name)
        self._tools[tool.name] = tool
        logger.debug("Registered tool: %s", tool.name)

    def remove(self, name: str) -> None:
        """Remove a tool. Unknown names are ignored."""
        self._tools.pop(name, None)

    def get(self, name: str) -> BaseTool | None:
        """Get tool by name, or None if not registered."""
        return self._tools.get(name)

    def get_or_raise(self, name: str) -> BaseTool:
        """Get tool by name, raise if not found."""
        tool = self._tools.get(name)
        if tool is None:
            raise RegistryError(f"Tool '{name}' not found in registry")
        return tool

    def validate_dependencies(self) -> list[str]:
        """Validate that all tool dependencies are satisfiable.

        Returns:
            List of error messages (empty if valid).
        """
        errors: list[str] = []
        for name, tool in self._tools.items():
            for dep in tool.dependencies:
                if dep not in self._tools:
                    errors.append(
                        f"Tool '{name}' depends on '{dep}' which is not registered"
                    )
        return errors

    def get_dependency_map(self) -> dict[str, list[str]]:
        """Return tool_name -> list of dependency names."""
        return {name: list(tool.dependencies) for name, tool in self._tools.items()}

