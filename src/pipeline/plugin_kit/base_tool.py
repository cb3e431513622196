# src/pipeline/plugin_kit/base_tool.py — v1
"""Standard tool interface for pipeline plugins.

A tool declares its identity and dependencies, does its work in
process(), and renders its stored output for downstream consumers
through two read-only export hooks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

from txflow.pipeline.plugin_kit.models import RagContext
from txflow.pipeline.progress import ComponentGroup

if TYPE_CHECKING:
    from txflow.cache.tool_cache import ToolCache
    from txflow.pipeline.baggage import Baggage
    from txflow.pipeline.run_context import RunContext


@dataclass(frozen=True)
class ToolConfig:
    """Construction-time configuration shared by all tools.

    Attributes:
        verbose: Log intermediate results at INFO instead of DEBUG.
        cache: Cache façade, or None to always call upstream services.
    """

    verbose: bool = False
    cache: ToolCache | None = None


class BaseTool(ABC):
    """Standard interface for all pipeline tools."""

    def __init__(self, config: ToolConfig | None = None) -> None:
        self.config = config or ToolConfig()

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool identifier, used as graph node key."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this tool does."""

    @property
    def dependencies(self) -> list[str]:
        """Names of tools that must complete before this one."""
        return []

    @property
    def progress_group(self) -> ComponentGroup:
        """Phase this tool is reported under by the progress tracker."""
        return ComponentGroup.ANALYSIS

    @property
    def progress_title(self) -> str:
        """User-facing title for progress reporting."""
        return self.name.replace("_", " ").title()

    @property
    def cache(self) -> ToolCache | None:
        return self.config.cache

    @abstractmethod
    async def process(self, ctx: RunContext, baggage: Baggage) -> None:
        """Do the tool's work and write its outputs into the baggage.

        Called at most once per run. Any exception is fatal to the run.
        """

    def get_prompt_context(self, ctx: RunContext, baggage: Baggage) -> str:
        """Render this tool's output for an LLM prompt.

        Must only read the baggage and return "" when its data is absent.
        """
        return ""

    def get_rag_context(self, ctx: RunContext, baggage: Baggage) -> RagContext:
        """Render this tool's output as retrieval fragments.

        Must only read the baggage and return an empty context when its
        data is absent.
        """
        return RagContext()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
