# src/pipeline/context_collector.py — v1
"""Collect prompt text and retrieval fragments from tool export hooks.

Runs after the main pass. Hooks are read-only and best-effort: a hook
that raises breaks the tool contract, is logged, and contributes nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from txflow.pipeline.baggage import Baggage
from txflow.pipeline.plugin_kit.base_tool import BaseTool
from txflow.pipeline.plugin_kit.models import RagContext
from txflow.pipeline.run_context import RunContext

logger = logging.getLogger(__name__)

PROMPT_SECTION_SEPARATOR = "\n\n"


class ContextCollector:
    """Aggregate export hooks of a fixed, ordered list of tools."""

    def __init__(self, tools: Iterable[BaseTool] = ()) -> None:
        self._tools: list[BaseTool] = list(tools)

    @property
    def tools(self) -> list[BaseTool]:
        return list(self._tools)

    def add_tool(self, tool: BaseTool) -> None:
        self._tools.append(tool)

    def prompt_sections(self, ctx: RunContext, baggage: Baggage) -> list[str]:
        """Return the non-empty prompt contexts, in tool order."""
        sections: list[str] = []
        for tool in self._tools:
            try:
                text = tool.get_prompt_context(ctx, baggage)
            except Exception as exc:
                logger.warning("Prompt context hook of '%s' failed: %s", tool.name, exc)
                continue
            if text and text.strip():
                sections.append(text.strip())
        return sections

    def collect_prompt_context(self, ctx: RunContext, baggage: Baggage) -> str:
        return PROMPT_SECTION_SEPARATOR.join(self.prompt_sections(ctx, baggage))

    def collect_rag_context(self, ctx: RunContext, baggage: Baggage) -> RagContext:
        merged = RagContext()
        for tool in self._tools:
            try:
                fragment = tool.get_rag_context(ctx, baggage)
            except Exception as exc:
                logger.warning("RAG context hook of '%s' failed: %s", tool.name, exc)
                continue
            if fragment is not None:
                merged.extend(fragment)
        return merged
