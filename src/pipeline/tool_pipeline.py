# src/pipeline/tool_pipeline.py — v2
"""Tool pipeline — register tools and run them in dependency order.

Registration validates eagerly: every register() rebuilds the DAG from
the full tool set, and a registration that would leave the set invalid
(duplicate name, dangling dependency, cycle) is rolled back.

Execution walks the computed order once, strictly sequentially, passing
the same RunContext and Baggage into every tool. The first failure stops
the run and is re-raised as ToolExecutionError; writes made by earlier
tools stay in the baggage.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from txflow.logging.context import set_run_context, tool_context
from txflow.pipeline.baggage import Baggage, BaggageKeys
from txflow.pipeline.dag_builder import ExecutionPlan, build_dag
from txflow.pipeline.errors import (
    ConstructionError,
    EmptyPipelineError,
    PipelineCancelledError,
    ToolExecutionError,
)
from txflow.pipeline.plugin_kit.base_tool import BaseTool
from txflow.pipeline.plugin_kit.models import RunResult, RunStatus, StepRecord
from txflow.pipeline.progress import ComponentStatus, ProgressTracker
from txflow.pipeline.registry import ToolRegistry
from txflow.pipeline.run_context import RunContext

logger = logging.getLogger(__name__)


def _elapsed_ms(start_ns: int) -> int:
    return (time.monotonic_ns() - start_ns) // 1_000_000


class ToolPipeline:
    """Execute a set of tools against one shared Baggage.

    Args:
        progress: Optional tracker notified of per-tool phase changes.
    """

    def __init__(self, progress: ProgressTracker | None = None) -> None:
        self._registry = ToolRegistry()
        self._plan = ExecutionPlan()
        self._progress = progress
        self._status = RunStatus.NOT_STARTED
        self._last_run: RunResult | None = None

    # --- Registration ---

    def register(self, tool: BaseTool) -> None:
        """Add a tool and recompute the execution order.

        The tool's dependencies must already be registered; a rejected
        tool is not kept. To add tools before their dependencies, pass
        them together to register_all().

        Raises:
            DuplicateToolError: If the name is already registered.
            MissingDependencyError: If a dependency is not registered.
            CycleError: If the tool closes a dependency cycle.
        """
        self.register_all([tool])

    def register_all(self, tools: Iterable[BaseTool]) -> None:
        """Add several tools as one registration.

        The batch may be given in any order; dependencies only need to be
        satisfied once the whole batch is added. On error, none of the
        batch is kept.
        """
        batch = list(tools)
        added: list[str] = []
        try:
            for tool in batch:
                self._registry.add(tool)
                added.append(tool.name)
            self._plan = build_dag(self._registry.get_dependency_map())
        except ConstructionError as exc:
            for name in added:
                self._registry.remove(name)
            logger.warning("Rejected registration of %s: %s", [t.name for t in batch], exc)
            raise

        logger.debug(
            "Registered %s; execution order is now %s",
            added,
            self._plan.order,
        )

    # --- Introspection ---

    @property
    def status(self) -> RunStatus:
        return self._status

    @property
    def last_run(self) -> RunResult | None:
        return self._last_run

    @property
    def progress(self) -> ProgressTracker | None:
        return self._progress

    @property
    def tools(self) -> dict[str, BaseTool]:
        """Registered tools keyed by name, in execution order."""
        registered = self._registry.tools
        return {name: registered[name] for name in self._plan.order}

    def get_execution_order(self) -> list[str]:
        return list(self._plan.order)

    def has_tool(self, name: str) -> bool:
        return name in self._registry

    def get_tool(self, name: str) -> BaseTool | None:
        return self._registry.get(name)

    def get_tool_count(self) -> int:
        return len(self._registry)

    def validate_all_dependencies(self) -> None:
        """Raise ConstructionError if any dependency is unregistered."""
        errors = self._registry.validate_dependencies()
        if errors:
            raise ConstructionError("; ".join(errors))

    def describe_order(self) -> list[str]:
        """Return one human-readable line per tool in execution order."""
        lines: list[str] = []
        for i, name in enumerate(self._plan.order, start=1):
            deps = self._plan.dependencies.get(name, [])
            if deps:
                lines.append(f"{i}. {name} (depends on: {', '.join(deps)})")
            else:
                lines.append(f"{i}. {name} (no dependencies)")
        return lines

    # --- Execution ---

    async def execute(
        self,
        ctx: RunContext,
        baggage: Baggage | dict[str, Any] | None = None,
    ) -> RunResult:
        """Run every tool once in execution order.

        Args:
            ctx: Run context threaded through to every tool.
            baggage: Initial shared state. A plain dict is wrapped by
                reference, so tool writes land in it even when the run fails.

        Returns:
            RunResult with per-tool timings.

        Raises:
            EmptyPipelineError: If no tool is registered.
            PipelineCancelledError: If ctx is cancelled or expired between tools.
            ToolExecutionError: If a tool's process() raises.
        """
        if not self._plan.order:
            raise EmptyPipelineError()

        if not isinstance(baggage, Baggage):
            baggage = Baggage(baggage)
        if self._progress is not None:
            baggage[BaggageKeys.PROGRESS_TRACKER] = self._progress

        set_run_context(ctx.run_id, ctx.tx_hash)
        order = list(self._plan.order)
        result = RunResult(run_id=ctx.run_id, status=RunStatus.RUNNING, execution_order=order)
        self._last_run = result
        self._status = RunStatus.RUNNING

        logger.info("Starting pipeline run %s with %d tools", ctx.run_id, len(order))
        for line in self.describe_order():
            logger.info("  %s", line)

        start_ns = time.monotonic_ns()
        try:
            for index, name in enumerate(order, start=1):
                tool = self._registry.get_or_raise(name)
                if ctx.done:
                    raise PipelineCancelledError(name, ctx.reason or "cancelled")
                await self._run_tool(tool, index, len(order), ctx, baggage, result)
        except BaseException as exc:
            result.status = RunStatus.FAILED
            result.duration_ms = _elapsed_ms(start_ns)
            self._status = RunStatus.FAILED
            if isinstance(exc, (ToolExecutionError, PipelineCancelledError)):
                result.failed_tool = exc.tool_name
            logger.error(
                "Pipeline run %s failed after %dms: %s", ctx.run_id, result.duration_ms, exc
            )
            raise

        result.status = RunStatus.COMPLETED
        result.duration_ms = _elapsed_ms(start_ns)
        self._status = RunStatus.COMPLETED
        logger.info(
            "Pipeline run %s completed: %d tools, %d baggage keys, %dms",
            ctx.run_id,
            len(order),
            len(baggage),
            result.duration_ms,
        )
        return result

    async def _run_tool(
        self,
        tool: BaseTool,
        index: int,
        total: int,
        ctx: RunContext,
        baggage: Baggage,
        result: RunResult,
    ) -> None:
        step = StepRecord(name=tool.name, started_at=datetime.now(timezone.utc))
        result.steps.append(step)
        self._notify(tool, ComponentStatus.INITIATED, "Preparing to start...")
        self._notify(tool, ComponentStatus.RUNNING, tool.description)

        logger.debug("[%d/%d] Running tool '%s': %s", index, total, tool.name, tool.description)
        step_start = time.monotonic_ns()
        try:
            with tool_context(tool.name), baggage.writing_as(tool.name):
                await tool.process(ctx, baggage)
        except Exception as exc:
            step.duration_ms = _elapsed_ms(step_start)
            step.status = RunStatus.FAILED
            step.error = str(exc)
            self._notify(tool, ComponentStatus.ERROR, f"Failed: {exc}")
            logger.error(
                "[%d/%d] Tool '%s' failed after %dms: %s",
                index,
                total,
                tool.name,
                step.duration_ms,
                exc,
                extra={"duration_ms": step.duration_ms, "tool_status": "failed"},
            )
            raise ToolExecutionError(tool.name, exc) from exc
        except BaseException:
            step.duration_ms = _elapsed_ms(step_start)
            step.status = RunStatus.FAILED
            step.error = "cancelled"
            self._notify(tool, ComponentStatus.ERROR, "Cancelled")
            raise

        step.duration_ms = _elapsed_ms(step_start)
        step.status = RunStatus.COMPLETED
        self._notify(tool, ComponentStatus.FINISHED, f"Completed in {step.duration_ms}ms")
        logger.info(
            "[%d/%d] Tool '%s' completed in %dms",
            index,
            total,
            tool.name,
            step.duration_ms,
            extra={"duration_ms": step.duration_ms, "tool_status": "completed"},
        )

    def _notify(self, tool: BaseTool, status: ComponentStatus, description: str) -> None:
        if self._progress is None:
            return
        try:
            self._progress.update_component(
                tool.name, tool.progress_group, tool.progress_title, status, description
            )
        except Exception as exc:
            logger.warning("Progress update for '%s' failed: %s", tool.name, exc)
