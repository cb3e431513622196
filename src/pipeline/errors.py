# src/pipeline/errors.py — v1
"""Error taxonomy for tool registration and pipeline execution.

Construction errors are raised synchronously by ToolPipeline.register()
and leave the pipeline in its last valid state. Execution errors are
raised by ToolPipeline.execute() and always name the offending tool.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for all pipeline errors."""


# === CONSTRUCTION ===


class ConstructionError(PipelineError):
    """Raised when a registration would leave the tool set invalid."""


class DuplicateToolError(ConstructionError):
    """Raised when a tool name is registered twice."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool '{name}' is already registered")


class DAGError(ConstructionError):
    """Raised when DAG construction fails (cycle, missing dep)."""


class MissingDependencyError(DAGError):
    """A declared dependency does not name a registered tool."""

    def __init__(self, tool: str, dependency: str) -> None:
        self.tool = tool
        self.dependency = dependency
        super().__init__(
            f"Tool '{tool}' depends on '{dependency}' which is not registered"
        )


class CycleError(DAGError):
    """The dependency relation contains at least one cycle."""

    def __init__(self, members: list[str]) -> None:
        self.members = members
        super().__init__(f"Cycle detected involving tools: {members}")


# === EXECUTION ===


class ExecutionError(PipelineError):
    """Raised when a pipeline run cannot complete."""


class EmptyPipelineError(ExecutionError):
    """Raised when execute() is called before any tool is registered."""

    def __init__(self) -> None:
        super().__init__("No tools registered or execution order not calculated")


class ToolExecutionError(ExecutionError):
    """A tool's process() failed. The original error is kept as ``cause``."""

    def __init__(self, tool_name: str, cause: BaseException) -> None:
        self.tool_name = tool_name
        self.cause = cause
        super().__init__(f"Tool '{tool_name}' failed: {cause}")


class PipelineCancelledError(ExecutionError):
    """The run context was cancelled or expired before a tool started."""

    def __init__(self, tool_name: str, reason: str = "cancelled") -> None:
        self.tool_name = tool_name
        self.reason = reason
        super().__init__(f"Pipeline {reason} before tool '{tool_name}' could start")
