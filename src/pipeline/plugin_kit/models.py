# src/pipeline/plugin_kit/models.py — v1
"""Tool plugin models: RagContextItem, RagContext, StepRecord, RunResult."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class RagContextItem(BaseModel):
    """A single piece of knowledge for retrieval storage."""

    id: str
    type: str
    title: str
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    keywords: list[str] = Field(default_factory=list)
    relevance: float = Field(default=0.5, ge=0.0, le=1.0)


class RagContext(BaseModel):
    """Set of retrieval fragments contributed by one or more tools."""

    items: list[RagContextItem] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def add_item(self, item: RagContextItem) -> None:
        self.items.append(item)

    def extend(self, other: RagContext) -> None:
        """Append every item of another context."""
        self.items.extend(other.items)

    def by_type(self, item_type: str) -> list[RagContextItem]:
        return [item for item in self.items if item.type == item_type]


class RunStatus(str, Enum):
    """Lifecycle of a single pipeline run."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class StepRecord(BaseModel):
    """Timing and outcome of one tool invocation."""

    name: str
    status: RunStatus = RunStatus.RUNNING
    started_at: datetime
    duration_ms: int = 0
    error: str | None = None


class RunResult(BaseModel):
    """Outcome of a full pipeline run."""

    run_id: str
    status: RunStatus = RunStatus.NOT_STARTED
    execution_order: list[str] = Field(default_factory=list)
    steps: list[StepRecord] = Field(default_factory=list)
    failed_tool: str | None = None
    duration_ms: int = 0

    @property
    def success(self) -> bool:
        return self.status == RunStatus.COMPLETED

    @property
    def visited(self) -> list[str]:
        """Names of tools whose process() was started, in order."""
        return [step.name for step in self.steps]
