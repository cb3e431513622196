# src/pipeline/progress.py — v1
"""Progress tracking — coarse per-tool phase updates for an external sink.

The sink is any callable accepting a ProgressEvent (e.g. an
asyncio.Queue's put_nowait feeding an SSE stream). A sink that raises is
logged once and disabled; progress reporting never changes a run's
outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ComponentStatus(str, Enum):
    INITIATED = "initiated"
    RUNNING = "running"
    FINISHED = "finished"
    ERROR = "error"


class ComponentGroup(str, Enum):
    """Processing phase a component is displayed under."""

    DATA = "data"
    DECODING = "decoding"
    ENRICHMENT = "enrichment"
    ANALYSIS = "analysis"
    FINISHING = "finishing"


class ComponentUpdate(BaseModel):
    """Latest known state of one component."""

    id: str
    group: ComponentGroup
    title: str
    status: ComponentStatus
    description: str = ""
    timestamp: datetime
    start_time: datetime
    duration_ms: int = 0
    metadata: dict[str, Any] | None = None


class ProgressEvent(BaseModel):
    """Event delivered to the sink."""

    type: str  # "component_update", "complete", "error"
    component: ComponentUpdate | None = None
    result: Any = None
    error: str | None = None
    timestamp: datetime


ProgressSink = Callable[[ProgressEvent], Any]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ProgressTracker:
    """Track component updates for one run and forward them to a sink."""

    def __init__(self, sink: ProgressSink | None = None) -> None:
        self._sink = sink
        self._components: dict[str, ComponentUpdate] = {}
        self._start_times: dict[str, datetime] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Stop forwarding events. Component state is kept."""
        self._closed = True

    def update_component(
        self,
        component_id: str,
        group: ComponentGroup,
        title: str,
        status: ComponentStatus,
        description: str = "",
        metadata: dict[str, Any] | None = None,
    ) -> ComponentUpdate:
        """Record a component's new status and emit a component_update."""
        now = _now()
        start = self._start_times.get(component_id)
        if start is None:
            self._start_times[component_id] = now
            start = now
            duration_ms = 0
        else:
            duration_ms = int((now - start).total_seconds() * 1000)
            # A started component never reports zero, so UIs stop showing "starting".
            if duration_ms == 0 and status != ComponentStatus.INITIATED:
                duration_ms = 1

        component = ComponentUpdate(
            id=component_id,
            group=group,
            title=title,
            status=status,
            description=description,
            timestamp=now,
            start_time=start,
            duration_ms=duration_ms,
            metadata=metadata,
        )
        self._components[component_id] = component
        self._emit(ProgressEvent(type="component_update", component=component, timestamp=now))
        return component

    def get_component(self, component_id: str) -> ComponentUpdate | None:
        return self._components.get(component_id)

    def get_all_components(self) -> list[ComponentUpdate]:
        return list(self._components.values())

    def send_complete(self, result: Any = None) -> None:
        self._emit(ProgressEvent(type="complete", result=result, timestamp=_now()))

    def send_error(self, error: BaseException | str) -> None:
        self._emit(ProgressEvent(type="error", error=str(error), timestamp=_now()))

    def _emit(self, event: ProgressEvent) -> None:
        if self._closed or self._sink is None:
            return
        try:
            self._sink(event)
        except Exception as exc:
            logger.warning("Progress sink failed, disabling progress updates: %s", exc)
            self._closed = True
