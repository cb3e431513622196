# src/api/models.py — v2
"""Public API models: EnrichmentResult."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from txflow.pipeline.plugin_kit.models import RagContext, RunResult


class EnrichmentResult(BaseModel):
    """Everything one enrichment run produced."""

    model_config = {"arbitrary_types_allowed": True}

    run_id: str
    tx_hash: str = ""
    network_id: int = 0
    execution_order: list[str] = Field(default_factory=list)
    baggage: dict[str, Any] = Field(default_factory=dict)
    prompt_context: str = ""
    rag_context: RagContext = Field(default_factory=RagContext)
    run: RunResult

    def baggage_json(self) -> dict[str, Any]:
        """Baggage with pydantic values dumped to plain JSON types."""
        return {key: _to_jsonable(value) for key, value in self.baggage.items()}


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value
