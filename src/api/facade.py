# src/api/facade.py — v3
"""Public API facade — single entry point for transaction enrichment.

Usage:
    from txflow.api.facade import enrich_transaction
    result = await enrich_transaction(raw_data)
"""

from __future__ import annotations

import logging
from typing import Any

from txflow.api.models import EnrichmentResult
from txflow.cache.cache_factory import create_tool_cache
from txflow.cache.tool_cache import ToolCache
from txflow.config.settings import Settings
from txflow.pipeline.baggage import Baggage, BaggageKeys
from txflow.pipeline.context_collector import ContextCollector
from txflow.pipeline.errors import ExecutionError
from txflow.pipeline.plugin_kit.base_tool import ToolConfig
from txflow.pipeline.progress import ProgressSink, ProgressTracker
from txflow.pipeline.run_context import RunContext
from txflow.pipeline.tool_pipeline import ToolPipeline
from txflow.tools.price_provider import PriceProvider
from txflow.tools.token_prices import ERC20PriceLookup
from txflow.tools.token_transfers import TokenTransferExtractor
from txflow.tools.transaction_context import TransactionContextProvider

logger = logging.getLogger(__name__)


def build_default_pipeline(
    settings: Settings | None = None,
    cache: ToolCache | None = None,
    price_provider: PriceProvider | None = None,
    progress: ProgressTracker | None = None,
) -> ToolPipeline:
    """Wire the bundled tools into a pipeline."""
    settings = settings or Settings()
    config = ToolConfig(verbose=settings.verbose, cache=cache)

    pipeline = ToolPipeline(progress=progress)
    pipeline.register_all(
        [
            TransactionContextProvider(config),
            TokenTransferExtractor(config),
            ERC20PriceLookup(config, provider=price_provider),
        ]
    )
    return pipeline


async def enrich_transaction(
    raw_data: dict[str, Any],
    settings: Settings | None = None,
    cache: ToolCache | None = None,
    price_provider: PriceProvider | None = None,
    progress_sink: ProgressSink | None = None,
    run_context: RunContext | None = None,
) -> EnrichmentResult:
    """Enrich one raw transaction and return the combined results.

    Args:
        raw_data: Raw RPC data (tx_hash, network_id, receipt, logs, ...).
        settings: Global settings. Loaded from .env if None.
        cache: Cache façade. Built from settings if None.
        price_provider: Market-data collaborator for price lookups.
        progress_sink: Callable receiving ProgressEvents.
        run_context: Cancellation / identity for the run.

    Returns:
        EnrichmentResult with baggage snapshot, prompt and RAG context.

    Raises:
        ExecutionError: If the run fails; the error names the tool.
    """
    settings = settings or Settings()
    owned_cache = None
    if cache is None:
        cache = owned_cache = create_tool_cache(settings)

    try:
        return await _run_enrichment(
            raw_data, settings, cache, price_provider, progress_sink, run_context
        )
    finally:
        if owned_cache is not None:
            await owned_cache.store.close()


async def _run_enrichment(
    raw_data: dict[str, Any],
    settings: Settings,
    cache: ToolCache | None,
    price_provider: PriceProvider | None,
    progress_sink: ProgressSink | None,
    run_context: RunContext | None,
) -> EnrichmentResult:
    tx_hash = str(raw_data.get("tx_hash", ""))
    network_id = int(raw_data.get("network_id") or 0)
    ctx = run_context or RunContext(tx_hash=tx_hash, network_id=network_id)
    if not ctx.tx_hash:
        ctx.tx_hash = tx_hash
    if not ctx.network_id:
        ctx.network_id = network_id

    progress = ProgressTracker(progress_sink) if settings.progress_enabled else None
    pipeline = build_default_pipeline(settings, cache, price_provider, progress)

    logger.info("Enriching transaction %s on network %d", tx_hash or "<unknown>", network_id)
    baggage = Baggage({BaggageKeys.RAW_DATA: raw_data})
    try:
        run = await pipeline.execute(ctx, baggage)
    except ExecutionError as exc:
        if progress is not None:
            progress.send_error(exc)
            progress.close()
        raise

    collector = ContextCollector(pipeline.tools.values())
    result = EnrichmentResult(
        run_id=ctx.run_id,
        tx_hash=tx_hash,
        network_id=network_id,
        execution_order=pipeline.get_execution_order(),
        baggage=baggage.snapshot(),
        prompt_context=collector.collect_prompt_context(ctx, baggage),
        rag_context=collector.collect_rag_context(ctx, baggage),
        run=run,
    )
    if progress is not None:
        progress.send_complete({"run_id": ctx.run_id, "tools": len(run.steps)})
        progress.close()
    return result
