# tests/integration/pipeline/test_int_pipeline.py — v1
"""Integration tests for the pipeline subsystem.

Covers: pipeline/tool_pipeline.py, pipeline/context_collector.py,
tools/*, cache/sqlite_store.py, api/facade.py
No Docker required. Uses a SQLite cache under tmp_path.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"


def _settings(tmp_path):
    from txflow.config.settings import Settings
    return Settings(_env_file=None, cache_backend="sqlite", cache_root=tmp_path)


def _provider():
    from txflow.tools.models import TokenPrice
    provider = AsyncMock()
    provider.get_token_price.return_value = TokenPrice(
        contract=USDC, symbol="USDC", price_usd=0.9998, source="test"
    )
    return provider


@pytest.mark.integration
class TestEndToEnd:

    @pytest.mark.asyncio
    async def test_prices_persist_across_runs(self, tmp_path, sample_raw_data):
        from txflow.api.facade import enrich_transaction
        from txflow.cache.cache_factory import create_tool_cache

        provider = _provider()
        settings = _settings(tmp_path)

        first_cache = create_tool_cache(settings)
        first = await enrich_transaction(
            sample_raw_data, settings=settings, cache=first_cache, price_provider=provider
        )
        await first_cache.store.close()

        # A fresh store on the same file serves the price without the provider.
        second_cache = create_tool_cache(settings)
        second = await enrich_transaction(
            sample_raw_data, settings=settings, cache=second_cache, price_provider=provider
        )
        await second_cache.store.close()

        provider.get_token_price.assert_awaited_once()
        assert first.baggage["token_prices"] == second.baggage["token_prices"]
        assert "- USDC (" in second.prompt_context
        assert (tmp_path / "txflow_cache.db").exists()

    @pytest.mark.asyncio
    async def test_custom_tool_alongside_bundled(self, tmp_path, sample_raw_data):
        from txflow.api.facade import build_default_pipeline
        from txflow.pipeline.baggage import Baggage, BaggageKeys
        from txflow.pipeline.context_collector import ContextCollector
        from txflow.pipeline.plugin_kit.base_tool import BaseTool
        from txflow.pipeline.run_context import RunContext

        class TransferCounter(BaseTool):
            @property
            def name(self):
                return "transfer_counter"

            @property
            def description(self):
                return "Counts transfers per token standard"

            @property
            def dependencies(self):
                return ["token_transfer_extractor"]

            async def process(self, ctx, baggage):
                transfers = baggage.get_as(BaggageKeys.TRANSFERS, list) or []
                counts: dict[str, int] = {}
                for transfer in transfers:
                    counts[transfer.type] = counts.get(transfer.type, 0) + 1
                baggage["transfer_counts"] = counts

            def get_prompt_context(self, ctx, baggage):
                counts = baggage.get_as("transfer_counts", dict)
                if not counts:
                    return ""
                return "### Transfer Counts:\n" + "\n".join(
                    f"- {k}: {v}" for k, v in sorted(counts.items())
                )

        pipeline = build_default_pipeline(_settings(tmp_path))
        pipeline.register(TransferCounter())
        order = pipeline.get_execution_order()
        assert order.index("token_transfer_extractor") < order.index("transfer_counter")

        ctx = RunContext(network_id=1)
        baggage = Baggage({BaggageKeys.RAW_DATA: sample_raw_data})
        result = await pipeline.execute(ctx, baggage)
        assert result.success
        assert baggage["transfer_counts"] == {"ERC20": 1, "ERC721": 1}
        assert baggage.keys_written_by("transfer_counter") == ["transfer_counts"]

        text = ContextCollector(pipeline.tools.values()).collect_prompt_context(ctx, baggage)
        assert text.endswith("### Transfer Counts:\n- ERC20: 1\n- ERC721: 1")

    @pytest.mark.asyncio
    async def test_failure_keeps_upstream_output(self, sample_raw_data, stub_tool):
        from txflow.api.facade import build_default_pipeline
        from txflow.config.settings import Settings
        from txflow.pipeline.baggage import Baggage, BaggageKeys
        from txflow.pipeline.errors import ToolExecutionError
        from txflow.pipeline.plugin_kit.models import RunStatus
        from txflow.pipeline.run_context import RunContext

        pipeline = build_default_pipeline(Settings(_env_file=None))
        pipeline.register(
            stub_tool("explainer", deps=["erc20_price_lookup"], fail=TimeoutError("llm timeout"))
        )
        baggage = Baggage({BaggageKeys.RAW_DATA: sample_raw_data})
        with pytest.raises(ToolExecutionError, match="explainer"):
            await pipeline.execute(RunContext(network_id=1), baggage)

        assert len(baggage[BaggageKeys.TRANSFERS]) == 2
        assert pipeline.status == RunStatus.FAILED
        assert pipeline.last_run.visited[-1] == "explainer"
