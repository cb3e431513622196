# src/tools/token_prices.py — v2
"""ERC20 price lookup — cached USD prices for transferred tokens."""

from __future__ import annotations

import logging

from txflow.cache.keys import PRICE_TTL, token_price_key
from txflow.pipeline.baggage import Baggage, BaggageKeys
from txflow.pipeline.plugin_kit.base_tool import BaseTool, ToolConfig
from txflow.pipeline.plugin_kit.models import RagContext, RagContextItem
from txflow.pipeline.progress import ComponentGroup
from txflow.pipeline.run_context import RunContext
from txflow.tools.models import TokenPrice, TokenTransfer
from txflow.tools.price_provider import PriceProvider

logger = logging.getLogger(__name__)


class ERC20PriceLookup(BaseTool):
    """Look up USD prices of every ERC20 contract seen in the transfers.

    Args:
        config: Tool configuration; its cache is consulted before the provider.
        provider: Market-data collaborator. Without one, only cached prices
            are returned.
    """

    def __init__(
        self,
        config: ToolConfig | None = None,
        provider: PriceProvider | None = None,
    ) -> None:
        super().__init__(config)
        self._provider = provider

    @property
    def name(self) -> str:
        return "erc20_price_lookup"

    @property
    def description(self) -> str:
        return "Fetches current USD prices for ERC20 tokens involved in the transaction"

    @property
    def dependencies(self) -> list[str]:
        return ["token_transfer_extractor"]

    @property
    def progress_group(self) -> ComponentGroup:
        return ComponentGroup.ENRICHMENT

    @property
    def progress_title(self) -> str:
        return "Fetching Token Prices"

    async def process(self, ctx: RunContext, baggage: Baggage) -> None:
        transfers = baggage.get_as(BaggageKeys.TRANSFERS, list)
        if not transfers:
            return

        contracts = list(
            dict.fromkeys(
                t.contract for t in transfers if isinstance(t, TokenTransfer) and t.type == "ERC20"
            )
        )
        prices: dict[str, TokenPrice] = {}
        for contract in contracts:
            ctx.raise_if_cancelled()
            price = await self._lookup(ctx.network_id, contract)
            if price is not None:
                prices[contract] = price

        baggage[BaggageKeys.TOKEN_PRICES] = prices
        log = logger.info if self.config.verbose else logger.debug
        log("Priced %d of %d ERC20 tokens", len(prices), len(contracts))

    async def _lookup(self, network_id: int, contract: str) -> TokenPrice | None:
        key = token_price_key(network_id, contract)
        if self.cache is not None:
            cached = await self.cache.get_model(key, TokenPrice)
            if cached is not None:
                logger.debug("Price cache hit for %s", contract)
                return cached

        if self._provider is None:
            return None

        try:
            price = await self._provider.get_token_price(network_id, contract)
        except Exception as exc:
            logger.warning("Price lookup failed for %s: %s", contract, exc)
            return None

        if price is not None and self.cache is not None:
            await self.cache.set_model(key, price, PRICE_TTL)
        return price

    def get_prompt_context(self, ctx: RunContext, baggage: Baggage) -> str:
        prices = _stored_prices(baggage)
        if not prices:
            return ""
        lines = ["### Token Prices (USD):"]
        for contract, price in prices.items():
            label = price.symbol or contract
            lines.append(f"- {label} ({contract}): ${price.price_usd:,.6f}")
        return "\n".join(lines)

    def get_rag_context(self, ctx: RunContext, baggage: Baggage) -> RagContext:
        rag = RagContext()
        for contract, price in _stored_prices(baggage).items():
            rag.add_item(
                RagContextItem(
                    id=f"price_{contract}",
                    type="token",
                    title=f"{price.symbol or contract} price",
                    content=f"{price.symbol or contract} trades at ${price.price_usd} USD",
                    metadata={"contract": contract, "price_usd": price.price_usd},
                    keywords=[k for k in (price.symbol.lower(), contract) if k],
                    relevance=0.6,
                )
            )
        return rag


def _stored_prices(baggage: Baggage) -> dict[str, TokenPrice]:
    """Prices in the baggage, ignoring entries of another shape."""
    prices = baggage.get_as(BaggageKeys.TOKEN_PRICES, dict) or {}
    return {
        contract: price
        for contract, price in prices.items()
        if isinstance(contract, str) and isinstance(price, TokenPrice)
    }
