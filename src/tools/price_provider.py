# src/tools/price_provider.py — v1
"""Interface of the market-data collaborator used for price lookups."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from txflow.tools.models import TokenPrice


@runtime_checkable
class PriceProvider(Protocol):
    """Anything that can price an ERC20 token by contract address."""

    async def get_token_price(self, network_id: int, address: str) -> TokenPrice | None:
        """Return the current price, or None when the token is unknown.

        Raises on transport or API errors.
        """
        ...
