# src/tools/models.py — v1
"""Data models written to the baggage by the bundled tools."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class TransactionContext(BaseModel):
    """Basic transaction metadata taken from the receipt."""

    sender: str | None = None
    recipient: str | None = None
    gas_used: str | None = None
    status: str | None = None

    @property
    def status_label(self) -> str | None:
        if self.status == "0x1":
            return "Success"
        if self.status == "0x0":
            return "Failed"
        return self.status


class TokenTransfer(BaseModel):
    """A token transfer extracted from a Transfer event log."""

    type: Literal["ERC20", "ERC721"]
    contract: str
    from_address: str
    to_address: str
    amount: str | None = None  # raw integer amount, decimal string
    token_id: str | None = None
    log_index: int | None = None


class TokenPrice(BaseModel):
    """USD price of a token at lookup time."""

    contract: str
    symbol: str = ""
    price_usd: float
    source: str = ""
    last_updated: datetime | None = None
