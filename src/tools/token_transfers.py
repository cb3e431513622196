# src/tools/token_transfers.py — v2
"""Token transfer extractor — ERC20/ERC721 Transfer events from raw logs.

Both standards emit ``Transfer(address,address,uint256)`` with the same
signature hash. ERC20 indexes from/to (3 topics) and puts the amount in
data; ERC721 also indexes the token id (4 topics).
"""

from __future__ import annotations

import logging
from typing import Any

from txflow.pipeline.baggage import Baggage, BaggageKeys
from txflow.pipeline.plugin_kit.base_tool import BaseTool
from txflow.pipeline.plugin_kit.models import RagContext, RagContextItem
from txflow.pipeline.progress import ComponentGroup
from txflow.pipeline.run_context import RunContext
from txflow.tools.models import TokenTransfer

logger = logging.getLogger(__name__)

TRANSFER_TOPIC = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"


def topic_to_address(topic: str) -> str:
    """Return the 20-byte address right-aligned in a 32-byte topic."""
    return "0x" + topic.lower().removeprefix("0x")[-40:].rjust(40, "0")


def hex_to_decimal(value: str) -> str:
    """Convert a 0x-prefixed hex quantity to a decimal string."""
    digits = value.lower().removeprefix("0x")
    return str(int(digits, 16)) if digits else "0"


def parse_transfer_log(log: dict[str, Any]) -> TokenTransfer | None:
    """Decode one log entry, or return None if it is not a token Transfer."""
    topics = log.get("topics") or []
    if len(topics) < 3 or str(topics[0]).lower() != TRANSFER_TOPIC:
        return None

    contract = str(log.get("address", "")).lower()
    log_index = log.get("logIndex")

    try:
        if isinstance(log_index, str):
            log_index = int(log_index, 16) if log_index.startswith("0x") else int(log_index)
        if len(topics) == 4:
            return TokenTransfer(
                type="ERC721",
                contract=contract,
                from_address=topic_to_address(topics[1]),
                to_address=topic_to_address(topics[2]),
                token_id=hex_to_decimal(topics[3]),
                log_index=log_index,
            )
        return TokenTransfer(
            type="ERC20",
            contract=contract,
            from_address=topic_to_address(topics[1]),
            to_address=topic_to_address(topics[2]),
            amount=hex_to_decimal(str(log.get("data") or "0x")),
            log_index=log_index,
        )
    except ValueError as exc:
        logger.warning("Skipping malformed Transfer log from %s: %s", contract, exc)
        return None


class TokenTransferExtractor(BaseTool):
    """Extract token transfers from the raw transaction logs."""

    @property
    def name(self) -> str:
        return "token_transfer_extractor"

    @property
    def description(self) -> str:
        return "Extracts ERC20/ERC721 token transfers from transaction event logs"

    @property
    def progress_group(self) -> ComponentGroup:
        return ComponentGroup.DECODING

    @property
    def progress_title(self) -> str:
        return "Extracting Token Transfers"

    async def process(self, ctx: RunContext, baggage: Baggage) -> None:
        raw_data = baggage.get_as(BaggageKeys.RAW_DATA, dict)
        logs = raw_data.get("logs") if raw_data else None
        if not isinstance(logs, list) or not logs:
            return

        transfers = [
            transfer
            for log in logs
            if isinstance(log, dict) and (transfer := parse_transfer_log(log)) is not None
        ]
        baggage[BaggageKeys.TRANSFERS] = transfers

        log_fn = logger.info if self.config.verbose else logger.debug
        log_fn("Extracted %d token transfers from %d logs", len(transfers), len(logs))

    def get_prompt_context(self, ctx: RunContext, baggage: Baggage) -> str:
        transfers = _stored_transfers(baggage)
        if not transfers:
            return ""

        lines = ["### Basic Token Transfers:"]
        for i, transfer in enumerate(transfers, start=1):
            lines += [
                "",
                f"Transfer #{i}:",
                f"- Type: {transfer.type}",
                f"- Contract: {transfer.contract}",
                f"- From: {transfer.from_address}",
                f"- To: {transfer.to_address}",
            ]
            if transfer.amount is not None:
                lines.append(f"- Raw Amount: {transfer.amount}")
            if transfer.token_id is not None:
                lines.append(f"- Token ID: {transfer.token_id}")
        return "\n".join(lines)

    def get_rag_context(self, ctx: RunContext, baggage: Baggage) -> RagContext:
        rag = RagContext()
        for i, transfer in enumerate(_stored_transfers(baggage)):
            rag.add_item(
                RagContextItem(
                    id=f"transfer_{i}_{transfer.contract}",
                    type="transfer",
                    title=f"{transfer.type} transfer",
                    content=(
                        f"{transfer.type} transfer of "
                        f"{transfer.amount or 'token #' + str(transfer.token_id)} "
                        f"from {transfer.from_address} to {transfer.to_address} "
                        f"via {transfer.contract}"
                    ),
                    metadata=transfer.model_dump(exclude_none=True),
                    keywords=[transfer.contract, transfer.from_address, transfer.to_address],
                    relevance=0.7,
                )
            )
        return rag


def _stored_transfers(baggage: Baggage) -> list[TokenTransfer]:
    """Transfers in the baggage, ignoring anything of another shape."""
    transfers = baggage.get_as(BaggageKeys.TRANSFERS, list) or []
    return [t for t in transfers if isinstance(t, TokenTransfer)]
