# src/tools/transaction_context.py — v1
"""Transaction context provider — sender, recipient, gas and status."""

from __future__ import annotations

import logging

from txflow.pipeline.baggage import Baggage, BaggageKeys
from txflow.pipeline.plugin_kit.base_tool import BaseTool
from txflow.pipeline.plugin_kit.models import RagContext, RagContextItem
from txflow.pipeline.progress import ComponentGroup
from txflow.pipeline.run_context import RunContext
from txflow.tools.models import TransactionContext

logger = logging.getLogger(__name__)


class TransactionContextProvider(BaseTool):
    """Extract basic transaction metadata from the raw receipt."""

    @property
    def name(self) -> str:
        return "transaction_context_provider"

    @property
    def description(self) -> str:
        return "Provides basic transaction metadata context (sender, recipient, gas, status)"

    @property
    def progress_group(self) -> ComponentGroup:
        return ComponentGroup.DATA

    @property
    def progress_title(self) -> str:
        return "Processing Transaction Data"

    async def process(self, ctx: RunContext, baggage: Baggage) -> None:
        raw_data = baggage.get_as(BaggageKeys.RAW_DATA, dict)
        if raw_data is None:
            logger.debug("No raw transaction data in baggage")
            return

        receipt = raw_data.get("receipt")
        if not isinstance(receipt, dict):
            receipt = {}

        context = TransactionContext(
            sender=_str_or_none(receipt.get("from")),
            recipient=_str_or_none(receipt.get("to")),
            gas_used=_str_or_none(receipt.get("gasUsed")),
            status=_str_or_none(receipt.get("status")),
        )
        baggage[BaggageKeys.TRANSACTION_CONTEXT] = context

        log = logger.info if self.config.verbose else logger.debug
        log("Extracted transaction context: %s", context.model_dump(exclude_none=True))

    def get_prompt_context(self, ctx: RunContext, baggage: Baggage) -> str:
        context = baggage.get_as(BaggageKeys.TRANSACTION_CONTEXT, TransactionContext)
        if context is None or not context.model_dump(exclude_none=True):
            return ""

        lines = ["### TRANSACTION CONTEXT:"]
        if context.sender:
            lines.append(
                f"- TRANSACTION SENDER: {context.sender} "
                "(the address that initiated this transaction)"
            )
        if context.recipient:
            lines.append(f"- Contract Called: {context.recipient}")
        if context.gas_used:
            lines.append(f"- Total Gas Used: {context.gas_used}")
        if context.status:
            lines.append(f"- Status: {context.status_label}")
        return "\n".join(lines)

    def get_rag_context(self, ctx: RunContext, baggage: Baggage) -> RagContext:
        rag = RagContext()
        context = baggage.get_as(BaggageKeys.TRANSACTION_CONTEXT, TransactionContext)
        if context is None or not context.sender:
            return rag
        rag.add_item(
            RagContextItem(
                id=f"tx_sender_{context.sender.lower()}",
                type="address",
                title="Transaction sender",
                content=f"{context.sender} initiated the transaction",
                metadata={"address": context.sender, "role": "sender"},
                keywords=["sender", "from", context.sender.lower()],
                relevance=0.8,
            )
        )
        return rag


def _str_or_none(value: object) -> str | None:
    return value if isinstance(value, str) and value else None
