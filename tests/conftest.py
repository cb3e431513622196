# tests/conftest.py — v2
"""Shared test fixtures for unit and integration tests.

Provides stub tools, sample raw transaction data and cache instances.
No external dependencies — all I/O is mocked or local.
"""

from __future__ import annotations

from typing import Any

import pytest

from txflow.cache.memory_store import MemoryCacheStore
from txflow.cache.tool_cache import ToolCache
from txflow.pipeline.baggage import Baggage
from txflow.pipeline.plugin_kit.base_tool import BaseTool
from txflow.pipeline.run_context import RunContext

TRANSFER_TOPIC = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
SENDER = "0x1111111111111111111111111111111111111111"
RECEIVER = "0x2222222222222222222222222222222222222222"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
NFT = "0xbc4ca0eda7647a8ab7c2061c2e118a18a936f13d"


def _pad(address: str) -> str:
    return "0x" + address.removeprefix("0x").rjust(64, "0")


class StubTool(BaseTool):
    """Configurable tool that records its visits and writes one key."""

    def __init__(
        self,
        tool_name: str,
        deps: list[str] | None = None,
        visits: list[str] | None = None,
        fail: Exception | None = None,
        writes: dict[str, Any] | None = None,
    ) -> None:
        super().__init__()
        self._name = tool_name
        self._deps = deps or []
        self._visits = visits if visits is not None else []
        self._fail = fail
        self._writes = writes if writes is not None else {f"{tool_name}_out": True}
        self.seen_keys: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return f"Stub {self._name}"

    @property
    def dependencies(self) -> list[str]:
        return self._deps

    async def process(self, ctx: RunContext, baggage: Baggage) -> None:
        self._visits.append(self._name)
        self.seen_keys = sorted(baggage)
        if self._fail is not None:
            raise self._fail
        for key, value in self._writes.items():
            baggage[key] = value

    def get_prompt_context(self, ctx: RunContext, baggage: Baggage) -> str:
        if f"{self._name}_out" not in baggage:
            return ""
        return f"### {self._name}"


@pytest.fixture
def visits() -> list[str]:
    return []


@pytest.fixture
def run_ctx() -> RunContext:
    return RunContext(run_id="run_test", tx_hash="0xabc", network_id=1)


@pytest.fixture
def memory_store() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def tool_cache(memory_store: MemoryCacheStore) -> ToolCache:
    return ToolCache(memory_store, key_prefix="txflow")


@pytest.fixture
def sample_raw_data() -> dict[str, Any]:
    """Raw transaction with one ERC20 and one ERC721 transfer."""
    return {
        "tx_hash": "0xabc123",
        "network_id": 1,
        "receipt": {
            "from": SENDER,
            "to": USDC,
            "gasUsed": "0x5208",
            "status": "0x1",
        },
        "logs": [
            {
                "address": USDC,
                "topics": [TRANSFER_TOPIC, _pad(SENDER), _pad(RECEIVER)],
                "data": "0x" + hex(1_500_000)[2:].rjust(64, "0"),
                "logIndex": "0x0",
            },
            {
                "address": NFT,
                "topics": [TRANSFER_TOPIC, _pad(RECEIVER), _pad(SENDER), _pad("0x2a")],
                "data": "0x",
                "logIndex": "0x1",
            },
            {
                "address": USDC,
                "topics": ["0x8c5be1e5ebec7d5bd14f71427d1e84f3dd0314c0f7b2291e5b200ac8c7c3b925"],
                "data": "0x",
                "logIndex": "0x2",
            },
        ],
    }


@pytest.fixture
def stub_tool() -> type[StubTool]:
    """The StubTool class, for tests that build their own tool sets."""
    return StubTool
