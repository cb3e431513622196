# src/pipeline/baggage.py — v2
"""Shared mutable context ("baggage") flowing through all tools of a run.

The baggage is a string-keyed map whose value types are fixed by
convention per key. Keys are never deleted during a run. Each write is
attributed to the tool that was running when it happened, so tests and
operators can check that tools only write their own output keys.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from contextlib import contextmanager
from typing import Any, TypeVar

T = TypeVar("T")


class BaggageKeys:
    """Well-known baggage keys and the tool that owns each."""

    RAW_DATA = "raw_data"  # seeded by the caller
    PROGRESS_TRACKER = "progress_tracker"  # seeded by the pipeline
    TRANSACTION_CONTEXT = "transaction_context"  # transaction_context_provider
    TRANSFERS = "transfers"  # token_transfer_extractor
    TOKEN_PRICES = "token_prices"  # erc20_price_lookup


# Keys that are not tool output and are excluded from snapshots.
INTERNAL_KEYS = frozenset({BaggageKeys.PROGRESS_TRACKER})


class BaggageError(Exception):
    """Raised on operations the baggage protocol forbids."""


class MissingBaggageKeyError(KeyError):
    """A required upstream key is absent."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Required baggage key '{self.key}' is absent"


class Baggage(MutableMapping[str, Any]):
    """String-keyed shared state for one pipeline run.

    Absence is a valid state: readers use get() / get_as() and treat a
    missing or mistyped value as "no data available".
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        """Wrap initial state.

        A plain dict is used by reference, so the caller sees every write
        made during the run. Other mappings are copied.
        """
        self._data: dict[str, Any] = {}
        self._writers: dict[str, str | None] = {}
        self._writer: str | None = None
        if isinstance(initial, dict):
            bad = [k for k in initial if not isinstance(k, str)]
            if bad:
                raise TypeError(f"Baggage keys must be str, got {type(bad[0]).__name__}")
            self._data = initial
            self._writers = dict.fromkeys(initial)
        elif initial:
            for key, value in initial.items():
                self[key] = value

    # --- MutableMapping ---

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise TypeError(f"Baggage keys must be str, got {type(key).__name__}")
        self._data[key] = value
        self._writers[key] = self._writer

    def __delitem__(self, key: str) -> None:
        raise BaggageError(f"Baggage keys cannot be deleted during a run: '{key}'")

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Baggage({sorted(self._data)})"

    # --- Typed access ---

    def get_as(self, key: str, expected: type[T] | tuple[type, ...]) -> T | None:
        """Return the value under key if present and of the expected type."""
        value = self._data.get(key)
        if isinstance(value, expected):
            return value  # type: ignore[return-value]
        return None

    def require(self, key: str) -> Any:
        """Return the value under key or raise MissingBaggageKeyError."""
        try:
            return self._data[key]
        except KeyError:
            raise MissingBaggageKeyError(key) from None

    # --- Write attribution ---

    @contextmanager
    def writing_as(self, tool_name: str) -> Iterator[None]:
        """Attribute writes made inside the block to tool_name."""
        previous = self._writer
        self._writer = tool_name
        try:
            yield
        finally:
            self._writer = previous

    def writer_of(self, key: str) -> str | None:
        """Return the tool that last wrote key (None for seeded keys)."""
        if key not in self._writers:
            raise MissingBaggageKeyError(key)
        return self._writers[key]

    def keys_written_by(self, tool_name: str) -> list[str]:
        return [key for key, writer in self._writers.items() if writer == tool_name]

    def snapshot(self, exclude: frozenset[str] = INTERNAL_KEYS) -> dict[str, Any]:
        """Shallow copy of the current contents without internal keys."""
        return {k: v for k, v in self._data.items() if k not in exclude}
