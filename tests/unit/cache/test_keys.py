# tests/unit/cache/test_keys.py — v1
"""Tests for cache/keys.py — key patterns and TTL policy."""

from __future__ import annotations

from datetime import timedelta

import pytest

from txflow.cache import keys


class TestKeyBuilders:
    def test_price_key_lowercases_address(self):
        key = keys.token_price_key(1, "0xA0b86991c6218b36c1d19d4a2e9eB0cE3606eB48")
        assert key == "erc20-price:1:0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"

    def test_network_specific_keys(self):
        assert keys.abi_key(137, "0xABC") == "contract-abi:137:0xabc"
        assert keys.token_metadata_key(1, "0xabc") == "token-meta:1:0xabc"
        assert keys.token_icon_key(1, "0xabc") == "token-icon:1:0xabc"
        assert keys.transaction_context_key(1, "0xDEAD") == "tx-context:1:0xdead"
        assert keys.log_decoding_key(1, "0xdead") == "logs-decoded:1:0xdead"
        assert keys.trace_decoding_key(1, "0xdead") == "trace-decoded:1:0xdead"
        assert keys.amount_detection_key(1, "0xdead") == "amounts-detected:1:0xdead"
        assert keys.nft_metadata_key(1, "0xNFT", 42) == "nft-meta:1:0xnft:42"

    def test_universal_keys(self):
        assert keys.abi_function_key("0xA9059CBB") == "abi-func-sig:0xa9059cbb"
        assert keys.abi_event_key("0xDDF2") == "abi-event-sig:0xddf2"
        assert keys.function_signature_key("0xa9059cbb") == "4byte-func-sig:0xa9059cbb"
        assert keys.event_signature_key("0xddf2") == "4byte-event-sig:0xddf2"
        assert keys.ens_name_key("0xABC") == "ens-name:0xabc"
        assert keys.ens_address_key("Vitalik.eth") == "ens-addr:vitalik.eth"
        assert keys.network_key(10) == "network-info:10"

    def test_same_inputs_same_key(self):
        assert keys.token_price_key(1, " 0xAbC ") == keys.token_price_key(1, "0xabc")

    @pytest.mark.parametrize("bad", ["", "   ", "0xabc:1"])
    def test_invalid_component(self, bad):
        with pytest.raises(ValueError):
            keys.token_price_key(1, bad)

    def test_negative_network(self):
        with pytest.raises(ValueError, match="network id"):
            keys.abi_key(-1, "0xabc")


class TestTTLPolicy:
    def test_prices_are_short_lived(self):
        assert keys.PRICE_TTL == timedelta(hours=1)

    def test_ens_and_nft_metadata(self):
        assert keys.ENS_TTL == timedelta(days=30)
        assert keys.NFT_METADATA_TTL == timedelta(days=30)

    def test_immutable_data_is_permanent(self):
        assert keys.ABI_TTL == keys.PERMANENT_TTL == timedelta(days=365)
        assert keys.TRANSACTION_TTL == keys.PERMANENT_TTL
