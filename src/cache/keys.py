# src/cache/keys.py — v1
"""Cache key patterns and TTL policy per data category.

Keys are colon-delimited: ``{category}:{network-id}:{identifier}`` for
network-specific data, ``{category}:{identifier}`` for universal data.
Addresses, hashes and selectors are lower-cased so the same inputs always
address the same entry. Changing a pattern silently invalidates every
entry already cached under the old one.
"""

from __future__ import annotations

from datetime import timedelta

# === TTL POLICY ===

PERMANENT_TTL = timedelta(days=365)

ABI_TTL = PERMANENT_TTL
SIGNATURE_TTL = PERMANENT_TTL
METADATA_TTL = PERMANENT_TTL
ICON_TTL = PERMANENT_TTL
NETWORK_TTL = PERMANENT_TTL
TRANSACTION_TTL = PERMANENT_TTL
LOG_DECODING_TTL = PERMANENT_TTL
TRACE_DECODING_TTL = PERMANENT_TTL
AMOUNT_DETECTION_TTL = PERMANENT_TTL
STATIC_CONTEXT_TTL = PERMANENT_TTL
PRICE_TTL = timedelta(hours=1)
ENS_TTL = timedelta(days=30)
NFT_METADATA_TTL = timedelta(days=30)

# === KEY PATTERNS ===

ABI_KEY = "contract-abi:{network_id}:{address}"
ABI_FUNCTION_KEY = "abi-func-sig:{selector}"
ABI_EVENT_KEY = "abi-event-sig:{topic}"
FUNCTION_SIG_KEY = "4byte-func-sig:{selector}"
EVENT_SIG_KEY = "4byte-event-sig:{topic}"
TOKEN_PRICE_KEY = "erc20-price:{network_id}:{address}"
ENS_NAME_KEY = "ens-name:{address}"
ENS_ADDRESS_KEY = "ens-addr:{name}"
TOKEN_METADATA_KEY = "token-meta:{network_id}:{address}"
TOKEN_ICON_KEY = "token-icon:{network_id}:{address}"
NETWORK_KEY = "network-info:{chain_id}"
TRANSACTION_CONTEXT_KEY = "tx-context:{network_id}:{tx_hash}"
LOG_DECODING_KEY = "logs-decoded:{network_id}:{tx_hash}"
TRACE_DECODING_KEY = "trace-decoded:{network_id}:{tx_hash}"
NFT_METADATA_KEY = "nft-meta:{network_id}:{contract}:{token_id}"
AMOUNT_DETECTION_KEY = "amounts-detected:{network_id}:{tx_hash}"


def _norm(value: str) -> str:
    value = value.strip().lower()
    if not value:
        raise ValueError("Cache key component must not be empty")
    if ":" in value:
        raise ValueError(f"Cache key component must not contain ':': {value!r}")
    return value


def _network(network_id: int) -> int:
    if network_id < 0:
        raise ValueError(f"Invalid network id: {network_id}")
    return network_id


def abi_key(network_id: int, address: str) -> str:
    return ABI_KEY.format(network_id=_network(network_id), address=_norm(address))


def abi_function_key(selector: str) -> str:
    return ABI_FUNCTION_KEY.format(selector=_norm(selector))


def abi_event_key(topic: str) -> str:
    return ABI_EVENT_KEY.format(topic=_norm(topic))


def function_signature_key(selector: str) -> str:
    return FUNCTION_SIG_KEY.format(selector=_norm(selector))


def event_signature_key(topic: str) -> str:
    return EVENT_SIG_KEY.format(topic=_norm(topic))


def token_price_key(network_id: int, address: str) -> str:
    return TOKEN_PRICE_KEY.format(network_id=_network(network_id), address=_norm(address))


def ens_name_key(address: str) -> str:
    return ENS_NAME_KEY.format(address=_norm(address))


def ens_address_key(name: str) -> str:
    return ENS_ADDRESS_KEY.format(name=_norm(name))


def token_metadata_key(network_id: int, address: str) -> str:
    return TOKEN_METADATA_KEY.format(network_id=_network(network_id), address=_norm(address))


def token_icon_key(network_id: int, address: str) -> str:
    return TOKEN_ICON_KEY.format(network_id=_network(network_id), address=_norm(address))


def network_key(chain_id: int) -> str:
    return NETWORK_KEY.format(chain_id=_network(chain_id))


def transaction_context_key(network_id: int, tx_hash: str) -> str:
    return TRANSACTION_CONTEXT_KEY.format(network_id=_network(network_id), tx_hash=_norm(tx_hash))


def log_decoding_key(network_id: int, tx_hash: str) -> str:
    return LOG_DECODING_KEY.format(network_id=_network(network_id), tx_hash=_norm(tx_hash))


def trace_decoding_key(network_id: int, tx_hash: str) -> str:
    return TRACE_DECODING_KEY.format(network_id=_network(network_id), tx_hash=_norm(tx_hash))


def nft_metadata_key(network_id: int, contract: str, token_id: str | int) -> str:
    return NFT_METADATA_KEY.format(
        network_id=_network(network_id),
        contract=_norm(contract),
        token_id=_norm(str(token_id)),
    )


def amount_detection_key(network_id: int, tx_hash: str) -> str:
    return AMOUNT_DETECTION_KEY.format(network_id=_network(network_id), tx_hash=_norm(tx_hash))
