"""Base58 address parsing for values that arrive as untrusted text."""

from __future__ import annotations

from typing import Union

import base58  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from txbuilder.errors import InvalidContextError, TxBuilderError

Bytes32 = bytes


def b58_to_32(
    value: str, field: str, error: type[TxBuilderError] = InvalidContextError
) -> Bytes32:
    if not isinstance(value, str) or not value:
        raise error(f"{field} must be a non-empty base58 string, got {value!r}")
    try:
        b = base58.b58decode(value)
    except ValueError as exc:
        raise error(f"{field} is not valid base58: {value!r}") from exc
    if len(b) != 32:
        raise error(f"{field} must decode to 32 bytes, got {len(b)}")
    return b


def to_pubkey(
    value: Union[str, Pubkey],
    field: str,
    error: type[TxBuilderError] = InvalidContextError,
) -> Pubkey:
    if isinstance(value, Pubkey):
        return value
    return Pubkey.from_bytes(b58_to_32(value, field, error))
