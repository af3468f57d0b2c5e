"""Prepared context consumed by the transaction builders.

Context is produced outside the builder (by ``txbuilder.client`` or any
other host process) and is treated as untrusted: ``from_dict`` validates
every field before a builder sees it.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from txbuilder.addresses import to_pubkey
from txbuilder.errors import InvalidContextError, MalformedAccountError, MissingContextError
from txbuilder.state import LendingMarketRecord, ReserveRecord
from txbuilder.transaction import Lifetime


def _require(data: Mapping[str, Any], key: str, where: str) -> Any:
    value = data.get(key)
    if value is None:
        raise MissingContextError(f"{where} is missing required field {key!r}")
    return value


def _as_mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise InvalidContextError(
            f"{where} must be a mapping, got {type(value).__name__}"
        )
    return value


def _flag(data: Mapping[str, Any], key: str, where: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise InvalidContextError(f"{where}.{key} must be a boolean, got {value!r}")
    return value


def _optional_pubkey(data: Mapping[str, Any], key: str, where: str) -> Optional[Pubkey]:
    value = data.get(key)
    if value is None:
        return None
    return to_pubkey(value, f"{where}.{key}")


def account_bytes(value: Any, where: str) -> bytes:
    """Normalize raw account data given as bytes, a list of ints or base64 text."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        try:
            return base64.b64decode(value, validate=True)
        except binascii.Error as exc:
            raise MalformedAccountError(f"{where} is not valid base64: {exc}") from exc
    if isinstance(value, (list, tuple)):
        try:
            return bytes(value)
        except (TypeError, ValueError) as exc:
            raise MalformedAccountError(
                f"{where} must be a sequence of byte values: {exc}"
            ) from exc
    raise MalformedAccountError(
        f"{where} must be bytes, a byte list or base64, got {type(value).__name__}"
    )


def lifetime_from_dict(value: Any, where: str = "prepared.lifetime") -> Lifetime:
    if isinstance(value, Lifetime):
        return value
    data = _as_mapping(value, where)
    return Lifetime(
        blockhash=_require(data, "blockhash", where),
        last_valid_block_height=_require(data, "last_valid_block_height", where),
    )


@dataclass(frozen=True)
class SolendContext:
    lifetime: Lifetime
    user_usdc_ata: Pubkey
    user_cusdc_ata: Pubkey
    obligation_account: Pubkey
    usdc_ata_exists: bool = False
    cusdc_ata_exists: bool = False
    obligation_exists: bool = False
    reserve: Optional[ReserveRecord] = None
    lending_market: Optional[LendingMarketRecord] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SolendContext:
        where = "prepared"
        data = _as_mapping(data, where)
        accounts = _as_mapping(data.get("accounts") or {}, f"{where}.accounts")

        reserve = None
        if accounts.get("reserve") is not None:
            entry = _as_mapping(accounts["reserve"], f"{where}.accounts.reserve")
            reserve = ReserveRecord.from_bytes(
                account_bytes(
                    _require(entry, "data", f"{where}.accounts.reserve"),
                    f"{where}.accounts.reserve.data",
                )
            )
        lending_market = None
        if accounts.get("lending_market") is not None:
            entry = _as_mapping(
                accounts["lending_market"], f"{where}.accounts.lending_market"
            )
            lending_market = LendingMarketRecord.from_bytes(
                account_bytes(
                    _require(entry, "data", f"{where}.accounts.lending_market"),
                    f"{where}.accounts.lending_market.data",
                )
            )

        return cls(
            lifetime=lifetime_from_dict(_require(data, "lifetime", where)),
            user_usdc_ata=to_pubkey(
                _require(data, "user_usdc_ata", where), f"{where}.user_usdc_ata"
            ),
            user_cusdc_ata=to_pubkey(
                _require(data, "user_cusdc_ata", where), f"{where}.user_cusdc_ata"
            ),
            obligation_account=to_pubkey(
                _require(data, "obligation_account", where),
                f"{where}.obligation_account",
            ),
            usdc_ata_exists=_flag(data, "usdc_ata_exists", where),
            cusdc_ata_exists=_flag(data, "cusdc_ata_exists", where),
            obligation_exists=_flag(data, "obligation_exists", where),
            reserve=reserve,
            lending_market=lending_market,
        )

    @classmethod
    def coerce(cls, prepared: Union[SolendContext, Mapping[str, Any]]) -> SolendContext:
        if isinstance(prepared, cls):
            return prepared
        return cls.from_dict(prepared)


@dataclass(frozen=True)
class TransferContext:
    lifetime: Lifetime
    sender_token_account: Optional[Pubkey] = None
    recipient_token_account: Optional[Pubkey] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TransferContext:
        where = "prepared"
        data = _as_mapping(data, where)
        return cls(
            lifetime=lifetime_from_dict(_require(data, "lifetime", where)),
            sender_token_account=_optional_pubkey(data, "sender_token_account", where),
            recipient_token_account=_optional_pubkey(
                data, "recipient_token_account", where
            ),
        )

    @classmethod
    def coerce(
        cls, prepared: Union[TransferContext, Mapping[str, Any]]
    ) -> TransferContext:
        if isinstance(prepared, cls):
            return prepared
        return cls.from_dict(prepared)


@dataclass(frozen=True)
class SwapContext:
    """Pre-built swap transaction plus the order details it was quoted with."""

    transaction: str  # base64
    route: Mapping[str, Any] = field(default_factory=dict)
    fees: Mapping[str, Any] = field(default_factory=dict)
    router: Optional[str] = None
    request_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SwapContext:
        where = "prepared"
        data = _as_mapping(data, where)
        transaction = data.get("transaction")
        if not transaction:
            raise MissingContextError(
                f"{where} is missing required field 'transaction': no swap "
                "transaction was provided by the order service"
            )
        if not isinstance(transaction, str):
            raise InvalidContextError(
                f"{where}.transaction must be a base64 string, "
                f"got {type(transaction).__name__}"
            )
        return cls(
            transaction=transaction,
            route=dict(_as_mapping(data.get("route") or {}, f"{where}.route")),
            fees=dict(_as_mapping(data.get("fees") or {}, f"{where}.fees")),
            router=data.get("router"),
            request_id=data.get("request_id"),
        )

    @classmethod
    def coerce(cls, prepared: Union[SwapContext, Mapping[str, Any]]) -> SwapContext:
        if isinstance(prepared, cls):
            return prepared
        return cls.from_dict(prepared)
