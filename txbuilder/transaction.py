"""Transaction assembly and limit validation.

Instruction plans are compiled into a v0 message in the order given, wrapped
in an unsigned transaction (zeroed signature slots) and serialized to
base64. Size and instruction-count limits are enforced before anything is
returned.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from solders.hash import Hash  # type: ignore[import-untyped]
from solders.message import MessageV0  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.signature import Signature  # type: ignore[import-untyped]
from solders.transaction import VersionedTransaction  # type: ignore[import-untyped]

from txbuilder.addresses import b58_to_32
from txbuilder.config import DEFAULT_LIMITS, TransactionLimits
from txbuilder.errors import (
    InstructionCountError,
    InvalidContextError,
    InvalidTransactionError,
    TransactionTooLargeError,
)
from txbuilder.instructions import InstructionPlan

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Lifetime:
    """Recent blockhash plus the last block height the transaction is valid for."""

    blockhash: str
    last_valid_block_height: int

    def __post_init__(self) -> None:
        b58_to_32(self.blockhash, "lifetime.blockhash")
        height = self.last_valid_block_height
        if isinstance(height, bool) or not isinstance(height, int) or height < 0:
            raise InvalidContextError(
                f"lifetime.last_valid_block_height must be a non-negative integer, "
                f"got {height!r}"
            )

    def hash(self) -> Hash:
        return Hash(b58_to_32(self.blockhash, "lifetime.blockhash"))


@dataclass(frozen=True)
class LimitCheck:
    value: int
    limit: int
    warning: Optional[str] = None


@dataclass(frozen=True)
class WireTransaction:
    """Serialized unsigned transaction, base64 encoded."""

    wire_transaction: str
    size: int
    instruction_count: int
    warnings: tuple[str, ...] = ()

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.wire_transaction)


def _decode_wire(wire: Union[bytes, bytearray, str]) -> bytes:
    if isinstance(wire, (bytes, bytearray)):
        return bytes(wire)
    if not isinstance(wire, str):
        raise InvalidTransactionError(
            f"invalid transaction format: expected base64 string or bytes, "
            f"got {type(wire).__name__}"
        )
    try:
        return base64.b64decode(wire, validate=True)
    except binascii.Error as exc:
        raise InvalidTransactionError(f"failed to decode transaction: {exc}") from exc


def validate_transaction_size(
    wire: Union[bytes, bytearray, str],
    protocol_name: str = "transaction",
    limits: TransactionLimits = DEFAULT_LIMITS,
) -> LimitCheck:
    size = len(_decode_wire(wire))
    if size > limits.max_size:
        raise TransactionTooLargeError(size, limits.max_size, protocol_name)

    warning = None
    if size > limits.size_warning_threshold:
        percent = round(size / limits.max_size * 100)
        warning = (
            f"transaction size {size} bytes is approaching the limit of "
            f"{limits.max_size} bytes ({percent}% of maximum)"
        )
        logger.warning("[%s] %s", protocol_name, warning)
    return LimitCheck(size, limits.max_size, warning)


def validate_instruction_count(
    count: int,
    protocol_name: str = "transaction",
    limits: TransactionLimits = DEFAULT_LIMITS,
) -> LimitCheck:
    limit = limits.max_instructions
    if isinstance(count, bool) or not isinstance(count, int):
        raise InstructionCountError(
            f"invalid instruction count: expected integer, got {type(count).__name__}",
            count,
            limit,
        )
    if count < 0:
        raise InstructionCountError(
            f"invalid instruction count: {count} (must be non-negative, limit {limit})",
            count,
            limit,
        )
    if count == 0:
        raise InstructionCountError(
            f"invalid transaction for {protocol_name}: 0 instructions, must contain "
            f"at least one and at most {limit}",
            count,
            limit,
        )
    if count > limit:
        raise InstructionCountError(
            f"too many instructions for {protocol_name}: {count} exceeds maximum {limit}",
            count,
            limit,
        )

    warning = None
    if count > limits.instruction_warning_threshold:
        warning = f"transaction has {count} instructions, which is unusually high"
        logger.warning("[%s] %s", protocol_name, warning)
    return LimitCheck(count, limit, warning)


def serialize_unsigned(message: MessageV0) -> bytes:
    """Serialize a message as a transaction with all signature slots zeroed."""
    signatures = [Signature.default()] * message.header.num_required_signatures
    return bytes(VersionedTransaction.populate(message, signatures))


def assemble_transaction(
    fee_payer: Pubkey,
    lifetime: Lifetime,
    plans: Sequence[InstructionPlan],
    protocol_name: str = "transaction",
    limits: TransactionLimits = DEFAULT_LIMITS,
) -> WireTransaction:
    """Compile plans into a v0 transaction and validate it against ``limits``."""
    count_check = validate_instruction_count(len(plans), protocol_name, limits)

    message = MessageV0.try_compile(
        payer=fee_payer,
        instructions=[p.to_instruction() for p in plans],
        address_lookup_table_accounts=[],
        recent_blockhash=lifetime.hash(),
    )
    raw = serialize_unsigned(message)
    size_check = validate_transaction_size(raw, protocol_name, limits)

    warnings = tuple(
        w for w in (size_check.warning, count_check.warning) if w is not None
    )
    return WireTransaction(
        wire_transaction=base64.b64encode(raw).decode("ascii"),
        size=size_check.value,
        instruction_count=count_check.value,
        warnings=warnings,
    )


def decode_transaction(wire: Union[bytes, bytearray, str]) -> VersionedTransaction:
    raw = _decode_wire(wire)
    try:
        return VersionedTransaction.from_bytes(raw)
    except ValueError as exc:
        raise InvalidTransactionError(f"failed to decode transaction: {exc}") from exc


def transaction_info(
    wire: Union[bytes, bytearray, str], limits: TransactionLimits = DEFAULT_LIMITS
) -> dict:
    size = len(_decode_wire(wire))
    return {
        "size_in_bytes": size,
        "size_limit": limits.max_size,
        "percent_used": round(size / limits.max_size * 100, 1),
    }
