"""Jupiter swap builder.

The swap-order service returns a complete unsigned transaction, so the
builder does not encode instructions: it checks the transaction against
the same limits as every other builder, confirms the user's wallet pays
the fee, and passes it through.
"""

from __future__ import annotations

from typing import Any, Mapping, Union

from txbuilder.addresses import to_pubkey
from txbuilder.config import DEFAULT_LIMITS, TransactionLimits
from txbuilder.context import SwapContext
from txbuilder.errors import InvalidContextError, InvalidParamsError, UnsupportedOperationError
from txbuilder.metadata import BuildResult, SwapMetadata
from txbuilder.transaction import (
    WireTransaction,
    decode_transaction,
    validate_instruction_count,
    validate_transaction_size,
)

PROTOCOL = "jupiter"
OPERATIONS = ("swap",)
PROTOCOL_NAME = "Jupiter Swap"
MIN_TRANSACTION_SIZE = 64


def build_swap_transaction(
    wallet: str,
    prepared: Union[SwapContext, Mapping[str, Any]],
    limits: TransactionLimits = DEFAULT_LIMITS,
) -> BuildResult:
    owner = to_pubkey(wallet, "wallet", InvalidParamsError)
    ctx = SwapContext.coerce(prepared)

    size_check = validate_transaction_size(ctx.transaction, PROTOCOL_NAME, limits)
    if size_check.value < MIN_TRANSACTION_SIZE:
        raise InvalidContextError(
            f"swap transaction too small: {size_check.value} bytes "
            f"(minimum {MIN_TRANSACTION_SIZE} bytes expected)"
        )

    tx = decode_transaction(ctx.transaction)
    message = tx.message
    count_check = validate_instruction_count(
        len(message.instructions), PROTOCOL_NAME, limits
    )
    fee_payer = message.account_keys[0]
    if fee_payer != owner:
        raise InvalidContextError(
            f"swap transaction fee payer {fee_payer} does not match wallet {owner}"
        )

    warnings = tuple(
        w for w in (size_check.warning, count_check.warning) if w is not None
    )
    return BuildResult(
        protocol=PROTOCOL,
        operation="swap",
        transaction=WireTransaction(
            wire_transaction=ctx.transaction,
            size=size_check.value,
            instruction_count=count_check.value,
            warnings=warnings,
        ),
        metadata=SwapMetadata(
            route=ctx.route,
            fees=ctx.fees,
            router=ctx.router,
            request_id=ctx.request_id,
        ),
    )


def build_jupiter_transaction(
    wallet: str,
    params: Mapping[str, Any],
    prepared: Union[SwapContext, Mapping[str, Any]],
    limits: TransactionLimits = DEFAULT_LIMITS,
) -> BuildResult:
    operation = params.get("operation")
    if operation not in OPERATIONS:
        raise UnsupportedOperationError(
            f"unknown Jupiter operation: {operation}. Available: {', '.join(OPERATIONS)}"
        )
    return build_swap_transaction(wallet, prepared, limits)
