"""Solend USDC deposit and withdraw builders.

Runs without network access: everything chain-dependent arrives in a
``SolendContext`` prepared by the host.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Union

from txbuilder.addresses import to_pubkey
from txbuilder.amounts import to_decimal_string, validate_raw_amount
from txbuilder.config import DEFAULT_LIMITS, TransactionLimits
from txbuilder.constants import USDC_DECIMALS, USDC_MINT
from txbuilder.context import SolendContext
from txbuilder.errors import InvalidParamsError, UnsupportedOperationError
from txbuilder.instructions import solend_deposit_instruction, solend_withdraw_instruction
from txbuilder.metadata import BuildResult, LendingMetadata
from txbuilder.transaction import assemble_transaction

logger = logging.getLogger(__name__)

PROTOCOL = "solend"
OPERATIONS = ("deposit", "withdraw")

Prepared = Union[SolendContext, Mapping[str, Any]]


def _missing_account_warnings(ctx: SolendContext, protocol_name: str) -> tuple[str, ...]:
    missing = []
    if not ctx.obligation_exists:
        missing.append(f"obligation {ctx.obligation_account} does not exist yet")
    if not ctx.usdc_ata_exists:
        missing.append(f"USDC token account {ctx.user_usdc_ata} does not exist")
    if not ctx.cusdc_ata_exists:
        missing.append(f"cUSDC token account {ctx.user_cusdc_ata} does not exist")

    warnings = tuple(f"[{protocol_name}] {m}" for m in missing)
    for w in warnings:
        logger.warning("%s", w)
    return warnings


def _build(
    operation: str,
    wallet: str,
    amount: int,
    prepared: Prepared,
    limits: TransactionLimits,
) -> BuildResult:
    protocol_name = f"Solend {operation.capitalize()}"
    owner = to_pubkey(wallet, "wallet", InvalidParamsError)
    amount = validate_raw_amount(amount, "USDC")
    ctx = SolendContext.coerce(prepared)
    missing = _missing_account_warnings(ctx, protocol_name)

    encode = (
        solend_deposit_instruction if operation == "deposit" else solend_withdraw_instruction
    )
    plan = encode(
        owner=owner,
        user_liquidity=ctx.user_usdc_ata,
        user_collateral=ctx.user_cusdc_ata,
        obligation=ctx.obligation_account,
        amount=amount,
    )
    wire = assemble_transaction(owner, ctx.lifetime, [plan], protocol_name, limits)
    if missing:
        wire = replace(wire, warnings=missing + wire.warnings)

    return BuildResult(
        protocol=PROTOCOL,
        operation=operation,
        transaction=wire,
        metadata=LendingMetadata(
            amount=to_decimal_string(amount, USDC_DECIMALS, "USDC"),
            amount_raw=str(amount),
            token_symbol="USDC",
            token_mint=str(USDC_MINT),
            account=str(ctx.obligation_account),
        ),
    )


def build_deposit_transaction(
    wallet: str,
    amount: int,
    prepared: Prepared,
    limits: TransactionLimits = DEFAULT_LIMITS,
) -> BuildResult:
    """Deposit ``amount`` USDC smallest units and post the cUSDC as collateral."""
    return _build("deposit", wallet, amount, prepared, limits)


def build_withdraw_transaction(
    wallet: str,
    amount: int,
    prepared: Prepared,
    limits: TransactionLimits = DEFAULT_LIMITS,
) -> BuildResult:
    """Withdraw ``amount`` cUSDC collateral and redeem it for USDC."""
    return _build("withdraw", wallet, amount, prepared, limits)


def build_solend_transaction(
    wallet: str,
    params: Mapping[str, Any],
    prepared: Prepared,
    limits: TransactionLimits = DEFAULT_LIMITS,
) -> BuildResult:
    operation = params.get("operation") or "deposit"
    if operation not in OPERATIONS:
        raise UnsupportedOperationError(
            f"unknown Solend operation: {operation}. Available: {', '.join(OPERATIONS)}"
        )
    return _build(operation, wallet, params.get("amount"), prepared, limits)
