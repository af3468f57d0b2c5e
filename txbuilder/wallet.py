"""Native SOL and SPL token transfer builder."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from txbuilder.addresses import to_pubkey
from txbuilder.amounts import to_decimal_string, to_raw_units
from txbuilder.config import DEFAULT_LIMITS, TransactionLimits
from txbuilder.constants import SOL_DECIMALS
from txbuilder.context import TransferContext
from txbuilder.errors import (
    InvalidParamsError,
    MissingContextError,
    UnsupportedOperationError,
)
from txbuilder.instructions import (
    memo_instruction,
    system_transfer_instruction,
    token_transfer_instruction,
)
from txbuilder.metadata import BuildResult, TransferMetadata
from txbuilder.tokens import resolve_token
from txbuilder.transaction import assemble_transaction

PROTOCOL = "wallet"
OPERATIONS = ("transfer",)
PROTOCOL_NAME = "Wallet Transfer"

Prepared = Union[TransferContext, Mapping[str, Any]]


def build_transfer_transaction(
    wallet: str,
    recipient: str,
    amount: Any,
    prepared: Prepared,
    symbol: Optional[str] = None,
    mint: Optional[str] = None,
    memo: Optional[str] = None,
    limits: TransactionLimits = DEFAULT_LIMITS,
) -> BuildResult:
    """Build a transfer of ``amount`` human units from ``wallet`` to ``recipient``.

    With neither ``symbol`` nor ``mint`` (or a symbol naming the native
    token) this is a system-program SOL transfer; otherwise an SPL token
    transfer between the token accounts supplied in ``prepared``. A memo
    instruction, when requested, always follows the transfer.
    """
    sender = to_pubkey(wallet, "wallet", InvalidParamsError)
    to = to_pubkey(recipient, "recipient", InvalidParamsError)
    ctx = TransferContext.coerce(prepared)
    token = resolve_token(symbol, mint)

    if token is None or token.is_native:
        token_symbol = "SOL"
        token_mint = None
        amount_raw = to_raw_units(amount, SOL_DECIMALS, token_symbol)
        decimals = SOL_DECIMALS
        transfer = system_transfer_instruction(sender, to, amount_raw)
    else:
        token_symbol = token.symbol
        token_mint = token.mint_address
        amount_raw = to_raw_units(amount, token.decimals, token_symbol)
        decimals = token.decimals
        if ctx.sender_token_account is None or ctx.recipient_token_account is None:
            raise MissingContextError(
                f"token accounts must be provided for {token_symbol} transfers: "
                f"sender_token_account={ctx.sender_token_account}, "
                f"recipient_token_account={ctx.recipient_token_account}"
            )
        transfer = token_transfer_instruction(
            ctx.sender_token_account, ctx.recipient_token_account, sender, amount_raw
        )

    plans = [transfer]
    if memo:
        plans.append(memo_instruction(memo))

    wire = assemble_transaction(sender, ctx.lifetime, plans, PROTOCOL_NAME, limits)
    return BuildResult(
        protocol=PROTOCOL,
        operation="transfer",
        transaction=wire,
        metadata=TransferMetadata(
            sender=str(sender),
            recipient=str(to),
            amount=to_decimal_string(amount_raw, decimals, token_symbol),
            amount_raw=str(amount_raw),
            symbol=token_symbol,
            mint=token_mint,
            memo=memo or None,
        ),
    )


def build_wallet_transaction(
    wallet: str,
    params: Mapping[str, Any],
    prepared: Prepared,
    limits: TransactionLimits = DEFAULT_LIMITS,
) -> BuildResult:
    operation = params.get("operation") or "transfer"
    if operation not in OPERATIONS:
        raise UnsupportedOperationError(
            f"unknown wallet operation: {operation}. Available: {', '.join(OPERATIONS)}"
        )
    recipient = params.get("recipient")
    if recipient is None:
        raise InvalidParamsError("transfer requires a recipient")
    return build_transfer_transaction(
        wallet,
        recipient,
        params.get("amount"),
        prepared,
        symbol=params.get("symbol"),
        mint=params.get("mint"),
        memo=params.get("memo"),
        limits=limits,
    )
