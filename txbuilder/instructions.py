"""Instruction encoders for the supported operations.

Account lists are literal sequences matching each program's ABI. Order is
significant and duplicates are intentional: Solend expects the user's
signer address twice in deposit and withdraw, and the USDC reserve twice
in withdraw.
"""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import Sequence

from solders.instruction import AccountMeta, Instruction  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from txbuilder.amounts import MAX_RAW_AMOUNT
from txbuilder.constants import (
    CUSDC_MINT,
    CUSDC_SUPPLY,
    LENDING_MARKET_AUTHORITY,
    MAIN_POOL_MARKET,
    MEMO_PROGRAM_ID,
    SOLEND_DEPOSIT_EXTRA_1,
    SOLEND_DEPOSIT_EXTRA_2,
    SOLEND_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    USDC_LIQUIDITY_SUPPLY,
    USDC_RESERVE,
)
from txbuilder.discriminator import (
    SOLEND_DEPOSIT_RESERVE_LIQUIDITY_AND_OBLIGATION_COLLATERAL,
    SOLEND_WITHDRAW_OBLIGATION_COLLATERAL_AND_REDEEM_RESERVE_COLLATERAL,
    SYSTEM_TRANSFER,
    TOKEN_TRANSFER,
)
from txbuilder.errors import AmountOverflowError, InvalidAmountError, InvalidParamsError

MAX_MEMO_BYTES = 566


class AccountRole(enum.Enum):
    READONLY = (False, False)
    WRITABLE = (False, True)
    READONLY_SIGNER = (True, False)
    WRITABLE_SIGNER = (True, True)

    @property
    def is_signer(self) -> bool:
        return self.value[0]

    @property
    def is_writable(self) -> bool:
        return self.value[1]


@dataclass(frozen=True)
class AccountRef:
    address: Pubkey
    role: AccountRole

    def to_account_meta(self) -> AccountMeta:
        return AccountMeta(
            pubkey=self.address,
            is_signer=self.role.is_signer,
            is_writable=self.role.is_writable,
        )


@dataclass(frozen=True)
class InstructionPlan:
    program_id: Pubkey
    accounts: tuple[AccountRef, ...]
    data: bytes

    def to_instruction(self) -> Instruction:
        return Instruction(
            program_id=self.program_id,
            data=self.data,
            accounts=[a.to_account_meta() for a in self.accounts],
        )


def _plan(program_id: Pubkey, accounts: Sequence[AccountRef], data: bytes) -> InstructionPlan:
    return InstructionPlan(program_id=program_id, accounts=tuple(accounts), data=bytes(data))


def _check_u64(amount: int, what: str) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(f"{what} must be an integer, got {type(amount).__name__}")
    if amount < 0:
        raise InvalidAmountError(f"{what} must be non-negative, got {amount}")
    if amount > MAX_RAW_AMOUNT:
        raise AmountOverflowError(
            f"{what} {amount} exceeds u64 maximum {MAX_RAW_AMOUNT}",
            amount=amount,
            limit=MAX_RAW_AMOUNT,
        )


def encode_amount_payload(discriminator: int, amount: int) -> bytes:
    """Encode the 9-byte ``[u8 tag][u64 LE amount]`` payload."""
    if not 0 <= discriminator <= 0xFF:
        raise ValueError(f"discriminator out of u8 range: {discriminator}")
    _check_u64(amount, "amount")
    return struct.pack("<BQ", discriminator, amount)


# ---------------------------------------------------------------------------
# Solend
# ---------------------------------------------------------------------------


def solend_deposit_instruction(
    owner: Pubkey,
    user_liquidity: Pubkey,
    user_collateral: Pubkey,
    obligation: Pubkey,
    amount: int,
) -> InstructionPlan:
    """DepositReserveLiquidityAndObligationCollateral (14): USDC in, cUSDC into obligation."""
    data = encode_amount_payload(
        SOLEND_DEPOSIT_RESERVE_LIQUIDITY_AND_OBLIGATION_COLLATERAL, amount
    )
    accounts = [
        AccountRef(user_liquidity, AccountRole.WRITABLE),
        AccountRef(user_collateral, AccountRole.WRITABLE),
        AccountRef(USDC_RESERVE, AccountRole.WRITABLE),
        AccountRef(USDC_LIQUIDITY_SUPPLY, AccountRole.WRITABLE),
        AccountRef(CUSDC_MINT, AccountRole.WRITABLE),
        AccountRef(MAIN_POOL_MARKET, AccountRole.WRITABLE),
        AccountRef(LENDING_MARKET_AUTHORITY, AccountRole.READONLY),
        AccountRef(CUSDC_SUPPLY, AccountRole.WRITABLE),
        AccountRef(obligation, AccountRole.WRITABLE),
        AccountRef(owner, AccountRole.READONLY_SIGNER),
        AccountRef(SOLEND_DEPOSIT_EXTRA_1, AccountRole.READONLY),
        AccountRef(SOLEND_DEPOSIT_EXTRA_2, AccountRole.READONLY),
        AccountRef(owner, AccountRole.READONLY_SIGNER),
        AccountRef(TOKEN_PROGRAM_ID, AccountRole.READONLY),
    ]
    return _plan(SOLEND_PROGRAM_ID, accounts, data)


def solend_withdraw_instruction(
    owner: Pubkey,
    user_liquidity: Pubkey,
    user_collateral: Pubkey,
    obligation: Pubkey,
    amount: int,
) -> InstructionPlan:
    """WithdrawObligationCollateralAndRedeemReserveCollateral (15): cUSDC out, USDC back."""
    data = encode_amount_payload(
        SOLEND_WITHDRAW_OBLIGATION_COLLATERAL_AND_REDEEM_RESERVE_COLLATERAL, amount
    )
    accounts = [
        AccountRef(CUSDC_SUPPLY, AccountRole.WRITABLE),
        AccountRef(user_collateral, AccountRole.WRITABLE),
        AccountRef(USDC_RESERVE, AccountRole.WRITABLE),
        AccountRef(obligation, AccountRole.WRITABLE),
        AccountRef(MAIN_POOL_MARKET, AccountRole.WRITABLE),
        AccountRef(LENDING_MARKET_AUTHORITY, AccountRole.READONLY),
        AccountRef(user_liquidity, AccountRole.WRITABLE),
        AccountRef(CUSDC_MINT, AccountRole.WRITABLE),
        AccountRef(USDC_LIQUIDITY_SUPPLY, AccountRole.WRITABLE),
        AccountRef(owner, AccountRole.READONLY_SIGNER),
        AccountRef(owner, AccountRole.READONLY_SIGNER),
        AccountRef(TOKEN_PROGRAM_ID, AccountRole.READONLY),
        AccountRef(USDC_RESERVE, AccountRole.READONLY),
    ]
    return _plan(SOLEND_PROGRAM_ID, accounts, data)


# ---------------------------------------------------------------------------
# Transfers
# ---------------------------------------------------------------------------


def system_transfer_instruction(
    sender: Pubkey, recipient: Pubkey, lamports: int
) -> InstructionPlan:
    """System program Transfer: ``[u32 LE tag=2][u64 LE lamports]``."""
    _check_u64(lamports, "lamports")
    data = struct.pack("<IQ", SYSTEM_TRANSFER, lamports)
    accounts = [
        AccountRef(sender, AccountRole.WRITABLE_SIGNER),
        AccountRef(recipient, AccountRole.WRITABLE),
    ]
    return _plan(SYSTEM_PROGRAM_ID, accounts, data)


def token_transfer_instruction(
    source: Pubkey, destination: Pubkey, owner: Pubkey, amount: int
) -> InstructionPlan:
    """SPL token Transfer: ``[u8 tag=3][u64 LE amount]``."""
    data = encode_amount_payload(TOKEN_TRANSFER, amount)
    accounts = [
        AccountRef(source, AccountRole.WRITABLE),
        AccountRef(destination, AccountRole.WRITABLE),
        AccountRef(owner, AccountRole.READONLY_SIGNER),
    ]
    return _plan(TOKEN_PROGRAM_ID, accounts, data)


def memo_instruction(memo: str) -> InstructionPlan:
    if not isinstance(memo, str) or not memo:
        raise InvalidParamsError("memo must be a non-empty string")
    data = memo.encode("utf-8")
    if len(data) > MAX_MEMO_BYTES:
        raise InvalidParamsError(
            f"memo too long: {len(data)} bytes exceeds maximum {MAX_MEMO_BYTES}"
        )
    return _plan(MEMO_PROGRAM_ID, [], data)
