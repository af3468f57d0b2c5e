"""On-chain account layouts for the Solend lending program.

Fields are read at fixed offsets from the Solend v1 account structs. Only
the fields the builders and the positions query need are decoded; the
parsers tolerate extra trailing bytes for forward compatibility. Public
keys are returned as raw 32-byte slices.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from txbuilder.errors import BufferOverflowError, MalformedAccountError
from txbuilder.reader import AccountReader

logger = logging.getLogger(__name__)


class BoundsPolicy(enum.Enum):
    """How a parser reacts when a sub-structure does not fit its buffer."""

    FAIL_LOUD = "fail_loud"
    DEGRADE_TO_EMPTY = "degrade_to_empty"


# ---------------------------------------------------------------------------
# Reserve
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReserveRecord:
    version: int  # u8
    liquidity_supply: bytes  # 32 bytes
    collateral_mint: bytes  # 32 bytes
    collateral_supply: bytes  # 32 bytes

    VERSION_OFFSET = 0
    LIQUIDITY_SUPPLY_OFFSET = 74
    COLLATERAL_MINT_OFFSET = 221
    COLLATERAL_SUPPLY_OFFSET = 253
    MIN_SIZE = 619

    @classmethod
    def from_bytes(cls, data: bytes) -> ReserveRecord:
        r = AccountReader(data, "reserve account")
        r.require_min_size(cls.MIN_SIZE)
        return cls(
            version=r.read_u8(cls.VERSION_OFFSET, "version"),
            liquidity_supply=r.read_pubkey_raw(
                cls.LIQUIDITY_SUPPLY_OFFSET, "liquidity_supply"
            ),
            collateral_mint=r.read_pubkey_raw(
                cls.COLLATERAL_MINT_OFFSET, "collateral_mint"
            ),
            collateral_supply=r.read_pubkey_raw(
                cls.COLLATERAL_SUPPLY_OFFSET, "collateral_supply"
            ),
        )


# ---------------------------------------------------------------------------
# Lending market
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LendingMarketRecord:
    version: int  # u8
    bump_seed: int  # u8
    owner: bytes  # 32 bytes

    VERSION_OFFSET = 0
    BUMP_SEED_OFFSET = 1
    OWNER_OFFSET = 2
    MIN_SIZE = 258

    @classmethod
    def from_bytes(cls, data: bytes) -> LendingMarketRecord:
        r = AccountReader(data, "lending market account")
        r.require_min_size(cls.MIN_SIZE)
        return cls(
            version=r.read_u8(cls.VERSION_OFFSET, "version"),
            bump_seed=r.read_u8(cls.BUMP_SEED_OFFSET, "bump_seed"),
            owner=r.read_pubkey_raw(cls.OWNER_OFFSET, "owner"),
        )


# ---------------------------------------------------------------------------
# Obligation
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ObligationDeposit:
    deposit_reserve: bytes  # 32 bytes
    deposited_amount: int  # u64

    STRUCT_SIZE = 112
    RESERVE_OFFSET = 0
    AMOUNT_OFFSET = 32


@dataclass(frozen=True)
class ObligationRecord:
    version: int  # u8
    last_update_slot: int  # u64
    lending_market: bytes  # 32 bytes
    owner: bytes  # 32 bytes
    deposits: tuple[ObligationDeposit, ...] = field(default_factory=tuple)

    VERSION_OFFSET = 0
    LAST_UPDATE_SLOT_OFFSET = 1
    LENDING_MARKET_OFFSET = 10
    OWNER_OFFSET = 42
    DEPOSITS_LEN_OFFSET = 202  # u16
    DEPOSITS_OFFSET = 204
    MAX_DEPOSITS = 10
    MIN_SIZE = 204

    @property
    def total_deposited(self) -> int:
        """Deposited amount of the first collateral entry (the USDC position)."""
        if not self.deposits:
            return 0
        return self.deposits[0].deposited_amount

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        deposits_policy: BoundsPolicy = BoundsPolicy.DEGRADE_TO_EMPTY,
    ) -> ObligationRecord:
        r = AccountReader(data, "obligation account")
        r.require_min_size(cls.MIN_SIZE)
        return cls(
            version=r.read_u8(cls.VERSION_OFFSET, "version"),
            last_update_slot=r.read_u64(cls.LAST_UPDATE_SLOT_OFFSET, "last_update_slot"),
            lending_market=r.read_pubkey_raw(cls.LENDING_MARKET_OFFSET, "lending_market"),
            owner=r.read_pubkey_raw(cls.OWNER_OFFSET, "owner"),
            deposits=cls._read_deposits(r, deposits_policy),
        )

    @classmethod
    def _read_deposits(
        cls, r: AccountReader, policy: BoundsPolicy
    ) -> tuple[ObligationDeposit, ...]:
        count = r.read_u16(cls.DEPOSITS_LEN_OFFSET, "deposits_len")
        if count == 0:
            return ()

        if count > cls.MAX_DEPOSITS:
            msg = f"deposits length {count} exceeds maximum {cls.MAX_DEPOSITS}"
            if policy is BoundsPolicy.FAIL_LOUD:
                raise MalformedAccountError(f"invalid obligation account data: {msg}")
            logger.warning("obligation: %s, returning no deposits", msg)
            return ()

        required = cls.DEPOSITS_OFFSET + count * ObligationDeposit.STRUCT_SIZE
        if not r.fits(0, required):
            if policy is BoundsPolicy.FAIL_LOUD:
                raise BufferOverflowError(
                    "deposits",
                    cls.DEPOSITS_OFFSET,
                    count * ObligationDeposit.STRUCT_SIZE,
                    len(r),
                )
            logger.warning(
                "obligation: buffer too small for %d deposits: need %d bytes, "
                "have %d bytes, returning no deposits",
                count,
                required,
                len(r),
            )
            return ()

        deposits = []
        for i in range(count):
            base = cls.DEPOSITS_OFFSET + i * ObligationDeposit.STRUCT_SIZE
            deposits.append(
                ObligationDeposit(
                    deposit_reserve=r.read_pubkey_raw(
                        base + ObligationDeposit.RESERVE_OFFSET,
                        f"deposits[{i}].deposit_reserve",
                    ),
                    deposited_amount=r.read_u64(
                        base + ObligationDeposit.AMOUNT_OFFSET,
                        f"deposits[{i}].deposited_amount",
                    ),
                )
            )
        return tuple(deposits)
