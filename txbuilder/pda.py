"""Deterministic address derivation for token and lending accounts."""

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from txbuilder.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    MAIN_POOL_MARKET,
    SOLEND_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)

MAX_SEED_LEN = 32


def derive_associated_token_pda(owner: Pubkey, mint: Pubkey) -> tuple[Pubkey, int]:
    return Pubkey.find_program_address(
        [bytes(owner), bytes(TOKEN_PROGRAM_ID), bytes(mint)],
        ASSOCIATED_TOKEN_PROGRAM_ID,
    )


def derive_associated_token_address(owner: Pubkey, mint: Pubkey) -> Pubkey:
    addr, _ = derive_associated_token_pda(owner, mint)
    return addr


def obligation_seed(market: Pubkey) -> str:
    """Seed string for a market's obligations: its base58 text cut to 32 chars."""
    return str(market)[:MAX_SEED_LEN]


def derive_obligation_address(
    owner: Pubkey,
    market: Pubkey = MAIN_POOL_MARKET,
    program_id: Pubkey = SOLEND_PROGRAM_ID,
) -> Pubkey:
    """Derive a user's obligation address using create-with-seed."""
    return Pubkey.create_with_seed(owner, obligation_seed(market), program_id)
