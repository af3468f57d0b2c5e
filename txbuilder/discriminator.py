"""Instruction discriminators for the programs the encoders target.

Values are the programs' published instruction tags, not derived at
runtime. Solend tags come from the LendingInstruction enum in
solendprotocol/solana-program-library.
"""

import struct

# Solend (u8 tag)
SOLEND_INIT_OBLIGATION = 7
SOLEND_WITHDRAW_OBLIGATION_COLLATERAL = 9
SOLEND_DEPOSIT_OBLIGATION_COLLATERAL = 10
SOLEND_DEPOSIT_RESERVE_LIQUIDITY_AND_OBLIGATION_COLLATERAL = 14
SOLEND_WITHDRAW_OBLIGATION_COLLATERAL_AND_REDEEM_RESERVE_COLLATERAL = 15

# System program (u32 tag)
SYSTEM_TRANSFER = 2

# SPL token program (u8 tag)
TOKEN_TRANSFER = 3

AMOUNT_PAYLOAD_SIZE = 9  # u8 tag + u64 amount
SYSTEM_TRANSFER_PAYLOAD_SIZE = 12  # u32 tag + u64 lamports


def read_discriminator(data: bytes) -> int:
    """Return the leading u8 tag of an instruction payload."""
    if len(data) < 1:
        raise ValueError("instruction data is empty, no discriminator present")
    return data[0]


def read_amount(data: bytes) -> int:
    """Decode the u64 amount from a 9-byte tag+amount payload."""
    if len(data) != AMOUNT_PAYLOAD_SIZE:
        raise ValueError(
            f"invalid amount payload: got {len(data)} bytes, want {AMOUNT_PAYLOAD_SIZE}"
        )
    return struct.unpack_from("<Q", data, 1)[0]
