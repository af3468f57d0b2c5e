"""Fixed on-chain addresses used by the instruction encoders."""

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

SYSTEM_PROGRAM_ID = Pubkey.from_string("11111111111111111111111111111111")
TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
ASSOCIATED_TOKEN_PROGRAM_ID = Pubkey.from_string(
    "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"
)
MEMO_PROGRAM_ID = Pubkey.from_string("MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr")
RENT_SYSVAR = Pubkey.from_string("SysvarRent111111111111111111111111111111111")

# Solend main pool, USDC reserve.
SOLEND_PROGRAM_ID = Pubkey.from_string("So1endDq2YkqhipRh3WViPa8hdiSpxWy6z3Z6tMCpAo")
MAIN_POOL_MARKET = Pubkey.from_string("4UpD2fh7xH3VP9QQaXtsS1YY3bxzWhtfpks7FatyKvdY")
LENDING_MARKET_AUTHORITY = Pubkey.from_string(
    "DdZR6zRFiUt4S5mg7AV1uKB2z1f1WzcNYCaTEEWPAuby"
)
USDC_MINT = Pubkey.from_string("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v")
CUSDC_MINT = Pubkey.from_string("993dVFL2uXWYeoXuEBFXR4BijeXdTv4s6BzsCjJZuwqk")
USDC_RESERVE = Pubkey.from_string("BgxfHJDzm44T7XG68MYKx7YisTjZu73tVovyZSjJMpmw")
USDC_LIQUIDITY_SUPPLY = Pubkey.from_string(
    "8SheGtsopRUDzdiD6v6BR9a6bqZ9QwywYQY99Fp5meNf"
)
CUSDC_SUPPLY = Pubkey.from_string("UtRy8gcEu9fCkDuUrU8EmC7Uc6FZy5NCwttzG7i6nkw")

# Read-only accounts observed at positions 10 and 11 of mainnet deposits
# (reference tx 31MUMU8o...EYJ1Fc).
SOLEND_DEPOSIT_EXTRA_1 = Pubkey.from_string(
    "Gnt27xtC473ZT2Mw5u8wZ68Z3gULkSTb5DuxJy7eJotD"
)
SOLEND_DEPOSIT_EXTRA_2 = Pubkey.from_string(
    "CZx29wKMUxaJDq6aLVQTdViPL754tTR64NAgQBUGxxHb"
)

USDC_DECIMALS = 6
SOL_DECIMALS = 9
