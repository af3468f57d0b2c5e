"""Registry of tokens supported by the wallet transfer builder."""

from __future__ import annotations

import enum
from typing import Optional

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from txbuilder.errors import UnknownTokenError


class Token(enum.Enum):
    SOL = ("SOL", "Solana", 9, None)
    USDC = ("USDC", "USD Coin", 6, "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v")
    USDT = ("USDT", "Tether USD", 6, "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB")
    BONK = ("BONK", "Bonk", 5, "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263")

    def __init__(
        self, symbol: str, display_name: str, decimals: int, mint: Optional[str]
    ) -> None:
        self.symbol = symbol
        self.display_name = display_name
        self.decimals = decimals
        self.mint_address = mint

    @property
    def is_native(self) -> bool:
        return self.mint_address is None

    @property
    def mint(self) -> Optional[Pubkey]:
        if self.mint_address is None:
            return None
        return Pubkey.from_string(self.mint_address)

    @classmethod
    def from_symbol(cls, symbol: str) -> Token:
        if not isinstance(symbol, str):
            raise UnknownTokenError(f"unknown token: {symbol!r}")
        try:
            return cls[symbol.strip().upper()]
        except KeyError:
            raise UnknownTokenError(
                f"unknown token: {symbol}. Supported: {', '.join(supported_symbols())}"
            ) from None

    @classmethod
    def from_mint(cls, mint: str | Pubkey) -> Token:
        text = str(mint)
        for token in cls:
            if token.mint_address is not None and token.mint_address == text:
                return token
        raise UnknownTokenError(f"unknown token mint: {text}")


def resolve_token(
    symbol: Optional[str] = None, mint: Optional[str | Pubkey] = None
) -> Optional[Token]:
    """Resolve a transfer's token; ``None`` when neither key is given (native SOL).

    When both are given they must name the same token.
    """
    if symbol:
        token = Token.from_symbol(symbol)
        if mint and token.mint_address != str(mint):
            raise UnknownTokenError(
                f"token symbol {token.symbol} does not match mint {mint}"
            )
        return token
    if mint:
        return Token.from_mint(mint)
    return None


def supported_symbols() -> list[str]:
    return [token.symbol for token in Token]
