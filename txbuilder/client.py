"""Host-side context preparation over Solana RPC.

Fetches the blockhash and account data the builders need, derives the
user's addresses, and hands back a prepared context. This module performs
network I/O and must not be imported by ``txbuilder.enclave``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence

from solana.rpc.commitment import Finalized  # type: ignore[import-untyped]
from solana.rpc.types import TokenAccountOpts  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from txbuilder.amounts import to_decimal_string
from txbuilder.config import SOLANA_RPC_URLS
from txbuilder.constants import (
    CUSDC_MINT,
    MAIN_POOL_MARKET,
    USDC_DECIMALS,
    USDC_MINT,
    USDC_RESERVE,
)
from txbuilder.context import SolendContext, TransferContext
from txbuilder.pda import derive_associated_token_address, derive_obligation_address
from txbuilder.rpc import new_rpc_client
from txbuilder.state import LendingMarketRecord, ObligationRecord, ReserveRecord
from txbuilder.tokens import Token, resolve_token
from txbuilder.transaction import Lifetime

logger = logging.getLogger(__name__)


class SolanaClient(Protocol):
    def get_latest_blockhash(self, commitment: Any = None) -> Any: ...

    def get_account_info(self, pubkey: Pubkey, commitment: Any = None, encoding: str = "base64") -> Any: ...

    def get_multiple_accounts(self, pubkeys: Sequence[Pubkey], commitment: Any = None, encoding: str = "base64") -> Any: ...

    def get_balance(self, pubkey: Pubkey, commitment: Any = None) -> Any: ...

    def get_token_accounts_by_owner_json_parsed(self, owner: Pubkey, opts: Any, commitment: Any = None) -> Any: ...


@dataclass(frozen=True)
class Position:
    obligation: str
    exists: bool
    deposited_raw: int
    deposited: str  # USDC


@dataclass(frozen=True)
class TokenBalance:
    symbol: str
    amount: str
    amount_raw: str
    decimals: int
    mint: Optional[str] = None


class Client:
    """Prepares builder context from live chain state."""

    def __init__(self, solana_rpc: SolanaClient) -> None:
        self._rpc = solana_rpc

    @classmethod
    def from_env(cls, env: str = "mainnet-beta") -> Client:
        """Create a client for ``env``; ``SOLANA_RPC_URL`` overrides the default URL."""
        url = os.environ.get("SOLANA_RPC_URL") or SOLANA_RPC_URLS[env]
        return cls(new_rpc_client(url))

    @classmethod
    def mainnet_beta(cls) -> Client:
        return cls(new_rpc_client(SOLANA_RPC_URLS["mainnet-beta"]))

    @classmethod
    def devnet(cls) -> Client:
        return cls(new_rpc_client(SOLANA_RPC_URLS["devnet"]))

    @classmethod
    def localnet(cls) -> Client:
        return cls(new_rpc_client(SOLANA_RPC_URLS["localnet"]))

    # -- Context preparation --

    def fetch_lifetime(self) -> Lifetime:
        resp = self._rpc.get_latest_blockhash(commitment=Finalized)
        return Lifetime(
            blockhash=str(resp.value.blockhash),
            last_valid_block_height=resp.value.last_valid_block_height,
        )

    def prepare_solend_context(self, wallet: Pubkey) -> SolendContext:
        lifetime = self.fetch_lifetime()

        reserve = ReserveRecord.from_bytes(self._fetch_account_data(USDC_RESERVE))
        lending_market = LendingMarketRecord.from_bytes(
            self._fetch_account_data(MAIN_POOL_MARKET)
        )

        user_usdc_ata = derive_associated_token_address(wallet, USDC_MINT)
        user_cusdc_ata = derive_associated_token_address(wallet, CUSDC_MINT)
        obligation = derive_obligation_address(wallet)

        usdc_exists, cusdc_exists, obligation_exists = self._accounts_exist(
            [user_usdc_ata, user_cusdc_ata, obligation]
        )
        return SolendContext(
            lifetime=lifetime,
            user_usdc_ata=user_usdc_ata,
            user_cusdc_ata=user_cusdc_ata,
            obligation_account=obligation,
            usdc_ata_exists=usdc_exists,
            cusdc_ata_exists=cusdc_exists,
            obligation_exists=obligation_exists,
            reserve=reserve,
            lending_market=lending_market,
        )

    def prepare_transfer_context(
        self,
        wallet: Pubkey,
        recipient: Pubkey,
        symbol: Optional[str] = None,
        mint: Optional[str] = None,
    ) -> TransferContext:
        lifetime = self.fetch_lifetime()
        token = resolve_token(symbol, mint)
        if token is None or token.is_native:
            return TransferContext(lifetime=lifetime)
        return TransferContext(
            lifetime=lifetime,
            sender_token_account=derive_associated_token_address(wallet, token.mint),
            recipient_token_account=derive_associated_token_address(
                recipient, token.mint
            ),
        )

    # -- Queries --

    def fetch_position(self, wallet: Pubkey) -> Position:
        """Look up the wallet's Solend USDC position."""
        obligation = derive_obligation_address(wallet)
        resp = self._rpc.get_account_info(obligation, encoding="base64")
        if resp.value is None:
            return Position(str(obligation), False, 0, "0")
        record = ObligationRecord.from_bytes(bytes(resp.value.data))
        deposited = record.total_deposited
        return Position(
            obligation=str(obligation),
            exists=True,
            deposited_raw=deposited,
            deposited=to_decimal_string(deposited, USDC_DECIMALS, "USDC"),
        )

    def fetch_token_balance(self, wallet: Pubkey, symbol: str) -> TokenBalance:
        token = Token.from_symbol(symbol)
        if token.is_native:
            lamports = self._rpc.get_balance(wallet).value
            return TokenBalance(
                symbol=token.symbol,
                amount=to_decimal_string(lamports, token.decimals, token.symbol),
                amount_raw=str(lamports),
                decimals=token.decimals,
            )

        resp = self._rpc.get_token_accounts_by_owner_json_parsed(
            wallet, TokenAccountOpts(mint=token.mint)
        )
        if not resp.value:
            return TokenBalance(token.symbol, "0", "0", token.decimals, token.mint_address)
        info = resp.value[0].account.data.parsed["info"]["tokenAmount"]
        return TokenBalance(
            symbol=token.symbol,
            amount=to_decimal_string(info["amount"], info["decimals"], token.symbol),
            amount_raw=info["amount"],
            decimals=info["decimals"],
            mint=token.mint_address,
        )

    def fetch_token_balances(self, wallet: Pubkey, symbols: Optional[Sequence[str]] = None) -> dict[str, TokenBalance]:
        """Balances for ``symbols`` (all supported tokens by default).

        Tokens whose lookup fails are logged and left out.
        """
        balances = {}
        for symbol in symbols or [t.symbol for t in Token]:
            try:
                balances[symbol] = self.fetch_token_balance(wallet, symbol)
            except Exception as e:
                logger.error("failed to fetch %s balance: %s", symbol, e)
        return balances

    # -- Internal helpers --

    def _fetch_account_data(self, addr: Pubkey) -> bytes:
        resp = self._rpc.get_account_info(addr, encoding="base64")
        if resp.value is None:
            raise ValueError(f"account not found: {addr}")
        return bytes(resp.value.data)

    def _accounts_exist(self, addrs: Sequence[Pubkey]) -> list[bool]:
        resp = self._rpc.get_multiple_accounts(list(addrs))
        return [acct is not None for acct in resp.value]
