"""Client tests against an in-memory RPC stub."""

import struct
from types import SimpleNamespace

from solders.hash import Hash  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from txbuilder.client import Client
from txbuilder.constants import MAIN_POOL_MARKET, USDC_MINT, USDC_RESERVE
from txbuilder.pda import derive_associated_token_address, derive_obligation_address

WALLET = Pubkey.from_string("4uQeVj5tqViQh7yWWGStvkEG1Zmhx6uasJtWCJziofM")
RECIPIENT = Pubkey.from_string("dzrevZC94tBLwuHw1dyynZxaXTWyp7yocsinyEVPtt4")


def _resp(value):
    return SimpleNamespace(value=value)


def _account(data: bytes):
    return SimpleNamespace(data=data)


def _obligation(amount: int) -> bytes:
    buf = bytearray(204 + 112)
    buf[202:204] = struct.pack("<H", 1)
    buf[236:244] = struct.pack("<Q", amount)
    return bytes(buf)


class FakeRPC:
    def __init__(self, accounts=None, balance=0, token_accounts=()):
        self.accounts = accounts or {}
        self.balance = balance
        self.token_accounts = list(token_accounts)
        self.multiple_requests = []

    def get_latest_blockhash(self, commitment=None):
        return _resp(SimpleNamespace(blockhash=Hash(bytes(range(32))), last_valid_block_height=42))

    def get_account_info(self, pubkey, commitment=None, encoding="base64"):
        data = self.accounts.get(pubkey)
        return _resp(None if data is None else _account(data))

    def get_multiple_accounts(self, pubkeys, commitment=None, encoding="base64"):
        self.multiple_requests.append(list(pubkeys))
        return _resp([None if pk not in self.accounts else _account(self.accounts[pk]) for pk in pubkeys])

    def get_balance(self, pubkey, commitment=None):
        return _resp(self.balance)

    def get_token_accounts_by_owner_json_parsed(self, owner, opts, commitment=None):
        return _resp(self.token_accounts)


def test_prepare_solend_context():
    obligation = derive_obligation_address(WALLET)
    rpc = FakeRPC(
        accounts={
            USDC_RESERVE: bytes(619),
            MAIN_POOL_MARKET: bytes(258),
            obligation: _obligation(0),
        }
    )
    ctx = Client(rpc).prepare_solend_context(WALLET)

    assert bytes(ctx.lifetime.hash()) == bytes(range(32))
    assert ctx.lifetime.last_valid_block_height == 42
    assert ctx.user_usdc_ata == derive_associated_token_address(WALLET, USDC_MINT)
    assert ctx.obligation_account == obligation
    assert ctx.obligation_exists is True
    assert ctx.usdc_ata_exists is False
    assert ctx.reserve is not None and ctx.lending_market is not None
    assert rpc.multiple_requests == [[ctx.user_usdc_ata, ctx.user_cusdc_ata, obligation]]


def test_prepare_transfer_context_native():
    ctx = Client(FakeRPC()).prepare_transfer_context(WALLET, RECIPIENT)
    assert ctx.sender_token_account is None
    assert ctx.recipient_token_account is None


def test_prepare_transfer_context_token():
    ctx = Client(FakeRPC()).prepare_transfer_context(WALLET, RECIPIENT, symbol="USDC")
    assert ctx.sender_token_account == derive_associated_token_address(WALLET, USDC_MINT)
    assert ctx.recipient_token_account == derive_associated_token_address(RECIPIENT, USDC_MINT)


def test_fetch_position():
    obligation = derive_obligation_address(WALLET)
    position = Client(FakeRPC(accounts={obligation: _obligation(1_500_000)})).fetch_position(WALLET)
    assert position.exists
    assert position.obligation == str(obligation)
    assert position.deposited_raw == 1_500_000
    assert position.deposited == "1.5"


def test_fetch_position_missing():
    position = Client(FakeRPC()).fetch_position(WALLET)
    assert not position.exists
    assert position.deposited == "0"


def test_fetch_token_balance_sol():
    balance = Client(FakeRPC(balance=2_500_000_000)).fetch_token_balance(WALLET, "sol")
    assert balance.symbol == "SOL"
    assert balance.amount == "2.5"
    assert balance.amount_raw == "2500000000"
    assert balance.mint is None


def test_fetch_token_balance_usdc():
    parsed = {"info": {"tokenAmount": {"amount": "1234500", "decimals": 6}}}
    token_account = SimpleNamespace(account=SimpleNamespace(data=SimpleNamespace(parsed=parsed)))
    balance = Client(FakeRPC(token_accounts=[token_account])).fetch_token_balance(WALLET, "USDC")
    assert balance.amount == "1.2345"
    assert balance.mint == str(USDC_MINT)


def test_fetch_token_balance_no_account():
    balance = Client(FakeRPC()).fetch_token_balance(WALLET, "BONK")
    assert balance.amount == "0"
    assert balance.decimals == 5


def test_fetch_token_balances_skips_unknown():
    balances = Client(FakeRPC(balance=1)).fetch_token_balances(WALLET, ["SOL", "DOGE"])
    assert list(balances) == ["SOL"]
