import struct

import pytest
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from txbuilder.constants import MEMO_PROGRAM_ID, SYSTEM_PROGRAM_ID, TOKEN_PROGRAM_ID, USDC_MINT
from txbuilder.errors import (
    InvalidAmountError,
    InvalidParamsError,
    MissingContextError,
    UnknownTokenError,
    UnsupportedOperationError,
)
from txbuilder.pda import derive_associated_token_address
from txbuilder.transaction import decode_transaction
from txbuilder.wallet import build_transfer_transaction, build_wallet_transaction


@pytest.fixture
def token_prepared(lifetime, wallet, recipient) -> dict:
    return {
        "lifetime": lifetime,
        "sender_token_account": str(
            derive_associated_token_address(Pubkey.from_string(wallet), USDC_MINT)
        ),
        "recipient_token_account": str(
            derive_associated_token_address(Pubkey.from_string(recipient), USDC_MINT)
        ),
    }


def _instructions(result):
    msg = decode_transaction(result.wire_transaction).message
    return msg, [(msg.account_keys[ix.program_id_index], ix) for ix in msg.instructions]


class TestSolTransfer:
    def test_native_transfer(self, wallet, recipient, lifetime):
        result = build_transfer_transaction(wallet, recipient, 0.5, {"lifetime": lifetime})
        msg, ixs = _instructions(result)
        assert len(ixs) == 1
        program, ix = ixs[0]
        assert program == SYSTEM_PROGRAM_ID
        assert bytes(ix.data) == struct.pack("<IQ", 2, 500_000_000)
        assert msg.account_keys[0] == Pubkey.from_string(wallet)
        assert result.metadata.amount == "0.5"
        assert result.metadata.amount_raw == "500000000"
        assert result.metadata.symbol == "SOL"
        assert result.metadata.mint is None

    def test_sol_symbol_uses_system_transfer(self, wallet, recipient, lifetime):
        result = build_transfer_transaction(
            wallet, recipient, "1", {"lifetime": lifetime}, symbol="sol"
        )
        _, ixs = _instructions(result)
        assert ixs[0][0] == SYSTEM_PROGRAM_ID

    def test_memo_follows_transfer(self, wallet, recipient, lifetime):
        result = build_transfer_transaction(
            wallet, recipient, 1, {"lifetime": lifetime}, memo="rent for march"
        )
        _, ixs = _instructions(result)
        assert [p for p, _ in ixs] == [SYSTEM_PROGRAM_ID, MEMO_PROGRAM_ID]
        assert bytes(ixs[1][1].data) == b"rent for march"
        assert result.metadata.memo == "rent for march"
        assert result.transaction.instruction_count == 2


class TestTokenTransfer:
    def test_usdc_transfer(self, wallet, recipient, token_prepared):
        result = build_transfer_transaction(
            wallet, recipient, "12.5", token_prepared, symbol="USDC"
        )
        _, ixs = _instructions(result)
        program, ix = ixs[0]
        assert program == TOKEN_PROGRAM_ID
        assert bytes(ix.data) == bytes([3]) + struct.pack("<Q", 12_500_000)
        assert len(ix.accounts) == 3
        assert result.metadata.symbol == "USDC"
        assert result.metadata.mint == str(USDC_MINT)
        assert result.metadata.amount == "12.5"

    def test_resolve_by_mint(self, wallet, recipient, token_prepared):
        result = build_transfer_transaction(
            wallet, recipient, 1, token_prepared, mint=str(USDC_MINT)
        )
        assert result.metadata.symbol == "USDC"

    def test_missing_token_accounts(self, wallet, recipient, lifetime):
        with pytest.raises(MissingContextError, match="token accounts must be provided"):
            build_transfer_transaction(
                wallet, recipient, 1, {"lifetime": lifetime}, symbol="USDC"
            )

    def test_unknown_token(self, wallet, recipient, token_prepared):
        with pytest.raises(UnknownTokenError, match="DOGE"):
            build_transfer_transaction(wallet, recipient, 1, token_prepared, symbol="DOGE")

    def test_symbol_mint_mismatch(self, wallet, recipient, token_prepared):
        with pytest.raises(UnknownTokenError):
            build_transfer_transaction(
                wallet, recipient, 1, token_prepared, symbol="USDT", mint=str(USDC_MINT)
            )


class TestValidation:
    def test_invalid_amount(self, wallet, recipient, lifetime):
        with pytest.raises(InvalidAmountError):
            build_transfer_transaction(wallet, recipient, "-1", {"lifetime": lifetime})

    def test_invalid_recipient(self, wallet, lifetime):
        with pytest.raises(InvalidParamsError, match="recipient"):
            build_transfer_transaction(wallet, "xyz", 1, {"lifetime": lifetime})


class TestDispatch:
    def test_params(self, wallet, recipient, lifetime):
        result = build_wallet_transaction(
            wallet,
            {"recipient": recipient, "amount": "0.25", "memo": "hi"},
            {"lifetime": lifetime},
        )
        assert result.operation == "transfer"
        assert result.metadata.amount == "0.25"
        assert result.to_dict()["transfer"]["memo"] == "hi"

    def test_missing_recipient(self, wallet, lifetime):
        with pytest.raises(InvalidParamsError, match="recipient"):
            build_wallet_transaction(wallet, {"amount": 1}, {"lifetime": lifetime})

    def test_unknown_operation(self, wallet, recipient, lifetime):
        with pytest.raises(UnsupportedOperationError):
            build_wallet_transaction(
                wallet, {"operation": "stake", "recipient": recipient}, {"lifetime": lifetime}
            )
