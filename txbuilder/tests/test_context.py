import base64

import pytest
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from txbuilder.context import SolendContext, SwapContext, TransferContext, account_bytes
from txbuilder.errors import (
    InvalidContextError,
    MalformedAccountError,
    MissingContextError,
    UnknownTokenError,
)
from txbuilder.state import LendingMarketRecord, ReserveRecord
from txbuilder.tokens import Token, resolve_token, supported_symbols


class TestSolendContext:
    def test_from_dict(self, solend_prepared):
        ctx = SolendContext.from_dict(solend_prepared)
        assert ctx.user_usdc_ata == Pubkey.from_string(solend_prepared["user_usdc_ata"])
        assert ctx.lifetime.last_valid_block_height == 250_000_000
        assert ctx.obligation_exists is True
        assert ctx.reserve is None

    def test_flags_default_false(self, solend_prepared):
        for key in ("usdc_ata_exists", "cusdc_ata_exists", "obligation_exists"):
            del solend_prepared[key]
        ctx = SolendContext.from_dict(solend_prepared)
        assert not (ctx.usdc_ata_exists or ctx.cusdc_ata_exists or ctx.obligation_exists)

    def test_flag_must_be_bool(self, solend_prepared):
        solend_prepared["usdc_ata_exists"] = "yes"
        with pytest.raises(InvalidContextError, match="usdc_ata_exists"):
            SolendContext.from_dict(solend_prepared)

    def test_accounts_parsed(self, solend_prepared):
        solend_prepared["accounts"] = {
            "reserve": {"data": base64.b64encode(bytes(619)).decode()},
            "lending_market": {"data": list(bytes(258))},
        }
        ctx = SolendContext.from_dict(solend_prepared)
        assert isinstance(ctx.reserve, ReserveRecord)
        assert isinstance(ctx.lending_market, LendingMarketRecord)

    def test_short_reserve_rejected(self, solend_prepared):
        solend_prepared["accounts"] = {"reserve": {"data": bytes(100)}}
        with pytest.raises(MalformedAccountError, match="reserve account"):
            SolendContext.from_dict(solend_prepared)

    def test_missing_lifetime(self, solend_prepared):
        del solend_prepared["lifetime"]
        with pytest.raises(MissingContextError, match="lifetime"):
            SolendContext.from_dict(solend_prepared)

    def test_missing_blockhash(self, solend_prepared):
        solend_prepared["lifetime"] = {"last_valid_block_height": 1}
        with pytest.raises(MissingContextError, match="blockhash"):
            SolendContext.from_dict(solend_prepared)

    def test_invalid_address(self, solend_prepared):
        solend_prepared["user_cusdc_ata"] = "not base58 0OIl"
        with pytest.raises(InvalidContextError, match="user_cusdc_ata"):
            SolendContext.from_dict(solend_prepared)

    def test_not_a_mapping(self):
        with pytest.raises(InvalidContextError, match="mapping"):
            SolendContext.from_dict(["lifetime"])

    def test_coerce_passthrough(self, solend_prepared):
        ctx = SolendContext.from_dict(solend_prepared)
        assert SolendContext.coerce(ctx) is ctx


class TestTransferContext:
    def test_optional_accounts(self, lifetime):
        ctx = TransferContext.from_dict({"lifetime": lifetime})
        assert ctx.sender_token_account is None
        assert ctx.recipient_token_account is None


class TestSwapContext:
    def test_defaults(self):
        ctx = SwapContext.from_dict({"transaction": "AAAA"})
        assert ctx.route == {}
        assert ctx.router is None

    def test_empty_transaction(self):
        with pytest.raises(MissingContextError):
            SwapContext.from_dict({"transaction": ""})


class TestAccountBytes:
    def test_formats(self):
        assert account_bytes(b"\x01\x02", "x") == b"\x01\x02"
        assert account_bytes([1, 2], "x") == b"\x01\x02"
        assert account_bytes("AQI=", "x") == b"\x01\x02"

    @pytest.mark.parametrize("value", ["%%%", [256], 12, None])
    def test_invalid(self, value):
        with pytest.raises(MalformedAccountError):
            account_bytes(value, "x")


class TestTokens:
    def test_from_symbol_case_insensitive(self):
        assert Token.from_symbol("usdc") is Token.USDC

    def test_from_mint(self):
        assert Token.from_mint("DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263") is Token.BONK

    def test_unknown(self):
        with pytest.raises(UnknownTokenError, match="Supported: SOL, USDC, USDT, BONK"):
            Token.from_symbol("DOGE")

    def test_resolve_none(self):
        assert resolve_token() is None

    def test_native(self):
        assert Token.SOL.is_native
        assert Token.SOL.mint is None
        assert Token.USDC.decimals == 6

    def test_supported_symbols(self):
        assert supported_symbols() == ["SOL", "USDC", "USDT", "BONK"]
