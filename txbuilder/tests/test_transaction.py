import base64
import logging

import base58  # type: ignore[import-untyped]
import pytest
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.signature import Signature  # type: ignore[import-untyped]

from txbuilder.config import DEFAULT_LIMITS, TransactionLimits
from txbuilder.constants import MEMO_PROGRAM_ID
from txbuilder.errors import (
    InstructionCountError,
    InvalidContextError,
    InvalidTransactionError,
    TransactionTooLargeError,
)
from txbuilder.instructions import memo_instruction
from txbuilder.transaction import (
    Lifetime,
    assemble_transaction,
    decode_transaction,
    transaction_info,
    validate_instruction_count,
    validate_transaction_size,
)

WALLET = "4uQeVj5tqViQh7yWWGStvkEG1Zmhx6uasJtWCJziofM"
BLOCKHASH = base58.b58encode(bytes(range(32))).decode()

PAYER = Pubkey.from_string(WALLET)
LIFETIME = Lifetime(BLOCKHASH, 250_000_000)


class TestTransactionSize:
    def test_at_limit_accepted_with_warning(self):
        check = validate_transaction_size(bytes(1232))
        assert check.value == 1232
        assert check.limit == 1232
        assert "approaching the limit of 1232 bytes" in check.warning

    def test_over_limit_rejected(self):
        with pytest.raises(TransactionTooLargeError, match="1233 bytes exceeds maximum 1232 bytes") as exc:
            validate_transaction_size(bytes(1233), "Solend Deposit")
        assert exc.value.size == 1233
        assert exc.value.max_size == 1232
        assert "Solend Deposit" in str(exc.value)

    def test_below_threshold_no_warning(self):
        assert validate_transaction_size(bytes(1100)).warning is None

    def test_warning_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="txbuilder.transaction"):
            validate_transaction_size(bytes(1101), "Wallet Transfer")
        assert "[Wallet Transfer]" in caplog.text

    def test_base64_input(self):
        wire = base64.b64encode(bytes(300)).decode()
        assert validate_transaction_size(wire).value == 300

    def test_invalid_base64(self):
        with pytest.raises(InvalidTransactionError):
            validate_transaction_size("not base64!!")

    def test_invalid_type(self):
        with pytest.raises(InvalidTransactionError, match="expected base64 string or bytes"):
            validate_transaction_size(12345)

    def test_custom_limits(self):
        limits = TransactionLimits(max_size=200, size_warning_threshold=150)
        with pytest.raises(TransactionTooLargeError):
            validate_transaction_size(bytes(201), limits=limits)


class TestInstructionCount:
    def test_zero_rejected(self):
        with pytest.raises(InstructionCountError, match="0 instructions") as exc:
            validate_instruction_count(0)
        assert exc.value.count == 0
        assert exc.value.limit == 64

    def test_max_accepted(self):
        check = validate_instruction_count(64)
        assert check.value == 64
        assert check.warning is not None

    def test_over_max_rejected(self):
        with pytest.raises(InstructionCountError, match="65 exceeds maximum 64") as exc:
            validate_instruction_count(65)
        assert exc.value.count == 65
        assert exc.value.limit == 64

    @pytest.mark.parametrize("count", [-1, "3", 1.0, True, None])
    def test_invalid(self, count):
        with pytest.raises(InstructionCountError):
            validate_instruction_count(count)

    def test_warning_threshold(self):
        assert validate_instruction_count(10).warning is None
        assert "unusually high" in validate_instruction_count(11).warning


class TestLimits:
    def test_defaults(self):
        assert DEFAULT_LIMITS.max_size == 1232
        assert DEFAULT_LIMITS.size_warning_threshold == 1100
        assert DEFAULT_LIMITS.max_instructions == 64
        assert DEFAULT_LIMITS.instruction_warning_threshold == 10

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_size": 0},
            {"max_instructions": 0},
            {"size_warning_threshold": 2000},
            {"instruction_warning_threshold": 100},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            TransactionLimits(**kwargs)


class TestLifetime:
    def test_valid(self):
        assert bytes(LIFETIME.hash()) == bytes(range(32))

    @pytest.mark.parametrize("blockhash", ["", "0OIl", "abc", None])
    def test_invalid_blockhash(self, blockhash):
        with pytest.raises(InvalidContextError):
            Lifetime(blockhash, 1)

    @pytest.mark.parametrize("height", [-1, "100", 1.5, True])
    def test_invalid_height(self, height):
        with pytest.raises(InvalidContextError):
            Lifetime(BLOCKHASH, height)


class TestAssemble:
    def test_single_instruction(self):
        wire = assemble_transaction(PAYER, LIFETIME, [memo_instruction("hi")])
        assert wire.instruction_count == 1
        assert wire.size == len(wire.to_bytes())
        assert wire.warnings == ()

        tx = decode_transaction(wire.wire_transaction)
        assert tx.signatures == [Signature.default()]
        assert tx.message.account_keys[0] == PAYER
        assert bytes(tx.message.recent_blockhash) == bytes(range(32))

    def test_order_preserved(self):
        plans = [memo_instruction(f"m{i}") for i in range(4)]
        tx = decode_transaction(assemble_transaction(PAYER, LIFETIME, plans).wire_transaction)
        keys = tx.message.account_keys
        assert [bytes(ix.data) for ix in tx.message.instructions] == [b"m0", b"m1", b"m2", b"m3"]
        assert all(keys[ix.program_id_index] == MEMO_PROGRAM_ID for ix in tx.message.instructions)

    def test_max_instructions(self):
        plans = [memo_instruction("a")] * 64
        wire = assemble_transaction(PAYER, LIFETIME, plans)
        assert wire.instruction_count == 64
        assert any("unusually high" in w for w in wire.warnings)

    def test_too_many_instructions(self):
        with pytest.raises(InstructionCountError):
            assemble_transaction(PAYER, LIFETIME, [memo_instruction("a")] * 65)

    def test_no_instructions(self):
        with pytest.raises(InstructionCountError):
            assemble_transaction(PAYER, LIFETIME, [])

    def test_size_limit_enforced(self):
        limits = TransactionLimits(max_size=150, size_warning_threshold=100)
        with pytest.raises(TransactionTooLargeError, match="for Memo"):
            assemble_transaction(PAYER, LIFETIME, [memo_instruction("x" * 200)], "Memo", limits)


def test_transaction_info():
    info = transaction_info(bytes(616))
    assert info == {"size_in_bytes": 616, "size_limit": 1232, "percent_used": 50.0}
