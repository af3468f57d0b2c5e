"""Typed failures raised by the transaction builder.

Every error derives from ``TxBuilderError`` and from the closest builtin,
so callers that catch ``ValueError`` keep working.
"""

from __future__ import annotations


class TxBuilderError(Exception):
    """Base class for all builder failures."""


class InvalidAmountError(TxBuilderError, ValueError):
    pass


class AmountOverflowError(TxBuilderError, OverflowError):
    def __init__(self, message: str, amount: object, limit: object) -> None:
        super().__init__(message)
        self.amount = amount
        self.limit = limit


class MalformedAccountError(TxBuilderError, ValueError):
    pass


class BufferOverflowError(MalformedAccountError):
    def __init__(self, field: str, offset: int, length: int, buffer_length: int) -> None:
        super().__init__(
            f"buffer overflow reading {field}: tried to read {length} bytes at "
            f"offset {offset} (end: {offset + length}) but buffer length is "
            f"{buffer_length}"
        )
        self.field = field
        self.offset = offset
        self.length = length
        self.buffer_length = buffer_length


class UnsupportedOperationError(TxBuilderError, ValueError):
    pass


class UnsupportedProtocolError(UnsupportedOperationError):
    pass


class UnknownTokenError(TxBuilderError, ValueError):
    pass


class MissingContextError(TxBuilderError, ValueError):
    pass


class InvalidContextError(TxBuilderError, ValueError):
    pass


class InvalidParamsError(TxBuilderError, ValueError):
    pass


class InvalidTransactionError(TxBuilderError, ValueError):
    pass


class TransactionTooLargeError(TxBuilderError):
    def __init__(self, size: int, max_size: int, protocol_name: str = "transaction") -> None:
        super().__init__(
            f"transaction too large: {size} bytes exceeds maximum {max_size} "
            f"bytes for {protocol_name}"
        )
        self.size = size
        self.max_size = max_size


class InstructionCountError(TxBuilderError):
    def __init__(self, message: str, count: object, limit: int) -> None:
        super().__init__(message)
        self.count = count
        self.limit = limit
