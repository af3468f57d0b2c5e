# Host-side modules (txbuilder.client, txbuilder.rpc, txbuilder.ultra) are
# not re-exported here so the builders stay free of network imports.
from txbuilder.amounts import (
    MAX_RAW_AMOUNT,
    is_amount_safe,
    max_safe_amount,
    to_decimal_string,
    to_raw_units,
    validate_raw_amount,
)
from txbuilder.config import DEFAULT_LIMITS, SOLANA_RPC_URLS, TransactionLimits
from txbuilder.context import SolendContext, SwapContext, TransferContext
from txbuilder.enclave import (
    build_protocol_transaction,
    is_supported_protocol,
    supported_protocols,
)
from txbuilder.errors import (
    AmountOverflowError,
    BufferOverflowError,
    InstructionCountError,
    InvalidAmountError,
    InvalidContextError,
    InvalidParamsError,
    InvalidTransactionError,
    MalformedAccountError,
    MissingContextError,
    TransactionTooLargeError,
    TxBuilderError,
    UnknownTokenError,
    UnsupportedOperationError,
    UnsupportedProtocolError,
)
from txbuilder.jupiter import build_swap_transaction
from txbuilder.metadata import BuildResult
from txbuilder.pda import (
    derive_associated_token_address,
    derive_associated_token_pda,
    derive_obligation_address,
)
from txbuilder.solend import build_deposit_transaction, build_withdraw_transaction
from txbuilder.state import (
    BoundsPolicy,
    LendingMarketRecord,
    ObligationDeposit,
    ObligationRecord,
    ReserveRecord,
)
from txbuilder.tokens import Token, resolve_token, supported_symbols
from txbuilder.transaction import (
    Lifetime,
    WireTransaction,
    assemble_transaction,
    decode_transaction,
    transaction_info,
    validate_instruction_count,
    validate_transaction_size,
)
from txbuilder.wallet import build_transfer_transaction

__all__ = [
    "MAX_RAW_AMOUNT",
    "is_amount_safe",
    "max_safe_amount",
    "to_decimal_string",
    "to_raw_units",
    "validate_raw_amount",
    "DEFAULT_LIMITS",
    "SOLANA_RPC_URLS",
    "TransactionLimits",
    "SolendContext",
    "SwapContext",
    "TransferContext",
    "build_protocol_transaction",
    "is_supported_protocol",
    "supported_protocols",
    "AmountOverflowError",
    "BufferOverflowError",
    "InstructionCountError",
    "InvalidAmountError",
    "InvalidContextError",
    "InvalidParamsError",
    "InvalidTransactionError",
    "MalformedAccountError",
    "MissingContextError",
    "TransactionTooLargeError",
    "TxBuilderError",
    "UnknownTokenError",
    "UnsupportedOperationError",
    "UnsupportedProtocolError",
    "build_swap_transaction",
    "BuildResult",
    "derive_associated_token_address",
    "derive_associated_token_pda",
    "derive_obligation_address",
    "build_deposit_transaction",
    "build_withdraw_transaction",
    "BoundsPolicy",
    "LendingMarketRecord",
    "ObligationDeposit",
    "ObligationRecord",
    "ReserveRecord",
    "Token",
    "resolve_token",
    "supported_symbols",
    "Lifetime",
    "WireTransaction",
    "assemble_transaction",
    "decode_transaction",
    "transaction_info",
    "validate_instruction_count",
    "validate_transaction_size",
    "build_transfer_transaction",
]
