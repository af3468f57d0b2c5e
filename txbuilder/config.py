"""Network configuration and transaction limits."""

from __future__ import annotations

from dataclasses import dataclass

SOLANA_RPC_URLS = {
    "mainnet-beta": "https://api.mainnet-beta.solana.com",
    "testnet": "https://api.testnet.solana.com",
    "devnet": "https://api.devnet.solana.com",
    "localnet": "http://localhost:8899",
}

JUPITER_ULTRA_API_URL = "https://lite-api.jup.ag/ultra/v1"


@dataclass(frozen=True)
class TransactionLimits:
    """Hard and advisory limits enforced on every assembled transaction."""

    max_size: int = 1232  # bytes, v0 packet ceiling
    size_warning_threshold: int = 1100  # ~90% of max_size
    max_instructions: int = 64
    instruction_warning_threshold: int = 10

    def __post_init__(self) -> None:
        if self.max_size <= 0:
            raise ValueError(f"max_size must be positive, got {self.max_size}")
        if self.max_instructions <= 0:
            raise ValueError(
                f"max_instructions must be positive, got {self.max_instructions}"
            )
        if not 0 <= self.size_warning_threshold <= self.max_size:
            raise ValueError(
                f"size_warning_threshold {self.size_warning_threshold} must be "
                f"between 0 and max_size {self.max_size}"
            )
        if not 0 <= self.instruction_warning_threshold <= self.max_instructions:
            raise ValueError(
                f"instruction_warning_threshold {self.instruction_warning_threshold} "
                f"must be between 0 and max_instructions {self.max_instructions}"
            )


DEFAULT_LIMITS = TransactionLimits()
