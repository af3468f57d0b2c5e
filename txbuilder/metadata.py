"""Human-readable records returned alongside each built transaction."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional, Union

from txbuilder.transaction import WireTransaction


@dataclass(frozen=True)
class LendingMetadata:
    amount: str
    amount_raw: str
    token_symbol: str
    token_mint: str
    account: str  # obligation


@dataclass(frozen=True)
class TransferMetadata:
    sender: str
    recipient: str
    amount: str
    amount_raw: str
    symbol: str
    mint: Optional[str] = None
    memo: Optional[str] = None


@dataclass(frozen=True)
class SwapMetadata:
    route: Mapping[str, Any] = field(default_factory=dict)
    fees: Mapping[str, Any] = field(default_factory=dict)
    router: Optional[str] = None
    request_id: Optional[str] = None


Metadata = Union[LendingMetadata, TransferMetadata, SwapMetadata]


@dataclass(frozen=True)
class BuildResult:
    protocol: str
    operation: str
    transaction: WireTransaction
    metadata: Metadata

    @property
    def wire_transaction(self) -> str:
        return self.transaction.wire_transaction

    def to_dict(self) -> dict:
        return {
            "wire_transaction": self.transaction.wire_transaction,
            "size": self.transaction.size,
            "warnings": list(self.transaction.warnings),
            self.operation: asdict(self.metadata),
        }
