"""Network-free entry point for building protocol transactions.

Only the pure builders are reachable from here; nothing in this module's
import graph performs RPC or HTTP calls.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from txbuilder.config import DEFAULT_LIMITS, TransactionLimits
from txbuilder.errors import UnsupportedProtocolError
from txbuilder.jupiter import build_jupiter_transaction
from txbuilder.metadata import BuildResult
from txbuilder.solend import build_solend_transaction
from txbuilder.wallet import build_wallet_transaction

Builder = Callable[..., BuildResult]

BUILDERS: Mapping[str, Builder] = {
    "solend": build_solend_transaction,
    "jupiter": build_jupiter_transaction,
    "wallet": build_wallet_transaction,
}


def supported_protocols() -> list[str]:
    return list(BUILDERS)


def is_supported_protocol(protocol: str) -> bool:
    return protocol in BUILDERS


def build_protocol_transaction(
    protocol: str,
    wallet: str,
    params: Mapping[str, Any],
    prepared: Any,
    limits: TransactionLimits = DEFAULT_LIMITS,
) -> BuildResult:
    """Dispatch to the builder registered for ``protocol``."""
    builder = BUILDERS.get(protocol)
    if builder is None:
        raise UnsupportedProtocolError(
            f"unsupported protocol: {protocol}. Available: {', '.join(BUILDERS)}"
        )
    return builder(wallet, params, prepared, limits)
