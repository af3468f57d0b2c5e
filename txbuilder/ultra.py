"""Jupiter Ultra order client."""

from __future__ import annotations

import base64
import binascii
import logging
import os
from typing import Any, Optional

import httpx

from txbuilder.amounts import validate_raw_amount
from txbuilder.config import DEFAULT_LIMITS, JUPITER_ULTRA_API_URL, TransactionLimits
from txbuilder.context import SwapContext
from txbuilder.errors import InvalidContextError

logger = logging.getLogger(__name__)

MIN_TRANSACTION_SIZE = 64

_ORDER_ERRORS = {
    1: "insufficient funds for swap",
    2: "top up SOL for gas fees",
    3: "minimum swap amount not met for gasless transaction",
}


class UltraClient:
    """Requests swap orders (complete unsigned transactions) from the Ultra API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        limits: TransactionLimits = DEFAULT_LIMITS,
    ) -> None:
        base_url = base_url or os.environ.get("JUPITER_API_URL") or JUPITER_ULTRA_API_URL
        self._base_url = base_url.rstrip("/")
        self._http = http or httpx.Client(timeout=30)
        self._limits = limits

    def fetch_order(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        taker: str,
        slippage_bps: int = 50,
    ) -> SwapContext:
        """Request an order swapping ``amount`` smallest units of ``input_mint``."""
        amount = validate_raw_amount(amount, "swap input")
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(amount),
            "taker": taker,
        }
        if slippage_bps:
            params["slippageBps"] = str(slippage_bps)

        resp = self._http.get(f"{self._base_url}/order", params=params)
        resp.raise_for_status()
        return self.parse_order(resp.json(), input_mint, output_mint)

    def parse_order(
        self, data: Any, input_mint: str = "", output_mint: str = ""
    ) -> SwapContext:
        if not isinstance(data, dict):
            raise InvalidContextError(
                "order service returned invalid response: expected object"
            )
        if data.get("error"):
            raise InvalidContextError(f"order error: {data['error']}")

        transaction = data.get("transaction")
        if not transaction:
            message = _ORDER_ERRORS.get(data.get("errorCode"))
            raise InvalidContextError(message or "no transaction returned from order")
        if not isinstance(transaction, str):
            raise InvalidContextError(
                "order service returned invalid transaction: expected non-empty "
                "base64 string"
            )
        self._check_transaction(transaction)

        route_plan = data.get("routePlan") or []
        if not isinstance(route_plan, list):
            raise InvalidContextError(
                "order service returned invalid routePlan: expected array"
            )
        if not route_plan:
            logger.warning("order returned an empty routePlan")
        for i, step in enumerate(route_plan):
            if not isinstance(step, dict):
                raise InvalidContextError(f"route[{i}] is invalid: expected object")

        return SwapContext(
            transaction=transaction,
            route={
                "input_mint": data.get("inputMint") or input_mint,
                "output_mint": data.get("outputMint") or output_mint,
                "in_amount": data.get("inAmount"),
                "out_amount": data.get("outAmount"),
                "price_impact_pct": data.get("priceImpactPct") or data.get("priceImpact"),
                "slippage_bps": data.get("slippageBps"),
                "market_infos": [_market_info(step) for step in route_plan],
            },
            fees={
                "signature_fee_lamports": data.get("signatureFeeLamports") or 0,
                "prioritization_fee_lamports": data.get("prioritizationFeeLamports") or 0,
                "rent_fee_lamports": data.get("rentFeeLamports") or 0,
                "fee_bps": data.get("feeBps"),
            },
            router=data.get("router"),
            request_id=data.get("requestId"),
        )

    def _check_transaction(self, transaction: str) -> None:
        try:
            raw = base64.b64decode(transaction, validate=True)
        except binascii.Error as exc:
            raise InvalidContextError(
                f"order service returned invalid base64 transaction: {exc}"
            ) from exc
        if len(raw) < MIN_TRANSACTION_SIZE:
            raise InvalidContextError(
                f"swap transaction too small: {len(raw)} bytes "
                f"(minimum {MIN_TRANSACTION_SIZE} bytes expected)"
            )
        if len(raw) > self._limits.max_size:
            raise InvalidContextError(
                f"swap transaction too large: {len(raw)} bytes "
                f"(maximum {self._limits.max_size} bytes)"
            )


def _market_info(step: dict) -> dict:
    info = step.get("swapInfo") or {}
    return {
        "id": step.get("ammKey") or info.get("ammKey"),
        "label": step.get("label") or info.get("label"),
        "input_mint": step.get("inputMint") or info.get("inputMint"),
        "output_mint": step.get("outputMint") or info.get("outputMint"),
        "in_amount": step.get("inAmount") or info.get("inAmount"),
        "out_amount": step.get("outAmount") or info.get("outAmount"),
        "percent": step.get("percent"),
    }
