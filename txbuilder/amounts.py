"""Overflow-safe conversion between human amounts and smallest units.

Raw amounts are written into instruction payloads as little-endian u64, so
every conversion is bounded by ``MAX_RAW_AMOUNT``. Decimal rendering goes
through integer division only, never through floating point.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

from txbuilder.errors import AmountOverflowError, InvalidAmountError

MAX_RAW_AMOUNT = 2**64 - 1
MIN_DECIMALS = 0
MAX_DECIMALS = 18

AmountLike = Union[int, float, Decimal, str]


def _check_decimals(decimals: int, symbol: str = "token") -> None:
    if (
        not isinstance(decimals, int)
        or isinstance(decimals, bool)
        or not MIN_DECIMALS <= decimals <= MAX_DECIMALS
    ):
        raise InvalidAmountError(
            f"invalid decimals for {symbol}: must be integer between "
            f"{MIN_DECIMALS} and {MAX_DECIMALS}, got {decimals!r}"
        )


def max_safe_amount(decimals: int) -> Decimal:
    """Largest human amount whose raw form still fits in a u64."""
    _check_decimals(decimals)
    return Decimal(MAX_RAW_AMOUNT).scaleb(-decimals)


def _to_decimal(amount: AmountLike, symbol: str) -> Decimal:
    if isinstance(amount, bool):
        raise InvalidAmountError(
            f"invalid amount for {symbol}: must be a number, got bool"
        )
    if isinstance(amount, Decimal):
        value = amount
    elif isinstance(amount, int):
        value = Decimal(amount)
    elif isinstance(amount, float):
        # repr gives the shortest string that round-trips, so 0.29 stays 0.29
        value = Decimal(repr(amount))
    elif isinstance(amount, str):
        try:
            value = Decimal(amount.strip())
        except InvalidOperation:
            raise InvalidAmountError(
                f"invalid amount for {symbol}: cannot parse {amount!r} as a number"
            ) from None
    else:
        raise InvalidAmountError(
            f"invalid amount for {symbol}: must be a number, got {type(amount).__name__}"
        )

    if value.is_nan() or not value.is_finite():
        raise InvalidAmountError(
            f"invalid amount for {symbol}: must be finite, got {amount!r}"
        )
    if value < 0:
        raise InvalidAmountError(
            f"invalid amount for {symbol}: must be non-negative, got {amount!r}"
        )
    return value


def _floor_scaled(value: Decimal, decimals: int) -> int:
    _, digits, exponent = value.as_tuple()
    shift = exponent + decimals
    if shift < 0:
        # digits below the smallest unit are dropped before folding
        if -shift >= len(digits):
            return 0
        digits, shift = digits[: len(digits) + shift], 0
    coefficient = 0
    for digit in digits:
        coefficient = coefficient * 10 + digit
    return coefficient * 10**shift


def to_raw_units(amount: AmountLike, decimals: int, symbol: str = "token") -> int:
    """Convert a human amount into smallest units, flooring any remainder.

    ``to_raw_units(1.9999999999, 9)`` is ``1999999999``; the sub-unit tail is
    dropped, never rounded up.
    """
    _check_decimals(decimals, symbol)
    value = _to_decimal(amount, symbol)

    limit = max_safe_amount(decimals)
    if value > limit:
        raise AmountOverflowError(
            f"amount overflow for {symbol}: {amount} exceeds maximum safe amount "
            f"{limit:f} for {decimals} decimals",
            amount=amount,
            limit=limit,
        )

    raw = _floor_scaled(value, decimals)
    if raw > MAX_RAW_AMOUNT:
        raise AmountOverflowError(
            f"integer overflow converting {amount} {symbol} to raw units: "
            f"{raw} exceeds {MAX_RAW_AMOUNT}",
            amount=amount,
            limit=MAX_RAW_AMOUNT,
        )
    return raw


def to_decimal_string(raw: Union[int, str], decimals: int, symbol: str = "token") -> str:
    """Render smallest units as an exact decimal string with trailing zeros trimmed."""
    _check_decimals(decimals, symbol)

    if isinstance(raw, bool):
        raise InvalidAmountError(
            f"invalid raw amount for {symbol}: must be int or digit string, got bool"
        )
    if isinstance(raw, str):
        text = raw.strip()
        if not (text.isascii() and text.isdigit()):
            raise InvalidAmountError(
                f"invalid raw amount for {symbol}: cannot parse {raw!r} as an integer"
            )
        value = int(text)
    elif isinstance(raw, int):
        value = raw
    else:
        raise InvalidAmountError(
            f"invalid raw amount for {symbol}: must be int or digit string, "
            f"got {type(raw).__name__}"
        )
    if value < 0:
        raise InvalidAmountError(
            f"invalid raw amount for {symbol}: must be non-negative, got {value}"
        )

    whole, fraction = divmod(value, 10**decimals)
    if decimals == 0:
        return str(whole)
    fraction_text = str(fraction).rjust(decimals, "0").rstrip("0")
    if not fraction_text:
        return str(whole)
    return f"{whole}.{fraction_text}"


def is_amount_safe(amount: AmountLike, decimals: int, symbol: str = "token") -> bool:
    try:
        to_raw_units(amount, decimals, symbol)
    except (InvalidAmountError, AmountOverflowError):
        return False
    return True


def validate_raw_amount(raw: int, symbol: str = "token") -> int:
    """Check an amount already in smallest units before it is encoded."""
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise InvalidAmountError(
            f"invalid raw amount for {symbol}: must be an integer, got {type(raw).__name__}"
        )
    if raw <= 0:
        raise InvalidAmountError(
            f"invalid raw amount for {symbol}: must be positive, got {raw}"
        )
    if raw > MAX_RAW_AMOUNT:
        raise AmountOverflowError(
            f"raw amount overflow for {symbol}: {raw} exceeds {MAX_RAW_AMOUNT}",
            amount=raw,
            limit=MAX_RAW_AMOUNT,
        )
    return raw
