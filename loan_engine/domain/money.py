"""Fixed-point decimal helpers for money, rates and ratios.

All values are ``Decimal`` with an explicit scale. Rounding is always
ROUND_HALF_UP and is applied only where a value leaves a computation.
Binary floats are refused.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

from loan_engine.domain.exceptions import ValidationError

TWO_PLACES = Decimal("0.01")  # Currency
FOUR_PLACES = Decimal("0.0001")  # Annual rates and ratios
MONTHLY_RATE_PLACES = Decimal("1E-10")  # Internal periodic rate

ZERO = Decimal("0.00")

DecimalLike = Union[Decimal, int, str]


def to_decimal(value: DecimalLike, field: str) -> Decimal:
    """Coerce int/str/Decimal to Decimal, rejecting floats and garbage"""
    if value is None:
        raise ValidationError(field, "value is required")
    if isinstance(value, (bool, float)):
        raise ValidationError(field, "binary floating point values are not accepted")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except InvalidOperation as e:
            raise ValidationError(field, f"not a decimal number: {value!r}") from e
    else:
        raise ValidationError(field, f"unsupported type {type(value).__name__}")

    if not result.is_finite():
        raise ValidationError(field, "value must be finite")
    return result


def round_money(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def round_rate(value: Decimal) -> Decimal:
    return value.quantize(FOUR_PLACES, rounding=ROUND_HALF_UP)


def round_ratio(value: Decimal) -> Decimal:
    return value.quantize(FOUR_PLACES, rounding=ROUND_HALF_UP)


def round_monthly_rate(value: Decimal) -> Decimal:
    return value.quantize(MONTHLY_RATE_PLACES, rounding=ROUND_HALF_UP)


def to_money(value: DecimalLike, field: str) -> Decimal:
    """Parse a currency amount and fix it at 2 fractional digits"""
    return round_money(to_decimal(value, field))


def to_rate(value: DecimalLike, field: str) -> Decimal:
    """Parse an annual percentage rate and fix it at 4 fractional digits"""
    return round_rate(to_decimal(value, field))


def optional_money(value: DecimalLike | None, field: str) -> Decimal | None:
    return None if value is None else to_money(value, field)
