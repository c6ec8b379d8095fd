"""Currency amounts as Decimal quantized to the minor unit."""
from decimal import Decimal, InvalidOperation

from billsplit.errors import ValidationError

MINOR_UNIT = Decimal("0.01")
MINOR_PER_MAJOR = 100
# Half a minor unit: exact decimals never differ by less than one cent.
EPSILON = Decimal("0.005")


def to_minor(amount: Decimal) -> int:
    """Whole minor units in ``amount``; finer precision is a ValidationError."""
    try:
        amount = Decimal(amount)
        scaled = amount * MINOR_PER_MAJOR
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid amount: {amount!r}")
    if not scaled.is_finite() or scaled != scaled.to_integral_value():
        raise ValidationError(f"Amount {amount} is finer than the currency minor unit")
    return int(scaled)


def from_minor(units: int) -> Decimal:
    return (Decimal(units) / MINOR_PER_MAJOR).quantize(MINOR_UNIT)


def quantize(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(MINOR_UNIT)


def is_zero(amount: Decimal) -> bool:
    return abs(amount) <= EPSILON
