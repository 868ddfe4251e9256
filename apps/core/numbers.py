"""Parsing money and quantity input into the two-place decimal columns."""
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENTS = Decimal('0.01')


def to_cents(value, error_class, label) -> Decimal:
    """
    Parse ``value`` as a finite Decimal rounded half-up to two places.

    Callers check the sign on the rounded value, which is what gets stored.

    Raises:
        error_class: If ``value`` is not a finite number
    """
    try:
        number = Decimal(str(value))
        if not number.is_finite():
            raise error_class(f"Invalid {label}: {value}")
        return number.quantize(CENTS, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        raise error_class(f"Invalid {label}: {value}")
