"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount: object) -> Decimal:
    """Parse an amount into a Decimal.

    Accepts numbers and numeric strings. String formats handled:
    - "123.45"
    - "$123.45" / "AED 123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Floats go through ``str`` so 0.1 stays 0.1 rather than its binary
    expansion.

    Args:
        amount: Raw amount value

    Returns:
        Decimal amount

    Raises:
        ValueError: If the value is not numeric
    """
    # bool is an int subclass but never a meaningful amount
    if isinstance(amount, bool):
        raise ValueError(f"Could not parse amount {amount!r}")

    if isinstance(amount, Decimal):
        result = amount
    elif isinstance(amount, (int, float)):
        result = Decimal(str(amount))
    elif isinstance(amount, str):
        result = _parse_amount_string(amount)
    else:
        raise ValueError(f"Could not parse amount {amount!r}")

    if not result.is_finite():
        raise ValueError(f"Amount must be finite, got {amount!r}")
    return result


def _parse_amount_string(amount_str: str) -> Decimal:
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and codes
    amount_str = re.sub(r"[$€£¥]|\b[A-Z]{3}\b", "", amount_str)

    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if is_negative:
        amount = -amount
    return amount
