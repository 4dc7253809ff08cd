"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

CENTS = Decimal("0.01")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a monetary amount into a Decimal rounded to cents.

    Handles statement-style formats:
    - "1234.50"
    - "R1 234.50" or "$1,234.50"
    - "-250.00"
    - "(250.00)" (negative in parentheses)
    - "250.00 CR" / "250.00 DR" (credit positive, debit negative)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount with two decimal places

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    text = amount_str.strip().upper()

    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    if text.endswith("CR"):
        text = text[:-2]
    elif text.endswith("DR"):
        is_negative = not is_negative
        text = text[:-2]

    # Currency symbols, thousands separators and spaces
    text = re.sub(r"[R$€£¥,\s]", "", text)

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")

    amount = amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    return -amount if is_negative else amount
