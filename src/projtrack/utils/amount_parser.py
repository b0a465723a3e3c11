"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from projtrack.domain.errors import InvalidAmountError


def parse_amount(amount_str: str) -> Decimal:
    """Parse a money string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"
    - "1,234.56 USD"
    - "(123.45)" (negative in parentheses)

    Range checks (positive, at most two decimals) are left to the services.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        InvalidAmountError: If amount string cannot be parsed or is not finite
    """
    if not amount_str or not amount_str.strip():
        raise InvalidAmountError("Empty amount string")

    text = amount_str.strip()

    is_negative = False
    if text.startswith("(") and text.endswith(")"):
        is_negative = True
        text = text[1:-1]

    # Trailing ISO currency code
    text = re.sub(r"\s*[A-Za-z]{3}$", "", text)
    text = re.sub(r"[$€£¥]", "", text)
    text = text.replace(",", "").strip()

    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise InvalidAmountError(f"Could not parse amount '{amount_str}'") from None

    if not amount.is_finite():
        raise InvalidAmountError(f"Amount must be a finite number: '{amount_str}'")
    return -amount if is_negative else amount


def format_amount(amount: Decimal | None, currency: str | None = None) -> str:
    """Format an amount for display, e.g. "1,234.50 USD"."""
    if amount is None:
        return "-"
    text = f"{amount:,.2f}"
    return f"{text} {currency}" if currency else text
