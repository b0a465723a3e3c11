"""Input checks shared by the domain services.

Every check runs before the store is touched, so a rejected value never
leaves a partial write behind.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional, TypeVar

from projtrack.domain.errors import InvalidAmountError, ValidationError, invalid_amount

MAX_NAME_LENGTH = 255
MAX_COMMENT_LENGTH = 5000
MAX_DESCRIPTION_LENGTH = 65535
CENT = Decimal("0.01")

E = TypeVar("E", bound=Enum)


def to_decimal(field: str, value) -> Decimal:
    """Convert a number or numeric string to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary
    expansion.

    Raises:
        InvalidAmountError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise InvalidAmountError(invalid_amount(field, value))
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise InvalidAmountError(invalid_amount(field, value)) from None
    if not amount.is_finite():
        raise InvalidAmountError(invalid_amount(field, value))
    return amount


def require_money(field: str, value, allow_zero: bool = True) -> Decimal:
    """Validate a money value (budget, actual_cost, amount).

    Args:
        field: Field name used in error messages
        value: Raw value
        allow_zero: If False, the value must be strictly positive

    Returns:
        The value as a Decimal

    Raises:
        InvalidAmountError: If negative, zero when not allowed, non-finite,
            or finer than one cent
    """
    amount = to_decimal(field, value)
    if amount < 0 or (not allow_zero and amount == 0):
        raise InvalidAmountError(invalid_amount(field, value))
    if amount != amount.quantize(CENT):
        raise InvalidAmountError(
            f"{invalid_amount(field, value)} (more than two decimal places)"
        )
    return amount


def optional_money(field: str, value) -> Optional[Decimal]:
    if value is None:
        return None
    return require_money(field, value)


def require_duration(value) -> int:
    """Validate a time entry duration in whole minutes."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmountError(invalid_amount("duration", value))
    if value <= 0:
        raise InvalidAmountError(invalid_amount("duration", value))
    return value


def require_text(field: str, value: Optional[str], max_length: int = MAX_NAME_LENGTH) -> str:
    """Validate required, bounded text and return it stripped."""
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required")
    text = value.strip()
    if len(text) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return text


def optional_text(
    field: str, value: Optional[str], max_length: int = MAX_DESCRIPTION_LENGTH
) -> Optional[str]:
    if value is None:
        return None
    if len(value) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return value


def require_date(field: str, value) -> date:
    if value is None:
        raise ValidationError(f"{field} is required")
    if isinstance(value, datetime) or not isinstance(value, date):
        raise ValidationError(f"{field} must be a date, got '{value}'")
    return value


def require_not_future(field: str, value: date, today: date) -> date:
    if value > today:
        raise ValidationError(f"{field} cannot be in the future ({value})")
    return value


def require_not_past(field: str, value: date, today: date) -> date:
    if value < today:
        raise ValidationError(f"{field} cannot be in the past ({value})")
    return value


def require_date_order(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date is not None and end_date is not None and end_date < start_date:
        raise ValidationError(
            f"end_date ({end_date}) must be on or after start_date ({start_date})"
        )


def parse_choice(enum_cls: type[E], value, field: str) -> E:
    """Resolve a member of enum_cls from a member, its value, or a loose spelling.

    "in-progress", "In Progress" and "in_progress" all name TaskStatus.IN_PROGRESS.
    """
    if isinstance(value, enum_cls):
        return value
    wanted = _loose(str(value))
    for member in enum_cls:
        if wanted in (_loose(member.value), _loose(member.name)):
            return member
    choices = ", ".join(member.value for member in enum_cls)
    raise ValidationError(f"Invalid {field} '{value}' (expected one of: {choices})")


def _loose(text: str) -> str:
    return text.strip().lower().replace("-", " ").replace("_", " ")


def normalize_currency(value: str) -> str:
    """Validate and upper-case a 3-letter currency code."""
    code = value.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValidationError(f"Currency must be a 3-letter code, got '{value}'")
    return code
