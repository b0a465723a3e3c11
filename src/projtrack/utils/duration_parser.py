"""Duration parsing utilities."""

import re

from projtrack.domain.errors import InvalidAmountError

_DURATION_RE = re.compile(r"^(?:(?P<hours>\d+)\s*h)?\s*(?:(?P<minutes>\d+)\s*m(?:in)?)?$")


def parse_duration(duration_str: str) -> int:
    """Parse a duration into whole minutes.

    Accepts "45", "45m", "2h", "1h30m" and "1h 30min".

    Raises:
        InvalidAmountError: If the string is not a duration
    """
    text = duration_str.strip().lower()
    if text.isdigit():
        return int(text)

    match = _DURATION_RE.match(text)
    if not text or match is None or not any(match.groupdict().values()):
        raise InvalidAmountError(f"Could not parse duration '{duration_str}'")

    hours = int(match.group("hours") or 0)
    minutes = int(match.group("minutes") or 0)
    return hours * 60 + minutes


def format_duration(minutes: int) -> str:
    """Format minutes as "1h 15m" (or "45m" under an hour)."""
    hours, rest = divmod(minutes, 60)
    if hours == 0:
        return f"{rest}m"
    return f"{hours}h {rest:02d}m"
