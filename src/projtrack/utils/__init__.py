"""Utility functions for projtrack."""

from projtrack.utils.date_parser import parse_date
from projtrack.utils.amount_parser import parse_amount, format_amount
from projtrack.utils.duration_parser import parse_duration, format_duration

__all__ = ["parse_date", "parse_amount", "format_amount", "parse_duration", "format_duration"]
