"""Display formatting for numbers, SOL amounts and dates."""
from typing import Optional, Union

import pandas as pd

from focus.config import DISPLAY_TIMEZONE
from focus.constants import NOT_AVAILABLE, NULL_DATE, SOL_PREFIX
from focus.utils import to_float

Numeric = Union[str, int, float, None]


def format_number(value: Numeric, decimals: int = 0, use_commas: bool = True, prefix: str = "") -> str:
    """
    Format a number (or numeric string) for display.

    Args:
        value: Number or string as sent by the API
        decimals: Digits after the decimal point
        use_commas: Group thousands with commas
        prefix: Text placed before the number (e.g. the SOL sign)

    Returns:
        Formatted string, or "N/A" for missing or unparseable values
    """
    num = to_float(value)
    if num is None:
        return NOT_AVAILABLE
    spec = f",.{decimals}f" if use_commas else f".{decimals}f"
    return f"{prefix}{num:{spec}}"


def format_sol(value: Numeric) -> str:
    return format_number(value, decimals=2, use_commas=True, prefix=SOL_PREFIX)


def format_ratio(value: Numeric) -> str:
    return format_number(value, decimals=2, use_commas=False)


def format_date(value: Optional[str], placeholder: str = NULL_DATE, tz: str = DISPLAY_TIMEZONE) -> str:
    """Render an ISO timestamp as e.g. "Jan 5, 2024, 03:07 PM"; naive input is read as UTC."""
    if not value:
        return placeholder
    ts = pd.to_datetime(value, utc=True, errors="coerce")
    if pd.isna(ts):
        return placeholder
    ts = ts.tz_convert(tz)
    return f"{ts:%b} {ts.day}, {ts.year}, {ts:%I:%M %p}"


def format_text(value: Optional[str], placeholder: str) -> str:
    return value if value else placeholder
