from datetime import datetime, timezone
from typing import Optional
import math


def format_brl(value: float, decimals: int = 2) -> str:
    """
    Formats a number using Brazilian separators.
    1831.9234 -> 1.831,92
    """
    if value is None or not math.isfinite(value):
        return "-"

    formatted = f"{value:,.{decimals}f}"  # 1,831.92
    return formatted.replace(",", "_").replace(".", ",").replace("_", ".")


def format_percent(value: float, decimals: int = 6) -> str:
    """Monthly rates are shown with six decimals, e.g. 1,071484."""
    return format_brl(value, decimals)


def format_utc_timestamp(dt: Optional[datetime] = None) -> str:
    """
    Converts a datetime to UTC and formats it as a W3C datetime.
    Format: YYYY-MM-DDTHH:MM:SSZ (naive values are assumed to be UTC)
    """
    if dt is None:
        dt = datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
