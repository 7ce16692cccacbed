"""Display strings for summary figures."""

import math
from typing import Optional


def format_currency(value: Optional[float], prefix: str = "NT$") -> str:
    """Thousands-separated amount with up to 3 decimals, '--' when unusable."""
    if value is None or isinstance(value, bool):
        return "--"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "--"
    if not math.isfinite(number):
        return "--"

    text = f"{number:,.3f}".rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return f"{prefix} {text}"
