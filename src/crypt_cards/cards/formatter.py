"""Display formatting helpers for cards and CLI output."""

from __future__ import annotations

import time
from datetime import UTC, datetime

ROMAN_MONTHS = ("I", "II", "III", "IV", "V", "VI", "VII", "VIII", "IX", "X", "XI", "XII")
UNKNOWN_DATE = "?.?.????"

_MINUTE = 60
_HOUR = 3600
_DAY = 86_400
_WEEK = 604_800
_MONTH = 2_592_000


def format_amount(value: float | None) -> str:
    """Format an amount with B/M/K suffixes.

    Values of at least 1 get two decimals, smaller values four.

    Example:
        >>> format_amount(1_500_000)
        '1.5M'
        >>> format_amount(0.5)
        '0.5000'
    """
    if not value:
        return "0"
    if value >= 1e9:
        return f"{value / 1e9:.1f}B"
    if value >= 1e6:
        return f"{value / 1e6:.1f}M"
    if value >= 1e3:
        return f"{value / 1e3:.1f}K"
    if value >= 1:
        return f"{value:.2f}"
    return f"{value:.4f}"


def time_ago(timestamp: float, now: float | None = None) -> str:
    """Return a compact relative age label (``5m``, ``3h``, ``2d``, ``1w``, ``4mo``)."""
    current = time.time() if now is None else now
    delta = max(current - timestamp, 0)
    if delta < _HOUR:
        return f"{int(delta // _MINUTE)}m"
    if delta < _DAY:
        return f"{int(delta // _HOUR)}h"
    if delta < _WEEK:
        return f"{int(delta // _DAY)}d"
    if delta < _MONTH:
        return f"{int(delta // _WEEK)}w"
    return f"{int(delta // _MONTH)}mo"


def format_date(timestamp: float) -> str:
    """Format a UTC date with a roman month, e.g. ``XII.14.2024``."""
    try:
        dt = datetime.fromtimestamp(timestamp, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return UNKNOWN_DATE
    return f"{ROMAN_MONTHS[dt.month - 1]}.{dt.day}.{dt.year}"


def shorten_signature(signature: str) -> str:
    """Shorten a transaction signature to ``abcde...wxyz``."""
    return f"{signature[:5]}...{signature[-4:]}"


def shorten_address(address: str, chars: int = 4) -> str:
    """Shorten a wallet address to ``abcd...wxyz``."""
    return f"{address[:chars]}...{address[-chars:]}"


def format_duration(seconds: float | None) -> str:
    """Format a track duration as ``m:ss``."""
    if not seconds or seconds < 0:
        return "0:00"
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"
