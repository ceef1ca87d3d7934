"""Display formatting for money, addresses and trade timestamps.

Every helper is total: ``None``, empty strings and unparseable values map to a
fixed fallback instead of raising.
"""

import math
import time
from datetime import datetime, timezone
from typing import Any

# 2000-01-01T00:00:00Z in milliseconds. Smaller numeric timestamps are seconds.
SECONDS_THRESHOLD_MS = 946_684_800_000

_AGO_BUCKETS = (
    (60, 1, "s"),
    (3600, 60, "m"),
    (86400, 3600, "h"),
    (2_592_000, 86400, "d"),
    (31_536_000, 2_592_000, "mo"),
)


def _finite(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _now_ms() -> int:
    return int(time.time() * 1000)


def format_volume(volume: Any) -> str:
    value = _finite(volume)
    if value >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"${value / 1_000:.1f}K"
    return f"${value:.0f}"


def format_pnl(pnl: Any) -> str:
    value = _finite(pnl)
    sign = "+" if value >= 0 else "-"
    magnitude = abs(value)
    if magnitude >= 1_000_000:
        return f"{sign}${magnitude / 1_000_000:.2f}M"
    if magnitude >= 1_000:
        return f"{sign}${magnitude / 1_000:.1f}K"
    return f"{sign}${magnitude:.0f}"


def format_percentage(value: Any, decimals: int = 1) -> str:
    return f"{_finite(value) * 100:.{decimals}f}%"


def format_address(address: str | None) -> str:
    if not address:
        return ""
    return f"{address[:6]}...{address[-4:]}"


def _parse_iso_ms(value: str) -> int | None:
    v = value.strip()
    if v.endswith("Z"):
        v = v[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(v)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def _to_ms(timestamp: Any) -> int | None:
    """Best-effort conversion to epoch milliseconds; ``None`` when unusable."""
    if not timestamp or isinstance(timestamp, bool):
        return None
    if isinstance(timestamp, datetime):
        dt = timestamp if timestamp.tzinfo else timestamp.replace(tzinfo=timezone.utc)
        return int(dt.timestamp() * 1000)
    if isinstance(timestamp, str):
        text = timestamp.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return _parse_iso_ms(text)
    elif isinstance(timestamp, (int, float)):
        number = float(timestamp)
    else:
        return None
    if not math.isfinite(number) or number <= 0:
        return None
    if number < SECONDS_THRESHOLD_MS:
        number *= 1000
    return int(number)


def normalize_timestamp(timestamp: Any, now: int | None = None) -> int:
    """Return ``timestamp`` as epoch milliseconds, falling back to ``now``."""
    ms = _to_ms(timestamp)
    if ms is None:
        return _now_ms() if now is None else now
    return ms


def time_ago(timestamp: Any, now: int | None = None) -> str:
    ms = _to_ms(timestamp)
    if ms is None:
        return "Unknown"
    now_ms = _now_ms() if now is None else now
    seconds = (now_ms - ms) // 1000
    if seconds < 0:
        return "Just now"
    for limit, unit_seconds, suffix in _AGO_BUCKETS:
        if seconds < limit:
            return f"{seconds // unit_seconds}{suffix} ago"
    return f"{seconds // 31_536_000}y ago"


def to_datetime(timestamp: Any, now: int | None = None) -> datetime:
    return datetime.fromtimestamp(normalize_timestamp(timestamp, now) / 1000, tz=timezone.utc)


def format_date(timestamp: Any) -> str:
    dt = to_datetime(timestamp)
    return f"{dt:%b} {dt.day}, {dt.year}"


def format_short_date(timestamp: Any) -> str:
    dt = to_datetime(timestamp)
    return f"{dt:%b} {dt.day}"
