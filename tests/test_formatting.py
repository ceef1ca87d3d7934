from datetime import datetime, timezone

from vantake.core.formatting import (
    format_address,
    format_date,
    format_percentage,
    format_pnl,
    format_short_date,
    format_volume,
    normalize_timestamp,
    time_ago,
)

NOW_MS = 1_760_000_000_000


def test_format_volume_scales():
    assert format_volume(1_500_000) == "$1.5M"
    assert format_volume(2_500) == "$2.5K"
    assert format_volume(42) == "$42"
    assert format_volume(None) == "$0"
    assert format_volume("not-a-number") == "$0"


def test_format_pnl_signs_and_precision():
    assert format_pnl(-12_000) == "-$12.0K"
    assert format_pnl(500) == "+$500"
    assert format_pnl(2_345_678) == "+$2.35M"
    assert format_pnl(0) == "+$0"
    assert format_pnl(float("nan")) == "+$0"


def test_format_percentage_and_address():
    assert format_percentage(0.1234) == "12.3%"
    assert format_percentage(0.5, decimals=0) == "50%"
    assert format_address("0x1234567890abcdef1234567890abcdef12345678") == "0x1234...5678"
    assert format_address("") == ""
    assert format_address(None) == ""


def test_normalize_timestamp_seconds_and_millis_agree():
    seconds = 1_700_000_000
    assert normalize_timestamp(seconds) == seconds * 1000
    assert normalize_timestamp(seconds * 1000) == seconds * 1000
    assert normalize_timestamp(str(seconds)) == seconds * 1000


def test_normalize_timestamp_iso_and_fallback():
    assert normalize_timestamp("2023-11-14T22:13:20Z") == 1_700_000_000_000
    assert normalize_timestamp(None, now=NOW_MS) == NOW_MS
    assert normalize_timestamp("garbage", now=NOW_MS) == NOW_MS
    assert normalize_timestamp(0, now=NOW_MS) == NOW_MS


def test_time_ago_buckets():
    assert time_ago(None, now=NOW_MS) == "Unknown"
    assert time_ago("nonsense", now=NOW_MS) == "Unknown"
    assert time_ago(NOW_MS + 60_000, now=NOW_MS) == "Just now"
    assert time_ago(NOW_MS - 30_000, now=NOW_MS) == "30s ago"
    assert time_ago(NOW_MS - 5 * 60_000, now=NOW_MS) == "5m ago"
    assert time_ago(NOW_MS - 3 * 3_600_000, now=NOW_MS) == "3h ago"
    assert time_ago(NOW_MS - 2 * 86_400_000, now=NOW_MS) == "2d ago"
    assert time_ago(NOW_MS - 45 * 86_400_000, now=NOW_MS) == "1mo ago"
    assert time_ago(NOW_MS - 400 * 86_400_000, now=NOW_MS) == "1y ago"


def test_time_ago_accepts_seconds():
    assert time_ago(NOW_MS // 1000 - 120, now=NOW_MS) == "2m ago"


def test_dates_render_in_utc():
    ts = int(datetime(2026, 10, 17, 23, 30, tzinfo=timezone.utc).timestamp())
    assert format_date(ts) == "Oct 17, 2026"
    assert format_short_date(ts * 1000) == "Oct 17"
