# tests/test_window.py
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

import window

NEW_YORK = ZoneInfo("America/New_York")


def test_today_window_starts_at_local_midnight():
    start, end = window.day_window(datetime(2024, 6, 15, 13, 30, tzinfo=NEW_YORK), 0, NEW_YORK)
    assert start == datetime(2024, 6, 15, tzinfo=NEW_YORK)
    assert end == datetime(2024, 6, 16, tzinfo=NEW_YORK)


def test_previous_day_rolls_back_over_month():
    start, _ = window.day_window(datetime(2024, 3, 1, 8, 0, tzinfo=NEW_YORK), -1, NEW_YORK)
    assert start.date() == datetime(2024, 2, 29).date()


def test_previous_day_rolls_back_over_year():
    start, _ = window.day_window(datetime(2025, 1, 1, 0, 5, tzinfo=NEW_YORK), -1, NEW_YORK)
    assert start == datetime(2024, 12, 31, tzinfo=NEW_YORK)


def test_next_day_rolls_over_month():
    start, _ = window.day_window(datetime(2024, 4, 30, 23, 59, tzinfo=NEW_YORK), 1, NEW_YORK)
    assert start == datetime(2024, 5, 1, tzinfo=NEW_YORK)


def test_now_is_read_in_the_viewer_zone():
    # 02:00 UTC on June 16 is still June 15 in New York
    now = datetime(2024, 6, 16, 2, 0, tzinfo=timezone.utc)
    start, _ = window.day_window(now, 0, NEW_YORK)
    assert start == datetime(2024, 6, 15, tzinfo=NEW_YORK)


def test_window_is_24_elapsed_hours_on_dst_change():
    start, end = window.day_window(datetime(2024, 3, 10, 12, 0, tzinfo=NEW_YORK), 0, NEW_YORK)
    assert end.astimezone(timezone.utc) - start.astimezone(timezone.utc) == timedelta(hours=24)
    assert end.hour == 1


@pytest.mark.parametrize("raw,expected", [(None, 0), ("", 0), ("0", 0), ("-1", -1), ("+2", 2), ("14", 14)])
def test_parse_offset(raw, expected):
    assert window.parse_offset(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "1.5", " 1", "1e3", "--1"])
def test_parse_offset_rejects_non_integers(raw):
    with pytest.raises(ValueError):
        window.parse_offset(raw)
