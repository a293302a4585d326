import re
from datetime import datetime, time, timedelta, timezone, tzinfo

OFFSET_RE = re.compile(r"[+-]?\d+")


def parse_offset(raw: str | None) -> int:
    if raw is None or raw == "":
        return 0
    if not OFFSET_RE.fullmatch(raw):
        raise ValueError(f"Invalid day offset: {raw!r}")
    return int(raw)


def day_window(now: datetime, offset: int, tz: tzinfo) -> tuple[datetime, datetime]:
    """Return the half-open [start, end) window for the local day ``offset`` days from ``now``.

    The offset moves by calendar days, so month and year rollover follow the
    calendar. The window is 24 elapsed hours from local midnight.
    """
    target_date = now.astimezone(tz).date() + timedelta(days=offset)
    start = datetime.combine(target_date, time.min, tzinfo=tz)
    end = (start.astimezone(timezone.utc) + timedelta(hours=24)).astimezone(tz)
    return start, end
