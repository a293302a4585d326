"""Turn a parsed VEVENT into an Event if it overlaps a target day.

DTSTART/DTEND come in four shapes: a bare date (VALUE=DATE), a UTC
date-time ending in "Z", a naive date-time with a TZID parameter, and a
naive date-time with nothing else, which is read as local wall clock.
"""
import logging
from datetime import datetime, timedelta, timezone, tzinfo
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sources.base import Event

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y%m%d"
DATETIME_FORMAT = "%Y%m%dT%H%M%S"
UTC_DATETIME_FORMAT = "%Y%m%dT%H%M%SZ"


class ExtractionError(ValueError):
    """A single event could not be read; the rest of the feed is still fine."""


class MissingField(ExtractionError):
    pass


class MalformedTimestamp(ExtractionError):
    pass


class ComponentKind(Enum):
    EVENT = "VEVENT"
    TIMEZONE = "VTIMEZONE"
    OTHER = None

    @classmethod
    def of(cls, component) -> "ComponentKind":
        name = (getattr(component, "name", "") or "").upper()
        for kind in (cls.EVENT, cls.TIMEZONE):
            if name == kind.value:
                return kind
        return cls.OTHER


def resolve_timezone(name: str | None) -> tzinfo | None:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.debug("Unknown time zone %r, ignoring", name)
        return None


def _raw(prop) -> str:
    value = prop.to_ical()
    if isinstance(value, bytes):
        value = value.decode("utf-8", "replace")
    return value.strip()


def _params(prop) -> dict:
    return getattr(prop, "params", None) or {}


def _tzid(params) -> str | None:
    tzid = params.get("TZID") if params else None
    if isinstance(tzid, (list, tuple)):
        tzid = tzid[0] if tzid else None
    return tzid or None


def parse_ical_date(value: str, local_tz: tzinfo) -> datetime:
    """Parse a bare YYYYMMDD date as midnight in ``local_tz``."""
    try:
        day = datetime.strptime(value, DATE_FORMAT)
    except ValueError:
        raise MalformedTimestamp(f"Invalid date value: {value!r}")
    return day.replace(tzinfo=local_tz)


def parse_ical_time(value: str, params, local_tz: tzinfo) -> datetime:
    """Parse a DATE-TIME value into an aware datetime.

    UTC values ("...Z") are taken as-is. Naive values are wall clock in the
    TZID zone when it resolves, otherwise in ``local_tz``.
    """
    if value.endswith("Z"):
        try:
            parsed = datetime.strptime(value, UTC_DATETIME_FORMAT)
        except ValueError:
            raise MalformedTimestamp(f"Invalid UTC date-time value: {value!r}")
        return parsed.replace(tzinfo=timezone.utc)

    zone = resolve_timezone(_tzid(params)) or local_tz
    try:
        parsed = datetime.strptime(value, DATETIME_FORMAT)
    except ValueError:
        raise MalformedTimestamp(f"Invalid date-time value: {value!r}")
    return parsed.replace(tzinfo=zone)


def _in_own_zone(moment: datetime, prop) -> datetime:
    zone = resolve_timezone(_tzid(_params(prop)))
    if zone is None:
        return moment
    return moment.astimezone(zone)


def _first(value):
    # icalendar returns a list when a property is repeated
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _text(component, name: str) -> str:
    value = _first(component.get(name))
    if value is None:
        return ""
    return str(value)


def overlaps(start: datetime, end: datetime, target_start: datetime, target_end: datetime) -> bool:
    # Compare in UTC: aware datetimes sharing a tzinfo compare by wall clock.
    utc = timezone.utc
    return end.astimezone(utc) > target_start.astimezone(utc) and (
        start.astimezone(utc) < target_end.astimezone(utc)
    )


def _span(start_prop, end_prop, local_tz: tzinfo) -> tuple[datetime, datetime, bool]:
    params = _params(start_prop)
    all_day = params.get("VALUE") == "DATE"
    if all_day:
        start = parse_ical_date(_raw(start_prop), local_tz)
        if end_prop is not None:
            # DTEND of an all-day event is already exclusive
            end = parse_ical_date(_raw(end_prop), local_tz)
        else:
            # wall-clock arithmetic: next local midnight
            end = start + timedelta(days=1)
    else:
        start = parse_ical_time(_raw(start_prop), params, local_tz)
        if end_prop is not None:
            end = parse_ical_time(_raw(end_prop), _params(end_prop), local_tz)
        else:
            end = start

    start = _in_own_zone(start, start_prop)
    if end_prop is not None:
        end = _in_own_zone(end, end_prop)
    return start, end, all_day


def extract(component, target_start: datetime, target_end: datetime, local_tz: tzinfo) -> Event | None:
    start_prop = _first(component.get("DTSTART"))
    end_prop = _first(component.get("DTEND"))
    if start_prop is None:
        raise MissingField("Event is missing DTSTART")

    try:
        start, end, all_day = _span(start_prop, end_prop, local_tz)
        if not overlaps(start, end, target_start, target_end):
            return None
    except OverflowError as e:
        raise MalformedTimestamp(f"Date out of range: {e}")

    return Event(
        uid=_text(component, "UID"),
        summary=_text(component, "SUMMARY"),
        description=_text(component, "DESCRIPTION"),
        location=_text(component, "LOCATION"),
        start=start,
        end=end,
        all_day=all_day,
    )
