import logging
from datetime import datetime, tzinfo

import requests
from icalendar import Calendar

import extractor
from extractor import ComponentKind, ExtractionError
from sources.base import Event

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class FeedError(RuntimeError):
    """The feed could not be fetched or parsed; carries the HTTP status to answer with."""

    def __init__(self, message: str, status: int = 502):
        super().__init__(message)
        self.message = message
        self.status = status


def fetch(url: str, timeout: float = DEFAULT_TIMEOUT) -> Calendar:
    try:
        resp = requests.get(url, timeout=timeout, stream=True)
    except requests.RequestException as e:
        # includes MissingSchema / InvalidURL: an unusable URL is a failed fetch
        logger.error("Fetching %s failed: %s", url, e)
        raise FeedError("Failed to fetch ICS URL", status=502)

    with resp:
        if resp.status_code != 200:
            logger.error("Feed %s answered with status %s", url, resp.status_code)
            raise FeedError("Failed to retrieve ICS file", status=502)
        try:
            data = resp.content
        except requests.RequestException as e:
            logger.error("Reading feed %s failed: %s", url, e)
            raise FeedError("Failed to read ICS data", status=500)

    try:
        return Calendar.from_ical(data)
    except ValueError as e:
        logger.error("Parsing feed %s failed: %s", url, e)
        raise FeedError("Failed to parse ICS data", status=500)


def events_for_day(cal: Calendar, target_start: datetime, target_end: datetime, local_tz: tzinfo) -> list[Event]:
    events = []
    for comp in cal.subcomponents:
        if ComponentKind.of(comp) is not ComponentKind.EVENT:
            continue
        try:
            event = extractor.extract(comp, target_start, target_end, local_tz)
        except ExtractionError as e:
            logger.warning("Skipping event %s: %s", str(comp.get("UID", "<no uid>")), e)
            continue
        if event is not None:
            events.append(event)
    events.sort(key=lambda event: event.start.timestamp())
    return events
