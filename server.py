import logging
import re
from datetime import datetime, tzinfo
from urllib.parse import unquote_plus

from flask import Flask, Response, jsonify, request

import window
from sources import calendar as calendar_source
from sources.calendar import FeedError

logger = logging.getLogger(__name__)

BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _unescape(value: str) -> str:
    # Second decoding pass on top of the query-string one.
    if BAD_ESCAPE_RE.search(value):
        raise ValueError(f"Malformed percent-encoding in {value!r}")
    return unquote_plus(value)


def _error(message: str, status: int) -> Response:
    return Response(message + "\n", status=status, mimetype="text/plain")


def create_app(cfg: dict, local_tz: tzinfo) -> Flask:
    app = Flask(__name__)
    app.json.sort_keys = False
    timeout = (cfg.get("fetch") or {}).get("timeout", calendar_source.DEFAULT_TIMEOUT)

    @app.route("/caljson", methods=["GET"])
    def caljson():
        ics_url = request.args.get("ics", "")
        if not ics_url:
            return _error("Missing 'ics' parameter", 400)

        try:
            offset = window.parse_offset(request.args.get("day"))
        except ValueError:
            return _error("Invalid 'day' parameter", 400)

        try:
            feed_url = _unescape(ics_url)
        except ValueError:
            return _error("Invalid 'ics' URL", 400)

        logger.info("Request from %s for %s", request.remote_addr, feed_url)

        try:
            target_start, target_end = window.day_window(datetime.now(local_tz), offset, local_tz)
        except OverflowError:
            return _error("Invalid 'day' parameter", 400)

        try:
            cal = calendar_source.fetch(feed_url, timeout=timeout)
        except FeedError as e:
            return _error(e.message, e.status)

        events = calendar_source.events_for_day(cal, target_start, target_end, local_tz)
        try:
            return jsonify([event.to_dict() for event in events])
        except (TypeError, ValueError) as e:
            logger.error("Encoding events for %s failed: %s", feed_url, e)
            return _error("Failed to encode events to JSON", 500)

    return app
