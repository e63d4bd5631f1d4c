"""Timestamp codec for DAWA records.

File exports write timestamps as ``2000-02-05T20:17:59.000``: millisecond
precision, no offset, local time in Copenhagen. The JSON API may instead
send ordinary ISO-8601 with an offset. Parsing accepts both; rendering
always produces ISO-8601 with the offset.
"""

from __future__ import annotations

import re
from datetime import datetime
from zoneinfo import ZoneInfo

from dawa.constants import HOME_ZONE_NAME
from dawa.errors import TimeFormatError

HOME_ZONE = ZoneInfo(HOME_ZONE_NAME)

EXPORT_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"
_EXPORT_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}$")


def _parse_export(text: str) -> datetime | None:
    if not _EXPORT_RE.match(text):
        return None
    try:
        naive = datetime.strptime(text, EXPORT_FORMAT)
    except ValueError:
        return None
    return naive.replace(tzinfo=HOME_ZONE)


def _parse_iso(text: str) -> datetime | None:
    candidate = text
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=HOME_ZONE)
    return parsed


def parse_time(text: str, field: str = "time") -> datetime:
    """Return a zone-aware datetime for ``text``.

    The export grammar is tried first, then ISO-8601. Surrounding quotes and
    spaces are ignored. Raises :class:`~dawa.errors.TimeFormatError` naming
    ``field`` when neither grammar matches.
    """
    cleaned = text.strip('" ')
    result = _parse_export(cleaned)
    if result is None:
        result = _parse_iso(cleaned)
    if result is None:
        raise TimeFormatError(text, field)
    return result


def format_time(value: datetime) -> str:
    """Render ``value`` as ISO-8601 with its UTC offset."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=HOME_ZONE)
    return value.isoformat()
