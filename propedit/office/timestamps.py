# propedit/office/timestamps.py
"""
Conversion between the on-disk and editable forms of dcterms timestamps.

canonical: 2024-03-01T12:00:00Z   (UTC, what core.xml stores)
editable:  2024-03-01T13:00       (local wall-clock time, minute precision)

Going through the editable form is lossy on purpose: seconds and fractions are
dropped, so a saved timestamp always ends in ":00Z".
"""
from __future__ import annotations
import re
from datetime import datetime, timezone, tzinfo

from propedit.errors import InvalidTimestamp


# strftime("%Y") does not zero-pad years below 1000 on glibc
def _format_editable(m: datetime) -> str:
    return f"{m.year:04d}-{m.month:02d}-{m.day:02d}T{m.hour:02d}:{m.minute:02d}"


def _format_canonical(m: datetime) -> str:
    return _format_editable(m) + f":{m.second:02d}Z"


# fromisoformat() before 3.11 only takes 3 or 6 fractional digits and no "Z"
_FRACTION = re.compile(r"(\.\d+)")


def _parse_iso(value: str) -> datetime:
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: (m.group(1) + "000000")[:7], text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise InvalidTimestamp(value) from exc


def _convert(moment: datetime, tz: tzinfo | None, value: str) -> datetime:
    # astimezone(None) converts to the platform's local timezone;
    # instants at the ends of the datetime range cannot be shifted
    try:
        return moment.astimezone(tz)
    except (OverflowError, OSError) as exc:
        raise InvalidTimestamp(value) from exc


def to_editable(value: str, tz: tzinfo | None = None) -> str:
    if not value or not value.strip():
        return ""
    moment = _parse_iso(value)
    if moment.tzinfo is None:
        # W3CDTF values in core.xml are UTC; treat a missing offset as UTC too
        moment = moment.replace(tzinfo=timezone.utc)
    return _format_editable(_convert(moment, tz, value))


def to_canonical(value: str, tz: tzinfo | None = None) -> str:
    moment = _parse_iso(value)
    if moment.tzinfo is None:
        if tz is None:
            moment = _convert(moment, None, value)
        else:
            moment = moment.replace(tzinfo=tz)
    moment = moment.replace(second=0, microsecond=0)
    return _format_canonical(_convert(moment, timezone.utc, value))
