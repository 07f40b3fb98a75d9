"""Typed extraction of MEASUREMENT records from parsed XML."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Callable, Iterator, Optional
from xml.etree.ElementTree import Element

from models.errors import (
    FieldOutOfRange,
    MalformedEventCode,
    MalformedFieldValue,
    MalformedTimestamp,
    MissingField,
)
from models.events import EVENT_BITS
from models.records import FIELD_SCHEMA, FieldKind, Measurement, empty_fields

TagLookup = Callable[[str, Element], Optional[str]]

MEASUREMENT_TAG = "MEASUREMENT"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# strptime accepts single-digit components, the feed format does not
_TIMESTAMP_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2} [0-9]{2}:[0-9]{2}:[0-9]{2}")
_STATION_PATTERN = re.compile(r"[0-9]+")
_EVENT_PATTERN = re.compile(r"[01]+")


def find_tag_text(tag: str, element: Element) -> Optional[str]:
    """Return the text of the first descendant named ``tag``, or ``None``."""
    child = element.find(f".//{tag}")
    if child is None:
        return None
    return child.text or ""


def iter_measurements(document: Element) -> Iterator[Element]:
    """Yield each MEASUREMENT element of a WEATHERDATA document."""
    if document.tag == MEASUREMENT_TAG:
        yield document
        return
    yield from document.iter(MEASUREMENT_TAG)


class RecordParser:
    """Builds :class:`Measurement` instances through a tag lookup capability."""

    def __init__(self, lookup: TagLookup = find_tag_text, strict_ranges: bool = False) -> None:
        self.lookup = lookup
        self.strict_ranges = strict_ranges

    def parse(self, element: Element) -> Measurement:
        station = self._parse_station(element)
        timestamp = self._parse_timestamp(element)
        events = self._parse_events(element)
        fields = empty_fields()
        for spec in FIELD_SCHEMA:
            value = self._parse_field(spec.kind, spec.tag, element)
            if value is not None:
                fields[spec.kind] = value

        if self.strict_ranges:
            for spec in FIELD_SCHEMA:
                value = fields[spec.kind]
                if value is not None and not spec.contains(value):
                    raise FieldOutOfRange(spec.kind, value)

        return Measurement(station=station, timestamp=timestamp, fields=fields, events=events)

    def _text(self, tag: str, element: Element) -> Optional[str]:
        value = self.lookup(tag, element)
        if value is None:
            return None
        return value.strip()

    def _parse_station(self, element: Element) -> int:
        raw = self._text("STN", element)
        if raw is None or not _STATION_PATTERN.fullmatch(raw):
            raise MissingField("STN")
        return int(raw)

    def _parse_timestamp(self, element: Element) -> datetime:
        date_raw = self._text("DATE", element)
        time_raw = self._text("TIME", element)
        if date_raw is None or time_raw is None:
            raise MalformedTimestamp(None)

        candidate = f"{date_raw} {time_raw}"
        if not _TIMESTAMP_PATTERN.fullmatch(candidate):
            raise MalformedTimestamp(candidate)
        try:
            return datetime.strptime(candidate, TIMESTAMP_FORMAT)
        except ValueError as exc:
            raise MalformedTimestamp(candidate) from exc

    def _parse_events(self, element: Element) -> int:
        raw = self._text("FRSHTT", element)
        if raw is None:
            return 0
        if not _EVENT_PATTERN.fullmatch(raw):
            raise MalformedEventCode(raw)
        # most significant digit first: "100000" is tornado only
        code = int(raw, 2)
        if code >> EVENT_BITS:
            raise MalformedEventCode(raw)
        return code

    def _parse_field(self, kind: FieldKind, tag: str, element: Element) -> Optional[float]:
        raw = self._text(tag, element)
        if raw is None:
            return None
        try:
            return float(raw)
        except ValueError as exc:
            raise MalformedFieldValue(kind, raw) from exc
