"""Exception hierarchy for the ingest pipeline.

Parse, encode and persist each raise a specific subclass so callers can log
and skip a single record without inspecting messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from models.records import FieldKind


class WeatherIngestError(Exception):
    """Base exception for all ingest failures."""


class MissingField(WeatherIngestError):
    """A mandatory tag is absent or cannot be read."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"missing or unreadable required tag {tag}")
        self.tag = tag


class MalformedTimestamp(WeatherIngestError):
    """DATE and TIME do not combine into a valid ``yyyy-MM-dd HH:mm:ss`` value."""

    def __init__(self, text: Optional[str]) -> None:
        super().__init__(f"malformed timestamp {text!r}")
        self.text = text


class MalformedEventCode(WeatherIngestError):
    """FRSHTT is present but is not a 6-bit binary digit string."""

    def __init__(self, text: str) -> None:
        super().__init__(f"malformed event code {text!r}")
        self.text = text


class MalformedFieldValue(WeatherIngestError):
    """A measurement tag is present but holds non-numeric text."""

    def __init__(self, kind: "FieldKind", text: str) -> None:
        super().__init__(f"malformed value {text!r} for {kind.value}")
        self.kind = kind
        self.text = text


class FieldOutOfRange(WeatherIngestError):
    """A measurement value lies outside its declared range."""

    def __init__(self, kind: "FieldKind", value: float) -> None:
        super().__init__(f"value {value} out of range for {kind.value}")
        self.kind = kind
        self.value = value


class RequiredFieldMissing(WeatherIngestError):
    """The wire schema needs a value the record does not carry."""

    def __init__(self, kind: "FieldKind") -> None:
        super().__init__(f"{kind.value} is required by the binary schema but absent")
        self.kind = kind


class PersistenceFailure(WeatherIngestError):
    """Creating the target directory or writing the file failed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"could not persist {path}: {reason}")
        self.path = path
        self.reason = reason


class WireValueOutOfRange(WeatherIngestError):
    """An integer does not fit its 32-bit slot in the binary schema."""

    def __init__(self, name: str, value: object) -> None:
        super().__init__(f"{name} value {value} does not fit the binary schema")
        self.name = name
        self.value = value
