"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from models.events import EVENT_MASK, EventBitmask, EventFlags


class FieldKind(str, Enum):
    """Measurable quantities reported by a station, in feed order."""

    temperature = "temperature"
    snow_depth = "snow_depth"
    precipitation = "precipitation"
    wind_speed = "wind_speed"
    visibility = "visibility"
    sea_level_pressure = "sea_level_pressure"
    station_pressure = "station_pressure"
    dew_point = "dew_point"
    cloud_cover = "cloud_cover"
    wind_direction = "wind_direction"


@dataclass(frozen=True)
class FieldSpec:
    """Tag name and inclusive valid range of one field kind."""

    kind: FieldKind
    tag: str
    minimum: float
    maximum: float
    precision: int

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum


FIELD_SCHEMA: tuple[FieldSpec, ...] = (
    FieldSpec(FieldKind.temperature, "TEMP", -9999.9, 9999.9, 1),  # degrees Celsius
    FieldSpec(FieldKind.snow_depth, "SNDP", -9999.9, 9999.9, 1),  # cm
    FieldSpec(FieldKind.precipitation, "PRCP", 0.0, 999.99, 2),  # cm
    FieldSpec(FieldKind.wind_speed, "WDSP", 0.0, 999.9, 1),  # km/h
    FieldSpec(FieldKind.visibility, "VISIB", 0.0, 999.9, 1),  # km
    FieldSpec(FieldKind.sea_level_pressure, "SLP", 0.0, 9999.9, 1),  # millibar
    FieldSpec(FieldKind.station_pressure, "STP", 0.0, 9999.9, 1),  # millibar
    FieldSpec(FieldKind.dew_point, "DEWP", -9999.9, 9999.9, 1),  # degrees Celsius
    FieldSpec(FieldKind.cloud_cover, "CLDC", 0.0, 99.9, 1),  # percent
    FieldSpec(FieldKind.wind_direction, "WNDDIR", 0, 359, 0),  # degrees
)

_SPECS_BY_KIND = {spec.kind: spec for spec in FIELD_SCHEMA}


def spec_for(kind: FieldKind) -> FieldSpec:
    return _SPECS_BY_KIND[kind]


@dataclass(frozen=True)
class Measurement:
    """One station's daily observation, parsed from a MEASUREMENT record.

    ``fields`` always holds every :class:`FieldKind`; a kind whose tag was
    missing maps to ``None``.
    """

    station: int
    timestamp: datetime
    fields: Mapping[FieldKind, Optional[float]]
    events: int = 0

    def __post_init__(self) -> None:
        missing = [spec.kind.value for spec in FIELD_SCHEMA if spec.kind not in self.fields]
        if missing or len(self.fields) != len(FIELD_SCHEMA):
            raise ValueError(f"fields must hold exactly the ten field kinds, missing: {missing}")
        if not 0 <= self.events <= EVENT_MASK:
            raise ValueError(f"events must be within 0..{EVENT_MASK}, got {self.events}")
        ordered = {spec.kind: self.fields[spec.kind] for spec in FIELD_SCHEMA}
        object.__setattr__(self, "fields", MappingProxyType(ordered))

    def value(self, kind: FieldKind) -> Optional[float]:
        return self.fields[kind]

    @property
    def flags(self) -> EventFlags:
        return EventBitmask.decode(self.events)


def empty_fields() -> dict[FieldKind, Optional[float]]:
    """Return a mapping with every field kind set to absent."""
    return {spec.kind: None for spec in FIELD_SCHEMA}
