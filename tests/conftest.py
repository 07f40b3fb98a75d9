from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterator, Optional

import pytest

from models.records import FIELD_SCHEMA, FieldKind, Measurement
from services.ingest import build_default_ingest_service
from services.persister import build_default_persister
from settings import get_settings
from storage.station_store import build_default_store

FULL_RECORD = """
<MEASUREMENT>
    <STN>123456</STN>
    <DATE>2009-09-13</DATE>
    <TIME>05:00:00</TIME>
    <TEMP>-60.1</TEMP>
    <DEWP>-58.1</DEWP>
    <STP>1034.5</STP>
    <SLP>1007.6</SLP>
    <VISIB>123.7</VISIB>
    <WDSP>10.8</WDSP>
    <PRCP>11.28</PRCP>
    <SNDP>11.1</SNDP>
    <FRSHTT>010101</FRSHTT>
    <CLDC>87.4</CLDC>
    <WNDDIR>342</WNDDIR>
</MEASUREMENT>
"""

# exactly representable as float32 so values survive a round trip unchanged
_FULL_VALUES = {
    FieldKind.temperature: -12.5,
    FieldKind.snow_depth: 3.25,
    FieldKind.precipitation: 0.75,
    FieldKind.wind_speed: 10.5,
    FieldKind.visibility: 123.5,
    FieldKind.sea_level_pressure: 1007.5,
    FieldKind.station_pressure: 1034.5,
    FieldKind.dew_point: -14.0,
    FieldKind.cloud_cover: 87.5,
    FieldKind.wind_direction: 342.0,
}


def weatherdata(*records: str) -> bytes:
    return ("<WEATHERDATA>" + "".join(records) + "</WEATHERDATA>").encode("utf-8")


@pytest.fixture()
def make_measurement() -> Callable[..., Measurement]:
    def factory(
        station: int = 123456,
        timestamp: datetime = datetime(2009, 9, 13, 5, 0, 0),
        events: int = 0,
        **overrides: Optional[float],
    ) -> Measurement:
        fields = dict(_FULL_VALUES)
        for name, value in overrides.items():
            fields[FieldKind(name)] = value
        return Measurement(station=station, timestamp=timestamp, fields=fields, events=events)

    return factory


@pytest.fixture()
def data_root(tmp_path, monkeypatch) -> Iterator:
    """Point the default factories at a temporary data root."""
    root = tmp_path / "weather"
    monkeypatch.setenv("WEATHER_DATA_ROOT", str(root))
    monkeypatch.delenv("WEATHER_TIMEZONE", raising=False)
    monkeypatch.delenv("WEATHER_STRICT_RANGES", raising=False)

    caches = (get_settings, build_default_store, build_default_persister, build_default_ingest_service)
    for cache in caches:
        cache.cache_clear()
    yield root
    for cache in caches:
        cache.cache_clear()


def all_kinds() -> list[FieldKind]:
    return [spec.kind for spec in FIELD_SCHEMA]
