"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class IngestError(BaseModel):
    """A record skipped while ingesting a document."""

    record_number: int = Field(..., ge=1)
    reason: str


class IngestResponse(BaseModel):
    """Outcome of ingesting one WEATHERDATA document."""

    stored: int = Field(..., ge=0, description="Number of records written.")
    paths: List[str] = Field(default_factory=list)
    errors: List[IngestError] = Field(default_factory=list)


class EventFlagsModel(BaseModel):
    freeze: bool
    rain: bool
    snow: bool
    hail: bool
    storm: bool
    tornado: bool


class StoredMeasurementResponse(BaseModel):
    """A stored measurement decoded from its binary file."""

    station: int
    datetime: int = Field(..., description="Seconds since the epoch.")
    dewpoint: float
    fallen_snow: float
    overcast: float
    precipitation: float
    sea_air_pressure: float
    station_air_pressure: float
    temperature: float
    visibility: float
    events: EventFlagsModel
