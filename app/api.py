"""HTTP route definitions for the service."""

from __future__ import annotations

import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status

from app.schemas import EventFlagsModel, IngestError, IngestResponse, StoredMeasurementResponse
from services.ingest import IngestService, build_default_ingest_service

router = APIRouter()


def get_ingest_service() -> IngestService:
    return build_default_ingest_service()


@router.post(
    "/measurements",
    response_model=IngestResponse,
    summary="Ingest a WEATHERDATA XML document.",
)
async def ingest_measurements(
    request: Request,
    service: IngestService = Depends(get_ingest_service),
) -> IngestResponse:
    body = await request.body()
    try:
        report = service.ingest_document(body)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return IngestResponse(
        stored=report.stored,
        paths=report.paths,
        errors=[IngestError(record_number=e.record_number, reason=e.reason) for e in report.errors],
    )


@router.get(
    "/measurements/{day}/{station}/{hour}",
    response_model=StoredMeasurementResponse,
    summary="Fetch a stored measurement decoded from its binary file.",
)
async def get_measurement(
    day: dt.date,
    station: int,
    hour: int = Path(..., ge=0, le=23),
    service: IngestService = Depends(get_ingest_service),
) -> StoredMeasurementResponse:
    persister = service.persister
    path = persister.resolver.resolve_parts(persister.store.root_path, day, station, hour)
    try:
        data = persister.store.get_file(path)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No measurement stored for station {station} on {day} hour {hour}.",
        ) from exc

    stored = persister.encoder.decode(data)
    return StoredMeasurementResponse(
        station=stored.station,
        datetime=stored.epoch_seconds,
        dewpoint=stored.dewpoint,
        fallen_snow=stored.fallen_snow,
        overcast=stored.overcast,
        precipitation=stored.precipitation,
        sea_air_pressure=stored.sea_air_pressure,
        station_air_pressure=stored.station_air_pressure,
        temperature=stored.temperature,
        visibility=stored.visibility,
        events=EventFlagsModel(**stored.events._asdict()),
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
