from __future__ import annotations

import logging
from datetime import timezone
from pathlib import Path

import pytest

from conftest import FULL_RECORD, weatherdata
from services.encoder import BinaryEncoder
from services.ingest import IngestService
from services.parser import RecordParser
from services.persister import Persister
from storage.station_store import StationFileStore

BAD_STATION = "<MEASUREMENT><DATE>2009-09-13</DATE><TIME>06:00:00</TIME></MEASUREMENT>"
MISSING_TEMP = FULL_RECORD.replace("<TEMP>-60.1</TEMP>", "").replace("05:00:00", "07:00:00")


@pytest.fixture()
def service(tmp_path: Path) -> IngestService:
    store = StationFileStore(root_path=tmp_path / "weather")
    persister = Persister(store=store, encoder=BinaryEncoder(tz=timezone.utc))
    return IngestService(parser=RecordParser(), persister=persister)


def test_ingest_document_stores_records(service: IngestService, tmp_path: Path) -> None:
    report = service.ingest_document(weatherdata(FULL_RECORD))

    assert report.stored == 1
    assert report.errors == []
    assert Path(report.paths[0]) == tmp_path / "weather" / "2009-09-13" / "123456" / "5.dat"


def test_bad_records_are_logged_and_skipped(service: IngestService, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="services.ingest"):
        report = service.ingest_document(weatherdata(BAD_STATION, FULL_RECORD, MISSING_TEMP))

    assert report.stored == 1
    assert [error.record_number for error in report.errors] == [1, 3]
    assert "STN" in report.errors[0].reason
    assert "temperature" in report.errors[1].reason
    skipped = [record for record in caplog.records if record.getMessage() == "Skipping record"]
    assert [record.record_number for record in skipped] == [1, 3]


def test_ingest_into_explicit_base(service: IngestService, tmp_path: Path) -> None:
    report = service.ingest_document(weatherdata(FULL_RECORD), base_path=str(tmp_path / "other"))

    assert (tmp_path / "other" / "2009-09-13" / "123456" / "5.dat").is_file()
    assert report.stored == 1


@pytest.mark.parametrize("body", [b"", b"   ", b"<WEATHERDATA><MEASUREMENT>"])
def test_unreadable_document(service: IngestService, body: bytes) -> None:
    with pytest.raises(ValueError):
        service.ingest_document(body)


def test_ingest_file(service: IngestService, tmp_path: Path) -> None:
    source = tmp_path / "feed.xml"
    source.write_bytes(weatherdata(FULL_RECORD))

    assert service.ingest_file(source).stored == 1


def test_values_too_wide_for_the_schema_skip_only_their_record(service: IngestService) -> None:
    late = FULL_RECORD.replace("2009-09-13", "2040-01-01")
    big_station = FULL_RECORD.replace("123456", "99999999999")
    later_hour = FULL_RECORD.replace("05:00:00", "06:00:00")

    report = service.ingest_document(weatherdata(FULL_RECORD, late, big_station, later_hour))

    assert report.stored == 2
    assert [error.record_number for error in report.errors] == [2, 3]
    assert "datetime" in report.errors[0].reason
    assert "station" in report.errors[1].reason
    assert Path(report.paths[1]).name == "6.dat"
