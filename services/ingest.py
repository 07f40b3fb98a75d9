"""Parse a WEATHERDATA document and persist each of its records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from xml.etree import ElementTree

from models.errors import WeatherIngestError
from services.parser import RecordParser, iter_measurements
from services.persister import Persister, build_default_persister
from settings import get_settings

logger = logging.getLogger(__name__)


@dataclass
class RecordError:
    """A record that was skipped, numbered from 1 in document order."""

    record_number: int
    reason: str


@dataclass
class IngestReport:
    """Outcome of ingesting one document."""

    paths: List[str] = field(default_factory=list)
    errors: List[RecordError] = field(default_factory=list)

    @property
    def stored(self) -> int:
        return len(self.paths)


class IngestService:
    """Runs each record through parse and persist, skipping bad records."""

    def __init__(self, parser: RecordParser, persister: Persister) -> None:
        self.parser = parser
        self.persister = persister

    def ingest_document(self, data: bytes, base_path: Optional[str] = None) -> IngestReport:
        if not data.strip():
            raise ValueError("Document is empty.")
        try:
            document = ElementTree.fromstring(data)
        except ElementTree.ParseError as exc:
            raise ValueError(f"Malformed XML document: {exc}") from exc

        report = IngestReport()
        for record_number, element in enumerate(iter_measurements(document), start=1):
            try:
                measurement = self.parser.parse(element)
                if base_path is None:
                    path = self.persister.persist_default(measurement)
                else:
                    path = self.persister.persist(base_path, measurement)
            except WeatherIngestError as exc:
                logger.warning(
                    "Skipping record",
                    extra={"record_number": record_number, "reason": str(exc)},
                )
                report.errors.append(RecordError(record_number=record_number, reason=str(exc)))
                continue
            report.paths.append(path)

        logger.info(
            "Ingested document",
            extra={"stored": report.stored, "error_count": len(report.errors)},
        )
        return report

    def ingest_file(self, path: Path, base_path: Optional[str] = None) -> IngestReport:
        return self.ingest_document(path.read_bytes(), base_path=base_path)


@lru_cache
def build_default_ingest_service() -> IngestService:
    """Factory that wires the ingest service from settings."""
    settings = get_settings()
    parser = RecordParser(strict_ranges=settings.strict_ranges)
    return IngestService(parser=parser, persister=build_default_persister())
