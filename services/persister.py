"""Encode, place and write a single measurement."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo

from models.errors import PersistenceFailure
from models.records import Measurement
from services.encoder import BinaryEncoder
from settings import get_settings
from storage.paths import PathResolver
from storage.station_store import StationFileStore, build_default_store

logger = logging.getLogger(__name__)


class Persister:
    """Writes each measurement to its canonical path as encoded bytes."""

    def __init__(
        self,
        store: StationFileStore,
        encoder: Optional[BinaryEncoder] = None,
        resolver: Optional[PathResolver] = None,
    ) -> None:
        self.store = store
        self.encoder = encoder or BinaryEncoder()
        self.resolver = resolver or PathResolver()

    def persist(self, base_path: str | os.PathLike[str], measurement: Measurement) -> str:
        """Store ``measurement`` under ``base_path`` and return the written path.

        Encoding errors propagate unchanged; filesystem errors are raised as
        :class:`PersistenceFailure`. An existing file at the path is replaced.
        """
        path = self.resolver.resolve(base_path, measurement)
        try:
            self.store.ensure_parent(path)
        except OSError as exc:
            raise PersistenceFailure(path, str(exc)) from exc

        data = self.encoder.encode(measurement)

        try:
            self.store.put_file(path, data)
        except OSError as exc:
            raise PersistenceFailure(path, str(exc)) from exc

        logger.debug(
            "Stored measurement",
            extra={"station": measurement.station, "timestamp": measurement.timestamp, "path": path},
        )
        return path

    def persist_default(self, measurement: Measurement) -> str:
        """Store ``measurement`` under the store's own root."""
        return self.persist(self.store.root_path, measurement)


@lru_cache
def build_default_persister() -> Persister:
    """Factory that wires the persister from settings."""
    settings = get_settings()
    tz = ZoneInfo(settings.timezone) if settings.timezone else None
    return Persister(store=build_default_store(), encoder=BinaryEncoder(tz=tz))
