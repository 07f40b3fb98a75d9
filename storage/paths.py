from __future__ import annotations

import os
from datetime import date

from models.records import Measurement

FILE_SUFFIX = ".dat"


class PathResolver:
    """Derives ``<base>/<yyyy-MM-dd>/<station>/<hour>.dat`` for a measurement."""

    def __init__(self, separator: str = os.sep) -> None:
        self.separator = separator

    def resolve(self, base_path: str | os.PathLike[str], measurement: Measurement) -> str:
        timestamp = measurement.timestamp
        return self.resolve_parts(base_path, timestamp.date(), measurement.station, timestamp.hour)

    def resolve_parts(
        self,
        base_path: str | os.PathLike[str],
        day: date,
        station: int,
        hour: int,
    ) -> str:
        if not 0 <= hour <= 23:
            raise ValueError(f"hour must be within 0..23, got {hour}")
        base = os.fspath(base_path).rstrip(self.separator) + self.separator
        # hour is not zero padded: 05:00 lands in 5.dat
        return base + self.separator.join(
            (day.isoformat(), str(station), f"{hour}{FILE_SUFFIX}")
        )
