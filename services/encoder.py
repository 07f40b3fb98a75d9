"""Binary encoding of measurements into the station wire schema.

The schema is the ``weatherstation.v1.Measurement`` protobuf message. It is
assembled from a descriptor at import time so no generated module is needed;
the field numbers below are the compatibility contract with stored files.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Optional

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError

from models.errors import RequiredFieldMissing, WireValueOutOfRange
from models.events import EventBitmask, EventFlags
from models.records import FieldKind, Measurement

_FieldType = descriptor_pb2.FieldDescriptorProto

PACKAGE = "weatherstation.v1"
MESSAGE_NAME = "Measurement"

# (wire name, protobuf type); field numbers follow list order starting at 1
_WIRE_FIELDS: tuple[tuple[str, int], ...] = (
    ("station", _FieldType.TYPE_INT32),
    ("datetime", _FieldType.TYPE_INT32),
    ("dewpoint", _FieldType.TYPE_FLOAT),
    ("fallen_snow", _FieldType.TYPE_FLOAT),
    ("overcast", _FieldType.TYPE_FLOAT),
    ("precipitation", _FieldType.TYPE_FLOAT),
    ("sea_air_pressure", _FieldType.TYPE_FLOAT),
    ("station_air_pressure", _FieldType.TYPE_FLOAT),
    ("temperature", _FieldType.TYPE_FLOAT),
    ("visibility", _FieldType.TYPE_FLOAT),
    ("freeze", _FieldType.TYPE_BOOL),
    ("rain", _FieldType.TYPE_BOOL),
    ("snow", _FieldType.TYPE_BOOL),
    ("hail", _FieldType.TYPE_BOOL),
    ("storm", _FieldType.TYPE_BOOL),
    ("tornado", _FieldType.TYPE_BOOL),
)

# wire fields that must carry a value, and the field kind feeding each
WIRE_VALUE_FIELDS: dict[str, FieldKind] = {
    "dewpoint": FieldKind.dew_point,
    "fallen_snow": FieldKind.snow_depth,
    "overcast": FieldKind.cloud_cover,
    "precipitation": FieldKind.precipitation,
    "sea_air_pressure": FieldKind.sea_level_pressure,
    "station_air_pressure": FieldKind.station_pressure,
    "temperature": FieldKind.temperature,
    "visibility": FieldKind.visibility,
}


def _build_message_class() -> type:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="weatherstation_v1.proto",
        package=PACKAGE,
        syntax="proto3",
    )
    message = file_proto.message_type.add(name=MESSAGE_NAME)
    for number, (name, field_type) in enumerate(_WIRE_FIELDS, start=1):
        message.field.add(
            name=name,
            number=number,
            type=field_type,
            label=_FieldType.LABEL_OPTIONAL,
        )

    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(file_proto.SerializeToString())
    descriptor = pool.FindMessageTypeByName(f"{PACKAGE}.{MESSAGE_NAME}")
    return message_factory.GetMessageClass(descriptor)


MeasurementMessage = _build_message_class()

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


@dataclass(frozen=True)
class StoredMeasurement:
    """A measurement as read back from its binary form."""

    station: int
    epoch_seconds: int
    dewpoint: float
    fallen_snow: float
    overcast: float
    precipitation: float
    sea_air_pressure: float
    station_air_pressure: float
    temperature: float
    visibility: float
    events: EventFlags

    def timestamp(self, tz: Optional[tzinfo] = None) -> datetime:
        """Wall-clock time in ``tz``, or in the process local zone when omitted."""
        moment = datetime.fromtimestamp(self.epoch_seconds, tz)
        return moment.replace(tzinfo=None)


class BinaryEncoder:
    """Maps measurements to and from the fixed binary schema.

    Without an explicit ``tz`` the timestamp is interpreted in the local zone
    of the running process, which is how existing files were written. Pass a
    zone to make the output independent of the host.
    """

    def __init__(self, tz: Optional[tzinfo] = None) -> None:
        self.tz = tz

    def epoch_seconds(self, timestamp: datetime) -> int:
        if timestamp.tzinfo is None and self.tz is not None:
            timestamp = timestamp.replace(tzinfo=self.tz)
        # naive datetimes resolve against the local zone
        return int(timestamp.timestamp())

    def to_message(self, measurement: Measurement):
        values: dict[str, float] = {}
        for wire_name, kind in WIRE_VALUE_FIELDS.items():
            value = measurement.value(kind)
            if value is None:
                raise RequiredFieldMissing(kind)
            values[wire_name] = value

        # int32 slots: station ids and timestamps past 2038-01-19 do not fit
        try:
            epoch = self.epoch_seconds(measurement.timestamp)
        except (OverflowError, OSError) as exc:
            raise WireValueOutOfRange("datetime", measurement.timestamp) from exc
        for name, number in (("station", measurement.station), ("datetime", epoch)):
            if not INT32_MIN <= number <= INT32_MAX:
                raise WireValueOutOfRange(name, number)

        flags = EventBitmask.decode(measurement.events)
        return MeasurementMessage(
            station=measurement.station,
            datetime=epoch,
            **values,
            **flags._asdict(),
        )

    def encode(self, measurement: Measurement) -> bytes:
        return self.to_message(measurement).SerializeToString()

    def decode(self, data: bytes) -> StoredMeasurement:
        message = MeasurementMessage()
        try:
            message.ParseFromString(data)
        except DecodeError as exc:
            raise ValueError(f"not a valid measurement payload: {exc}") from exc

        return StoredMeasurement(
            station=message.station,
            epoch_seconds=message.datetime,
            dewpoint=message.dewpoint,
            fallen_snow=message.fallen_snow,
            overcast=message.overcast,
            precipitation=message.precipitation,
            sea_air_pressure=message.sea_air_pressure,
            station_air_pressure=message.station_air_pressure,
            temperature=message.temperature,
            visibility=message.visibility,
            events=EventFlags(*(getattr(message, name) for name in EventFlags._fields)),
        )
