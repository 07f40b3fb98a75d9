from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

import pytest

from models.errors import PersistenceFailure, RequiredFieldMissing
from models.records import Measurement
from services.encoder import BinaryEncoder
from services.persister import Persister
from storage.station_store import StationFileStore


@pytest.fixture()
def persister(tmp_path: Path) -> Persister:
    store = StationFileStore(root_path=tmp_path / "weather")
    return Persister(store=store, encoder=BinaryEncoder(tz=timezone.utc))


def test_persist_writes_encoded_bytes(
    persister: Persister, tmp_path: Path, make_measurement: Callable[..., Measurement]
) -> None:
    measurement = make_measurement()

    path = persister.persist(tmp_path / "weather", measurement)

    expected = tmp_path / "weather" / "2009-09-13" / "123456" / "5.dat"
    assert Path(path) == expected
    assert expected.read_bytes() == persister.encoder.encode(measurement)


def test_persist_twice_overwrites(
    persister: Persister, tmp_path: Path, make_measurement: Callable[..., Measurement]
) -> None:
    base = tmp_path / "weather"
    persister.persist(base, make_measurement(temperature=1.5))
    path = persister.persist(base, make_measurement(temperature=2.5, timestamp=datetime(2009, 9, 13, 5, 45, 0)))

    stored = persister.encoder.decode(Path(path).read_bytes())
    assert stored.temperature == 2.5
    assert sorted(p.name for p in Path(path).parent.iterdir()) == ["5.dat"]


def test_persist_default_uses_store_root(persister: Persister, make_measurement: Callable[..., Measurement]) -> None:
    path = persister.persist_default(make_measurement())

    assert Path(path).is_relative_to(persister.store.root_path)
    assert list(persister.store.list_files()) == ["2009-09-13/123456/5.dat"]


def test_encode_failure_leaves_no_file(
    persister: Persister, tmp_path: Path, make_measurement: Callable[..., Measurement]
) -> None:
    with pytest.raises(RequiredFieldMissing):
        persister.persist(tmp_path / "weather", make_measurement(temperature=None))

    assert not (tmp_path / "weather" / "2009-09-13" / "123456" / "5.dat").exists()


def test_filesystem_error_is_wrapped(
    persister: Persister, tmp_path: Path, make_measurement: Callable[..., Measurement]
) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    with pytest.raises(PersistenceFailure) as excinfo:
        persister.persist(blocker, make_measurement())
    assert isinstance(excinfo.value.__cause__, OSError)
    assert excinfo.value.path.endswith("5.dat")


def test_store_get_missing_file(tmp_path: Path) -> None:
    store = StationFileStore(root_path=tmp_path)

    with pytest.raises(KeyError, match="missing.dat"):
        store.get_file(tmp_path / "missing.dat")


def test_store_put_and_list(tmp_path: Path) -> None:
    store = StationFileStore(root_path=tmp_path)
    store.put_file(tmp_path / "2009-09-13" / "1" / "3.dat", b"abc")

    assert store.get_file(tmp_path / "2009-09-13" / "1" / "3.dat") == b"abc"
    assert list(store.list_files()) == ["2009-09-13/1/3.dat"]
    assert list(StationFileStore(root_path=tmp_path / "nowhere").list_files()) == []
