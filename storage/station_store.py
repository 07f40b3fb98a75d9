from __future__ import annotations

import os
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional

from settings import get_settings
from storage.paths import FILE_SUFFIX


class StationFileStore:
    """Byte sink for encoded measurements laid out under ``root_path``."""

    def __init__(self, root_path: Path) -> None:
        self.root_path = root_path

    def ensure_parent(self, path: str | os.PathLike[str]) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        return target

    def put_file(self, path: str | os.PathLike[str], data: bytes) -> Path:
        """Write ``data`` to ``path``, replacing any previous contents."""
        target = self.ensure_parent(path)
        # write beside the target so the rename stays on one filesystem
        fd, temp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            os.replace(temp_name, target)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise
        return target

    def get_file(self, path: str | os.PathLike[str]) -> bytes:
        target = Path(path)
        if not target.is_file():
            raise KeyError(f"No stored measurement at {os.fspath(path)!r}.")
        return target.read_bytes()

    def list_files(self) -> Iterable[str]:
        """Relative keys of every stored measurement file, sorted."""
        if not self.root_path.exists():
            return []
        return sorted(
            path.relative_to(self.root_path).as_posix()
            for path in self.root_path.rglob(f"*{FILE_SUFFIX}")
            if path.is_file()
        )


@lru_cache
def build_default_store(root_path: Optional[str] = None) -> StationFileStore:
    settings = get_settings()
    store_root = settings.data_root if root_path is None else root_path
    return StationFileStore(root_path=Path(store_root))
