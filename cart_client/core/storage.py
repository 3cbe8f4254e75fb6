"""Key-value storage backends for client-side persistence"""

import re
from pathlib import Path
from typing import Optional


class StorageFull(OSError):
    """Write rejected because the storage quota is exhausted"""
    pass


class KeyValueStorage:
    """Read/write/delete of string values by key"""

    def read(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def write(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    """In-process storage with an optional byte quota"""

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes
        self._values: dict[str, str] = {}

    def read(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def write(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            used = sum(len(v.encode()) for k, v in self._values.items() if k != key)
            if used + len(value.encode()) > self.quota_bytes:
                raise StorageFull(f"Storage quota of {self.quota_bytes} bytes exceeded")
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class FileStorage(KeyValueStorage):
    """One file per key under ``directory``"""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{re.sub(r'[^A-Za-z0-9_.-]', '_', key)}.json"

    def read(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        # Readers never see a partially written file
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
