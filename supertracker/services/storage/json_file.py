"""
JSON File Storage Implementation

DESIGN DECISION: One small JSON object on disk plays the role browser
local storage plays for the web widget:
1. Human readable, easy to inspect or hand-edit
2. No database setup required
3. Whole file is rewritten on every set

TRADEOFFS:
- Not suitable for large or concurrent workloads (we store one record)
- Writes go to a temp file and are moved into place, so a crash mid-write
  leaves the previous file intact
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Optional

from supertracker.services.storage.interface import (
    CorruptStorageError,
    KeyValueStorageInterface,
    StorageError,
)


class JsonFileKeyValueStorage(KeyValueStorageInterface):
    """
    Key-value storage backed by a single JSON object file.

    A missing file is an empty store.
    """

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        if value is None:
            return None
        return value if isinstance(value, str) else json.dumps(value)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> bool:
        data = self._read()
        if key not in data:
            return False
        del data[key]
        self._write(data)
        return True

    def _read(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except json.JSONDecodeError as e:
            raise CorruptStorageError(f"Storage file {self._path} is not valid JSON: {e}") from e
        except OSError as e:
            raise StorageError(f"Could not read storage file {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise CorruptStorageError(f"Storage file {self._path} does not hold a JSON object")
        return data

    def _write(self, data: dict) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                dir=self._path.parent,
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, indent=2, sort_keys=True)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Could not write storage file {self._path}: {e}") from e
