"""
Local Storage Implementations

DESIGN DECISION: The file store keeps one JSON file per key in a data
directory, the desktop equivalent of browser local storage:
1. Nothing to install or configure
2. The user can open and back up the files directly
3. Each write replaces the whole file atomically

TRADEOFFS:
- Every mutation rewrites the whole namespace (fine for one person's data)
- No transactions across keys
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from expense_tracker.log import get_logger
from expense_tracker.services.storage.interface import KeyValueStore, StorageError


logger = get_logger(__name__)


class JsonFileStore(KeyValueStore):
    """
    File-backed key-value store.

    Key "expense-tracker-data" lives in "<data_dir>/expense-tracker-data.json".
    """

    def __init__(self, data_dir: Union[Path, str]):
        self._data_dir = Path(data_dir)
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create data directory {self._data_dir}: {e}")

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path(self, key: str) -> Path:
        return self._data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        # Write next to the target, then swap it in
        fd, tmp_name = tempfile.mkstemp(
            dir=self._data_dir, prefix=f".{key}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except OSError as e:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise StorageError(f"Failed to write {path}: {e}")

        logger.debug("storage_write", key=key, size=len(value))

    def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}")
        return True


class InMemoryStore(KeyValueStore):
    """Dict-backed store for tests and for running without a data directory."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None
