"""
Dix Mille - Local Key-Value Storage

Minimal string key-value backends the game and rules stores write to.
Backends raise OSError on I/O failure; the stores translate that into
PersistenceError.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class LocalStorage(Protocol):
    """String key-value storage."""

    def save_string(self, key: str, value: str) -> None: ...

    def get_string(self, key: str) -> str | None: ...

    def remove(self, key: str) -> None: ...

    def clear(self) -> None: ...


class MemoryStorage:
    """In-process storage, used for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def save_string(self, key: str, value: str) -> None:
        self._values[key] = value

    def get_string(self, key: str) -> str | None:
        return self._values.get(key)

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def clear(self) -> None:
        self._values.clear()


class FileStorage:
    """Stores each key as `<key>.json` inside a directory.

    Writes go to a temporary file in the same directory and are moved into
    place, so a failed write never leaves a half-written snapshot.
    """

    SUFFIX = ".json"

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}{self.SUFFIX}"

    def save_string(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(value)
            os.replace(tmp_name, self._path(key))
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Wrote %s (%d bytes)", self._path(key), len(value))

    def get_string(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise OSError(f"{path} is not valid UTF-8") from exc

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def clear(self) -> None:
        if not self.directory.exists():
            return
        for path in self.directory.glob(f"*{self.SUFFIX}"):
            path.unlink(missing_ok=True)
