"""File-backed key-value store with browser ``localStorage`` semantics.

Keys and values are strings. The whole store lives in one JSON object on
disk; every write replaces the file atomically. Several stores (in one or
more processes) may share a path: each read-modify-write holds an
exclusive lock on a sidecar ``.lock`` file.
"""
from __future__ import annotations

import fcntl
import json
import os
import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from stickyboard.utils.logging import get_logger

logger = get_logger(__name__)


class LocalStore:
    """String key → string value store persisted to a JSON file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock_path = self._path.with_name(self._path.name + ".lock")

    @property
    def path(self) -> Path:
        return self._path

    @contextmanager
    def _locked(self) -> Iterator[None]:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._lock_path, "a") as lock_file:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)

    def _read(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as err:
            logger.error("Local store unreadable, starting empty", extra={"path": str(self._path), "error": str(err)})
            return {}
        try:
            data = json.loads(text or "{}")
        except json.JSONDecodeError as err:
            logger.error("Local store unreadable, starting empty", extra={"path": str(self._path), "error": str(err)})
            return {}
        if not isinstance(data, dict):
            logger.error("Local store is not a JSON object, starting empty", extra={"path": str(self._path)})
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def _update(self, change: Callable[[dict[str, str]], bool]) -> None:
        # Read, change and write under one lock; ``change`` returns False to skip the write
        with self._locked():
            data = self._read()
            if change(data):
                self._write(data)

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        def change(data: dict[str, str]) -> bool:
            data[key] = str(value)
            return True

        self._update(change)

    def remove_item(self, key: str) -> None:
        self._update(lambda data: data.pop(key, None) is not None)

    def clear(self) -> None:
        def change(data: dict[str, str]) -> bool:
            data.clear()
            return True

        self._update(change)

    def keys(self) -> list[str]:
        return list(self._read())

    def get_json(self, key: str, default: Any = None) -> Any:
        """Decode the JSON value under ``key``; corrupt values read as ``default``."""
        raw = self.get_item(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError as err:
            logger.error("Corrupt JSON in local store", extra={"key": key, "error": str(err)})
            return default

    def set_json(self, key: str, value: Any) -> None:
        self.set_item(key, json.dumps(value))
