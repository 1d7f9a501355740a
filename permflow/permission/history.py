"""
Request History - Remembers which permissions were actively requested.

The OS reports "no rationale" both before the first request and after the
user picked "don't ask again". Only this history tells the two apart.

Storage failures never reach callers: they are logged and read as "not
requested", so a broken store can never produce a false permanent denial.
"""

import json
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from ..logger import get_logger

KEY_PREFIX = "permission_requested_"


class RequestHistoryStore(ABC):
    """Durable map of permission key -> "was requested before"."""

    @abstractmethod
    def was_requested(self, key: str) -> bool:
        """Check if `key` has been requested and not granted since."""

    @abstractmethod
    def mark_requested(self, key: str) -> None:
        """Record that `key` was requested."""

    @abstractmethod
    def clear(self, key: str) -> None:
        """Forget the request history of `key`."""

    @abstractmethod
    def clear_all(self) -> None:
        """Forget all request history."""


class InMemoryHistoryStore(RequestHistoryStore):
    """History kept for the lifetime of the process only."""

    def __init__(self, requested: Optional[List[str]] = None):
        self._requested: Dict[str, bool] = {key: True for key in (requested or [])}

    def was_requested(self, key: str) -> bool:
        return self._requested.get(key, False)

    def mark_requested(self, key: str) -> None:
        self._requested[key] = True

    def clear(self, key: str) -> None:
        self._requested.pop(key, None)

    def clear_all(self) -> None:
        self._requested.clear()

    def snapshot(self) -> Dict[str, bool]:
        """Copy of the current history, for tests and diagnostics."""
        return dict(self._requested)


class JsonFileHistoryStore(RequestHistoryStore):
    """History persisted to a flat JSON file.

    File format:
        {"permission_requested_android.permission.CAMERA": true, ...}

    Reads are served from an in-process cache so writes are visible
    immediately; each mutation rewrites the file atomically.

    Example:
        store = JsonFileHistoryStore("~/.permflow/history.json")
        store.mark_requested("android.permission.CAMERA")
    """

    COMPONENT = "JsonFileHistoryStore"

    def __init__(self, path: str):
        """Initialize the store.

        Args:
            path: Location of the history file (created on first write)
        """
        self.path = Path(os.path.expanduser(path))
        self._lock = threading.RLock()
        self._logger = get_logger()
        self._cache: Optional[Dict[str, bool]] = None

    def was_requested(self, key: str) -> bool:
        with self._lock:
            return bool(self._load().get(KEY_PREFIX + key, False))

    def mark_requested(self, key: str) -> None:
        with self._lock:
            data = self._load()
            data[KEY_PREFIX + key] = True
            self._save(data)

    def clear(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if data.pop(KEY_PREFIX + key, None) is not None:
                self._save(data)

    def clear_all(self) -> None:
        with self._lock:
            self._cache = {}
            self._save(self._cache)

    def _load(self) -> Dict[str, bool]:
        """Load the history file once, treating any failure as empty history."""
        if self._cache is not None:
            return self._cache

        data: Dict[str, bool] = {}
        if self.path.exists():
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    raw = json.load(f)
                if isinstance(raw, dict):
                    data = {k: bool(v) for k, v in raw.items() if isinstance(k, str)}
                else:
                    self._logger.warn(self.COMPONENT, "history_file_malformed", {
                        "path": str(self.path),
                    })
            except (OSError, ValueError) as e:
                self._logger.warn(self.COMPONENT, "history_read_failed", {
                    "path": str(self.path),
                    "error": e,
                })

        self._cache = data
        return data

    def _save(self, data: Dict[str, bool]) -> None:
        """Write the history file atomically; failures are logged only."""
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=".history-", suffix=".json", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            self._logger.warn(self.COMPONENT, "history_write_failed", {
                "path": str(self.path),
                "error": e,
            })
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
