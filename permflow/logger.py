"""
Structured JSON-lines logger for permflow.

Every entry is one JSON object per line so request flows can be replayed
after the fact: which key was requested, whether a dialog was launched, and
how the result was classified.

Usage:
    from permflow.logger import get_logger

    logger = get_logger()
    logger.info("RequestCoordinator", "permission_requested", {"key": key})

    with logger.span("RequestCoordinator", "launch", {"key": key}) as span:
        granted = await launch(key)
        span.set_data({"granted": granted})
"""

import json
import tempfile
import threading
import time
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, Generator, Optional, TextIO


class LogLevel(IntEnum):
    """Log level enumeration."""
    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    @classmethod
    def from_string(cls, level_str: str) -> "LogLevel":
        """Parse string to LogLevel, defaulting to INFO."""
        mapping = {
            "TRACE": cls.TRACE,
            "DEBUG": cls.DEBUG,
            "INFO": cls.INFO,
            "WARN": cls.WARN,
            "WARNING": cls.WARN,
            "ERROR": cls.ERROR,
        }
        return mapping.get(str(level_str).upper(), cls.INFO)


class LogSpan:
    """Context manager that logs the duration of an operation."""

    def __init__(
        self,
        logger: "StructuredLogger",
        level: LogLevel,
        component: str,
        event: str,
        data: Optional[Dict[str, Any]] = None,
    ):
        self.logger = logger
        self.level = level
        self.component = component
        self.event = event
        self.data = dict(data or {})
        self._start: Optional[float] = None

    def __enter__(self) -> "LogSpan":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        duration_ms = (time.perf_counter() - (self._start or 0.0)) * 1000

        if exc_type is not None:
            self.data["error"] = str(exc_val)
            self.data["error_type"] = exc_type.__name__
            self.logger.log(
                LogLevel.ERROR, self.component, f"{self.event}_error",
                self.data, duration_ms=duration_ms,
            )
        else:
            self.logger.log(
                self.level, self.component, f"{self.event}_complete",
                self.data, duration_ms=duration_ms,
            )

        return False

    def set_data(self, data: Dict[str, Any]) -> None:
        """Add fields to the entry written when the span closes."""
        self.data.update(data)


class StructuredLogger:
    """Thread-safe JSON-lines logger with size-based rotation."""

    SENSITIVE_KEYS = {"token", "secret", "password", "context"}

    def __init__(self):
        self._lock = threading.RLock()
        self._session_id: str = self._generate_session_id()
        self._level: LogLevel = LogLevel.INFO
        self._enabled: bool = True
        self._log_sensitive_data: bool = True
        self._log_directory: Optional[Path] = None
        self._file_handle: Optional[TextIO] = None
        self._current_file_path: Optional[Path] = None
        self._max_file_size: int = 10 * 1024 * 1024
        self._max_files: int = 10
        self._write_count: int = 0
        self._console_output: bool = False

    @staticmethod
    def _generate_session_id() -> str:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return f"{timestamp}_{uuid.uuid4().hex[:4].upper()}"

    @property
    def session_id(self) -> str:
        """Get current session ID."""
        return self._session_id

    @session_id.setter
    def session_id(self, value: str) -> None:
        with self._lock:
            self._session_id = value
            self._close_file()

    @property
    def level(self) -> LogLevel:
        """Minimum level that is written."""
        return self._level

    @level.setter
    def level(self, value: LogLevel) -> None:
        self._level = value

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    @property
    def log_directory(self) -> Optional[Path]:
        return self._log_directory

    def set_console_output(self, enabled: bool) -> None:
        """Echo every entry to stdout as well as the log file."""
        self._console_output = enabled

    def configure(
        self,
        enabled: bool = True,
        level: str = "INFO",
        log_directory: Optional[str] = None,
        log_sensitive_data: bool = True,
        max_file_size: int = 10485760,
        max_files: int = 10,
        session_id: Optional[str] = None,
        console_output: bool = False,
    ) -> None:
        """Configure logger from settings."""
        with self._lock:
            self._enabled = enabled
            self._level = LogLevel.from_string(level)
            self._log_sensitive_data = log_sensitive_data
            self._max_file_size = max_file_size
            self._max_files = max_files
            self._console_output = console_output
            self._log_directory = Path(log_directory) if log_directory else None
            if session_id:
                self._session_id = session_id
            self._close_file()

    def error(self, component: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.ERROR, component, event, data)

    def warn(self, component: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.WARN, component, event, data)

    def info(self, component: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.INFO, component, event, data)

    def debug(self, component: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.DEBUG, component, event, data)

    def trace(self, component: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        self.log(LogLevel.TRACE, component, event, data)

    @contextmanager
    def span(
        self,
        component: str,
        event: str,
        data: Optional[Dict[str, Any]] = None,
        level: LogLevel = LogLevel.DEBUG,
    ) -> Generator[LogSpan, None, None]:
        """Create a timed span for an operation.

        Usage:
            with logger.span("PermissionLauncher", "launch_single") as span:
                granted = await single(key)
                span.set_data({"granted": granted})
        """
        with LogSpan(self, level, component, event, data) as span_obj:
            yield span_obj

    def log(
        self,
        level: LogLevel,
        component: str,
        event: str,
        data: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
    ) -> None:
        """Write one entry if the level passes the threshold.

        Logging never raises into the caller.
        """
        if not self._enabled or level < self._level:
            return

        try:
            entry = self._create_entry(level, component, event, data, duration_ms)
            json_str = json.dumps(entry, default=str)
            if self._console_output:
                print(f"[{level.name}] {component}.{event}: {json_str}")
            self._write_to_file(json_str)
        except Exception as e:
            if self._console_output:
                print(f"Logger error: {e}")

    def close(self) -> None:
        """Close the current log file."""
        with self._lock:
            self._close_file()

    def flush(self) -> None:
        with self._lock:
            if self._file_handle:
                self._file_handle.flush()

    def _create_entry(
        self,
        level: LogLevel,
        component: str,
        event: str,
        data: Optional[Dict[str, Any]],
        duration_ms: Optional[float],
    ) -> Dict[str, Any]:
        entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": level.name,
            "session_id": self._session_id,
            "component": component,
            "event": event,
        }
        if data:
            if self._log_sensitive_data:
                entry["data"] = self._sanitize(data)
            else:
                entry["data"] = self._redact(data)
        if duration_ms is not None:
            entry["duration_ms"] = round(duration_ms, 3)
        return entry

    def _sanitize(self, data: Any) -> Any:
        """Make data JSON encodable."""
        if isinstance(data, dict):
            return {str(k): self._sanitize(v) for k, v in data.items()}
        if isinstance(data, (list, tuple, set, frozenset)):
            return [self._sanitize(v) for v in data]
        if isinstance(data, (str, int, float, bool, type(None))):
            return data
        if isinstance(data, Exception):
            return {"type": type(data).__name__, "message": str(data)}
        return str(data)

    def _redact(self, data: Dict[str, Any]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for k, v in data.items():
            if str(k).lower() in self.SENSITIVE_KEYS:
                result[k] = "<redacted>"
            elif isinstance(v, dict):
                result[k] = self._redact(v)
            else:
                result[k] = self._sanitize(v)
        return result

    def _write_to_file(self, json_str: str) -> None:
        with self._lock:
            if self._file_handle is None:
                self._open_file()
            if self._file_handle is None:
                return

            try:
                self._file_handle.write(json_str + "\n")
                self._file_handle.flush()
                self._write_count += 1
                if self._write_count % 100 == 0:
                    self._check_rotation()
            except OSError:
                # Logging must never break a permission flow
                self._close_file()

    def _open_file(self) -> None:
        log_path = self._get_log_path()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_handle = open(log_path, "a", encoding="utf-8")
            self._current_file_path = log_path
        except OSError as e:
            if self._console_output:
                print(f"Failed to open log file {log_path}: {e}")

    def _close_file(self) -> None:
        if self._file_handle:
            try:
                self._file_handle.close()
            except OSError:
                pass
            self._file_handle = None
            self._current_file_path = None

    def _get_log_path(self) -> Path:
        log_dir = self._log_directory or Path(tempfile.gettempdir()) / "permflow_logs"
        return log_dir / f"permflow_{self._session_id}.jsonl"

    def _check_rotation(self) -> None:
        path = self._current_file_path
        if path and path.exists() and path.stat().st_size > self._max_file_size:
            self._rotate_files(path)

    def _rotate_files(self, path: Path) -> None:
        self._close_file()

        rotated = sorted(
            path.parent.glob(f"{path.stem}.*{path.suffix}"),
            key=lambda p: p.stat().st_mtime,
        )
        while len(rotated) >= self._max_files:
            oldest = rotated.pop(0)
            try:
                oldest.unlink()
            except OSError:
                pass

        stamp = datetime.now().strftime("%H%M%S%f")
        try:
            path.rename(path.with_name(f"{path.stem}.{stamp}{path.suffix}"))
        except OSError:
            pass


_logger: Optional[StructuredLogger] = None
_logger_lock = threading.Lock()


def get_logger() -> StructuredLogger:
    """Get the process-wide logger instance."""
    global _logger
    if _logger is None:
        with _logger_lock:
            if _logger is None:
                _logger = StructuredLogger()
    return _logger


def configure_logger(**kwargs: Any) -> StructuredLogger:
    """Configure the process-wide logger. See StructuredLogger.configure."""
    logger = get_logger()
    logger.configure(**kwargs)
    return logger


def set_session_id(session_id: str) -> None:
    """Set the session ID used to correlate entries."""
    get_logger().session_id = session_id
