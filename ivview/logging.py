"""Logging utilities with timing and frame tracking."""

from __future__ import annotations
import os
import sys
import time
from threading import Lock
from typing import Optional


class Logger:
    """Application logger with timestamps and frame counts.

    Loader worker threads log through the same instance, so writes are
    serialized with a lock.
    """

    def __init__(self, debug: bool = False):
        self._start_time: float = time.perf_counter()
        self._frame: int = 0
        self._debug: bool = debug
        self._lock = Lock()

    @property
    def frame(self) -> int:
        """Current frame number."""
        return self._frame

    def increment_frame(self) -> None:
        """Increment frame counter."""
        self._frame += 1

    @property
    def debug_enabled(self) -> bool:
        return self._debug

    @debug_enabled.setter
    def debug_enabled(self, value: bool) -> None:
        self._debug = bool(value)

    @property
    def elapsed(self) -> float:
        """Seconds since logger was created."""
        return time.perf_counter() - self._start_time

    def log(self, msg: str) -> None:
        """Log a message with timestamp and frame number."""
        line = f"[{self.elapsed:7.3f}s F{self._frame:06d}] {msg}\n"
        with self._lock:
            try:
                sys.stdout.write(line)
                sys.stdout.flush()
            except (OSError, ValueError):
                try:
                    sys.stderr.write(line)
                    sys.stderr.flush()
                except (OSError, ValueError):
                    pass

    def debug(self, msg: str) -> None:
        """Log only when debug output is enabled."""
        if self._debug:
            self.log(msg)


_logger: Optional[Logger] = None


def _env_debug() -> bool:
    return os.environ.get("IVVIEW_DEBUG", "").strip().lower() in ("1", "true", "yes", "on")


def get_logger() -> Logger:
    """Get or create the global logger instance."""
    global _logger
    if _logger is None:
        _logger = Logger(debug=_env_debug())
    return _logger


def log(msg: str) -> None:
    """Log a message using the global logger."""
    get_logger().log(msg)


def debug(msg: str) -> None:
    """Log a debug message using the global logger."""
    get_logger().debug(msg)


def set_debug(enabled: bool) -> None:
    get_logger().debug_enabled = enabled


def get_frame() -> int:
    """Get current frame count."""
    return get_logger().frame


def increment_frame() -> None:
    """Increment frame counter."""
    get_logger().increment_frame()


def now() -> float:
    """Get current time in seconds (high precision)."""
    return time.perf_counter()
