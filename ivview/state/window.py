"""Window state - monitor size and close request."""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class WindowState:
    """Window-related state."""
    monitor_w: int = 0
    monitor_h: int = 0
    should_close: bool = False

