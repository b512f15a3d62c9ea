"""UI state - status line visibility and contents."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class UIState:
    """State for the status bar."""
    show_status: bool = True
    status_values: Dict[str, Any] = field(default_factory=dict)
    status_text: str = ""

    def toggle_status(self) -> None:
        """Toggle status bar visibility."""
        self.show_status = not self.show_status
