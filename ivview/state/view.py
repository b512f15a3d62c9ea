"""View state - where the current image is drawn and how it got its size."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..types import ViewParams


@dataclass
class ViewState:
    """State for view/zoom parameters."""
    view: ViewParams = field(default_factory=ViewParams)
    user_zoomed: bool = False  # False while the size comes from the scaling policy
    last_allocation: Optional[Tuple[int, int]] = None
    # Pixels scrolled past the image's left/top edge, only on overflowing axes
    scroll_x: float = 0.0
    scroll_y: float = 0.0

    @property
    def scroll(self) -> Tuple[float, float]:
        return (self.scroll_x, self.scroll_y)

    @scroll.setter
    def scroll(self, value: Tuple[float, float]) -> None:
        self.scroll_x, self.scroll_y = value

    def clear(self) -> None:
        self.view = ViewParams()
        self.user_zoomed = False
        self.scroll_x = self.scroll_y = 0.0

    def allocation_changed(self, allocation: Tuple[int, int]) -> bool:
        """Remember ``allocation`` and report whether it differs from the last one."""
        changed = self.last_allocation is not None and self.last_allocation != allocation
        self.last_allocation = allocation
        return changed
