"""Composite AppState - combines all sub-states."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from .window import WindowState
from .images import ImageListState
from .view import ViewState
from .ui import UIState
from .loading import LoadState, NoImages, Loading, Displayed
from ..navigation import Cursor, EMPTY
from ..slotlist import StableKey


@dataclass
class AppState:
    """
    Everything the coordinator owns, grouped by concern.

    Sub-states are used directly:
        state.images.meta
        state.view_state.user_zoomed
        state.ui.show_status
    """
    window: WindowState = field(default_factory=WindowState)
    images: ImageListState = field(default_factory=ImageListState)
    view_state: ViewState = field(default_factory=ViewState)
    ui: UIState = field(default_factory=UIState)
    cursor: Cursor = EMPTY
    load: LoadState = field(default_factory=NoImages)

    @property
    def current_key(self) -> Optional[StableKey]:
        return self.cursor.key

    @property
    def index(self) -> Optional[int]:
        return self.cursor.index

    @property
    def current_path(self) -> Optional[str]:
        return self.images.path(self.cursor.key)

    @property
    def is_loading(self) -> bool:
        return isinstance(self.load, Loading)

    @property
    def displayed(self) -> Optional[Displayed]:
        return self.load if isinstance(self.load, Displayed) else None

    @property
    def has_images(self) -> bool:
        return not self.images.is_empty
