"""State management submodules for ivview."""

from .window import WindowState
from .images import ImageListState
from .view import ViewState
from .ui import UIState
from .loading import LoadState, NoImages, Loading, Displayed
from .app_state import AppState

__all__ = [
    'WindowState',
    'ImageListState',
    'ViewState',
    'UIState',
    'LoadState',
    'NoImages',
    'Loading',
    'Displayed',
    'AppState',
]
