"""User actions and loader events delivered to the main loop."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from .slotlist import StableKey
from .types import DecodedImage, ImageMeta


class UserAction(Enum):
    """Abstract actions that key bindings map to."""
    QUIT = "quit"
    NEXT = "next"
    PREVIOUS = "previous"
    JUMP_TO_START = "jump-to-start"
    JUMP_TO_END = "jump-to-end"
    ZOOM_IN = "zoom-in"
    ZOOM_OUT = "zoom-out"
    SCALE_TO_FIT_CURRENT = "scale-to-fit-current"
    ORIGINAL_SIZE = "original-size"
    TOGGLE_STATUS = "toggle-status"
    SCROLL_UP = "scroll-up"
    SCROLL_DOWN = "scroll-down"
    SCROLL_LEFT = "scroll-left"
    SCROLL_RIGHT = "scroll-right"
    SCROLL_V_START = "scroll-v-start"
    SCROLL_V_END = "scroll-v-end"
    SCROLL_H_START = "scroll-h-start"
    SCROLL_H_END = "scroll-h-end"
    ROTATE_CLOCKWISE = "rotate-clockwise"
    ROTATE_COUNTER_CLOCKWISE = "rotate-counter-clockwise"
    ROTATE_UPSIDE_DOWN = "rotate-upside-down"
    RESIZE_TO_FIT_IMAGE = "resize-to-fit-image"
    RESIZE_TO_FIT_SCREEN = "resize-to-fit-screen"

    @classmethod
    def parse(cls, name: str) -> UserAction:
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"unknown user action {name!r}") from None


@dataclass(frozen=True)
class ImageMetaReady:
    """Header probe finished for ``key``."""
    key: StableKey
    meta: ImageMeta
    token: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ImageLoaded:
    """Decode finished for ``key``."""
    key: StableKey
    image: DecodedImage
    token: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class LoadFailed:
    """Loading ``key`` failed for good."""
    key: StableKey
    error: Exception
    token: Any = field(default=None, compare=False, repr=False)


LoaderEvent = Union[ImageMetaReady, ImageLoaded, LoadFailed]
