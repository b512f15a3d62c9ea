"""Core data types for ivview."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, NamedTuple, Optional

from .slotlist import StableKey


class ImageSize(NamedTuple):
    """Pixel dimensions."""
    width: int
    height: int


@dataclass(frozen=True)
class ImageMeta:
    """Facts discovered about an image file, immutable once known."""
    dimensions: ImageSize
    filesize: int


@dataclass(frozen=True)
class DecodedImage:
    """A fully decoded image, RGBA8 pixels in row-major order."""
    width: int
    height: int
    pixels: bytes = field(repr=False)
    path: str = ""
    filesize: int = 0

    @property
    def size(self) -> ImageSize:
        return ImageSize(self.width, self.height)

    @property
    def meta(self) -> ImageMeta:
        return ImageMeta(self.size, self.filesize)


class LoadPriority(IntEnum):
    """Priority levels for async loader tasks."""
    META = 0    # Header probe, cheap and needed by the status line first
    IMAGE = 1   # Full decode


class LoadKind(IntEnum):
    PROBE = 0
    DECODE = 1


@dataclass
class LoadTask:
    """A task for the async image loader."""
    kind: LoadKind
    key: StableKey
    path: str
    token: Any  # CancellationToken
    priority: LoadPriority
    timestamp: float = 0.0

    def __lt__(self, other: LoadTask) -> bool:
        """Compare tasks for priority queue ordering."""
        if self.priority != other.priority:
            return self.priority < other.priority
        return self.timestamp < other.timestamp


@dataclass
class TextureInfo:
    """Information about a texture uploaded to the GPU."""
    tex: Any  # rl.Texture2D - using Any to avoid raylib import
    w: int
    h: int
    path: str = ""


@dataclass
class ViewParams:
    """Where and how large the current image is drawn."""
    width: int = 0
    height: int = 0
    offx: float = 0.0
    offy: float = 0.0

    @property
    def size(self) -> Optional[ImageSize]:
        if self.width <= 0 or self.height <= 0:
            return None
        return ImageSize(self.width, self.height)
