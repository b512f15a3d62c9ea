"""Pure view calculation functions - no side effects, no state mutation."""

from __future__ import annotations
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .percent import Percent, PercentError
from .types import ImageSize

# Texture sizes are C ints on the raylib side
MAX_DIMENSION = 2**31 - 1

_RATIO_RE = re.compile(r"^([1-9][0-9]*)x([1-9][0-9]*)$")


class ImageScaling(Enum):
    """How an image is scaled when it is first shown."""
    FIT_TO_WIDTH = "fit-to-width"
    FIT_TO_HEIGHT = "fit-to-height"
    FIT = "fit"
    NONE = "none"

    @classmethod
    def parse(cls, name: str) -> ImageScaling:
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"unknown scaling mode {name!r}") from None


def _to_size(w: float, h: float) -> Optional[ImageSize]:
    if not (math.isfinite(w) and math.isfinite(h)):
        return None
    w, h = math.floor(w), math.floor(h)
    if not (0 <= w <= MAX_DIMENSION and 0 <= h <= MAX_DIMENSION):
        return None
    return ImageSize(w, h)


def fit(
    bounding: Tuple[int, int],
    native: Tuple[int, int],
    policy: ImageScaling
) -> Optional[Tuple[ImageSize, float]]:
    """Compute the render size of an image inside a bounding box.

    Args:
        bounding: Viewport (width, height) in pixels.
        native: Image (width, height) in pixels.
        policy: Scaling policy.

    Returns:
        (target size, scale factor), or None if any dimension is zero or
        the target can't be represented.
    """
    bw, bh = bounding
    nw, nh = native
    if bw <= 0 or bh <= 0 or nw <= 0 or nh <= 0:
        return None

    if policy is ImageScaling.NONE:
        scale = 1.0
    elif policy is ImageScaling.FIT_TO_WIDTH:
        scale = bw / nw
    elif policy is ImageScaling.FIT_TO_HEIGHT:
        scale = bh / nh
    else:
        scale = min(bw / nw, bh / nh)

    if not math.isfinite(scale):
        return None
    size = _to_size(nw * scale, nh * scale)
    if size is None:
        return None
    return size, scale


def rescale(native: Tuple[int, int], scale: Percent) -> Optional[ImageSize]:
    """Scale a native size by a percentage, flooring each side."""
    w, h = native
    return _to_size(scale * int(w), scale * int(h))


def zoom_in(current: Percent, step: Percent) -> Percent:
    """Next zoom level up, snapped to the step size."""
    return current.step_next(step, step)


def zoom_out(current: Percent, step: Percent) -> Percent:
    """Next zoom level down, never below one step."""
    return max(current.step_prev(step, step), step)


def center_offset(bounding: Tuple[int, int], size: Tuple[int, int]) -> Tuple[float, float]:
    """Top-left corner that centres ``size`` in ``bounding``.

    Images larger than the viewport are pinned to the top-left corner on the
    overflowing axis.
    """
    bw, bh = bounding
    w, h = size
    return (max(0.0, (bw - w) / 2.0), max(0.0, (bh - h) / 2.0))


def scroll_limits(bounding: Tuple[int, int], size: Tuple[int, int]) -> Tuple[float, float]:
    """Furthest scroll position on each axis; 0 where the image fits."""
    bw, bh = bounding
    w, h = size
    return (float(max(0, w - bw)), float(max(0, h - bh)))


def clamp_scroll(
    scroll: Tuple[float, float],
    bounding: Tuple[int, int],
    size: Tuple[int, int]
) -> Tuple[float, float]:
    """Keep a scroll position inside the image."""
    max_x, max_y = scroll_limits(bounding, size)
    x, y = scroll
    return (min(max(0.0, x), max_x), min(max(0.0, y), max_y))


def image_offset(
    bounding: Tuple[int, int],
    size: Tuple[int, int],
    scroll: Tuple[float, float] = (0.0, 0.0)
) -> Tuple[float, float]:
    """Top-left corner of the image on screen.

    An axis where the image fits is centred; an overflowing axis is shifted
    by the (clamped) scroll position.
    """
    cx, cy = center_offset(bounding, size)
    sx, sy = clamp_scroll(scroll, bounding, size)
    bw, bh = bounding
    w, h = size
    return (cx if w <= bw else -sx, cy if h <= bh else -sy)


def anchor_scroll(
    scroll: Tuple[float, float],
    bounding: Tuple[int, int],
    old_size: Tuple[int, int],
    new_size: Tuple[int, int]
) -> Tuple[float, float]:
    """Scroll position that keeps the viewport centre on the same image point
    when the image is resized from ``old_size`` to ``new_size``."""
    result = []
    for pos, view, old, new in zip(scroll, bounding, old_size, new_size):
        if old <= 0:
            result.append(0.0)
            continue
        # Image coordinate under the viewport centre, as a fraction
        centre = (pos + view / 2.0) / old if old > view else 0.5
        result.append(centre * new - view / 2.0)
    return clamp_scroll((result[0], result[1]), bounding, new_size)


@dataclass(frozen=True)
class Ratio:
    """An aspect ratio such as 16x9."""
    w: float
    h: float

    @classmethod
    def parse(cls, s: str) -> Ratio:
        m = _RATIO_RE.match(s) if isinstance(s, str) else None
        if m is None:
            raise ValueError(f"Expecting <w>x<h>, got {s!r}")
        return cls(float(m.group(1)), float(m.group(2)))

    def scale(self, a: int, b: int) -> Optional[Tuple[Percent, ImageSize]]:
        """Largest size with this aspect ratio that fits in (a, b)."""
        if self.w <= 0 or self.h <= 0:
            return None
        factor = min(a / self.w, b / self.h)
        try:
            pct = Percent.try_from_float(factor)
        except PercentError:
            return None
        size = _to_size(self.w * factor, self.h * factor)
        if size is None:
            return None
        return pct, size


def window_geometry(
    screen: Tuple[int, int],
    ratio: Ratio,
    scale: Percent
) -> Optional[ImageSize]:
    """Initial window size: ``scale`` of the monitor, shaped to ``ratio``."""
    scaled = rescale(screen, scale)
    if scaled is None or scaled.width == 0 or scaled.height == 0:
        return None
    result = ratio.scale(scaled.width, scaled.height)
    if result is None:
        return None
    return result[1]
