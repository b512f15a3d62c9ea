"""Application configuration constants."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Mapping, Optional

if TYPE_CHECKING:
    from .events import UserAction
    from .percent import Percent
    from .status import StatusFormat
    from .view_math import ImageScaling, Ratio

# Performance
TARGET_FPS = 60
ASYNC_WORKERS = 4
MAX_EVENTS_PER_FRAME = 100

# Window
WINDOW_TITLE = "iv"
WINDOW_DEFAULT_SIZE = (640, 480)
WINDOW_SCALE = "60%"          # Share of the monitor the window starts at
WINDOW_ASPECT_RATIO = "16x9"

# Scaling
INITIAL_SCALING = "fit"       # fit | fit-to-width | fit-to-height | none
ZOOM_STEP_SIZE = "10%"
INTERPOLATION = "bilinear"    # nearest | bilinear | trilinear

# Scrolling
SCROLL_STEP = 60             # Pixels per scroll key press
SHOW_SCROLLBARS = True
SCROLLBAR_SIZE = 6

# Status line
STATUS_FORMAT = "{index}/{nimages}  {filename}  {width}x{height}  {filesize}"
SHOW_STATUS = True
STATUS_FONT_SIZE = 18
STATUS_PADDING = 6

# Image limits
MAX_FILE_SIZE_MB = 200

# Colors
BG_COLOR = (24, 24, 24)
STATUS_BG_COLOR = (0, 0, 0)
STATUS_TEXT_COLOR = (220, 220, 220)
SCROLLBAR_COLOR = (160, 160, 160)

# Hotkeys (raylib key codes)
# See: https://github.com/raysan5/raylib/blob/master/src/raylib.h
KEYMAP: Dict[int, str] = {
    81: "quit",                   # KEY_Q
    256: "quit",                  # KEY_ESCAPE
    262: "next",                  # KEY_RIGHT
    32: "next",                   # KEY_SPACE
    263: "previous",              # KEY_LEFT
    259: "previous",              # KEY_BACKSPACE
    268: "jump-to-start",         # KEY_HOME
    269: "jump-to-end",           # KEY_END
    61: "zoom-in",                # KEY_EQUAL
    45: "zoom-out",               # KEY_MINUS
    87: "scale-to-fit-current",   # KEY_W
    79: "original-size",          # KEY_O
    83: "toggle-status",          # KEY_S
    265: "scroll-up",             # KEY_UP
    75: "scroll-up",              # KEY_K
    264: "scroll-down",           # KEY_DOWN
    74: "scroll-down",            # KEY_J
    72: "scroll-left",            # KEY_H
    76: "scroll-right",           # KEY_L
    266: "scroll-v-start",        # KEY_PAGE_UP
    267: "scroll-v-end",          # KEY_PAGE_DOWN
    91: "scroll-h-start",         # KEY_LEFT_BRACKET
    93: "scroll-h-end",           # KEY_RIGHT_BRACKET
    82: "rotate-clockwise",       # KEY_R
    69: "rotate-counter-clockwise",  # KEY_E
    85: "rotate-upside-down",     # KEY_U
    70: "resize-to-fit-image",    # KEY_F
    71: "resize-to-fit-screen",   # KEY_G
}

INTERPOLATIONS = frozenset({"nearest", "bilinear", "trilinear"})

# Keys the status line template may reference
STATUS_KEYS = ("width", "height", "filename", "fullpath", "filesize", "index", "nimages")

# Supported image extensions for directory listing
IMG_EXTS = frozenset({".png", ".jpg", ".jpeg", ".bmp", ".tga", ".gif", ".webp", ".tif", ".tiff"})


class ConfigError(ValueError):
    """A configuration value is invalid."""


@dataclass(frozen=True)
class ViewerConfig:
    """Validated, read-only settings for one session."""
    zoom_step_size: Percent
    initial_scaling: ImageScaling
    interpolation: str = "bilinear"
    status_format: Optional[StatusFormat] = None
    show_status: bool = True
    scroll_step: int = 60
    show_scrollbars: bool = True
    window_scale: Optional[Percent] = None
    window_aspect_ratio: Optional[Ratio] = None
    keymap: Mapping[int, UserAction] = field(default_factory=dict)


def load_config(**overrides) -> ViewerConfig:
    """Build a ViewerConfig from the module constants.

    Keyword overrides use the lower-case constant names, e.g.
    ``load_config(zoom_step_size="25%")``.

    Raises:
        ConfigError: if any value doesn't validate.
    """
    from .events import UserAction
    from .percent import Percent, PercentError
    from .status import StatusFormat, StatusFormatError
    from .view_math import ImageScaling, Ratio

    def opt(name: str, default):
        return overrides.get(name, default)

    try:
        zoom_step = Percent.parse(opt("zoom_step_size", ZOOM_STEP_SIZE))
        window_scale = Percent.parse(opt("window_scale", WINDOW_SCALE))
    except PercentError as e:
        raise ConfigError(str(e)) from e
    if zoom_step == Percent():
        raise ConfigError("zoom_step_size must be greater than 0%")

    try:
        scaling = ImageScaling.parse(opt("initial_scaling", INITIAL_SCALING))
        ratio = Ratio.parse(opt("window_aspect_ratio", WINDOW_ASPECT_RATIO))
    except ValueError as e:
        raise ConfigError(str(e)) from e

    scroll_step = opt("scroll_step", SCROLL_STEP)
    if isinstance(scroll_step, bool) or not isinstance(scroll_step, int) or scroll_step <= 0:
        raise ConfigError(f"scroll_step must be a positive integer, got {scroll_step!r}")

    interpolation = opt("interpolation", INTERPOLATION)
    if interpolation not in INTERPOLATIONS:
        raise ConfigError(f"unknown interpolation {interpolation!r}")

    try:
        status_format = StatusFormat.parse(opt("status_format", STATUS_FORMAT), STATUS_KEYS)
    except StatusFormatError as e:
        raise ConfigError(str(e)) from e

    keymap = {}
    for code, name in opt("keymap", KEYMAP).items():
        try:
            keymap[int(code)] = UserAction.parse(name)
        except ValueError as e:
            raise ConfigError(f"key {code}: {e}") from e

    return ViewerConfig(
        zoom_step_size=zoom_step,
        initial_scaling=scaling,
        interpolation=interpolation,
        status_format=status_format,
        show_status=bool(opt("show_status", SHOW_STATUS)),
        scroll_step=scroll_step,
        show_scrollbars=bool(opt("show_scrollbars", SHOW_SCROLLBARS)),
        window_scale=window_scale,
        window_aspect_ratio=ratio,
        keymap=keymap,
    )
