"""Raylib compatibility layer - abstracts differences between raylibpy and python-raylib."""

from __future__ import annotations
import io
from typing import Any

# Try to import raylib
try:
    import raylibpy as rl
    RL_VERSION = "raylibpy"
except ImportError:
    import raylib as rl
    RL_VERSION = "python-raylib"

# Texture filter values from raylib.h, used when the binding doesn't export them
_TEXTURE_FILTERS = {
    "nearest": ("TEXTURE_FILTER_POINT", 0),
    "bilinear": ("TEXTURE_FILTER_BILINEAR", 1),
    "trilinear": ("TEXTURE_FILTER_TRILINEAR", 2),
}
_PIXELFORMAT_RGBA8 = getattr(rl, "PIXELFORMAT_UNCOMPRESSED_R8G8B8A8", 7)


def make_rect(x: float, y: float, w: float, h: float) -> Any:
    """Create a raylib Rectangle compatible with the current binding."""
    if hasattr(rl, 'Rectangle'):
        try:
            return rl.Rectangle(x, y, w, h)
        except TypeError:
            pass
    if hasattr(rl, 'ffi'):
        r = rl.ffi.new("Rectangle *")
        r[0].x = float(x)
        r[0].y = float(y)
        r[0].width = float(w)
        r[0].height = float(h)
        return r[0]
    raise TypeError("raylib binding has no Rectangle constructor")


def make_vec2(x: float, y: float) -> Any:
    """Create a raylib Vector2 compatible with the current binding."""
    if hasattr(rl, 'Vector2'):
        try:
            return rl.Vector2(x, y)
        except TypeError:
            pass
    if hasattr(rl, 'ffi'):
        v = rl.ffi.new("Vector2 *")
        v[0].x = float(x)
        v[0].y = float(y)
        return v[0]
    raise TypeError("raylib binding has no Vector2 constructor")


def make_color(r: int, g: int, b: int, a: int = 255) -> Any:
    """Create a raylib Color compatible with the current binding."""
    ctor = getattr(rl, "Color", None)
    if ctor:
        try:
            return ctor(int(r), int(g), int(b), int(a))
        except TypeError:
            pass
    if hasattr(rl, 'ffi'):
        c = rl.ffi.new("Color *")
        c[0].r, c[0].g, c[0].b, c[0].a = int(r), int(g), int(b), int(a)
        return c[0]
    return (int(r), int(g), int(b), int(a))


def draw_text(text: str, x: int, y: int, size: int, color: Any) -> None:
    """Draw text with encoding fallback."""
    try:
        rl.DrawText(text, x, y, size, color)
    except TypeError:
        rl.DrawText(text.encode('utf-8'), x, y, size, color)


def measure_text(text: str, size: int) -> int:
    """Measure text width with encoding fallback."""
    try:
        return rl.MeasureText(text, size)
    except TypeError:
        return rl.MeasureText(text.encode('utf-8'), size)


def texture_filter(name: str) -> int:
    """Map an interpolation name to a raylib texture filter."""
    attr, default = _TEXTURE_FILTERS.get(name, _TEXTURE_FILTERS["bilinear"])
    return getattr(rl, attr, default)


def texture_from_rgba(width: int, height: int, pixels: bytes) -> Any:
    """Upload RGBA8 pixels as a GPU texture. Must run on the GL thread."""
    if hasattr(rl, 'ffi'):
        buf = rl.ffi.new("unsigned char[]", pixels)
        img = rl.ffi.new("Image *")
        img[0].data = buf
        img[0].width = int(width)
        img[0].height = int(height)
        img[0].mipmaps = 1
        img[0].format = _PIXELFORMAT_RGBA8
        return rl.LoadTextureFromImage(img[0])

    # Bindings without cffi only take encoded images
    from PIL import Image
    out = io.BytesIO()
    Image.frombytes("RGBA", (int(width), int(height)), pixels).save(out, format="PNG")
    data = out.getvalue()
    img = rl.LoadImageFromMemory(b".png", data, len(data))
    try:
        return rl.LoadTextureFromImage(img)
    finally:
        rl.UnloadImage(img)


def get_texture_id(tex: Any) -> int:
    """Safely get texture ID."""
    return getattr(tex, 'id', 0) or 0


def is_texture_valid(tex: Any) -> bool:
    """Check if texture is valid and loaded."""
    return get_texture_id(tex) > 0


__all__ = [
    'rl',
    'RL_VERSION',
    'make_rect',
    'make_vec2',
    'make_color',
    'draw_text',
    'measure_text',
    'texture_filter',
    'texture_from_rgba',
    'get_texture_id',
    'is_texture_valid',
]
