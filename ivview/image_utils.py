"""Image utilities - probing, decoding, listing helpers.

Everything here may block on disk I/O and runs on loader worker threads.
"""

from __future__ import annotations
import io
import os
from typing import Iterable, List, Optional

from PIL import Image, UnidentifiedImageError

from .config import IMG_EXTS, MAX_FILE_SIZE_MB
from .types import DecodedImage, ImageMeta, ImageSize


class LoadError(Exception):
    """Base class for per-image load failures."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"{os.path.basename(path)}: {reason}")
        self.path = path
        self.reason = reason


class UnreadableFile(LoadError):
    """The file couldn't be opened or read."""


class UnsupportedFormat(LoadError):
    """The decoder rejected the file contents."""


class MetadataProbeFailed(LoadError):
    """The header probe couldn't determine size or dimensions."""


class LoadCancelled(Exception):
    """Raised at a suspension point once the load was superseded."""


def _check(token) -> None:
    if token is not None and token.cancelled:
        raise LoadCancelled()


def probe_image(path: str, token=None) -> ImageMeta:
    """Read file size and pixel dimensions without decoding pixel data.

    Raises:
        MetadataProbeFailed: if either fact can't be determined.
    """
    _check(token)
    try:
        filesize = os.path.getsize(path)
        with Image.open(path) as img:
            width, height = img.size
    except (OSError, UnidentifiedImageError, ValueError, Image.DecompressionBombError) as e:
        raise MetadataProbeFailed(path, f"probe failed: {e}") from e
    _check(token)
    return ImageMeta(ImageSize(int(width), int(height)), int(filesize))


def read_file(path: str, token=None) -> bytes:
    """Read a whole image file, enforcing the size limit."""
    _check(token)
    try:
        size_mb = os.path.getsize(path) / (1024 * 1024)
        if size_mb > MAX_FILE_SIZE_MB:
            raise UnreadableFile(path, f"file too large: {size_mb:.1f}MB")
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise UnreadableFile(path, str(e)) from e


def decode_image(path: str, token=None) -> DecodedImage:
    """Read and fully decode an image to RGBA8.

    Raises:
        UnreadableFile: on I/O errors.
        UnsupportedFormat: if Pillow can't decode the contents.
        LoadCancelled: if ``token`` is cancelled between steps.
    """
    data = read_file(path, token)
    _check(token)
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            rgba = img.convert("RGBA")
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError,
            Image.DecompressionBombError) as e:
        raise UnsupportedFormat(path, f"can't decode: {e}") from e
    width, height = rgba.size
    if width <= 0 or height <= 0:
        raise UnsupportedFormat(path, "empty image")
    _check(token)
    return DecodedImage(
        width=width,
        height=height,
        pixels=rgba.tobytes(),
        path=path,
        filesize=len(data),
    )


# Quarter turns clockwise -> Pillow transpose
_ROTATIONS = {
    1: Image.Transpose.ROTATE_270,
    2: Image.Transpose.ROTATE_180,
    3: Image.Transpose.ROTATE_90,
}


def rotate_image(img: DecodedImage, quarter_turns: int) -> DecodedImage:
    """Rotate decoded pixels clockwise by ``quarter_turns`` * 90 degrees.

    The file on disk is left alone.
    """
    method = _ROTATIONS.get(quarter_turns % 4)
    if method is None:
        return img
    pil = Image.frombytes("RGBA", (img.width, img.height), img.pixels)
    rotated = pil.transpose(method)
    width, height = rotated.size
    return DecodedImage(
        width=width,
        height=height,
        pixels=rotated.tobytes(),
        path=img.path,
        filesize=img.filesize,
    )


def is_supported_image(filepath: str) -> bool:
    """Check if file has a supported image extension."""
    ext = os.path.splitext(filepath)[1].lower()
    return ext in IMG_EXTS


def list_images(dirpath: str) -> List[str]:
    """List all supported image files in directory, sorted by name.

    Args:
        dirpath: Directory path to scan.

    Returns:
        List of full paths to image files.
    """
    try:
        names = sorted(os.listdir(dirpath))
    except OSError:
        return []

    result = []
    for name in names:
        path = os.path.join(dirpath, name)
        if os.path.isfile(path) and is_supported_image(name):
            result.append(path)
    return result


def expand_paths(args: Iterable[str], cwd: Optional[str] = None) -> List[str]:
    """Turn command line arguments into an ordered image list.

    Files are kept in the given order whatever their extension, since the
    decoder is the judge of what is an image. Directories expand to their
    supported images.
    """
    base = cwd or os.getcwd()
    result: List[str] = []
    for arg in args:
        path = os.path.abspath(os.path.join(base, os.path.expanduser(arg)))
        if os.path.isdir(path):
            result.extend(list_images(path))
        else:
            result.append(path)
    return result
