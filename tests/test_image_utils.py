import os

import pytest
from PIL import Image

from ivview import image_utils
from ivview.image_utils import (
    LoadCancelled, MetadataProbeFailed, UnreadableFile, UnsupportedFormat,
    decode_image, expand_paths, is_supported_image, list_images, probe_image, rotate_image,
)
from ivview.loader import CancellationToken
from ivview.types import DecodedImage, ImageSize


@pytest.fixture
def garbage(tmp_path):
    p = tmp_path / "broken.png"
    p.write_bytes(b"this is not an image")
    return str(p)


def test_probe_reads_header(sample_images):
    meta = probe_image(sample_images[1])
    assert meta.dimensions == ImageSize(64, 48)
    assert meta.filesize == os.path.getsize(sample_images[1])


def test_decode_returns_rgba(sample_images):
    img = decode_image(sample_images[0])
    assert img.size == ImageSize(40, 30)
    assert len(img.pixels) == 40 * 30 * 4
    assert img.path == sample_images[0]
    assert img.meta.filesize == os.path.getsize(sample_images[0])


def test_probe_failure(garbage, tmp_path):
    with pytest.raises(MetadataProbeFailed):
        probe_image(garbage)
    with pytest.raises(MetadataProbeFailed):
        probe_image(str(tmp_path / "missing.png"))


def test_decode_rejects_garbage(garbage):
    with pytest.raises(UnsupportedFormat) as exc:
        decode_image(garbage)
    assert exc.value.path == garbage
    assert "broken.png" in str(exc.value)


def test_decode_missing_file(tmp_path):
    with pytest.raises(UnreadableFile):
        decode_image(str(tmp_path / "missing.png"))


def test_decode_enforces_size_limit(sample_images, monkeypatch):
    monkeypatch.setattr(image_utils, "MAX_FILE_SIZE_MB", 0)
    with pytest.raises(UnreadableFile):
        decode_image(sample_images[0])


def test_cancelled_token_stops_work(sample_images):
    token = CancellationToken()
    token.cancel()
    with pytest.raises(LoadCancelled):
        decode_image(sample_images[0], token)
    with pytest.raises(LoadCancelled):
        probe_image(sample_images[0], token)


def test_is_supported_image():
    assert is_supported_image("a.PNG")
    assert is_supported_image("/x/y/photo.jpeg")
    assert not is_supported_image("notes.txt")
    assert not is_supported_image("README")


def test_list_images_filters_and_sorts(sample_images, tmp_path):
    (tmp_path / "notes.txt").write_text("hi")
    (tmp_path / "sub.png").mkdir()
    assert list_images(str(tmp_path)) == sorted(sample_images)


def test_list_images_of_missing_dir(tmp_path):
    assert list_images(str(tmp_path / "nope")) == []


def test_expand_paths_keeps_argument_order(sample_images, tmp_path):
    other = tmp_path / "more"
    other.mkdir()
    extra = other / "z.png"
    extra.write_bytes(b"")

    result = expand_paths(["more", sample_images[2], "notes.txt"], cwd=str(tmp_path))
    assert result == [str(extra), sample_images[2], str(tmp_path / "notes.txt")]


def test_oversized_image_is_rejected_not_raised(sample_images, monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    with pytest.raises(MetadataProbeFailed):
        probe_image(sample_images[0])
    with pytest.raises(UnsupportedFormat):
        decode_image(sample_images[0])


def test_rotate_image_moves_pixels():
    red, blue = b"\xff\x00\x00\xff", b"\x00\x00\xff\xff"
    img = DecodedImage(2, 1, red + blue, path="x.png", filesize=7)

    cw = rotate_image(img, 1)
    assert cw.size == ImageSize(1, 2)
    assert cw.pixels == red + blue  # left edge ends up on top
    assert (cw.path, cw.filesize) == ("x.png", 7)

    ccw = rotate_image(img, 3)
    assert ccw.pixels == blue + red
    assert rotate_image(img, 2).pixels == blue + red
    assert rotate_image(img, 4) is img
