import pytest
from PIL import Image

from ivview.config import load_config
from ivview.coordinator import Coordinator
from ivview.events import ImageLoaded, ImageMetaReady, LoadFailed
from ivview.image_utils import UnsupportedFormat
from ivview.types import DecodedImage, ImageMeta, ImageSize


class FakeLoader:
    """Records load requests; the test decides when and what gets delivered."""

    def __init__(self):
        self.requests = []  # (key, path, token)
        self.events = []

    def submit(self, key, path, token):
        self.requests.append((key, path, token))

    def poll_events(self, max_events=100):
        out, self.events = self.events[:max_events], self.events[max_events:]
        return out

    @property
    def last(self):
        return self.requests[-1]

    def loaded(self, request, width=100, height=50):
        key, path, token = request
        img = DecodedImage(width, height, b"\x00" * (width * height * 4), path=path, filesize=1234)
        self.events.append(ImageLoaded(key, img, token))

    def failed(self, request):
        key, path, token = request
        self.events.append(LoadFailed(key, UnsupportedFormat(path, "broken"), token))

    def meta(self, request, width=100, height=50, filesize=1234):
        key, _, token = request
        self.events.append(ImageMetaReady(key, ImageMeta(ImageSize(width, height), filesize), token))


class FakeSurface:
    def __init__(self, allocation=(800, 600)):
        self.allocation = allocation
        self.calls = []
        self.resizes = []

    def set_image(self, image, size=None):
        self.calls.append((image, size))

    def image_allocation(self):
        return self.allocation

    def resize_to_content(self, size):
        self.resizes.append(("content", size))

    def resize_to_screen(self):
        self.resizes.append(("screen",))

    @property
    def image(self):
        return self.calls[-1][0] if self.calls else None

    @property
    def size(self):
        return self.calls[-1][1] if self.calls else None


@pytest.fixture
def config():
    return load_config(zoom_step_size="25%", initial_scaling="fit")


@pytest.fixture
def loader():
    return FakeLoader()


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def make_viewer(config, loader, surface):
    def _make(paths=("a.png", "b.png", "c.png"), **kwargs):
        statuses = []
        viewer = Coordinator(kwargs.pop("config", config), loader, surface,
                             on_status=statuses.append)
        viewer.statuses = statuses
        viewer.add_paths(paths)
        return viewer
    return _make


@pytest.fixture
def sample_images(tmp_path):
    """A few small real image files."""
    paths = []
    for i, (fmt, size) in enumerate([("PNG", (40, 30)), ("JPEG", (64, 48)), ("BMP", (10, 20))]):
        p = tmp_path / f"img_{i}.{fmt.lower()}"
        Image.new("RGB", size, (i * 40, 100, 200)).save(p, format=fmt)
        paths.append(str(p))
    return paths
