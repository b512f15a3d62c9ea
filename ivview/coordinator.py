"""Navigation and load coordination.

The coordinator owns the image list, its side tables, the cursor and the
load state. Everything here runs on the main loop; loader results arrive as
events through :meth:`Coordinator.pump`.

Only one load is authoritative at a time. Each transition cancels the
previous load, and every completion is matched against the current cursor
before it is applied, because cancellation can lose the race with a worker
that already finished.
"""

from __future__ import annotations
import os
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Tuple

from .config import MAX_EVENTS_PER_FRAME, ViewerConfig
from .events import ImageLoaded, ImageMetaReady, LoadFailed, LoaderEvent
from .image_utils import rotate_image
from .loader import CancellationToken
from .logging import debug, log
from .navigation import (
    EMPTY, Cursor, Transition, cursor_at, next_cursor, replacement_key, retry_direction,
)
from .percent import Percent, PercentError
from .slotlist import StableKey
from .state import AppState, Displayed, Loading, NoImages
from .types import DecodedImage, ImageSize, ViewParams
from .view_math import (
    ImageScaling, anchor_scroll, clamp_scroll, fit, image_offset, rescale, zoom_in, zoom_out,
)

ONE_TO_ONE = Percent.from_integer_percent(100)


class RenderSurface(Protocol):
    """What the coordinator needs from the rendering toolkit."""

    def set_image(self, image: Optional[DecodedImage], size: Optional[ImageSize] = None) -> None: ...

    def image_allocation(self) -> Tuple[int, int]: ...

    def resize_to_content(self, size: ImageSize) -> None: ...

    def resize_to_screen(self) -> None: ...


class ImageLoader(Protocol):
    def submit(self, key: StableKey, path: str, token: CancellationToken) -> None: ...

    def poll_events(self, max_events: int = ...) -> List[LoaderEvent]: ...


StatusListener = Callable[[Dict[str, Any]], None]


class Coordinator:
    """Drives cursor movement, loading and scaling for one viewer session."""

    def __init__(
        self,
        config: ViewerConfig,
        loader: ImageLoader,
        surface: RenderSurface,
        state: Optional[AppState] = None,
        on_status: Optional[StatusListener] = None,
    ):
        self.config = config
        self.loader = loader
        self.surface = surface
        self.state = state if state is not None else AppState()
        self.on_status = on_status
        self.state.ui.show_status = config.show_status

    # ═══════════════════════════════════════════════════════════════════════
    # Collection
    # ═══════════════════════════════════════════════════════════════════════

    def add_paths(self, paths: Iterable[str]) -> List[StableKey]:
        """Append paths. Leaves the empty state by jumping to the first image."""
        keys = self.state.images.add_paths(paths)
        if keys:
            log(f"[LIST] Added {len(keys)} images, total={self.state.images.count}")
        if keys and self.state.cursor.is_empty:
            self.request_transition(Transition.JUMP_TO_START)
        else:
            self._publish_status()
        return keys

    # ═══════════════════════════════════════════════════════════════════════
    # Transitions
    # ═══════════════════════════════════════════════════════════════════════

    def request_transition(self, transition: Transition) -> bool:
        """Move the cursor and start loading the new image.

        Returns False, changing nothing, when the move goes nowhere (end of
        list, or empty list).
        """
        target = next_cursor(self.state.images.images, self.state.cursor, transition)
        if target is None:
            debug(f"[NAV] {transition.value}: no target from index={self.state.index}")
            return False
        debug(f"[NAV] {transition.value}: {self.state.index} -> {target.index}")
        self._move_to(target, transition)
        return True

    def _move_to(self, target: Cursor, direction: Transition) -> None:
        self.state.cursor = target
        self.state.images.filename(target.key)
        self.state.view_state.clear()
        self.surface.set_image(None)
        self.request_load(target.key, self.state.images.path(target.key), direction)
        self._publish_status()

    def request_load(
        self,
        key: StableKey,
        path: str,
        direction: Optional[Transition] = None,
    ) -> CancellationToken:
        """Supersede any outstanding load with a new one for ``key``."""
        load = self.state.load
        if direction is None:
            direction = load.last_direction if isinstance(load, Loading) else Transition.NEXT
        if isinstance(load, Loading):
            load.token.cancel()
            debug("[LOAD] Cancelled previous load")

        token = CancellationToken()
        self.loader.submit(key, path, token)
        self.state.load = Loading(token, direction)
        log(f"[LOAD] Requested {os.path.basename(path)} index={self.state.index}")
        return token

    # ═══════════════════════════════════════════════════════════════════════
    # Loader events
    # ═══════════════════════════════════════════════════════════════════════

    def pump(self, max_events: int = MAX_EVENTS_PER_FRAME) -> int:
        """Apply finished loader events in delivery order."""
        events = self.loader.poll_events(max_events)
        for event in events:
            self.handle_event(event)
        return len(events)

    def handle_event(self, event: LoaderEvent) -> None:
        if isinstance(event, ImageMetaReady):
            self._on_meta(event)
        elif isinstance(event, ImageLoaded):
            if self._is_current(event):
                self._on_loaded(event)
        elif isinstance(event, LoadFailed):
            if self._is_current(event):
                self._on_failed(event)
        else:
            log(f"[EVENT][WARN] Unknown event {event!r}")

    def _is_current(self, event) -> bool:
        load = self.state.load
        if event.key != self.state.current_key or not isinstance(load, Loading):
            debug(f"[EVENT] Dropping stale {type(event).__name__} for {event.key!r}")
            return False
        if event.token is not None and event.token is not load.token:
            debug(f"[EVENT] Dropping {type(event).__name__} from a superseded load")
            return False
        return True

    def _on_meta(self, event: ImageMetaReady) -> None:
        if not self.state.images.set_meta(event.key, event.meta):
            return
        m = event.meta
        debug(f"[META] {self.state.images.filename(event.key)}: "
              f"{m.dimensions.width}x{m.dimensions.height} {m.filesize}B")
        if event.key == self.state.current_key:
            self._publish_status()

    def _on_loaded(self, event: ImageLoaded) -> None:
        img = event.image
        self.state.images.set_meta(event.key, img.meta)
        scale, size = self._initial_size(img)
        self.state.load = Displayed(img, scale)
        self._show(img, size)
        log(f"[LOAD] Displayed {os.path.basename(img.path) or event.key!r} "
            f"{img.width}x{img.height} at {scale}")
        self._publish_status()

    def _on_failed(self, event: LoadFailed) -> None:
        load = self.state.load
        images = self.state.images
        direction = retry_direction(load.last_direction)
        replacement = replacement_key(images.images, event.key, direction)
        path = images.remove(event.key)
        log(f"[LOAD][ERR] {event.error}; removed {os.path.basename(path or '')}, "
            f"{images.count} left")

        if replacement is None:
            self.state.cursor = EMPTY
            self.state.load = NoImages()
            self.state.view_state.clear()
            self.surface.set_image(None)
            log("[LIST] No images left")
            self._publish_status()
            return

        self._move_to(cursor_at(images.images, replacement), direction)

    # ═══════════════════════════════════════════════════════════════════════
    # Scaling
    # ═══════════════════════════════════════════════════════════════════════

    def _initial_size(self, img: DecodedImage,
                      policy: Optional[ImageScaling] = None) -> Tuple[Percent, ImageSize]:
        policy = policy or self.config.initial_scaling
        allocation = self.surface.image_allocation()
        self.state.view_state.last_allocation = tuple(allocation)
        result = fit(allocation, img.size, policy)
        if result is None:
            debug(f"[SCALE] No fit for {img.size} in {allocation}, showing 1:1")
            return ONE_TO_ONE, img.size
        size, factor = result
        try:
            return Percent.try_from_float(factor), size
        except PercentError:
            return ONE_TO_ONE, img.size

    def _show(self, img: DecodedImage, size: ImageSize) -> None:
        allocation = self.surface.image_allocation()
        vs = self.state.view_state
        vs.scroll = clamp_scroll(vs.scroll, allocation, size)
        offx, offy = image_offset(allocation, size, vs.scroll)
        self.state.view_state.view = ViewParams(size.width, size.height, offx, offy)
        self.surface.set_image(img, size)

    def _set_scale(self, scale: Percent, user_zoomed: bool = True) -> bool:
        shown = self.state.displayed
        if shown is None:
            return False
        size = rescale(shown.image.size, scale)
        if size is None:
            log(f"[ZOOM][WARN] Can't render {shown.image.size} at {scale}")
            return False
        vs = self.state.view_state
        old = vs.view.size
        if old is not None:
            vs.scroll = anchor_scroll(vs.scroll, self.surface.image_allocation(), old, size)
        self.state.load = Displayed(shown.image, scale)
        vs.user_zoomed = user_zoomed
        self._show(shown.image, size)
        debug(f"[ZOOM] scale={scale} size={size.width}x{size.height}")
        return True

    def zoom_in(self) -> bool:
        shown = self.state.displayed
        if shown is None:
            return False
        return self._set_scale(zoom_in(shown.current_scale, self.config.zoom_step_size))

    def zoom_out(self) -> bool:
        shown = self.state.displayed
        if shown is None:
            return False
        return self._set_scale(zoom_out(shown.current_scale, self.config.zoom_step_size))

    def original_size(self) -> bool:
        return self._set_scale(ONE_TO_ONE)

    def scale_to_fit(self, policy: ImageScaling = ImageScaling.FIT) -> bool:
        shown = self.state.displayed
        if shown is None:
            return False
        scale, size = self._initial_size(shown.image, policy)
        self.state.load = Displayed(shown.image, scale)
        self.state.view_state.user_zoomed = policy is not self.config.initial_scaling
        self._show(shown.image, size)
        return True

    def on_resize(self) -> bool:
        """Refit after the viewport changed, unless the user picked a zoom."""
        allocation = tuple(self.surface.image_allocation())
        if not self.state.view_state.allocation_changed(allocation):
            return False
        shown = self.state.displayed
        if shown is None:
            return False
        if self.state.view_state.user_zoomed:
            size = rescale(shown.image.size, shown.current_scale)
            if size is not None:
                self._show(shown.image, size)
            return True
        return self.scale_to_fit(self.config.initial_scaling)

    # ═══════════════════════════════════════════════════════════════════════
    # Scrolling
    # ═══════════════════════════════════════════════════════════════════════

    def scroll_by(self, dx: float, dy: float) -> bool:
        """Pan an overflowing image. Returns True if the view moved."""
        shown = self.state.displayed
        size = self.state.view_state.view.size
        if shown is None or size is None:
            return False
        vs = self.state.view_state
        before = vs.scroll
        vs.scroll = clamp_scroll((vs.scroll_x + dx, vs.scroll_y + dy),
                                 self.surface.image_allocation(), size)
        if vs.scroll == before:
            return False
        self._show(shown.image, size)
        debug(f"[SCROLL] x={vs.scroll_x:.0f} y={vs.scroll_y:.0f}")
        return True

    def scroll_to(self, x: Optional[float] = None, y: Optional[float] = None) -> bool:
        """Scroll to an absolute position; ``math.inf`` means the far edge."""
        vs = self.state.view_state
        dx = 0.0 if x is None else x - vs.scroll_x
        dy = 0.0 if y is None else y - vs.scroll_y
        return self.scroll_by(dx, dy)

    # ═══════════════════════════════════════════════════════════════════════
    # Rotation
    # ═══════════════════════════════════════════════════════════════════════

    def rotate(self, quarter_turns: int) -> bool:
        """Rotate the displayed image clockwise by ``quarter_turns`` * 90 degrees.

        Only the decoded copy is rotated; moving to another image and back
        shows it upright again.
        """
        shown = self.state.displayed
        if shown is None or quarter_turns % 4 == 0:
            return False
        img = rotate_image(shown.image, quarter_turns)
        self.state.load = Displayed(img, shown.current_scale)
        vs = self.state.view_state
        vs.scroll = (0.0, 0.0)
        vs.view = ViewParams()
        log(f"[ROTATE] {quarter_turns * 90 % 360} degrees -> {img.width}x{img.height}")
        if vs.user_zoomed:
            return self._set_scale(shown.current_scale)
        return self.scale_to_fit(self.config.initial_scaling)

    # ═══════════════════════════════════════════════════════════════════════
    # Window sizing
    # ═══════════════════════════════════════════════════════════════════════

    def resize_to_fit_image(self) -> bool:
        """Ask the surface to shrink or grow the window around the image."""
        size = self.state.view_state.view.size
        if self.state.displayed is None or size is None:
            return False
        debug(f"[WINDOW] Fit to image {size.width}x{size.height}")
        self.surface.resize_to_content(size)
        return True

    def resize_to_fit_screen(self) -> bool:
        debug("[WINDOW] Fit to screen")
        self.surface.resize_to_screen()
        return True

    # ═══════════════════════════════════════════════════════════════════════
    # Status
    # ═══════════════════════════════════════════════════════════════════════

    def toggle_status(self) -> None:
        self.state.ui.toggle_status()
        self.on_resize()

    def status_values(self) -> Dict[str, Any]:
        key = self.state.current_key
        images = self.state.images
        meta = images.get_meta(key)
        return {
            "index": self.state.index if self.state.index is not None else -1,
            "nimages": images.count,
            "width": meta.dimensions.width if meta else None,
            "height": meta.dimensions.height if meta else None,
            "filesize": meta.filesize if meta else None,
            "filename": images.filename(key) if key is not None else None,
            "fullpath": images.path(key),
        }

    def _publish_status(self) -> None:
        values = self.status_values()
        ui = self.state.ui
        ui.status_values = values
        fmt = self.config.status_format
        ui.status_text = fmt.render(values) if fmt is not None else ""
        if self.on_status is not None:
            self.on_status(values)
