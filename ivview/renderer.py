"""Renderer - raylib drawing surface for the viewer.

The Renderer owns the GPU texture of the image on screen. The coordinator
talks to it through ``set_image`` and ``image_allocation``; the main loop
calls ``draw_frame`` once per frame. It only reads AppState.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, List, Optional, Tuple

if TYPE_CHECKING:
    from .state import AppState

from .rl_compat import (
    rl,
    make_rect as RL_Rect, make_vec2 as RL_V2, make_color as RL_Color,
    draw_text as RL_DrawText, measure_text,
    texture_filter, texture_from_rgba, get_texture_id, is_texture_valid,
)
from .types import DecodedImage, ImageSize, TextureInfo
from .config import (
    BG_COLOR, STATUS_BG_COLOR, STATUS_TEXT_COLOR, SCROLLBAR_COLOR, SCROLLBAR_SIZE,
    STATUS_FONT_SIZE, STATUS_PADDING,
)
from .logging import debug, log


@dataclass
class Renderer:
    """
    Raylib-backed render surface.

    Usage:
        renderer = Renderer(state, interpolation="bilinear")
        renderer.set_image(decoded, size)
        renderer.draw_frame()
    """
    state: "AppState"
    interpolation: str = "bilinear"
    show_scrollbars: bool = True
    current: Optional[TextureInfo] = None
    source: Optional[DecodedImage] = None
    size: Optional[ImageSize] = None
    to_unload: List[Any] = field(default_factory=list)

    # ═══════════════════════════════════════════════════════════════════════
    # Surface interface
    # ═══════════════════════════════════════════════════════════════════════

    def set_image(self, image: Optional[DecodedImage], size: Optional[ImageSize] = None) -> None:
        """Show ``image`` at ``size``, or clear the surface when None."""
        if image is None:
            self._release_current()
            self.size = None
            return

        if self.current is not None and self.source is image:
            # Same pixels at a new size, e.g. zoom; keep the texture
            self.size = size or image.size
            return

        self._release_current()
        tex = texture_from_rgba(image.width, image.height, image.pixels)
        if not is_texture_valid(tex):
            log(f"[RENDER][ERR] Texture upload failed for {image.path}")
            self.size = None
            return
        tex = self._apply_filter(tex)
        self.current = TextureInfo(tex=tex, w=image.width, h=image.height, path=image.path)
        self.source = image
        self.size = size or image.size
        debug(f"[RENDER] Uploaded texture id={get_texture_id(tex)} {image.width}x{image.height}")

    def image_allocation(self) -> Tuple[int, int]:
        """Pixels available for the image, excluding the status bar."""
        w = rl.GetScreenWidth()
        h = rl.GetScreenHeight()
        if self.state.ui.show_status:
            h -= self.status_bar_height()
        return (max(0, int(w)), max(0, int(h)))

    def resize_to_content(self, size: ImageSize) -> None:
        """Resize the window so ``size`` fits exactly, within the monitor."""
        w, h = size
        if self.state.ui.show_status:
            h += self.status_bar_height()
        self._set_window_size(w, h)

    def resize_to_screen(self) -> None:
        """Grow the window to the whole monitor."""
        win = self.state.window
        self._set_window_size(win.monitor_w, win.monitor_h)

    def _set_window_size(self, w: int, h: int) -> None:
        win = self.state.window
        if win.monitor_w > 0 and win.monitor_h > 0:
            w, h = min(w, win.monitor_w), min(h, win.monitor_h)
        w, h = max(1, int(w)), max(1, int(h))
        rl.SetWindowSize(w, h)
        if win.monitor_w > 0 and win.monitor_h > 0:
            rl.SetWindowPosition((win.monitor_w - w) // 2, (win.monitor_h - h) // 2)
        log(f"[WINDOW] Resized to {w}x{h}")

    # ═══════════════════════════════════════════════════════════════════════
    # Texture lifetime
    # ═══════════════════════════════════════════════════════════════════════

    def _apply_filter(self, tex: Any) -> Any:
        flt = texture_filter(self.interpolation)
        if self.interpolation == "trilinear" and hasattr(rl, 'ffi'):
            p = rl.ffi.new("Texture2D *", tex)
            rl.GenTextureMipmaps(p)
            tex = p[0]
        rl.SetTextureFilter(tex, flt)
        return tex

    def _release_current(self) -> None:
        if self.current is not None and is_texture_valid(self.current.tex):
            self.to_unload.append(self.current.tex)
        self.current = None
        self.source = None

    def process_deferred_unloads(self) -> None:
        while self.to_unload:
            tex = self.to_unload.pop()
            rl.UnloadTexture(tex)
            debug(f"[UNLOAD] Texture id={get_texture_id(tex)}")

    # ═══════════════════════════════════════════════════════════════════════
    # Drawing
    # ═══════════════════════════════════════════════════════════════════════

    def status_bar_height(self) -> int:
        return STATUS_FONT_SIZE + 2 * STATUS_PADDING

    def draw_frame(self) -> None:
        """Draw one complete frame."""
        self.process_deferred_unloads()
        rl.BeginDrawing()
        try:
            rl.ClearBackground(RL_Color(*BG_COLOR))
            self.draw_image()
            if self.show_scrollbars:
                self.draw_scrollbars()
            if not self.state.has_images:
                self.draw_message("No images")
            if self.state.ui.show_status:
                self.draw_status()
        finally:
            rl.EndDrawing()

    def draw_image(self) -> None:
        ti = self.current
        if ti is None or self.size is None:
            return
        v = self.state.view_state.view
        rl.DrawTexturePro(
            ti.tex,
            RL_Rect(0, 0, ti.w, ti.h),
            RL_Rect(v.offx, v.offy, self.size.width, self.size.height),
            RL_V2(0, 0), 0.0, RL_Color(255, 255, 255, 255)
        )

    def draw_scrollbars(self) -> None:
        """Thin bars along the right and bottom edges of an overflowing image."""
        if self.current is None or self.size is None:
            return
        aw, ah = self.image_allocation()
        vs = self.state.view_state
        color = RL_Color(*SCROLLBAR_COLOR)
        if self.size.width > aw > 0:
            length = max(SCROLLBAR_SIZE, aw * aw // self.size.width)
            x = int(vs.scroll_x * (aw - length) / (self.size.width - aw))
            rl.DrawRectangle(x, ah - SCROLLBAR_SIZE, length, SCROLLBAR_SIZE, color)
        if self.size.height > ah > 0:
            length = max(SCROLLBAR_SIZE, ah * ah // self.size.height)
            y = int(vs.scroll_y * (ah - length) / (self.size.height - ah))
            rl.DrawRectangle(aw - SCROLLBAR_SIZE, y, SCROLLBAR_SIZE, length, color)

    def draw_message(self, text: str) -> None:
        w, h = self.image_allocation()
        tw = measure_text(text, STATUS_FONT_SIZE * 2)
        RL_DrawText(text, (w - tw) // 2, (h - STATUS_FONT_SIZE * 2) // 2,
                    STATUS_FONT_SIZE * 2, RL_Color(*STATUS_TEXT_COLOR))

    def draw_status(self) -> None:
        bar_h = self.status_bar_height()
        y = rl.GetScreenHeight() - bar_h
        rl.DrawRectangle(0, y, rl.GetScreenWidth(), bar_h, RL_Color(*STATUS_BG_COLOR))
        RL_DrawText(self.state.ui.status_text, STATUS_PADDING, y + STATUS_PADDING,
                    STATUS_FONT_SIZE, RL_Color(*STATUS_TEXT_COLOR))

    def shutdown(self) -> None:
        self._release_current()
        self.process_deferred_unloads()
