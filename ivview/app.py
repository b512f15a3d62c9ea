"""Application - main loop orchestrator.

The Application class provides the main loop that coordinates:
- Input handling (via InputHandler)
- Command execution against the Coordinator
- Loader event delivery (Coordinator.pump)
- Rendering (via Renderer)
"""

from __future__ import annotations
import argparse
import sys
import traceback
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .config import (
    TARGET_FPS, WINDOW_TITLE, WINDOW_DEFAULT_SIZE, ASYNC_WORKERS,
    ConfigError, ViewerConfig, load_config,
)
from .commands import Command
from .coordinator import Coordinator
from .image_utils import expand_paths
from .input_handler import InputHandler
from .loader import AsyncImageLoader
from .logging import log, increment_frame, get_frame, set_debug
from .renderer import Renderer
from .rl_compat import rl, RL_VERSION
from .state import AppState
from .view_math import window_geometry


@dataclass
class Application:
    """
    Main application orchestrator.

    Usage:
        app = Application(load_config())
        app.initialize(paths)
        app.run()
    """

    config: ViewerConfig
    state: AppState = field(default_factory=AppState)
    renderer: Optional[Renderer] = None
    input_handler: Optional[InputHandler] = None
    loader: Optional[AsyncImageLoader] = None
    coordinator: Optional[Coordinator] = None
    running: bool = False

    def initialize(self, paths: Sequence[str]) -> bool:
        """Open the window, start the loader and queue the first image."""
        try:
            self._init_window()
        except Exception as e:
            log(f"[INIT][CRITICAL] Failed to initialize window: {e!r}")
            log(f"[INIT][CRITICAL] Traceback:\n{traceback.format_exc()}")
            return False

        self.renderer = Renderer(self.state, interpolation=self.config.interpolation,
                                 show_scrollbars=self.config.show_scrollbars)
        self.input_handler = InputHandler(keymap=self.config.keymap)
        self.loader = AsyncImageLoader(workers=ASYNC_WORKERS)
        self.coordinator = Coordinator(self.config, self.loader, self.renderer, state=self.state)
        self.coordinator.add_paths(paths)
        log(f"[APP] Application initialized with {self.state.images.count} images")
        return True

    def _init_window(self) -> None:
        w, h = WINDOW_DEFAULT_SIZE
        log(f"[INIT] Creating window: {w}x{h}")
        rl.SetConfigFlags(rl.FLAG_WINDOW_RESIZABLE)
        try:
            rl.InitWindow(w, h, WINDOW_TITLE)
        except TypeError:
            rl.InitWindow(w, h, WINDOW_TITLE.encode('utf-8'))
        # Escape is routed through the keymap instead
        rl.SetExitKey(0)
        rl.SetTargetFPS(TARGET_FPS)

        mon = getattr(rl, 'GetCurrentMonitor', lambda: 0)()
        mw, mh = rl.GetMonitorWidth(mon), rl.GetMonitorHeight(mon)
        self.state.window.monitor_w, self.state.window.monitor_h = mw, mh
        if self.config.window_scale is not None and self.config.window_aspect_ratio is not None:
            size = window_geometry((mw, mh), self.config.window_aspect_ratio, self.config.window_scale)
            if size is not None and size.width > 0 and size.height > 0:
                rl.SetWindowSize(size.width, size.height)
                rl.SetWindowPosition((mw - size.width) // 2, (mh - size.height) // 2)
        log(f"[INIT] RL_VER={RL_VERSION} monitor={mw}x{mh} "
            f"window={rl.GetScreenWidth()}x{rl.GetScreenHeight()}")

    def run(self) -> None:
        """Run the main loop until the window closes."""
        self.running = True
        log("[APP] Starting main loop")

        try:
            while self.running:
                self._frame()
        except Exception as e:
            log(f"[APP][CRITICAL] Unhandled exception: {e!r}")
            log(f"[APP][CRITICAL] Traceback:\n{traceback.format_exc()}")
        finally:
            self._cleanup()

    def _frame(self) -> None:
        """Execute a single frame."""
        # 1. Poll input and run commands
        for cmd in self.input_handler.poll():
            self._execute_command(cmd)
        if self.state.window.should_close:
            self.running = False
            return

        # 2. Apply finished loads
        self.coordinator.pump()

        # 3. Follow window resizes
        self.coordinator.on_resize()

        # 4. Render
        self.renderer.draw_frame()

        increment_frame()

    def _execute_command(self, cmd: Command) -> None:
        try:
            cmd.execute(self.coordinator)
        except Exception as e:
            log(f"[APP][CMD][ERR] {type(cmd).__name__}: {e!r}")

    def _cleanup(self) -> None:
        """Clean up resources."""
        log("[APP] Starting cleanup")

        if self.loader is not None:
            log("[APP] Shutting down async loader")
            self.loader.shutdown()

        if self.renderer is not None:
            self.renderer.shutdown()

        log("[APP] Closing window")
        rl.CloseWindow()
        log(f"[APP] Cleanup complete, frames={get_frame()}")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="iv", description="Step through images.")
    parser.add_argument("images", nargs="*", help="image files or directories")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    if args.debug:
        set_debug(True)

    log("[MAIN] Starting application")
    try:
        config = load_config()
    except ConfigError as e:
        log(f"[MAIN][CRITICAL] Invalid configuration: {e}")
        return 2

    paths = expand_paths(args.images)
    log(f"[ARGS] {len(args.images)} arguments -> {len(paths)} images")

    app = Application(config)
    if not app.initialize(paths):
        return 1
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
