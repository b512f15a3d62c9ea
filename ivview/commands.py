"""Command Pattern for user actions.

Commands encapsulate actions that can be triggered by key bindings.
Each command has an execute() method and optional can_execute() for guards.
"""

from __future__ import annotations
import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, Optional, Type

if TYPE_CHECKING:
    from .coordinator import Coordinator

from .events import UserAction
from .navigation import Transition
from .logging import debug


class Command(ABC):
    """Base class for all commands."""

    @abstractmethod
    def execute(self, viewer: "Coordinator") -> bool:
        """Execute the command. Returns True if action was taken."""
        pass

    def can_execute(self, viewer: "Coordinator") -> bool:
        """Check if command can be executed. Override for guards."""
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Navigation Commands
# ═══════════════════════════════════════════════════════════════════════════

class Navigate(Command):
    """Move the cursor. Subclasses pick the transition."""
    transition: Transition

    def can_execute(self, viewer: "Coordinator") -> bool:
        return viewer.state.has_images

    def execute(self, viewer: "Coordinator") -> bool:
        if not self.can_execute(viewer):
            return False
        debug(f"[CMD] {type(self).__name__}")
        return viewer.request_transition(self.transition)


class NavigateNext(Navigate):
    """Navigate to next image."""
    transition = Transition.NEXT


class NavigatePrev(Navigate):
    """Navigate to previous image."""
    transition = Transition.PREVIOUS


class JumpToStart(Navigate):
    """Navigate to the first image."""
    transition = Transition.JUMP_TO_START


class JumpToEnd(Navigate):
    """Navigate to the last image."""
    transition = Transition.JUMP_TO_END


# ═══════════════════════════════════════════════════════════════════════════
# Zoom Commands
# ═══════════════════════════════════════════════════════════════════════════

class _NeedsImage(Command):
    def can_execute(self, viewer: "Coordinator") -> bool:
        return viewer.state.displayed is not None


class ZoomIn(_NeedsImage):
    """Zoom in by the configured step."""

    def execute(self, viewer: "Coordinator") -> bool:
        if not self.can_execute(viewer):
            return False
        return viewer.zoom_in()


class ZoomOut(_NeedsImage):
    """Zoom out by the configured step."""

    def execute(self, viewer: "Coordinator") -> bool:
        if not self.can_execute(viewer):
            return False
        return viewer.zoom_out()


class ScaleToFitCurrent(_NeedsImage):
    """Fit the current image into the window."""

    def execute(self, viewer: "Coordinator") -> bool:
        if not self.can_execute(viewer):
            return False
        return viewer.scale_to_fit()


class OriginalSize(_NeedsImage):
    """Show the current image at 100%."""

    def execute(self, viewer: "Coordinator") -> bool:
        if not self.can_execute(viewer):
            return False
        return viewer.original_size()


# ═══════════════════════════════════════════════════════════════════════════
# Scroll Commands
# ═══════════════════════════════════════════════════════════════════════════

class Scroll(_NeedsImage):
    """Pan by one scroll step. Subclasses pick the direction."""
    dx: int = 0
    dy: int = 0

    def execute(self, viewer: "Coordinator") -> bool:
        if not self.can_execute(viewer):
            return False
        step = viewer.config.scroll_step
        return viewer.scroll_by(self.dx * step, self.dy * step)


class ScrollUp(Scroll):
    dy = -1


class ScrollDown(Scroll):
    dy = 1


class ScrollLeft(Scroll):
    dx = -1


class ScrollRight(Scroll):
    dx = 1


class ScrollToEdge(_NeedsImage):
    """Jump to an edge of an overflowing image."""
    x: Optional[float] = None
    y: Optional[float] = None

    def execute(self, viewer: "Coordinator") -> bool:
        if not self.can_execute(viewer):
            return False
        return viewer.scroll_to(self.x, self.y)


class ScrollVStart(ScrollToEdge):
    y = 0.0


class ScrollVEnd(ScrollToEdge):
    y = math.inf


class ScrollHStart(ScrollToEdge):
    x = 0.0


class ScrollHEnd(ScrollToEdge):
    x = math.inf


# ═══════════════════════════════════════════════════════════════════════════
# Rotation / Window Commands
# ═══════════════════════════════════════════════════════════════════════════

class Rotate(_NeedsImage):
    """Rotate the displayed image clockwise by quarter turns."""
    quarter_turns: int

    def execute(self, viewer: "Coordinator") -> bool:
        if not self.can_execute(viewer):
            return False
        return viewer.rotate(self.quarter_turns)


class RotateClockwise(Rotate):
    quarter_turns = 1


class RotateCounterClockwise(Rotate):
    quarter_turns = 3


class RotateUpsideDown(Rotate):
    quarter_turns = 2


class ResizeToFitImage(_NeedsImage):
    """Size the window around the displayed image."""

    def execute(self, viewer: "Coordinator") -> bool:
        if not self.can_execute(viewer):
            return False
        return viewer.resize_to_fit_image()


class ResizeToFitScreen(Command):
    """Grow the window to the monitor."""

    def execute(self, viewer: "Coordinator") -> bool:
        return viewer.resize_to_fit_screen()


# ═══════════════════════════════════════════════════════════════════════════
# UI / App Control Commands
# ═══════════════════════════════════════════════════════════════════════════

class ToggleStatus(Command):
    """Toggle status bar display."""

    def execute(self, viewer: "Coordinator") -> bool:
        viewer.toggle_status()
        debug(f"[CMD] ToggleStatus: now={viewer.state.ui.show_status}")
        return True


class CloseApp(Command):
    """Close the application."""

    def execute(self, viewer: "Coordinator") -> bool:
        debug("[CMD] CloseApp")
        viewer.state.window.should_close = True
        return True


COMMANDS: Dict[UserAction, Type[Command]] = {
    UserAction.QUIT: CloseApp,
    UserAction.NEXT: NavigateNext,
    UserAction.PREVIOUS: NavigatePrev,
    UserAction.JUMP_TO_START: JumpToStart,
    UserAction.JUMP_TO_END: JumpToEnd,
    UserAction.ZOOM_IN: ZoomIn,
    UserAction.ZOOM_OUT: ZoomOut,
    UserAction.SCALE_TO_FIT_CURRENT: ScaleToFitCurrent,
    UserAction.ORIGINAL_SIZE: OriginalSize,
    UserAction.TOGGLE_STATUS: ToggleStatus,
    UserAction.SCROLL_UP: ScrollUp,
    UserAction.SCROLL_DOWN: ScrollDown,
    UserAction.SCROLL_LEFT: ScrollLeft,
    UserAction.SCROLL_RIGHT: ScrollRight,
    UserAction.SCROLL_V_START: ScrollVStart,
    UserAction.SCROLL_V_END: ScrollVEnd,
    UserAction.SCROLL_H_START: ScrollHStart,
    UserAction.SCROLL_H_END: ScrollHEnd,
    UserAction.ROTATE_CLOCKWISE: RotateClockwise,
    UserAction.ROTATE_COUNTER_CLOCKWISE: RotateCounterClockwise,
    UserAction.ROTATE_UPSIDE_DOWN: RotateUpsideDown,
    UserAction.RESIZE_TO_FIT_IMAGE: ResizeToFitImage,
    UserAction.RESIZE_TO_FIT_SCREEN: ResizeToFitScreen,
}


def command_for(action: UserAction) -> Command:
    """Build the command bound to a user action."""
    return COMMANDS[action]()
