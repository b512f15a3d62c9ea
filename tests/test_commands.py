from dataclasses import fields

import pytest

from ivview.commands import (
    COMMANDS, CloseApp, JumpToEnd, Navigate, NavigateNext, ResizeToFitImage, ToggleStatus,
    ZoomIn, command_for,
)
from ivview.events import UserAction
from ivview.percent import Percent
from ivview.state import WindowState
from ivview.types import ImageSize


def test_every_action_has_a_command():
    assert set(COMMANDS) == set(UserAction)


@pytest.mark.parametrize("action,cls", [
    (UserAction.NEXT, NavigateNext),
    (UserAction.JUMP_TO_END, JumpToEnd),
    (UserAction.QUIT, CloseApp),
])
def test_command_for(action, cls):
    assert isinstance(command_for(action), cls)


def test_navigation_commands(make_viewer):
    viewer = make_viewer()
    assert command_for(UserAction.JUMP_TO_END).execute(viewer)
    assert viewer.state.index == 3
    assert not command_for(UserAction.NEXT).execute(viewer)
    assert command_for(UserAction.PREVIOUS).execute(viewer)
    assert command_for(UserAction.JUMP_TO_START).execute(viewer)
    assert viewer.state.index == 1


def test_navigation_without_images(make_viewer, loader):
    viewer = make_viewer(paths=())
    cmd = NavigateNext()
    assert not cmd.can_execute(viewer)
    assert not cmd.execute(viewer)
    assert loader.requests == []


def test_zoom_commands_need_an_image(make_viewer, loader):
    viewer = make_viewer()
    assert not ZoomIn().execute(viewer)
    loader.loaded(loader.last, 1600, 900)
    viewer.pump()
    assert ZoomIn().execute(viewer)
    assert viewer.state.displayed.current_scale == Percent.from_integer_percent(75)
    assert command_for(UserAction.ORIGINAL_SIZE).execute(viewer)
    assert command_for(UserAction.SCALE_TO_FIT_CURRENT).execute(viewer)
    assert command_for(UserAction.ZOOM_OUT).execute(viewer)
    assert viewer.state.displayed.current_scale == Percent.from_integer_percent(25)


def test_toggle_status_and_quit(make_viewer):
    viewer = make_viewer()
    shown = viewer.state.ui.show_status
    assert ToggleStatus().execute(viewer)
    assert viewer.state.ui.show_status is not shown
    assert not viewer.state.window.should_close
    assert CloseApp().execute(viewer)
    assert viewer.state.window.should_close


def test_navigate_needs_a_transition(make_viewer):
    class Sideways(Navigate):
        pass

    with pytest.raises(AttributeError):
        Sideways().execute(make_viewer())


def test_scroll_commands_step_by_config(make_viewer, loader):
    viewer = make_viewer()
    assert not command_for(UserAction.SCROLL_DOWN).execute(viewer)
    loader.loaded(loader.last, 1600, 900)
    viewer.pump()
    viewer.original_size()
    vs = viewer.state.view_state
    assert vs.scroll == (400.0, 150.0)

    assert command_for(UserAction.SCROLL_DOWN).execute(viewer)
    assert vs.scroll_y == 150 + viewer.config.scroll_step
    assert command_for(UserAction.SCROLL_V_END).execute(viewer)
    assert vs.scroll_y == 300
    assert command_for(UserAction.SCROLL_H_START).execute(viewer)
    assert vs.scroll_x == 0
    assert not command_for(UserAction.SCROLL_LEFT).execute(viewer)
    assert command_for(UserAction.SCROLL_RIGHT).execute(viewer)
    assert command_for(UserAction.SCROLL_UP).execute(viewer)
    assert vs.scroll == (60.0, 240.0)


def test_rotate_and_resize_commands(make_viewer, loader, surface):
    viewer = make_viewer()
    assert not ResizeToFitImage().execute(viewer)
    assert command_for(UserAction.RESIZE_TO_FIT_SCREEN).execute(viewer)

    loader.loaded(loader.last, 1600, 900)
    viewer.pump()
    assert command_for(UserAction.ROTATE_CLOCKWISE).execute(viewer)
    assert viewer.state.displayed.image.size == ImageSize(900, 1600)
    assert command_for(UserAction.ROTATE_COUNTER_CLOCKWISE).execute(viewer)
    assert command_for(UserAction.ROTATE_UPSIDE_DOWN).execute(viewer)
    assert viewer.state.displayed.image.size == ImageSize(1600, 900)
    assert command_for(UserAction.RESIZE_TO_FIT_IMAGE).execute(viewer)
    assert surface.resizes == [("screen",), ("content", ImageSize(800, 450))]


def test_window_state_tracks_monitor_and_close_request():
    assert {f.name for f in fields(WindowState)} == {"monitor_w", "monitor_h", "should_close"}
