"""Input Handler - maps raylib key presses to commands.

Polls the configured keymap each frame and returns the commands to run.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Mapping

from .rl_compat import rl
from .commands import Command, CloseApp, command_for
from .events import UserAction


@dataclass
class InputHandler:
    """Handles key polling and command generation."""
    keymap: Mapping[int, UserAction] = field(default_factory=dict)

    def pressed_actions(self) -> List[UserAction]:
        """Actions whose keys went down this frame, in keymap order."""
        actions = []
        repeat = getattr(rl, "IsKeyPressedRepeat", None)
        for key, action in self.keymap.items():
            if rl.IsKeyPressed(key) or (repeat is not None and repeat(key)):
                actions.append(action)
        return actions

    def poll(self) -> List[Command]:
        """Poll input and return commands to execute."""
        if rl.WindowShouldClose():
            return [CloseApp()]
        return [command_for(a) for a in self.pressed_actions()]

