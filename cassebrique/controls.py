"""Button and mouse input state for one frame."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from .mathutil import V2i


class ButtonId(IntEnum):
    LEFT = 0
    RIGHT = 1
    UP = 2
    DOWN = 3
    ESC = 4
    F5 = 5
    P = 6


class DisplaySize(IntEnum):
    HD = 0
    FHD = 1
    QHD = 2

    @property
    def resolution(self) -> tuple[int, int]:
        return _RESOLUTIONS[self]


_RESOLUTIONS = {
    DisplaySize.HD: (1280, 720),
    DisplaySize.FHD: (1920, 1080),
    DisplaySize.QHD: (2560, 1440),
}


@dataclass
class Button:
    is_down: bool = False
    changed: bool = False


@dataclass
class Controls:
    mouse_p: V2i = field(default_factory=V2i)
    mouse_dp: V2i = field(default_factory=V2i)
    buttons: dict[ButtonId, Button] = field(
        default_factory=lambda: {button: Button() for button in ButtonId}
    )

    def begin_frame(self) -> None:
        """Forget which buttons changed during the previous frame."""
        for button in self.buttons.values():
            button.changed = False

    def process(self, button: ButtonId, is_down: bool) -> None:
        state = self.buttons[button]
        state.changed = is_down != state.is_down
        state.is_down = is_down

    def pressed(self, button: ButtonId) -> bool:
        state = self.buttons[button]
        return state.is_down and state.changed

    def released(self, button: ButtonId) -> bool:
        state = self.buttons[button]
        return not state.is_down and state.changed

    def is_down(self, button: ButtonId) -> bool:
        return self.buttons[button].is_down