"""On-screen log of integers for debugging."""

from __future__ import annotations

from dataclasses import dataclass

from .mathutil import V2

MESSAGE_COUNT = 32
MESSAGE_LIFETIME = 2.0


@dataclass
class _Message:
    val: int = 0
    timer: float = 0.0


class MessageLog:
    """A ring of numbers, each shown for two seconds."""

    def __init__(self, capacity: int = MESSAGE_COUNT) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.messages = [_Message() for _ in range(capacity)]
        self.current = 0

    def print_int(self, number: int) -> None:
        message = self.messages[self.current]
        self.current = (self.current + 1) % len(self.messages)
        message.val = number
        message.timer = MESSAGE_LIFETIME

    def draw(self, canvas, origin: V2, dt: float) -> None:
        """Draw the live messages upwards from origin and age them by dt."""
        p = origin
        for message in self.messages:
            if message.timer <= 0.0:
                continue
            message.timer -= dt
            canvas.draw_number(message.val, p, 2.5, 0xFFFFFF)
            p = V2(p.x, p.y + 3.0)