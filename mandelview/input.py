"""Edge-triggered button state for the window driver.

Polled or event-driven backends only report whether a button is down. A
latch keeps the last two readings so callers can also ask whether the button
was just pressed or just released.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ButtonLatch:
    previous: bool = False
    current: bool = False

    def update(self, pressed: bool) -> None:
        self.previous, self.current = self.current, bool(pressed)

    @property
    def currently_pressed(self) -> bool:
        return self.current

    @property
    def just_pressed(self) -> bool:
        return not self.previous and self.current

    @property
    def just_released(self) -> bool:
        return self.previous and not self.current


@dataclass
class MouseState:
    left: ButtonLatch = field(default_factory=ButtonLatch)
    right: ButtonLatch = field(default_factory=ButtonLatch)

    def set_buttons(self, left: bool, right: bool) -> None:
        self.left.update(left)
        self.right.update(right)
