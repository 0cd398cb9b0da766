"""Per-point escape-time kernel with tortoise-and-hare cycle detection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from .viewport import ComplexPoint

ESCAPE_RADIUS_SQUARED = 4.0


@dataclass(frozen=True)
class Escaped:
    """The orbit left the radius-2 disc after ``iterations`` updates."""

    iterations: int


@dataclass(frozen=True)
class Bounded:
    """The point is treated as a member of the set.

    ``bailout`` is True when the iteration cap, not a detected cycle, produced
    the verdict. It is informational only and does not affect equality.
    """

    bailout: bool = field(default=False, compare=False)


IterationResult = Union[Escaped, Bounded]


@dataclass(frozen=True)
class RenderParameters:
    """Inputs shared by every point of a render pass."""

    threshold: float = 0.0
    bailout: Optional[int] = None
    julia_constant: Optional[ComplexPoint] = None

    def __post_init__(self) -> None:
        if not self.threshold >= 0.0:
            raise ValueError(f"threshold must be non-negative, got {self.threshold}")
        if self.bailout is not None and self.bailout < 0:
            raise ValueError(f"bailout must be non-negative, got {self.bailout}")

    @property
    def is_julia(self) -> bool:
        return self.julia_constant is not None


def _orbits_meet(x_fast: float, y_fast: float, x_slow: float, y_slow: float, threshold: float) -> bool:
    if threshold == 0.0:
        return x_fast == x_slow and y_fast == y_slow
    return abs(x_fast - x_slow) <= threshold and abs(y_fast - y_slow) <= threshold


def evaluate(point: ComplexPoint, params: RenderParameters) -> IterationResult:
    """Classify ``point`` under ``z -> z**2 + c``.

    ``c`` is the Julia constant when one is set, otherwise the point itself.
    Each round advances the fast orbit twice (testing the radius before each
    update) and the slow orbit once, then compares them. ``iterations``
    counts fast updates only. Reaching ``params.bailout`` counts as
    membership. Finite input is assumed.
    """

    if params.julia_constant is not None:
        c_x, c_y = params.julia_constant.x, params.julia_constant.y
    else:
        c_x, c_y = point.x, point.y
    threshold = params.threshold
    bailout = params.bailout

    x_fast, y_fast = point.x, point.y
    x_slow, y_slow = point.x, point.y
    iterations = 0

    while True:
        for _ in range(2):
            x_squared, y_squared = x_fast * x_fast, y_fast * y_fast
            if x_squared + y_squared > ESCAPE_RADIUS_SQUARED:
                return Escaped(iterations)
            x_fast, y_fast = x_squared - y_squared + c_x, 2.0 * x_fast * y_fast + c_y
            iterations += 1
            if bailout is not None and iterations >= bailout:
                return Bounded(bailout=True)

        # the slow orbit only feeds the comparison, it never escapes
        x_slow, y_slow = x_slow * x_slow - y_slow * y_slow + c_x, 2.0 * x_slow * y_slow + c_y

        if _orbits_meet(x_fast, y_fast, x_slow, y_slow, threshold):
            return Bounded()
