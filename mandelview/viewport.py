"""Plane-to-pixel geometry for a single frame and the zoom algebra."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_WINDOW_SIZE = 512
DEFAULT_HALF_SPAN = 1.725
MANDELBROT_CENTER = (-0.5, 0.0)
JULIA_CENTER = (0.0, 0.0)


@dataclass(frozen=True)
class ComplexPoint:
    """A point ``x + yi`` in the complex plane."""

    x: float
    y: float


@dataclass(frozen=True)
class PixelCoordinate:
    """Zero-based pixel position, row 0 at the top of the window."""

    row: int
    column: int


@dataclass(frozen=True)
class Viewport:
    """The rectangle of the plane currently mapped onto the pixel grid.

    Bounds and per-pixel steps are derived once at construction. A viewport
    is never modified; zooming builds a new one.
    """

    width: int
    height: int
    center_x: float
    center_y: float
    half_span: float
    zoom_level: int = 0

    min_x: float = field(init=False)
    max_x: float = field(init=False)
    min_y: float = field(init=False)
    max_y: float = field(init=False)
    delta_x: float = field(init=False)
    delta_y: float = field(init=False)

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"viewport size must be positive, got {self.width}x{self.height}")
        if not self.half_span > 0:
            raise ValueError(f"half_span must be positive, got {self.half_span}")

        min_x = self.center_x - self.half_span
        max_x = self.center_x + self.half_span
        min_y = self.center_y - self.half_span
        max_y = self.center_y + self.half_span

        # frozen dataclass: derived fields are written once here
        object.__setattr__(self, "min_x", min_x)
        object.__setattr__(self, "max_x", max_x)
        object.__setattr__(self, "min_y", min_y)
        object.__setattr__(self, "max_y", max_y)
        object.__setattr__(self, "delta_x", (max_x - min_x) / self.width)
        object.__setattr__(self, "delta_y", (max_y - min_y) / self.height)

    @property
    def span(self) -> float:
        return self.half_span * 2.0

    @property
    def center(self) -> ComplexPoint:
        return ComplexPoint(self.center_x, self.center_y)

    @property
    def threshold(self) -> float:
        """Cycle-detection tolerance used for a pass: a quarter of a pixel."""
        return self.delta_x / 4.0

    def corners(self) -> dict[str, ComplexPoint]:
        return {
            "upper_left": ComplexPoint(self.min_x, self.max_y),
            "upper_right": ComplexPoint(self.max_x, self.max_y),
            "center": self.center,
            "lower_left": ComplexPoint(self.min_x, self.min_y),
            "lower_right": ComplexPoint(self.max_x, self.min_y),
        }


def pixel_to_complex(viewport: Viewport, row: float, column: float) -> ComplexPoint:
    """Map a pixel position to the plane point at that pixel's center.

    ``row`` and ``column`` may be fractional (mouse positions); integer
    arguments sample the center of the addressed pixel.
    """

    x = viewport.min_x + viewport.delta_x * (column + 0.5)
    y = viewport.max_y - viewport.delta_y * (row + 0.5)
    return ComplexPoint(x, y)


def reflect_through_center(viewport: Viewport, point: ComplexPoint) -> ComplexPoint:
    return ComplexPoint(2.0 * viewport.center_x - point.x, 2.0 * viewport.center_y - point.y)


def zoom_in(viewport: Viewport, point: ComplexPoint) -> Viewport:
    """Center on ``point`` and halve the half-span."""

    return Viewport(
        viewport.width,
        viewport.height,
        point.x,
        point.y,
        viewport.half_span / 2.0,
        viewport.zoom_level + 1,
    )


def zoom_out(viewport: Viewport, point: ComplexPoint) -> Viewport:
    """Double the half-span, moving away from ``point``.

    The new center is ``point`` reflected through the current center, so the
    clicked feature stays where it was on screen relative to the old center.
    """

    new_center = reflect_through_center(viewport, point)
    return Viewport(
        viewport.width,
        viewport.height,
        new_center.x,
        new_center.y,
        viewport.half_span * 2.0,
        viewport.zoom_level - 1,
    )


def initial_viewport(size: int = DEFAULT_WINDOW_SIZE, julia: bool = False) -> Viewport:
    center_x, center_y = JULIA_CENTER if julia else MANDELBROT_CENTER
    return Viewport(size, size, center_x, center_y, DEFAULT_HALF_SPAN, 0)
