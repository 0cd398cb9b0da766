"""Render orchestration: spiral order in, packed pixels out, checkpoints between."""

from __future__ import annotations

import enum
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Union

import numpy as np

from .console import log
from .escape import RenderParameters, evaluate
from .output import format_coordinates, save_screenshot
from .palette import map_color, pack_rgb
from .spiral import spiral_pixels
from .viewport import ComplexPoint, PixelCoordinate, Viewport, pixel_to_complex, zoom_in, zoom_out


class RenderState(enum.Enum):
    IDLE = "idle"  # frame complete, waiting for input
    RENDERING = "rendering"
    DONE = "done"


@dataclass(frozen=True)
class ZoomIn:
    row: float
    column: float


@dataclass(frozen=True)
class ZoomOut:
    row: float
    column: float


@dataclass(frozen=True)
class SaveScreenshot:
    pass


@dataclass(frozen=True)
class ShowCoordinates:
    row: Optional[float] = None
    column: Optional[float] = None


@dataclass(frozen=True)
class Quit:
    pass


UserAction = Union[ZoomIn, ZoomOut, SaveScreenshot, ShowCoordinates, Quit]
PixelUpdate = tuple[PixelCoordinate, tuple[int, int, int]]


def allocate_buffer(width: int, height: int) -> np.ndarray:
    return np.zeros(width * height, dtype=np.uint32)


def new_render_pass(viewport: Viewport, params: RenderParameters) -> Iterator[PixelUpdate]:
    """Yield ``(pixel, rgb)`` for every pixel of ``viewport`` in spiral order.

    Stopping iteration abandons the pass; nothing is computed ahead.
    """

    for pixel in spiral_pixels(viewport.height, viewport.width):
        point = pixel_to_complex(viewport, pixel.row, pixel.column)
        yield pixel, map_color(evaluate(point, params))


def _default_screenshot(session: RenderSession) -> None:
    path = save_screenshot(session.buffer, session.viewport.width, session.viewport.height)
    print(f"Saved screenshot to a file named:  {path}")


def _default_coordinates(session: RenderSession, mouse: Optional[ComplexPoint]) -> None:
    print(format_coordinates(session.viewport, mouse))


class RenderSession:
    """All mutable viewer state: viewport, pixel buffer, pass cursor and queued input.

    The window driver calls :meth:`submit` as input arrives and :meth:`advance`
    periodically. Each ``advance`` call is one checkpoint: queued actions are
    applied first, then pixels are computed until the slice runs out.
    """

    def __init__(
        self,
        viewport: Viewport,
        bailout: Optional[int] = None,
        julia_constant: Optional[ComplexPoint] = None,
        *,
        on_screenshot: Callable[[RenderSession], None] = _default_screenshot,
        on_coordinates: Callable[[RenderSession, Optional[ComplexPoint]], None] = _default_coordinates,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.viewport = viewport
        self.bailout = bailout
        self.julia_constant = julia_constant
        self.on_screenshot = on_screenshot
        self.on_coordinates = on_coordinates
        self.clock = clock

        self.buffer = allocate_buffer(viewport.width, viewport.height)
        self.state = RenderState.IDLE
        self.pixels_drawn = 0
        self.last_elapsed: Optional[float] = None

        self._pending: deque[tuple[UserAction, Optional[ComplexPoint]]] = deque()
        self._pass: Optional[Iterator[PixelUpdate]] = None
        self._pass_started = 0.0

    @property
    def params(self) -> RenderParameters:
        return RenderParameters(
            threshold=self.viewport.threshold,
            bailout=self.bailout,
            julia_constant=self.julia_constant,
        )

    @property
    def progress(self) -> float:
        return self.pixels_drawn / self.buffer.size

    def start(self) -> None:
        """Begin a fresh pass over the current viewport, dropping any pass in progress."""

        if self.state is RenderState.DONE:
            return
        self._abort_pass()
        self._pass = new_render_pass(self.viewport, self.params)
        self._pass_started = self.clock()
        self.pixels_drawn = 0
        self.state = RenderState.RENDERING
        log(
            "Rendering zoom level %d centered at (%r, %r), half span %r"
            % (self.viewport.zoom_level, self.viewport.center_x, self.viewport.center_y, self.viewport.half_span)
        )

    def submit(self, action: UserAction) -> None:
        """Queue ``action`` for the next checkpoint.

        Pixel positions are resolved against the viewport on screen now, so
        clicks queued behind a zoom still refer to the image that was clicked.
        """

        if self.state is RenderState.DONE:
            return
        point = None
        row, column = getattr(action, "row", None), getattr(action, "column", None)
        if row is not None and column is not None:
            point = pixel_to_complex(self.viewport, row, column)
        self._pending.append((action, point))

    def advance(self, time_slice: Optional[float] = None, max_pixels: Optional[int] = None) -> int:
        """Run one checkpoint and return the number of pixels drawn.

        With neither ``time_slice`` (seconds) nor ``max_pixels`` the current
        pass is computed to the end.
        """

        self._handle_pending()
        if self.state is not RenderState.RENDERING or max_pixels == 0:
            return 0

        deadline = self.clock() + time_slice if time_slice is not None else None
        width = self.viewport.width
        drawn = 0
        for pixel, rgb in self._pass:
            self.buffer[pixel.row * width + pixel.column] = pack_rgb(*rgb)
            drawn += 1
            self.pixels_drawn += 1
            if self.pixels_drawn == self.buffer.size:
                self._finish_pass()
                break
            if max_pixels is not None and drawn >= max_pixels:
                break
            if deadline is not None and self.clock() >= deadline:
                break
        return drawn

    def run_to_completion(self) -> int:
        drawn = 0
        while True:
            drawn += self.advance()
            if self.state is not RenderState.RENDERING:
                return drawn

    def _handle_pending(self) -> None:
        while self._pending and self.state is not RenderState.DONE:
            self._apply(*self._pending.popleft())

    def _apply(self, action: UserAction, point: Optional[ComplexPoint]) -> None:
        if isinstance(action, Quit):
            self._abort_pass()
            self._pending.clear()
            self.state = RenderState.DONE
        elif isinstance(action, ZoomIn):
            log("Zoom in on (%r, %r)" % (point.x, point.y))
            self.viewport = zoom_in(self.viewport, point)
            self.start()
        elif isinstance(action, ZoomOut):
            log("Zoom out away from (%r, %r)" % (point.x, point.y))
            self.viewport = zoom_out(self.viewport, point)
            self.start()
        elif isinstance(action, SaveScreenshot):
            self.on_screenshot(self)
        elif isinstance(action, ShowCoordinates):
            self.on_coordinates(self, point)
        else:
            raise TypeError(f"unknown action {action!r}")

    def _abort_pass(self) -> None:
        if self._pass is not None:
            self._pass.close()
            self._pass = None

    def _finish_pass(self) -> None:
        self._pass = None
        self.state = RenderState.IDLE
        self.last_elapsed = self.clock() - self._pass_started
        print("Zoom level {0}:  Elapsed time:  {1:.6f} sec.".format(self.viewport.zoom_level, self.last_elapsed))
