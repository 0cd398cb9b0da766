"""matplotlib window that shows a :class:`RenderSession` and feeds it input."""

from __future__ import annotations

from typing import Optional

import matplotlib
import matplotlib.pyplot as plt
from matplotlib.backend_bases import MouseButton

from .console import log
from .input import MouseState
from .palette import buffer_to_rgb
from .session import Quit, RenderSession, RenderState, SaveScreenshot, ShowCoordinates, ZoomIn, ZoomOut

TIME_SLICE = 0.05
TIMER_INTERVAL_MS = 1
IDLE_INTERVAL_MS = 16  # input polling rate once the frame is complete
QUIT_KEYS = {"q", "escape"}


class ViewerWindow:
    """One figure with an axes-filling image of the session's pixel buffer.

    A canvas timer runs the render checkpoints; between ticks matplotlib
    delivers mouse and key events, which are queued on the session.
    """

    def __init__(self, session: RenderSession, title: str = "The Mandelbrot Set", *, time_slice: float = TIME_SLICE, dpi: int = 100):
        self.session = session
        self.time_slice = time_slice
        self.mouse = MouseState()

        width, height = session.viewport.width, session.viewport.height
        matplotlib.rcParams["toolbar"] = "None"
        self.fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
        self.ax = self.fig.add_axes([0.0, 0.0, 1.0, 1.0])
        self.ax.set_axis_off()
        self.image = self.ax.imshow(
            buffer_to_rgb(session.buffer, width, height),
            interpolation="nearest",
            origin="upper",
        )

        canvas = self.fig.canvas
        manager = canvas.manager
        if manager is not None:
            manager.set_window_title(title)
            # the default handler binds s, c and q to figure actions
            key_handler_id = getattr(manager, "key_press_handler_id", None)
            if key_handler_id is not None:
                canvas.mpl_disconnect(key_handler_id)

        canvas.mpl_connect("button_press_event", self._on_button_press)
        canvas.mpl_connect("button_release_event", self._on_button_release)
        canvas.mpl_connect("key_press_event", self._on_key_press)
        canvas.mpl_connect("key_release_event", self._on_key_release)
        canvas.mpl_connect("close_event", self._on_close)

        self.timer = canvas.new_timer(interval=TIMER_INTERVAL_MS)
        self.timer.add_callback(self._on_timer)

    def _pixel_position(self, event) -> Optional[tuple[float, float]]:
        if event.inaxes is not self.ax or event.xdata is None or event.ydata is None:
            return None
        # imshow places pixel centers on integer data coordinates
        return float(event.ydata), float(event.xdata)

    def _set_buttons(self, button, pressed: bool) -> None:
        left, right = self.mouse.left.current, self.mouse.right.current
        if button == MouseButton.LEFT:
            left = pressed
        elif button == MouseButton.RIGHT:
            right = pressed
        self.mouse.set_buttons(left, right)

    def _on_button_press(self, event) -> None:
        self._set_buttons(event.button, True)

    def _on_button_release(self, event) -> None:
        self._set_buttons(event.button, False)
        position = self._pixel_position(event)
        if position is None:
            return
        if self.mouse.left.just_released:
            self.session.submit(ZoomIn(*position))
        elif self.mouse.right.just_released:
            self.session.submit(ZoomOut(*position))

    def _on_key_press(self, event) -> None:
        if event.key in QUIT_KEYS:
            self.session.submit(Quit())

    def _on_key_release(self, event) -> None:
        if event.key == "s":
            self.session.submit(SaveScreenshot())
        elif event.key == "c":
            position = self._pixel_position(event)
            if position is None:
                self.session.submit(ShowCoordinates())
            else:
                self.session.submit(ShowCoordinates(*position))

    def _on_close(self, event) -> None:
        self.session.submit(Quit())
        self.timer.stop()

    def refresh(self) -> None:
        viewport = self.session.viewport
        self.image.set_data(buffer_to_rgb(self.session.buffer, viewport.width, viewport.height))
        self.fig.canvas.draw_idle()

    def _on_timer(self) -> None:
        state_before = self.session.state
        drawn = self.session.advance(time_slice=self.time_slice)
        if self.session.state is RenderState.DONE:
            self.timer.stop()
            plt.close(self.fig)
            return
        rendering = self.session.state is RenderState.RENDERING
        interval = TIMER_INTERVAL_MS if rendering else IDLE_INTERVAL_MS
        if self.timer.interval != interval:
            self.timer.interval = interval
        if drawn or self.session.state is not state_before:
            self.refresh()

    def show(self) -> None:
        log("Using matplotlib backend %s" % matplotlib.get_backend())
        if self.session.state is RenderState.IDLE:
            self.session.start()
        self.timer.start()
        plt.show()
