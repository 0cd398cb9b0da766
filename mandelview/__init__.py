"""Public API for escape-time fractal rendering."""

from .escape import Bounded, Escaped, IterationResult, RenderParameters, evaluate
from .palette import SET_COLOR, map_color, map_colors, pack_rgb, unpack_rgb
from .session import (
    Quit,
    RenderSession,
    RenderState,
    SaveScreenshot,
    ShowCoordinates,
    ZoomIn,
    ZoomOut,
    allocate_buffer,
    new_render_pass,
)
from .spiral import SpiralEnumerator, SpiralInvariantError, next_offset, spiral_pixels
from .viewport import (
    ComplexPoint,
    PixelCoordinate,
    Viewport,
    initial_viewport,
    pixel_to_complex,
    zoom_in,
    zoom_out,
)

__all__ = [
    "Bounded",
    "ComplexPoint",
    "Escaped",
    "IterationResult",
    "PixelCoordinate",
    "Quit",
    "RenderParameters",
    "RenderSession",
    "RenderState",
    "SET_COLOR",
    "SaveScreenshot",
    "ShowCoordinates",
    "SpiralEnumerator",
    "SpiralInvariantError",
    "Viewport",
    "ZoomIn",
    "ZoomOut",
    "allocate_buffer",
    "evaluate",
    "initial_viewport",
    "map_color",
    "map_colors",
    "new_render_pass",
    "next_offset",
    "pack_rgb",
    "pixel_to_complex",
    "spiral_pixels",
    "unpack_rgb",
    "zoom_in",
    "zoom_out",
]
