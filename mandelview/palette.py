"""Iteration-count to RGB mapping and packed 24-bit pixel helpers."""

from __future__ import annotations

import numpy as np

from .escape import Escaped, IterationResult

SET_COLOR = (0, 0, 102)
COLORS_PER_LEG = 30
PALETTE_PERIOD = 3 * COLORS_PER_LEG


def map_color(result: IterationResult, set_color: tuple[int, int, int] = SET_COLOR) -> tuple[int, int, int]:
    """Return the RGB triplet for one classified point.

    Escaped counts walk three gradients (red to green, green to blue, blue
    to red) of ``COLORS_PER_LEG`` steps each, repeating every
    ``PALETTE_PERIOD`` iterations.
    """

    if not isinstance(result, Escaped):
        return set_color

    value = result.iterations % PALETTE_PERIOD
    leg, remainder = divmod(value, COLORS_PER_LEG)
    value1 = (COLORS_PER_LEG - remainder) * 255 // COLORS_PER_LEG
    value2 = remainder * 255 // COLORS_PER_LEG

    if leg == 0:
        return (value1, value2, 0)
    if leg == 1:
        return (0, value1, value2)
    return (value2, 0, value1)


def map_colors(
    iterations: np.ndarray,
    escaped: np.ndarray,
    set_color: tuple[int, int, int] = SET_COLOR,
) -> np.ndarray:
    """Vectorized :func:`map_color`; returns packed ``uint32`` values."""

    value = np.asarray(iterations, dtype=np.int64) % PALETTE_PERIOD
    leg = value // COLORS_PER_LEG
    remainder = value % COLORS_PER_LEG
    value1 = (COLORS_PER_LEG - remainder) * 255 // COLORS_PER_LEG
    value2 = remainder * 255 // COLORS_PER_LEG
    zero = np.zeros_like(value)

    red = np.select([leg == 0, leg == 1], [value1, zero], default=value2)
    green = np.select([leg == 0, leg == 1], [value2, value1], default=zero)
    blue = np.select([leg == 0, leg == 1], [zero, value2], default=value1)

    packed = (red << 16) | (green << 8) | blue
    packed = np.where(escaped, packed, pack_rgb(*set_color))
    return packed.astype(np.uint32)


def pack_rgb(r: int, g: int, b: int) -> int:
    return (int(r) << 16) | (int(g) << 8) | int(b)


def unpack_rgb(value: int) -> tuple[int, int, int]:
    value = int(value) & 0xFFFFFF
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def buffer_to_rgb(buffer: np.ndarray, width: int, height: int) -> np.ndarray:
    """Expand a packed row-major buffer into a ``(height, width, 3)`` uint8 array."""

    if buffer.size != width * height:
        raise ValueError(f"buffer holds {buffer.size} pixels, expected {width * height}")
    packed = np.asarray(buffer, dtype=np.uint32).reshape(height, width)
    rgb = np.stack(((packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF), axis=-1)
    return rgb.astype(np.uint8)
