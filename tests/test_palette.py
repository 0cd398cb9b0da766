import numpy as np
import pytest

from mandelview import SET_COLOR, Bounded, Escaped, map_color, map_colors, pack_rgb, unpack_rgb
from mandelview.palette import PALETTE_PERIOD, buffer_to_rgb


def test_bounded_uses_set_color():
    assert map_color(Bounded()) == (0, 0, 102)
    assert map_color(Bounded(bailout=True)) == SET_COLOR
    assert map_color(Bounded(), set_color=(1, 2, 3)) == (1, 2, 3)


@pytest.mark.parametrize(
    "iterations,expected",
    [
        (0, (255, 0, 0)),
        (15, (127, 127, 0)),
        (30, (0, 255, 0)),
        (45, (0, 127, 127)),
        (60, (0, 0, 255)),
        (75, (127, 0, 127)),
        (89, (246, 0, 8)),
        (90, (255, 0, 0)),
    ],
)
def test_palette_legs(iterations, expected):
    assert map_color(Escaped(iterations)) == expected


def test_palette_is_periodic():
    for i in range(0, 400):
        assert map_color(Escaped(i)) == map_color(Escaped(i + PALETTE_PERIOD))


def test_vectorized_palette_matches_scalar():
    iterations = np.arange(0, 200)
    escaped = iterations % 7 != 0
    packed = map_colors(iterations, escaped)
    assert packed.dtype == np.uint32
    for i, is_escaped, value in zip(iterations, escaped, packed):
        result = Escaped(int(i)) if is_escaped else Bounded()
        assert unpack_rgb(value) == map_color(result)


def test_pack_round_trip():
    assert pack_rgb(0x12, 0x34, 0x56) == 0x123456
    assert unpack_rgb(0xFF123456) == (0x12, 0x34, 0x56)


def test_buffer_to_rgb_layout():
    buffer = np.array([pack_rgb(255, 0, 0), pack_rgb(0, 255, 0), pack_rgb(0, 0, 255), 0, 0, 0], dtype=np.uint32)
    rgb = buffer_to_rgb(buffer, 3, 2)
    assert rgb.shape == (2, 3, 3)
    assert rgb.dtype == np.uint8
    assert tuple(rgb[0, 1]) == (0, 255, 0)
    assert tuple(rgb[1, 0]) == (0, 0, 0)


def test_buffer_to_rgb_rejects_wrong_size():
    with pytest.raises(ValueError):
        buffer_to_rgb(np.zeros(5, dtype=np.uint32), 2, 2)
