"""Center-outward square spiral over the integer lattice."""

from __future__ import annotations

from typing import Iterator

from .viewport import PixelCoordinate


class SpiralInvariantError(RuntimeError):
    """The step function was handed an offset no spiral walk can reach."""


def next_offset(row: int, column: int) -> tuple[int, int]:
    """Return the offset that follows ``(row, column)`` in the spiral.

    Rings are walked as one continuous edge path: right off the diagonal,
    up the right edge, left along the top, down the left edge and right
    along the bottom.
    """

    if (row, column) == (0, 0):
        return 0, 1
    if row == column:
        if column > 0:
            return row, column + 1
        return row + 1, column
    if row == -column:
        if column > 0:
            return row, column - 1
        return row, column + 1
    if column > 0 and column > abs(row):
        return row - 1, column
    if column < 0 and -column > abs(row):
        return row + 1, column
    if row > 0 and row > abs(column):
        return row, column + 1
    if row < 0 and -row > abs(column):
        return row, column - 1
    raise SpiralInvariantError(f"no spiral step defined for offset ({row}, {column})")


class SpiralEnumerator:
    """Infinite iterator of ``(row, column)`` positions spiralling out of a start cell.

    Each call to ``iter()`` starts a fresh walk from the start cell.
    """

    def __init__(self, start_row: int = 0, start_column: int = 0):
        self.start_row = start_row
        self.start_column = start_column
        self._offset: tuple[int, int] | None = None

    def restart(self) -> None:
        self._offset = None

    def __iter__(self) -> Iterator[tuple[int, int]]:
        self.restart()
        return self

    def __next__(self) -> tuple[int, int]:
        if self._offset is None:
            self._offset = (0, 0)
        else:
            self._offset = next_offset(*self._offset)
        row, column = self._offset
        return row + self.start_row, column + self.start_column


def spiral_pixels(height: int, width: int) -> Iterator[PixelCoordinate]:
    """Yield every cell of a ``height`` x ``width`` grid exactly once.

    The walk starts at ``(height // 2, width // 2)``; positions outside the
    grid are skipped and do not count toward the ``width * height`` total.
    """

    remaining = width * height
    for row, column in SpiralEnumerator(height // 2, width // 2):
        if remaining == 0:
            return
        if 0 <= row < height and 0 <= column < width:
            remaining -= 1
            yield PixelCoordinate(row, column)
