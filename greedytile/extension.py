"""Padding of grid arrays when placements reach past the current bounds.

The grid keeps an offset that maps world coordinates to array indices
(``index = world + offset``). Extending a grid adds rows and columns around
the existing data and shifts the offset so that every world coordinate keeps
pointing at the same value.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

PADDING_VALUE = 1
"""Value written into cells added by an extension."""


@dataclass(frozen=True)
class ExtensionInfo:
    """Padding needed on each side and the offset after extension.

    ``pad_left``/``pad_right`` apply to the first axis (rows) and
    ``pad_top``/``pad_bottom`` to the second axis (columns).
    """

    pad_left: int
    pad_right: int
    pad_top: int
    pad_bottom: int
    new_offset: tuple[int, int]
    needs_extension: bool

    @property
    def total_padding(self) -> int:
        return self.pad_left + self.pad_right + self.pad_top + self.pad_bottom


def calculate_extension(
    current_dims: Sequence[int],
    offset: Sequence[int],
    coordinates: Sequence[int],
    radius: int,
) -> ExtensionInfo:
    """Work out the padding that makes the grid cover ``coordinates`` +/- ``radius``."""
    rows, cols = int(current_dims[0]), int(current_dims[1])
    min_row, min_col = -int(offset[0]), -int(offset[1])
    max_row, max_col = min_row + rows - 1, min_col + cols - 1

    new_min_row = min(min_row, coordinates[0] - radius)
    new_min_col = min(min_col, coordinates[1] - radius)
    new_max_row = max(max_row, coordinates[0] + radius)
    new_max_col = max(max_col, coordinates[1] + radius)

    pad_left = min_row - new_min_row
    pad_right = new_max_row - max_row
    pad_top = min_col - new_min_col
    pad_bottom = new_max_col - max_col

    needs_extension = pad_left + pad_right + pad_top + pad_bottom > 0
    if needs_extension:
        new_offset = (int(offset[0]) + pad_left, int(offset[1]) + pad_top)
    else:
        new_offset = (int(offset[0]), int(offset[1]))

    return ExtensionInfo(
        pad_left=pad_left,
        pad_right=pad_right,
        pad_top=pad_top,
        pad_bottom=pad_bottom,
        new_offset=new_offset,
        needs_extension=needs_extension,
    )


def extend_array_2d(array: np.ndarray, info: ExtensionInfo, padding_value) -> np.ndarray:
    """Return a padded copy of a 2-D array; existing data is kept in place."""
    if not info.needs_extension:
        return array.copy()

    old_rows, old_cols = array.shape
    new_shape = (
        old_rows + info.pad_left + info.pad_right,
        old_cols + info.pad_top + info.pad_bottom,
    )
    extended = np.full(new_shape, padding_value, dtype=array.dtype)
    extended[
        info.pad_left : info.pad_left + old_rows,
        info.pad_top : info.pad_top + old_cols,
    ] = array
    return extended


def extend_array_3d(array: np.ndarray, info: ExtensionInfo) -> np.ndarray:
    """Return a copy of a layered array padded with ones in its two spatial axes."""
    if not info.needs_extension:
        return array.copy()

    layers, old_rows, old_cols = array.shape
    new_shape = (
        layers,
        old_rows + info.pad_left + info.pad_right,
        old_cols + info.pad_top + info.pad_bottom,
    )
    extended = np.ones(new_shape, dtype=array.dtype)
    extended[
        :,
        info.pad_left : info.pad_left + old_rows,
        info.pad_top : info.pad_top + old_cols,
    ] = array
    return extended