"""Grid state with automatic extension and region helpers."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

import numpy as np

from greedytile.extension import (
    PADDING_VALUE,
    ExtensionInfo,
    calculate_extension,
    extend_array_2d,
    extend_array_3d,
)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in world coordinates; both corners are inclusive."""

    min: tuple[int, int]
    max: tuple[int, int]

    def contains(self, pos: Sequence[int]) -> bool:
        """True if ``pos`` lies inside the box."""
        return (
            self.min[0] <= pos[0] <= self.max[0]
            and self.min[1] <= pos[1] <= self.max[1]
        )


class GridState:
    """All per-cell arrays of the generation, kept at one shared size.

    ``locked_tiles`` holds 0 for uninitialised, 1 for empty, and 2 or more
    for a placed tile.
    """

    def __init__(self, rows: int, cols: int, unique_cell_count: int) -> None:
        shape = (rows, cols)
        self.tile_probabilities: list[np.ndarray] = [
            np.ones(shape, dtype=np.float64) for _ in range(unique_cell_count)
        ]
        self.entropy = np.ones(shape, dtype=np.float64)
        self.adjacency_weights = np.ones(shape, dtype=np.uint32)
        self.locked_tiles = np.ones(shape, dtype=np.uint32)
        self.feasibility = np.ones(shape, dtype=np.float64)
        self.removal_count = np.zeros(shape, dtype=np.uint8)
        self.unique_cell_count = unique_cell_count
        self.dimensions: tuple[int, int] = shape
        self.generation_bounds: BoundingBox | None = None

    @property
    def rows(self) -> int:
        return self.dimensions[0]

    @property
    def cols(self) -> int:
        return self.dimensions[1]

    def extend_if_needed(
        self,
        offset: Sequence[int],
        coordinates: Sequence[int],
        radius: int,
    ) -> tuple[tuple[int, int], bool]:
        """Grow the grid to cover ``coordinates`` +/- ``radius``.

        Returns the new offset and whether the grid grew. Growth never goes
        past ``generation_bounds`` when it is set.
        """
        offset = (int(offset[0]), int(offset[1]))
        info = calculate_extension(self.dimensions, offset, coordinates, radius)
        if self.generation_bounds is not None:
            info = self._constrain_extension(info, self.generation_bounds, offset)

        if not info.needs_extension:
            return offset, False

        self.tile_probabilities = [
            extend_array_2d(matrix, info, float(PADDING_VALUE))
            for matrix in self.tile_probabilities
        ]
        self.entropy = extend_array_2d(self.entropy, info, float(PADDING_VALUE))
        self.adjacency_weights = extend_array_2d(self.adjacency_weights, info, PADDING_VALUE)
        self.locked_tiles = extend_array_2d(self.locked_tiles, info, PADDING_VALUE)
        self.feasibility = extend_array_2d(self.feasibility, info, float(PADDING_VALUE))
        self.removal_count = extend_array_2d(self.removal_count, info, PADDING_VALUE)

        self.dimensions = (
            self.rows + info.pad_left + info.pad_right,
            self.cols + info.pad_top + info.pad_bottom,
        )
        return info.new_offset, True

    def _constrain_extension(
        self,
        info: ExtensionInfo,
        bounds: BoundingBox,
        offset: tuple[int, int],
    ) -> ExtensionInfo:
        current_min = (-offset[0], -offset[1])
        current_max = (current_min[0] + self.rows - 1, current_min[1] + self.cols - 1)

        pad_left, pad_right = info.pad_left, info.pad_right
        pad_top, pad_bottom = info.pad_top, info.pad_bottom

        new_min_row = current_min[0] - pad_left
        if new_min_row < bounds.min[0]:
            pad_left = max(0, pad_left - (bounds.min[0] - new_min_row))
        new_min_col = current_min[1] - pad_top
        if new_min_col < bounds.min[1]:
            pad_top = max(0, pad_top - (bounds.min[1] - new_min_col))

        new_max_row = current_max[0] + pad_right
        if new_max_row > bounds.max[0]:
            pad_right = max(0, pad_right - (new_max_row - bounds.max[0]))
        new_max_col = current_max[1] + pad_bottom
        if new_max_col > bounds.max[1]:
            pad_bottom = max(0, pad_bottom - (new_max_col - bounds.max[1]))

        needs_extension = pad_left + pad_right + pad_top + pad_bottom > 0
        new_offset = (offset[0] + pad_left, offset[1] + pad_top) if needs_extension else offset
        return replace(
            info,
            pad_left=pad_left,
            pad_right=pad_right,
            pad_top=pad_top,
            pad_bottom=pad_bottom,
            needs_extension=needs_extension,
            new_offset=new_offset,
        )


def get_region_spans(
    offset: Sequence[int],
    coordinates: Sequence[int],
    radius: int,
) -> tuple[range, range]:
    """Row and column index ranges of the square around ``coordinates``.

    Starts and ends are clamped at zero; ends are not clamped to the grid.
    """
    row = coordinates[0] + offset[0]
    col = coordinates[1] + offset[1]
    return (
        range(max(0, row - radius), max(0, row + radius + 1)),
        range(max(0, col - radius), max(0, col + radius + 1)),
    )


def extend_matrices(
    matrices: np.ndarray,
    offset: Sequence[int],
    coordinates: Sequence[int],
    radius: int,
) -> tuple[np.ndarray, tuple[int, int]]:
    """Extend a layered array to cover ``coordinates`` +/- ``radius``."""
    _, rows, cols = matrices.shape
    info = calculate_extension((rows, cols), offset, coordinates, radius)
    if not info.needs_extension:
        return matrices, (int(offset[0]), int(offset[1]))
    return extend_array_3d(matrices, info), info.new_offset