"""Tile extraction from source images and membership rules for matching.

Tiles are 3x3 windows of cell values, where a value of 0 means "no cell"
and 1 or more names a colour or type. Extraction slides a window over the
source, optionally adds rotated and mirrored copies, and removes duplicates
while keeping first-seen order.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

Tile = tuple[tuple[int, ...], ...]
"""A 3x3 tile, stored as a tuple of three row tuples."""

_TILE_EDGE = 3


def _rotate_90(tile: Tile) -> Tile:
    """Rotate a tile a quarter turn clockwise."""
    return tuple(zip(*tile[::-1]))


def _reflect(tile: Tile) -> Tile:
    """Mirror a tile left to right."""
    return tuple(row[::-1] for row in tile)


def _window(data: np.ndarray, top: int, left: int, tile_size: int) -> Tile:
    """Read one tile; cells outside the source or the 3x3 frame stay 0."""
    rows, cols = data.shape
    edge = min(tile_size, _TILE_EDGE)
    cells = [[0] * _TILE_EDGE for _ in range(_TILE_EDGE)]
    for ti in range(edge):
        for tj in range(edge):
            r, c = top + ti, left + tj
            if r < rows and c < cols:
                cells[ti][tj] = int(data[r, c])
    return tuple(tuple(row) for row in cells)


def _transforms(tile: Tile, include_rotations: bool, include_reflections: bool) -> list[Tile]:
    variants = [tile]
    if include_rotations:
        rot90 = _rotate_90(tile)
        rot180 = _rotate_90(rot90)
        rot270 = _rotate_90(rot180)
        variants.extend((rot90, rot180, rot270))
    if include_reflections:
        variants.extend([_reflect(variant) for variant in variants])
    return variants


def convert_tile_to_membership_booleans(
    tile: Sequence[Sequence[int]],
    unique_cell_count: int,
) -> tuple[int, ...]:
    """Flag, for each cell type 1..n, whether the tile contains it (1) or not (0)."""
    present = {int(value) for row in tile for value in row if value > 0}
    return tuple(int(cell_type in present) for cell_type in range(1, unique_cell_count + 1))


class TileExtractor:
    """Deduplicated source tiles and the rules mapping constraints to tiles."""

    def __init__(
        self,
        source_tiles: Sequence[Tile],
        boolean_reference_rules: dict[tuple[int, ...], list[int]] | None = None,
    ) -> None:
        self._source_tiles: tuple[Tile, ...] = tuple(source_tiles)
        self._rules: dict[tuple[int, ...], list[int]] = dict(boolean_reference_rules or {})

    @classmethod
    def extract_tiles(
        cls,
        source_data,
        tile_size: int,
        include_rotations: bool,
        include_reflections: bool,
    ) -> TileExtractor:
        """Collect every overlapping tile of ``source_data``.

        With rotations, the 90, 180 and 270 degree turns of each tile are
        added; with reflections, the mirror image of every tile collected so
        far is added. Duplicates are dropped, keeping first-seen order.
        """
        data = np.asarray(source_data)
        rows, cols = data.shape

        base_tiles = [
            _window(data, top, left, tile_size)
            for top in range(max(rows - tile_size, 0) + 1)
            for left in range(max(cols - tile_size, 0) + 1)
        ]

        if include_rotations or include_reflections:
            candidates = [
                variant
                for tile in base_tiles
                for variant in _transforms(tile, include_rotations, include_reflections)
            ]
        else:
            candidates = base_tiles

        return cls(list(dict.fromkeys(candidates)))

    @property
    def source_tiles(self) -> tuple[Tile, ...]:
        """All extracted tiles, in extraction order."""
        return self._source_tiles

    @property
    def boolean_reference_rules(self) -> dict[tuple[int, ...], list[int]]:
        """Constraint pattern to compatible 1-based tile indices."""
        return self._rules

    def build_boolean_reference_rules(self, unique_cell_count: int) -> None:
        """Map every constraint pattern to the tiles that satisfy it.

        A pattern has one flag per cell type: 1 means the tile must contain
        that type, 0 means no constraint. Patterns no tile satisfies are left
        out. Tile indices are 1-based, 0 being reserved for empty.
        """
        memberships = [
            convert_tile_to_membership_booleans(tile, unique_cell_count)
            for tile in self._source_tiles
        ]

        rules: dict[tuple[int, ...], list[int]] = {}
        for bits in range(1 << unique_cell_count):
            pattern = tuple((bits >> i) & 1 for i in range(unique_cell_count))
            matching = [
                index
                for index, membership in enumerate(memberships, start=1)
                if all(not wanted or has for wanted, has in zip(pattern, membership))
            ]
            if matching:
                rules[pattern] = matching

        self._rules = rules

    @staticmethod
    def calculate_exponential_sample_points(pattern_influence_distance: float) -> list[float]:
        """Sample points along the decay curve ``k * log(1 - 3x/4) / log(0.5)``."""
        k = float(pattern_influence_distance)
        ratio = math.log(2.0) / (4.0 * k) if k != 0.0 else math.inf
        step_size = 5.0 * math.tanh(ratio) / 3.0
        num_steps = math.ceil(0.75 / step_size) + 1

        points = []
        for i in range(num_steps):
            x = min(i * step_size, 0.75)
            value = 0.0 if x == 0.0 else k * math.log(1.0 - 3.0 * x / 4.0) / math.log(0.5)
            if math.isfinite(value):
                points.append(value)
        return points