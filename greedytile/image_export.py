"""PNG export of the grid, cropped to placed tiles, with a transparent background."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import numpy as np
from PIL import Image

from greedytile.errors import (
    FileSystemError,
    ImageExportError,
    InvalidSourceDataError,
    InvalidTileIndexError,
)
from greedytile.grid import GridState


def export_grid_as_png(
    grid_state: GridState,
    color_mapping: Sequence[Sequence[int]],
    output_path,
) -> None:
    """Write the placed tiles as an RGBA image.

    The image is cropped to the smallest rectangle holding every placed tile
    (locked value 2 or more); value ``v`` takes colour ``color_mapping[v - 2]``
    and every other cell is transparent.
    """
    locked = np.asarray(grid_state.locked_tiles).astype(np.int64)
    placed = np.argwhere(locked > 1)
    if placed.size == 0:
        raise InvalidSourceDataError("No tiles have been placed in the grid")

    min_row, min_col = placed.min(axis=0)
    max_row, max_col = placed.max(axis=0)
    crop = locked[min_row : max_row + 1, min_col : max_col + 1]

    palette = np.asarray(color_mapping, dtype=np.uint8).reshape(-1, 4)
    mask = crop > 1
    out_of_range = np.argwhere(mask & (crop - 2 >= len(palette)))
    if out_of_range.size:
        row, col = out_of_range[0]
        raise InvalidTileIndexError(int(crop[row, col]), len(palette) + 1)

    pixels = np.zeros(crop.shape + (4,), dtype=np.uint8)
    pixels[mask] = palette[crop[mask] - 2]

    path = Path(output_path)
    parent = path.parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileSystemError(parent, "create directory", exc) from exc

    try:
        Image.fromarray(pixels).save(path)
    except (OSError, ValueError, KeyError) as exc:
        raise ImageExportError(path, exc) from exc