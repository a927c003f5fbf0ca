"""Recording of tile placements and their export as an animated GIF."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image

from greedytile.configuration import GIF_FRAME_DELAY_MS, VIEWER_MIN_FRAME_DELAY_MS
from greedytile.errors import (
    FileSystemError,
    ImageExportError,
    InvalidSourceDataError,
    InvalidTileIndexError,
    invalid_parameter,
)

_FALLBACK_EMPTY_COLOR = (128, 128, 128, 255)
_FINAL_FRAME_DELAY_FACTOR = 25


@dataclass(frozen=True)
class TilePlacement:
    """One placement event; ``tile_ref`` is None for a removal."""

    row: int
    col: int
    tile_ref: int | None
    iteration: int


class VisualizationCapture:
    """Records placement events so the generation can be replayed as an animation.

    Cell values follow the grid convention: 0 is a removal, 1 is empty and
    ``v >= 2`` is drawn with ``color_mapping[v - 2]``. Empty cells use the
    average of all tile colours.
    """

    def __init__(
        self,
        initial_rows: int,
        initial_cols: int,
        color_mapping: Sequence[Sequence[int]],
        max_iterations: int = 0,
    ) -> None:
        self._placements: list[TilePlacement] = []
        self._initial_dims = (initial_rows, initial_cols)
        self.color_mapping: list[tuple[int, int, int, int]] = [
            (int(c[0]), int(c[1]), int(c[2]), int(c[3])) for c in color_mapping
        ]
        if self.color_mapping:
            count = len(self.color_mapping)
            self.empty_color = tuple(
                sum(color[channel] for color in self.color_mapping) // count
                for channel in range(4)
            )
        else:
            self.empty_color = _FALLBACK_EMPTY_COLOR

    @property
    def placements(self) -> list[TilePlacement]:
        """All recorded events, in recording order."""
        return list(self._placements)

    @property
    def placement_count(self) -> int:
        """Number of recorded events."""
        return len(self._placements)

    def __len__(self) -> int:
        return len(self._placements)

    def record_placement(self, row: int, col: int, tile_ref: int, iteration: int) -> None:
        """Record a tile placed at world ``(row, col)``."""
        self._placements.append(TilePlacement(row, col, int(tile_ref), iteration))

    def record_removal(self, row: int, col: int, iteration: int) -> None:
        """Record a tile removed from world ``(row, col)``."""
        self._placements.append(TilePlacement(row, col, None, iteration))

    def export_gif(self, output_path, frame_delay_ms: int = GIF_FRAME_DELAY_MS) -> None:
        """Write the recorded events as an animated GIF.

        Delays shorter than viewers support are raised to that minimum and
        frames are skipped to keep the apparent speed. The last frame is
        shown 25 times longer.
        """
        if not self._placements:
            raise InvalidSourceDataError("No tile placements captured for visualization")
        if frame_delay_ms <= 0:
            raise invalid_parameter("frame_delay_ms", frame_delay_ms, "must be positive")

        effective_delay = max(frame_delay_ms, VIEWER_MIN_FRAME_DELAY_MS)
        if frame_delay_ms < VIEWER_MIN_FRAME_DELAY_MS:
            skip_factor = math.ceil(VIEWER_MIN_FRAME_DELAY_MS / frame_delay_ms)
        else:
            skip_factor = 1

        frames = self._generate_frames(*self._final_bounds(), effective_delay, skip_factor)

        path = Path(output_path)
        parent = path.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileSystemError(parent, "create directory", exc) from exc

        try:
            handle = open(path, "wb")
        except OSError as exc:
            raise FileSystemError(path, "create file", exc) from exc

        images = [Image.fromarray(pixels, "RGBA") for pixels, _ in frames]
        durations = [delay for _, delay in frames]
        with handle:
            try:
                images[0].save(
                    handle,
                    format="GIF",
                    save_all=True,
                    append_images=images[1:],
                    duration=durations,
                )
            except (OSError, ValueError) as exc:
                raise ImageExportError(path, exc) from exc

    def _final_bounds(self) -> tuple[int, int, int, int]:
        """(min_row, min_col, rows, cols) covering the origin and every event."""
        if not self._placements:
            return 0, 0, self._initial_dims[0], self._initial_dims[1]
        rows = [p.row for p in self._placements]
        cols = [p.col for p in self._placements]
        min_row, max_row = min(0, *rows), max(0, *rows)
        min_col, max_col = min(0, *cols), max(0, *cols)
        return min_row, min_col, max_row - min_row + 1, max_col - min_col + 1

    def _generate_frames(
        self,
        min_row: int,
        min_col: int,
        rows: int,
        cols: int,
        delay_ms: int,
        skip_factor: int,
    ) -> list[tuple[np.ndarray, int]]:
        grid = np.ones((rows, cols), dtype=np.int64)
        frames = [(self._render_frame(grid), delay_ms)]

        frame_count = 0
        for placement in self._placements:
            r = placement.row - min_row
            c = placement.col - min_col
            if not (0 <= r < rows and 0 <= c < cols):
                continue
            grid[r, c] = placement.tile_ref if placement.tile_ref is not None else 0
            frame_count += 1
            if frame_count % skip_factor == 0:
                frames.append((self._render_frame(grid), delay_ms))

        if frame_count % skip_factor != 0:
            frames.append((self._render_frame(grid), delay_ms))

        last_pixels, _ = frames[-1]
        frames.append((last_pixels.copy(), delay_ms * _FINAL_FRAME_DELAY_FACTOR))
        return frames

    def _render_frame(self, grid: np.ndarray) -> np.ndarray:
        lookup = np.array(
            [self.empty_color, self.empty_color, *self.color_mapping], dtype=np.uint8
        ).reshape(-1, 4)
        invalid = np.argwhere(grid >= len(lookup))
        if invalid.size:
            row, col = invalid[0]
            raise InvalidTileIndexError(int(grid[row, col]), len(self.color_mapping) + 1)
        return lookup[grid]