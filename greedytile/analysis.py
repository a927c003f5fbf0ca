"""Capture of per-cell algorithm metrics and their export as an animated GIF.

Each frame is laid out as a 2x2 grid separated by grey bars:

* top left: colour averaged over the tile probabilities,
* top right: the tiles actually placed,
* bottom left: entropy, normalised by the largest entropy recorded,
* bottom right: feasibility.
"""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image

from greedytile.errors import FileSystemError, ImageExportError, InvalidSourceDataError
from greedytile.grid import GridState, get_region_spans
from greedytile.visualization import VisualizationCapture

_PADDING = 2
_OPAQUE_BLACK = (0, 0, 0, 255)
_SEPARATOR_GRAY = (128, 128, 128, 255)
_FINAL_FRAME_DELAY_FACTOR = 25

Color = tuple[int, int, int, int]


@dataclass(frozen=True)
class AnalysisEvent:
    """Metrics recorded for one world cell at one iteration."""

    row: int
    col: int
    iteration: int
    entropy: float
    feasibility: float
    weighted_color: Color


@dataclass(frozen=True)
class _Bounds:
    min_row: int
    min_col: int
    rows: int
    cols: int


def _to_byte(value: float) -> int:
    if math.isnan(value):
        return 0
    return min(255, max(0, value))


def _saturate(values: np.ndarray) -> np.ndarray:
    """Truncate towards zero and clamp to 0..255; NaN becomes 0."""
    truncated = np.trunc(np.nan_to_num(values, nan=0.0, posinf=255.0, neginf=0.0))
    return np.clip(truncated, 0, 255).astype(np.uint8)


def _cell(array: np.ndarray, row: int, col: int, default: float = 0.0) -> float:
    rows, cols = array.shape[:2]
    if row < rows and col < cols:
        return float(array[row, col])
    return default


class AnalysisCapture:
    """Records entropy, feasibility and probability colour around placements."""

    def __init__(self, color_mapping: Sequence[Sequence[int]], grid_extension_radius: int) -> None:
        self.color_mapping: list[Color] = [
            (int(c[0]), int(c[1]), int(c[2]), int(c[3])) for c in color_mapping
        ]
        self.capture_radius = int(grid_extension_radius)
        self._events: list[AnalysisEvent] = []

    @property
    def events(self) -> list[AnalysisEvent]:
        """All recorded events, in recording order."""
        return list(self._events)

    @property
    def event_count(self) -> int:
        """Number of recorded events."""
        return len(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def _weighted_color(self, probabilities: Sequence[float]) -> Color:
        # Slot 0 is unused: probability slot i belongs to colour i - 1.
        totals = [0.0, 0.0, 0.0, 0.0]
        total_weight = 0.0
        for tile_idx, prob in enumerate(probabilities):
            if prob > 0.0 and 0 < tile_idx <= len(self.color_mapping):
                color = self.color_mapping[tile_idx - 1]
                for channel in range(4):
                    totals[channel] += color[channel] * prob
                total_weight += prob

        if total_weight <= 0.0:
            return _OPAQUE_BLACK
        return tuple(
            _to_byte(math.floor(total / total_weight + 0.5)) for total in totals
        )  # type: ignore[return-value]

    def record_region(
        self,
        center_row: int,
        center_col: int,
        grid_state: GridState,
        system_offset: Sequence[int],
        iteration: int,
    ) -> None:
        """Record the metrics of every grid cell within the capture radius of a centre."""
        row_span, col_span = get_region_spans(
            system_offset, (center_row, center_col), self.capture_radius
        )
        rows = range(min(row_span.start, grid_state.rows), min(row_span.stop, grid_state.rows))
        cols = range(min(col_span.start, grid_state.cols), min(col_span.stop, grid_state.cols))
        slots = grid_state.unique_cell_count + 1

        for row in rows:
            for col in cols:
                probabilities = [0.0] * slots
                for i, matrix in enumerate(grid_state.tile_probabilities[: slots - 1]):
                    probabilities[i + 1] = _cell(matrix, row, col)
                self._events.append(
                    AnalysisEvent(
                        row=row - int(system_offset[0]),
                        col=col - int(system_offset[1]),
                        iteration=iteration,
                        entropy=_cell(grid_state.entropy, row, col),
                        feasibility=_cell(grid_state.feasibility, row, col),
                        weighted_color=self._weighted_color(probabilities),
                    )
                )

    def _unified_bounds(self, visualization: VisualizationCapture) -> _Bounds:
        points = [(e.row, e.col) for e in self._events]
        points.extend((p.row, p.col) for p in visualization.placements)
        if not points:
            raise InvalidSourceDataError("No analysis events or placements captured")
        rows = [r for r, _ in points]
        cols = [c for _, c in points]
        return _Bounds(
            min_row=min(rows),
            min_col=min(cols),
            rows=max(rows) - min(rows) + 1,
            cols=max(cols) - min(cols) + 1,
        )

    def _render_frames(
        self,
        visualization: VisualizationCapture,
        bounds: _Bounds,
        max_iteration: int,
        max_entropy: float,
    ) -> Iterator[np.ndarray]:
        """Yield one frame per iteration 0..max_iteration, replaying events in order."""
        shape = (bounds.rows, bounds.cols)
        entropy = np.zeros(shape, dtype=np.float64)
        feasibility = np.zeros(shape, dtype=np.float64)
        colors = np.empty(shape + (4,), dtype=np.uint8)
        colors[...] = _OPAQUE_BLACK
        # The winner of a cell is its last event in recording order, so ranks decide.
        event_rank = np.full(shape, -1, dtype=np.int64)
        tiles: dict[tuple[int, int], tuple[int, int | None]] = {}

        events_by_iteration: dict[int, list[tuple[int, AnalysisEvent]]] = defaultdict(list)
        for rank, event in enumerate(self._events):
            events_by_iteration[max(event.iteration, 0)].append((rank, event))
        placements_by_iteration = defaultdict(list)
        for rank, placement in enumerate(visualization.placements):
            placements_by_iteration[max(placement.iteration, 0)].append((rank, placement))

        for iteration in range(max_iteration + 1):
            for rank, event in events_by_iteration.get(iteration, ()):
                r, c = event.row - bounds.min_row, event.col - bounds.min_col
                if rank > event_rank[r, c]:
                    event_rank[r, c] = rank
                    entropy[r, c] = event.entropy
                    feasibility[r, c] = event.feasibility
                    colors[r, c] = event.weighted_color
            for rank, placement in placements_by_iteration.get(iteration, ()):
                key = (placement.row, placement.col)
                previous = tiles.get(key)
                if previous is None or rank > previous[0]:
                    tiles[key] = (rank, placement.tile_ref)

            yield self._compose(bounds, entropy, feasibility, colors, tiles, max_entropy)

    def _tile_layer(
        self, bounds: _Bounds, tiles: dict[tuple[int, int], tuple[int, int | None]]
    ) -> np.ndarray:
        layer = np.empty((bounds.rows, bounds.cols, 4), dtype=np.uint8)
        layer[...] = _OPAQUE_BLACK
        for (row, col), (_, tile_ref) in tiles.items():
            if tile_ref is None:
                continue
            r, c = row - bounds.min_row, col - bounds.min_col
            layer[r, c] = (0, 0, 0, 0)
            if tile_ref > 1 and tile_ref - 2 < len(self.color_mapping):
                layer[r, c] = self.color_mapping[tile_ref - 2]
        return layer

    def _compose(
        self,
        bounds: _Bounds,
        entropy: np.ndarray,
        feasibility: np.ndarray,
        colors: np.ndarray,
        tiles: dict[tuple[int, int], tuple[int, int | None]],
        max_entropy: float,
    ) -> np.ndarray:
        rows, cols = bounds.rows, bounds.cols
        pixels = np.zeros((rows * 2 + _PADDING, cols * 2 + _PADDING, 4), dtype=np.uint8)
        lower = slice(rows + _PADDING, None)
        right = slice(cols + _PADDING, None)

        pixels[:rows, :cols] = colors
        pixels[:rows, right] = self._tile_layer(bounds, tiles)

        if max_entropy > 0.0:
            entropy_gray = _saturate(entropy / max_entropy * 255.0)
        else:
            entropy_gray = np.zeros(entropy.shape, dtype=np.uint8)
        pixels[lower, :cols, :3] = entropy_gray[..., None]
        pixels[lower, :cols, 3] = 255

        pixels[lower, right, :3] = _saturate(feasibility * 255.0)[..., None]
        pixels[lower, right, 3] = 255

        pixels[:rows, cols : cols + _PADDING] = _SEPARATOR_GRAY
        pixels[lower, cols : cols + _PADDING] = _SEPARATOR_GRAY
        pixels[rows : rows + _PADDING, :] = _SEPARATOR_GRAY
        return pixels

    def export_analysis(
        self,
        visualization: VisualizationCapture,
        output_path,
        frame_delay_ms: int,
    ) -> None:
        """Write one frame per iteration as an animated GIF in the 2x2 layout.

        A copy of the last frame is appended with a 25 times longer delay.
        """
        bounds = self._unified_bounds(visualization)
        iterations = [e.iteration for e in self._events]
        iterations.extend(p.iteration for p in visualization.placements)
        max_iteration = max([0, *iterations])
        max_entropy = max([0.0, *(e.entropy for e in self._events if not math.isnan(e.entropy))])

        images = [
            Image.fromarray(pixels)
            for pixels in self._render_frames(visualization, bounds, max_iteration, max_entropy)
        ]
        images.append(images[-1].copy())
        durations = [frame_delay_ms] * (len(images) - 1)
        durations.append(frame_delay_ms * _FINAL_FRAME_DELAY_FACTOR)

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