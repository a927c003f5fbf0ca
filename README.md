# greedytile

Building blocks for random greedy pixel pattern generation. A small source
image is cut into overlapping 3×3 tiles, and a grid of per-cell state grows
outwards as tiles are placed. This package holds the pieces such a process
is built from: tile extraction and matching rules, the growing grid, a few
numerical helpers, and export of results as PNG images and animated GIFs.

## Modules

- `greedytile.tiles`
  - `TileExtractor.extract_tiles(source_data, tile_size, include_rotations, include_reflections)`
    slides a window over a 2-D array and collects every overlapping tile.
    Tiles are tuples of three row tuples. With rotations, the 90°, 180° and
    270° turns are added; with reflections, the left-right mirror of every
    tile collected so far is added. Duplicates are dropped and first-seen
    order is kept. The tiles are in `source_tiles`.
  - `build_boolean_reference_rules(unique_cell_count)` maps every constraint
    pattern (one 0/1 flag per cell type) to the 1-based indices of the tiles
    that contain all flagged types. It stores the result in
    `boolean_reference_rules`. Patterns that no tile satisfies are left out.
  - `TileExtractor.calculate_exponential_sample_points(k)` returns sample
    points along the curve `k * log(1 - 3x/4) / log(0.5)`.
  - `convert_tile_to_membership_booleans(tile, unique_cell_count)` flags
    which cell types 1..n appear in a tile.
- `greedytile.grid`
  - `GridState(rows, cols, unique_cell_count)` holds these numpy arrays:
    `tile_probabilities` (one per cell type), `entropy`,
    `adjacency_weights`, `locked_tiles`, `feasibility` and `removal_count`.
    In `locked_tiles`, 0 is uninitialised, 1 is empty and 2 or more is a
    placed tile.
  - `extend_if_needed(offset, coordinates, radius)` grows every array so the
    grid covers `coordinates ± radius`. It returns the new offset and whether
    the grid grew. If `generation_bounds` is set to a `BoundingBox`, the grid
    never grows past it.
  - `get_region_spans(offset, coordinates, radius)` returns the row and
    column index ranges around a point, clamped at zero.
  - `extend_matrices(matrices, offset, coordinates, radius)` does the same
    growth for a single layered array.
- `greedytile.extension`
  - `calculate_extension` returns an `ExtensionInfo`: padding per side and
    the new offset.
  - `extend_array_2d` and `extend_array_3d` return padded copies that keep
    the existing data in place.
- `greedytile.probability`
  - `erf(x)` is the Abramowitz–Stegun approximation.
  - `binomial_normal_approximate_cdf(n, p, k)` gives P(X ≤ k) for a binomial
    by normal approximation with continuity correction.
- `greedytile.interpolation`
  - `Cubic(x_values, y_values)` is a natural cubic spline. Call `evaluate(x)`
    or call the object itself. Outside the data it returns the end values.
    Bad input raises `InterpolationError`.
- `greedytile.prefill`
  - `PrefillData.from_png(path, color_mapping)` reads an image centred on
    the origin. Only pixels whose RGBA colour is in the palette are used.
    They become a queue of `PrefillPlacement`s (world `(row, col)` and a
    1-based tile reference) and a map of protected positions.
  - Use `next_placement`, `queue_replacement` and `is_protected` to work
    with the queue and the protected positions.
- `greedytile.image_export`
  - `export_grid_as_png(grid_state, color_mapping, output_path)` writes the
    placed tiles as RGBA. The image is cropped to the placed tiles and the
    background is transparent. A locked value `v` is drawn with
    `color_mapping[v - 2]`.
- `greedytile.visualization`
  - `VisualizationCapture` records placements and removals.
  - `export_gif(output_path, frame_delay_ms)` replays them as an animated
    GIF. Delays below 50 ms are raised to 50 ms, and frames are skipped to
    keep the apparent speed. The last frame is held 25 times longer.
- `greedytile.analysis`
  - `AnalysisCapture.record_region(...)` records entropy, feasibility and a
    probability-weighted colour for each grid cell around a centre.
  - `export_analysis(visualization, output_path, frame_delay_ms)` writes one
    frame per iteration in a 2×2 layout:
    - top left: weighted colour
    - top right: placed tiles
    - bottom left: entropy
    - bottom right: feasibility
- `greedytile.progress`
  - `ProgressManager` shows tqdm bars for a batch of files. It keeps a
    rolling window of up to five per-file bars. When there are more than six
    files, it adds a batch bar.
- `greedytile.errors`
  - `AlgorithmError` and its subclasses: `ImageLoadError`,
    `InvalidSourceDataError`, `NoValidPositionsError`,
    `InvalidParameterError`, `InvalidTileIndexError`, `ImageExportError`,
    `FileSystemError` and `ComputationError`.
  - Helpers: `with_context`, `with_operation`, `invalid_parameter`,
    `computation_error` and `io_error`.
- `greedytile.configuration`
  - `Settings` is a frozen dataclass of the tunable parameters, checked when
    it is created. `DEFAULTS` is an instance with the default values, and
    the same values are also available as module constants such as
    `TILE_SIZE` and `GIF_FRAME_DELAY_MS`.

## Installation

```
pip install .
```

## Example

```python
import numpy as np

from greedytile.tiles import TileExtractor
from greedytile.grid import GridState
from greedytile.image_export import export_grid_as_png

source = np.array([
    [1, 1, 2, 2],
    [1, 2, 2, 1],
    [2, 2, 1, 1],
    [2, 1, 1, 2],
])

extractor = TileExtractor.extract_tiles(source, 3, True, False)
extractor.build_boolean_reference_rules(2)

grid = GridState(9, 9, 2)
offset, extended = grid.extend_if_needed([0, 0], [12, 0], 6)

grid.locked_tiles[0, 0] = 2  # 0 = uninitialised, 1 = empty, 2+ = colour index + 2
export_grid_as_png(grid, [(255, 0, 0, 255), (0, 0, 255, 255)], "out/result.png")
```

Errors are raised as subclasses of `greedytile.errors.AlgorithmError`. For
example, `export_grid_as_png` raises `InvalidSourceDataError` when no tile
has been placed.

## What this package does not do

This package does not run a generation itself. It has no step that chooses
positions or tiles, propagates probabilities, or resolves deadlocks. It also
has no command-line tool. The calling code drives `GridState` and records
into `VisualizationCapture` and `AnalysisCapture`.

## Running the tests

```
pip install .[test]
pytest
```