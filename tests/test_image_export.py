import numpy as np
import pytest
from PIL import Image

from greedytile.errors import ImageExportError, InvalidSourceDataError, InvalidTileIndexError
from greedytile.grid import GridState
from greedytile.image_export import export_grid_as_png

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
PALETTE = [RED, GREEN]


def _grid_with(tiles):
    grid = GridState(6, 6, 2)
    for (row, col), value in tiles.items():
        grid.locked_tiles[row, col] = value
    return grid


def test_export_crops_and_colours(tmp_path):
    grid = _grid_with({(1, 2): 2, (3, 4): 3})
    out = tmp_path / "out.png"
    export_grid_as_png(grid, PALETTE, out)
    with Image.open(out) as img:
        rgba = img.convert("RGBA")
        assert rgba.size == (3, 3)
        assert rgba.getpixel((0, 0)) == RED
        assert rgba.getpixel((2, 2)) == GREEN
        assert rgba.getpixel((1, 1)) == (0, 0, 0, 0)


def test_export_single_tile(tmp_path):
    grid = _grid_with({(4, 0): 3})
    out = tmp_path / "single.png"
    export_grid_as_png(grid, PALETTE, str(out))
    with Image.open(out) as img:
        rgba = img.convert("RGBA")
        assert rgba.size == (1, 1)
        assert rgba.getpixel((0, 0)) == GREEN


def test_export_round_trips_pixel_array(tmp_path):
    grid = _grid_with({(0, 0): 2, (0, 1): 3, (1, 0): 3, (1, 1): 2})
    out = tmp_path / "checker.png"
    export_grid_as_png(grid, PALETTE, out)
    with Image.open(out) as img:
        array = np.asarray(img.convert("RGBA"))
    expected = np.array([[RED, GREEN], [GREEN, RED]], dtype=np.uint8)
    np.testing.assert_array_equal(array, expected)


def test_export_creates_parent_directories(tmp_path):
    grid = _grid_with({(2, 2): 2})
    out = tmp_path / "nested" / "deeper" / "out.png"
    export_grid_as_png(grid, PALETTE, out)
    assert out.is_file()


def test_empty_grid_is_rejected(tmp_path):
    grid = GridState(4, 4, 2)
    with pytest.raises(InvalidSourceDataError) as info:
        export_grid_as_png(grid, PALETTE, tmp_path / "out.png")
    assert info.value.reason == "No tiles have been placed in the grid"


def test_tile_outside_palette_is_rejected(tmp_path):
    grid = _grid_with({(1, 1): 2, (2, 2): 4})
    with pytest.raises(InvalidTileIndexError) as info:
        export_grid_as_png(grid, PALETTE, tmp_path / "out.png")
    assert info.value.index == 4
    assert info.value.max_tiles == len(PALETTE) + 1
    assert not (tmp_path / "out.png").exists()


def test_unknown_extension_is_export_error(tmp_path):
    grid = _grid_with({(1, 1): 2})
    with pytest.raises(ImageExportError) as info:
        export_grid_as_png(grid, PALETTE, tmp_path / "out.notanimage")
    assert info.value.path == tmp_path / "out.notanimage"