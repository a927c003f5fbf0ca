from collections import deque

import pytest
from PIL import Image

from greedytile.errors import ImageLoadError, InvalidSourceDataError
from greedytile.grid import BoundingBox
from greedytile.prefill import PrefillData, PrefillPlacement

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
CLEAR = (0, 0, 0, 0)


def _write_png(path, size, pixels):
    img = Image.new("RGBA", size, CLEAR)
    for (x, y), color in pixels.items():
        img.putpixel((x, y), color)
    img.save(path)
    return path


@pytest.fixture
def prefill_png(tmp_path):
    return _write_png(
        tmp_path / "sample_pre.png",
        (3, 3),
        {(1, 1): RED, (2, 0): GREEN, (0, 2): BLUE, (0, 1): (10, 20, 30, 255)},
    )


def test_from_png_centres_image_and_maps_colours(prefill_png):
    data = PrefillData.from_png(prefill_png, [RED, GREEN])
    assert data.protected_positions == {(0, 0): 1, (-1, 1): 2}


def test_from_png_ignores_unknown_colours(prefill_png):
    data = PrefillData.from_png(prefill_png, [RED, GREEN])
    assert len(data.placement_queue) == len(data.protected_positions)
    assert {p.tile_reference for p in data.placement_queue} == {1, 2}


def test_queue_is_in_row_major_order(tmp_path):
    path = _write_png(
        tmp_path / "order.png",
        (4, 4),
        {(3, 0): RED, (0, 1): GREEN, (2, 1): RED, (1, 3): GREEN},
    )
    data = PrefillData.from_png(path, [RED, GREEN])
    positions = []
    while (placement := data.next_placement()) is not None:
        positions.append(placement.world_position)
    assert positions == sorted(positions)
    assert len(positions) == 4


def test_bounds_enclose_all_placements(tmp_path):
    path = _write_png(
        tmp_path / "bounds.png",
        (5, 4),
        {(0, 0): RED, (4, 3): GREEN, (2, 1): RED},
    )
    data = PrefillData.from_png(path, [RED, GREEN])
    rows = [pos[0] for pos in data.protected_positions]
    cols = [pos[1] for pos in data.protected_positions]
    assert data.bounds.min == (min(rows), min(cols))
    assert data.bounds.max == (max(rows), max(cols))
    assert all(data.bounds.contains(pos) for pos in data.protected_positions)


def test_no_palette_colour_is_an_error(tmp_path):
    path = _write_png(tmp_path / "empty.png", (2, 2), {(0, 0): BLUE})
    with pytest.raises(InvalidSourceDataError, match="no colors from source palette"):
        PrefillData.from_png(path, [RED, GREEN])


def test_missing_file_is_image_load_error(tmp_path):
    missing = tmp_path / "missing.png"
    with pytest.raises(ImageLoadError) as info:
        PrefillData.from_png(missing, [RED])
    assert info.value.path == missing


def test_non_image_file_is_image_load_error(tmp_path):
    bogus = tmp_path / "bogus.png"
    bogus.write_text("not an image")
    with pytest.raises(ImageLoadError):
        PrefillData.from_png(bogus, [RED])


def test_is_protected(prefill_png):
    data = PrefillData.from_png(prefill_png, [RED, GREEN])
    assert data.is_protected((0, 0)) == 1
    assert data.is_protected([-1, 1]) == 2
    assert data.is_protected((5, 5)) is None


def test_queue_replacement_goes_to_front():
    first = PrefillPlacement((0, 0), 1)
    second = PrefillPlacement((0, 1), 2)
    data = PrefillData(deque([first, second]), {(0, 0): 1, (0, 1): 2},
                       BoundingBox((0, 0), (0, 1)))
    taken = data.next_placement()
    assert taken == first
    data.queue_replacement(taken)
    assert data.next_placement() == first
    assert data.next_placement() == second
    assert data.next_placement() is None