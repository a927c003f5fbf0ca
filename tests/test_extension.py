import numpy as np
import pytest

from greedytile.extension import (
    PADDING_VALUE,
    ExtensionInfo,
    calculate_extension,
    extend_array_2d,
    extend_array_3d,
)


def _covered(dims, offset):
    """World-coordinate extent (min_row, min_col, max_row, max_col) of a grid."""
    return (
        -offset[0],
        -offset[1],
        -offset[0] + dims[0] - 1,
        -offset[1] + dims[1] - 1,
    )


def test_no_extension_when_target_inside():
    info = calculate_extension((5, 5), (2, 2), (0, 0), 2)
    assert not info.needs_extension
    assert info.total_padding == 0
    assert info.new_offset == (2, 2)


def test_symmetric_extension_pads_by_radius():
    info = calculate_extension((1, 1), (0, 0), (0, 0), 3)
    assert info.needs_extension
    assert (info.pad_left, info.pad_right, info.pad_top, info.pad_bottom) == (3, 3, 3, 3)
    assert info.new_offset == (3, 3)


@pytest.mark.parametrize(
    "dims, offset, coords, radius",
    [
        ((3, 3), (0, 0), (10, -4), 2),
        ((4, 7), (1, 5), (-8, 0), 1),
        ((2, 2), (-3, -3), (0, 0), 0),
        ((6, 2), (2, 0), (3, 9), 4),
    ],
)
def test_extension_covers_old_and_new_region(dims, offset, coords, radius):
    info = calculate_extension(dims, offset, coords, radius)
    new_dims = (
        dims[0] + info.pad_left + info.pad_right,
        dims[1] + info.pad_top + info.pad_bottom,
    )
    old = _covered(dims, offset)
    new = _covered(new_dims, info.new_offset)
    assert new[0] <= min(old[0], coords[0] - radius)
    assert new[1] <= min(old[1], coords[1] - radius)
    assert new[2] >= max(old[2], coords[0] + radius)
    assert new[3] >= max(old[3], coords[1] + radius)
    assert min(info.pad_left, info.pad_right, info.pad_top, info.pad_bottom) >= 0


def test_extension_only_on_needed_side():
    info = calculate_extension((3, 3), (0, 0), (4, 1), 1)
    assert info.pad_left == 0
    assert info.pad_top == 0
    assert info.pad_bottom == 0
    assert info.pad_right > 0
    assert info.new_offset == (0, 0)


def test_extend_array_2d_preserves_data_and_pads():
    array = np.arange(9, dtype=np.uint32).reshape(3, 3)
    info = calculate_extension((3, 3), (0, 0), (0, 0), 1)
    result = extend_array_2d(array, info, 7)
    assert result.shape == (
        3 + info.pad_left + info.pad_right,
        3 + info.pad_top + info.pad_bottom,
    )
    assert result.dtype == array.dtype
    block = result[info.pad_left : info.pad_left + 3, info.pad_top : info.pad_top + 3]
    np.testing.assert_array_equal(block, array)
    mask = np.ones(result.shape, dtype=bool)
    mask[info.pad_left : info.pad_left + 3, info.pad_top : info.pad_top + 3] = False
    assert np.all(result[mask] == 7)


def test_extend_array_2d_without_extension_returns_copy():
    array = np.full((2, 2), 0.5)
    info = ExtensionInfo(0, 0, 0, 0, (0, 0), False)
    result = extend_array_2d(array, info, 1.0)
    np.testing.assert_array_equal(result, array)
    result[0, 0] = 9.0
    assert array[0, 0] == 0.5


def test_world_coordinates_keep_their_values():
    array = np.arange(12, dtype=np.int64).reshape(3, 4)
    offset = (1, 2)
    info = calculate_extension(array.shape, offset, (-5, 6), 2)
    result = extend_array_2d(array, info, PADDING_VALUE)
    for row in range(-offset[0], -offset[0] + 3):
        for col in range(-offset[1], -offset[1] + 4):
            assert (
                result[row + info.new_offset[0], col + info.new_offset[1]]
                == array[row + offset[0], col + offset[1]]
            )


def test_extend_array_3d_pads_with_ones_per_layer():
    array = np.zeros((2, 2, 2), dtype=np.float64)
    array[1] = 5.0
    info = calculate_extension((2, 2), (0, 0), (2, 2), 1)
    result = extend_array_3d(array, info)
    assert result.shape[0] == 2
    assert result.shape[1] == 2 + info.pad_left + info.pad_right
    assert result.shape[2] == 2 + info.pad_top + info.pad_bottom
    np.testing.assert_array_equal(result[:, :2, :2], array)
    assert np.all(result[:, 2:, :] == 1.0)
    assert np.all(result[:, :, 2:] == 1.0)


def test_extend_array_3d_without_extension_returns_equal_copy():
    array = np.full((3, 2, 2), 4.0)
    info = calculate_extension((2, 2), (0, 0), (0, 0), 0)
    result = extend_array_3d(array, info)
    np.testing.assert_array_equal(result, array)
    result[0, 0, 0] = 0.0
    assert array[0, 0, 0] == 4.0