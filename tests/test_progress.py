import io

import pytest

from greedytile.configuration import MAX_INDIVIDUAL_PROGRESS_BARS
from greedytile.progress import ProgressManager


@pytest.fixture
def stream():
    return io.StringIO()


@pytest.fixture
def manager(stream):
    pm = ProgressManager(file=stream)
    yield pm
    pm.finish()


def test_small_batch_has_no_batch_bar(manager):
    manager.initialize(3)
    assert manager.file_count == 3
    assert manager.batch_progress is None


def test_large_batch_has_batch_bar(manager):
    count = MAX_INDIVIDUAL_PROGRESS_BARS + 2
    manager.initialize(count)
    assert manager.batch_progress == (0, count)
    manager.start_file(0, "a.png", 10)
    manager.complete_file(0, 0.5)
    assert manager.batch_progress == (1, count)


def test_boundary_batch_size_has_no_batch_bar(manager):
    manager.initialize(MAX_INDIVIDUAL_PROGRESS_BARS + 1)
    assert manager.batch_progress is None


def test_start_and_update_file(manager):
    manager.initialize(2)
    manager.start_file(0, "dir/input.png", 100)
    assert manager.file_states == [("input.png", 0, 100)]
    manager.update_iteration(0, 3, 0.1)
    assert manager.file_states == [("input.png", 3, 100)]


def test_complete_file_marks_and_fills(manager):
    manager.initialize(1)
    manager.start_file(0, "input.png", 40)
    manager.update_iteration(0, 7, 0.1)
    manager.complete_file(0, 1.0)
    assert manager.file_states == [("✓ input.png", 40, 40)]


def test_gaps_are_hidden(manager):
    manager.initialize(3)
    manager.start_file(2, "third.png", 5)
    assert len(manager.file_states) == 3
    assert manager.file_states[0] == ("", 0, 0)
    assert manager.visible_files == [("third.png", 0, 5)]


def test_rolling_window_shows_latest_files(manager):
    count = MAX_INDIVIDUAL_PROGRESS_BARS + 2
    manager.initialize(count)
    names = [f"f{i}.png" for i in range(count)]
    for index, name in enumerate(names):
        manager.start_file(index, name, 10)
    visible = [name for name, _, _ in manager.visible_files]
    assert visible == names[-MAX_INDIVIDUAL_PROGRESS_BARS:]


def test_update_out_of_range_is_ignored(manager):
    manager.initialize(1)
    manager.start_file(0, "a.png", 10)
    manager.update_iteration(5, 9, 0.0)
    assert manager.file_states == [("a.png", 0, 10)]


def test_progress_is_written_to_stream(manager, stream):
    manager.initialize(1)
    manager.start_file(0, "picture.png", 100)
    manager.update_iteration(0, 3, 0.2)
    assert manager.visible_files == [("picture.png", 3, 100)]
    output = stream.getvalue()
    assert "3/100" in output
    assert "picture.png" in output