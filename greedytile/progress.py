"""Progress display for batches of files.

Small batches get one bar per file; larger ones also get a batch bar, and
the per-file bars then show a rolling window of the most recent files.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import TextIO

from tqdm import tqdm

from greedytile.configuration import MAX_INDIVIDUAL_PROGRESS_BARS

_BAR_CHARS = " ▏▎▍▌▋▊▉█"
_BATCH_FORMAT = "[{elapsed}] Files: [{bar:40}] {n_fmt}/{total_fmt}"
_FINISHED_MESSAGE = "All files processed"


@dataclass
class _FileState:
    name: str = ""
    current: int = 0
    maximum: int = 0


def _file_bar_format(name: str) -> str:
    escaped = name.replace("{", "{{").replace("}", "}}")
    return "{desc} [{bar:30}] " + escaped


class ProgressManager:
    """Coordinates the progress bars of a batch run."""

    def __init__(self, file: TextIO | None = None) -> None:
        self._file = file if file is not None else sys.stderr
        self._batch_bar: tqdm | None = None
        self._file_bars: list[tqdm] = []
        self._states: list[_FileState] = []
        self.file_count = 0

    @property
    def file_states(self) -> list[tuple[str, int, int]]:
        """(name, current iteration, maximum iterations) for every file slot."""
        return [(s.name, s.current, s.maximum) for s in self._states]

    @property
    def visible_files(self) -> list[tuple[str, int, int]]:
        """The files currently shown: the most recent started ones."""
        active = [(s.name, s.current, s.maximum) for s in self._states if s.name]
        return active[-MAX_INDIVIDUAL_PROGRESS_BARS:]

    @property
    def batch_progress(self) -> tuple[int, int] | None:
        """(completed, total) of the batch bar, or None without one."""
        if self._batch_bar is None:
            return None
        return self._batch_bar.n, self._batch_bar.total

    def initialize(self, file_count: int) -> None:
        """Create the bars for a run over ``file_count`` files."""
        self.file_count = file_count
        position = 0
        if file_count > MAX_INDIVIDUAL_PROGRESS_BARS + 1:
            self._batch_bar = tqdm(
                total=file_count,
                position=position,
                leave=False,
                file=self._file,
                bar_format=_BATCH_FORMAT,
                ascii=_BAR_CHARS,
            )
            position += 1

        for offset in range(min(file_count, MAX_INDIVIDUAL_PROGRESS_BARS)):
            self._file_bars.append(
                tqdm(
                    total=0,
                    position=position + offset,
                    leave=False,
                    file=self._file,
                    bar_format=_file_bar_format(""),
                    ascii=_BAR_CHARS,
                )
            )

    def start_file(self, index: int, path, iterations: int) -> None:
        """Start showing the file at ``index`` with ``iterations`` steps to go."""
        while len(self._states) <= index:
            self._states.append(_FileState())
        self._states[index] = _FileState(Path(path).name, 0, iterations)
        self._update_bars()

    def update_iteration(self, file_index: int, iteration: int, elapsed: timedelta | float) -> None:
        """Record the iteration reached by a file."""
        if 0 <= file_index < len(self._states):
            self._states[file_index].current = iteration
        self._update_bars()

    def complete_file(self, index: int, elapsed: timedelta | float) -> None:
        """Mark a file as done and advance the batch bar."""
        if self._batch_bar is not None:
            self._batch_bar.update(1)
        if 0 <= index < len(self._states):
            state = self._states[index]
            state.name = f"✓ {state.name}"
            state.current = state.maximum
        self._update_bars()

    def finish(self) -> None:
        """Remove every bar from the display."""
        if self._batch_bar is not None:
            self._batch_bar.set_description_str(_FINISHED_MESSAGE, refresh=False)
            self._batch_bar.close()
        for bar in self._file_bars:
            bar.close()

    def _update_bars(self) -> None:
        visible = self.visible_files
        for bar, (name, current, maximum) in zip(self._file_bars, visible):
            width = len(str(maximum))
            bar.total = maximum
            bar.n = current
            bar.bar_format = _file_bar_format(name)
            bar.set_description_str(f"{current:>{width}}/{maximum}", refresh=False)
            bar.refresh()
        for bar in self._file_bars[len(visible):]:
            bar.total = 0
            bar.n = 0
            bar.bar_format = _file_bar_format("")
            bar.set_description_str("", refresh=False)
            bar.refresh()