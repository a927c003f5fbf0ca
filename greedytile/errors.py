"""Error types and context enrichment for algorithm operations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


class AlgorithmError(Exception):
    """Base class for every error raised by the algorithm."""

    def __str__(self) -> str:
        return self._describe()

    def _describe(self) -> str:
        return super().__str__()


class ImageLoadError(AlgorithmError):
    """A source image could not be loaded."""

    def __init__(self, path: str | Path, source: BaseException) -> None:
        super().__init__(path, source)
        self.path = Path(path)
        self.source = source
        self.__cause__ = source

    def _describe(self) -> str:
        return f"Failed to load image '{self.path}': {self.source}"


class InvalidSourceDataError(AlgorithmError):
    """Source data does not meet the algorithm's requirements."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason

    def _describe(self) -> str:
        return f"Invalid source data: {self.reason}"


class NoValidPositionsError(AlgorithmError):
    """No grid position is available for selection."""

    def __init__(self, iteration: int, grid_dimensions: tuple[int, int]) -> None:
        super().__init__(iteration, grid_dimensions)
        self.iteration = iteration
        self.grid_dimensions = tuple(grid_dimensions)

    def _describe(self) -> str:
        rows, cols = self.grid_dimensions
        return (
            f"No valid positions found at iteration {self.iteration} "
            f"(grid size {rows}x{cols})"
        )


class InvalidParameterError(AlgorithmError):
    """A parameter failed validation."""

    def __init__(self, parameter: str, value: str, reason: str) -> None:
        super().__init__(parameter, value, reason)
        self.parameter = parameter
        self.value = value
        self.reason = reason

    def _describe(self) -> str:
        return f"Invalid parameter '{self.parameter}' = '{self.value}': {self.reason}"


class InvalidTileIndexError(AlgorithmError):
    """A tile index lies outside the available tile set."""

    def __init__(self, index: int, max_tiles: int) -> None:
        super().__init__(index, max_tiles)
        self.index = index
        self.max_tiles = max_tiles

    def _describe(self) -> str:
        return f"Tile index {self.index} is out of bounds (max: {self.max_tiles})"


class ImageExportError(AlgorithmError):
    """A generated image could not be written."""

    def __init__(self, path: str | Path, source: BaseException) -> None:
        super().__init__(path, source)
        self.path = Path(path)
        self.source = source
        self.__cause__ = source

    def _describe(self) -> str:
        return f"Failed to export image to '{self.path}': {self.source}"


class FileSystemError(AlgorithmError):
    """A file system operation failed."""

    def __init__(self, path: str | Path, operation: str, source: BaseException) -> None:
        super().__init__(path, operation, source)
        self.path = Path(path)
        self.operation = operation
        self.source = source
        self.__cause__ = source

    def _describe(self) -> str:
        return (
            f"File system error during {self.operation} on '{self.path}': {self.source}"
        )


class ComputationError(AlgorithmError):
    """A numerical computation produced an invalid result."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(operation, reason)
        self.operation = operation
        self.reason = reason

    def _describe(self) -> str:
        return f"Computation error in {self.operation}: {self.reason}"


@dataclass(frozen=True)
class ErrorContext:
    """Algorithm state that can enrich an error."""

    iteration: int | None = None
    position: tuple[int, int] | None = None
    grid_position: tuple[int, int] | None = None
    operation: str | None = None


_UNKNOWN_PATH = Path("<unknown>")


def _as_algorithm_error(error: BaseException) -> AlgorithmError:
    if isinstance(error, AlgorithmError):
        return error
    if isinstance(error, OSError):
        return FileSystemError(_UNKNOWN_PATH, "unknown", error)
    raise TypeError(f"cannot convert {type(error).__name__} to AlgorithmError")


def with_context(error: BaseException, context: ErrorContext) -> AlgorithmError:
    """Return ``error`` as an AlgorithmError with ``context`` applied."""
    result = _as_algorithm_error(error)
    if isinstance(result, NoValidPositionsError) and context.iteration is not None:
        result.iteration = context.iteration
    return result


def with_operation(error: BaseException, operation: str) -> AlgorithmError:
    """Return ``error`` as an AlgorithmError with only an operation as context."""
    return with_context(error, ErrorContext(operation=operation))


def invalid_parameter(parameter: str, value: object, reason: object) -> InvalidParameterError:
    """Build an invalid-parameter error."""
    return InvalidParameterError(parameter, str(value), str(reason))


def computation_error(operation: str, reason: object) -> ComputationError:
    """Build a computation error."""
    return ComputationError(operation, str(reason))


def io_error(msg: str) -> InvalidParameterError:
    """Build an error about an unusable path."""
    return InvalidParameterError("path", "", msg)