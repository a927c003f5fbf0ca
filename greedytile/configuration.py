"""Algorithm constants and runtime configuration defaults."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    """Tunable parameters of the generator, checked for consistency on creation."""

    adjacency_candidates_considered: int = 30
    candidates_considered: int = 15
    tile_size: int = 3
    pattern_influence_distance: int = 6
    grid_extension_radius: int = 6
    max_grid_dimension: int = 10_000
    base_removal_radius: int = 0
    max_removal_radius: int = 6
    adjacency_levels: int = 2
    max_individual_progress_bars: int = 5
    progress_bar_width: int = 50
    default_seed: int = 42
    default_max_iterations: int = 1000
    output_suffix: str = "_result"
    gif_frame_delay_ms: int = 5
    viewer_min_frame_delay_ms: int = 50

    def __post_init__(self) -> None:
        if self.tile_size < 1 or self.tile_size % 2 == 0:
            raise ValueError(
                f"tile_size must be a positive odd number, got {self.tile_size}"
            )
        if self.base_removal_radius < 0:
            raise ValueError("base_removal_radius must not be negative")
        if self.base_removal_radius > self.max_removal_radius:
            raise ValueError(
                "base_removal_radius must not exceed max_removal_radius"
            )
        if self.max_grid_dimension < 1:
            raise ValueError("max_grid_dimension must be positive")
        if self.gif_frame_delay_ms < 1:
            raise ValueError("gif_frame_delay_ms must be positive")
        if self.viewer_min_frame_delay_ms < 1:
            raise ValueError("viewer_min_frame_delay_ms must be positive")


DEFAULTS = Settings()

ADJACENCY_CANDIDATES_CONSIDERED = DEFAULTS.adjacency_candidates_considered
CANDIDATES_CONSIDERED = DEFAULTS.candidates_considered
TILE_SIZE = DEFAULTS.tile_size
PATTERN_INFLUENCE_DISTANCE = DEFAULTS.pattern_influence_distance
GRID_EXTENSION_RADIUS = DEFAULTS.grid_extension_radius
MAX_GRID_DIMENSION = DEFAULTS.max_grid_dimension
BASE_REMOVAL_RADIUS = DEFAULTS.base_removal_radius
MAX_REMOVAL_RADIUS = DEFAULTS.max_removal_radius
ADJACENCY_LEVELS = DEFAULTS.adjacency_levels
MAX_INDIVIDUAL_PROGRESS_BARS = DEFAULTS.max_individual_progress_bars
PROGRESS_BAR_WIDTH = DEFAULTS.progress_bar_width
DEFAULT_SEED = DEFAULTS.default_seed
DEFAULT_MAX_ITERATIONS = DEFAULTS.default_max_iterations
OUTPUT_SUFFIX = DEFAULTS.output_suffix
GIF_FRAME_DELAY_MS = DEFAULTS.gif_frame_delay_ms
VIEWER_MIN_FRAME_DELAY_MS = DEFAULTS.viewer_min_frame_delay_ms