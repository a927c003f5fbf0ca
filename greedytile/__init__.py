"""Building blocks for random greedy pixel pattern generation: tiles, grid state and image export."""

__version__ = "0.1.5"