"""Prefill images: predetermined tile placements and protected positions."""

from __future__ import annotations

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from PIL import Image

from greedytile.errors import ImageLoadError, InvalidSourceDataError
from greedytile.grid import BoundingBox


@dataclass(frozen=True)
class PrefillPlacement:
    """One predetermined placement: world ``(row, col)`` and a 1-based tile reference."""

    world_position: tuple[int, int]
    tile_reference: int


@dataclass
class PrefillData:
    """Queue of prefill placements and the positions they protect."""

    placement_queue: deque[PrefillPlacement]
    protected_positions: dict[tuple[int, int], int]
    bounds: BoundingBox = field(default_factory=lambda: BoundingBox((0, 0), (0, 0)))

    @classmethod
    def from_png(
        cls,
        path: str | Path,
        color_mapping: Sequence[Sequence[int]],
    ) -> PrefillData:
        """Read a prefill image centred on the origin.

        Only pixels whose RGBA colour is in ``color_mapping`` are queued; every
        other pixel is treated as empty.
        """
        path = Path(path)
        try:
            with Image.open(path) as img:
                rgba = img.convert("RGBA")
        except (OSError, ValueError) as exc:
            raise ImageLoadError(path, exc) from exc

        color_to_tile = {tuple(color): idx + 1 for idx, color in enumerate(color_mapping)}

        width, height = rgba.size
        offset_x, offset_y = width // 2, height // 2
        pixels = rgba.load()

        queue: deque[PrefillPlacement] = deque()
        protected: dict[tuple[int, int], int] = {}
        for y in range(height):
            for x in range(width):
                tile_ref = color_to_tile.get(tuple(pixels[x, y]))
                if tile_ref is None:
                    continue
                world_pos = (y - offset_y, x - offset_x)
                queue.append(PrefillPlacement(world_pos, tile_ref))
                protected[world_pos] = tile_ref

        if not queue:
            raise InvalidSourceDataError(
                "Prefill image contains no colors from source palette"
            )

        rows = [p.world_position[0] for p in queue]
        cols = [p.world_position[1] for p in queue]
        bounds = BoundingBox(min=(min(rows), min(cols)), max=(max(rows), max(cols)))
        return cls(queue, protected, bounds)

    def is_protected(self, world_pos: Sequence[int]) -> int | None:
        """Tile reference that must stay at ``world_pos``, or None."""
        return self.protected_positions.get((world_pos[0], world_pos[1]))

    def next_placement(self) -> PrefillPlacement | None:
        """Take the next placement from the front of the queue, or None."""
        return self.placement_queue.popleft() if self.placement_queue else None

    def queue_replacement(self, placement: PrefillPlacement) -> None:
        """Put a placement back at the front of the queue."""
        self.placement_queue.appendleft(placement)