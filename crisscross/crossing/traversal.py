"""Walk the tiles a straight segment passes through.

This is the usual grid walk (DDA, after Amanatides & Woo): from the start tile,
repeatedly step into whichever neighbour the segment reaches first. Each visited
tile is reported together with the segment parameters at which the segment
enters and leaves it, so callers can sample a point strictly inside every tile.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from typing import NamedTuple

from crisscross.position.world_coords import WorldCoords, check_tile_size, split_axis
from crisscross.precision import PRODUCTION_PRECISION, Precision

__all__ = ["TileStep", "traverse_tiles"]


class TileStep(NamedTuple):
    """A tile touched by a segment.

    Attributes:
        tile: signed ``(x, y)`` tile index
        t_enter: segment parameter where the segment enters the tile
        t_exit: segment parameter where the segment leaves the tile
    """

    tile: tuple[int, int]
    t_enter: float
    t_exit: float

    @property
    def t_mid(self) -> float:
        """Parameter halfway along the chord through this tile."""
        return 0.5 * (self.t_enter + self.t_exit)


def _axis_setup(start: float, delta: float, index: int, tile_size: float):
    if delta > 0:
        boundary = (index + 1) * tile_size
        return 1, (boundary - start) / delta, tile_size / delta
    if delta < 0:
        boundary = index * tile_size
        return -1, (boundary - start) / delta, -tile_size / delta
    return 0, math.inf, math.inf


def traverse_tiles(
    start: WorldCoords,
    end: WorldCoords,
    tile_size: float,
    precision: Precision = PRODUCTION_PRECISION,
    max_steps: int | None = None,
) -> Iterator[TileStep]:
    """Yield every tile the segment from ``start`` to ``end`` passes through, in order.

    Args:
        start: segment start in world coordinates
        end: segment end in world coordinates
        tile_size: edge length of a tile
        precision: precision used to assign the end points to tiles, so the walk
            agrees with ``WorldCoords.to_signed_tile_position``
        max_steps: stop after this many tiles; ``None`` walks the whole segment

    Notes:
        When the segment passes exactly through a tile corner both indices change in
        a single step and the two side tiles are not reported.
        A zero-length segment yields its single tile with ``t_enter == t_exit == 0``.
    """
    tile_size = check_tile_size(tile_size)
    ix, _ = split_axis(start.x, tile_size, precision)
    iy, _ = split_axis(start.y, tile_size, precision)
    end_ix, _ = split_axis(end.x, tile_size, precision)
    end_iy, _ = split_axis(end.y, tile_size, precision)

    step_x, t_max_x, t_delta_x = _axis_setup(start.x, end.x - start.x, ix, tile_size)
    step_y, t_max_y, t_delta_y = _axis_setup(start.y, end.y - start.y, iy, tile_size)
    remaining_x = abs(end_ix - ix)
    remaining_y = abs(end_iy - iy)

    if start == end:
        yield TileStep((ix, iy), 0.0, 0.0)
        return

    t = 0.0
    emitted = 0
    while remaining_x or remaining_y:
        if max_steps is not None and emitted >= max_steps:
            return
        move_x = remaining_x and (not remaining_y or t_max_x <= t_max_y)
        move_y = remaining_y and (not remaining_x or t_max_y <= t_max_x)
        t_next = min(t_max_x if move_x else t_max_y, 1.0)
        t_next = max(t_next, t)
        yield TileStep((ix, iy), t, t_next)
        emitted += 1

        if move_x:
            ix += step_x
            t_max_x += t_delta_x
            remaining_x -= 1
        if move_y:
            iy += step_y
            t_max_y += t_delta_y
            remaining_y -= 1
        t = t_next

    if max_steps is None or emitted < max_steps:
        yield TileStep((ix, iy), t, 1.0)
