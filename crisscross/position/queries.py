"""Distance and same-tile queries over tile positions."""

from __future__ import annotations

import math

from crisscross.position.tile_position import SignedTilePosition, TilePosition
from crisscross.position.world_coords import check_tile_size

__all__ = ["distance_global", "distance_relative", "is_same_tile"]

AnyTilePosition = TilePosition | SignedTilePosition


def distance_global(a: AnyTilePosition, b: AnyTilePosition, tile_size: float) -> float:
    """Euclidean distance between two positions in world units.

    Index differences are taken on exact integers before scaling, so the result
    does not degrade for positions far from the origin.

    Args:
        a: first position
        b: second position
        tile_size: edge length of a tile in world units

    Returns:
        the distance between the world coordinates of ``a`` and ``b``
    """
    tile_size = check_tile_size(tile_size)
    dx = (b.x - a.x) * tile_size + (b.rel_x - a.rel_x)
    dy = (b.y - a.y) * tile_size + (b.rel_y - a.rel_y)
    return math.hypot(dx, dy)


def distance_relative(a: AnyTilePosition, b: AnyTilePosition) -> float:
    """Euclidean distance of ``index + rel`` per axis, in tile units.

    Only meaningful when both positions share the same grid and the offsets are
    expressed in tile units; use ``distance_global`` otherwise.
    """
    dx = (b.x - a.x) + (b.rel_x - a.rel_x)
    dy = (b.y - a.y) + (b.rel_y - a.rel_y)
    return math.hypot(dx, dy)


def is_same_tile(a: AnyTilePosition, b: AnyTilePosition) -> bool:
    """Return whether both positions lie in the same tile, ignoring offsets."""
    return a.x == b.x and a.y == b.y
