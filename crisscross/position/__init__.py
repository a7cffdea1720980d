"""Coordinate types for a tile grid laid over continuous world space.

- WorldCoords: a continuous (x, y) point in world units
- TilePosition: an unsigned tile index plus an offset inside that tile
- SignedTilePosition: the signed counterpart, used for deltas and off-grid results

Conversions go through a tile size supplied by the caller; the decimal
precision of offsets is carried by each position.
"""

from crisscross.position.queries import (
    distance_global,
    distance_relative,
    is_same_tile,
)
from crisscross.position.tile_position import (
    I64_BOUNDS,
    U64_BOUNDS,
    SignedTilePosition,
    TilePosition,
)
from crisscross.position.world_coords import WorldCoords, check_tile_size

__all__ = [
    "I64_BOUNDS",
    "U64_BOUNDS",
    "SignedTilePosition",
    "TilePosition",
    "WorldCoords",
    "check_tile_size",
    "distance_global",
    "distance_relative",
    "is_same_tile",
]
