"""crisscross: exact tile-grid coordinates and boundary search.

Core Objects: WorldCoords, TilePosition, SignedTilePosition, Crossing
"""

__version__ = "0.1.0"

from crisscross.crossing import (
    BracketOutcome,
    Crossing,
    SearchConfig,
    SearchResult,
    TileStep,
    find_crossing,
    find_crossing_along_path,
    find_first_crossing,
    traverse_tiles,
)
from crisscross.position import (
    SignedTilePosition,
    TilePosition,
    WorldCoords,
    distance_global,
    distance_relative,
    is_same_tile,
)
from crisscross.precision import PRODUCTION_PRECISION, TEST_PRECISION, Precision

__all__ = [
    "PRODUCTION_PRECISION",
    "TEST_PRECISION",
    "BracketOutcome",
    "Crossing",
    "Precision",
    "SearchConfig",
    "SearchResult",
    "SignedTilePosition",
    "TilePosition",
    "TileStep",
    "WorldCoords",
    "distance_global",
    "distance_relative",
    "find_crossing",
    "find_crossing_along_path",
    "find_first_crossing",
    "is_same_tile",
    "traverse_tiles",
]
