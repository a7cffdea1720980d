"""Boundary search along straight paths over the tile grid.

- traverse_tiles: the tiles a segment passes through, in order
- find_crossing: bisect between a known valid and a known invalid point
- find_first_crossing: walk a segment tile by tile, then bisect the first transition
- find_crossing_along_path: the same over a polyline
"""

from crisscross.crossing.search import (
    DEFAULT_EPSILON,
    DEFAULT_MAX_ITERATIONS,
    BracketOutcome,
    Crossing,
    SearchConfig,
    SearchResult,
    find_crossing,
    find_crossing_along_path,
    find_first_crossing,
)
from crisscross.crossing.traversal import TileStep, traverse_tiles

__all__ = [
    "DEFAULT_EPSILON",
    "DEFAULT_MAX_ITERATIONS",
    "BracketOutcome",
    "Crossing",
    "SearchConfig",
    "SearchResult",
    "TileStep",
    "find_crossing",
    "find_crossing_along_path",
    "find_first_crossing",
    "traverse_tiles",
]
