"""Continuous world coordinates and their mapping onto the tile grid.

The grid splits world space into square tiles of edge ``tile_size``. Tile
``(i, j)`` covers ``[i * tile_size, (i + 1) * tile_size)`` on x and the same on y,
so a world coordinate maps to ``floor(x / tile_size)`` and a non-negative
remainder. Floor division (not truncation) is what puts ``x = -0.5`` into tile
``-1`` with offset ``0.5`` instead of tile ``0`` with offset ``-0.5``.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike

from crisscross.errors import ConfigurationError
from crisscross.precision import PRODUCTION_PRECISION, Precision

if TYPE_CHECKING:
    from crisscross.position.tile_position import SignedTilePosition, TilePosition

__all__ = ["WorldCoords", "check_tile_size", "split_axis"]


def check_tile_size(tile_size: float) -> float:
    """Validate a tile size and return it as a float.

    Raises:
        ConfigurationError: if ``tile_size`` is not a positive finite number
    """
    if isinstance(tile_size, bool) or not isinstance(tile_size, int | float | np.number):
        raise ConfigurationError("tile_size", "must be a number")
    tile_size = float(tile_size)
    if not (math.isfinite(tile_size) and tile_size > 0):
        raise ConfigurationError("tile_size", "must be a positive finite number")
    return tile_size


def split_axis(
    coordinate: float, tile_size: float, precision: Precision
) -> tuple[int, float]:
    """Split one world axis into a tile index and a rounded offset within that tile.

    Args:
        coordinate: world coordinate along the axis
        tile_size: edge length of a tile, already validated
        precision: precision the offset is rounded to

    Returns:
        ``(index, rel)`` with ``0 <= rel < tile_size``
    """
    index, rel = divmod(coordinate, tile_size)
    index = int(index)
    rel = precision.round(rel)
    if rel >= tile_size:
        # the remainder rounded up onto the next tile boundary
        index += 1
        rel = precision.round(rel - tile_size)
    return index, rel


@dataclass(frozen=True, slots=True)
class WorldCoords:
    """A point in continuous world space.

    Attributes:
        x: world x coordinate
        y: world y coordinate
    """

    x: float
    y: float

    def __post_init__(self):  # noqa: D105
        x, y = float(self.x), float(self.y)
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"World coordinates must be finite, got ({x}, {y}).")
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    def __iter__(self) -> Iterator[float]:  # noqa: D105
        yield self.x
        yield self.y

    @classmethod
    def from_tile_position(
        cls, position: TilePosition | SignedTilePosition, tile_size: float
    ) -> WorldCoords:
        """Convert a tile position to world space: ``tile * tile_size + rel`` per axis."""
        tile_size = check_tile_size(tile_size)
        return cls(
            position.x * tile_size + position.rel_x,
            position.y * tile_size + position.rel_y,
        )

    @classmethod
    def from_array(cls, array: ArrayLike) -> WorldCoords:
        """Build world coordinates from an array-like of length 2."""
        array = np.asarray(array, dtype=float)
        if array.shape != (2,):
            raise ValueError(f"Expected an array of shape (2,), got {array.shape}.")
        return cls(array[0], array[1])

    def to_array(self) -> np.ndarray:
        """Return the coordinates as a float numpy array ``[x, y]``."""
        return np.array([self.x, self.y], dtype=float)

    def to_signed_tile_position(
        self, tile_size: float, precision: Precision = PRODUCTION_PRECISION
    ) -> SignedTilePosition:
        """Map onto the grid without checking that the tile lies on the grid."""
        from crisscross.position.tile_position import SignedTilePosition

        tile_size = check_tile_size(tile_size)
        x, rel_x = split_axis(self.x, tile_size, precision)
        y, rel_y = split_axis(self.y, tile_size, precision)
        return SignedTilePosition(x, y, rel_x, rel_y, precision=precision)

    def to_tile_position(
        self, tile_size: float, precision: Precision = PRODUCTION_PRECISION
    ) -> TilePosition:
        """Map onto the grid.

        Raises:
            OffGridError: if the point lies at negative world coordinates
        """
        return self.to_signed_tile_position(tile_size, precision).to_tile_position()

    def lerp(self, other: WorldCoords, t: float) -> WorldCoords:
        """Linear interpolation; ``t=0`` gives ``self`` and ``t=1`` gives ``other`` exactly."""
        s = 1.0 - t
        return WorldCoords(s * self.x + t * other.x, s * self.y + t * other.y)

    def distance_to(self, other: WorldCoords) -> float:
        """Euclidean distance to ``other``."""
        return math.hypot(other.x - self.x, other.y - self.y)
