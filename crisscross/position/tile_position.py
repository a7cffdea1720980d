"""Tile positions: a grid cell index plus an offset inside that cell.

Two flavours exist:

- ``TilePosition`` has unsigned 64-bit indices and is the canonical on-grid form
- ``SignedTilePosition`` has signed 64-bit indices and holds deltas between
  positions, or intermediate results that may leave the grid

Relative offsets are measured from the lower left corner of the tile and are
rounded to the position's ``Precision`` when the position is built. Arithmetic
never renormalizes on its own; call ``normalized(tile_size)`` to fold offsets
that spilled over a tile edge back into the index.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, field

import numpy as np

from crisscross.errors import CoordinateOverflowError, NormalizationError, OffGridError
from crisscross.position.world_coords import WorldCoords, check_tile_size, split_axis
from crisscross.precision import PRODUCTION_PRECISION, TEST_PRECISION, Precision

__all__ = ["I64_BOUNDS", "U64_BOUNDS", "SignedTilePosition", "TilePosition"]

U64_BOUNDS = (0, 2**64 - 1)
I64_BOUNDS = (-(2**63), 2**63 - 1)

TupleForm = tuple[tuple[int, float], tuple[int, float]]


def _check_index(value, bounds: tuple[int, int]) -> int:
    try:
        value = operator.index(value)
    except TypeError:
        raise TypeError(
            f"Tile indices must be integers, got {type(value).__name__}."
        ) from None
    if not bounds[0] <= value <= bounds[1]:
        raise CoordinateOverflowError(value, bounds)
    return value


class _PositionMixin:
    """Behaviour shared by both position types."""

    __slots__ = ()

    def _round_offsets(self):
        object.__setattr__(self, "rel_x", self.precision.round(float(self.rel_x)))
        object.__setattr__(self, "rel_y", self.precision.round(float(self.rel_y)))

    def __eq__(self, other):  # noqa: D105
        if type(other) is not type(self):
            return NotImplemented
        precision = self.precision.coarser(other.precision)
        return (
            self.x == other.x
            and self.y == other.y
            and precision.isclose(self.rel_x, other.rel_x)
            and precision.isclose(self.rel_y, other.rel_y)
        )

    def __hash__(self):  # noqa: D105
        # offsets compare with a tolerance, so only the indices take part
        return hash((type(self).__name__, self.x, self.y))

    def __repr__(self):  # noqa: D105
        p = self.precision
        text = (
            f"{type(self).__name__}(x={self.x}, y={self.y}, "
            f"rel_x={p.format(self.rel_x)}, rel_y={p.format(self.rel_y)}"
        )
        if p != PRODUCTION_PRECISION:
            text += f", precision={p!r}"
        return text + ")"

    def __str__(self):  # noqa: D105
        p = self.precision
        return (
            f"(({self.x}, {p.format(self.rel_x)}), ({self.y}, {p.format(self.rel_y)}))"
        )

    @classmethod
    def from_tuple(cls, value: TupleForm, precision: Precision = PRODUCTION_PRECISION):
        """Build a position from the ``((x, rel_x), (y, rel_y))`` form used by ``str()``."""
        (x, rel_x), (y, rel_y) = value
        return cls(x, y, rel_x, rel_y, precision=precision)

    @classmethod
    def with_test_precision(cls, x: int, y: int, rel_x: float = 0.0, rel_y: float = 0.0):
        """Build a position rounded to ``TEST_PRECISION``."""
        return cls(x, y, rel_x, rel_y, precision=TEST_PRECISION)

    @classmethod
    def with_production_precision(
        cls, x: int, y: int, rel_x: float = 0.0, rel_y: float = 0.0
    ):
        """Build a position rounded to ``PRODUCTION_PRECISION``."""
        return cls(x, y, rel_x, rel_y, precision=PRODUCTION_PRECISION)

    def effective_coordinates(self) -> tuple[np.longdouble, np.longdouble]:
        """Return ``index + rel`` per axis in tile units, evaluated in extended precision."""
        return (
            np.longdouble(self.x) + np.longdouble(self.rel_x),
            np.longdouble(self.y) + np.longdouble(self.rel_y),
        )

    def to_world(self, tile_size: float) -> WorldCoords:
        """Convert to world coordinates."""
        return WorldCoords.from_tile_position(self, tile_size)


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class SignedTilePosition(_PositionMixin):
    """A tile position with signed indices; also used as a delta between positions.

    Attributes:
        x: signed tile column
        y: signed tile row
        rel_x: offset from the tile's left edge, not necessarily within the tile
        rel_y: offset from the tile's bottom edge, not necessarily within the tile
        precision: decimal precision the offsets are rounded to
    """

    x: int
    y: int
    rel_x: float = 0.0
    rel_y: float = 0.0
    precision: Precision = field(default=PRODUCTION_PRECISION)

    def __post_init__(self):  # noqa: D105
        object.__setattr__(self, "x", _check_index(self.x, I64_BOUNDS))
        object.__setattr__(self, "y", _check_index(self.y, I64_BOUNDS))
        self._round_offsets()

    def normalized(self, tile_size: float) -> SignedTilePosition:
        """Fold offsets that spilled over a tile edge back into the tile index.

        The result has ``0 <= rel < tile_size`` on both axes and denotes the same
        world point. At most one tile width of spill is accepted in either direction.

        Raises:
            NormalizationError: if an offset lies outside ``(-2 * tile_size, 2 * tile_size)``
        """
        tile_size = check_tile_size(tile_size)
        band = 2.0 * tile_size
        if not (-band < self.rel_x < band and -band < self.rel_y < band):
            raise NormalizationError(self, tile_size)

        carry_x, rel_x = split_axis(self.rel_x, tile_size, self.precision)
        carry_y, rel_y = split_axis(self.rel_y, tile_size, self.precision)
        return SignedTilePosition(
            self.x + carry_x, self.y + carry_y, rel_x, rel_y, precision=self.precision
        )

    def _off_grid_reason(self) -> str | None:
        eff_x, eff_y = self.effective_coordinates()
        if eff_x < 0 or eff_y < 0:
            return "effective coordinate is negative"
        if self.x < 0 or self.y < 0:
            return "tile index is negative, normalize the position first"
        return None

    def is_on_grid(self) -> bool:
        """Return whether ``to_tile_position()`` would succeed."""
        return self._off_grid_reason() is None

    def to_tile_position(self) -> TilePosition:
        """Narrow to an unsigned ``TilePosition``; offsets are carried over unchanged.

        Raises:
            OffGridError: if ``index + rel`` is negative on either axis, or the index
                itself is negative
        """
        reason = self._off_grid_reason()
        if reason is not None:
            raise OffGridError(self, reason)
        return TilePosition(self.x, self.y, self.rel_x, self.rel_y, precision=self.precision)


@dataclass(frozen=True, slots=True, eq=False, repr=False)
class TilePosition(_PositionMixin):
    """A position on the tile grid.

    Attributes:
        x: tile column, ``0 <= x < 2**64``
        y: tile row, ``0 <= y < 2**64``
        rel_x: offset from the tile's left edge, in world units
        rel_y: offset from the tile's bottom edge, in world units
        precision: decimal precision the offsets are rounded to

    Notes:
        After ``normalized()`` the offsets satisfy ``0 <= rel < tile_size``.
        Positions produced by arithmetic may temporarily violate this.
    """

    x: int
    y: int
    rel_x: float = 0.0
    rel_y: float = 0.0
    precision: Precision = field(default=PRODUCTION_PRECISION)

    def __post_init__(self):  # noqa: D105
        object.__setattr__(self, "x", _check_index(self.x, U64_BOUNDS))
        object.__setattr__(self, "y", _check_index(self.y, U64_BOUNDS))
        self._round_offsets()

    @classmethod
    def from_signed(cls, position: SignedTilePosition) -> TilePosition:
        """Same as ``position.to_tile_position()``."""
        return position.to_tile_position()

    def to_signed(self) -> SignedTilePosition:
        """Widen to a ``SignedTilePosition``."""
        return SignedTilePosition(
            self.x, self.y, self.rel_x, self.rel_y, precision=self.precision
        )

    def subtract(self, other: TilePosition) -> SignedTilePosition:
        """Return the delta ``self - other``; offsets are not renormalized."""
        return SignedTilePosition(
            self.x - other.x,
            self.y - other.y,
            self.rel_x - other.rel_x,
            self.rel_y - other.rel_y,
            precision=self.precision.coarser(other.precision),
        )

    def add(self, delta: SignedTilePosition) -> SignedTilePosition:
        """Return ``self + delta``; offsets are not renormalized."""
        return SignedTilePosition(
            self.x + delta.x,
            self.y + delta.y,
            self.rel_x + delta.rel_x,
            self.rel_y + delta.rel_y,
            precision=self.precision.coarser(delta.precision),
        )

    def __sub__(self, other):  # noqa: D105
        if not isinstance(other, TilePosition):
            return NotImplemented
        return self.subtract(other)

    def __add__(self, other):  # noqa: D105
        if not isinstance(other, SignedTilePosition):
            return NotImplemented
        return self.add(other)

    def normalized(self, tile_size: float) -> TilePosition:
        """Normalize through the signed form and narrow back.

        Raises:
            NormalizationError: if an offset spills over more than one tile width
            OffGridError: if the normalized position lies left of or below the grid
        """
        return self.to_signed().normalized(tile_size).to_tile_position()
