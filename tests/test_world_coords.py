"""Tests for WorldCoords and the mapping between world space and the tile grid."""

import math

import numpy as np
import pytest

from crisscross.errors import ConfigurationError, OffGridError
from crisscross.position import SignedTilePosition, TilePosition, WorldCoords
from crisscross.position.world_coords import check_tile_size, split_axis
from crisscross.precision import PRODUCTION_PRECISION, TEST_PRECISION


def test_world_coords_initialization():
    """Components are stored as floats."""
    coords = WorldCoords(1, 2)
    assert coords.x == 1.0
    assert isinstance(coords.x, float)
    x, y = coords
    assert (x, y) == (1.0, 2.0)


@pytest.mark.parametrize("x, y", [(math.inf, 0.0), (0.0, -math.inf), (math.nan, 1.0)])
def test_world_coords_must_be_finite(x, y):
    """Non-finite coordinates are rejected."""
    with pytest.raises(ValueError, match="finite"):
        WorldCoords(x, y)


def test_floor_division_for_negative_coordinates():
    """Negative coordinates land in negative tiles with a non-negative offset."""
    position = WorldCoords(-0.5, 2.25).to_signed_tile_position(1.0)
    assert position == SignedTilePosition(-1, 2, 0.5, 0.25)

    position = WorldCoords(5.0, -3.0).to_signed_tile_position(2.0)
    assert position == SignedTilePosition(2, -2, 1.0, 1.0)


def test_to_tile_position():
    """Points at non-negative coordinates map onto the grid."""
    position = WorldCoords(3.75, 0.5).to_tile_position(0.5)
    assert position == TilePosition(7, 1, 0.25, 0.0)


def test_to_tile_position_off_grid():
    """Points left of or below the grid cannot become TilePositions."""
    with pytest.raises(OffGridError):
        WorldCoords(-0.1, 3.0).to_tile_position(1.0)
    with pytest.raises(OffGridError):
        WorldCoords(3.0, -5.0).to_tile_position(1.0)


def test_offset_rounding_up_to_tile_size_carries():
    """An offset that rounds onto the tile edge moves into the next tile."""
    position = WorldCoords(0.9999999999, 0.0).to_signed_tile_position(1.0)
    assert position.x == 1
    assert position.rel_x == 0.0

    position = WorldCoords(7.0, 0.0).to_signed_tile_position(0.1)
    assert position.x == 70
    assert position.rel_x == 0.0


def test_precision_is_applied():
    """The requested precision is used for the offsets."""
    position = WorldCoords(1.23456, 0.0).to_tile_position(1.0, TEST_PRECISION)
    assert position.rel_x == 0.235
    assert position.precision == TEST_PRECISION

    position = WorldCoords(1.23456, 0.0).to_tile_position(1.0)
    assert position.precision == PRODUCTION_PRECISION


def test_from_tile_position():
    """World coordinates are tile * tile_size + rel per axis."""
    coords = WorldCoords.from_tile_position(TilePosition(2, 3, 0.5, 0.25), 2.0)
    assert coords == WorldCoords(4.5, 6.25)

    coords = SignedTilePosition(-2, 1, 0.5, 0.0).to_world(1.0)
    assert coords == WorldCoords(-1.5, 1.0)


@pytest.mark.parametrize(
    "position, tile_size",
    [
        (TilePosition(5, 7, 0.25, 0.75), 1.0),
        (TilePosition(0, 0, 0.0, 0.0), 1.0),
        (TilePosition(3, 4, 0.1, 0.2), 0.3),
        (TilePosition(2, 0, 0.0, 0.15), 0.3),
        (TilePosition(1000, 20, 12.5, 31.0), 32.0),
        (TilePosition(123456789, 42, 0.5, 0.999), 1.0),
    ],
)
def test_round_trip(position, tile_size):
    """TilePosition -> WorldCoords -> TilePosition reproduces the original."""
    coords = WorldCoords.from_tile_position(position, tile_size)
    assert coords.to_tile_position(tile_size) == position


@pytest.mark.parametrize("tile_size", [0, -1.0, math.inf, math.nan, True, "1"])
def test_invalid_tile_size(tile_size):
    """Tile sizes must be positive finite numbers."""
    with pytest.raises(ConfigurationError, match="tile_size"):
        WorldCoords(1.0, 1.0).to_signed_tile_position(tile_size)


def test_check_tile_size_accepts_numpy_scalars():
    """Numpy scalars are accepted and converted to float."""
    assert check_tile_size(np.float32(0.5)) == 0.5
    assert isinstance(check_tile_size(np.int64(2)), float)


def test_split_axis():
    """split_axis returns the floor index and the rounded remainder."""
    assert split_axis(-2.5, 2.0, PRODUCTION_PRECISION) == (-2, 1.5)
    assert split_axis(4.0, 2.0, PRODUCTION_PRECISION) == (2, 0.0)


def test_lerp():
    """Interpolation hits both ends exactly."""
    a = WorldCoords(0.1, 0.7)
    b = WorldCoords(9.3, -4.2)
    assert a.lerp(b, 0.0) == a
    assert a.lerp(b, 1.0) == b
    mid = a.lerp(b, 0.5)
    assert mid.x == pytest.approx(4.7)
    assert mid.y == pytest.approx(-1.75)


def test_distance_to():
    """Euclidean distance between two points."""
    assert WorldCoords(0.0, 0.0).distance_to(WorldCoords(3.0, 4.0)) == 5.0


def test_array_interop():
    """Conversion to and from numpy arrays."""
    coords = WorldCoords(1.5, -2.0)
    np.testing.assert_array_equal(coords.to_array(), [1.5, -2.0])
    assert WorldCoords.from_array(np.array([1.5, -2.0])) == coords
    assert WorldCoords.from_array([3, 4]) == WorldCoords(3.0, 4.0)

    with pytest.raises(ValueError, match="shape"):
        WorldCoords.from_array([1.0, 2.0, 3.0])
