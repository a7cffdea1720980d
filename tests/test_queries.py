"""Tests for distance and same-tile queries."""

import math

import pytest

from crisscross.errors import ConfigurationError
from crisscross.position import (
    SignedTilePosition,
    TilePosition,
    WorldCoords,
    distance_global,
    distance_relative,
    is_same_tile,
)

POSITIONS = [
    TilePosition(1, 3, 0.0, 0.3),
    TilePosition(4, 8, 0.1, 0.8),
    TilePosition(0, 0, 0.0, 0.0),
    TilePosition(12, 2, 0.75, 0.5),
]


def test_distance_global():
    """Distance between world coordinates."""
    a = TilePosition.from_tuple(((1, 0.0), (3, 0.3)))
    b = TilePosition.from_tuple(((4, 0.1), (8, 0.8)))
    assert round(distance_global(a, b, 1.0), 3) == 6.313

    assert distance_global(TilePosition(0, 0), TilePosition(3, 4), 2.0) == 10.0


@pytest.mark.parametrize("a", POSITIONS)
@pytest.mark.parametrize("b", POSITIONS)
@pytest.mark.parametrize("tile_size", [0.5, 1.0, 3.0])
def test_distance_global_symmetry(a, b, tile_size):
    """distance_global(a, b) equals distance_global(b, a) and matches world space."""
    assert distance_global(a, b, tile_size) == distance_global(b, a, tile_size)
    expected = a.to_world(tile_size).distance_to(b.to_world(tile_size))
    assert distance_global(a, b, tile_size) == pytest.approx(expected)


def test_distance_global_far_from_origin():
    """Index differences are exact even for huge indices."""
    a = TilePosition(2**62, 0, 0.5, 0.0)
    b = TilePosition(2**62 + 1, 0, 0.25, 0.0)
    assert distance_global(a, b, 1.0) == 0.75


def test_distance_global_mixed_types():
    """Signed and unsigned positions can be measured against each other."""
    a = SignedTilePosition(-1, 0, 0.5, 0.0)
    b = TilePosition(1, 0, 0.5, 0.0)
    assert distance_global(a, b, 2.0) == 4.0


def test_distance_global_invalid_tile_size():
    """The tile size is validated."""
    with pytest.raises(ConfigurationError):
        distance_global(POSITIONS[0], POSITIONS[1], 0.0)


def test_distance_relative():
    """Distance in tile units of index + rel."""
    a = TilePosition(1, 3, 0.0, 0.3)
    b = TilePosition(4, 8, 0.1, 0.8)
    assert distance_relative(a, b) == pytest.approx(math.hypot(3.1, 5.5))
    assert distance_relative(a, b) == distance_relative(b, a)
    assert distance_relative(a, a) == 0.0


def test_distance_relative_agrees_with_unit_tiles():
    """With a tile size of 1 both distances coincide."""
    for a in POSITIONS:
        for b in POSITIONS:
            assert distance_relative(a, b) == pytest.approx(distance_global(a, b, 1.0))


def test_is_same_tile():
    """Same tile means equal indices; offsets are ignored."""
    for position in POSITIONS:
        assert is_same_tile(position, position)

    assert is_same_tile(TilePosition(2, 3, 0.1, 0.1), TilePosition(2, 3, 0.9, 0.9))
    assert is_same_tile(TilePosition(2, 3, 0.1, 0.1), SignedTilePosition(2, 3, 0.9, 0.9))
    assert not is_same_tile(TilePosition(2, 3), TilePosition(3, 2))


def test_same_world_point_different_tiles():
    """Denormalized offsets make is_same_tile a purely index-based check."""
    a = SignedTilePosition(1, 0, -0.5, 0.0)
    b = SignedTilePosition(0, 0, 0.5, 0.0)
    assert a.to_world(1.0) == b.to_world(1.0) == WorldCoords(0.5, 0.0)
    assert not is_same_tile(a, b)
    assert is_same_tile(a.normalized(1.0), b)
