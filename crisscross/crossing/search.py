"""Locate where a straight path stops satisfying a validity predicate.

The search works on the segment parameter ``t`` in ``[0, 1]``: points are
interpolated in world space and mapped back onto the grid before the predicate
sees them. Points that fall off the grid (negative tile coordinates) are
invalid without consulting the predicate.

Invariant kept at every bisection step: the ``valid`` end of the bracket satisfies
the predicate and the ``invalid`` end does not. A sample on which the predicate
holds counts as valid, so a boundary point belongs to the valid side. When the
inputs bracket no transition, both ends are returned as given and only the
``BracketOutcome`` tells the cases apart.
"""

from __future__ import annotations

import enum
import math
import warnings
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from itertools import pairwise
from typing import NamedTuple

from crisscross.crisscross_logging import create_module_logger, function_logger
from crisscross.crossing.traversal import traverse_tiles
from crisscross.errors import (
    ConfigurationError,
    NonConvergenceWarning,
    SearchNonConvergenceError,
)
from crisscross.position import (
    SignedTilePosition,
    TilePosition,
    WorldCoords,
    check_tile_size,
)
from crisscross.precision import PRODUCTION_PRECISION, TEST_PRECISION, Precision

__all__ = [
    "DEFAULT_EPSILON",
    "DEFAULT_MAX_ITERATIONS",
    "BracketOutcome",
    "Crossing",
    "SearchConfig",
    "SearchResult",
    "find_crossing",
    "find_crossing_along_path",
    "find_first_crossing",
]

_logger = create_module_logger()

DEFAULT_EPSILON = 1e-4
DEFAULT_MAX_ITERATIONS = 64

Endpoint = TilePosition | SignedTilePosition | WorldCoords
Predicate = Callable[[TilePosition], bool]


@dataclass(frozen=True, slots=True)
class Crossing:
    """The two ends of a bisection bracket.

    Either end is ``None`` when its point lies off the grid.

    Attributes:
        valid: last position seen to satisfy the predicate; for the outcomes without a
            transition, the start of the inspected segment
        invalid: first position seen to fail it; for the outcomes without a
            transition, the end of the inspected segment
    """

    valid: TilePosition | None = None
    invalid: TilePosition | None = None

    def rounded(self, precision: Precision = TEST_PRECISION) -> Crossing:
        """Return a copy with both ends rounded to ``precision``; offsets are not renormalized."""

        def _round(position):
            if position is None:
                return None
            return TilePosition(
                position.x, position.y, position.rel_x, position.rel_y, precision=precision
            )

        return Crossing(_round(self.valid), _round(self.invalid))


class BracketOutcome(enum.Enum):
    """How a search ended.

    - TRANSITION: a valid/invalid pair was found and narrowed
    - ALL_VALID: every sample was valid
    - ALL_INVALID: both ends were invalid
    - INVALID_START: a walk began on an invalid point

    Without a transition ``crossing.valid`` holds the start and ``crossing.invalid``
    the end of the inspected segment, whether or not they satisfy the predicate.
    """

    TRANSITION = "transition"
    ALL_VALID = "all_valid"
    ALL_INVALID = "all_invalid"
    INVALID_START = "invalid_start"


@dataclass(frozen=True, slots=True)
class SearchConfig:
    """Termination and rounding settings of a crossing search.

    Attributes:
        epsilon: target bracket width in world units
        max_iterations: upper bound on bisection steps
        precision: precision of the positions handed to the predicate
    """

    epsilon: float = DEFAULT_EPSILON
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    precision: Precision = field(default=PRODUCTION_PRECISION)

    def __post_init__(self):  # noqa: D105
        if not (math.isfinite(self.epsilon) and self.epsilon > 0):
            raise ConfigurationError("epsilon", "must be a positive finite number")
        if (
            isinstance(self.max_iterations, bool)
            or not isinstance(self.max_iterations, int)
            or self.max_iterations < 1
        ):
            raise ConfigurationError("max_iterations", "must be a positive integer")


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Outcome of a crossing search.

    Attributes:
        crossing: the bracket ends as tile positions
        outcome: how the search ended
        width: final bracket width in world units; for outcomes other than
            TRANSITION this is the length of the inspected segment
        iterations: number of bisection steps taken
        converged: whether the bracket reached ``epsilon``; always True when no
            bracket had to be narrowed
        epsilon: the target width the search ran with
        widths: bracket width before the first step and after every step
        valid_world: world point of the ``valid`` end
        invalid_world: world point of the ``invalid`` end, also when it lies off the grid
    """

    crossing: Crossing
    outcome: BracketOutcome
    width: float
    iterations: int
    converged: bool
    epsilon: float
    widths: tuple[float, ...] = ()
    valid_world: WorldCoords | None = None
    invalid_world: WorldCoords | None = None

    @property
    def found(self) -> bool:
        """Whether a valid/invalid transition was located."""
        return self.outcome is BracketOutcome.TRANSITION

    def raise_for_convergence(self) -> SearchResult:
        """Return self, or raise if the iteration cap stopped the search early.

        Raises:
            SearchNonConvergenceError: if ``converged`` is False
        """
        if not self.converged:
            raise SearchNonConvergenceError(self.width, self.iterations, self.epsilon)
        return self


class _Sample(NamedTuple):
    t: float
    world: WorldCoords
    position: TilePosition | None
    valid: bool


class _Segment:
    """A straight segment in world space together with the predicate evaluated on it."""

    __slots__ = ("end", "is_valid", "length", "precision", "start", "tile_size")

    def __init__(self, start, end, is_valid, tile_size, precision):
        self.start = start
        self.end = end
        self.is_valid = is_valid
        self.tile_size = tile_size
        self.precision = precision
        self.length = start.distance_to(end)

    def sample(self, t: float) -> _Sample:
        world = self.start.lerp(self.end, t)
        signed = world.to_signed_tile_position(self.tile_size, self.precision)
        if not signed.is_on_grid():
            return _Sample(t, world, None, False)
        position = signed.to_tile_position()
        return _Sample(t, world, position, bool(self.is_valid(position)))

    def width(self, a: _Sample, b: _Sample) -> float:
        return abs(b.t - a.t) * self.length


def _to_world(endpoint: Endpoint, tile_size: float) -> WorldCoords:
    if isinstance(endpoint, WorldCoords):
        return endpoint
    if isinstance(endpoint, TilePosition | SignedTilePosition):
        return WorldCoords.from_tile_position(endpoint, tile_size)
    raise TypeError(
        f"Expected a TilePosition, SignedTilePosition or WorldCoords, got {type(endpoint).__name__}."
    )


def _segment(start, end, is_valid, tile_size, config) -> _Segment:
    tile_size = check_tile_size(tile_size)
    return _Segment(
        _to_world(start, tile_size),
        _to_world(end, tile_size),
        is_valid,
        tile_size,
        config.precision,
    )


def _unbracketed(segment, outcome, start: _Sample, end: _Sample, config) -> SearchResult:
    # the bracket is handed back as given; only ``outcome`` says which kind it is
    _logger.debug(f"no transition between {segment.start} and {segment.end}: {outcome.name}")
    return SearchResult(
        crossing=Crossing(valid=start.position, invalid=end.position),
        outcome=outcome,
        width=segment.length,
        iterations=0,
        converged=True,
        epsilon=config.epsilon,
        valid_world=start.world,
        invalid_world=end.world,
    )


def _bisect(
    segment: _Segment, valid: _Sample, invalid: _Sample, config, stacklevel: int
) -> SearchResult:
    width = segment.width(valid, invalid)
    widths = [width]
    iterations = 0
    while width > config.epsilon and iterations < config.max_iterations:
        mid = segment.sample(0.5 * (valid.t + invalid.t))
        if mid.valid:
            valid = mid
        else:
            invalid = mid
        iterations += 1
        width = segment.width(valid, invalid)
        widths.append(width)

    converged = width <= config.epsilon
    if converged:
        _logger.debug(
            f"bracket narrowed to {width} after {iterations} iterations: "
            f"{valid.position} / {invalid.position}"
        )
    else:
        warnings.warn(
            f"Crossing search stopped after {iterations} iterations with bracket width "
            f"{width}, above epsilon {config.epsilon}. Returning the best-effort bracket.",
            NonConvergenceWarning,
            stacklevel=stacklevel,
        )

    return SearchResult(
        crossing=Crossing(valid=valid.position, invalid=invalid.position),
        outcome=BracketOutcome.TRANSITION,
        width=width,
        iterations=iterations,
        converged=converged,
        epsilon=config.epsilon,
        widths=tuple(widths),
        valid_world=valid.world,
        invalid_world=invalid.world,
    )


def _walk(segment: _Segment, config: SearchConfig) -> SearchResult:
    start = previous = segment.sample(0.0)
    if not start.valid:
        return _unbracketed(
            segment, BracketOutcome.INVALID_START, start, segment.sample(1.0), config
        )

    # frames above _bisect: _walk, the public function, its logging wrapper
    stacklevel = 5
    for step in traverse_tiles(
        segment.start, segment.end, segment.tile_size, segment.precision
    ):
        if step.t_mid <= previous.t:
            continue
        current = segment.sample(step.t_mid)
        if not current.valid:
            _logger.debug(f"first invalid tile {step.tile} entered at t={step.t_enter}")
            return _bisect(segment, previous, current, config, stacklevel)
        previous = current

    last = segment.sample(1.0)
    if not last.valid:
        return _bisect(segment, previous, last, config, stacklevel)
    return _unbracketed(segment, BracketOutcome.ALL_VALID, start, last, config)


@function_logger(__name__)
def find_crossing(
    valid: Endpoint,
    invalid: Endpoint,
    is_valid: Predicate,
    tile_size: float,
    config: SearchConfig | None = None,
) -> SearchResult:
    """Bisect the segment between a valid and an invalid end point.

    Both ends are checked first. If they were passed the other way round the
    search still runs from the valid end. If both are valid or both are invalid
    there is nothing to bracket: the two ends come back unchanged in the
    ``Crossing`` and the outcome says which case it is.

    Args:
        valid: end point expected to satisfy ``is_valid``
        invalid: end point expected to fail it
        is_valid: deterministic predicate over on-grid positions
        tile_size: edge length of a tile
        config: termination settings; defaults to ``SearchConfig()``

    Returns:
        SearchResult: the narrowed bracket, or the unnarrowed one with the reason

    Notes:
        Only the two ends are inspected before bisecting; an invalid stretch between
        two valid ends goes unnoticed. Use ``find_first_crossing`` to walk the tiles
        in between.
    """
    config = config or SearchConfig()
    segment = _segment(valid, invalid, is_valid, tile_size, config)
    a = segment.sample(0.0)
    b = segment.sample(1.0)

    if a.valid and not b.valid:
        return _bisect(segment, a, b, config, stacklevel=4)
    if b.valid and not a.valid:
        return _bisect(segment, b, a, config, stacklevel=4)
    outcome = BracketOutcome.ALL_VALID if a.valid else BracketOutcome.ALL_INVALID
    return _unbracketed(segment, outcome, a, b, config)


@function_logger(__name__)
def find_first_crossing(
    start: Endpoint,
    end: Endpoint,
    is_valid: Predicate,
    tile_size: float,
    config: SearchConfig | None = None,
) -> SearchResult:
    """Walk from ``start`` toward ``end`` and narrow the first valid-to-invalid transition.

    The predicate is evaluated at the start, at the middle of the chord through
    every tile the segment crosses, and at the end. The first invalid sample and
    the valid sample before it form the bracket that is then bisected.

    Args:
        start: where the walk begins
        end: where the walk ends
        is_valid: deterministic predicate over on-grid positions
        tile_size: edge length of a tile
        config: termination settings; defaults to ``SearchConfig()``

    Returns:
        SearchResult: TRANSITION, ALL_VALID, or INVALID_START when ``start`` itself
        fails; without a transition the crossing holds ``start`` and ``end``
    """
    config = config or SearchConfig()
    return _walk(_segment(start, end, is_valid, tile_size, config), config)


@function_logger(__name__)
def find_crossing_along_path(
    path: Sequence[Endpoint],
    is_valid: Predicate,
    tile_size: float,
    config: SearchConfig | None = None,
) -> SearchResult:
    """Find the first valid-to-invalid transition along a polyline.

    Each segment is walked as in ``find_first_crossing``; the first segment that
    yields a transition (or starts invalid) decides the result.

    Args:
        path: at least one point; consecutive points form the segments
        is_valid: deterministic predicate over on-grid positions
        tile_size: edge length of a tile
        config: termination settings; defaults to ``SearchConfig()``

    Returns:
        SearchResult: the first transition, or ALL_VALID for the last segment
    """
    if len(path) == 0:
        raise ValueError("A path needs at least one point.")

    config = config or SearchConfig()
    points = list(path) if len(path) > 1 else [path[0], path[0]]
    result = None
    for start, end in pairwise(points):
        result = _walk(_segment(start, end, is_valid, tile_size, config), config)
        if result.outcome is not BracketOutcome.ALL_VALID:
            return result
    return result
