"""Exceptions raised by crisscross.

Every exception carries the package version in its message so bug reports
show which release produced them.
"""

import crisscross


class CrissCrossError(Exception):
    """Base class for all crisscross-specific exceptions."""

    def __init__(self, message: str):
        self.crisscross_version = getattr(crisscross, "__version__", "unknown")
        self.original_message = message
        super().__init__(f"[crisscross {self.crisscross_version}] {message}")


class ConfigurationError(CrissCrossError):
    """Raised when a tile size, precision or search parameter is invalid.

    Either pass a complete message, or the parameter name and the reason it
    was rejected: ``ConfigurationError("tile_size", "must be positive")``.
    """

    def __init__(self, param_name: str | None = None, reason: str | None = None):
        self.param_name = param_name if reason else None
        if param_name and reason:
            message = f"Invalid configuration for '{param_name}': {reason}"
        else:
            message = param_name or "Invalid configuration"
        super().__init__(message)


# Position Errors
class PositionError(CrissCrossError):
    """Generic errors related to tile positions and their conversions."""


class OffGridError(PositionError):
    """Raised when a signed position cannot be narrowed to an on-grid TilePosition.
    Example: ``SignedTilePosition(0, 0, -0.1, 0.0)`` lies left of tile column 0.
    """

    def __init__(self, position, reason: str | None = None):
        self.position = position
        message = f"Tile position {position} is off grid, cannot convert"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NormalizationError(PositionError):
    """Raised when normalized() receives an offset more than one tile width out of range."""

    def __init__(self, position, tile_size):
        self.position = position
        self.tile_size = tile_size
        band = 2 * tile_size
        message = (
            f"Cannot normalize {position}: relative offsets must lie within "
            f"(-{band}, {band}) for tile size {tile_size}."
        )
        super().__init__(message)


class CoordinateOverflowError(PositionError):
    """Raised when a tile index does not fit the 64-bit range of its position type."""

    def __init__(self, value, bounds):
        self.value = value
        self.bounds = bounds
        message = f"Tile index {value} is outside the range [{bounds[0]}, {bounds[1]}]."
        super().__init__(message)


# Search Errors
class SearchError(CrissCrossError):
    """Base class for errors related to the crossing search."""


class SearchNonConvergenceError(SearchError):
    """Raised on request when a crossing search stopped at its iteration cap.

    The search itself never raises this; it is produced by
    ``SearchResult.raise_for_convergence()`` for callers that want a hard failure.
    """

    def __init__(self, width, iterations, epsilon):
        self.width = width
        self.iterations = iterations
        self.epsilon = epsilon
        message = (
            f"Crossing search stopped after {iterations} iterations with a bracket "
            f"width of {width}, above the target epsilon {epsilon}."
        )
        super().__init__(message)


class NonConvergenceWarning(RuntimeWarning):
    """Issued when a crossing search returns a best-effort bracket wider than its epsilon."""
