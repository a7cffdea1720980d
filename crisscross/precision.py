"""Decimal precision used to keep relative tile offsets comparable.

Offsets inside a tile are rounded to a fixed number of decimal digits when a
position is built, so positions reached through different chains of float
arithmetic still compare equal. Two regimes are provided:

- ``TEST_PRECISION`` (3 digits): coarse, convenient for literal fixtures
- ``PRODUCTION_PRECISION`` (8 digits): the default, keeps sub-millimetre accuracy
  for tile sizes measured in metres

The regime is a value passed to the code that builds positions, not a global switch.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from crisscross.errors import ConfigurationError

__all__ = [
    "MAX_DIGITS",
    "PRODUCTION_PRECISION",
    "TEST_PRECISION",
    "Precision",
    "round_to",
]

# float64 carries 15-17 significant decimal digits
MAX_DIGITS = 15


def round_to(value: float, digits: int) -> float:
    """Round ``value`` to ``digits`` decimal places, half away from zero.

    Args:
        value: the number to round
        digits: number of decimal places to keep

    Returns:
        the rounded value; ``-0.0`` is returned as ``0.0``
    """
    factor = 10.0**digits
    scaled = abs(value) * factor
    if not math.isfinite(scaled) or scaled >= 2.0**52:
        # no representable digits beyond the requested place
        return value + 0.0
    rounded = math.copysign(math.floor(abs(value) * factor + 0.5), value) / factor
    return rounded + 0.0


@dataclass(frozen=True, slots=True)
class Precision:
    """Number of decimal digits kept for relative tile offsets.

    Attributes:
        digits: decimal places kept after rounding
    """

    digits: int

    def __post_init__(self):  # noqa: D105
        if isinstance(self.digits, bool) or not isinstance(self.digits, int):
            raise ConfigurationError("digits", "must be an integer")
        if not 0 <= self.digits <= MAX_DIGITS:
            raise ConfigurationError("digits", f"must lie within [0, {MAX_DIGITS}]")

    @property
    def epsilon(self) -> float:
        """Half a unit in the last kept digit, the most that ``round`` moves a value.

        This bounds the rounding error only. It is not the tolerance of ``isclose``:
        two values closer than ``epsilon`` still differ when they round apart.
        """
        return 0.5 * 10.0**-self.digits

    def round(self, value: float) -> float:
        """Round ``value`` to this precision."""
        return round_to(value, self.digits)

    def isclose(self, a: float, b: float) -> bool:
        """Return whether ``a`` and ``b`` are equal once rounded to this precision."""
        return self.round(a) == self.round(b)

    def coarser(self, other: Precision) -> Precision:
        """Return whichever of the two precisions keeps fewer digits."""
        return self if self.digits <= other.digits else other

    def format(self, value: float) -> str:
        """Render ``value`` with exactly ``digits`` decimal places."""
        return f"{self.round(value):.{self.digits}f}"


TEST_PRECISION = Precision(3)
PRODUCTION_PRECISION = Precision(8)
