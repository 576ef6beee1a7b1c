"""Normalized geometry primitives for trim ranges and crop rectangles.

All values are fractions of the video's duration, width or height, so
``0.0`` is the start/left/top edge and ``1.0`` the end/right/bottom edge.
The types never raise on out-of-range values; callers check
``is_normalized`` and ignore the edit instead.
"""

from dataclasses import dataclass


def _in_unit_range(value: float) -> bool:
    return 0.0 <= value <= 1.0


@dataclass(frozen=True)
class UnitInterval:
    """A normalized time range ``[lo, hi]``."""
    lo: float = 0.0
    hi: float = 1.0

    @property
    def is_normalized(self) -> bool:
        """Both bounds lie in [0, 1] and ``lo <= hi``."""
        return _in_unit_range(self.lo) and _in_unit_range(self.hi) and self.lo <= self.hi

    @property
    def is_full(self) -> bool:
        return self.lo == 0.0 and self.hi == 1.0

    @property
    def length(self) -> float:
        return self.hi - self.lo


@dataclass(frozen=True)
class UnitPoint:
    """A normalized pixel position."""
    x: float = 0.0
    y: float = 0.0

    @property
    def is_normalized(self) -> bool:
        return _in_unit_range(self.x) and _in_unit_range(self.y)

    def is_before(self, other: "UnitPoint") -> bool:
        """Componentwise ``self <= other``."""
        return self.x <= other.x and self.y <= other.y


@dataclass(frozen=True)
class UnitRect:
    """A normalized crop rectangle given by its two corners."""
    top_left: UnitPoint = UnitPoint(0.0, 0.0)
    bottom_right: UnitPoint = UnitPoint(1.0, 1.0)

    @classmethod
    def from_bounds(cls, left: float, top: float, right: float, bottom: float) -> "UnitRect":
        return cls(UnitPoint(left, top), UnitPoint(right, bottom))

    @property
    def is_normalized(self) -> bool:
        """Both corners lie in the unit square and are correctly ordered."""
        return (
            self.top_left.is_normalized
            and self.bottom_right.is_normalized
            and self.top_left.is_before(self.bottom_right)
        )

    @property
    def is_full(self) -> bool:
        return self == FULL_RECT

    @property
    def width(self) -> float:
        return self.bottom_right.x - self.top_left.x

    @property
    def height(self) -> float:
        return self.bottom_right.y - self.top_left.y


FULL_INTERVAL = UnitInterval(0.0, 1.0)
FULL_RECT = UnitRect(UnitPoint(0.0, 0.0), UnitPoint(1.0, 1.0))


@dataclass(frozen=True)
class VideoDimensions:
    """Native frame size in pixels, in display orientation.

    Zero in either axis means the size has not been probed yet.
    """
    width: int = 0
    height: int = 0

    @property
    def is_known(self) -> bool:
        return self.width > 0 and self.height > 0
