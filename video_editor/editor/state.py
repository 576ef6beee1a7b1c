"""Editable transformation state: trim, crop, rotation and aspect lock.

Every setter validates its input and silently ignores out-of-range
values, the way a live editing UI expects. Accepted mutations notify the
registered listeners. While an export is running the state is frozen and
any mutation raises ``EditorBusyError``.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .aspect import solve_aspect_ratio
from .geometry import (
    FULL_INTERVAL,
    FULL_RECT,
    UnitInterval,
    UnitPoint,
    UnitRect,
    VideoDimensions,
)

logger = logging.getLogger("video_editor")

Listener = Callable[[], None]

DEFAULT_MIN_HANDLE_FRACTION = 0.05


class EditorBusyError(RuntimeError):
    """Raised when the editor is modified or exported while an export runs."""


class RotateDirection(str, Enum):
    """Direction of a 90 degree rotation step."""
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class TransformSnapshot:
    """Immutable view of the state handed to the pipeline compiler."""
    trim: UnitInterval
    trim_start: float
    trim_end: float
    crop_rect: UnitRect
    rotation: int
    dimensions: VideoDimensions
    duration: float


class CropDraft:
    """Staged crop rectangle edited while the user drags crop handles.

    Edits to the draft never notify listeners. ``commit()`` copies the
    draft into the committed rectangle that playback and export read.
    """

    def __init__(self, state: "TransformationState"):
        self._state = state
        self._rect = state.crop_rect

    @property
    def rect(self) -> UnitRect:
        return self._rect

    def set_rect(self, rect: UnitRect) -> bool:
        """Stage a new rectangle.

        With an aspect lock active the rectangle is projected onto the
        locked ratio first. Returns False, leaving the draft untouched,
        if the rectangle is out of range or cannot honor the lock.
        """
        self._state._ensure_mutable()
        if not rect.is_normalized:
            return False
        ratio = self._state.aspect_ratio
        if ratio is not None:
            rect = solve_aspect_ratio(
                ratio, rect, self._state.dimensions, self._state.min_handle_fraction
            )
            if rect is None:
                return False
        self._rect = rect
        return True

    def reset(self) -> None:
        """Discard staged edits and restart from the committed rectangle."""
        self._state._ensure_mutable()
        self._rect = self._state.crop_rect

    def commit(self) -> None:
        self._state._ensure_mutable()
        self._state._apply_crop(self._rect)

    def _replace(self, rect: UnitRect) -> None:
        self._rect = rect


class TransformationState:
    """Trim, crop, rotation and aspect-lock parameters of one video."""

    def __init__(
        self,
        duration: float = 0.0,
        dimensions: Optional[VideoDimensions] = None,
        min_handle_fraction: float = DEFAULT_MIN_HANDLE_FRACTION,
    ):
        """Initialize the state.

        Args:
            duration: Video duration in seconds, 0 if not known yet.
            dimensions: Native frame size in display orientation.
            min_handle_fraction: Smallest crop size per axis allowed while
                an aspect ratio is locked, as a fraction of that axis.
        """
        self.min_handle_fraction = min_handle_fraction
        self.is_trimming = False
        self.is_cropping = False

        self._listeners: list[Listener] = []
        self._frozen = False

        self._duration = max(0.0, float(duration))
        self._dimensions = dimensions or VideoDimensions()
        self._trim = FULL_INTERVAL
        self._trim_start = 0.0
        self._trim_end = 0.0
        self._crop_rect = FULL_RECT
        self._rotation = 0
        self._aspect_ratio: Optional[float] = None

        self._draft = CropDraft(self)
        self._update_trim_range()

    # ------------------------------------------------------------------ #
    #  Listeners                                                          #
    # ------------------------------------------------------------------ #

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def clear_listeners(self) -> None:
        self._listeners.clear()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    # ------------------------------------------------------------------ #
    #  Export guard                                                       #
    # ------------------------------------------------------------------ #

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Reject all mutations until ``unfreeze()`` is called."""
        self._frozen = True

    def unfreeze(self) -> None:
        self._frozen = False

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise EditorBusyError("Cannot edit the video while an export is running")

    # ------------------------------------------------------------------ #
    #  Media properties                                                   #
    # ------------------------------------------------------------------ #

    @property
    def duration(self) -> float:
        return self._duration

    def set_duration(self, seconds: float) -> None:
        self._ensure_mutable()
        if seconds < 0:
            return
        self._duration = float(seconds)
        self._update_trim_range()

    @property
    def dimensions(self) -> VideoDimensions:
        return self._dimensions

    def set_dimensions(self, dimensions: VideoDimensions) -> None:
        self._ensure_mutable()
        if dimensions.width < 0 or dimensions.height < 0:
            return
        self._dimensions = dimensions
        self._notify()

    # ------------------------------------------------------------------ #
    #  Trim                                                               #
    # ------------------------------------------------------------------ #

    @property
    def trim(self) -> UnitInterval:
        return self._trim

    @property
    def min_trim(self) -> float:
        return self._trim.lo

    @min_trim.setter
    def min_trim(self, value: float) -> None:
        self.set_trim_bounds(value, self._trim.hi)

    @property
    def max_trim(self) -> float:
        return self._trim.hi

    @max_trim.setter
    def max_trim(self, value: float) -> None:
        self.set_trim_bounds(self._trim.lo, value)

    @property
    def trim_start(self) -> float:
        """Trim start in seconds."""
        return self._trim_start

    @property
    def trim_end(self) -> float:
        """Trim end in seconds."""
        return self._trim_end

    def set_trim_bounds(self, lo: float, hi: float) -> None:
        """Set the normalized trim range; ignored unless 0 <= lo <= hi <= 1."""
        self._ensure_mutable()
        interval = UnitInterval(lo, hi)
        if not interval.is_normalized:
            return
        self._trim = interval
        self._update_trim_range()

    def _update_trim_range(self) -> None:
        self._trim_start = self._duration * self._trim.lo
        self._trim_end = self._duration * self._trim.hi
        self._notify()

    def trim_position(self, position: float) -> float:
        """Playback position as a fraction of the duration."""
        if self._duration <= 0:
            return 0.0
        return position / self._duration

    def should_seek_to_start(self, position: float) -> bool:
        """Whether playback at ``position`` seconds left the trimmed range."""
        return position < self._trim_start or position >= self._trim_end

    # ------------------------------------------------------------------ #
    #  Crop                                                               #
    # ------------------------------------------------------------------ #

    @property
    def crop_rect(self) -> UnitRect:
        """The committed crop rectangle used by playback and export."""
        return self._crop_rect

    @property
    def draft(self) -> CropDraft:
        return self._draft

    @property
    def min_crop(self) -> UnitPoint:
        return self._crop_rect.top_left

    @min_crop.setter
    def min_crop(self, value: UnitPoint) -> None:
        self.set_crop_rect(UnitRect(value, self._crop_rect.bottom_right))

    @property
    def max_crop(self) -> UnitPoint:
        return self._crop_rect.bottom_right

    @max_crop.setter
    def max_crop(self, value: UnitPoint) -> None:
        self.set_crop_rect(UnitRect(self._crop_rect.top_left, value))

    def set_crop_rect(self, rect: UnitRect) -> None:
        """Replace the committed rectangle without consulting the aspect lock."""
        self._ensure_mutable()
        if not rect.is_normalized:
            return
        self._apply_crop(rect)

    def commit_cached_crop(self) -> None:
        """Copy the staged draft into the committed rectangle."""
        self._draft.commit()

    def _apply_crop(self, rect: UnitRect) -> None:
        self._crop_rect = rect
        self._draft._replace(rect)
        self._notify()

    # ------------------------------------------------------------------ #
    #  Rotation                                                           #
    # ------------------------------------------------------------------ #

    @property
    def rotation(self) -> int:
        """Rotation in degrees, one of 0, 90, 180, 270."""
        return self._rotation

    def rotate(self, direction: RotateDirection = RotateDirection.RIGHT) -> None:
        self._ensure_mutable()
        step = 90 if direction == RotateDirection.RIGHT else -90
        self._rotation = (self._rotation + step) % 360
        self._notify()

    # ------------------------------------------------------------------ #
    #  Aspect ratio                                                       #
    # ------------------------------------------------------------------ #

    @property
    def aspect_ratio(self) -> Optional[float]:
        return self._aspect_ratio

    def set_aspect_lock(self, ratio: Optional[float]) -> bool:
        """Lock the crop to ``ratio`` (width / height), or unlock with None.

        Locking projects the staged draft onto the ratio. When the draft
        is too small to honor it, nothing changes and False is returned.
        """
        self._ensure_mutable()
        if ratio is None:
            self._aspect_ratio = None
            self._notify()
            return True
        if ratio <= 0:
            return False

        solved = solve_aspect_ratio(
            ratio,
            self._draft.rect,
            self._dimensions,
            self.min_handle_fraction,
        )
        if solved is None:
            logger.warning(
                "Crop region too small to lock aspect ratio %.4f (dimensions %dx%d)",
                ratio, self._dimensions.width, self._dimensions.height,
            )
            return False

        self._draft._replace(solved)
        self._aspect_ratio = ratio
        self._notify()
        return True

    # ------------------------------------------------------------------ #
    #  Snapshot                                                           #
    # ------------------------------------------------------------------ #

    def snapshot(self) -> TransformSnapshot:
        return TransformSnapshot(
            trim=self._trim,
            trim_start=self._trim_start,
            trim_end=self._trim_end,
            crop_rect=self._crop_rect,
            rotation=self._rotation,
            dimensions=self._dimensions,
            duration=self._duration,
        )
