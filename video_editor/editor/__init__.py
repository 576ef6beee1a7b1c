"""Interactive transformation state and crop geometry."""

from .geometry import (
    FULL_INTERVAL,
    FULL_RECT,
    UnitInterval,
    UnitPoint,
    UnitRect,
    VideoDimensions,
)
from .aspect import solve_aspect_ratio
from .state import (
    CropDraft,
    EditorBusyError,
    RotateDirection,
    TransformationState,
    TransformSnapshot,
)

__all__ = [
    "FULL_INTERVAL",
    "FULL_RECT",
    "UnitInterval",
    "UnitPoint",
    "UnitRect",
    "VideoDimensions",
    "solve_aspect_ratio",
    "CropDraft",
    "EditorBusyError",
    "RotateDirection",
    "TransformationState",
    "TransformSnapshot",
]
