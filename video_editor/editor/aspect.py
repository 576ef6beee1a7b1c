"""Aspect-ratio projection for crop rectangles."""

from typing import Optional

from .geometry import UnitPoint, UnitRect, VideoDimensions

# Float slack when checking whether a candidate still fits the unit square
_EPSILON = 1e-9


def solve_aspect_ratio(
    ratio: float,
    rect: UnitRect,
    dimensions: VideoDimensions,
    min_handle_fraction: float,
) -> Optional[UnitRect]:
    """Resize ``rect`` so its pixel width/height equals ``ratio``.

    The top-left corner stays fixed and only the bottom-right corner
    moves. The pixel width is kept first; if the derived height would
    leave the unit square, the pixel height is kept instead and the width
    is derived from it.

    Args:
        ratio: Target width / height, must be positive.
        rect: The staged crop rectangle to project.
        dimensions: Native frame size in pixels.
        min_handle_fraction: Minimum crop size per axis, as a fraction of
            the native dimension on that axis.

    Returns:
        The projected rectangle, or None when the ratio cannot be honored
        (unknown dimensions, result smaller than the minimum handle size,
        or no candidate fits inside the frame).
    """
    if ratio <= 0 or not dimensions.is_known or not rect.is_normalized:
        return None

    video_width = dimensions.width
    video_height = dimensions.height
    left = rect.top_left.x
    top = rect.top_left.y

    crop_width = rect.width * video_width
    crop_height = rect.height * video_height

    # Candidate A: keep the width
    new_width = crop_width
    new_height = crop_width / ratio

    if not _fits(left, top, new_width / video_width, new_height / video_height):
        # Candidate B: keep the height
        new_width = crop_height * ratio
        new_height = crop_height
        if not _fits(left, top, new_width / video_width, new_height / video_height):
            return None

    min_width = min_handle_fraction * video_width
    min_height = min_handle_fraction * video_height
    if not (new_width > min_width and new_height > min_height):
        return None

    right = min(1.0, left + new_width / video_width)
    bottom = min(1.0, top + new_height / video_height)
    return UnitRect(rect.top_left, UnitPoint(right, bottom))


def _fits(left: float, top: float, width: float, height: float) -> bool:
    return left + width <= 1.0 + _EPSILON and top + height <= 1.0 + _EPSILON
