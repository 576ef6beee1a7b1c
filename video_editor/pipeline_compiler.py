"""Compile the editor state into a single ffmpeg export command.

Filters are emitted in a fixed order: crop, scale, rotation, then any
format-specific filter. Each later filter works on the frame produced by
the earlier ones, so crop coordinates are always in source (pre-rotation)
pixels. Filters that would not change the video are left out.
"""

import logging
import math
from pathlib import Path
from typing import Optional

from .editor.geometry import UnitRect, VideoDimensions
from .editor.state import TransformSnapshot
from .executor.command_builder import CommandBuilder, FFMPEGCommand, Filter
from .video.formats import ExportRequest, is_animated_format

logger = logging.getLogger("video_editor")

DEFAULT_GIF_FPS = 10


def _clamp(value: int, upper: int) -> int:
    return max(0, min(value, upper))


def crop_filter(rect: UnitRect, dimensions: VideoDimensions) -> Optional[Filter]:
    """Pixel crop for ``rect``, or None when it spans the whole frame.

    Each edge is floored first and then clamped into the frame, so a
    fraction of exactly 1.0 maps onto the last pixel boundary.
    """
    if rect.is_full:
        return None
    if not dimensions.is_known:
        raise ValueError("Video dimensions must be known to compile a crop")

    width = dimensions.width
    height = dimensions.height
    start_x = _clamp(math.floor(width * rect.top_left.x), width)
    start_y = _clamp(math.floor(height * rect.top_left.y), height)
    end_x = _clamp(math.floor(width * rect.bottom_right.x), width)
    end_y = _clamp(math.floor(height * rect.bottom_right.y), height)
    return Filter("crop", [end_x - start_x, end_y - start_y, start_x, start_y])


def scale_filter(scale: float) -> Optional[Filter]:
    if scale == 1.0:
        return None
    return Filter("scale", [f"iw*{scale}", f"ih*{scale}"])


def rotation_filters(rotation: int) -> list[Filter]:
    """One clockwise transpose per 90 degrees of rotation."""
    return [Filter("transpose", [1]) for _ in range((rotation % 360) // 90)]


def output_path_for(
    input_path: str | Path,
    request: ExportRequest,
    output_dir: str | Path,
) -> str:
    """``<output_dir>/<name>.<format>``, defaulting the name to the input stem."""
    name = request.name or Path(input_path).name.split(".")[0]
    return str(Path(output_dir) / f"{name}.{request.format}")


def compile_export(
    snapshot: TransformSnapshot,
    input_path: str | Path,
    output_path: str | Path,
    request: ExportRequest,
    gif_fps: int = DEFAULT_GIF_FPS,
) -> FFMPEGCommand:
    """Translate the editor state and export request into an ffmpeg command.

    Args:
        snapshot: Frozen transformation state.
        input_path: Source video.
        output_path: Destination file.
        request: Format, scale, preset and custom arguments of the export.
        gif_fps: Frame rate used for animated-image output.

    Returns:
        The compiled command.

    Raises:
        ValueError: If a crop is requested before the dimensions are known.
    """
    builder = CommandBuilder()
    builder.input(input_path)
    builder.custom_instruction(request.custom_instruction)

    crop = crop_filter(snapshot.crop_rect, snapshot.dimensions)
    if crop is not None:
        builder.vf(crop)

    scale = scale_filter(request.scale)
    if scale is not None:
        builder.vf(scale)

    builder.vf(*rotation_filters(snapshot.rotation))

    if is_animated_format(request.format):
        builder.fps(gif_fps)
        builder.loop(0)

    builder.preset(request.preset)

    if not snapshot.trim.is_full:
        if snapshot.duration > 0:
            builder.trim(start=snapshot.trim_start, end=snapshot.trim_end)
        else:
            logger.warning("Duration unknown, exporting without trim")

    builder.overwrite(True)
    builder.output(output_path)

    command = builder.build()
    logger.debug("Compiled export command: %s", command.to_string())
    return command
