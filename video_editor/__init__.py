"""
Video Editor Core

Interactive trim, crop, rotation and scale state for a video file, and
its compilation into a single ffmpeg export command.
"""

from .config import EditorConfig, load_config
from .controller import ExportResult, ExportStatus, VideoEditorController
from .editor.geometry import UnitInterval, UnitPoint, UnitRect, VideoDimensions
from .editor.state import EditorBusyError, RotateDirection, TransformationState
from .pipeline_compiler import compile_export
from .video.analyzer import ProbeError
from .video.formats import ExportPreset, ExportRequest

__all__ = [
    "EditorConfig",
    "load_config",
    "ExportResult",
    "ExportStatus",
    "VideoEditorController",
    "UnitInterval",
    "UnitPoint",
    "UnitRect",
    "VideoDimensions",
    "EditorBusyError",
    "RotateDirection",
    "TransformationState",
    "compile_export",
    "ProbeError",
    "ExportPreset",
    "ExportRequest",
]
