"""Video probing and output format handling."""

from .analyzer import ProbeError, ProbeResult, VideoAnalyzer, VideoMetadata
from .formats import ContainerFormat, ExportPreset, ExportRequest

__all__ = [
    "ProbeError",
    "ProbeResult",
    "VideoAnalyzer",
    "VideoMetadata",
    "ContainerFormat",
    "ExportPreset",
    "ExportRequest",
]
