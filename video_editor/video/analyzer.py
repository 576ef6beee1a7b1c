"""Video probing and metadata extraction using ffprobe."""

import json
import logging
import subprocess
import shutil
from pathlib import Path
from typing import Optional
from pydantic import BaseModel

logger = logging.getLogger("video_editor")


class ProbeError(RuntimeError):
    """Raised when a file has no usable video stream."""


class VideoStreamInfo(BaseModel):
    """Video stream information as stored in the container."""
    index: int
    codec_name: str
    width: int
    height: int
    rotation: int = 0

    @property
    def is_sideways(self) -> bool:
        """Whether the rotation metadata turns the frame by 90 or 270 degrees."""
        return (self.rotation // 90) % 2 != 0

    @property
    def display_size(self) -> tuple[int, int]:
        """(width, height) as the frame is displayed after rotation."""
        if self.is_sideways:
            return (self.height, self.width)
        return (self.width, self.height)


class VideoMetadata(BaseModel):
    """Subset of ffprobe output the editor needs."""
    file_path: str
    format_name: str
    duration: float
    video_streams: list[VideoStreamInfo] = []

    @property
    def display_dimensions(self) -> tuple[int, int]:
        """Largest width and largest height over all video streams."""
        width = 0
        height = 0
        for stream in self.video_streams:
            stream_width, stream_height = stream.display_size
            width = max(width, stream_width)
            height = max(height, stream_height)
        return (width, height)


class ProbeResult(BaseModel):
    """Display-oriented frame size, rotation and duration of a video."""
    width: int
    height: int
    rotation: int = 0
    duration: float = 0.0


class VideoAnalyzer:
    """Analyzes video files using ffprobe."""

    def __init__(self, ffprobe_path: Optional[str] = None):
        """Initialize the analyzer.

        Args:
            ffprobe_path: Path to ffprobe executable. If None, will search PATH.
        """
        self.ffprobe_path = ffprobe_path or shutil.which("ffprobe")
        if not self.ffprobe_path:
            raise RuntimeError("ffprobe not found in PATH")

    def analyze(self, video_path: str | Path) -> VideoMetadata:
        """Run ffprobe on a video file and parse its streams.

        Raises:
            FileNotFoundError: If the video file doesn't exist.
            ProbeError: If ffprobe fails or prints unreadable output.
        """
        video_path = Path(video_path)
        if not video_path.exists():
            raise FileNotFoundError(f"Video file not found: {video_path}")

        cmd = [
            self.ffprobe_path,
            "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(video_path),
        ]

        result = subprocess.run(cmd, capture_output=True, text=True)
        if result.returncode != 0:
            raise ProbeError(f"ffprobe failed: {result.stderr}")

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ProbeError(f"Unreadable ffprobe output: {e}") from e
        return self.parse_probe_data(str(video_path), data)

    def probe(self, video_path: str | Path) -> ProbeResult:
        """Report the display-oriented frame size of a video.

        Raises:
            ProbeError: If no video stream with a positive size exists.
        """
        metadata = self.analyze(video_path)
        width, height = metadata.display_dimensions
        if width <= 0 or height <= 0:
            raise ProbeError(f"No usable video stream in {video_path}")

        rotation = metadata.video_streams[0].rotation if metadata.video_streams else 0
        logger.debug(
            "Probed %s: %dx%d, rotation %d, %.3fs",
            video_path, width, height, rotation, metadata.duration,
        )
        return ProbeResult(
            width=width,
            height=height,
            rotation=rotation,
            duration=metadata.duration,
        )

    def parse_probe_data(self, file_path: str, data: dict) -> VideoMetadata:
        """Parse ffprobe JSON output into VideoMetadata."""
        format_info = data.get("format", {})
        streams = data.get("streams", [])

        video_streams = [
            self._parse_video_stream(stream)
            for stream in streams
            if stream.get("codec_type") == "video"
        ]

        duration = format_info.get("duration")
        return VideoMetadata(
            file_path=file_path,
            format_name=format_info.get("format_name", "unknown"),
            duration=float(duration) if duration else 0.0,
            video_streams=video_streams,
        )

    def _parse_video_stream(self, stream: dict) -> VideoStreamInfo:
        return VideoStreamInfo(
            index=stream.get("index", 0),
            codec_name=stream.get("codec_name", "unknown"),
            width=stream.get("width") or 0,
            height=stream.get("height") or 0,
            rotation=self._parse_rotation(stream),
        )

    @staticmethod
    def _parse_rotation(stream: dict) -> int:
        """Read rotation from display-matrix side data or the legacy rotate tag."""
        for side_data in stream.get("side_data_list") or []:
            if "rotation" in side_data:
                try:
                    return int(float(side_data["rotation"]))
                except (TypeError, ValueError):
                    return 0

        rotate = (stream.get("tags") or {}).get("rotate")
        if rotate is not None:
            try:
                return int(float(rotate))
            except (TypeError, ValueError):
                return 0
        return 0
