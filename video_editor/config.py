"""Editor configuration loaded from an optional YAML file.

Example ``video_editor.yaml``::

    output_dir: ~/Videos/exports
    ffmpeg_path: /usr/local/bin/ffmpeg
    min_handle_fraction: 0.05
    gif_fps: 12
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from .editor.state import DEFAULT_MIN_HANDLE_FRACTION
from .pipeline_compiler import DEFAULT_GIF_FPS

logger = logging.getLogger("video_editor")


class EditorConfig(BaseModel):
    """Settings shared by every controller."""
    model_config = ConfigDict(extra="ignore")

    output_dir: Optional[str] = None
    ffmpeg_path: Optional[str] = None
    ffprobe_path: Optional[str] = None
    min_handle_fraction: float = Field(default=DEFAULT_MIN_HANDLE_FRACTION, gt=0, lt=1)
    gif_fps: int = Field(default=DEFAULT_GIF_FPS, gt=0)

    def resolved_output_dir(self) -> Path:
        """Configured output directory, or the system temp directory."""
        if self.output_dir:
            return Path(self.output_dir).expanduser()
        return Path(tempfile.gettempdir())


def load_config(path: Optional[str | Path] = None) -> EditorConfig:
    """Load configuration from a YAML file.

    A missing path or file gives the defaults. Unknown keys are ignored.

    Raises:
        ValueError: If the file is not a YAML mapping or holds invalid values.
    """
    if path is None:
        return EditorConfig()

    path = Path(path)
    if not path.is_file():
        logger.debug("No config file at %s, using defaults", path)
        return EditorConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return EditorConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    return EditorConfig(**data)
