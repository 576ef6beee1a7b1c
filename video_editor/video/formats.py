"""Output formats, encoder presets and export request definitions."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExportPreset(str, Enum):
    """Encoder speed / compression tradeoff passed as ``-preset``.

    A slower preset gives better compression (quality per file size). For
    a target bitrate that means better quality; for constant quality it
    means a smaller file. ``NONE`` leaves the encoder default in place.
    """
    NONE = "none"
    ULTRAFAST = "ultrafast"
    SUPERFAST = "superfast"
    VERYFAST = "veryfast"
    FASTER = "faster"
    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"
    SLOWER = "slower"
    VERYSLOW = "veryslow"

    def to_ffmpeg_args(self) -> list[str]:
        """Convert to FFMPEG command arguments."""
        if self is ExportPreset.NONE:
            return []
        return ["-preset", self.value]


class ContainerFormat(str, Enum):
    """Common output container formats."""
    MP4 = "mp4"
    MKV = "mkv"
    WEBM = "webm"
    MOV = "mov"
    AVI = "avi"
    GIF = "gif"


# Formats that loop forever and need a fixed frame rate
ANIMATED_FORMATS = {ContainerFormat.GIF.value}


def is_animated_format(fmt: str) -> bool:
    return fmt.lower() in ANIMATED_FORMATS


class ExportRequest(BaseModel):
    """Parameters of a single export, fixed for the duration of the run."""
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    format: str = ContainerFormat.MP4.value
    scale: float = Field(default=1.0, gt=0)
    custom_instruction: Optional[str] = None
    preset: ExportPreset = ExportPreset.NONE

    @field_validator("format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        value = value.strip().lstrip(".").lower()
        if not value or not value.isalnum():
            raise ValueError(f"Invalid output format: {value!r}")
        return value

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not value.strip() or "/" in value or "\\" in value or value in (".", ".."):
            raise ValueError(f"Invalid output name: {value!r}")
        return value
