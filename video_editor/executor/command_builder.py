"""FFMPEG command builder for the export filter chain."""

import shlex
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path

from ..video.formats import ExportPreset


def format_seconds(seconds: float) -> str:
    """Format a timestamp for -ss/-to with millisecond precision."""
    return f"{seconds:.3f}"


@dataclass
class Filter:
    """Represents a single FFMPEG filter."""
    name: str
    args: list[str | int | float] = field(default_factory=list)
    params: dict[str, str | int | float] = field(default_factory=dict)

    def to_string(self) -> str:
        """Convert filter to FFMPEG filter string."""
        values = [str(a) for a in self.args]
        values.extend(f"{k}={v}" for k, v in self.params.items())
        if not values:
            return self.name
        return f"{self.name}={':'.join(values)}"


@dataclass
class FilterChain:
    """A chain of filters connected in sequence."""
    filters: list[Filter] = field(default_factory=list)

    def add(self, filter_obj: Filter) -> "FilterChain":
        """Add a filter to the chain."""
        self.filters.append(filter_obj)
        return self

    def add_filter(
        self,
        name: str,
        args: Optional[list] = None,
        params: Optional[dict] = None,
    ) -> "FilterChain":
        """Add a filter by parameters."""
        self.filters.append(Filter(
            name=name,
            args=args or [],
            params=params or {},
        ))
        return self

    def to_string(self) -> str:
        """Convert filter chain to FFMPEG filter string."""
        if not self.filters:
            return ""
        return ",".join(f.to_string() for f in self.filters)

    def __len__(self) -> int:
        return len(self.filters)


@dataclass
class FFMPEGCommand:
    """A complete export command.

    Arguments are emitted in a fixed order: input, custom instruction,
    video filters, filter-dependent output options, preset, trim,
    overwrite flag, output.
    """
    input_path: Optional[str] = None
    output_path: Optional[str] = None
    custom_args: list[str] = field(default_factory=list)
    video_filters: FilterChain = field(default_factory=FilterChain)
    filter_options: list[str] = field(default_factory=list)
    preset: ExportPreset = ExportPreset.NONE
    trim_start: Optional[float] = None
    trim_end: Optional[float] = None
    overwrite: bool = True

    @property
    def filter_string(self) -> str:
        return self.video_filters.to_string()

    def trim_args(self) -> list[str]:
        args = []
        if self.trim_start is not None:
            args.extend(["-ss", format_seconds(self.trim_start)])
        if self.trim_end is not None:
            args.extend(["-to", format_seconds(self.trim_end)])
        return args

    def to_args(self) -> list[str]:
        """Convert command to list of arguments for subprocess."""
        args = ["ffmpeg"]

        if self.input_path is not None:
            args.extend(["-i", self.input_path])

        args.extend(self.custom_args)

        # Never emit an empty filter flag
        vf = self.filter_string
        if vf:
            args.extend(["-filter:v", vf])
        args.extend(self.filter_options)

        args.extend(self.preset.to_ffmpeg_args())
        args.extend(self.trim_args())

        if self.overwrite:
            args.append("-y")

        if self.output_path is not None:
            args.append(self.output_path)

        return args

    def to_string(self) -> str:
        """Convert command to shell string."""
        return " ".join(shlex.quote(arg) for arg in self.to_args())


class CommandBuilder:
    """Builder for constructing FFMPEG export commands."""

    def __init__(self):
        self._command = FFMPEGCommand()

    def reset(self) -> "CommandBuilder":
        """Reset the builder to initial state."""
        self._command = FFMPEGCommand()
        return self

    def input(self, path: str | Path) -> "CommandBuilder":
        """Set the input file."""
        self._command.input_path = str(path)
        return self

    def output(self, path: str | Path) -> "CommandBuilder":
        """Set output file."""
        self._command.output_path = str(path)
        return self

    def custom_instruction(self, text: Optional[str]) -> "CommandBuilder":
        """Insert free-form arguments right after the input."""
        if text and text.strip():
            self._command.custom_args.extend(shlex.split(text))
        return self

    def vf(self, *filters: str | Filter) -> "CommandBuilder":
        """Add video filters."""
        for f in filters:
            if isinstance(f, str):
                self._command.video_filters.add_filter(f)
            else:
                self._command.video_filters.add(f)
        return self

    def crop(self, width: int, height: int, x: int = 0, y: int = 0) -> "CommandBuilder":
        """Add crop filter."""
        self._command.video_filters.add_filter("crop", [width, height, x, y])
        return self

    def scale(self, width: int | str, height: int | str) -> "CommandBuilder":
        """Add scale filter."""
        self._command.video_filters.add_filter("scale", [width, height])
        return self

    def transpose(self, direction: int = 1, times: int = 1) -> "CommandBuilder":
        """Add ``times`` transpose filters (1 = 90 degrees clockwise)."""
        for _ in range(times):
            self._command.video_filters.add_filter("transpose", [direction])
        return self

    def fps(self, rate: int | float) -> "CommandBuilder":
        """Set output frame rate."""
        self._command.video_filters.add_filter("fps", [rate])
        return self

    def loop(self, count: int = 0) -> "CommandBuilder":
        """Set animated output loop count (0 loops forever)."""
        self._command.filter_options.extend(["-loop", str(count)])
        return self

    def preset(self, preset: ExportPreset) -> "CommandBuilder":
        """Set encoder preset."""
        self._command.preset = preset
        return self

    def trim(
        self,
        start: Optional[float] = None,
        end: Optional[float] = None,
    ) -> "CommandBuilder":
        """Add seek-to-start and stop-at-end options."""
        self._command.trim_start = start
        self._command.trim_end = end
        return self

    def overwrite(self, value: bool = True) -> "CommandBuilder":
        """Set overwrite flag."""
        self._command.overwrite = value
        return self

    def build(self) -> FFMPEGCommand:
        """Build and return the command."""
        return self._command

    def build_args(self) -> list[str]:
        """Build and return command as argument list."""
        return self._command.to_args()

    def build_string(self) -> str:
        """Build and return command as shell string."""
        return self._command.to_string()
