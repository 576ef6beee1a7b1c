"""Process management for FFMPEG execution."""

import asyncio
import logging
import re
import shutil
from dataclasses import dataclass
from typing import Optional, Callable
from .command_builder import FFMPEGCommand

logger = logging.getLogger("video_editor")

# Exit code ffmpeg reports when interrupted by the user
CANCEL_EXIT_CODE = 255


@dataclass
class ProcessResult:
    """Result of an FFMPEG process execution."""
    success: bool
    return_code: int
    stdout: str
    stderr: str
    command: str
    output_path: Optional[str] = None
    error_message: Optional[str] = None
    cancelled: bool = False


@dataclass
class ProgressInfo:
    """Progress information during FFMPEG execution."""
    frame: int = 0
    fps: float = 0.0
    time: float = 0.0
    bitrate: str = ""
    speed: str = ""
    size: int = 0
    progress_percent: float = 0.0


ProgressCallback = Callable[[ProgressInfo], None]


class ProcessManager:
    """Runs FFMPEG export commands with progress tracking and cancellation."""

    def __init__(self, ffmpeg_path: Optional[str] = None):
        """Initialize process manager.

        Args:
            ffmpeg_path: Path to ffmpeg executable. If None, searches PATH.
        """
        self.ffmpeg_path = ffmpeg_path or shutil.which("ffmpeg")
        if not self.ffmpeg_path:
            raise RuntimeError("ffmpeg not found in PATH")
        # Running processes mapped to whether cancel() was requested for them
        self._active: dict[asyncio.subprocess.Process, bool] = {}

    def list_active_jobs(self) -> int:
        """Number of ffmpeg processes currently running."""
        return len(self._active)

    def cancel(self) -> None:
        """Stop every running ffmpeg process.

        The interrupted runs report ``CANCEL_EXIT_CODE`` as return code.
        """
        for process in list(self._active):
            self._active[process] = True
            if process.returncode is None:
                try:
                    process.terminate()
                except ProcessLookupError:
                    pass

    async def execute_async(
        self,
        command: FFMPEGCommand,
        progress_callback: Optional[ProgressCallback] = None,
        total_duration: Optional[float] = None,
    ) -> ProcessResult:
        """Execute an FFMPEG command asynchronously with progress.

        Args:
            command: Compiled command to run.
            progress_callback: Callback for progress updates.
            total_duration: Expected output duration for percentage calculation.

        Returns:
            ProcessResult with execution details.
        """
        args = command.to_args()
        cmd_string = command.to_string()
        output_path = command.output_path

        # Replace 'ffmpeg' with actual path and add progress reporting
        args = [self.ffmpeg_path, "-progress", "pipe:1", "-nostats"] + args[1:]

        logger.debug("Running: %s", cmd_string)

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return ProcessResult(
                success=False,
                return_code=-1,
                stdout="",
                stderr=str(e),
                command=cmd_string,
                error_message=str(e),
            )

        self._active[process] = False
        stdout_data: list[str] = []
        stderr_data: list[str] = []

        async def read_stderr():
            while True:
                line = await process.stderr.readline()
                if not line:
                    break
                stderr_data.append(line.decode(errors="replace"))

        async def read_stdout():
            progress = ProgressInfo()
            while True:
                line = await process.stdout.readline()
                if not line:
                    break

                line_str = line.decode(errors="replace").strip()
                stdout_data.append(line_str)

                if "=" not in line_str:
                    continue
                key, value = line_str.split("=", 1)
                if key == "progress":
                    if value == "end":
                        progress.progress_percent = 100
                    if progress_callback:
                        progress_callback(progress)
                else:
                    _update_progress(progress, key, value, total_duration)

        try:
            await asyncio.gather(read_stdout(), read_stderr())
            await process.wait()
        finally:
            cancelled = self._active.pop(process, False)
            if process.returncode is None:
                process.kill()
                await process.wait()

        return_code = CANCEL_EXIT_CODE if cancelled else process.returncode
        success = return_code == 0
        stderr_str = "".join(stderr_data)

        return ProcessResult(
            success=success,
            return_code=return_code,
            stdout="\n".join(stdout_data),
            stderr=stderr_str,
            command=cmd_string,
            output_path=output_path,
            error_message=None if success else self._parse_error(stderr_str),
            cancelled=cancelled,
        )

    def _parse_error(self, stderr: str) -> str:
        """Extract meaningful error message from ffmpeg stderr."""
        lines = stderr.strip().split("\n")

        error_patterns = [
            r"Error.*",
            r"Invalid.*",
            r"No such file.*",
            r".*not found.*",
            r"Permission denied.*",
        ]

        for line in reversed(lines):
            for pattern in error_patterns:
                if re.search(pattern, line, re.IGNORECASE):
                    return line.strip()

        # Return last non-empty line if no pattern matched
        for line in reversed(lines):
            if line.strip():
                return line.strip()

        return "Unknown error"


def _update_progress(
    progress: ProgressInfo,
    key: str,
    value: str,
    total_duration: Optional[float],
) -> None:
    """Apply one ``key=value`` line of ``-progress`` output."""
    try:
        if key == "frame":
            progress.frame = int(value)
        elif key == "fps":
            progress.fps = float(value) if value else 0.0
        elif key == "out_time_ms":
            progress.time = int(value) / 1_000_000
            if total_duration and total_duration > 0:
                progress.progress_percent = min(
                    100, (progress.time / total_duration) * 100
                )
        elif key == "bitrate":
            progress.bitrate = value
        elif key == "speed":
            progress.speed = value
        elif key == "total_size":
            progress.size = int(value)
    except ValueError:
        # ffmpeg prints N/A before the first frame is encoded
        pass
