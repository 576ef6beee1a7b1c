"""Video editor controller: owns the editing state and runs exports."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .config import EditorConfig
from .editor.geometry import VideoDimensions
from .editor.state import EditorBusyError, TransformationState
from .executor.process_manager import (
    CANCEL_EXIT_CODE,
    ProcessManager,
    ProcessResult,
    ProgressCallback,
)
from .pipeline_compiler import compile_export, output_path_for
from .sanitize import validate_output_dir, validate_video_path
from .video.analyzer import ProbeError, ProbeResult, VideoAnalyzer
from .video.formats import ExportRequest

logger = logging.getLogger("video_editor")


class ExportStatus(str, Enum):
    """Outcome of an export run."""
    SUCCESS = "success"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class ExportResult:
    """Result of ``VideoEditorController.export``."""
    status: ExportStatus
    return_code: int
    command: str
    output_path: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == ExportStatus.SUCCESS

    @property
    def cancelled(self) -> bool:
        return self.status == ExportStatus.CANCELLED

    @property
    def artifact(self) -> Optional[Path]:
        """The exported file, only set on success."""
        if self.succeeded and self.output_path:
            return Path(self.output_path)
        return None


class VideoEditorController:
    """Edits one video file and exports the result through ffmpeg.

    The controller probes the video at most once, keeps the trim, crop
    and rotation state in ``state``, and allows a single export at a
    time. The state is frozen while an export runs.
    """

    def __init__(
        self,
        file_path: str | Path,
        config: Optional[EditorConfig] = None,
        analyzer: Optional[VideoAnalyzer] = None,
        process_manager: Optional[ProcessManager] = None,
    ):
        """Initialize the controller.

        Args:
            file_path: Video file to edit.
            config: Editor settings. Defaults are used if not provided.
            analyzer: Media probe. Created from ``config`` on first use.
            process_manager: Transcoding engine. Created from ``config``
                on first use.

        Raises:
            ValueError: If ``file_path`` is not an existing video file.
        """
        self.file_path = validate_video_path(str(file_path))
        self.config = config or EditorConfig()
        self.state = TransformationState(
            min_handle_fraction=self.config.min_handle_fraction,
        )
        self._analyzer = analyzer
        self._process_manager = process_manager
        self._probe: Optional[ProbeResult] = None
        self._exporting = False

    @property
    def analyzer(self) -> VideoAnalyzer:
        if self._analyzer is None:
            self._analyzer = VideoAnalyzer(self.config.ffprobe_path)
        return self._analyzer

    @property
    def process_manager(self) -> ProcessManager:
        if self._process_manager is None:
            self._process_manager = ProcessManager(self.config.ffmpeg_path)
        return self._process_manager

    @property
    def is_exporting(self) -> bool:
        return self._exporting

    @property
    def dimensions(self) -> VideoDimensions:
        return self.state.dimensions

    @property
    def rotation_metadata(self) -> int:
        """Rotation stored in the file, 0 until probed."""
        return self._probe.rotation if self._probe else 0

    # ------------------------------------------------------------------ #
    #  Probing                                                            #
    # ------------------------------------------------------------------ #

    def initialize(self) -> "VideoEditorController":
        """Probe the video so dimensions and duration are known up front."""
        self.ensure_dimensions()
        return self

    def ensure_dimensions(self) -> VideoDimensions:
        """Probe the video once and cache its display-oriented size.

        Raises:
            ProbeError: If the file has no usable video stream.
        """
        if self._probe is not None:
            return self.state.dimensions

        probe = self.analyzer.probe(self.file_path)
        if probe.width <= 0 or probe.height <= 0:
            raise ProbeError(f"No usable video stream in {self.file_path}")

        self._probe = probe
        self.state.set_dimensions(VideoDimensions(probe.width, probe.height))
        if self.state.duration <= 0 and probe.duration > 0:
            self.state.set_duration(probe.duration)
        logger.debug("Video %s is %dx%d", self.file_path, probe.width, probe.height)
        return self.state.dimensions

    # ------------------------------------------------------------------ #
    #  Export                                                             #
    # ------------------------------------------------------------------ #

    async def export(
        self,
        request: Optional[ExportRequest] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ExportResult:
        """Compile the current state and run it through ffmpeg.

        Args:
            request: Output name, format, scale, preset and custom
                arguments. Defaults to an mp4 export named after the input.
            on_progress: Called with ``ProgressInfo`` while ffmpeg runs.

        Returns:
            ExportResult with status SUCCESS, CANCELLED or FAILED.

        Raises:
            EditorBusyError: If another export is still running.
            ProbeError: If the video cannot be probed.
            ValueError: If the output directory is not usable.
        """
        if self._exporting:
            raise EditorBusyError("An export is already running")

        request = request or ExportRequest()
        self._exporting = True
        try:
            self.ensure_dimensions()
            output_dir = validate_output_dir(self.config.resolved_output_dir())
            output_path = output_path_for(self.file_path, request, output_dir)

            snapshot = self.state.snapshot()
            command = compile_export(
                snapshot,
                self.file_path,
                output_path,
                request,
                gif_fps=self.config.gif_fps,
            )
            total_duration = snapshot.trim_end - snapshot.trim_start

            self.state.freeze()
            try:
                result = await self.process_manager.execute_async(
                    command,
                    progress_callback=on_progress,
                    total_duration=total_duration if total_duration > 0 else None,
                )
            finally:
                self.state.unfreeze()
                if self.process_manager.list_active_jobs() > 0:
                    self.process_manager.cancel()
        finally:
            self._exporting = False

        return self._to_export_result(result, output_path)

    def cancel(self) -> None:
        """Ask the running export, if any, to stop."""
        if self._process_manager is not None and self._process_manager.list_active_jobs() > 0:
            logger.info("Cancelling export of %s", self.file_path)
            self._process_manager.cancel()

    def dispose(self) -> None:
        """Stop any running export and drop all state listeners."""
        self.cancel()
        self.state.clear_listeners()

    @staticmethod
    def _to_export_result(result: ProcessResult, output_path: str) -> ExportResult:
        code = result.return_code
        if code == 0:
            logger.info("Exported video to %s", output_path)
            return ExportResult(
                status=ExportStatus.SUCCESS,
                return_code=code,
                command=result.command,
                output_path=output_path,
            )
        if code == CANCEL_EXIT_CODE:
            logger.info("Export cancelled by user")
            return ExportResult(
                status=ExportStatus.CANCELLED,
                return_code=code,
                command=result.command,
            )

        logger.warning("Export failed (code %d): %s", code, result.error_message)
        return ExportResult(
            status=ExportStatus.FAILED,
            return_code=code,
            command=result.command,
            error_message=result.error_message,
        )
