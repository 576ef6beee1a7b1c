"""Shared fixtures for the video editor tests.

Sets up sys.path so `from video_editor...` imports work when running
pytest from the project root, and provides fake collaborators so no
ffmpeg or ffprobe binary is needed.
"""

import os
import sys
from unittest.mock import AsyncMock, MagicMock

import pytest

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from video_editor.config import EditorConfig  # noqa: E402
from video_editor.executor.process_manager import ProcessResult  # noqa: E402
from video_editor.video.analyzer import ProbeResult  # noqa: E402


@pytest.fixture
def fake_video(tmp_path):
    """An empty file with a video extension."""
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 32)
    return path


@pytest.fixture
def editor_config(tmp_path):
    return EditorConfig(output_dir=str(tmp_path / "exports"))


@pytest.fixture
def mock_analyzer():
    """Probe reporting a 1000x800, 10 second video."""
    analyzer = MagicMock()
    analyzer.probe.return_value = ProbeResult(width=1000, height=800, rotation=0, duration=10.0)
    return analyzer


def make_process_result(return_code: int = 0, error_message=None) -> ProcessResult:
    return ProcessResult(
        success=return_code == 0,
        return_code=return_code,
        stdout="",
        stderr=error_message or "",
        command="ffmpeg -i clip.mp4 -y out.mp4",
        error_message=error_message,
        cancelled=return_code == 255,
    )


@pytest.fixture
def mock_process_manager():
    """Engine whose runs succeed immediately."""
    manager = MagicMock()
    manager.execute_async = AsyncMock(return_value=make_process_result(0))
    manager.list_active_jobs.return_value = 0
    return manager


@pytest.fixture
def process_result():
    """Factory for engine results with a given exit code."""
    return make_process_result
