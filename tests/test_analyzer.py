"""Tests for ffprobe parsing and dimension probing."""

import json
from unittest.mock import MagicMock, patch

import pytest

from video_editor.video.analyzer import ProbeError, VideoAnalyzer


def probe_output(streams, duration="10.5"):
    return json.dumps({
        "format": {"format_name": "mov,mp4,m4a", "duration": duration},
        "streams": streams,
    })


def video_stream(width, height, **extra):
    stream = {"index": 0, "codec_type": "video", "codec_name": "h264",
              "width": width, "height": height}
    stream.update(extra)
    return stream


@pytest.fixture
def analyzer():
    return VideoAnalyzer(ffprobe_path="/usr/bin/ffprobe")


def run_probe(analyzer, video, stdout, returncode=0):
    completed = MagicMock(returncode=returncode, stdout=stdout, stderr="probe error")
    with patch("subprocess.run", return_value=completed) as run_mock:
        result = analyzer.probe(video)
    return result, run_mock


class TestVideoAnalyzer:
    @patch("shutil.which", return_value=None)
    def test_missing_ffprobe_raises(self, mock_which):
        with pytest.raises(RuntimeError):
            VideoAnalyzer()

    def test_probe_dimensions_and_duration(self, analyzer, fake_video):
        stdout = probe_output([video_stream(1920, 1080), {"index": 1, "codec_type": "audio"}])

        result, run_mock = run_probe(analyzer, fake_video, stdout)

        assert (result.width, result.height) == (1920, 1080)
        assert result.duration == 10.5
        assert run_mock.call_args.args[0][0] == "/usr/bin/ffprobe"

    def test_side_data_rotation_swaps_dimensions(self, analyzer, fake_video):
        stream = video_stream(1920, 1080, side_data_list=[
            {"side_data_type": "Display Matrix", "rotation": -90},
        ])

        result, _ = run_probe(analyzer, fake_video, probe_output([stream]))

        assert (result.width, result.height) == (1080, 1920)
        assert result.rotation == -90

    def test_rotate_tag_swaps_dimensions(self, analyzer, fake_video):
        stream = video_stream(640, 480, tags={"rotate": "270"})
        result, _ = run_probe(analyzer, fake_video, probe_output([stream]))
        assert (result.width, result.height) == (480, 640)

    def test_upside_down_keeps_dimensions(self, analyzer, fake_video):
        stream = video_stream(640, 480, side_data_list=[{"rotation": 180}])
        result, _ = run_probe(analyzer, fake_video, probe_output([stream]))
        assert (result.width, result.height) == (640, 480)

    def test_largest_stream_dimensions_win(self, analyzer, fake_video):
        streams = [video_stream(320, 900), video_stream(1280, 720)]
        result, _ = run_probe(analyzer, fake_video, probe_output(streams))
        assert (result.width, result.height) == (1280, 900)

    def test_no_video_stream_raises(self, analyzer, fake_video):
        stdout = probe_output([{"index": 0, "codec_type": "audio"}])
        with pytest.raises(ProbeError):
            run_probe(analyzer, fake_video, stdout)

    def test_ffprobe_failure_raises(self, analyzer, fake_video):
        with pytest.raises(ProbeError):
            run_probe(analyzer, fake_video, "", returncode=1)

    def test_missing_file_raises(self, analyzer, tmp_path):
        with pytest.raises(FileNotFoundError):
            analyzer.probe(tmp_path / "missing.mp4")
