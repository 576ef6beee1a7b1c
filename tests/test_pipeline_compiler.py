"""Tests for compiling editor state into an ffmpeg command."""

import pytest

from video_editor.editor.geometry import FULL_RECT, UnitRect, VideoDimensions
from video_editor.editor.state import RotateDirection, TransformationState
from video_editor.pipeline_compiler import (
    compile_export,
    crop_filter,
    output_path_for,
    rotation_filters,
    scale_filter,
)
from video_editor.video.formats import ExportPreset, ExportRequest


@pytest.fixture
def state():
    return TransformationState(duration=10.0, dimensions=VideoDimensions(1000, 800))


def compile_args(state, request=None):
    command = compile_export(
        state.snapshot(),
        "/videos/clip.mp4",
        "/exports/clip.mp4",
        request or ExportRequest(),
    )
    return command.to_args()


class TestCropFilter:
    def test_full_rect_emits_nothing(self):
        assert crop_filter(FULL_RECT, VideoDimensions(1000, 800)) is None

    def test_centered_half(self):
        rect = UnitRect.from_bounds(0.25, 0.25, 0.75, 0.75)
        assert crop_filter(rect, VideoDimensions(1000, 800)).to_string() == "crop=500:400:250:200"

    def test_edges_are_floored(self):
        rect = UnitRect.from_bounds(0.0, 0.0, 0.3333, 1.0)
        # 1000 * 0.3333 = 333.3 -> 333
        assert crop_filter(rect, VideoDimensions(1000, 800)).to_string() == "crop=333:800:0:0"

    def test_right_edge_at_one(self):
        rect = UnitRect.from_bounds(0.5, 0.0, 1.0, 1.0)
        assert crop_filter(rect, VideoDimensions(1001, 801)).to_string() == "crop=501:801:500:0"

    def test_unknown_dimensions_raise(self):
        rect = UnitRect.from_bounds(0.25, 0.25, 0.75, 0.75)
        with pytest.raises(ValueError):
            crop_filter(rect, VideoDimensions())


class TestScaleAndRotation:
    def test_unit_scale_emits_nothing(self):
        assert scale_filter(1.0) is None

    def test_half_scale(self):
        assert scale_filter(0.5).to_string() == "scale=iw*0.5:ih*0.5"

    def test_no_rotation(self):
        assert rotation_filters(0) == []

    @pytest.mark.parametrize("rotation,count", [(90, 1), (180, 2), (270, 3)])
    def test_transpose_per_quarter_turn(self, rotation, count):
        filters = rotation_filters(rotation)
        assert [f.to_string() for f in filters] == ["transpose=1"] * count


class TestCompileExport:
    """Full command compilation."""

    def test_untouched_state_has_no_filters_or_trim(self, state):
        args = compile_args(state)
        assert args == ["ffmpeg", "-i", "/videos/clip.mp4", "-y", "/exports/clip.mp4"]

    def test_end_to_end_scenario(self, state):
        state.set_trim_bounds(0.2, 0.8)
        state.set_crop_rect(UnitRect.from_bounds(0.25, 0.25, 0.75, 0.75))
        state.rotate(RotateDirection.RIGHT)
        state.rotate(RotateDirection.RIGHT)

        args = compile_args(state, ExportRequest(scale=0.5))

        vf = args[args.index("-filter:v") + 1]
        assert vf == "crop=500:400:250:200,scale=iw*0.5:ih*0.5,transpose=1,transpose=1"
        assert args[args.index("-ss") + 1] == "2.000"
        assert args[args.index("-to") + 1] == "8.000"
        assert args.index("-ss") < args.index("-to")

    def test_argument_order(self, state):
        state.set_trim_bounds(0.1, 0.5)
        state.rotate()
        request = ExportRequest(
            format="mp4",
            custom_instruction="-an -c:v libx264",
            preset=ExportPreset.FAST,
        )

        args = compile_args(state, request)

        assert args == [
            "ffmpeg",
            "-i", "/videos/clip.mp4",
            "-an", "-c:v", "libx264",
            "-filter:v", "transpose=1",
            "-preset", "fast",
            "-ss", "1.000", "-to", "5.000",
            "-y",
            "/exports/clip.mp4",
        ]

    def test_preset_none_emits_nothing(self, state):
        args = compile_args(state, ExportRequest(preset=ExportPreset.NONE))
        assert "-preset" not in args

    def test_full_trim_emits_no_trim_flags(self, state):
        args = compile_args(state)
        assert "-ss" not in args
        assert "-to" not in args

    def test_trim_skipped_without_duration(self):
        state = TransformationState(dimensions=VideoDimensions(1000, 800))
        state.set_trim_bounds(0.2, 0.8)
        args = compile_args(state)
        assert "-ss" not in args

    def test_gif_adds_fps_and_loop(self, state):
        state.set_crop_rect(UnitRect.from_bounds(0.0, 0.0, 0.5, 0.5))
        args = compile_args(state, ExportRequest(format="gif"))

        assert args[args.index("-filter:v") + 1] == "crop=500:400:0:0,fps=10"
        assert args[args.index("-loop") + 1] == "0"
        assert args.index("-filter:v") < args.index("-loop")

    def test_gif_fps_is_configurable(self, state):
        command = compile_export(
            state.snapshot(), "in.mp4", "out.gif", ExportRequest(format="gif"), gif_fps=15
        )
        assert command.filter_string == "fps=15"

    def test_crop_uses_pre_rotation_coordinates(self, state):
        state.set_crop_rect(UnitRect.from_bounds(0.0, 0.0, 0.5, 1.0))
        state.rotate()
        args = compile_args(state)
        assert args[args.index("-filter:v") + 1] == "crop=500:800:0:0,transpose=1"

    def test_to_string_quotes_paths(self, state):
        command = compile_export(
            state.snapshot(), "/videos/my clip.mp4", "/exports/out.mp4", ExportRequest()
        )
        assert "'/videos/my clip.mp4'" in command.to_string()


class TestOutputPath:
    def test_defaults_to_input_stem(self):
        path = output_path_for("/videos/holiday.final.mov", ExportRequest(), "/exports")
        assert path == "/exports/holiday.mp4"

    def test_custom_name_and_format(self):
        request = ExportRequest(name="short", format="gif")
        assert output_path_for("/videos/clip.mp4", request, "/exports") == "/exports/short.gif"
