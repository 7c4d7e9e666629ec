from __future__ import annotations

import pytest

from harness.attempts.controller import AttemptController, AttemptStatus
from harness.contracts.failure import FailureType
from harness.contracts.video import VideoRecorderRequest
from harness.runtime.video import (
    AttemptVideoService,
    FrameCaptureVideoRecorder,
    NoopVideoRecorder,
    RecorderState,
    VideoRecorderError,
)
from harness.testkit.fakes import FakeFrameSource, FakeVideoEncoder, FakeVideoRecorder


def _request(tmp_path) -> VideoRecorderRequest:
    return VideoRecorderRequest(
        frames_dir=tmp_path / "frames",
        output_path=tmp_path / "video.mp4",
        width=64,
        height=48,
    )


def test_recorder_captures_numbered_frames_and_encodes(tmp_path):
    source = FakeFrameSource()
    encoder = FakeVideoEncoder()
    recorder = FrameCaptureVideoRecorder(source, encoder)

    recorder.start_capture(_request(tmp_path))
    for _ in range(3):
        recorder.capture_frame()
    result = recorder.stop_and_encode(1.5)

    assert [call.kwargs["path"].name for call in source.calls] == [
        "frame-000000.png",
        "frame-000001.png",
        "frame-000002.png",
    ]
    assert result.succeeded
    assert result.captured_frames == 3
    assert result.frames_per_second == 2.0
    assert encoder.calls[0].kwargs["input_pattern"] == str(tmp_path / "frames" / "frame-%06d.png")
    assert encoder.calls[0].kwargs["frames_per_second"] == 2.0
    assert (tmp_path / "video.mp4").exists()
    assert not (tmp_path / "frames").exists()
    assert recorder.state is RecorderState.STOPPED


def test_zero_duration_encodes_at_default_fps(tmp_path):
    encoder = FakeVideoEncoder()
    recorder = FrameCaptureVideoRecorder(FakeFrameSource(), encoder)
    recorder.start_capture(_request(tmp_path))
    recorder.capture_frame()

    result = recorder.stop_and_encode(0.0)

    assert result.succeeded
    assert encoder.calls[0].kwargs["frames_per_second"] == 30.0


def test_zero_frames_never_invokes_encoder(tmp_path):
    encoder = FakeVideoEncoder()
    recorder = FrameCaptureVideoRecorder(FakeFrameSource(), encoder)
    recorder.start_capture(_request(tmp_path))

    result = recorder.stop_and_encode(2.0)

    assert not result.succeeded
    assert result.error == "No frames were captured."
    assert encoder.calls == []
    assert recorder.state is RecorderState.STOPPED


def test_missing_output_path_never_invokes_encoder(tmp_path):
    encoder = FakeVideoEncoder()
    recorder = FrameCaptureVideoRecorder(FakeFrameSource(), encoder)
    recorder.start_capture(
        VideoRecorderRequest(frames_dir=tmp_path / "frames", output_path=None, width=8, height=8)
    )
    recorder.capture_frame()

    result = recorder.stop_and_encode(1.0)

    assert not result.succeeded
    assert "Output video path" in result.error
    assert encoder.calls == []


def test_encoder_failure_keeps_frames_and_reports_error(tmp_path):
    recorder = FrameCaptureVideoRecorder(FakeFrameSource(), FakeVideoEncoder(error="exitCode=1"))
    recorder.start_capture(_request(tmp_path))
    recorder.capture_frame()

    result = recorder.stop_and_encode(1.0)

    assert not result.succeeded
    assert result.error == "exitCode=1"
    assert (tmp_path / "frames" / "frame-000000.png").exists()


def test_capture_requires_active_session(tmp_path):
    recorder = FrameCaptureVideoRecorder(FakeFrameSource(), FakeVideoEncoder())

    with pytest.raises(VideoRecorderError, match="not active"):
        recorder.capture_frame()

    recorder.start_capture(_request(tmp_path))
    recorder.stop_and_encode(0.0)
    with pytest.raises(VideoRecorderError, match="not active"):
        recorder.capture_frame()


def test_start_failure_leaves_recorder_idle(tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("x", encoding="utf-8")
    recorder = FrameCaptureVideoRecorder(FakeFrameSource(), FakeVideoEncoder())

    with pytest.raises(VideoRecorderError, match="frames directory"):
        recorder.start_capture(
            VideoRecorderRequest(frames_dir=blocker / "frames", output_path=tmp_path / "v.mp4", width=8, height=8)
        )
    assert recorder.state is RecorderState.IDLE
    assert not recorder.is_capturing


def test_frame_source_failure_raises_recorder_error(tmp_path):
    recorder = FrameCaptureVideoRecorder(FakeFrameSource(fail_after=0), FakeVideoEncoder())
    recorder.start_capture(_request(tmp_path))

    with pytest.raises(VideoRecorderError, match="Failed to capture frame"):
        recorder.capture_frame()
    assert recorder.captured_frames == 0


def test_unexpected_encoder_exception_becomes_failed_result(tmp_path):
    recorder = FrameCaptureVideoRecorder(FakeFrameSource(), FakeVideoEncoder(fault=OSError("disk full")))
    recorder.start_capture(_request(tmp_path))
    recorder.capture_frame()

    result = recorder.stop_and_encode(1.0)

    assert not result.succeeded
    assert result.error == "Video encoding failed. disk full"
    assert recorder.state is RecorderState.STOPPED


def test_unexpected_frame_source_exception_raises_recorder_error(tmp_path):
    source = FakeFrameSource(fail_after=0, fault=TypeError("bad frame buffer"))
    recorder = FrameCaptureVideoRecorder(source, FakeVideoEncoder())
    recorder.start_capture(_request(tmp_path))

    with pytest.raises(VideoRecorderError, match="bad frame buffer"):
        recorder.capture_frame()


def test_noop_recorder_fails_every_operation(tmp_path):
    recorder = NoopVideoRecorder()

    with pytest.raises(VideoRecorderError, match="not configured"):
        recorder.start_capture(_request(tmp_path))
    with pytest.raises(VideoRecorderError, match="not configured"):
        recorder.capture_frame()
    result = recorder.stop_and_encode(1.0)
    assert not result.succeeded
    assert result.error == "Video recorder is not configured."


def test_video_service_start_failure_force_fails_attempt(tmp_path):
    controller = AttemptController(10.0)
    controller.start()
    service = AttemptVideoService(FakeVideoRecorder(start_error="camera missing"))

    assert not service.try_start(controller, _request(tmp_path))

    assert controller.failure_type is FailureType.VIDEO_ERROR
    assert controller.reason == "camera missing"


def test_video_service_defaults_to_noop_recorder(tmp_path):
    controller = AttemptController(10.0)
    controller.start()
    service = AttemptVideoService()

    assert not service.try_start(controller, _request(tmp_path))
    assert controller.reason == "Video recorder is not configured."


def test_video_service_blank_error_uses_generic_reason():
    controller = AttemptController(10.0)
    controller.start()
    service = AttemptVideoService(FakeVideoRecorder(stop_error="  "))

    result = service.try_stop(controller, 1.0)

    assert not result.succeeded
    assert controller.reason == "Video recording failed."


def test_video_service_stop_failure_does_not_override_pass():
    controller = AttemptController(10.0)
    controller.start()
    controller.try_complete_pass("Robot reached finish area.")
    service = AttemptVideoService(FakeVideoRecorder(stop_error="encode failed"))

    result = service.try_stop(controller, 1.0)

    assert not result.succeeded
    assert controller.status is AttemptStatus.PASS
    assert controller.failure_type is FailureType.NONE
