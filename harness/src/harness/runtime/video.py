from __future__ import annotations

import logging
import shutil
from enum import Enum
from pathlib import Path

from harness.attempts.controller import AttemptController
from harness.contracts.failure import FailureType
from harness.contracts.video import (
    FrameSource,
    VideoEncoder,
    VideoRecorder,
    VideoRecorderRequest,
    VideoRecorderResult,
)
from harness.runtime.encoding import EncoderError

DEFAULT_FRAMES_PER_SECOND = 30.0
FRAME_FILENAME_PATTERN = "frame-%06d.png"
_GENERIC_FAILURE = "Video recording failed."
_NOT_CONFIGURED = "Video recorder is not configured."

logger = logging.getLogger("maze_harness.video")


class VideoRecorderError(RuntimeError):
    pass


class RecorderState(Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    STOPPED = "stopped"


def frame_filename(index: int) -> str:
    return FRAME_FILENAME_PATTERN % index


class FrameCaptureVideoRecorder:
    """
    Captures numbered PNG frames into the attempt's frames folder and hands
    them to an external encoder when the attempt stops.

    Idle -> Capturing -> Stopped. Stopping always lands in Stopped so that a
    failed encode cannot be followed by more capture calls.
    """

    def __init__(
        self,
        frame_source: FrameSource,
        encoder: VideoEncoder,
        *,
        default_fps: float = DEFAULT_FRAMES_PER_SECOND,
    ) -> None:
        self._frame_source = frame_source
        self._encoder = encoder
        self._default_fps = default_fps if default_fps > 0 else DEFAULT_FRAMES_PER_SECOND
        self.state = RecorderState.IDLE
        self.frames_dir: Path | None = None
        self.output_path: Path | None = None
        self.width = 0
        self.height = 0
        self.frame_index = 0
        self.captured_frames = 0

    @property
    def is_capturing(self) -> bool:
        return self.state is RecorderState.CAPTURING

    def start_capture(self, request: VideoRecorderRequest) -> None:
        if self.is_capturing:
            raise VideoRecorderError("Frame capture is already active.")
        if request.frames_dir is None or not str(request.frames_dir).strip():
            raise VideoRecorderError("Frames directory path is empty.")

        try:
            request.frames_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise VideoRecorderError(
                f"Failed to create frames directory '{request.frames_dir}'. {exc}"
            ) from exc

        self.frames_dir = request.frames_dir
        self.output_path = request.output_path
        self.width = request.width
        self.height = request.height
        self.frame_index = 0
        self.captured_frames = 0
        self.state = RecorderState.CAPTURING

    def capture_frame(self) -> None:
        if not self.is_capturing or self.frames_dir is None:
            raise VideoRecorderError("Frame capture is not active.")

        path = self.frames_dir / frame_filename(self.frame_index)
        try:
            self._frame_source.write_frame(path, width=self.width, height=self.height)
        except Exception as exc:
            raise VideoRecorderError(f"Failed to capture frame '{path}'. {exc}") from exc
        self.frame_index += 1
        self.captured_frames += 1

    def stop_and_encode(self, duration_seconds: float) -> VideoRecorderResult:
        self.state = RecorderState.STOPPED

        fps = self.captured_frames / duration_seconds if duration_seconds > 0 else 0.0
        if self.output_path is None or not str(self.output_path).strip():
            return VideoRecorderResult(False, self.captured_frames, fps, "Output video path is empty.")
        if self.captured_frames <= 0 or self.frames_dir is None:
            return VideoRecorderResult(False, self.captured_frames, fps, "No frames were captured.")

        encode_fps = fps if fps > 0 else self._default_fps
        try:
            self._encoder.encode(
                input_pattern=str(self.frames_dir / FRAME_FILENAME_PATTERN),
                frames_per_second=encode_fps,
                output_path=self.output_path,
            )
        except EncoderError as exc:
            return VideoRecorderResult(False, self.captured_frames, encode_fps, str(exc))
        except Exception as exc:
            logger.error("Video encoder raised unexpectedly", exc_info=True)
            return VideoRecorderResult(
                False, self.captured_frames, encode_fps, f"Video encoding failed. {exc}"
            )

        try:
            shutil.rmtree(self.frames_dir, ignore_errors=False)
        except FileNotFoundError:
            pass
        except OSError as exc:
            return VideoRecorderResult(
                False,
                self.captured_frames,
                encode_fps,
                f"Failed to cleanup frames directory '{self.frames_dir}'. {exc}",
            )

        return VideoRecorderResult(True, self.captured_frames, encode_fps)


class NoopVideoRecorder:
    """Recorder used when no frame source is wired; every call fails."""

    def __init__(self) -> None:
        self.state = RecorderState.IDLE

    @property
    def is_capturing(self) -> bool:
        return False

    def start_capture(self, request: VideoRecorderRequest) -> None:
        raise VideoRecorderError(_NOT_CONFIGURED)

    def capture_frame(self) -> None:
        raise VideoRecorderError(_NOT_CONFIGURED)

    def stop_and_encode(self, duration_seconds: float) -> VideoRecorderResult:
        self.state = RecorderState.STOPPED
        return VideoRecorderResult(False, 0, 0.0, _NOT_CONFIGURED)


class AttemptVideoService:
    """Owns the recorder for one attempt and maps its failures to VideoError."""

    def __init__(self, recorder: VideoRecorder | None = None) -> None:
        self._recorder: VideoRecorder = recorder if recorder is not None else NoopVideoRecorder()

    @property
    def is_capturing(self) -> bool:
        return self._recorder.is_capturing

    def try_start(self, controller: AttemptController | None, request: VideoRecorderRequest) -> bool:
        try:
            self._recorder.start_capture(request)
        except VideoRecorderError as exc:
            _apply_video_failure(controller, str(exc))
            return False
        return True

    def try_capture_frame(self, controller: AttemptController | None) -> bool:
        try:
            self._recorder.capture_frame()
        except VideoRecorderError as exc:
            _apply_video_failure(controller, str(exc))
            return False
        return True

    def try_stop(
        self, controller: AttemptController | None, duration_seconds: float
    ) -> VideoRecorderResult:
        try:
            result = self._recorder.stop_and_encode(duration_seconds)
        except Exception as exc:
            logger.error("Video recorder raised while stopping", exc_info=True)
            result = VideoRecorderResult(False, 0, 0.0, f"Video encoding failed. {exc}")
        if not result.succeeded:
            _apply_video_failure(controller, result.error)
        return result


def _apply_video_failure(controller: AttemptController | None, error: str) -> None:
    message = error.strip() if error and error.strip() else _GENERIC_FAILURE
    logger.error("Video recording failed: %s", message)
    if controller is None:
        return
    if not controller.force_fail(FailureType.VIDEO_ERROR, message):
        logger.warning("Attempt already completed; keeping its outcome over the video failure")
