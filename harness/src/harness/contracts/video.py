from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class VideoRecorderRequest:
    """Input contract for frame capture and external encoding."""

    frames_dir: Path | None
    output_path: Path | None
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class VideoRecorderResult:
    """Output contract for stop-and-encode."""

    succeeded: bool
    captured_frames: int
    frames_per_second: float
    error: str = ""


@runtime_checkable
class FrameSource(Protocol):
    """Produces one image of the current scene."""

    def write_frame(self, path: Path, *, width: int, height: int) -> None:
        """Write a PNG frame to `path`."""
        ...


@runtime_checkable
class VideoEncoder(Protocol):
    def encode(self, *, input_pattern: str, frames_per_second: float, output_path: Path) -> None:
        """Encode a numbered frame sequence; raise EncoderError on failure."""
        ...


@runtime_checkable
class VideoRecorder(Protocol):
    """
    Port for attempt video recording: frame capture to a directory plus an
    external encode to a video file.
    """

    @property
    def is_capturing(self) -> bool: ...

    def start_capture(self, request: VideoRecorderRequest) -> None:
        """Begin capturing; raise VideoRecorderError on failure."""
        ...

    def capture_frame(self) -> None:
        """Capture one frame; raise VideoRecorderError on failure."""
        ...

    def stop_and_encode(self, duration_seconds: float) -> VideoRecorderResult:
        """Stop capturing and encode; never raises."""
        ...
