from .artifacts import ArtifactsError, ArtifactsLayout, AttemptArtifactsService
from .binding import BindingError, RuntimeBindingHandle, RuntimeBindingService
from .encoding import EncoderError, FfmpegEncoder, resolve_encoder_executable
from .probe import EndpointError, ProbeError, SocketConnectionProbe, parse_endpoint
from .state import AttemptRuntimeState
from .teardown import AttemptTeardownService
from .video import (
    AttemptVideoService,
    FrameCaptureVideoRecorder,
    NoopVideoRecorder,
    RecorderState,
    VideoRecorderError,
)

__all__ = [
    "ArtifactsError",
    "ArtifactsLayout",
    "AttemptArtifactsService",
    "BindingError",
    "RuntimeBindingHandle",
    "RuntimeBindingService",
    "EncoderError",
    "FfmpegEncoder",
    "resolve_encoder_executable",
    "EndpointError",
    "ProbeError",
    "SocketConnectionProbe",
    "parse_endpoint",
    "AttemptRuntimeState",
    "AttemptTeardownService",
    "AttemptVideoService",
    "FrameCaptureVideoRecorder",
    "NoopVideoRecorder",
    "RecorderState",
    "VideoRecorderError",
]
