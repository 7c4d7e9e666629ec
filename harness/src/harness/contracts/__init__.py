from .failure import FailureType, normalize_failure
from .run_request import RunRequest
from .run_result import AttemptArtifacts, AttemptResult, ResultStatus
from .scene import (
    BoundarySensor,
    ConnectionProbe,
    PrefabProvider,
    RobotFactory,
    RobotHandle,
    SceneHandle,
    SceneService,
    SceneWiring,
)
from .video import (
    FrameSource,
    VideoEncoder,
    VideoRecorder,
    VideoRecorderRequest,
    VideoRecorderResult,
)

__all__ = [
    "FailureType",
    "normalize_failure",
    "RunRequest",
    "AttemptArtifacts",
    "AttemptResult",
    "ResultStatus",
    "BoundarySensor",
    "ConnectionProbe",
    "PrefabProvider",
    "RobotFactory",
    "RobotHandle",
    "SceneHandle",
    "SceneService",
    "SceneWiring",
    "FrameSource",
    "VideoEncoder",
    "VideoRecorder",
    "VideoRecorderRequest",
    "VideoRecorderResult",
]
