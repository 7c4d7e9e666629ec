from .attempt import AttemptOrchestrator, build_video_recorder
from .registry import DictSceneProviderRegistry, SceneProviderNotFoundError

__all__ = [
    "AttemptOrchestrator",
    "build_video_recorder",
    "DictSceneProviderRegistry",
    "SceneProviderNotFoundError",
]
