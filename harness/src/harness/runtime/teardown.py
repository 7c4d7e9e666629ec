from __future__ import annotations

import logging

from harness.contracts.scene import SceneService
from harness.runtime.state import AttemptRuntimeState
from harness.runtime.video import AttemptVideoService

logger = logging.getLogger("maze_harness.teardown")


class AttemptTeardownService:
    """
    Releases what an attempt acquired, in reverse order of acquisition.

    Safe to call any number of times and with any subset of the state
    populated. The result and artifacts layout survive teardown so callers can still
    read them.
    """

    def __init__(self, scene_service: SceneService | None, video: AttemptVideoService) -> None:
        self._scene_service = scene_service
        self._video = video

    def teardown(self, state: AttemptRuntimeState) -> None:
        if state.binding is not None:
            state.binding.detach()
            state.binding = None

        if self._video.is_capturing:
            elapsed = state.controller.elapsed_seconds if state.controller is not None else 0.0
            self._video.try_stop(state.controller, elapsed)

        if state.scene is not None and self._scene_service is not None:
            scene, state.scene = state.scene, None
            try:
                self._scene_service.unload(scene)
            except Exception:
                logger.warning("Failed to unload scene '%s'", scene.name, exc_info=True)

        state.clear()
