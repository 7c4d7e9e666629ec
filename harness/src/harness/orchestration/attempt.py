from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any

from harness.attempts.controller import AttemptController
from harness.configuration import HarnessConfig
from harness.contracts.failure import FailureType
from harness.contracts.run_request import RunRequest
from harness.contracts.run_result import AttemptResult
from harness.contracts.scene import ConnectionProbe, SceneWiring
from harness.contracts.video import VideoRecorder, VideoRecorderRequest
from harness.levels.grid import MapValidationError, validate_map
from harness.orchestration.results import failure_result, result_from_snapshot
from harness.requests.loading import RequestLoader, RequestLoadError, RequestSource
from harness.requests.validation import RequestValidationError, validate_request
from harness.runtime.artifacts import ArtifactsError, ArtifactsLayout, AttemptArtifactsService
from harness.runtime.binding import BindingError, RuntimeBindingService
from harness.runtime.encoding import FfmpegEncoder
from harness.runtime.probe import ProbeError, SocketConnectionProbe
from harness.runtime.state import AttemptRuntimeState
from harness.runtime.teardown import AttemptTeardownService
from harness.runtime.video import AttemptVideoService, FrameCaptureVideoRecorder, NoopVideoRecorder

INVALID_REQUEST_NAME = "invalid-request"
DEBUG_REQUEST_FILENAME = "last-request.json"
DEBUG_RESULT_FILENAME = "last-result.json"
WIRING_INCOMPLETE_REASON = (
    "Bootstrap wiring is incomplete: scene service, prefab provider or robot factory is missing."
)
ROBOT_SPAWN_REASON = "Failed to spawn robot."
ABORT_REASON = "Attempt aborted."
INTERRUPTED_REASON = "Attempt was interrupted before completion."

logger = logging.getLogger("maze_harness.orchestration")


def build_video_recorder(config: HarnessConfig, frame_source: Any | None) -> VideoRecorder:
    if frame_source is None:
        return NoopVideoRecorder()
    encoder = FfmpegEncoder(
        executable=config.video.encoder_path,
        project_root=config.artifacts.project_root,
        timeout_seconds=config.video.encode_timeout_seconds,
    )
    return FrameCaptureVideoRecorder(frame_source, encoder, default_fps=config.video.default_fps)


class AttemptOrchestrator:
    """
    Runs one attempt from request to result.

    `run()` is a generator: setup stages execute on the first `next()`, then it
    yields once per pending tick while the attempt is running. The caller owns
    time and drives it with `tick(dt)` between resumptions. Whatever happens, a
    result is written when an artifacts folder exists, and teardown runs when
    the generator finishes or is closed.
    """

    def __init__(
        self,
        config: HarnessConfig,
        wiring: SceneWiring | None,
        *,
        probe: ConnectionProbe | None = None,
        video_recorder: VideoRecorder | None = None,
        artifacts: AttemptArtifactsService | None = None,
        loader: RequestLoader | None = None,
        binder: RuntimeBindingService | None = None,
    ) -> None:
        self._config = config
        self._wiring = wiring
        self._probe = probe if probe is not None else SocketConnectionProbe(timeout_ms=config.probe.timeout_ms)
        if video_recorder is None:
            frame_source = wiring.frame_source if wiring is not None else None
            video_recorder = build_video_recorder(config, frame_source)
        self._video = AttemptVideoService(video_recorder)
        self._artifacts = artifacts or AttemptArtifactsService(
            config.artifacts.project_root,
            artifacts_root=config.artifacts.root,
        )
        self._loader = loader or RequestLoader(
            fallback_enabled=config.request.fallback_enabled,
            fallback_path=config.request.fallback_path,
        )
        self._binder = binder or RuntimeBindingService()
        self._teardown = AttemptTeardownService(
            wiring.scene_service if wiring is not None else None,
            self._video,
        )
        self._state = AttemptRuntimeState()
        self._source = RequestSource.NONE

    @property
    def result(self) -> AttemptResult | None:
        return self._state.result

    @property
    def layout(self) -> ArtifactsLayout | None:
        return self._state.layout

    @property
    def active_controller(self) -> AttemptController | None:
        return self._state.controller

    @property
    def video(self) -> AttemptVideoService:
        return self._video

    def tick(self, delta_seconds: float) -> None:
        controller = self._state.controller
        if controller is None or not controller.is_running:
            return

        if self._video.is_capturing and not self._video.try_capture_frame(controller):
            logger.error("Video frame capture failed")

        controller.tick(delta_seconds)
        if self._state.binding is not None:
            self._state.binding.evaluate()

    def abort(self, reason: str = ABORT_REASON) -> bool:
        controller = self._state.controller
        if controller is None:
            return False
        return controller.force_fail(FailureType.ERROR, reason or ABORT_REASON)

    def teardown(self) -> None:
        self._teardown.teardown(self._state)

    def run(self, request_paths: Sequence[str | Path] | None = None) -> Iterator[None]:
        self._state = AttemptRuntimeState()
        self._source = RequestSource.NONE
        try:
            yield from self._execute(request_paths)
        finally:
            self.teardown()

    def _execute(self, request_paths: Sequence[str | Path] | None) -> Iterator[None]:
        state = self._state

        try:
            loaded = self._loader.load(request_paths)
        except RequestLoadError as exc:
            self._source = exc.source
            logger.error("Request load failed: %s", exc)
            self._fail_invalid_request(str(exc))
            return

        request = loaded.request
        self._source = loaded.source
        state.request = request
        state.request_path = loaded.path

        try:
            state.layout = self._artifacts.create_layout(request.name)
        except ArtifactsError:
            logger.error("Failed to create artifacts layout for '%s'", request.name, exc_info=True)
            return

        try:
            self._artifacts.copy_request_json(loaded.path, state.layout)
        except ArtifactsError as exc:
            self._fail_setup(request, FailureType.ERROR, str(exc))
            return
        self._write_debug(DEBUG_REQUEST_FILENAME, request.to_payload())

        try:
            validate_request(request)
        except RequestValidationError as exc:
            self._fail_setup(request, FailureType.INVALID_INPUT, str(exc))
            return

        if self._config.probe.skip:
            logger.info("Connectivity probe skipped by config.")
        else:
            try:
                self._probe.probe(request.endpoint)
            except ProbeError as exc:
                self._fail_setup(request, FailureType.CONNECTION, str(exc))
                return

        try:
            state.grid = validate_map(request.map, cell_size=self._config.scene.cell_size)
        except MapValidationError as exc:
            self._fail_setup(request, FailureType.INVALID_INPUT, str(exc))
            return

        wiring = self._wiring
        if wiring is None or not wiring.is_complete:
            self._fail_setup(request, FailureType.ERROR, WIRING_INCOMPLETE_REASON)
            return

        try:
            state.scene = wiring.scene_service.create_scene(request.name)
            spawned = wiring.scene_service.spawn_level(state.scene, state.grid, wiring.prefabs)
            logger.info("Spawned %d level cells for '%s'", spawned, request.name)
            state.robot = wiring.scene_service.spawn_robot(
                state.scene,
                wiring.robot_factory,
                state.grid,
                request.start_rotation_degrees,
            )
        except Exception as exc:
            logger.exception("Scene preparation failed for '%s'", request.name)
            self._fail_setup(request, FailureType.ERROR, f"Scene preparation failed: {exc}")
            return

        if state.robot is None:
            self._fail_setup(request, FailureType.ERROR, ROBOT_SPAWN_REASON)
            return

        controller = AttemptController(request.time_limit_seconds)
        controller.start()
        state.controller = controller

        try:
            state.binding = self._binder.bind(state.scene, state.grid, state.robot, controller)
        except BindingError as exc:
            logger.error("Runtime binding failed: %s", exc)
            controller.force_fail(FailureType.ERROR, str(exc))

        if controller.is_running and self._config.video.enabled:
            self._video.try_start(
                controller,
                VideoRecorderRequest(
                    frames_dir=state.layout.frames_dir,
                    output_path=state.layout.video_path,
                    width=self._config.video.width,
                    height=self._config.video.height,
                ),
            )

        try:
            while controller.is_running:
                yield
        except GeneratorExit:
            controller.force_fail(FailureType.ERROR, INTERRUPTED_REASON)
            raise
        finally:
            self._finish(request, controller)

    def _finish(self, request: RunRequest, controller: AttemptController) -> None:
        if self._video.is_capturing:
            self._video.try_stop(controller, controller.elapsed_seconds)

        layout = self._state.layout
        artifacts = self._artifacts.artifact_paths(layout, include_video=self._config.video.enabled)
        result = result_from_snapshot(request.name, controller.snapshot(), artifacts)
        self._write_result(result)
        logger.info(
            "Attempt '%s' finished: %s (%s) %s",
            result.name,
            result.status,
            result.failure_type,
            result.reason,
        )

    def _fail_invalid_request(self, reason: str) -> None:
        try:
            self._state.layout = self._artifacts.create_layout(INVALID_REQUEST_NAME)
        except ArtifactsError:
            logger.error("Failed to create artifacts layout for invalid input", exc_info=True)
            return
        artifacts = self._artifacts.artifact_paths(self._state.layout, include_video=self._config.video.enabled)
        self._write_result(
            failure_result(INVALID_REQUEST_NAME, FailureType.INVALID_INPUT, reason, 0.0, artifacts)
        )

    def _fail_setup(self, request: RunRequest, failure_type: FailureType, reason: str) -> None:
        logger.error("Attempt '%s' failed during setup (%s): %s", request.name, failure_type, reason)
        artifacts = self._artifacts.artifact_paths(self._state.layout, include_video=self._config.video.enabled)
        self._write_result(failure_result(request.name, failure_type, reason, 0.0, artifacts))

    def _write_result(self, result: AttemptResult) -> None:
        self._state.result = result
        if self._state.layout is None:
            return
        try:
            self._artifacts.write_result_json(result, self._state.layout)
        except ArtifactsError:
            logger.error("Failed to write result.json", exc_info=True)
        self._write_debug(DEBUG_RESULT_FILENAME, result.to_payload())

    def _write_debug(self, file_name: str, payload: Any) -> None:
        output_dir = self._config.request.debug_output_path
        if self._source is not RequestSource.FALLBACK or output_dir is None:
            return
        try:
            self._artifacts.write_debug_json(file_name, payload, output_dir)
        except ArtifactsError:
            logger.warning("Failed to write debug copy %s", file_name, exc_info=True)
