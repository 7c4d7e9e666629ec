from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from harness.contracts.scene import PerimeterCallback, SceneWiring, Unsubscribe
from harness.contracts.video import VideoRecorderRequest, VideoRecorderResult
from harness.levels.grid import CellKind, Grid
from harness.runtime.encoding import EncoderError
from harness.runtime.probe import ProbeError
from harness.runtime.video import VideoRecorderError

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@dataclass(frozen=True, slots=True)
class FakeCall:
    """Record of a collaborator call for assertions in tests."""

    name: str
    kwargs: dict[str, Any]


class CallLog:
    def __init__(self) -> None:
        self._calls: list[FakeCall] = []

    @property
    def calls(self) -> list[FakeCall]:
        """Return the recorded calls in order."""
        return list(self._calls)

    @property
    def names(self) -> list[str]:
        return [call.name for call in self._calls]

    def record(self, name: str, **kwargs: Any) -> None:
        self._calls.append(FakeCall(name=name, kwargs=kwargs))


class FakeBoundarySensor:
    def __init__(self) -> None:
        self._callbacks: list[PerimeterCallback] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def subscribe(self, callback: PerimeterCallback) -> Unsubscribe:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def fire(self, actor: Any) -> None:
        for callback in list(self._callbacks):
            callback(actor)


@dataclass
class FakeSceneHandle:
    name: str
    boundary_sensor: FakeBoundarySensor | None = field(default_factory=FakeBoundarySensor)
    spawned: list[tuple[CellKind, tuple[float, float]]] = field(default_factory=list)
    robots: list[Any] = field(default_factory=list)
    unloaded: bool = False


class ScriptedRobot:
    """Robot moving in a straight line at a fixed velocity."""

    def __init__(self, x: float, z: float, *, velocity: tuple[float, float] = (0.0, 0.0)) -> None:
        self.x = x
        self.z = z
        self.velocity = velocity

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.z)

    def place(self, x: float, z: float) -> None:
        self.x = x
        self.z = z

    def step(self, delta_seconds: float) -> None:
        self.x += self.velocity[0] * delta_seconds
        self.z += self.velocity[1] * delta_seconds


class FakeRobotFactory:
    def __init__(self, *, velocity: tuple[float, float] = (0.0, 0.0), fail: bool = False) -> None:
        self.velocity = velocity
        self.fail = fail
        self.robots: list[ScriptedRobot] = []

    def create(self, *, x: float, z: float, rotation_degrees: float) -> ScriptedRobot | None:
        if self.fail:
            return None
        robot = ScriptedRobot(x, z, velocity=self.velocity)
        self.robots.append(robot)
        return robot

    def step_all(self, delta_seconds: float) -> None:
        for robot in self.robots:
            robot.step(delta_seconds)


class FakePrefabs:
    def prefab_for(self, cell_kind: CellKind) -> Any | None:
        if cell_kind is CellKind.EMPTY:
            return None
        return cell_kind.name.lower()

    def ground_with_bounds(self) -> Any | None:
        return "ground"


class FakeSceneService(CallLog):
    """In-memory SceneService recording every lifecycle call."""

    def __init__(self, *, with_sensor: bool = True, fail_on: str | None = None) -> None:
        super().__init__()
        self.with_sensor = with_sensor
        self.fail_on = fail_on
        self.scenes: list[FakeSceneHandle] = []

    def create_scene(self, request_name: str) -> FakeSceneHandle:
        self.record("create_scene", request_name=request_name)
        self._maybe_fail("create_scene")
        scene = FakeSceneHandle(
            name=request_name,
            boundary_sensor=FakeBoundarySensor() if self.with_sensor else None,
        )
        self.scenes.append(scene)
        return scene

    def spawn_level(self, scene: FakeSceneHandle, grid: Grid, prefabs: Any) -> int:
        self.record("spawn_level", scene=scene.name)
        self._maybe_fail("spawn_level")
        for row, col, kind in grid.iter_cells():
            if prefabs.prefab_for(kind) is not None:
                scene.spawned.append((kind, grid.cell_center(row, col)))
        return len(scene.spawned)

    def spawn_robot(
        self,
        scene: FakeSceneHandle,
        factory: Any,
        grid: Grid,
        start_rotation_degrees: float,
    ) -> Any:
        self.record("spawn_robot", scene=scene.name, rotation=start_rotation_degrees)
        self._maybe_fail("spawn_robot")
        x, z = grid.cell_center(*grid.start)
        robot = factory.create(x=x, z=z, rotation_degrees=start_rotation_degrees)
        if robot is not None:
            scene.robots.append(robot)
        return robot

    def unload(self, scene: FakeSceneHandle) -> None:
        self.record("unload", scene=scene.name)
        scene.unloaded = True

    def _maybe_fail(self, stage: str) -> None:
        if self.fail_on == stage:
            raise RuntimeError(f"{stage} failed")


class FakeConnectionProbe(CallLog):
    def __init__(self, *, error: str | None = None) -> None:
        super().__init__()
        self.error = error

    def probe(self, endpoint: str) -> None:
        self.record("probe", endpoint=endpoint)
        if self.error is not None:
            raise ProbeError(self.error)


class FakeFrameSource(CallLog):
    def __init__(self, *, fail_after: int | None = None, fault: Exception | None = None) -> None:
        super().__init__()
        self.fail_after = fail_after
        self.fault = fault

    def write_frame(self, path: Path, *, width: int, height: int) -> None:
        if self.fail_after is not None and len(self.calls) >= self.fail_after:
            raise self.fault or OSError("frame source unavailable")
        self.record("write_frame", path=path, width=width, height=height)
        path.write_bytes(PNG_SIGNATURE)


class FakeVideoEncoder(CallLog):
    """Writes a placeholder output file instead of running an encoder."""

    def __init__(self, *, error: str | None = None, fault: Exception | None = None) -> None:
        super().__init__()
        self.error = error
        self.fault = fault

    def encode(self, *, input_pattern: str, frames_per_second: float, output_path: Path) -> None:
        self.record(
            "encode",
            input_pattern=input_pattern,
            frames_per_second=frames_per_second,
            output_path=output_path,
        )
        if self.fault is not None:
            raise self.fault
        if self.error is not None:
            raise EncoderError(self.error)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(b"fake-mp4")


class FakeVideoRecorder(CallLog):
    """Scripted VideoRecorder; failures are configured per operation."""

    def __init__(
        self,
        *,
        start_error: str | None = None,
        capture_error: str | None = None,
        stop_error: str | None = None,
    ) -> None:
        super().__init__()
        self.start_error = start_error
        self.capture_error = capture_error
        self.stop_error = stop_error
        self._capturing = False
        self.frames = 0

    @property
    def is_capturing(self) -> bool:
        return self._capturing

    def start_capture(self, request: VideoRecorderRequest) -> None:
        self.record("start_capture", request=request)
        if self.start_error is not None:
            raise VideoRecorderError(self.start_error)
        self._capturing = True

    def capture_frame(self) -> None:
        self.record("capture_frame")
        if self.capture_error is not None:
            raise VideoRecorderError(self.capture_error)
        self.frames += 1

    def stop_and_encode(self, duration_seconds: float) -> VideoRecorderResult:
        self.record("stop_and_encode", duration_seconds=duration_seconds)
        self._capturing = False
        fps = self.frames / duration_seconds if duration_seconds > 0 else 0.0
        if self.stop_error is not None:
            return VideoRecorderResult(False, self.frames, fps, self.stop_error)
        return VideoRecorderResult(True, self.frames, fps)


def fake_wiring(
    *,
    scene_service: FakeSceneService | None = None,
    robot_factory: FakeRobotFactory | None = None,
    frame_source: Any | None = None,
) -> SceneWiring:
    factory = robot_factory or FakeRobotFactory()
    return SceneWiring(
        scene_service=scene_service or FakeSceneService(),
        prefabs=FakePrefabs(),
        robot_factory=factory,
        frame_source=frame_source,
        step=factory.step_all,
    )
