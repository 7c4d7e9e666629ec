import pytest

from harness.attempts.controller import AttemptController, AttemptSnapshot
from harness.contracts import (
    BoundarySensor,
    ConnectionProbe,
    FailureType,
    FrameSource,
    PrefabProvider,
    RobotFactory,
    RobotHandle,
    SceneService,
    SceneWiring,
    VideoEncoder,
    VideoRecorder,
    normalize_failure,
)
from harness.contracts.run_result import AttemptArtifacts
from harness.orchestration.results import INCOMPLETE_REASON, failure_result, result_from_snapshot
from harness.testkit.fakes import (
    FakeBoundarySensor,
    FakeConnectionProbe,
    FakeFrameSource,
    FakePrefabs,
    FakeRobotFactory,
    FakeSceneService,
    FakeVideoEncoder,
    FakeVideoRecorder,
    ScriptedRobot,
)


def test_failure_taxonomy_serializes_verbatim():
    assert [str(kind) for kind in FailureType] == [
        "None",
        "InvalidInput",
        "Connection",
        "Timeout",
        "OutOfBounds",
        "Error",
        "VideoError",
    ]


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        (None, FailureType.ERROR),
        (FailureType.NONE, FailureType.ERROR),
        (FailureType.TIMEOUT, FailureType.TIMEOUT),
    ],
)
def test_normalize_failure(kind, expected):
    assert normalize_failure(kind) is expected


@pytest.mark.parametrize(
    ("fake", "protocol"),
    [
        (ScriptedRobot(0.0, 0.0), RobotHandle),
        (FakeBoundarySensor(), BoundarySensor),
        (FakePrefabs(), PrefabProvider),
        (FakeRobotFactory(), RobotFactory),
        (FakeSceneService(), SceneService),
        (FakeConnectionProbe(), ConnectionProbe),
        (FakeFrameSource(), FrameSource),
        (FakeVideoEncoder(), VideoEncoder),
        (FakeVideoRecorder(), VideoRecorder),
    ],
)
def test_fakes_satisfy_ports(fake, protocol):
    assert isinstance(fake, protocol)


def test_wiring_is_incomplete_without_robot_factory():
    wiring = SceneWiring(scene_service=FakeSceneService(), prefabs=FakePrefabs(), robot_factory=None)

    assert not wiring.is_complete


def test_failure_result_never_reports_none():
    result = failure_result("x", FailureType.NONE, "", -1.0, AttemptArtifacts())

    assert result.status == "fail"
    assert result.failure_type is FailureType.ERROR
    assert result.duration_seconds == 0.0


def test_result_from_unfinished_snapshot_is_error():
    controller = AttemptController(5.0)
    controller.start()

    result = result_from_snapshot("x", controller.snapshot(), AttemptArtifacts())

    assert result.status == "fail"
    assert result.failure_type is FailureType.ERROR
    assert result.reason == INCOMPLETE_REASON


def test_result_from_missing_controller_snapshot():
    result = result_from_snapshot("x", AttemptSnapshot.from_controller(None), AttemptArtifacts())

    assert result.reason == "Attempt controller is missing."
