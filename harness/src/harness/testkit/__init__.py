from .fakes import (
    CallLog,
    FakeBoundarySensor,
    FakeCall,
    FakeConnectionProbe,
    FakeFrameSource,
    FakePrefabs,
    FakeRobotFactory,
    FakeSceneHandle,
    FakeSceneService,
    FakeVideoEncoder,
    FakeVideoRecorder,
    ScriptedRobot,
    fake_wiring,
)

__all__ = [
    "CallLog",
    "FakeBoundarySensor",
    "FakeCall",
    "FakeConnectionProbe",
    "FakeFrameSource",
    "FakePrefabs",
    "FakeRobotFactory",
    "FakeSceneHandle",
    "FakeSceneService",
    "FakeVideoEncoder",
    "FakeVideoRecorder",
    "ScriptedRobot",
    "fake_wiring",
]
