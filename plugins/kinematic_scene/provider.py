from __future__ import annotations

from harness.configuration import HarnessConfig
from harness.contracts.scene import SceneWiring

from .render import TopDownFrameSource
from .robot import KinematicRobotFactory
from .scene import CellPrefabs, KinematicSceneService

PROVIDER_KEY = "kinematic"


def build_kinematic_wiring(config: HarnessConfig) -> SceneWiring:
    scene_service = KinematicSceneService()
    return SceneWiring(
        scene_service=scene_service,
        prefabs=CellPrefabs(),
        robot_factory=KinematicRobotFactory(),
        frame_source=TopDownFrameSource(scene_service) if config.video.enabled else None,
        step=scene_service.step,
    )
