from .provider import PROVIDER_KEY, build_kinematic_wiring
from .render import TopDownFrameSource
from .robot import KinematicRobot, KinematicRobotFactory
from .scene import CellPrefab, CellPrefabs, GroundPrefab, KinematicScene, KinematicSceneService, PerimeterSensor

__all__ = [
    "PROVIDER_KEY",
    "build_kinematic_wiring",
    "TopDownFrameSource",
    "KinematicRobot",
    "KinematicRobotFactory",
    "CellPrefab",
    "CellPrefabs",
    "GroundPrefab",
    "KinematicScene",
    "KinematicSceneService",
    "PerimeterSensor",
]
