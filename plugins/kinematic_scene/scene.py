from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from harness.contracts.scene import PrefabProvider, RobotFactory
from harness.levels.grid import CellKind, Grid

from .robot import KinematicRobot

logger = logging.getLogger("maze_harness.kinematic_scene")


@dataclass(frozen=True, slots=True)
class CellPrefab:
    kind: CellKind
    color: tuple[int, int, int]


@dataclass(frozen=True, slots=True)
class GroundPrefab:
    color: tuple[int, int, int]


CELL_COLORS = {
    CellKind.WALL: (60, 60, 70),
    CellKind.START: (70, 130, 220),
    CellKind.FINISH: (60, 190, 90),
}
GROUND_COLOR = (225, 225, 215)


class CellPrefabs:
    """Prefab provider for the kinematic scene; empty cells spawn nothing."""

    def __init__(self, *, with_ground: bool = True) -> None:
        self.with_ground = with_ground

    def prefab_for(self, cell_kind: CellKind) -> CellPrefab | None:
        color = CELL_COLORS.get(cell_kind)
        if color is None:
            return None
        return CellPrefab(kind=cell_kind, color=color)

    def ground_with_bounds(self) -> GroundPrefab | None:
        if not self.with_ground:
            return None
        return GroundPrefab(color=GROUND_COLOR)


class PerimeterSensor:
    """Fires subscribers when a tracked actor goes from inside the level to outside."""

    def __init__(self, grid: Grid) -> None:
        self._grid = grid
        self._callbacks: list[Callable[[Any], None]] = []
        self._inside: dict[int, bool] = {}

    def subscribe(self, callback: Callable[[Any], None]) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def observe(self, actor: Any) -> None:
        x, z = actor.position
        inside = self._grid.is_within_bounds(x, z)
        was_inside = self._inside.get(id(actor), True)
        self._inside[id(actor)] = inside
        if was_inside and not inside:
            for callback in list(self._callbacks):
                callback(actor)


@dataclass
class KinematicScene:
    name: str
    grid: Grid | None = None
    ground: GroundPrefab | None = None
    cells: list[tuple[int, int, CellPrefab]] = field(default_factory=list)
    robot: KinematicRobot | None = None
    boundary_sensor: PerimeterSensor | None = None

    def clear(self) -> None:
        self.grid = None
        self.ground = None
        self.cells.clear()
        self.robot = None
        self.boundary_sensor = None


class KinematicSceneService:
    """SceneService backed by plain Python objects; one active scene at a time."""

    def __init__(self) -> None:
        self.active: KinematicScene | None = None

    def create_scene(self, request_name: str) -> KinematicScene:
        if self.active is not None:
            self.unload(self.active)
        self.active = KinematicScene(name=request_name)
        return self.active

    def spawn_level(self, scene: KinematicScene, grid: Grid, prefabs: PrefabProvider) -> int:
        scene.grid = grid
        ground = prefabs.ground_with_bounds()
        if ground is not None:
            scene.ground = ground
            scene.boundary_sensor = PerimeterSensor(grid)

        for row, col, kind in grid.iter_cells():
            prefab = prefabs.prefab_for(kind)
            if prefab is not None:
                scene.cells.append((row, col, prefab))
        logger.debug("Spawned %d cells in scene '%s'", len(scene.cells), scene.name)
        return len(scene.cells)

    def spawn_robot(
        self,
        scene: KinematicScene,
        factory: RobotFactory,
        grid: Grid,
        start_rotation_degrees: float,
    ) -> KinematicRobot | None:
        x, z = grid.cell_center(*grid.start)
        robot = factory.create(x=x, z=z, rotation_degrees=start_rotation_degrees)
        scene.robot = robot
        return robot

    def step(self, delta_seconds: float) -> None:
        scene = self.active
        if scene is None or scene.robot is None:
            return
        scene.robot.step(delta_seconds)
        if scene.boundary_sensor is not None:
            scene.boundary_sensor.observe(scene.robot)

    def unload(self, scene: KinematicScene) -> None:
        scene.clear()
        if self.active is scene:
            self.active = None
