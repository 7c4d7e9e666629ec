from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from harness.levels.grid import CellKind, Grid

PerimeterCallback = Callable[[Any], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class RobotHandle(Protocol):
    """Runtime robot instance; the core only reads its world position."""

    @property
    def position(self) -> tuple[float, float]:
        """Return the robot's (x, z) world position."""
        ...


@runtime_checkable
class BoundarySensor(Protocol):
    """Event source fired when an actor crosses the level perimeter."""

    def subscribe(self, callback: PerimeterCallback) -> Unsubscribe:
        """Register a callback and return a function that removes it."""
        ...


@runtime_checkable
class SceneHandle(Protocol):
    """
    Opaque per-attempt scene.

    The core never touches scene contents directly; it only asks for the
    optional boundary sensor spawned with the level.
    """

    @property
    def name(self) -> str: ...

    @property
    def boundary_sensor(self) -> BoundarySensor | None: ...


@runtime_checkable
class PrefabProvider(Protocol):
    """Supplies what to spawn for each cell kind."""

    def prefab_for(self, cell_kind: CellKind) -> Any | None:
        """Return the prefab for a cell kind, or None to leave the cell empty."""
        ...

    def ground_with_bounds(self) -> Any | None:
        """Return the ground/perimeter prefab, if one is configured."""
        ...


@runtime_checkable
class RobotFactory(Protocol):
    def create(self, *, x: float, z: float, rotation_degrees: float) -> RobotHandle | None:
        """Instantiate a robot at a world position."""
        ...


@runtime_checkable
class SceneService(Protocol):
    """Scene lifecycle adapter implemented outside the core."""

    def create_scene(self, request_name: str) -> SceneHandle:
        """Create an empty scene for one attempt."""
        ...

    def spawn_level(self, scene: SceneHandle, grid: Grid, prefabs: PrefabProvider) -> int:
        """Spawn level contents and return the number of spawned cells."""
        ...

    def spawn_robot(
        self,
        scene: SceneHandle,
        factory: RobotFactory,
        grid: Grid,
        start_rotation_degrees: float,
    ) -> RobotHandle | None:
        """Spawn the robot at the Start cell center."""
        ...

    def unload(self, scene: SceneHandle) -> None:
        """Release everything the scene owns."""
        ...


@runtime_checkable
class ConnectionProbe(Protocol):
    def probe(self, endpoint: str) -> None:
        """Raise ProbeError when the endpoint is unreachable."""
        ...


@dataclass(frozen=True, slots=True)
class SceneWiring:
    """
    Collaborators a scene provider hands to the orchestrator.

    A missing prefab provider or robot factory is reported as an attempt
    error rather than a construction error. `step` advances the scene by one
    tick and is what the driver calls before each orchestrator tick.
    """

    scene_service: SceneService | None
    prefabs: PrefabProvider | None
    robot_factory: RobotFactory | None
    frame_source: Any | None = None
    step: Callable[[float], None] | None = None

    @property
    def is_complete(self) -> bool:
        return (
            self.scene_service is not None
            and self.prefabs is not None
            and self.robot_factory is not None
        )
