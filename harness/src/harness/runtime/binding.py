from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from harness.attempts.controller import AttemptController
from harness.attempts.evaluator import TerminalConditionEvaluator
from harness.contracts.failure import FailureType
from harness.contracts.scene import RobotHandle, SceneHandle, Unsubscribe
from harness.levels.grid import Grid

PERIMETER_REASON = "Robot left level bounds (perimeter trigger)."

logger = logging.getLogger("maze_harness.binding")


class BindingError(RuntimeError):
    pass


@dataclass(slots=True)
class RuntimeBindingHandle:
    """
    Live wiring between a spawned robot and the attempt it belongs to.

    Holds the terminal evaluator and the optional perimeter subscription.
    """

    grid: Grid
    robot: RobotHandle
    controller: AttemptController
    evaluator: TerminalConditionEvaluator
    _unsubscribe: Unsubscribe | None = field(default=None, repr=False)

    @property
    def is_attached(self) -> bool:
        return self._unsubscribe is not None

    def evaluate(self) -> bool:
        x, z = self.robot.position
        return self.evaluator.evaluate(x, z)

    def on_perimeter_crossed(self, actor: Any) -> None:
        if actor is not self.robot:
            return
        if not self.controller.is_running:
            return

        x, z = self.robot.position
        if self.grid.is_within_bounds(x, z):
            return
        if self.controller.try_complete_fail(FailureType.OUT_OF_BOUNDS, PERIMETER_REASON):
            logger.info("Perimeter trigger at (%.3f, %.3f)", x, z)

    def detach(self) -> None:
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()


class RuntimeBindingService:
    def bind(
        self,
        scene: SceneHandle | None,
        grid: Grid | None,
        robot: RobotHandle | None,
        controller: AttemptController | None,
    ) -> RuntimeBindingHandle:
        if scene is None:
            raise BindingError("Runtime binding requires a scene.")
        if grid is None:
            raise BindingError("Runtime binding requires a grid.")
        if robot is None:
            raise BindingError("Runtime binding requires a robot.")
        if controller is None:
            raise BindingError("Runtime binding requires an attempt controller.")

        handle = RuntimeBindingHandle(
            grid=grid,
            robot=robot,
            controller=controller,
            evaluator=TerminalConditionEvaluator(grid, controller),
        )

        sensor = scene.boundary_sensor
        if sensor is None:
            logger.debug("Scene '%s' has no boundary sensor; relying on per-tick bounds checks", scene.name)
        else:
            handle._unsubscribe = sensor.subscribe(handle.on_perimeter_crossed)
        return handle
