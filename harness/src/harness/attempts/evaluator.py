from __future__ import annotations

from harness.attempts.controller import AttemptController
from harness.contracts.failure import FailureType
from harness.levels.grid import Grid


class TerminalConditionEvaluator:
    """
    Per-tick judge of terminal conditions.

    First match wins: finish cell, then level bounds, then time limit. A robot
    on an edge finish cell passes even if it also clips the bounds, and an
    escape at the deadline is reported as OutOfBounds rather than Timeout.
    """

    def __init__(self, grid: Grid, controller: AttemptController) -> None:
        self._grid = grid
        self._controller = controller

    def evaluate(self, x: float, z: float) -> bool:
        if not self._controller.is_running:
            return False

        finish_row, finish_col = self._grid.finish
        if self._grid.contains_point(finish_row, finish_col, x, z):
            return self._controller.try_complete_pass("Robot reached finish area.")

        if not self._grid.is_within_bounds(x, z):
            return self._controller.try_complete_fail(
                FailureType.OUT_OF_BOUNDS, "Robot left level bounds."
            )

        if self._controller.is_time_limit_exceeded:
            return self._controller.try_complete_fail(
                FailureType.TIMEOUT, "Level completion time limit exceeded."
            )

        return False
