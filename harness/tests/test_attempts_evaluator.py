from __future__ import annotations

from harness.attempts.controller import AttemptController, AttemptStatus
from harness.attempts.evaluator import TerminalConditionEvaluator
from harness.contracts.failure import FailureType
from harness.levels.grid import validate_map


def _setup(time_limit: float = 10.0):
    grid = validate_map([["S", ".", "F"]])
    controller = AttemptController(time_limit)
    return grid, controller, TerminalConditionEvaluator(grid, controller)


def test_evaluate_is_noop_unless_running():
    grid, controller, evaluator = _setup()
    x, z = grid.cell_center(*grid.finish)

    assert not evaluator.evaluate(x, z)
    assert not controller.is_completed


def test_finish_cell_passes():
    grid, controller, evaluator = _setup()
    controller.start()
    x, z = grid.cell_center(*grid.finish)

    assert evaluator.evaluate(x, z)
    assert controller.status is AttemptStatus.PASS
    assert controller.reason == "Robot reached finish area."


def test_leaving_bounds_fails_out_of_bounds():
    grid, controller, evaluator = _setup()
    controller.start()

    assert evaluator.evaluate(grid.origin_x - 1.0, 0.0)
    assert controller.failure_type is FailureType.OUT_OF_BOUNDS
    assert controller.reason == "Robot left level bounds."


def test_time_limit_fails_timeout():
    grid, controller, evaluator = _setup(time_limit=1.0)
    controller.start()
    controller.tick(1.0)
    x, z = grid.cell_center(*grid.start)

    assert evaluator.evaluate(x, z)
    assert controller.failure_type is FailureType.TIMEOUT
    assert controller.reason == "Level completion time limit exceeded."


def test_finish_wins_over_timeout():
    grid, controller, evaluator = _setup(time_limit=1.0)
    controller.start()
    controller.tick(5.0)
    x, z = grid.cell_center(*grid.finish)

    evaluator.evaluate(x, z)

    assert controller.status is AttemptStatus.PASS


def test_out_of_bounds_wins_over_timeout():
    grid, controller, evaluator = _setup(time_limit=1.0)
    controller.start()
    controller.tick(5.0)

    evaluator.evaluate(0.0, grid.origin_z + grid.extent_z)

    assert controller.failure_type is FailureType.OUT_OF_BOUNDS


def test_inside_level_before_deadline_keeps_running():
    grid, controller, evaluator = _setup()
    controller.start()
    x, z = grid.cell_center(*grid.start)

    assert not evaluator.evaluate(x, z)
    assert controller.is_running
