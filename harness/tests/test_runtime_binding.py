from __future__ import annotations

import pytest

from harness.attempts.controller import AttemptController, AttemptStatus
from harness.contracts.failure import FailureType
from harness.levels.grid import validate_map
from harness.runtime.binding import BindingError, RuntimeBindingService
from harness.testkit.fakes import FakeSceneHandle, ScriptedRobot


def _bound(with_sensor: bool = True):
    grid = validate_map([["S", ".", "F"]])
    scene = FakeSceneHandle(name="t") if with_sensor else FakeSceneHandle(name="t", boundary_sensor=None)
    robot = ScriptedRobot(*grid.cell_center(*grid.start))
    controller = AttemptController(10.0)
    controller.start()
    handle = RuntimeBindingService().bind(scene, grid, robot, controller)
    return grid, scene, robot, controller, handle


@pytest.mark.parametrize("missing", ["scene", "grid", "robot", "controller"])
def test_bind_requires_every_input(missing):
    inputs = {
        "scene": FakeSceneHandle(name="t"),
        "grid": validate_map([["S", "F"]]),
        "robot": ScriptedRobot(0.0, 0.0),
        "controller": AttemptController(1.0),
    }
    inputs[missing] = None

    with pytest.raises(BindingError, match=missing):
        RuntimeBindingService().bind(**inputs)


def test_bind_subscribes_to_boundary_sensor():
    _, scene, _, _, handle = _bound()

    assert scene.boundary_sensor.subscriber_count == 1
    assert handle.is_attached


def test_bind_without_sensor_still_evaluates():
    grid, _, robot, controller, handle = _bound(with_sensor=False)
    robot.place(*grid.cell_center(*grid.finish))

    assert not handle.is_attached
    assert handle.evaluate()
    assert controller.status is AttemptStatus.PASS


def test_perimeter_trigger_fails_robot_outside_bounds():
    grid, scene, robot, controller, _ = _bound()
    robot.place(grid.origin_x - 0.5, 0.0)

    scene.boundary_sensor.fire(robot)

    assert controller.failure_type is FailureType.OUT_OF_BOUNDS
    assert controller.reason == "Robot left level bounds (perimeter trigger)."


def test_perimeter_trigger_ignores_other_actors():
    grid, scene, robot, controller, _ = _bound()
    robot.place(grid.origin_x - 0.5, 0.0)

    scene.boundary_sensor.fire(ScriptedRobot(100.0, 100.0))

    assert controller.is_running


def test_perimeter_trigger_rechecks_position():
    _, scene, robot, controller, _ = _bound()

    scene.boundary_sensor.fire(robot)

    assert controller.is_running


def test_perimeter_trigger_ignores_completed_attempt():
    grid, scene, robot, controller, _ = _bound()
    controller.try_complete_pass("Robot reached finish area.")
    robot.place(grid.origin_x - 0.5, 0.0)

    scene.boundary_sensor.fire(robot)

    assert controller.status is AttemptStatus.PASS


def test_detach_is_idempotent_and_stops_callbacks():
    grid, scene, robot, controller, handle = _bound()

    handle.detach()
    handle.detach()
    robot.place(grid.origin_x - 0.5, 0.0)
    scene.boundary_sensor.fire(robot)

    assert scene.boundary_sensor.subscriber_count == 0
    assert not handle.is_attached
    assert controller.is_running
