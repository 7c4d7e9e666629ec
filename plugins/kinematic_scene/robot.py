from __future__ import annotations

import math


class KinematicRobot:
    """
    Unicycle-model robot with no physics.

    Heading is in degrees around the vertical axis; 0 faces +Z and 90 faces +X.
    Velocities are set by whoever drives the robot (usually the brain bridge)
    and integrated on `step`.
    """

    def __init__(self, x: float, z: float, *, heading_degrees: float = 0.0) -> None:
        self.x = x
        self.z = z
        self.heading_degrees = heading_degrees % 360.0
        self.linear_speed = 0.0
        self.angular_speed_degrees = 0.0

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.z)

    @property
    def forward(self) -> tuple[float, float]:
        radians = math.radians(self.heading_degrees)
        return (math.sin(radians), math.cos(radians))

    def set_velocity(self, linear_speed: float, angular_speed_degrees: float = 0.0) -> None:
        self.linear_speed = linear_speed
        self.angular_speed_degrees = angular_speed_degrees

    def place(self, x: float, z: float) -> None:
        self.x = x
        self.z = z

    def step(self, delta_seconds: float) -> None:
        if delta_seconds <= 0:
            return
        self.heading_degrees = (
            self.heading_degrees + self.angular_speed_degrees * delta_seconds
        ) % 360.0
        dx, dz = self.forward
        self.x += dx * self.linear_speed * delta_seconds
        self.z += dz * self.linear_speed * delta_seconds


class KinematicRobotFactory:
    def __init__(self, *, linear_speed: float = 0.0, angular_speed_degrees: float = 0.0) -> None:
        self.linear_speed = linear_speed
        self.angular_speed_degrees = angular_speed_degrees

    def create(self, *, x: float, z: float, rotation_degrees: float) -> KinematicRobot:
        robot = KinematicRobot(x, z, heading_degrees=rotation_degrees)
        robot.set_velocity(self.linear_speed, self.angular_speed_degrees)
        return robot
