from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw

from .scene import GROUND_COLOR, KinematicSceneService

BACKGROUND_COLOR = (20, 20, 24)
ROBOT_COLOR = (230, 70, 50)
HEADING_COLOR = (255, 255, 255)


class TopDownFrameSource:
    """
    Renders the active kinematic scene from above into PNG frames.

    Image rows follow world X (grid rows) and image columns follow world Z
    (grid columns), so the picture matches the request map as written.
    """

    def __init__(self, scene_service: KinematicSceneService) -> None:
        self._scene_service = scene_service

    def render(self, *, width: int, height: int) -> Image.Image:
        scene = self._scene_service.active
        if scene is None or scene.grid is None:
            return Image.new("RGB", (width, height), BACKGROUND_COLOR)

        grid = scene.grid
        ground = scene.ground.color if scene.ground is not None else GROUND_COLOR
        cells = np.empty((grid.height, grid.width, 3), dtype=np.uint8)
        cells[:, :] = ground
        for row, col, prefab in scene.cells:
            cells[row, col] = prefab.color

        image = Image.fromarray(cells).resize((width, height), Image.Resampling.NEAREST)

        robot = scene.robot
        if robot is not None:
            self._draw_robot(image, grid, robot)
        return image

    def write_frame(self, path: Path, *, width: int, height: int) -> None:
        image = self.render(width=width, height=height)
        image.save(path, format="PNG")

    @staticmethod
    def _draw_robot(image: Image.Image, grid, robot) -> None:
        width, height = image.size
        scale_row = height / grid.extent_x
        scale_col = width / grid.extent_z

        x, z = robot.position
        center_row = (x - grid.origin_x) * scale_row
        center_col = (z - grid.origin_z) * scale_col
        radius = max(2.0, 0.3 * grid.cell_size * min(scale_row, scale_col))

        draw = ImageDraw.Draw(image)
        draw.ellipse(
            (center_col - radius, center_row - radius, center_col + radius, center_row + radius),
            fill=ROBOT_COLOR,
        )
        dx, dz = robot.forward
        draw.line(
            (center_col, center_row, center_col + dz * radius, center_row + dx * radius),
            fill=HEADING_COLOR,
            width=max(1, int(radius / 4)),
        )
