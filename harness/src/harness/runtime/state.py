from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from harness.attempts.controller import AttemptController
from harness.contracts.run_request import RunRequest
from harness.contracts.run_result import AttemptResult
from harness.contracts.scene import RobotHandle, SceneHandle
from harness.levels.grid import Grid
from harness.runtime.artifacts import ArtifactsLayout

if TYPE_CHECKING:
    from harness.runtime.binding import RuntimeBindingHandle


@dataclass(slots=True)
class AttemptRuntimeState:
    """Everything one attempt acquires; owned by the orchestrator, cleared by teardown."""

    request: RunRequest | None = None
    request_path: Path | None = None
    layout: ArtifactsLayout | None = None
    grid: Grid | None = None
    scene: SceneHandle | None = None
    robot: RobotHandle | None = None
    controller: AttemptController | None = None
    binding: RuntimeBindingHandle | None = None
    result: AttemptResult | None = None

    def clear(self) -> None:
        self.request = None
        self.request_path = None
        self.grid = None
        self.scene = None
        self.robot = None
        self.controller = None
        self.binding = None
