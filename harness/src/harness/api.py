from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from harness.configuration import HarnessConfig
from harness.contracts.run_result import AttemptResult
from harness.contracts.scene import ConnectionProbe, SceneWiring
from harness.contracts.video import VideoRecorder
from harness.orchestration.attempt import AttemptOrchestrator
from harness.orchestration.registry import DictSceneProviderRegistry, SceneProviderNotFoundError

StepHook = Callable[[float], None]

logger = logging.getLogger("maze_harness.api")


def resolve_wiring(
    config: HarnessConfig,
    registry: DictSceneProviderRegistry | None,
) -> SceneWiring | None:
    if registry is None:
        return None
    try:
        return registry.build(config)
    except SceneProviderNotFoundError:
        logger.error(
            "Scene provider '%s' is not registered (available: %s)",
            config.scene.provider,
            ", ".join(registry.list()) or "none",
        )
        return None


def run_attempt(
    config: HarnessConfig,
    *,
    request_paths: Sequence[str | Path] | None = None,
    wiring: SceneWiring | None = None,
    registry: DictSceneProviderRegistry | None = None,
    step: StepHook | None = None,
    probe: ConnectionProbe | None = None,
    video_recorder: VideoRecorder | None = None,
) -> AttemptResult | None:
    """
    Drive one attempt to completion with a fixed tick.

    `step` runs before every orchestrator tick and is where the scene advances
    (robot motion, sensors); it defaults to the wiring's own step. When
    `run.max_ticks` is set the attempt is aborted once that many ticks have
    elapsed. Returns None only when no result could be produced at all.
    """
    if wiring is None:
        wiring = resolve_wiring(config, registry)
    if step is None and wiring is not None:
        step = wiring.step

    orchestrator = AttemptOrchestrator(
        config,
        wiring,
        probe=probe,
        video_recorder=video_recorder,
    )
    tick_seconds = config.run.tick_seconds
    max_ticks = config.run.max_ticks
    ticks = 0

    for _ in orchestrator.run(request_paths):
        if max_ticks is not None and ticks >= max_ticks:
            orchestrator.abort(f"Tick budget exhausted after {max_ticks} ticks.")
            continue
        if step is not None:
            step(tick_seconds)
        orchestrator.tick(tick_seconds)
        ticks += 1

    return orchestrator.result
