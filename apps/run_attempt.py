from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from harness.api import run_attempt
from harness.configuration import ConfigError, load_harness_config
from harness.orchestration.registry import DictSceneProviderRegistry
from plugins.kinematic_scene import PROVIDER_KEY, build_kinematic_wiring

EXIT_PASS = 0
EXIT_FAIL = 1
EXIT_NO_RESULT = 2


def build_registry() -> DictSceneProviderRegistry:
    providers = {
        PROVIDER_KEY: build_kinematic_wiring,
    }
    return DictSceneProviderRegistry(providers=providers)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run one headless maze attempt.")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to harness YAML config (defaults apply when omitted)",
    )
    parser.add_argument(
        "--request",
        dest="requests",
        action="append",
        default=[],
        help="Path to the run request JSON; must be given at most once",
    )
    parser.add_argument("--skip-probe", action="store_true", help="Skip the brain connectivity probe")
    parser.add_argument("--no-video", action="store_true", help="Disable frame capture and encoding")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_harness_config(args.config)
    except (ConfigError, OSError) as exc:
        logging.getLogger("maze_harness.app").error("Failed to load config: %s", exc)
        return EXIT_NO_RESULT

    if args.skip_probe:
        config = config.model_copy(update={"probe": config.probe.model_copy(update={"skip": True})})
    if args.no_video:
        config = config.model_copy(update={"video": config.video.model_copy(update={"enabled": False})})

    result = run_attempt(config, request_paths=args.requests, registry=build_registry())
    if result is None:
        return EXIT_NO_RESULT

    print(f"{result.name}: {result.status} ({result.failure_type}) {result.reason}")
    return EXIT_PASS if result.passed else EXIT_FAIL


if __name__ == "__main__":
    sys.exit(main())
