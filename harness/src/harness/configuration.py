from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from harness.levels.grid import DEFAULT_CELL_SIZE

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


class ConfigError(ValueError):
    pass


class ArtifactsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    project_root: Path = Field(default_factory=Path.cwd)
    # Defaults to MAZE_HARNESS_ARTIFACT_ROOT, then <project_root>/artifacts.
    root: Path | None = None


class RequestConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    fallback_enabled: bool = False
    fallback_path: Path | None = None
    debug_output_path: Path | None = None


class ProbeConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    skip: bool = False
    timeout_ms: int = Field(default=3000, ge=100)


class VideoConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    encoder_path: Path | None = None
    default_fps: float = Field(default=30.0, gt=0)
    width: int = Field(default=640, gt=0)
    height: int = Field(default=480, gt=0)
    encode_timeout_seconds: float = Field(default=300.0, gt=0)


class SceneConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    provider: str = Field(default="kinematic", min_length=1)
    cell_size: float = Field(default=DEFAULT_CELL_SIZE, gt=0)


class RunLoopConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tick_seconds: float = Field(default=0.02, gt=0)
    max_ticks: int | None = Field(default=None, ge=1)


class HarnessConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    artifacts: ArtifactsConfig = Field(default_factory=ArtifactsConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)
    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    video: VideoConfig = Field(default_factory=VideoConfig)
    scene: SceneConfig = Field(default_factory=SceneConfig)
    run: RunLoopConfig = Field(default_factory=RunLoopConfig)


def load_yaml(path: str | Path) -> dict[str, Any]:
    with Path(path).open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, dict):
        raise ConfigError(f"YAML root must be a mapping: {path}")
    return payload


def load_harness_config(path: str | Path | None = None) -> HarnessConfig:
    """Load a harness config; no path means all defaults."""
    if path is None:
        return HarnessConfig()
    return load_harness_config_dict(load_yaml(path), base_dir=Path(path).parent)


def load_harness_config_dict(
    payload: Mapping[str, Any],
    *,
    base_dir: Path | None = None,
) -> HarnessConfig:
    resolved = resolve_env_vars(dict(payload))
    try:
        config = HarnessConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigError(_format_validation_error("harness", exc)) from exc
    if base_dir is not None:
        config = _anchor_relative_paths(config, base_dir)
    return config


def resolve_env_vars(payload: Any) -> Any:
    return _resolve_env_vars(payload, path="$")


def _resolve_env_vars(payload: Any, *, path: str) -> Any:
    if isinstance(payload, Mapping):
        return {
            str(key): _resolve_env_vars(value, path=f"{path}.{key}")
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [
            _resolve_env_vars(value, path=f"{path}[{index}]") for index, value in enumerate(payload)
        ]
    if isinstance(payload, str):
        return _substitute_env(payload, path=path)
    return payload


def _substitute_env(value: str, *, path: str) -> str:
    def replace(match: re.Match[str]) -> str:
        key = match.group(1)
        env_value = os.environ.get(key)
        if env_value is None:
            raise ConfigError(f"Missing environment variable '{key}' at {path}")
        return env_value

    return _ENV_VAR_PATTERN.sub(replace, value)


def _anchor_relative_paths(config: HarnessConfig, base_dir: Path) -> HarnessConfig:
    """Resolve relative paths in a config file against the file's directory."""

    def anchor(value: Path | None) -> Path | None:
        if value is None or value.is_absolute():
            return value
        return (base_dir / value).resolve()

    fields_set = config.artifacts.model_fields_set
    project_root = config.artifacts.project_root
    if "project_root" in fields_set:
        project_root = anchor(project_root)

    return config.model_copy(
        update={
            "artifacts": config.artifacts.model_copy(
                update={"project_root": project_root, "root": anchor(config.artifacts.root)}
            ),
            "request": config.request.model_copy(
                update={
                    "fallback_path": anchor(config.request.fallback_path),
                    "debug_output_path": anchor(config.request.debug_output_path),
                }
            ),
        }
    )


def _format_validation_error(prefix: str, exc: ValidationError) -> str:
    details: list[str] = []
    for error in exc.errors(include_url=False):
        loc = ".".join(str(part) for part in error["loc"])
        details.append(f"{prefix}.{loc}: {error['msg']}")
    return "; ".join(details)
