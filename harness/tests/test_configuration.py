from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from harness.configuration import (
    ConfigError,
    HarnessConfig,
    load_harness_config,
    load_harness_config_dict,
    resolve_env_vars,
)


def _write_yaml(path: Path, payload: dict[str, Any]) -> None:
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")


def test_missing_path_yields_defaults():
    config = load_harness_config(None)

    assert isinstance(config, HarnessConfig)
    assert config.probe.timeout_ms == 3000
    assert config.video.enabled is True
    assert config.scene.provider == "kinematic"
    assert config.scene.cell_size == 10.0
    assert config.run.max_ticks is None


def test_load_harness_config_anchors_relative_paths_to_file(tmp_path):
    config_path = tmp_path / "configs" / "harness.yaml"
    config_path.parent.mkdir()
    _write_yaml(
        config_path,
        {
            "artifacts": {"project_root": "..", "root": "out"},
            "request": {"fallback_enabled": True, "fallback_path": "req.json"},
            "video": {"encoder_path": "ffmpeg"},
        },
    )

    config = load_harness_config(config_path)

    assert config.artifacts.project_root == tmp_path.resolve()
    assert config.artifacts.root == (tmp_path / "configs" / "out").resolve()
    assert config.request.fallback_path == (tmp_path / "configs" / "req.json").resolve()
    assert config.video.encoder_path == Path("ffmpeg")


def test_env_vars_are_substituted(monkeypatch, tmp_path):
    monkeypatch.setenv("MAZE_OUT", str(tmp_path / "env_out"))

    config = load_harness_config_dict({"artifacts": {"root": "${MAZE_OUT}"}})

    assert config.artifacts.root == tmp_path / "env_out"


def test_missing_env_var_is_config_error(monkeypatch):
    monkeypatch.delenv("MAZE_UNSET_VAR", raising=False)

    with pytest.raises(ConfigError, match="MAZE_UNSET_VAR"):
        resolve_env_vars({"video": {"encoder_path": "${MAZE_UNSET_VAR}"}})


def test_unknown_keys_are_rejected():
    with pytest.raises(ConfigError, match="harness.video.fps"):
        load_harness_config_dict({"video": {"fps": 25}})


def test_probe_timeout_has_minimum():
    with pytest.raises(ConfigError, match="harness.probe.timeout_ms"):
        load_harness_config_dict({"probe": {"timeout_ms": 10}})


def test_yaml_root_must_be_mapping(tmp_path):
    config_path = tmp_path / "bad.yaml"
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_harness_config(config_path)
