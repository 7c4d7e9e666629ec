from __future__ import annotations

import json
import os
import re
import shutil
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from harness.contracts.run_result import AttemptArtifacts, AttemptResult

ENV_ARTIFACT_ROOT = "MAZE_HARNESS_ARTIFACT_ROOT"
ARTIFACTS_DIRNAME = "artifacts"
FRAMES_DIRNAME = "frames"
REQUEST_FILENAME = "request.json"
RESULT_FILENAME = "result.json"
VIDEO_FILENAME = "video.mp4"
FALLBACK_NAME = "attempt"

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f\s]+')
_DASH_RUNS = re.compile(r"-{2,}")


class ArtifactsError(OSError):
    pass


@dataclass(frozen=True, slots=True)
class ArtifactsLayout:
    """Resolved on-disk paths for one attempt."""

    project_root: Path
    artifacts_root: Path
    attempt_dir: Path
    request_path: Path
    result_path: Path
    video_path: Path
    frames_dir: Path


def sanitize_name(name: str | None) -> str:
    if name is None or not name.strip():
        return FALLBACK_NAME
    sanitized = _UNSAFE_CHARS.sub("-", name.strip().lower())
    sanitized = _DASH_RUNS.sub("-", sanitized).strip("-")
    return sanitized or FALLBACK_NAME


def build_attempt_folder_name(name: str, now: datetime, attempt_id: uuid.UUID) -> str:
    return f"{name}-{now.strftime('%Y%m%d-%H%M%S')}-{attempt_id}"


def resolve_artifact_root(project_root: Path, configured_root: Path | None = None) -> Path:
    """Pick the artifacts root: explicit config, then env var, then <project_root>/artifacts."""
    if configured_root is not None:
        return configured_root.expanduser().resolve()
    env_value = os.environ.get(ENV_ARTIFACT_ROOT)
    if env_value:
        return Path(env_value).expanduser().resolve()
    return (project_root / ARTIFACTS_DIRNAME).resolve()


def to_project_relative(project_root: Path, path: Path) -> str:
    try:
        return Path(os.path.relpath(path, project_root)).as_posix()
    except ValueError:
        # different drive on Windows
        return str(path)


class AttemptArtifactsService:
    """Creates and fills the artifacts folder of one attempt."""

    def __init__(self, project_root: Path, *, artifacts_root: Path | None = None) -> None:
        self.project_root = Path(project_root).expanduser().resolve()
        self.artifacts_root = resolve_artifact_root(self.project_root, artifacts_root)

    def create_layout(
        self,
        name: str | None,
        *,
        now: datetime | None = None,
        attempt_id: uuid.UUID | None = None,
    ) -> ArtifactsLayout:
        timestamp = now if now is not None else datetime.now(UTC)
        identifier = attempt_id if attempt_id is not None else uuid.uuid4()
        folder_name = build_attempt_folder_name(sanitize_name(name), timestamp, identifier)
        attempt_dir = self.artifacts_root / folder_name

        try:
            attempt_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ArtifactsError(f"Failed to create artifacts folder '{attempt_dir}'. {exc}") from exc

        return ArtifactsLayout(
            project_root=self.project_root,
            artifacts_root=self.artifacts_root,
            attempt_dir=attempt_dir,
            request_path=attempt_dir / REQUEST_FILENAME,
            result_path=attempt_dir / RESULT_FILENAME,
            video_path=attempt_dir / VIDEO_FILENAME,
            frames_dir=attempt_dir / FRAMES_DIRNAME,
        )

    def copy_request_json(self, source: Path | str | None, layout: ArtifactsLayout) -> Path:
        if source is None or not str(source).strip():
            raise ArtifactsError("Source request path is empty.")
        source_path = Path(source).expanduser().resolve()
        if not source_path.is_file():
            raise ArtifactsError(f"Source request file does not exist: {source_path}")

        try:
            layout.request_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source_path, layout.request_path)
        except OSError as exc:
            raise ArtifactsError(f"Failed to copy request JSON to artifacts. {exc}") from exc
        return layout.request_path

    def write_result_json(self, result: AttemptResult, layout: ArtifactsLayout) -> Path:
        try:
            _write_json(layout.result_path, result.to_payload())
        except OSError as exc:
            raise ArtifactsError(f"Failed to write result JSON. {exc}") from exc
        return layout.result_path

    def write_debug_json(self, file_name: str, payload: Any, output_dir: Path) -> Path:
        folder = output_dir if output_dir.is_absolute() else self.project_root / output_dir
        path = folder / file_name
        try:
            _write_json(path, payload)
        except OSError as exc:
            raise ArtifactsError(f"Failed to write debug JSON '{file_name}'. {exc}") from exc
        return path

    def artifact_paths(self, layout: ArtifactsLayout, *, include_video: bool = True) -> AttemptArtifacts:
        return AttemptArtifacts(
            request=to_project_relative(layout.project_root, layout.request_path),
            result=to_project_relative(layout.project_root, layout.result_path),
            video=to_project_relative(layout.project_root, layout.video_path) if include_video else "",
        )


def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)
        handle.write("\n")
