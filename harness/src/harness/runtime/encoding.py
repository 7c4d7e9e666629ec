from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

ENV_ENCODER_PATH = "MAZE_HARNESS_FFMPEG"
DEFAULT_ENCODE_TIMEOUT_S = 300.0

_LOCAL_TOOL_DIRS = (Path("tools") / "ffmpeg", Path("tools") / "ffmpeg" / "bin")
_SYSTEM_PATHS_POSIX = (
    Path("/usr/local/bin/ffmpeg"),
    Path("/usr/bin/ffmpeg"),
    Path("/opt/homebrew/bin/ffmpeg"),
    Path("/opt/local/bin/ffmpeg"),
)
_SYSTEM_PATHS_WINDOWS = (
    Path("C:/ffmpeg/bin/ffmpeg.exe"),
    Path("C:/Program Files/ffmpeg/bin/ffmpeg.exe"),
)

logger = logging.getLogger("maze_harness.video")


class EncoderError(RuntimeError):
    pass


def _executable_name() -> str:
    return "ffmpeg.exe" if sys.platform.startswith("win") else "ffmpeg"


def encoder_candidates(
    *,
    override: Path | str | None = None,
    project_root: Path | None = None,
) -> list[Path]:
    """
    Ordered places to look for the encoder executable.

    Explicit override (argument, then MAZE_HARNESS_FFMPEG), project-local
    tools folder, PATH, common system install locations.
    """
    candidates: list[Path] = []

    explicit = override if override is not None else os.environ.get(ENV_ENCODER_PATH)
    if explicit:
        candidates.append(Path(explicit).expanduser())

    name = _executable_name()
    if project_root is not None:
        candidates.extend(project_root / folder / name for folder in _LOCAL_TOOL_DIRS)

    on_path = shutil.which(name)
    if on_path:
        candidates.append(Path(on_path))

    system_paths = _SYSTEM_PATHS_WINDOWS if sys.platform.startswith("win") else _SYSTEM_PATHS_POSIX
    candidates.extend(system_paths)
    return candidates


def resolve_encoder_executable(
    *,
    override: Path | str | None = None,
    project_root: Path | None = None,
) -> Path:
    for candidate in encoder_candidates(override=override, project_root=project_root):
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return candidate
    raise EncoderError(
        "ffmpeg executable not found. Set video.encoder_path, "
        f"{ENV_ENCODER_PATH}, or add ffmpeg to PATH."
    )


def format_framerate(frames_per_second: float) -> str:
    return f"{frames_per_second:.3f}".rstrip("0").rstrip(".")


class FfmpegEncoder:
    """Encodes a numbered PNG sequence into an H.264 mp4 with ffmpeg."""

    def __init__(
        self,
        *,
        executable: Path | str | None = None,
        project_root: Path | None = None,
        timeout_seconds: float = DEFAULT_ENCODE_TIMEOUT_S,
    ) -> None:
        self._executable = executable
        self._project_root = project_root
        self.timeout_seconds = timeout_seconds

    def build_command(
        self,
        executable: Path,
        *,
        input_pattern: str,
        frames_per_second: float,
        output_path: Path,
    ) -> Sequence[str]:
        return [
            str(executable),
            "-y",
            "-hide_banner",
            "-loglevel",
            "error",
            "-framerate",
            format_framerate(frames_per_second),
            "-i",
            input_pattern,
            "-c:v",
            "libx264",
            "-pix_fmt",
            "yuv420p",
            str(output_path),
        ]

    def encode(self, *, input_pattern: str, frames_per_second: float, output_path: Path) -> None:
        executable = resolve_encoder_executable(
            override=self._executable, project_root=self._project_root
        )
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise EncoderError(
                f"Failed to create video output directory '{output_path.parent}'. {exc}"
            ) from exc
        command = self.build_command(
            executable,
            input_pattern=input_pattern,
            frames_per_second=frames_per_second,
            output_path=output_path,
        )
        logger.debug("Running encoder: %s", " ".join(command))

        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise EncoderError(
                f"ffmpeg encoding timed out after {self.timeout_seconds:g} s."
            ) from exc
        except OSError as exc:
            raise EncoderError(f"Failed to run ffmpeg. {exc}") from exc

        if completed.returncode != 0 or not output_path.is_file():
            details = f"{completed.stderr} {completed.stdout}".strip()
            raise EncoderError(
                f"ffmpeg encoding failed. exitCode={completed.returncode}. {details}".strip()
            )
