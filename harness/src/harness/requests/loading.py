from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import ValidationError

from harness.contracts.run_request import RunRequest

logger = logging.getLogger("maze_harness.requests")

REQUEST_FLAG = "--request"


class RequestSource(Enum):
    NONE = "none"
    COMMAND_LINE = "command_line"
    FALLBACK = "fallback"


class RequestLoadError(ValueError):
    def __init__(self, message: str, *, source: RequestSource = RequestSource.NONE) -> None:
        super().__init__(message)
        self.source = source


@dataclass(frozen=True, slots=True)
class RequestLoadResult:
    request: RunRequest
    path: Path
    source: RequestSource


def load_request_json(text: str | None) -> RunRequest:
    if text is None or not text.strip():
        raise RequestLoadError("Request JSON is empty.")
    try:
        return RunRequest.model_validate_json(text)
    except ValidationError as exc:
        raise RequestLoadError(_format_request_error(exc)) from exc


def load_request_file(path: Path | str | None) -> tuple[RunRequest, Path]:
    """Read and parse one request file; returns the request and its absolute path."""
    if path is None or not str(path).strip():
        raise RequestLoadError("Request path is empty.")

    full_path = Path(str(path).strip()).expanduser().resolve()
    if not full_path.is_file():
        raise RequestLoadError(f"Request file does not exist: {full_path}")

    try:
        text = full_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RequestLoadError(f"Failed to read request file '{full_path}'. {exc}") from exc

    try:
        request = load_request_json(text)
    except RequestLoadError as exc:
        raise RequestLoadError(f"Invalid request JSON at '{full_path}'. {exc}") from exc
    return request, full_path


class RequestLoader:
    """
    Resolves where the request comes from and loads it.

    A command-line path always wins. Without one, the configured fallback path
    is used when enabled; otherwise the request input is missing.
    """

    def __init__(
        self,
        *,
        fallback_enabled: bool = False,
        fallback_path: Path | None = None,
    ) -> None:
        self.fallback_enabled = fallback_enabled
        self.fallback_path = fallback_path

    def load(self, request_paths: Sequence[str | Path] | None) -> RequestLoadResult:
        paths = list(request_paths or [])
        if paths:
            return self._load_command_line(paths)
        if self.fallback_enabled:
            return self._load_fallback()
        raise RequestLoadError(f"Missing CLI argument '{REQUEST_FLAG} <path>'.")

    def _load_command_line(self, paths: list[str | Path]) -> RequestLoadResult:
        source = RequestSource.COMMAND_LINE
        if len(paths) > 1:
            raise RequestLoadError(f"CLI argument '{REQUEST_FLAG}' must be provided once.", source=source)
        if not str(paths[0]).strip():
            raise RequestLoadError(f"Missing path value after '{REQUEST_FLAG}'.", source=source)

        try:
            request, path = load_request_file(paths[0])
        except RequestLoadError as exc:
            raise RequestLoadError(str(exc), source=source) from exc
        return RequestLoadResult(request=request, path=path, source=source)

    def _load_fallback(self) -> RequestLoadResult:
        source = RequestSource.FALLBACK
        if self.fallback_path is None or not str(self.fallback_path).strip():
            raise RequestLoadError(
                f"Missing request input. Provide CLI '{REQUEST_FLAG} <path>' "
                "or configure request.fallback_path.",
                source=source,
            )

        try:
            request, path = load_request_file(self.fallback_path)
        except RequestLoadError as exc:
            raise RequestLoadError(f"Fallback request path is invalid. {exc}", source=source) from exc
        logger.info("Loaded request from fallback path %s", path)
        return RequestLoadResult(request=request, path=path, source=source)


def _format_request_error(exc: ValidationError) -> str:
    details: list[str] = []
    for error in exc.errors(include_url=False):
        loc = ".".join(str(part) for part in error["loc"])
        details.append(f"{loc}: {error['msg']}" if loc else error["msg"])
    return "; ".join(details)
