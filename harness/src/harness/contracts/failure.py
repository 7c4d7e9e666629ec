from __future__ import annotations

from enum import StrEnum


class FailureType(StrEnum):
    """Failure taxonomy, serialized verbatim into result.json."""

    NONE = "None"
    INVALID_INPUT = "InvalidInput"
    CONNECTION = "Connection"
    TIMEOUT = "Timeout"
    OUT_OF_BOUNDS = "OutOfBounds"
    ERROR = "Error"
    VIDEO_ERROR = "VideoError"


def normalize_failure(failure_type: FailureType | None) -> FailureType:
    """Map an unspecified failure kind to the generic Error kind."""
    if failure_type is None or failure_type is FailureType.NONE:
        return FailureType.ERROR
    return failure_type
