from __future__ import annotations

import math

from harness.contracts.run_request import RunRequest
from harness.runtime.probe import EndpointError, parse_endpoint


class RequestValidationError(ValueError):
    pass


def validate_request(request: RunRequest) -> None:
    """Business checks on a structurally valid request; raises RequestValidationError."""
    if not request.name.strip():
        raise RequestValidationError("Request field 'name' is missing.")

    if not request.endpoint.strip():
        raise RequestValidationError("Request field 'socketAddress' is missing.")
    try:
        parse_endpoint(request.endpoint)
    except EndpointError as exc:
        raise RequestValidationError(f"Request field 'socketAddress' is invalid. {exc}") from exc

    if not math.isfinite(request.time_limit_seconds) or request.time_limit_seconds <= 0:
        raise RequestValidationError("Request field 'levelCompletionLimitSeconds' must be > 0.")

    if not request.map:
        raise RequestValidationError("Request field 'map' is missing or empty.")
