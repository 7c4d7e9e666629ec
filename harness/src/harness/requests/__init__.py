from .loading import (
    RequestLoader,
    RequestLoadError,
    RequestLoadResult,
    RequestSource,
    load_request_file,
    load_request_json,
)
from .validation import RequestValidationError, validate_request

__all__ = [
    "RequestLoader",
    "RequestLoadError",
    "RequestLoadResult",
    "RequestSource",
    "load_request_file",
    "load_request_json",
    "RequestValidationError",
    "validate_request",
]
