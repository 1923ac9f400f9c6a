"""Validation steps for response pipelines."""

from .content_type import ContentTypeStep, content_type_matches, has_content_type
from .http import IsHTTPStep, is_http_response
from .status import SUCCESS_STATUS_CODES, StatusCodeStep, validate_status_code

__all__ = [
    "SUCCESS_STATUS_CODES",
    "ContentTypeStep",
    "IsHTTPStep",
    "StatusCodeStep",
    "content_type_matches",
    "has_content_type",
    "is_http_response",
    "validate_status_code",
]
