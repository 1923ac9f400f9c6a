"""
apibase - Declarative HTTP requests with validation pipelines and progress.

Usage:
    from apibase import APIBase, APIConfig, APIRequest, QueryItem, ResponsePipeline

    async with APIBase(config=APIConfig(base_url="https://api.example.com")) as api:
        transfer = api.send(
            APIRequest(
                path="/search",
                query_items=[QueryItem("q", "a+b")],
                pipeline=ResponsePipeline().validate_status_code(range(200, 300)),
            )
        )
        response = await transfer
"""

__version__ = "1.0.0"

from .api import APIBase, APIRequest, Request
from .errors import (
    ContentTypeMismatchError,
    HTTPFailureError,
    InvalidURLError,
    NonHTTPResponseError,
    RequestError,
    RequestErrorKind,
)
from .http import AiohttpTransport, Response, Transport
from .invoker import Transfer, send
from .logging_config import setup_logging
from .models.config import APIConfig, NetworkConfig
from .models.events import ProgressEvent, TransferDirection
from .pipeline import ResponsePipeline, ValidationStep
from .pipeline.steps import (
    ContentTypeStep,
    IsHTTPStep,
    StatusCodeStep,
    has_content_type,
    is_http_response,
    validate_status_code,
)
from .progress import ProgressCounter, TransferProgress
from .request import BodyStream, HTTPMethod, RequestDescriptor, build_request
from .url import QueryItem, build_url, percent_encode_query

__all__ = [
    "__version__",
    # Core
    "APIBase",
    "APIRequest",
    "Request",
    "Transfer",
    "send",
    # Request building
    "BodyStream",
    "HTTPMethod",
    "QueryItem",
    "RequestDescriptor",
    "build_request",
    "build_url",
    "percent_encode_query",
    # Transport
    "AiohttpTransport",
    "Response",
    "Transport",
    # Pipeline
    "ContentTypeStep",
    "IsHTTPStep",
    "ResponsePipeline",
    "StatusCodeStep",
    "ValidationStep",
    "has_content_type",
    "is_http_response",
    "validate_status_code",
    # Progress
    "ProgressCounter",
    "ProgressEvent",
    "TransferDirection",
    "TransferProgress",
    # Config
    "APIConfig",
    "NetworkConfig",
    "setup_logging",
    # Errors
    "ContentTypeMismatchError",
    "HTTPFailureError",
    "InvalidURLError",
    "NonHTTPResponseError",
    "RequestError",
    "RequestErrorKind",
]
