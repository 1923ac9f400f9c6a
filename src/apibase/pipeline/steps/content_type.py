"""ContentTypeStep - require a media type on non-empty responses."""

from __future__ import annotations

import logging
from typing import Optional

from ...errors import ContentTypeMismatchError
from ...http.protocols import Response

logger = logging.getLogger(__name__)


def content_type_matches(content_type: Optional[str], expected: str) -> bool:
    """
    Check a Content-Type header value against an expected media type.

    Matches a header equal to ``expected``, or ``expected`` followed by a
    parameter list that starts with ``charset``. The media type and
    parameter name compare case-insensitively; whitespace around ``;``
    is ignored.

    Examples:
        >>> content_type_matches("text/plain; charset=utf-8", "text/plain")
        True
        >>> content_type_matches("text/plain; charset=utf-8; format=flowed", "text/plain")
        True
        >>> content_type_matches("Text/Plain", "text/plain")
        True
        >>> content_type_matches("text/plain; format=flowed", "text/plain")
        False
    """
    if content_type is None:
        return False
    if content_type.strip().lower() == expected.strip().lower():
        return True

    media_type, sep, params = content_type.partition(";")
    if media_type.strip().lower() != expected.strip().lower():
        return False
    if not sep:
        return True

    name, eq, _ = params.strip().partition("=")
    return bool(eq) and name.strip().lower() == "charset"


def has_content_type(response: Response, expected: str) -> Response:
    """
    Pass the response through if its Content-Type matches ``expected``.

    Responses with an empty body pass unconditionally.

    Raises:
        ContentTypeMismatchError: If the body is non-empty and the header
            is missing or does not match
    """
    if not response.data:
        return response

    actual = response.content_type
    if not content_type_matches(actual, expected):
        logger.debug(f"Rejecting {response.url}: Content-Type {actual!r}, expected {expected!r}")
        raise ContentTypeMismatchError(expected, actual)
    return response


class ContentTypeStep:
    """Pipeline step that validates the response Content-Type."""

    name = "content_type"

    def __init__(self, expected: str) -> None:
        self._expected = expected

    @property
    def expected(self) -> str:
        return self._expected

    def check(self, response: Response) -> Response:
        return has_content_type(response, self._expected)
