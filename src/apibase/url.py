"""URL assembly from a base URL, a path, and ordered query items."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote, urljoin, urlsplit

from .errors import InvalidURLError

logger = logging.getLogger(__name__)

# Characters left unescaped in query names and values, besides ASCII
# alphanumerics and "-._~" which quote() never escapes. "+" is never literal.
QUERY_SAFE_CHARS = "!$&'()*,;=:@/?"

# Characters that cannot appear in a path component
_PATH_DELIMITERS = frozenset("?#")

# Characters left unescaped in a path. "%" is kept so existing escapes survive.
PATH_SAFE_CHARS = "/%:@!$&'()*+,;="


@dataclass(frozen=True)
class QueryItem:
    """
    A single query parameter.

    A value of None encodes as ``name=`` with nothing after the equals sign.
    Items keep the order they were given in and duplicates are allowed.
    """

    name: str
    value: Optional[str] = None


def percent_encode_query(text: str) -> str:
    """
    Percent-encode a query name or value.

    Space becomes ``%20`` and ``+`` becomes ``%2B``.

    Example:
        >>> percent_encode_query("bar baz")
        'bar%20baz'
        >>> percent_encode_query("bar+baz")
        'bar%2Bbaz'
    """
    return quote(text, safe=QUERY_SAFE_CHARS)


def build_query(query_items: Iterable[QueryItem]) -> str:
    """Join encoded ``name=value`` pairs with ``&``, preserving order."""
    return "&".join(
        f"{percent_encode_query(item.name)}="
        f"{percent_encode_query(item.value) if item.value is not None else ''}"
        for item in query_items
    )


def _check_path(path: str, has_base: bool) -> None:
    for char in path:
        if char.isspace() or ord(char) < 0x20 or ord(char) == 0x7F:
            raise InvalidURLError(f"Path contains invalid character {char!r}: {path!r}")
        if char in _PATH_DELIMITERS:
            raise InvalidURLError(f"Path contains URL delimiter {char!r}: {path!r}")

    if path.startswith("//"):
        raise InvalidURLError(f"Path would be read as an authority: {path!r}")

    if not has_base and not path.startswith("/"):
        first_segment = path.split("/", 1)[0]
        if ":" in first_segment:
            raise InvalidURLError(f"Relative path would be read as a scheme: {path!r}")


def _check_base_url(base_url: str) -> None:
    try:
        parsed = urlsplit(base_url)
    except ValueError as err:
        raise InvalidURLError(f"Invalid base URL: {base_url!r}", url=base_url) from err

    if not parsed.scheme or not parsed.netloc:
        raise InvalidURLError(f"Base URL must be absolute: {base_url!r}", url=base_url)


def build_url(
    base_url: Optional[str],
    path: str,
    query_items: Iterable[QueryItem] = (),
) -> str:
    """
    Assemble a request URL.

    Existing percent escapes in the path are kept, and non-ASCII or other
    disallowed path characters are percent-encoded as UTF-8. When query
    items are given they are percent-encoded and appended; an empty list
    produces no ``?``.
    The result is resolved against ``base_url`` when one is set,
    otherwise the relative reference is returned as is.

    Args:
        base_url: Absolute base URL, or None/empty for a relative result
        path: Path component; existing escapes are not re-encoded
        query_items: Ordered query parameters

    Returns:
        The assembled URL string

    Raises:
        InvalidURLError: If the parts cannot form a valid URL

    Example:
        >>> build_url("http://test", "/", [QueryItem("foo", "bar baz")])
        'http://test/?foo=bar%20baz'
    """
    has_base = bool(base_url)
    if base_url:
        _check_base_url(base_url)
    _check_path(path, has_base)
    path = quote(path, safe=PATH_SAFE_CHARS)

    items = list(query_items)
    reference = f"{path}?{build_query(items)}" if items else path

    if not base_url:
        return reference

    url = urljoin(base_url, reference)
    if not urlsplit(url).netloc:
        raise InvalidURLError(f"Could not resolve {reference!r} against {base_url!r}", url=url)

    logger.debug(f"Assembled URL {url}")
    return url
