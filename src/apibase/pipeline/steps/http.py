"""IsHTTPStep - reject responses without an HTTP status line."""

from ...errors import NonHTTPResponseError
from ...http.protocols import Response


def is_http_response(response: Response) -> Response:
    """
    Pass through responses that carry an HTTP status.

    Raises:
        NonHTTPResponseError: If the response has no status
    """
    if not response.is_http:
        raise NonHTTPResponseError()
    return response


class IsHTTPStep:
    """Pipeline step wrapping is_http_response."""

    name = "is_http"

    def check(self, response: Response) -> Response:
        return is_http_response(response)
