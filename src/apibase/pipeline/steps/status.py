"""StatusCodeStep - accept only an allowed set of status codes."""

from __future__ import annotations

import logging
from collections.abc import Collection

from ...errors import HTTPFailureError
from ...http.protocols import Response

logger = logging.getLogger(__name__)

# Default accepted range, 2xx
SUCCESS_STATUS_CODES = range(200, 300)


def validate_status_code(response: Response, status_codes: Collection[int] = SUCCESS_STATUS_CODES) -> Response:
    """
    Pass the response through if its status is in ``status_codes``.

    Args:
        response: Response from the previous stage
        status_codes: Accepted codes, e.g. ``range(200, 300)`` or ``{200, 204}``

    Returns:
        The same response, unchanged

    Raises:
        HTTPFailureError: Carrying the actual status when it is not accepted
    """
    if response.status not in status_codes:
        logger.debug(f"Rejecting {response.url}: HTTP {response.status}")
        raise HTTPFailureError(response.status if response.status is not None else 0, response)
    return response


class StatusCodeStep:
    """
    Pipeline step that validates the response status code.

    Example:
        step = StatusCodeStep(range(200, 300))
        response = step.check(response)  # raises HTTPFailureError(404) on 404
    """

    name = "status_code"

    def __init__(self, status_codes: Collection[int] = SUCCESS_STATUS_CODES) -> None:
        self._status_codes = status_codes

    @property
    def status_codes(self) -> Collection[int]:
        return self._status_codes

    def check(self, response: Response) -> Response:
        return validate_status_code(response, self._status_codes)
