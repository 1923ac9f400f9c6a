"""In-process transport stubs for deterministic tests."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional, Union

from multidict import CIMultiDict, CIMultiDictProxy

from .http.protocols import Response
from .progress import TransferProgress
from .request import RequestDescriptor

logger = logging.getLogger(__name__)


class StubTransport:
    """
    Transport that returns a canned response or error without any I/O.

    The stubbed outcome is used for every request until replaced. Issued
    descriptors are recorded in ``requests``. Progress is reported as
    complete for non-empty request and response bodies.

    Example:
        transport = StubTransport()
        transport.stub_response(status=200, data=b"ok", headers={"Content-Type": "text/plain"})

        api = APIBase(transport=transport)
        response = await api.send(APIRequest(path="/"))
        assert transport.requests[0].url == "/"
    """

    def __init__(self) -> None:
        self._outcome: Union[Response, BaseException, None] = None
        self._status: Optional[int] = None
        self._data = b""
        self._headers: CIMultiDict[str] = CIMultiDict()
        self.requests: list[RequestDescriptor] = []

    def stub(self, response: Response) -> StubTransport:
        """Return ``response`` as is for every request."""
        self._outcome = response
        return self

    def stub_response(
        self,
        status: int,
        data: bytes = b"",
        headers: Optional[Mapping[str, str]] = None,
    ) -> StubTransport:
        """
        Answer every request with ``status`` and ``data``.

        ``Content-Length`` is set when ``data`` is non-empty, replacing a
        ``headers`` entry whatever its letter case. The response URL is taken
        from the request being answered.
        """
        response_headers: CIMultiDict[str] = CIMultiDict(headers or {})
        if data:
            response_headers["Content-Length"] = str(len(data))
        self._outcome = None
        self._status = status
        self._data = data
        self._headers = response_headers
        return self

    def stub_json_response(
        self,
        status: int,
        data: bytes = b"",
        headers: Optional[Mapping[str, str]] = None,
    ) -> StubTransport:
        """Like stub_response, with ``Content-Type: application/json``."""
        response_headers: CIMultiDict[str] = CIMultiDict(headers or {})
        response_headers["Content-Type"] = "application/json"
        return self.stub_response(status, data, response_headers)

    def stub_non_http(self, data: bytes = b"") -> StubTransport:
        """Answer every request with a response that has no status line."""
        return self.stub(Response(data=data, status=None))

    def stub_error(self, error: BaseException) -> StubTransport:
        """Raise ``error`` for every request."""
        self._outcome = error
        return self

    async def issue(
        self,
        descriptor: RequestDescriptor,
        progress: TransferProgress,
    ) -> Response:
        self.requests.append(descriptor)
        logger.debug(f"Stubbed {descriptor.method.value} {descriptor.url}")

        if isinstance(self._outcome, BaseException):
            raise self._outcome

        if descriptor.content_length:
            progress.report_upload(descriptor.content_length, descriptor.content_length)

        if isinstance(self._outcome, Response):
            response = self._outcome
        elif self._status is not None:
            response = Response(
                data=self._data,
                status=self._status,
                headers=CIMultiDictProxy(CIMultiDict(self._headers)),
                url=descriptor.url,
            )
        else:
            raise RuntimeError("StubTransport has no stubbed response; call stub_response() first")

        if response.data:
            progress.report_download(len(response.data), len(response.data))
        return response

    async def close(self) -> None:
        pass
