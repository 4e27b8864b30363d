"""
HTTP transport used by the fetcher and the submitter.

Components depend on the ``HttpTransport`` protocol only, so tests inject fakes
and production code uses ``RequestsTransport``. TLS, pooling and connection
reuse belong to the transport, never to the pipeline.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Protocol

import requests
import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """Status code plus decoded JSON body."""

    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpTransport(Protocol):
    """
    Protocol for performing JSON HTTP calls.

    Implementations raise on connection problems and undecodable bodies; HTTP
    error statuses come back as a normal ``HttpResponse``.
    """

    async def get(
        self, url: str, *, params: dict[str, Any] | None = None, headers: dict[str, str]
    ) -> HttpResponse: ...

    async def post(self, url: str, *, json: Any, headers: dict[str, str]) -> HttpResponse: ...


class RequestsTransport:
    """``requests``-backed transport; blocking calls run in a worker thread."""

    def __init__(
        self, timeout_seconds: float = 30.0, session: requests.Session | None = None
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self.logger = logger.bind(component="requests_transport")

    async def get(
        self, url: str, *, params: dict[str, Any] | None = None, headers: dict[str, str]
    ) -> HttpResponse:
        return await asyncio.to_thread(self._request, "GET", url, params=params, headers=headers)

    async def post(self, url: str, *, json: Any, headers: dict[str, str]) -> HttpResponse:
        return await asyncio.to_thread(self._request, "POST", url, json=json, headers=headers)

    def _request(self, method: str, url: str, **kwargs: Any) -> HttpResponse:
        response = self.session.request(method, url, timeout=self.timeout_seconds, **kwargs)
        self.logger.debug("http_response", method=method, url=url, status=response.status_code)
        # Raises requests.JSONDecodeError on a non-JSON body
        return HttpResponse(status_code=response.status_code, body=response.json())

    async def aclose(self) -> None:
        self.session.close()
