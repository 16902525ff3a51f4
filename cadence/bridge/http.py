"""
Request/response transport to a media server over HTTP.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from cadence.errors import TransportUnreachable
from cadence.obs import logger


@dataclass
class HttpResponse:
    """Status plus decoded body (JSON when possible, else text)."""
    status: int
    response: Any

    @property
    def ok(self) -> bool:
        return self.status == 200


class HttpTransport:
    """
    Thin httpx wrapper bound to one server.

    `check()` is the reachability check used by the connection handshake;
    the server must answer its root route with 200 (and with the configured
    identifying header when one is set).
    """

    def __init__(
        self,
        host: str,
        port: int,
        scheme: str = "http://",
        timeout: float = 5.0,
        server_header: str = "",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = f"{scheme}{host}:{port}"
        self.server_header = server_header
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def check(self):
        """Raise TransportUnreachable unless the server answers as expected."""
        try:
            response = await self._client.get("/")
        except httpx.HTTPError as e:
            raise TransportUnreachable(f"{self.base_url} unreachable: {e}") from e

        if response.status_code != 200:
            raise TransportUnreachable(f"{self.base_url} answered {response.status_code}")
        if self.server_header and self.server_header not in response.headers:
            raise TransportUnreachable(f"{self.base_url} is not a media server (missing {self.server_header} header)")

        logger.debug(f"  {self.base_url} reachable")

    async def request(self, method: str, path: str, **kwargs) -> HttpResponse:
        response = await self._client.request(method, path, **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = response.text
        return HttpResponse(status=response.status_code, response=body)

    async def close(self):
        await self._client.aclose()
