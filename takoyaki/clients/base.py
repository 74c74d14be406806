# takoyaki/clients/base.py

import time
from typing import Optional, Any

import httpx

from ..core.logging import LoggingMixin
from ..types import ArchiveError


class HttpArchiveClient(LoggingMixin):
    """Shared HTTP plumbing for archive clients. Non-200 responses raise ArchiveError."""

    def __init__(self, base_url: str, timeout: float = 30.0,
                 http_client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self.http = http_client or httpx.AsyncClient(timeout=timeout)

    def url(self, *parts: Any) -> str:
        path = "/".join(str(part).strip("/") for part in parts)
        return f"{self.base_url}/{path}" if path else self.base_url

    async def _request(self, method: str, url: str, content: Optional[bytes] = None) -> bytes:
        headers = {"Content-Type": "application/json"} if content is not None else None
        start = time.perf_counter()

        try:
            response = await self.http.request(method, url, content=content, headers=headers)
        except httpx.HTTPError as e:
            self.log_error("Archive request failed", url=url, error=str(e))
            raise ArchiveError(f"Request to {url} failed: {e}", url=url) from e

        duration_ms = round((time.perf_counter() - start) * 1000, 1)

        if response.status_code != httpx.codes.OK:
            body = response.text
            self.log_warning("Bad archive response", url=url,
                             status_code=response.status_code, duration_ms=duration_ms)
            raise ArchiveError(
                f"Bad response code: {response.status_code}\n{body}",
                url=url,
                status_code=response.status_code,
            )

        self.log_debug("Archive request completed", method=method, url=url,
                       status_code=response.status_code, duration_ms=duration_ms)
        return response.content

    async def get(self, url: str) -> bytes:
        return await self._request("GET", url)

    async def post(self, url: str, content: bytes) -> bytes:
        return await self._request("POST", url, content=content)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
