"""Outbound HTTP access to the source site."""

from dataclasses import dataclass
from typing import Callable, Optional

import httpx

from app.config import settings
from app.errors import FetchError


@dataclass
class DownloadedImage:
    url: str
    content: bytes
    content_type: str


class SourceClient:
    """Fetches pages and images with a browser identity and a bounded timeout.

    The site rejects obvious bot user agents, so every request carries the
    configured desktop browser User-Agent.
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        client_factory: Optional[Callable[[], httpx.AsyncClient]] = None,
    ):
        self._user_agent = user_agent or settings.user_agent
        self._timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self._client_factory = client_factory or self._default_client
        self._client: Optional[httpx.AsyncClient] = None

    def _default_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)

    def _http(self) -> httpx.AsyncClient:
        """Shared connection pool, opened on first use."""
        if self._client is None or self._client.is_closed:
            self._client = self._client_factory()
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _get(self, url: str) -> httpx.Response:
        try:
            response = await self._http().get(url, headers={"User-Agent": self._user_agent})
        except httpx.HTTPError as exc:
            raise FetchError(f"Request failed ({type(exc).__name__}): {url}", url=url) from exc
        return response

    async def fetch_text(self, url: str) -> str:
        response = await self._get(url)
        if not response.is_success:
            raise FetchError(
                f"Request failed ({response.status_code}): {url}",
                url=url,
                status_code=response.status_code,
            )
        return response.text

    async def fetch_image(self, url: str) -> DownloadedImage:
        response = await self._get(url)
        if not response.is_success:
            raise FetchError(
                f"Image download failed ({response.status_code}): {url}",
                url=url,
                status_code=response.status_code,
            )
        return DownloadedImage(
            url=url,
            content=response.content,
            content_type=response.headers.get("content-type", ""),
        )
