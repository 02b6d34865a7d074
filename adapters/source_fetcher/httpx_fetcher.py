"""
Adapter: HttpxSourceFetcher
Implements the SourceFetcher port (the GET collaborator) on httpx.AsyncClient.

  - http/https URLs are fetched over the network, redirects followed
  - file:// URLs and plain paths are read from disk only when
    allow_local_files is set (a CLI convenience; off for the API)
  - with allowed_hosts set, any other host is refused
  - every transport failure surfaces as FetchError
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional
from urllib.parse import unquote, urlsplit

import httpx

from contracts import FetchResponse
from errors import FetchError

logger = logging.getLogger("sourcetrace.source_fetcher")


class HttpxSourceFetcher:
    """
    GETs sources and source maps.

    An injected client is shared and left open; otherwise the fetcher owns
    one and closes it in aclose() / on leaving `async with`.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout_ms: int = 10_000,
        user_agent: str = "sourcetrace/0.1.0",
        allow_local_files: bool = False,
        allowed_hosts: Optional[Iterable[str]] = None,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout_ms / 1000.0
        self._user_agent = user_agent
        self._allow_local_files = allow_local_files
        self._allowed_hosts = frozenset(h.lower() for h in allowed_hosts) if allowed_hosts else None

    async def __aenter__(self) -> "HttpxSourceFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    # -- SourceFetcher protocol -----------------------------------------------

    async def get(self, url: str) -> FetchResponse:
        parts = urlsplit(url)
        scheme = parts.scheme.lower()
        if scheme in ("http", "https"):
            host = (parts.hostname or "").lower()
            if self._allowed_hosts is not None and host not in self._allowed_hosts:
                raise FetchError(url, reason=f"host {host!r} is not allowed")
            return await self._get_remote(url)
        if scheme == "file" or (not scheme or len(scheme) == 1):  # "C:" drive letters
            return await self._get_local(url)
        raise FetchError(url, reason=f"unsupported scheme {scheme!r}")

    # -- Private ---------------------------------------------------------------

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                headers={"User-Agent": self._user_agent},
            )
        return self._client

    async def _get_remote(self, url: str) -> FetchResponse:
        try:
            response = await self._http().get(url)
        except httpx.HTTPError as exc:
            logger.debug("GET %s failed: %s", url, exc)
            raise FetchError(url, reason=str(exc) or type(exc).__name__) from exc
        return FetchResponse(
            status=response.status_code,
            headers=dict(response.headers),
            text=response.text,
        )

    async def _get_local(self, url: str) -> FetchResponse:
        if not self._allow_local_files:
            raise FetchError(url, reason="local files are not allowed")
        path = Path(unquote(urlsplit(url).path)) if url.startswith("file:") else Path(url)
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise FetchError(url, reason=str(exc)) from exc
        return FetchResponse(status=200, text=text)
