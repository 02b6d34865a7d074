"""
Adapter: InFlightSourceCache
Implements the SourceCache port.

Every result, pending or settled, successful or failed, is kept as an
asyncio future keyed by (kind, url). A request for a URL already in flight
awaits the same future instead of issuing another GET.

Lifetime: one enhancement operation by default (stacktrace.from_error builds
a fresh cache per call); callers may keep one alive to reuse it across calls.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

from adapters.source_map.discovery import find_source_map_url, is_data_url, read_data_url
from contracts import DecodedMap, SourceDocument
from errors import FetchError
from ports.source_fetcher import SourceFetcher
from ports.source_map_decoder import SourceMapDecoder

logger = logging.getLogger("sourcetrace.source_cache")


class InFlightSourceCache:
    def __init__(self, fetcher: SourceFetcher) -> None:
        self._fetcher = fetcher
        self._entries: dict[tuple[str, str], asyncio.Future[Any]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, url: str) -> bool:
        return any(key[1] == url for key in self._entries)

    def clear(self) -> None:
        self._entries.clear()

    # -- SourceCache protocol -------------------------------------------------

    async def fetch(self, url: str) -> SourceDocument:
        return await self._memo("source", url, lambda: self._fetch_source(url))

    async def fetch_map(self, url: str) -> str:
        return await self._memo("map", url, lambda: self._fetch_map_text(url))

    async def load_map(self, url: str, decoder: SourceMapDecoder) -> DecodedMap:
        return await self._memo("decoded", url, lambda: self._decode(url, decoder))

    # -- Private ----------------------------------------------------------------

    async def _memo(self, kind: str, url: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        key = (kind, url)
        future = self._entries.get(key)
        if future is None:
            future = asyncio.ensure_future(factory())
            self._entries[key] = future
        elif future.done():
            return future.result()
        else:
            logger.debug("Joining in-flight %s request for %s", kind, url)
        # One waiter giving up must not cancel the shared request.
        return await asyncio.shield(future)

    async def _get_ok(self, url: str) -> tuple[str, dict[str, str]]:
        response = await self._fetcher.get(url)
        if not response.ok:
            raise FetchError(url, status=response.status)
        return response.text, response.headers

    async def _fetch_source(self, url: str) -> SourceDocument:
        text, headers = await self._get_ok(url)
        return SourceDocument(
            url=url,
            text=text,
            source_map_url=find_source_map_url(url, text, headers),
        )

    async def _fetch_map_text(self, url: str) -> str:
        if is_data_url(url):
            return read_data_url(url)
        text, _ = await self._get_ok(url)
        return text

    async def _decode(self, url: str, decoder: SourceMapDecoder) -> DecodedMap:
        return decoder.decode(await self.fetch_map(url))
