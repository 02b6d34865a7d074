"""
Port: SourceCache
Responsibility: deduplicating fetches of the same URL within one enhancement.
"""
from typing import Protocol, runtime_checkable

from contracts import DecodedMap, SourceDocument
from ports.source_map_decoder import SourceMapDecoder


@runtime_checkable
class SourceCache(Protocol):
    async def fetch(self, url: str) -> SourceDocument:
        """
        Returns the document for url, with its source map reference resolved.
        A second call for a URL still in flight awaits the same result.
        Raises FetchError on a non-2xx status or network failure.
        """
        ...

    async def fetch_map(self, url: str) -> str:
        """Returns the raw source map text. Raises FetchError."""
        ...

    async def load_map(self, url: str, decoder: SourceMapDecoder) -> DecodedMap:
        """
        Fetches and decodes a map once per cache.
        Raises FetchError or MapDecodeError.
        """
        ...
