"""
Port: SourceFetcher
Responsibility: the GET collaborator used to download sources and source maps.
"""
from typing import Protocol, runtime_checkable

from contracts import FetchResponse


@runtime_checkable
class SourceFetcher(Protocol):
    async def get(self, url: str) -> FetchResponse:
        """
        Returns the response whatever its status.
        Raises FetchError on a network-level failure.
        """
        ...
