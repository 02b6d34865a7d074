"""
Port: ReportSender
Responsibility: transmitting captured frames to a remote collector.
"""
from typing import Optional, Protocol, runtime_checkable

from contracts import Frame


@runtime_checkable
class ReportSender(Protocol):
    async def report(
        self,
        frames: list[Frame],
        url: str,
        message: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> str:
        """
        POSTs {"stack": frames} to url and returns the response body text.
        Raises ReportError on a non-2xx status or network failure.
        """
        ...
