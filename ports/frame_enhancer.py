"""
Port: FrameEnhancer
Responsibility: rewriting frame locations to original sources.
"""
from typing import Optional, Protocol, runtime_checkable

from contracts import Frame, FrameFilter


@runtime_checkable
class FrameEnhancer(Protocol):
    async def enhance_frame(self, frame: Frame) -> Frame:
        """Returns the enhanced frame, or the frame unchanged. Never raises."""
        ...

    async def enhance(
        self,
        frames: list[Frame],
        frame_filter: Optional[FrameFilter] = None,
    ) -> list[Frame]:
        """
        Enhances every frame concurrently and settles once all of them have.
        Output order equals input order; frame_filter is applied last.
        """
        ...
