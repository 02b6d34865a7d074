"""
Port: StackParser
Responsibility: turning a raw stack string into an ordered list of Frames.
"""
from typing import Optional, Protocol, runtime_checkable

from contracts import Frame, FrameFilter


@runtime_checkable
class StackParser(Protocol):
    def parse(
        self,
        raw_stack: Optional[str],
        message: Optional[str] = None,
        frame_filter: Optional[FrameFilter] = None,
    ) -> list[Frame]:
        """
        Tries the dialect grammars in priority order; the first one under
        which every frame line matches wins.
        frame_filter, if given, drops non-matching frames (order kept).
        Raises ParseError when nothing matches and there is no message
        to fall back on.
        """
        ...
