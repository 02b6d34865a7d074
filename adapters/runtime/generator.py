"""
Generator — frames for "here, right now", when no error exists yet.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from adapters.runtime.capture import capture_stack
from adapters.stack_parser.grammar_parser import GrammarStackParser
from contracts import Frame, FrameFilter, StackTraceOptions, as_options
from ports.stack_parser import StackParser

_PARSER = GrammarStackParser()

# generate_frames' own frame, dropped so the stack starts at its caller.
_OWN_FRAMES = 1


def generate_frames(
    frame_filter: Optional[FrameFilter] = None,
    skip: int = 0,
    parser: Optional[StackParser] = None,
) -> list[Frame]:
    """Current stack starting at the caller, minus `skip` further frames."""
    raw = capture_stack(skip=_OWN_FRAMES + skip)
    return (parser or _PARSER).parse(raw, frame_filter=frame_filter)


async def generate_artificially(
    options: StackTraceOptions | Mapping[str, Any] | None = None,
) -> list[Frame]:
    """Async form of generate_frames; the first frame is the awaiting caller."""
    opts = as_options(options)
    return generate_frames(opts.filter, skip=1)
