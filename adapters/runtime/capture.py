"""
capture.py — the one place that touches the live interpreter stack.

Both helpers render frames as V8-style text ("    at name (file:line:col)",
innermost first) so everything downstream works on plain strings through
the regular StackParser.
"""
from __future__ import annotations

import traceback
from typing import Iterable, Optional


class StackCapture(Exception):
    """Raised and caught internally to learn where we are."""


def _render_frame(summary: traceback.FrameSummary) -> str:
    # Line 0 stands for "unknown" and parses back to no line.
    location = f"{summary.filename}:{summary.lineno or 0}"
    colno = getattr(summary, "colno", None)
    if summary.lineno and colno is not None:
        location += f":{colno + 1}"
    return f"    at {summary.name} ({location})"


def render_stack(summaries: Iterable[traceback.FrameSummary], header: Optional[str] = None) -> str:
    lines = [header] if header else []
    lines.extend(_render_frame(s) for s in summaries)
    return "\n".join(lines)


def capture_stack(skip: int = 0) -> str:
    """
    Stack of the caller of capture_stack, innermost first, with `skip`
    more frames dropped from the top.
    """
    try:
        raise StackCapture()
    except StackCapture as exc:
        frame = exc.__traceback__.tb_frame.f_back
    for _ in range(skip):
        if frame is None:
            break
        frame = frame.f_back
    summaries = traceback.extract_stack(frame) if frame is not None else []
    return render_stack(reversed(summaries), header="StackCapture: current stack")


def stack_of(exc: BaseException) -> Optional[str]:
    """Stack string of a raised exception, innermost first; None if never raised."""
    if exc.__traceback__ is None:
        return None
    summaries = traceback.extract_tb(exc.__traceback__)
    message = str(exc).splitlines()[0] if str(exc) else ""
    header = f"{type(exc).__name__}: {message}" if message else type(exc).__name__
    return render_stack(reversed(summaries), header=header)
