"""
Instrumenter — wraps a callable to observe its stack on return or on error.

The wrapper keeps the original under __stacktrace_original_fn__; the
original itself is never touched. Wrapping an already wrapped callable
returns it as is, and deinstrument() reads the reference back.
"""
from __future__ import annotations

import functools
import inspect
import logging
from typing import Any, Callable, Optional

from adapters.runtime.capture import stack_of
from adapters.runtime.generator import generate_frames
from adapters.stack_parser.grammar_parser import GrammarStackParser
from contracts import Frame
from errors import InvalidArgumentError, ParseError
from ports.stack_parser import StackParser

logger = logging.getLogger("sourcetrace.instrumenter")

ORIGINAL_FN_ATTR = "__stacktrace_original_fn__"

FramesCallback = Callable[[list[Frame]], Any]

_PARSER = GrammarStackParser()


def _original_of(fn: Any) -> Optional[Callable[..., Any]]:
    try:
        return vars(fn).get(ORIGINAL_FN_ATTR)
    except TypeError:
        return None


def _frames_of(exc: BaseException, parser: StackParser) -> list[Frame]:
    try:
        return parser.parse(stack_of(exc), message=str(exc) or type(exc).__name__)
    except ParseError as parse_exc:
        logger.debug("Could not parse the stack of %r: %s", exc, parse_exc)
        return []


def _notify(callback: FramesCallback, frames: list[Frame]) -> None:
    try:
        callback(frames)
    except Exception:
        logger.exception("Instrumentation callback %r failed", callback)


def instrument(
    fn: Callable[..., Any],
    on_success: Optional[FramesCallback] = None,
    on_error: Optional[FramesCallback] = None,
    parser: Optional[StackParser] = None,
) -> Callable[..., Any]:
    if not callable(fn):
        raise InvalidArgumentError("Cannot instrument non-function object")
    if _original_of(fn) is not None:
        return fn
    parser = parser or _PARSER

    if inspect.iscoroutinefunction(fn):
        @functools.wraps(fn)
        async def wrapper(*args, **kwargs):
            try:
                result = await fn(*args, **kwargs)
            except Exception as exc:
                if on_error is not None:
                    _notify(on_error, _frames_of(exc, parser))
                raise
            if on_success is not None:
                _notify(on_success, generate_frames(skip=1, parser=parser))
            return result
    else:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                result = fn(*args, **kwargs)
            except Exception as exc:
                if on_error is not None:
                    _notify(on_error, _frames_of(exc, parser))
                raise
            if on_success is not None:
                _notify(on_success, generate_frames(skip=1, parser=parser))
            return result

    setattr(wrapper, ORIGINAL_FN_ATTR, fn)
    return wrapper


def deinstrument(fn: Callable[..., Any]) -> Callable[..., Any]:
    if not callable(fn):
        raise InvalidArgumentError("Cannot de-instrument non-function object")
    original = _original_of(fn)
    return fn if original is None else original
