"""
stacktrace.py — the public operations of SourceTrace.

    frames = await stacktrace.from_error(exc)
    frames = await stacktrace.from_error({"message": msg, "stack": js_stack})
    frames = await stacktrace.get({"filter": lambda f: f.function_name == "foo"})
    frames = await stacktrace.generate_artificially()
    wrapped = stacktrace.instrument(fn, on_success=print, on_error=print)
    fn = stacktrace.deinstrument(wrapped)
    body = await stacktrace.report(frames, "https://collector.example/errors")

Options (StackTraceOptions or a plain dict): filter, offline, source_cache,
http_client. Defaults for anything network related come
from config.Settings.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from adapters.enhancer.source_map_enhancer import SourceMapEnhancer
from adapters.reporter.httpx_reporter import HttpxReporter
from adapters.runtime.capture import capture_stack, stack_of
from adapters.runtime.generator import generate_artificially
from adapters.runtime.instrumenter import deinstrument, instrument
from adapters.source_cache.inflight_cache import InFlightSourceCache
from adapters.source_fetcher.httpx_fetcher import HttpxSourceFetcher
from adapters.source_map.decoder import VlqSourceMapDecoder
from adapters.stack_parser.grammar_parser import GrammarStackParser
from config import Settings
from contracts import ErrorLike, Frame, ReportOptions, StackTraceOptions, as_options

__all__ = [
    "deinstrument",
    "from_error",
    "generate_artificially",
    "get",
    "instrument",
    "report",
]

logger = logging.getLogger("sourcetrace")

_PARSER = GrammarStackParser()
_DECODER = VlqSourceMapDecoder()


def _error_like(error: Any) -> ErrorLike:
    if isinstance(error, ErrorLike):
        return error
    if isinstance(error, BaseException):
        return ErrorLike(message=str(error) or type(error).__name__, stack=stack_of(error))
    if isinstance(error, Mapping):
        return ErrorLike(message=error.get("message"), stack=error.get("stack"))
    return ErrorLike(
        message=getattr(error, "message", None),
        stack=getattr(error, "stack", None),
    )


async def _enhance(frames: list[Frame], opts: StackTraceOptions, settings: Settings) -> list[Frame]:
    if opts.source_cache is not None:
        enhancer = SourceMapEnhancer(opts.source_cache, _DECODER)
        return await enhancer.enhance(frames, opts.filter)

    async with HttpxSourceFetcher(
        client=opts.http_client,
        timeout_ms=settings.fetch_timeout_ms,
        user_agent=settings.user_agent,
        allow_local_files=settings.allow_local_files,
        allowed_hosts=settings.fetch_allowed_hosts,
    ) as fetcher:
        enhancer = SourceMapEnhancer(InFlightSourceCache(fetcher), _DECODER)
        return await enhancer.enhance(frames, opts.filter)


async def _process(error: ErrorLike, opts: StackTraceOptions) -> list[Frame]:
    settings = Settings()
    offline = settings.offline if opts.offline is None else opts.offline
    if offline:
        return _PARSER.parse(error.stack, message=error.message, frame_filter=opts.filter)
    frames = _PARSER.parse(error.stack, message=error.message)
    return await _enhance(frames, opts, settings)


async def from_error(
    error: Any,
    options: StackTraceOptions | Mapping[str, Any] | None = None,
) -> list[Frame]:
    """
    Parses an error, enhances its frames through source maps and filters them.

    `error` may be an exception, an ErrorLike, a mapping or any object with
    `message` / `stack` attributes. Raises ParseError when there is nothing
    to parse; enhancement failures only leave frames as they were.
    """
    return await _process(_error_like(error), as_options(options))


async def get(options: StackTraceOptions | Mapping[str, Any] | None = None) -> list[Frame]:
    """Frames of the current stack, starting at the awaiting caller."""
    error = ErrorLike(message="current stack", stack=capture_stack(skip=1))
    return await _process(error, as_options(options))


async def report(
    frames: list[Frame],
    url: Optional[str] = None,
    options: ReportOptions | Mapping[str, Any] | None = None,
) -> str:
    """POSTs {"stack": frames} to url (default: Settings.report_url)."""
    opts = options if isinstance(options, ReportOptions) else ReportOptions.model_validate(dict(options or {}))
    settings = Settings()
    url = url or settings.report_url
    if not url:
        raise ValueError("report() needs a url or SOURCETRACE_REPORT_URL")
    reporter = HttpxReporter(
        client=opts.http_client,
        timeout_ms=opts.timeout_ms or settings.report_timeout_ms,
    )
    return await reporter.report(frames, url, message=opts.message, headers=opts.headers)
