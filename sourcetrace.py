#!/usr/bin/env python3
"""
sourcetrace.py — SourceTrace command line tool.

Works locally: parses stack traces given as text, a file or stdin and,
unless --offline, rewrites their locations through source maps.

Configuration: environment variables with the SOURCETRACE_ prefix
or a .env file (e.g. SOURCETRACE_FETCH_TIMEOUT_MS=5000).

Subcommands:
    parse   — parse (and enhance) a stack trace, print its frames
    report  — parse a stack trace and POST its frames to a collector
    here    — print the CLI's own current stack

Usage:
    python sourcetrace.py parse --file crash.txt
    python sourcetrace.py parse --text "$STACK" --message "TypeError: x is undefined" --offline
    python sourcetrace.py parse --file crash.txt --function increment --json
    python sourcetrace.py parse --file crash.txt --local-files
    python sourcetrace.py report --url https://collector.example/errors --file crash.txt
    python sourcetrace.py here --json
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

import stacktrace
from adapters.source_cache.inflight_cache import InFlightSourceCache
from adapters.source_fetcher.httpx_fetcher import HttpxSourceFetcher
from adapters.stack_parser.grammar_parser import GrammarStackParser
from config import Settings
from contracts import ErrorLike, Frame, ReportOptions, StackReport, StackTraceOptions
from errors import StackTraceError


# -- helpers ---------------------------------------------------------------

_CONSOLE: Console | None = None


def _console() -> Console:
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(highlight=False)
    return _CONSOLE


def _short(value: Any, limit: int = 64) -> str:
    s = str(value).replace("\n", " ").strip()
    if len(s) <= limit:
        return s
    # Keep the tail: for URLs and paths the file name is what matters.
    return "..." + s[-(limit - 3):]


def _print_frames_table(title: str, frames: list[Frame]) -> None:
    table = Table(title=f"{title} [{len(frames)}]", box=box.ASCII, show_lines=False)
    table.add_column("#", justify="right", no_wrap=True, style="cyan")
    table.add_column("Function")
    table.add_column("Args")
    table.add_column("File")
    table.add_column("Line", justify="right", no_wrap=True)
    table.add_column("Col", justify="right", no_wrap=True)
    for i, frame in enumerate(frames):
        table.add_row(
            str(i),
            escape(frame.function_name or "{anonymous}"),
            escape(",".join(frame.args)) if frame.args is not None else "",
            escape(_short(frame.file_name or frame.source or "", 60)),
            str(frame.line_number) if frame.line_number is not None else "",
            str(frame.column_number) if frame.column_number is not None else "",
        )
    _console().print(table)


def _print_json(frames: list[Frame]) -> None:
    report = StackReport(stack=frames)
    print(json.dumps(report.model_dump(by_alias=True, exclude_none=True), indent=2))


def _read_text(args: argparse.Namespace) -> str:
    if getattr(args, "file", None):
        try:
            return open(args.file, encoding="utf-8").read()
        except OSError as e:
            print(f"Error reading file: {e}", file=sys.stderr)
            sys.exit(1)
    text = getattr(args, "text", None) or sys.stdin.read().strip()
    if not text:
        print("Error: pass a stack trace with --text, --file or stdin", file=sys.stderr)
        sys.exit(1)
    return text


def _options(args: argparse.Namespace, fetcher: HttpxSourceFetcher | None) -> StackTraceOptions:
    function = getattr(args, "function", None)
    return StackTraceOptions(
        filter=(lambda f: f.function_name == function) if function else None,
        offline=True if args.offline else None,
        source_cache=InFlightSourceCache(fetcher) if fetcher is not None else None,
    )


async def _frames_from(args: argparse.Namespace, text: str) -> list[Frame]:
    error = ErrorLike(message=args.message, stack=text)
    if args.local_files:
        s = Settings()
        async with HttpxSourceFetcher(
            timeout_ms=s.fetch_timeout_ms,
            user_agent=s.user_agent,
            allow_local_files=True,
        ) as fetcher:
            return await stacktrace.from_error(error, _options(args, fetcher))
    return await stacktrace.from_error(error, _options(args, None))


# -- commands --------------------------------------------------------------

async def _parse(args: argparse.Namespace) -> None:
    text = _read_text(args)
    frames = await _frames_from(args, text)
    if args.json:
        _print_json(frames)
        return
    dialect = GrammarStackParser().detect(text)
    _print_frames_table(f"Frames ({dialect})" if dialect else "Frames", frames)


async def _report(args: argparse.Namespace) -> None:
    frames = await _frames_from(args, _read_text(args))
    options = ReportOptions(message=args.message)
    body = await stacktrace.report(frames, args.url, options)
    print(f"status:  ok ({len(frames)} frames sent)")
    if body:
        print(f"body:    {body}")


async def _here(args: argparse.Namespace) -> None:
    frames = await stacktrace.get({"offline": True})
    if args.json:
        _print_json(frames)
    else:
        _print_frames_table("Current stack", frames)


def _add_input_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--text", "-t", help="Stack trace text (or stdin)")
    p.add_argument("--file", "-f", help="Path to a file holding the stack trace")
    p.add_argument("--message", "-m", help="Error message, used when no dialect matches")
    p.add_argument("--offline", action="store_true",
                   help="Parse only; do not fetch sources or source maps")
    p.add_argument("--local-files", action="store_true",
                   help="Also read file:// URLs and plain paths from disk")
    p.add_argument("--function", help="Keep only frames with this function name")


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="sourcetrace",
        description="SourceTrace: stack trace parsing and source map enhancement",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # parse
    p = sub.add_parser("parse", help="Parse a stack trace and print its frames")
    _add_input_arguments(p)
    p.add_argument("--json", action="store_true", help="Print frames as JSON")

    # report
    p = sub.add_parser("report", help="Parse a stack trace and POST its frames")
    _add_input_arguments(p)
    p.add_argument("--url", "-u", help="Collector URL (default: SOURCETRACE_REPORT_URL)")

    # here
    p = sub.add_parser("here", help="Print the current stack of this command")
    p.add_argument("--json", action="store_true", help="Print frames as JSON")

    args = parser.parse_args()
    logging.basicConfig(level=Settings().log_level.upper())

    cmds = {
        "parse":  _parse,
        "report": _report,
        "here":   _here,
    }

    try:
        asyncio.run(cmds[args.command](args))
    except (StackTraceError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
