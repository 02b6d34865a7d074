"""
Adapter: GrammarStackParser
Implements the StackParser port.

Selection:
  1. A stack string is tried against STACK_DIALECTS in priority order; the
     first grammar under which every non-empty line is a frame (or a header,
     or a skipped line) wins.
  2. Without a stack, the message is tried against MESSAGE_DIALECTS
     (Opera 9 puts its backtrace in the message).
  3. A stack that no grammar accepts falls back to a single frame carrying
     only the error message.
  4. Otherwise ParseError.
"""
from __future__ import annotations

import logging
import re
from typing import Optional

from adapters.stack_parser.dialects import (
    ARGS_NOT_AVAILABLE,
    MESSAGE_DIALECTS,
    STACK_DIALECTS,
    DialectGrammar,
    extract_location,
)
from contracts import Frame, FrameFilter
from errors import ParseError

logger = logging.getLogger("sourcetrace.stack_parser")


def _to_frame(grammar: DialectGrammar, m: re.Match[str], line: str) -> Frame:
    groups = m.groupdict()

    name = groups.get("name")
    if name is not None:
        for pattern, repl in grammar.name_rewrites:
            name = pattern.sub(repl, name)
        name = name.strip()
        if not name or name in grammar.anonymous:
            name = None

    args: Optional[list[str]] = None
    raw_args = groups.get("args")
    if raw_args is not None and raw_args != ARGS_NOT_AVAILABLE:
        args = raw_args.split(",") if raw_args else []

    if groups.get("location") is not None:
        file_name, line_number, column_number = extract_location(groups["location"])
    else:
        file_name = groups.get("file") or None
        line_number = int(groups["line"]) if groups.get("line") else None
        column_number = int(groups["column"]) if groups.get("column") else None

    return Frame(
        function_name=name,
        args=args,
        file_name=file_name,
        line_number=line_number or None,
        column_number=column_number,
        source=line.strip(),
    )


def apply_grammar(grammar: DialectGrammar, text: str) -> Optional[list[Frame]]:
    """Frames of `text` under `grammar`, or None if the grammar does not fit."""
    lines = text.splitlines()
    frames: list[Frame] = []
    located = False
    i = 0
    while i < len(lines):
        line = lines[i].rstrip()
        i += 1
        for pattern, repl in grammar.rewrites:
            line = pattern.sub(repl, line)
        if not line.strip():
            continue
        if grammar.skip is not None and grammar.skip.match(line.strip()):
            continue

        frame = None
        for pattern in grammar.patterns:
            m = pattern.match(line)
            if m:
                frame = _to_frame(grammar, m, line)
                break

        if frame is None:
            if grammar.header and not frames and not (
                grammar.frame_lead is not None and grammar.frame_lead.match(line)
            ):
                continue
            return None

        frames.append(frame)
        located = located or frame.file_name is not None or frame.line_number is not None
        # The lines between two frames echo source code.
        i += grammar.stride - 1

    if not frames:
        return None
    if grammar.requires_location and not located:
        return None
    return frames


class GrammarStackParser:
    """
    Parses raw stack strings of V8, Firefox/Safari, IE and Opera runtimes.
    Stateless; a single instance may be shared freely.
    """

    def __init__(
        self,
        dialects: tuple[DialectGrammar, ...] = STACK_DIALECTS,
        message_dialects: tuple[DialectGrammar, ...] = MESSAGE_DIALECTS,
    ) -> None:
        self._dialects = dialects
        self._message_dialects = message_dialects

    # -- StackParser protocol -----------------------------------------------

    def parse(
        self,
        raw_stack: Optional[str],
        message: Optional[str] = None,
        frame_filter: Optional[FrameFilter] = None,
    ) -> list[Frame]:
        frames = self._parse(raw_stack, message)
        if frame_filter is not None:
            frames = [f for f in frames if frame_filter(f)]
        return frames

    # -- Helpers ------------------------------------------------------------

    def detect(self, raw_stack: str) -> Optional[str]:
        """Name of the dialect that would parse raw_stack, if any."""
        for grammar in self._dialects:
            if apply_grammar(grammar, raw_stack) is not None:
                return grammar.name
        return None

    def _parse(self, raw_stack: Optional[str], message: Optional[str]) -> list[Frame]:
        if raw_stack and raw_stack.strip():
            for grammar in self._dialects:
                frames = apply_grammar(grammar, raw_stack)
                if frames is not None:
                    logger.debug("Parsed %d frames as %s", len(frames), grammar.name)
                    return frames
            if message:
                logger.debug("No dialect matched the stack; falling back to the message")
                return [Frame(source=message)]
            raise ParseError("Cannot parse given error: no dialect matched its stack")

        if message:
            for grammar in self._message_dialects:
                frames = apply_grammar(grammar, message)
                if frames is not None:
                    logger.debug("Parsed %d frames from the message as %s", len(frames), grammar.name)
                    return frames
        raise ParseError("Cannot parse given error object")
