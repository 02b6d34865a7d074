"""
dialects.py — declarative grammars of the stack-trace dialects.

Each grammar is immutable data: how a runtime lays out its stack string and
how one line maps to a Frame. GrammarStackParser tries STACK_DIALECTS in
order; MESSAGE_DIALECTS are only consulted when an error has no stack and
carries its trace inside the message (Opera 9).

Named groups understood by the parser:
  name      function name (after name_rewrites / anonymous handling)
  args      comma-separated argument renderings
  location  "file:line:col" style URL-like, split by extract_location()
  file, line, column   explicit location parts
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern

# ──────────────────────────────────────────────────────────────────────────────
# Grammar descriptor
# ──────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DialectGrammar:
    name: str
    patterns: tuple[Pattern[str], ...]
    # Leading lines that are not frame-shaped form the error message.
    header: bool = False
    # Frame-shaped lines can never be header lines.
    frame_lead: Optional[Pattern[str]] = None
    # Lines ignored anywhere in the trace.
    skip: Optional[Pattern[str]] = None
    # Substitutions applied to each line before matching.
    rewrites: tuple[tuple[Pattern[str], str], ...] = ()
    name_rewrites: tuple[tuple[Pattern[str], str], ...] = ()
    anonymous: frozenset[str] = frozenset()
    # A frame line every `stride` lines; the lines in between echo source code.
    stride: int = 1
    # At least one frame must carry a location for the grammar to be selected.
    requires_location: bool = True


# Location of the form "url:line:col", "url:line" or bare "url".
_LOCATION_RE = re.compile(r"^(?P<file>.+?)(?::(?P<line>\d+))?(?::(?P<column>\d+))?$")

# Innermost "(url:line:col)" inside a V8 eval location.
_EVAL_ORIGIN_RE = re.compile(r"\(([^()]+:\d+:\d+)\)")

# Pseudo file names that do not name a resource.
NOT_A_FILE = frozenset({"eval", "<anonymous>", "native", "[native code]", "unknown location"})

# Argument rendering meaning "unknown".
ARGS_NOT_AVAILABLE = "[arguments not available]"


def extract_location(url_like: str) -> tuple[Optional[str], Optional[int], Optional[int]]:
    """Splits 'http://x/y.js:10:5' into ('http://x/y.js', 10, 5)."""
    if "eval at " in url_like:
        origin = _EVAL_ORIGIN_RE.findall(url_like)
        if origin:
            url_like = origin[-1]
    url_like = url_like.strip().strip("()")
    if ":" not in url_like:
        if not url_like or url_like in NOT_A_FILE:
            return None, None, None
        return url_like, None, None
    m = _LOCATION_RE.match(url_like)
    file = m.group("file")
    line = int(m.group("line")) if m.group("line") else None
    column = int(m.group("column")) if m.group("column") else None
    if file in NOT_A_FILE:
        return None, line, column
    return file, line, column


# ──────────────────────────────────────────────────────────────────────────────
# Stack-string dialects (priority order)
# ──────────────────────────────────────────────────────────────────────────────

_AT_LEAD = re.compile(r"^\s*at\s")

# V8 (Chrome, Node, Edge): "    at name (loc)" or "    at loc".
V8 = DialectGrammar(
    name="v8",
    header=True,
    frame_lead=_AT_LEAD,
    patterns=(
        re.compile(
            r"^\s*at (?!Anonymous function \()(?P<name>.+?) "
            r"\((?P<location>eval at .+|.*?:\d+(?::\d+)?|native|<anonymous>|unknown location)\)$"
        ),
        re.compile(r"^\s*at (?P<location>\S+:\d+(?::\d+)?)$"),
        re.compile(r"^\s*at (?P<location>native|<anonymous>)$"),
        # Node: "at async Promise.all (index 0)"
        re.compile(r"^\s*at (?P<name>.+?) \(index \d+\)$"),
    ),
)

# Firefox / Safari: "name@loc", "@loc", or a bare function name.
# Names with unquoted parentheses belong to Opera 11.
FIREFOX = DialectGrammar(
    name="firefox",
    skip=re.compile(r"^(?:eval@)?(?:\[native code\])?$"),
    rewrites=(
        (re.compile(r" line (\d+)(?: > eval line \d+)* > eval:\d+:\d+"), r":\1"),
    ),
    patterns=(
        re.compile(r'^(?!Error created at )(?P<name>(?:[^@(]*"[^"]+"[^@(]*)?[^@(]*)@(?P<location>\S.*)$'),
        re.compile(r"^(?P<name>[^@:()\s][^@:()]*)$"),
    ),
)

# Legacy IE (10/11): V8 layout, but anonymous functions render as "Anonymous function".
IE = DialectGrammar(
    name="ie",
    header=True,
    frame_lead=_AT_LEAD,
    anonymous=frozenset({"Anonymous function"}),
    patterns=(
        re.compile(r"^\s*at (?P<name>.+?) \((?P<location>.*?:\d+(?::\d+)?|native)\)$"),
        re.compile(r"^\s*at (?P<location>\S+:\d+(?::\d+)?)$"),
    ),
)

# Opera 11+: "name(args)@loc"; "Error created at ..." repeats the throw site.
OPERA11 = DialectGrammar(
    name="opera11",
    skip=re.compile(r"^Error created at "),
    name_rewrites=(
        (re.compile(r"<anonymous function(?:: ([^>]+))?>"), r"\1"),
    ),
    patterns=(
        re.compile(r"^(?P<name>[^@(]*)(?:\((?P<args>[^)]*)\))?@(?P<location>\S+:\d+(?::\d+)?)$"),
    ),
)

_OPERA_LINE = (
    r"^\s*Line (?P<line>\d+) of .*?script(?:\s+(?:in\s+)?(?P<file>\S+?))?"
    r"(?:: In function (?P<name>\S+))?$"
)

# Opera 10: "  Line N of linked script URL: In function F", each followed by the source line.
OPERA10 = DialectGrammar(
    name="opera10",
    stride=2,
    patterns=(re.compile(_OPERA_LINE, re.IGNORECASE),),
)

STACK_DIALECTS: tuple[DialectGrammar, ...] = (V8, FIREFOX, IE, OPERA11, OPERA10)


# ──────────────────────────────────────────────────────────────────────────────
# Message dialects (stack absent)
# ──────────────────────────────────────────────────────────────────────────────

# Opera 9: "Statement on line N: ...\nBacktrace:\n  Line N of linked script URL\n    source"
OPERA9 = DialectGrammar(
    name="opera9",
    header=True,
    frame_lead=re.compile(r"^\s*Line \d+ of ", re.IGNORECASE),
    stride=2,
    patterns=(re.compile(_OPERA_LINE, re.IGNORECASE),),
)

MESSAGE_DIALECTS: tuple[DialectGrammar, ...] = (OPERA9,)
