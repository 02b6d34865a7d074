"""
errors.py — exception hierarchy.

Only ParseError, InvalidArgumentError and ReportError ever reach callers
of the public operations; FetchError, MapDecodeError and LookupMiss are
recovered inside the enhancer.
"""
from __future__ import annotations

from typing import Optional


class StackTraceError(Exception):
    """Base class for every SourceTrace error."""


class ParseError(StackTraceError, ValueError):
    """No dialect grammar matched and there was nothing to fall back on."""


class InvalidArgumentError(StackTraceError, TypeError):
    pass


class FetchError(StackTraceError):
    def __init__(self, url: str, status: Optional[int] = None, reason: str = "") -> None:
        self.url = url
        self.status = status
        detail = f"HTTP {status}" if status is not None else (reason or "network failure")
        super().__init__(f"Failed to fetch {url}: {detail}")


class MapDecodeError(StackTraceError, ValueError):
    pass


class LookupMiss(StackTraceError, LookupError):
    def __init__(self, line: int, column: int) -> None:
        self.line = line
        self.column = column
        super().__init__(f"No mapping covers generated position {line}:{column}")


class ReportError(StackTraceError):
    def __init__(self, url: str, status: Optional[int] = None, body: str = "") -> None:
        self.url = url
        self.status = status
        self.body = body
        if status is None:
            msg = f"POST {url} failed"
        else:
            msg = f"POST {url} returned HTTP {status}"
        super().__init__(msg)
