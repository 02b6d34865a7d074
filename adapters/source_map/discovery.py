"""
Finding and reading the source map that belongs to a generated file.

Order of precedence:
  1. the SourceMap / X-SourceMap response header
  2. the last "//# sourceMappingURL=" (or legacy "//@") directive in the text
Relative references resolve against the generated file's URL; inline
"data:" URLs are kept as they are.
"""
from __future__ import annotations

import base64
import binascii
import re
from typing import Mapping, Optional
from urllib.parse import unquote_to_bytes, urljoin

from errors import MapDecodeError

_DIRECTIVE_RE = re.compile(r"""(?://|/\*)[#@]\s*sourceMappingURL=\s*([^\s'"*]+)""")
_DATA_URL_RE = re.compile(r"^data:(?P<mime>[^,;]*)(?P<params>(?:;[^,;]*)*?),(?P<payload>.*)$", re.DOTALL)

# Header names are matched case-insensitively.
_MAP_HEADERS = ("sourcemap", "x-sourcemap")


def find_source_map_url(
    file_url: str,
    text: str,
    headers: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """Absolute (or data:) URL of the source map for file_url, if it declares one."""
    reference = None
    if headers:
        lowered = {k.lower(): v for k, v in headers.items()}
        for name in _MAP_HEADERS:
            if lowered.get(name):
                reference = lowered[name].strip()
                break

    if reference is None:
        # Last directive wins, as in browsers.
        matches = _DIRECTIVE_RE.findall(text)
        if matches:
            reference = matches[-1]

    if not reference:
        return None
    if is_data_url(reference):
        return reference
    return urljoin(file_url, reference)


def is_data_url(url: str) -> bool:
    return url[:5].lower() == "data:"


def read_data_url(url: str) -> str:
    """Decodes an inline data: URL (base64 or percent-encoded) into text."""
    m = _DATA_URL_RE.match(url)
    if not m:
        raise MapDecodeError("Malformed data: URL")
    params = [p.strip().lower() for p in m.group("params").split(";") if p.strip()]
    payload = m.group("payload")
    try:
        if "base64" in params:
            raw = base64.b64decode(unquote_to_bytes(payload), validate=False)
        else:
            raw = unquote_to_bytes(payload)
    except (binascii.Error, ValueError) as exc:
        raise MapDecodeError(f"Undecodable inline source map: {exc}") from exc

    charset = "utf-8"
    for p in params:
        if p.startswith("charset="):
            charset = p.split("=", 1)[1] or charset
    try:
        return raw.decode(charset)
    except (LookupError, UnicodeDecodeError) as exc:
        raise MapDecodeError(f"Undecodable inline source map: {exc}") from exc
