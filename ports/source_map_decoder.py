"""
Port: SourceMapDecoder
Responsibility: decoding source map documents and looking up positions.
"""
from typing import Protocol, runtime_checkable

from contracts import DecodedMap, MappingEntry


@runtime_checkable
class SourceMapDecoder(Protocol):
    def decode(self, raw_map: str) -> DecodedMap:
        """
        Parses a source map document and decodes its mappings into a table
        sorted by (generated_line, generated_column).
        Raises MapDecodeError on malformed JSON, missing fields or a bad
        mappings string.
        """
        ...

    def lookup(self, table: DecodedMap, line: int, column: int) -> MappingEntry:
        """
        Greatest entry on generated `line` (0-based) whose column is <= column.
        Raises LookupMiss when the line has no such entry.
        """
        ...
