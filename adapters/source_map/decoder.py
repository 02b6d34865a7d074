"""
Adapter: VlqSourceMapDecoder
Implements the SourceMapDecoder port for source map revision 3.

mappings = group (";" group)*          one group per generated line
group    = segment ("," segment)*
segment  = VLQ deltas of
           [generated_column, source_index, original_line, original_column, name_index?]

generated_column restarts at 0 on every line; the other four fields
accumulate across the whole document.
"""
from __future__ import annotations

import logging
from bisect import bisect_right

from pydantic import ValidationError

from adapters.source_map.vlq import decode_segment
from contracts import DecodedMap, MappingEntry, RawSourceMap
from errors import LookupMiss, MapDecodeError

logger = logging.getLogger("sourcetrace.source_map")

# Some servers prefix JSON with this line to defeat cross-site script inclusion.
_XSSI_PREFIX = ")]}'"


def _join_source(source_root: str | None, source: str | None) -> str:
    source = source or ""
    if not source_root or "://" in source or source.startswith("/"):
        return source
    return source_root.rstrip("/") + "/" + source


def decode_mappings(mappings: str, source_count: int, name_count: int) -> tuple[MappingEntry, ...]:
    entries: list[MappingEntry] = []
    source_index = original_line = original_column = name_index = 0

    for generated_line, group in enumerate(mappings.split(";")):
        generated_column = 0
        line_entries: list[MappingEntry] = []
        for segment in group.split(","):
            if not segment:
                continue
            values = decode_segment(segment)
            if len(values) not in (1, 4, 5):
                raise MapDecodeError(f"Segment {segment!r} has {len(values)} fields")

            generated_column += values[0]
            if len(values) == 1:
                continue

            source_index += values[1]
            original_line += values[2]
            original_column += values[3]
            entry_name = None
            if len(values) == 5:
                name_index += values[4]
                entry_name = name_index

            if not 0 <= source_index < source_count:
                raise MapDecodeError(f"Source index {source_index} out of range")
            if entry_name is not None and not 0 <= entry_name < name_count:
                raise MapDecodeError(f"Name index {entry_name} out of range")
            if generated_column < 0 or original_line < 0 or original_column < 0:
                raise MapDecodeError(f"Negative position in segment {segment!r}")

            line_entries.append(MappingEntry(
                generated_line=generated_line,
                generated_column=generated_column,
                source_index=source_index,
                original_line=original_line,
                original_column=original_column,
                name_index=entry_name,
            ))
        # Emitters do not always order segments by column.
        line_entries.sort(key=lambda e: e.generated_column)
        entries.extend(line_entries)

    return tuple(entries)


class VlqSourceMapDecoder:
    """Stateless decoder; the decoded tables it builds are immutable."""

    # -- SourceMapDecoder protocol -------------------------------------------

    def decode(self, raw_map: str) -> DecodedMap:
        text = raw_map.lstrip("\ufeff")
        if text.startswith(_XSSI_PREFIX):
            text = text.split("\n", 1)[1] if "\n" in text else ""

        try:
            document = RawSourceMap.model_validate_json(text)
        except ValidationError as exc:
            raise MapDecodeError(f"Invalid source map document: {exc.errors()[0]['msg']}") from exc
        if document.version != 3:
            raise MapDecodeError(f"Unsupported source map version {document.version}")

        sources = tuple(_join_source(document.source_root, s) for s in document.sources)
        entries = decode_mappings(document.mappings, len(sources), len(document.names))
        logger.debug("Decoded %d mappings over %d sources", len(entries), len(sources))
        return DecodedMap(
            entries=entries,
            sources=sources,
            names=tuple(document.names),
            file=document.file,
        )

    def lookup(self, table: DecodedMap, line: int, column: int) -> MappingEntry:
        idx = bisect_right(
            table.entries, (line, column),
            key=lambda e: (e.generated_line, e.generated_column),
        )
        if idx:
            entry = table.entries[idx - 1]
            if entry.generated_line == line:
                return entry
        raise LookupMiss(line, column)
