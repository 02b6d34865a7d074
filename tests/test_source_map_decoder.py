from __future__ import annotations

import base64
import json

import pytest

import captured_errors as captured

from adapters.source_map.decoder import VlqSourceMapDecoder, decode_mappings
from adapters.source_map.discovery import find_source_map_url, read_data_url
from adapters.source_map.vlq import decode_segment, encode_values
from errors import LookupMiss, MapDecodeError
from ports.source_map_decoder import SourceMapDecoder


def _map(**overrides) -> str:
    doc = {"version": 3, "sources": ["a.js"], "names": [], "mappings": "AAAA"}
    doc.update(overrides)
    return json.dumps(doc)


def test_decoder_implements_port():
    assert isinstance(VlqSourceMapDecoder(), SourceMapDecoder)


@pytest.mark.parametrize("segment, values", [
    ("A", [0]),
    ("C", [1]),
    ("D", [-1]),
    ("gB", [16]),
    ("hB", [-16]),
    ("AAgBC", [0, 0, 16, 1]),
])
def test_decode_segment(segment, values):
    assert decode_segment(segment) == values


def test_encode_values_is_inverse_of_decode():
    values = [0, -1, 15, 16, -1024, 123456]
    assert decode_segment(encode_values(values)) == values


def test_decode_segment_rejects_bad_input():
    with pytest.raises(MapDecodeError):
        decode_segment("A!A")
    with pytest.raises(MapDecodeError):
        decode_segment("g")  # continuation bit with nothing after it


def test_decodes_minified_example():
    table = VlqSourceMapDecoder().decode(captured.MINIFIED_MAP)

    assert table.sources == ("file.js",)
    assert table.names == ("increment", "someVariable", "x")
    assert table.file == "file.min.js"
    columns = [e.generated_column for e in table.entries]
    assert columns == sorted(columns)
    assert {e.generated_line for e in table.entries} == {0}

    first, second = table.entries[:2]
    assert (first.generated_column, first.original_line, first.original_column) == (0, 0, 0)
    assert first.name_index is None
    assert (second.generated_column, second.original_column) == (8, 9)
    assert table.name_for(second) == "increment"


def test_lookup_finds_greatest_entry_at_or_before_column():
    decoder = VlqSourceMapDecoder()
    table = decoder.decode(captured.MINIFIED_MAP)

    entry = decoder.lookup(table, 0, 38)

    assert entry.generated_column == 36
    assert (entry.original_line, entry.original_column) == (2, 4)
    assert table.source_for(entry) == "file.js"
    assert table.name_for(entry) is None

    exact = decoder.lookup(table, 0, 8)
    assert table.name_for(exact) == "increment"


def test_lookup_misses_on_unmapped_line_or_column():
    decoder = VlqSourceMapDecoder()
    table = decoder.decode(_map(mappings=";EAAA"))

    with pytest.raises(LookupMiss):
        decoder.lookup(table, 0, 10)       # line 0 has no entries
    with pytest.raises(LookupMiss):
        decoder.lookup(table, 1, 1)        # before the first entry on line 1
    with pytest.raises(LookupMiss):
        decoder.lookup(table, 5, 0)        # past the last line
    assert decoder.lookup(table, 1, 99).generated_column == 2


def test_generated_column_resets_per_line_but_other_fields_accumulate():
    entries = decode_mappings("AAAA,CACA;AAAC", source_count=1, name_count=0)

    assert [(e.generated_line, e.generated_column) for e in entries] == [(0, 0), (0, 1), (1, 0)]
    assert [e.original_line for e in entries] == [0, 1, 1]
    assert [e.original_column for e in entries] == [0, 0, 1]


def test_segments_are_sorted_by_column_within_a_line():
    # Columns 4 then 2 (delta -2).
    entries = decode_mappings("IAAA,FAAC", source_count=1, name_count=0)

    assert [e.generated_column for e in entries] == [2, 4]


def test_single_field_segments_add_no_entry():
    entries = decode_mappings("E,CAAA", source_count=1, name_count=0)

    assert len(entries) == 1
    assert entries[0].generated_column == 3


def test_source_root_is_joined():
    table = VlqSourceMapDecoder().decode(
        _map(sourceRoot="http://example.com/src/", sources=["a.js", "http://cdn/b.js"])
    )
    assert table.sources == ("http://example.com/src/a.js", "http://cdn/b.js")


def test_xssi_prefix_and_bom_are_stripped():
    table = VlqSourceMapDecoder().decode("\ufeff)]}'\n" + _map())
    assert len(table.entries) == 1


@pytest.mark.parametrize("raw", [
    "not json",
    json.dumps({"version": 3, "sources": ["a.js"]}),                  # no mappings
    json.dumps({"version": 3, "mappings": "AAAA"}),                  # no sources
    _map(version=2),
    _map(mappings="AA"),                                             # two fields
    _map(mappings="ACAA"),                                           # source index 1 of 1
    _map(mappings="AAAAC"),                                          # name index without names
    _map(mappings="A$AA"),
    json.dumps({"version": 3, "sections": []}),                      # index map
])
def test_invalid_documents_raise_map_decode_error(raw):
    with pytest.raises(MapDecodeError):
        VlqSourceMapDecoder().decode(raw)


# -- discovery ----------------------------------------------------------------

def test_directive_resolves_relative_to_file():
    assert find_source_map_url(captured.MINIFIED_URL, captured.MINIFIED_SOURCE) == captured.MINIFIED_MAP_URL


def test_last_directive_wins_and_legacy_form_is_accepted():
    text = "//@ sourceMappingURL=old.map\ncode();\n//# sourceMappingURL=/maps/new.map\n"
    assert find_source_map_url("http://host/js/app.js", text) == "http://host/maps/new.map"


def test_header_takes_precedence_over_directive():
    url = find_source_map_url(
        captured.MINIFIED_URL,
        captured.MINIFIED_SOURCE,
        headers={"x-sourcemap": "http://maps.example/file.map"},
    )
    assert url == "http://maps.example/file.map"


def test_no_reference_means_no_map():
    assert find_source_map_url("http://host/app.js", "var a = 1;") is None


def test_data_urls_are_kept_and_decoded():
    payload = base64.b64encode(_map().encode()).decode()
    data_url = f"data:application/json;charset=utf-8;base64,{payload}"
    text = f"code();\n//# sourceMappingURL={data_url}"

    assert find_source_map_url("http://host/app.js", text) == data_url
    assert json.loads(read_data_url(data_url))["sources"] == ["a.js"]


def test_percent_encoded_data_url():
    assert read_data_url("data:application/json,%7B%22version%22%3A3%7D") == '{"version":3}'


def test_malformed_data_url_raises():
    with pytest.raises(MapDecodeError):
        read_data_url("data:application/json;base64")
