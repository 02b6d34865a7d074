"""
contracts.py — the single source of truth for SourceTrace data types.
Every module imports its models from here; errors live in errors.py.
"""
from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ─────────────────────────── Frames ──────────────────────────────────────

class Frame(BaseModel):
    """
    One call-site record.

    Wire names are camelCase (functionName, fileName, ...). `source` keeps
    the raw stack line the frame was parsed from and is never serialized.

    Parsed frames carry 1-based lines and columns. After source-map
    enhancement the line is still 1-based, but column_number is the map's
    original column as recorded, which is 0-based, so 0 is a valid column.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    function_name: Optional[str] = None
    args: Optional[list[str]] = None
    file_name: Optional[str] = None
    line_number: Optional[int] = Field(default=None, ge=1)
    column_number: Optional[int] = Field(default=None, ge=0)
    source: Optional[str] = Field(default=None, exclude=True)

    @property
    def has_location(self) -> bool:
        return self.file_name is not None and self.line_number is not None

    def __str__(self) -> str:
        name = self.function_name or "{anonymous}"
        args = f"({','.join(self.args)})" if self.args is not None else "()"
        if self.file_name is None:
            return f"{name}{args}"
        loc = self.file_name
        if self.line_number is not None:
            loc += f":{self.line_number}"
            if self.column_number is not None:
                loc += f":{self.column_number}"
        return f"{name}{args}@{loc}"


FrameFilter = Callable[[Frame], bool]


class ErrorLike(BaseModel):
    """Raw error input: an optional message and an optional stack string."""
    message: Optional[str] = None
    stack: Optional[str] = None

    @field_validator("message", "stack", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, str):
            return v
        return str(v)


class StackReport(BaseModel):
    """Body POSTed to a collector: {"stack": [...], "message": ...}."""
    stack: list[Frame]
    message: Optional[str] = None


# ─────────────────────────── Fetching ────────────────────────────────────

class FetchResponse(BaseModel):
    status: int
    headers: dict[str, str] = Field(default_factory=dict)
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class SourceDocument(BaseModel):
    url: str
    text: str
    source_map_url: Optional[str] = None  # absolute URL or an inline data: URL


# ─────────────────────────── Source maps ─────────────────────────────────

class RawSourceMap(BaseModel):
    """A source map document as published (revision 3)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    version: int
    file: Optional[str] = None
    source_root: Optional[str] = None
    sources: list[Optional[str]]
    sources_content: Optional[list[Optional[str]]] = None
    names: list[str] = Field(default_factory=list)
    mappings: str


class MappingEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    generated_line: int    # 0-based
    generated_column: int  # 0-based
    source_index: int
    original_line: int     # 0-based
    original_column: int   # 0-based
    name_index: Optional[int] = None


class DecodedMap(BaseModel):
    """Mapping table sorted by (generated_line, generated_column)."""
    model_config = ConfigDict(frozen=True)

    entries: tuple[MappingEntry, ...]
    sources: tuple[str, ...]
    names: tuple[str, ...] = ()
    file: Optional[str] = None

    def source_for(self, entry: MappingEntry) -> str:
        return self.sources[entry.source_index]

    def name_for(self, entry: MappingEntry) -> Optional[str]:
        if entry.name_index is None:
            return None
        return self.names[entry.name_index]


# ─────────────────────────── Options ─────────────────────────────────────

class StackTraceOptions(BaseModel):
    """
    Options recognised by get / from_error / generate_artificially.

    filter:        keeps only frames for which it returns True (order kept)
    offline:       skip all network-based enhancement (parse only)
    source_cache:  externally provided cache, outlives the call
    http_client:   httpx.AsyncClient to fetch sources/maps with
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    filter: Optional[FrameFilter] = None
    offline: Optional[bool] = None
    source_cache: Optional[Any] = None
    http_client: Optional[Any] = None


class ReportOptions(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    message: Optional[str] = None
    headers: dict[str, str] = Field(default_factory=dict)
    http_client: Optional[Any] = None
    timeout_ms: Optional[int] = None


def as_options(options: StackTraceOptions | Mapping[str, Any] | None) -> StackTraceOptions:
    if options is None:
        return StackTraceOptions()
    if isinstance(options, StackTraceOptions):
        return options
    return StackTraceOptions.model_validate(dict(options))
