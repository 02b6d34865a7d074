from __future__ import annotations

import asyncio

import pytest

import captured_errors as captured

import stacktrace
from contracts import ErrorLike, StackTraceOptions
from errors import ParseError

OFFLINE = {"offline": True}


def _explode():
    raise ValueError("kaboom")


class _JsLikeError:
    def __init__(self, message, stack):
        self.message = message
        self.stack = stack


def test_from_error_parses_a_raised_exception():
    try:
        _explode()
    except ValueError as exc:
        frames = asyncio.run(stacktrace.from_error(exc, OFFLINE))

    assert [f.function_name for f in frames] == [
        "_explode",
        "test_from_error_parses_a_raised_exception",
    ]
    assert all(f.file_name.endswith("test_stacktrace.py") for f in frames)
    assert all(f.line_number and f.column_number for f in frames)


def test_from_error_accepts_mapping_model_and_attribute_objects():
    expected = asyncio.run(stacktrace.from_error(captured.IE_11, OFFLINE))

    as_model = asyncio.run(stacktrace.from_error(ErrorLike(**captured.IE_11), OFFLINE))
    as_object = asyncio.run(stacktrace.from_error(
        _JsLikeError(captured.IE_11["message"], captured.IE_11["stack"]),
        StackTraceOptions(offline=True),
    ))

    assert len(expected) == 3
    assert as_model == expected
    assert as_object == expected


def test_from_error_with_message_only_raises_parse_error():
    with pytest.raises(ParseError):
        asyncio.run(stacktrace.from_error({"message": "ERROR_MESSAGE"}, OFFLINE))


def test_from_error_on_an_exception_never_raised_raises_parse_error():
    with pytest.raises(ParseError):
        asyncio.run(stacktrace.from_error(ValueError("never raised"), OFFLINE))


def test_from_error_offline_applies_filter():
    frames = asyncio.run(stacktrace.from_error(
        captured.CHROME_15,
        {"offline": True, "filter": lambda f: f.function_name == "foo"},
    ))

    assert len(frames) == 1
    assert frames[0].line_number == 20


def test_from_error_reads_opera9_message():
    frames = asyncio.run(stacktrace.from_error(captured.OPERA_9, OFFLINE))

    assert len(frames) == 4


def test_offline_default_comes_from_settings(monkeypatch):
    monkeypatch.setenv("SOURCETRACE_OFFLINE", "true")

    def _no_network(*args, **kwargs):
        raise AssertionError("offline must not fetch")

    monkeypatch.setattr("stacktrace.HttpxSourceFetcher", _no_network)

    frames = asyncio.run(stacktrace.from_error(captured.CHROME_15))

    assert len(frames) == 4


def test_get_starts_at_the_caller():
    async def interesting():
        return await stacktrace.get(OFFLINE)

    frames = asyncio.run(interesting())

    assert frames[0].function_name == "interesting"
    assert frames[0].file_name.endswith("test_stacktrace.py")


def test_get_applies_filter():
    async def interesting():
        return await stacktrace.get({"offline": True, "filter": lambda f: f.function_name == "interesting"})

    frames = asyncio.run(interesting())

    assert [f.function_name for f in frames] == ["interesting"]


def test_generate_artificially_starts_at_the_caller():
    async def interesting():
        return await stacktrace.generate_artificially()

    frames = asyncio.run(interesting())

    assert frames[0].function_name == "interesting"
    assert "generate_artificially" not in [f.function_name for f in frames]


def test_generate_artificially_applies_filter():
    async def interesting():
        return await stacktrace.generate_artificially(
            {"filter": lambda f: f.file_name is not None and f.file_name.endswith("test_stacktrace.py")}
        )

    frames = asyncio.run(interesting())

    assert [f.function_name for f in frames] == [
        "interesting",
        "test_generate_artificially_applies_filter",
    ]
