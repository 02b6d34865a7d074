"""
Router: POST /frames, POST /frames/report
Parses (and, unless offline, source-map enhances) a stack sent by a client,
and forwards frames to a configured collector.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

import stacktrace
from api.dependencies import get_http_client, get_settings, get_stack_parser
from api.schemas import FramesRequest, FramesResponse, ReportRequest, ReportResponse
from config import Settings
from contracts import ErrorLike, FrameFilter, ReportOptions, StackTraceOptions

router = APIRouter(prefix="/frames", tags=["frames"])


def _name_filter(function_name: Optional[str]) -> Optional[FrameFilter]:
    if function_name is None:
        return None
    return lambda frame: frame.function_name == function_name


def _collector_url(requested: Optional[str], settings: Settings) -> str:
    allowed = {u for u in (settings.report_url, *settings.report_allowed_urls) if u}
    if not allowed:
        raise HTTPException(status_code=503, detail="No collector configured (SOURCETRACE_REPORT_URL)")
    url = requested or settings.report_url
    if url not in allowed:
        raise HTTPException(status_code=403, detail=f"Collector not allowed: {url}")
    return url


@router.post("", response_model=FramesResponse, response_model_exclude_none=True)
async def parse_frames(
    body: FramesRequest,
    client=Depends(get_http_client),
    parser=Depends(get_stack_parser),
) -> FramesResponse:
    options = StackTraceOptions(
        filter=_name_filter(body.function_name),
        offline=body.offline,
        http_client=client,
    )
    frames = await stacktrace.from_error(ErrorLike(message=body.message, stack=body.stack), options)
    dialect = parser.detect(body.stack) if body.stack else None
    return FramesResponse(stack=frames, dialect=dialect)


@router.post("/report", response_model=ReportResponse)
async def report_frames(
    body: ReportRequest,
    client=Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> ReportResponse:
    url = _collector_url(body.url, settings)
    options = ReportOptions(message=body.message, headers=body.headers, http_client=client)
    text = await stacktrace.report(body.frames, url, options)
    return ReportResponse(url=url, body=text)
