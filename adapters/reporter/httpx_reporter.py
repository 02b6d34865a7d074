"""
Adapter: HttpxReporter
Implements the ReportSender port on httpx.AsyncClient.

Body: {"stack": [<frame>, ...]} with camelCase frame fields, plus
"message" when one is given. Any 2xx resolves to the response text.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from contracts import Frame, StackReport
from errors import ReportError

logger = logging.getLogger("sourcetrace.reporter")


def serialize_frames(frames: list[Frame], message: Optional[str] = None) -> str:
    return StackReport(stack=frames, message=message).model_dump_json(
        by_alias=True, exclude_none=True,
    )


class HttpxReporter:
    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout_ms: int = 10_000,
    ) -> None:
        self._client = client
        self._timeout = timeout_ms / 1000.0

    # -- ReportSender protocol ------------------------------------------------

    async def report(
        self,
        frames: list[Frame],
        url: str,
        message: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> str:
        body = serialize_frames(frames, message)
        request_headers = {"Content-Type": "application/json", **(headers or {})}
        logger.debug("Reporting %d frames to %s", len(frames), url)

        try:
            if self._client is not None:
                response = await self._client.post(
                    url, content=body, headers=request_headers, timeout=self._timeout,
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(url, content=body, headers=request_headers)
        except httpx.HTTPError as exc:
            logger.warning("Report to %s failed: %s", url, exc)
            raise ReportError(url) from exc

        if not response.is_success:
            logger.warning("Report to %s returned HTTP %d", url, response.status_code)
            raise ReportError(url, status=response.status_code, body=response.text)
        return response.text
