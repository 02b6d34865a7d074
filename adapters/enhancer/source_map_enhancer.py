"""
Adapter: SourceMapEnhancer
Implements the FrameEnhancer port.

Per frame:
  1. no file_name / line_number        → unchanged
  2. fetch the file                     → FetchError: unchanged
  3. no source map reference            → unchanged
  4. fetch + decode the map             → FetchError / MapDecodeError: unchanged
  5. look up (line, column)             → LookupMiss: unchanged
  6. rewrite file / line / column from the mapping entry; the name only
     when the frame had none

Frames run concurrently; the batch settles when every frame has and never
fails because one frame did. Lines are 1-based on frames and 0-based in
maps; columns are passed through as the map records them.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from contracts import Frame, FrameFilter
from errors import FetchError, LookupMiss, MapDecodeError
from ports.source_cache import SourceCache
from ports.source_map_decoder import SourceMapDecoder

logger = logging.getLogger("sourcetrace.enhancer")


class SourceMapEnhancer:
    def __init__(
        self,
        cache: SourceCache,
        decoder: SourceMapDecoder,
    ) -> None:
        self._cache = cache
        self._decoder = decoder

    # -- FrameEnhancer protocol -------------------------------------------------

    async def enhance_frame(self, frame: Frame) -> Frame:
        if not frame.has_location:
            return frame
        try:
            return await self._enhance(frame)
        except (FetchError, MapDecodeError, LookupMiss) as exc:
            logger.debug("Frame %s left as is: %s", frame, exc)
            return frame

    async def enhance(
        self,
        frames: list[Frame],
        frame_filter: Optional[FrameFilter] = None,
    ) -> list[Frame]:
        results = await asyncio.gather(
            *(self.enhance_frame(f) for f in frames),
            return_exceptions=True,
        )
        enhanced: list[Frame] = []
        for original, result in zip(frames, results):
            if isinstance(result, Frame):
                enhanced.append(result)
            elif isinstance(result, Exception):
                logger.warning("Enhancing %s failed unexpectedly: %r", original, result)
                enhanced.append(original)
            else:
                raise result
        if frame_filter is not None:
            enhanced = [f for f in enhanced if frame_filter(f)]
        return enhanced

    # -- Private ------------------------------------------------------------------

    async def _enhance(self, frame: Frame) -> Frame:
        document = await self._cache.fetch(frame.file_name)
        if document.source_map_url is None:
            return frame

        table = await self._cache.load_map(document.source_map_url, self._decoder)
        entry = self._decoder.lookup(table, frame.line_number - 1, frame.column_number or 0)

        name = frame.function_name
        if name is None:
            name = table.name_for(entry)

        return frame.model_copy(update={
            "function_name": name,
            "file_name": table.source_for(entry),
            "line_number": entry.original_line + 1,
            "column_number": entry.original_column,
        })
