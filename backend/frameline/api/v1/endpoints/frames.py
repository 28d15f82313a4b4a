"""
Frame line table endpoints.

POST /api/frames/reset          - wipe the table and insert blank placeholder lines
POST /api/frames/batch          - patch lines of the current frame by line number
GET  /api/frames                - every line, ordered by line number
GET  /api/frames/text           - lines joined into the rendered frame
GET  /api/frames/stream         - SSE push of the rendered frame on every change
GET  /api/frames/{line_number}  - one line
"""

import asyncio
import json
import logging
from typing import List

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse

from frameline.core.config import configs
from frameline.core.container import Container
from frameline.schema.frame_schema import (
    BatchUpdateRequest,
    BatchUpdateResponse,
    FrameLineResponse,
    FrameTextResponse,
    ResetFramesRequest,
    ResetFramesResponse,
)
from frameline.services.frame_broadcaster import FrameBroadcaster
from frameline.services.frame_service import FrameService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/frames", tags=["Frames"])


@router.post("/reset", response_model=ResetFramesResponse)
@inject
async def reset_frames(
    payload: ResetFramesRequest,
    frames: FrameService = Depends(Provide[Container.frame_service]),
):
    try:
        line_count = await frames.reset(payload.no_of_frames)
        return ResetFramesResponse(line_count=line_count)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[FRAMES] Failed to reset frame table: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to reset frame table",
        )


@router.post("/batch", response_model=BatchUpdateResponse)
@inject
async def batch_update_frames(
    payload: BatchUpdateRequest,
    frames: FrameService = Depends(Provide[Container.frame_service]),
):
    try:
        updated = await frames.batch_update(
            payload.frame_number,
            [(line.line_number, line.content) for line in payload.lines],
        )
        return BatchUpdateResponse(updated=updated)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[FRAMES] Failed to update frame {payload.frame_number}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update frame lines",
        )


@router.get("", response_model=List[FrameLineResponse])
@inject
async def get_all_frames(
    frames: FrameService = Depends(Provide[Container.frame_service]),
):
    return [FrameLineResponse.model_validate(row) for row in await frames.all_lines()]


@router.get("/text", response_model=FrameTextResponse)
@inject
async def get_frame_text(
    frames: FrameService = Depends(Provide[Container.frame_service]),
):
    text, line_count = await frames.render_text()
    return FrameTextResponse(text=text, line_count=line_count)


@router.get("/stream")
@inject
async def stream_frames(
    request: Request,
    frames: FrameService = Depends(Provide[Container.frame_service]),
    broadcaster: FrameBroadcaster = Depends(Provide[Container.frame_broadcaster]),
):
    """
    SSE stream of the rendered frame.
    Sends the current frame at once, then again after every reset or batch update.
    """
    heartbeat = configs.SSE_HEARTBEAT_SECONDS

    async def event_generator():
        notify = broadcaster.subscribe()
        try:
            while True:
                notify.clear()
                text, line_count = await frames.render_text()
                payload = {
                    "version": broadcaster.version,
                    "frameNumber": broadcaster.last_frame_number,
                    "lineCount": line_count,
                    "text": text,
                }
                yield f"event: frame\ndata: {json.dumps(payload)}\n\n"

                while True:
                    if await request.is_disconnected():
                        return
                    try:
                        await asyncio.wait_for(notify.wait(), timeout=heartbeat)
                        break
                    except asyncio.TimeoutError:
                        yield ": heartbeat\n\n"
        except asyncio.CancelledError:
            pass
        finally:
            broadcaster.unsubscribe(notify)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
            "Connection": "keep-alive",
        },
    )


@router.get("/{line_number}", response_model=FrameLineResponse)
@inject
async def get_frame_line(
    line_number: int,
    frames: FrameService = Depends(Provide[Container.frame_service]),
):
    return FrameLineResponse.model_validate(await frames.line(line_number))
