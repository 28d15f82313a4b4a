"""
Upload relay and processing endpoints.

POST /api/upload                                 - store an uploaded video on disk
POST /api/generate-upload-url                    - where the client should send the upload
POST /api/process-video                          - run the frame extraction script
GET  /api/processing-progress/{video_basename}   - frame counts and completion
POST /api/getFile                                - read one ASCII frame file
GET  /api/videos                                 - list video metadata
POST /api/videos                                 - save video metadata
GET  /api/videos/file-url                        - resolve a storage reference
"""
import logging
from typing import List

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile, status

from frameline.core.container import Container
from frameline.core.metrics import MetricsCollector
from frameline.schema.video_schema import (
    FrameFileResponse,
    GetFileRequest,
    ProcessingProgressResponse,
    ProcessVideoRequest,
    ProcessVideoResponse,
    SaveVideoMetadataRequest,
    SaveVideoMetadataResponse,
    UploadResponse,
    UploadURLResponse,
    VideoResponse,
)
from frameline.services.frame_file_service import FrameFileService
from frameline.services.processing_service import ProcessingService
from frameline.services.progress_service import ProgressService
from frameline.services.storage_service import StorageService, validate_basename
from frameline.services.video_service import VideoService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Videos"])


@router.post("/upload", response_model=UploadResponse)
@inject
async def upload_video(
    file: UploadFile = File(...),
    storage: StorageService = Depends(Provide[Container.storage_service]),
):
    try:
        file_path = await storage.save_upload(file)
        return UploadResponse(file_path=file_path)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[UPLOAD] Failed to store upload {file.filename!r}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to upload file",
        )
    finally:
        await file.close()


@router.post("/generate-upload-url", response_model=UploadURLResponse)
async def generate_upload_url(request: Request):
    return UploadURLResponse(url=str(request.url_for("upload_video")))


@router.post("/process-video", response_model=ProcessVideoResponse, response_model_exclude_none=True)
@inject
async def process_video(
    payload: ProcessVideoRequest,
    processing: ProcessingService = Depends(Provide[Container.processing_service]),
):
    try:
        result = await processing.process(payload.file_path)
        return ProcessVideoResponse(**result)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[PROCESS] Unexpected error processing {payload.file_path}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process video",
        )


@router.get("/processing-progress/{video_basename}", response_model=ProcessingProgressResponse)
@inject
async def processing_progress(
    video_basename: str,
    progress: ProgressService = Depends(Provide[Container.progress_service]),
    metrics: MetricsCollector = Depends(Provide[Container.metrics]),
):
    validate_basename(video_basename)
    metrics.increment("progress_polls")
    return ProcessingProgressResponse(**progress.get_progress(video_basename))


@router.post("/getFile", response_model=FrameFileResponse)
@inject
async def get_frame_file(
    payload: GetFileRequest,
    frame_files: FrameFileService = Depends(Provide[Container.frame_file_service]),
    metrics: MetricsCollector = Depends(Provide[Container.metrics]),
):
    try:
        frame = frame_files.read_frame(payload.frame_number, payload.video_basename)
    except HTTPException as e:
        if e.status_code == status.HTTP_404_NOT_FOUND:
            metrics.increment("frame_files_missing")
        raise
    except Exception as e:
        logger.error(f"[FRAMES] Failed to read frame {payload.frame_number}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read frame file",
        )

    metrics.increment("frame_files_served")
    return FrameFileResponse(**frame)


@router.get("/videos", response_model=List[VideoResponse])
@inject
async def list_videos(
    videos: VideoService = Depends(Provide[Container.video_service]),
):
    return [VideoResponse.model_validate(v) for v in await videos.list_videos()]


@router.post("/videos", response_model=SaveVideoMetadataResponse, status_code=status.HTTP_201_CREATED)
@inject
async def save_video_metadata(
    payload: SaveVideoMetadataRequest,
    videos: VideoService = Depends(Provide[Container.video_service]),
):
    try:
        video = await videos.save_metadata(**payload.model_dump())
        logger.info(f"[VIDEO] Saved metadata for {payload.file_name} as {video.id}")
        return SaveVideoMetadataResponse(id=video.id)
    except Exception as e:
        logger.error(f"[VIDEO] Error saving metadata for {payload.file_name}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save video metadata",
        )


@router.get("/videos/file-url", response_model=UploadURLResponse)
@inject
async def get_video_file_url(
    file_id: str = Query(..., alias="fileId"),
    videos: VideoService = Depends(Provide[Container.video_service]),
):
    return UploadURLResponse(url=videos.file_url(file_id))
