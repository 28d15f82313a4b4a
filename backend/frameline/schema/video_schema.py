from typing import List, Optional

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Response schema for a stored upload"""
    file_path: str = Field(..., alias="filePath")

    class Config:
        populate_by_name = True


class UploadURLResponse(BaseModel):
    url: str


class ProcessVideoRequest(BaseModel):
    """Request schema for starting frame extraction"""
    file_path: str = Field(..., alias="filePath", min_length=1)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {"filePath": "/uploads/1760789903437.mp4"}
        }


class ProcessVideoResponse(BaseModel):
    success: bool
    message: str
    video_basename: str = Field(..., alias="videoBasename")
    # only filled when the request waited for the script
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    frame_count: Optional[int] = Field(None, alias="frameCount")

    class Config:
        populate_by_name = True


class ProcessingProgressResponse(BaseModel):
    original_count: int = Field(..., alias="originalCount")
    ascii_count: int = Field(..., alias="asciiCount")
    progress: int
    is_complete: bool = Field(..., alias="isComplete")

    class Config:
        populate_by_name = True


class GetFileRequest(BaseModel):
    frame_number: int = Field(..., alias="frameNumber")
    video_basename: Optional[str] = Field(None, alias="videoBasename")

    class Config:
        populate_by_name = True


class FrameFileResponse(BaseModel):
    frame_number: int = Field(..., alias="frameNumber")
    file_name: str = Field(..., alias="fileName")
    content: str
    lines: List[str]
    line_count: int = Field(..., alias="lineCount")

    class Config:
        populate_by_name = True


class SaveVideoMetadataRequest(BaseModel):
    """Request schema for recording an uploaded video"""
    title: str
    file_name: str = Field(..., alias="fileName")
    file_id: str = Field(..., alias="fileId")
    file_size: int = Field(..., alias="fileSize", ge=0)
    file_type: str = Field(..., alias="fileType")
    src_x_resolution: int = Field(..., ge=0)
    src_y_resolution: int = Field(..., ge=0)
    src_fps: float = Field(..., ge=0)
    frame_no: Optional[int] = Field(None, alias="frameNo")
    duration: Optional[float] = None

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "title": "Bad Apple",
                "fileName": "bad_apple.mp4",
                "fileId": "/uploads/1760789903437.mp4",
                "fileSize": 5242880,
                "fileType": "video/mp4",
                "src_x_resolution": 480,
                "src_y_resolution": 360,
                "src_fps": 30,
                "frameNo": 6572,
                "duration": 219.0,
            }
        }


class SaveVideoMetadataResponse(BaseModel):
    id: int


class VideoResponse(BaseModel):
    """Video response schema"""
    id: int
    title: str
    file_name: str = Field(..., alias="fileName")
    file_id: str = Field(..., alias="fileId")
    file_size: int = Field(..., alias="fileSize")
    file_type: str = Field(..., alias="fileType")
    src_x_resolution: int
    src_y_resolution: int
    output_x_resolution: int
    output_y_resolution: int
    src_fps: float
    output_fps: float
    frame_no: Optional[int] = Field(None, alias="frameNo")
    duration: Optional[float] = None
    upload_time: int = Field(..., alias="uploadTime")

    class Config:
        from_attributes = True
        populate_by_name = True
