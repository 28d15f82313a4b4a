from typing import List

from pydantic import BaseModel, Field


class ResetFramesRequest(BaseModel):
    no_of_frames: int = Field(..., alias="noOfFrames", ge=0)

    class Config:
        populate_by_name = True


class ResetFramesResponse(BaseModel):
    success: bool = True
    line_count: int = Field(..., alias="lineCount")

    class Config:
        populate_by_name = True


class LineUpdate(BaseModel):
    line_number: int = Field(..., alias="lineNumber")
    content: str

    class Config:
        populate_by_name = True


class BatchUpdateRequest(BaseModel):
    frame_number: int = Field(..., alias="frameNumber")
    lines: List[LineUpdate]

    class Config:
        populate_by_name = True


class BatchUpdateResponse(BaseModel):
    success: bool = True
    updated: int


class FrameLineResponse(BaseModel):
    id: int
    frame_number: int = Field(..., alias="frameNumber")
    line_number: int = Field(..., alias="lineNumber")
    line_content: str = Field(..., alias="lineContent")

    class Config:
        from_attributes = True
        populate_by_name = True


class FrameTextResponse(BaseModel):
    text: str
    line_count: int = Field(..., alias="lineCount")

    class Config:
        populate_by_name = True
