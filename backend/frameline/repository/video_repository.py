# frameline/repository/video_repository.py
import time

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from frameline.models.orm.video import Video


async def create_video(
    db: AsyncSession,
    title: str,
    file_name: str,
    file_id: str,
    file_size: int,
    file_type: str,
    src_x_resolution: int,
    src_y_resolution: int,
    src_fps: float,
    frame_no: int | None = None,
    duration: float | None = None,
) -> Video:
    """Create a video record; output resolution and fps default to the source values"""
    now_ms = int(time.time() * 1000)

    video_id = now_ms
    while await db.get(Video, video_id) is not None:
        video_id += 1

    video = Video(
        id=video_id,
        title=title,
        file_name=file_name,
        file_id=file_id,
        file_size=file_size,
        file_type=file_type,
        src_x_resolution=src_x_resolution,
        src_y_resolution=src_y_resolution,
        output_x_resolution=src_x_resolution,
        output_y_resolution=src_y_resolution,
        src_fps=src_fps,
        output_fps=src_fps,
        frame_no=frame_no,
        duration=duration,
        upload_time=now_ms,
    )
    db.add(video)
    await db.commit()
    await db.refresh(video)
    return video


async def get_video_by_id(db: AsyncSession, video_id: int) -> Video | None:
    return await db.get(Video, video_id)


async def list_videos(db: AsyncSession) -> list[Video]:
    """All videos, newest upload first"""
    result = await db.execute(
        select(Video).order_by(desc(Video.upload_time), desc(Video.id))
    )
    return list(result.scalars().all())
