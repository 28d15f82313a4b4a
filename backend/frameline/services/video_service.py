from frameline.core.database import Database
from frameline.models.orm.video import Video
from frameline.repository import video_repository


class VideoService:
    """Service layer for video metadata"""

    def __init__(self, db: Database):
        self.db = db

    async def save_metadata(self, **fields) -> Video:
        async with self.db.session() as session:
            return await video_repository.create_video(session, **fields)

    async def list_videos(self) -> list[Video]:
        async with self.db.session() as session:
            return await video_repository.list_videos(session)

    def file_url(self, file_id: str) -> str:
        """Uploads are served from their stored path, so the reference is the URL"""
        return file_id
