from fastapi import APIRouter

from frameline.api.v1.endpoints.frames import router as frames_router
from frameline.api.v1.endpoints.stats import router as stats_router
from frameline.api.v1.endpoints.video import router as video_router

routers = APIRouter()
routers.include_router(video_router)
routers.include_router(frames_router)
routers.include_router(stats_router)
