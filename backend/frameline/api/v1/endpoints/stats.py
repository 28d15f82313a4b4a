from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from frameline.core.container import Container
from frameline.core.metrics import MetricsCollector
from frameline.services.frame_broadcaster import FrameBroadcaster

router = APIRouter(tags=["Stats"])


@router.get("/stats")
@inject
async def get_stats(
    metrics: MetricsCollector = Depends(Provide[Container.metrics]),
    broadcaster: FrameBroadcaster = Depends(Provide[Container.frame_broadcaster]),
):
    """Process counters: connections, db reads/writes, frame traffic"""
    data = metrics.snapshot()
    data["stream_subscribers"] = broadcaster.subscriber_count
    data["frame_version"] = broadcaster.version
    data["frame_updated_at"] = broadcaster.updated_at
    return data
