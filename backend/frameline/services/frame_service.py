import logging
from typing import Iterable

from frameline.core.database import Database
from frameline.core.exceptions import NotFoundError, ValidationError
from frameline.core.metrics import MetricsCollector
from frameline.models.orm.frame_line import FrameLine
from frameline.repository import frame_repository
from frameline.services.frame_broadcaster import FrameBroadcaster
from frameline.services.reset_barrier import ResetBarrier

logger = logging.getLogger(__name__)


def join_lines(rows: Iterable[FrameLine]) -> str:
    return "\n".join(row.line_content for row in rows)


class FrameService:
    """Service layer for the frame line table"""

    def __init__(
        self,
        db: Database,
        barrier: ResetBarrier,
        broadcaster: FrameBroadcaster,
        metrics: MetricsCollector,
    ):
        self.db = db
        self.barrier = barrier
        self.broadcaster = broadcaster
        self.metrics = metrics

    async def reset(self, line_count: int) -> int:
        """Recreate the table as `line_count` blank placeholder rows"""
        if line_count < 0:
            raise ValidationError(detail="noOfFrames must be >= 0")

        async with self.barrier.resetting():
            async with self.db.session() as session:
                inserted = await frame_repository.reset_frame_lines(session, line_count)

        self.metrics.increment("frame_resets")
        self.metrics.increment("db_writes", inserted)
        self.broadcaster.publish(None)
        logger.info(f"[FRAMES] Frame table reset to {inserted} blank lines")
        return inserted

    async def batch_update(self, frame_number: int, lines: Iterable[tuple[int, str]]) -> int:
        """Patch existing lines with one frame's content; unmatched line numbers are skipped"""
        pairs = list(lines)
        async with self.barrier.updating():
            async with self.db.session() as session:
                updated = await frame_repository.update_frame_lines(session, frame_number, pairs)

        self.metrics.increment("frame_batches")
        self.metrics.increment("db_writes", updated)
        if updated:
            self.broadcaster.publish(frame_number)
        skipped = len(pairs) - updated
        if skipped:
            logger.debug(f"[FRAMES] Frame {frame_number}: {skipped} lines had no matching row")
        return updated

    async def all_lines(self) -> list[FrameLine]:
        async with self.db.session() as session:
            rows = await frame_repository.get_all_frame_lines(session)
        self.metrics.increment("db_queries")
        return list(rows)

    async def render_text(self) -> tuple[str, int]:
        rows = await self.all_lines()
        return join_lines(rows), len(rows)

    async def line(self, line_number: int) -> FrameLine:
        async with self.db.session() as session:
            row = await frame_repository.get_frame_line(session, line_number)
        self.metrics.increment("db_queries")
        if row is None:
            raise NotFoundError(detail=f"Line {line_number} not found")
        return row
