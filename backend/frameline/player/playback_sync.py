"""
Playback-driven frame sync.

Follows a playing video and pushes the ASCII rendering of its current
frame into the frame line table:

    IDLE --play--> PLAYING --pause--> PAUSED --play--> PLAYING
                      |
                      +--end / duration reached--> ENDED --play--> PLAYING

While PLAYING, every tick derives the frame index from elapsed playback
time and fps. When the index moves to a new even value the matching frame
file is fetched and written to the table. Missing frames and request
errors skip that frame; the animation just has a gap.
"""

import asyncio
import logging
import math
import time
from enum import Enum
from typing import Awaitable, Callable, Optional

from frameline.player.api_client import FramelineClient

logger = logging.getLogger(__name__)

DEFAULT_LINE_COUNT = 60
DEFAULT_REFRESH_RATE = 60  # ticks per second, like requestAnimationFrame


class PlaybackState(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"


class PlaybackSync:

    def __init__(
        self,
        client: FramelineClient,
        fps: float,
        duration: Optional[float] = None,
        video_basename: Optional[str] = None,
        default_line_count: int = DEFAULT_LINE_COUNT,
        frame_offset: int = 1,
        clock: Callable[[], float] = time.monotonic,
        on_frame: Optional[Callable[[int, dict], Awaitable[None]]] = None,
    ):
        if fps <= 0:
            raise ValueError("fps must be positive")
        self.client = client
        self.fps = fps
        self.duration = duration
        self.video_basename = video_basename
        self.default_line_count = default_line_count
        # ffmpeg numbers output files from 1
        self.frame_offset = frame_offset
        self.clock = clock
        self.on_frame = on_frame

        self.state = PlaybackState.IDLE
        self.current_frame_index = -1
        self.line_count = 0
        self._position = 0.0
        self._started_at: Optional[float] = None

        self.stats = {
            "frames_rendered": 0,
            "frames_skipped": 0,
            "db_writes": 0,
            "queries": 0,
            "errors": 0,
        }

    # ── media position ──────────────────────────────────────────────

    def position(self) -> float:
        """Elapsed playback time in seconds."""
        if self.state == PlaybackState.PLAYING and self._started_at is not None:
            pos = self._position + (self.clock() - self._started_at)
        else:
            pos = self._position
        if self.duration is not None:
            pos = min(pos, self.duration)
        return pos

    def frame_index_at(self, seconds: float) -> int:
        return int(math.floor(seconds * self.fps))

    # ── state transitions ───────────────────────────────────────────

    async def play(self) -> None:
        if self.state == PlaybackState.PLAYING:
            return
        if self.state == PlaybackState.IDLE:
            await self.initialize()
        elif self.state == PlaybackState.ENDED:
            # replay from the start with a fresh table
            self._position = 0.0
            self.current_frame_index = -1
            await self.initialize()
        self._started_at = self.clock()
        self.state = PlaybackState.PLAYING
        logger.info(f"[PLAYER] Playing from {self._position:.2f}s at {self.fps} fps")

    def pause(self) -> None:
        if self.state != PlaybackState.PLAYING:
            return
        self._position = self.position()
        self._started_at = None
        self.state = PlaybackState.PAUSED
        logger.info(f"[PLAYER] Paused at {self._position:.2f}s")

    def end(self) -> None:
        if self.state == PlaybackState.ENDED:
            return
        self._position = self.position()
        self._started_at = None
        self.state = PlaybackState.ENDED
        logger.info(f"[PLAYER] Ended at {self._position:.2f}s")

    async def initialize(self) -> int:
        """Size the frame table from the first frame file and reset it."""
        line_count = self.default_line_count
        try:
            first = await self.client.get_frame_file(self.frame_offset, self.video_basename)
            self.stats["queries"] += 1
            if first is not None and first.get("lineCount"):
                line_count = first["lineCount"]
        except Exception as e:
            logger.warning(f"[PLAYER] Could not read first frame, using {line_count} lines: {e}")

        self.line_count = await self.client.reset_frames(line_count)
        self.stats["db_writes"] += 1
        return self.line_count

    # ── ticking ─────────────────────────────────────────────────────

    async def tick(self) -> Optional[int]:
        """
        One animation-frame callback. Returns the new frame index when it
        changed, otherwise None.
        """
        if self.state != PlaybackState.PLAYING:
            return None

        pos = self.position()
        if self.duration is not None and pos >= self.duration:
            self.end()

        index = self.frame_index_at(pos)
        if index <= self.current_frame_index:
            return None
        self.current_frame_index = index

        if index % 2 == 0:
            await self.sync_frame(index)
        return index

    async def sync_frame(self, index: int) -> bool:
        """Fetch the frame file for `index` and write it to the table."""
        frame_number = index + self.frame_offset
        try:
            frame = await self.client.get_frame_file(frame_number, self.video_basename)
            self.stats["queries"] += 1
            if frame is None:
                self.stats["frames_skipped"] += 1
                logger.debug(f"[PLAYER] Frame {frame_number} not available, skipping")
                return False

            await self.client.batch_update(frame_number, frame["lines"])
            self.stats["db_writes"] += 1
            self.stats["frames_rendered"] += 1

            if self.on_frame is not None:
                await self.on_frame(frame_number, frame)
            return True
        except Exception as e:
            self.stats["errors"] += 1
            self.stats["frames_skipped"] += 1
            logger.warning(f"[PLAYER] Sync failed for frame {frame_number}: {e}")
            return False

    async def run(self, refresh_rate: float = DEFAULT_REFRESH_RATE) -> dict:
        """Play until paused or ended, ticking at the display refresh rate."""
        await self.play()
        interval = 1.0 / refresh_rate
        while self.state == PlaybackState.PLAYING:
            await self.tick()
            await asyncio.sleep(interval)
        return dict(self.stats)
