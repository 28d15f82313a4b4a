"""
Client side of the processing handshake: start extraction, then poll
progress until it completes or a fixed timeout assumes it has.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from frameline.player.api_client import FramelineClient
from frameline.utils.video_progress import get_status_message

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.5           # seconds between progress polls
PROCESSING_TIMEOUT = 5 * 60   # give up waiting and assume completion


def basename_from_path(file_path: str) -> str:
    return file_path.rsplit("/", 1)[-1].rsplit(".", 1)[0]


@dataclass
class ProcessingOutcome:
    video_basename: str
    completed: bool = False
    timed_out: bool = False
    error: Optional[str] = None
    progress: dict = field(default_factory=dict)
    polls: int = 0


class ProcessingWatcher:

    def __init__(
        self,
        client: FramelineClient,
        poll_interval: float = POLL_INTERVAL,
        timeout: float = PROCESSING_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_status: Optional[Callable[[str, dict], None]] = None,
    ):
        self.client = client
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.clock = clock
        self.sleep = sleep
        self.on_status = on_status

    async def run(self, file_path: str) -> ProcessingOutcome:
        outcome = ProcessingOutcome(video_basename=basename_from_path(file_path))

        try:
            result = await self.client.process_video(file_path)
            outcome.video_basename = result.get("videoBasename") or outcome.video_basename
            logger.info(f"[WATCH] Processing started for {outcome.video_basename}: {result.get('message')}")
        except Exception as e:
            # still hand control back so the user is not blocked
            logger.error(f"[WATCH] Failed to start processing for {file_path}: {e}")
            outcome.error = str(e)
            return outcome

        deadline = self.clock() + self.timeout
        while True:
            try:
                progress = await self.client.get_progress(outcome.video_basename)
                outcome.polls += 1
                outcome.progress = progress
                message = get_status_message(progress["originalCount"], progress["asciiCount"])
                if self.on_status is not None:
                    self.on_status(message, progress)
                if progress.get("isComplete") or progress.get("progress", 0) >= 100:
                    outcome.completed = True
                    logger.info(f"[WATCH] Processing complete for {outcome.video_basename}")
                    return outcome
            except Exception as e:
                outcome.polls += 1
                logger.warning(f"[WATCH] Error polling progress for {outcome.video_basename}: {e}")

            if self.clock() >= deadline:
                logger.warning(f"[WATCH] Processing timeout reached for {outcome.video_basename}, assuming completion")
                outcome.completed = True
                outcome.timed_out = True
                return outcome

            await self.sleep(self.poll_interval)
