"""
In-memory change notification for the frame line table.

Every reset or batch update bumps a version and wakes subscribers; the SSE
endpoint re-reads the table when woken. Subscribers only learn that the
table changed, never what changed, so a slow reader just skips versions.
"""

import asyncio
import logging
import time
from typing import List, Optional

logger = logging.getLogger(__name__)


class FrameBroadcaster:

    def __init__(self):
        self._subscribers: List[asyncio.Event] = []
        self.version = 0
        self.last_frame_number: Optional[int] = None
        self.updated_at: Optional[float] = None

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Event:
        notify = asyncio.Event()
        self._subscribers.append(notify)
        logger.debug(f"[STREAM] Subscriber added (total={len(self._subscribers)})")
        return notify

    def unsubscribe(self, notify: asyncio.Event) -> None:
        try:
            self._subscribers.remove(notify)
        except ValueError:
            pass
        logger.debug(f"[STREAM] Subscriber removed (total={len(self._subscribers)})")

    def publish(self, frame_number: Optional[int] = None) -> int:
        self.version += 1
        self.last_frame_number = frame_number
        self.updated_at = time.time()
        for notify in list(self._subscribers):
            notify.set()
        return self.version
