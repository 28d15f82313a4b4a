"""
Single-writer token guarding the frame line table.

A reset wipes and re-inserts every row, so it must not interleave with
batch updates that patch those rows. Batch updates share the table with
each other; a reset takes it exclusively. Once a reset is waiting, new
batch updates queue behind it so a busy player cannot starve a reset.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

logger = logging.getLogger(__name__)


class ResetBarrier:

    def __init__(self):
        self._condition = asyncio.Condition()
        self._active_updates = 0
        self._resetting = False
        self._pending_resets = 0

    @property
    def active_updates(self) -> int:
        return self._active_updates

    @property
    def is_resetting(self) -> bool:
        return self._resetting

    @asynccontextmanager
    async def updating(self) -> AsyncIterator[None]:
        """Hold the table for one batch update."""
        async with self._condition:
            await self._condition.wait_for(
                lambda: not self._resetting and self._pending_resets == 0
            )
            self._active_updates += 1
        try:
            yield
        finally:
            async with self._condition:
                self._active_updates -= 1
                self._condition.notify_all()

    @asynccontextmanager
    async def resetting(self) -> AsyncIterator[None]:
        """Hold the table exclusively for a wipe-and-reinsert."""
        async with self._condition:
            self._pending_resets += 1
            try:
                if self._active_updates:
                    logger.debug(f"[FRAMES] Reset waiting for {self._active_updates} in-flight updates")
                await self._condition.wait_for(
                    lambda: not self._resetting and self._active_updates == 0
                )
            finally:
                self._pending_resets -= 1
                self._condition.notify_all()
            self._resetting = True
        try:
            yield
        finally:
            async with self._condition:
                self._resetting = False
                self._condition.notify_all()
