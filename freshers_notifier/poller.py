"""Freshers Notifier — Poll Loop.

One poll cycle: scrape the latest posting, skip it if its URL was
already broadcast, otherwise record it, persist the dedup store and
broadcast the rendered message.

Only one cycle runs at a time. A tick that arrives while a cycle is
in flight is dropped, not queued.
"""

from __future__ import annotations

import asyncio
import time
from typing import Optional

from freshers_notifier.models import Posting
from freshers_notifier.notifier.dispatcher import NotificationDispatcher
from freshers_notifier.notifier.formatters import render_posting
from freshers_notifier.scraper.listing import ListingScraper
from freshers_notifier.storage.dedup_store import DedupStore
from freshers_notifier.utils.logger import get_logger

logger = get_logger(__name__)

IDLE = "idle"
POLLING = "polling"


class PollLoop:
    """Change detector driven by the scheduler.

    Attributes:
        scraper: Source of the latest posting.
        store: Dedup store; written only by this loop.
        dispatcher: Fan-out to subscribers and the broadcast channel.
        cycle_count: Number of cycles started.
    """

    def __init__(
        self,
        scraper: ListingScraper,
        store: DedupStore,
        dispatcher: NotificationDispatcher,
    ) -> None:
        self.scraper = scraper
        self.store = store
        self.dispatcher = dispatcher
        self.cycle_count = 0
        self._cycle_lock = asyncio.Lock()

    @property
    def state(self) -> str:
        """IDLE while waiting for a tick, POLLING while a cycle runs."""
        return POLLING if self._cycle_lock.locked() else IDLE

    async def tick(self) -> Optional[Posting]:
        """Run one poll cycle unless one is already in flight.

        Returns:
            The posting that was broadcast, or None if nothing was sent.
        """
        if self._cycle_lock.locked():
            logger.warning("Previous poll cycle still running, skipping tick")
            return None

        async with self._cycle_lock:
            self.cycle_count += 1
            cycle_start = time.monotonic()
            logger.info("═══ Poll cycle #%d ═══", self.cycle_count)

            try:
                return await self._run_cycle()
            except Exception as e:
                logger.exception("Poll cycle #%d failed: %s", self.cycle_count, e)
                return None
            finally:
                logger.info(
                    "Poll cycle #%d done in %.1fs",
                    self.cycle_count, time.monotonic() - cycle_start,
                )

    async def _run_cycle(self) -> Optional[Posting]:
        posting = await self.scraper.scrape_latest()
        if posting is None:
            logger.info("No posting available this cycle")
            return None

        if self.store.contains(posting.url):
            logger.info("Already announced: %s", posting.url)
            return None

        logger.info("New posting: %s (%s)", posting.title[:60], posting.url)
        self.store.add(posting.url)
        if not self.store.flush():
            logger.warning("Dedup store not persisted; broadcasting anyway")

        await self.dispatcher.broadcast(render_posting(posting))
        return posting
