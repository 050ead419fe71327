"""Freshers Notifier — Main Orchestrator.

Ties all components together: config, dedup store, scraper, Telegram
commands and broadcast, and the poll schedule.

Runs on a schedule with APScheduler:
  - Poll cycle (every N minutes, first one immediately)
Telegram commands are served by python-telegram-bot polling alongside.

Usage:
    python -m freshers_notifier.main
    python scripts/run.py
"""

from __future__ import annotations

import asyncio
import signal
import time
import traceback
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from telegram.ext import Application, ApplicationBuilder, ContextTypes

from freshers_notifier.config import AppConfig, load_config
from freshers_notifier.notifier.commands import CommandHandler
from freshers_notifier.notifier.dispatcher import NotificationDispatcher
from freshers_notifier.notifier.subscribers import SubscriberRegistry
from freshers_notifier.notifier.telegram_bot import TelegramNotifier
from freshers_notifier.poller import PollLoop
from freshers_notifier.scraper.client import SiteClient
from freshers_notifier.scraper.listing import ListingScraper
from freshers_notifier.storage.dedup_store import DedupStore
from freshers_notifier.utils.logger import get_logger, set_console_level

logger = get_logger(__name__)


async def _log_handler_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.error("Command handler error: %s", context.error)


class FreshersNotifier:
    """Main application orchestrator.

    Owns every long-lived component and wires them together through
    their constructors; nothing is shared through module globals.

    Attributes:
        config: Full application configuration.
        store: Dedup store of already-broadcast posting URLs.
        subscribers: Chats subscribed via /start.
        poller: Poll loop driven by the scheduler.
    """

    def __init__(self) -> None:
        self.config: Optional[AppConfig] = None
        self.store: Optional[DedupStore] = None
        self.subscribers = SubscriberRegistry()
        self.poller: Optional[PollLoop] = None
        self._client: Optional[SiteClient] = None
        self._tg_app: Optional[Application] = None
        self._scheduler: Optional[AsyncIOScheduler] = None

        self._running = False
        self._start_time: float = 0.0

    async def start(self) -> None:
        """Full application startup sequence.

        1. Load config
        2. Load the dedup store
        3. Build scraper, Telegram sender, dispatcher and poll loop
        4. Start Telegram command polling
        5. Schedule the poll cycle and run the first one immediately
        6. Keep alive until stopped
        """
        self._start_time = time.monotonic()
        self._running = True

        try:
            # ── 1. Config ────────────────────────────────
            logger.info("═══ Loading configuration ═══")
            self.config = load_config()
            set_console_level(self.config.log_level)

            # ── 2. Dedup store ───────────────────────────
            logger.info("═══ Loading dedup store ═══")
            self.store = DedupStore(self.config.state_path)
            self.store.load()

            # ── 3. Components ────────────────────────────
            logger.info("═══ Initializing components ═══")
            self._client = SiteClient(self.config.scraper)
            scraper = ListingScraper(self.config.scraper, self._client)

            self._tg_app = (
                ApplicationBuilder()
                .token(self.config.telegram.bot_token)
                .concurrent_updates(True)
                .build()
            )
            telegram = TelegramNotifier(self._tg_app.bot)
            dispatcher = NotificationDispatcher(
                telegram, self.subscribers, self.config.telegram.channel_id,
            )
            self.poller = PollLoop(scraper, self.store, dispatcher)

            # ── 4. Telegram commands ─────────────────────
            CommandHandler(
                scraper, self.subscribers, self.config.scraper.recent_limit,
            ).register(self._tg_app)
            self._tg_app.add_error_handler(_log_handler_error)

            await self._tg_app.initialize()
            if not await telegram.initialize():
                logger.error("Telegram bot connection failed! Continuing anyway...")
            await self._tg_app.start()
            await self._tg_app.updater.start_polling()

            # ── 5. Scheduler ─────────────────────────────
            logger.info("═══ Setting up scheduler ═══")
            interval = self.config.scraper.poll_interval_minutes
            self._scheduler = AsyncIOScheduler()
            self._scheduler.add_job(
                self.poller.tick,
                IntervalTrigger(minutes=interval),
                id="poll_cycle",
                max_instances=1,
                coalesce=True,
                misfire_grace_time=60,
                name=f"Poll cycle (every {interval}m)",
            )
            self._scheduler.start()

            logger.info("═══ Running first poll cycle ═══")
            await self.poller.tick()

            # ── 6. Keep alive ────────────────────────────
            logger.info("═══ Entering main loop ═══")
            while self._running:
                await asyncio.sleep(1)

        except KeyboardInterrupt:
            logger.info("KeyboardInterrupt received")
        except Exception as e:
            logger.error("Fatal error: %s", e)
            logger.error(traceback.format_exc())
        finally:
            await self.shutdown()

    def stop(self) -> None:
        """Ask the keep-alive loop to exit."""
        self._running = False

    async def shutdown(self) -> None:
        """Graceful shutdown: stop scheduler, Telegram polling, HTTP client."""
        logger.info("═══ Shutting down ═══")
        self._running = False

        if self._scheduler and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")

        if self._tg_app is not None:
            try:
                if self._tg_app.updater and self._tg_app.updater.running:
                    await self._tg_app.updater.stop()
                if self._tg_app.running:
                    await self._tg_app.stop()
                await self._tg_app.shutdown()
            except Exception as e:
                logger.warning("Error stopping Telegram application: %s", e)

        if self._client is not None:
            await self._client.close()

        logger.info("Shutdown complete (uptime: %s)", self.uptime)

    @property
    def uptime(self) -> str:
        """Human-readable uptime string."""
        if not self._start_time:
            return "0m"
        s = time.monotonic() - self._start_time
        hours = int(s // 3600)
        mins = int((s % 3600) // 60)
        if hours:
            return f"{hours}h {mins}m"
        return f"{mins}m"


def main() -> None:
    """Application entry point."""
    app = FreshersNotifier()

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    def _signal_handler(sig, frame):
        logger.info("Signal %s received, shutting down...", sig)
        app.stop()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    try:
        loop.run_until_complete(app.start())
    except KeyboardInterrupt:
        pass
    finally:
        loop.close()


if __name__ == "__main__":
    main()
