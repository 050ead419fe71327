"""Freshers Notifier — Telegram Command Handlers.

Interactive commands via Telegram bot:
  /start  — subscribe to new postings and show the welcome text
  /latest — the most recent posting, scraped on demand
  /last   — the last N postings, scraped on demand

On-demand scrapes never touch the dedup store, so they can run at any
time, including during a poll cycle.
"""

from __future__ import annotations

from telegram import LinkPreviewOptions, Update
from telegram.constants import ParseMode
from telegram.ext import Application, CommandHandler as TgCmdHandler, ContextTypes

from freshers_notifier.notifier.formatters import (
    format_no_updates,
    format_welcome,
    format_working,
    render_posting,
)
from freshers_notifier.notifier.subscribers import SubscriberRegistry
from freshers_notifier.scraper.listing import ListingScraper
from freshers_notifier.utils.logger import get_logger

logger = get_logger(__name__)

_NO_PREVIEW = LinkPreviewOptions(is_disabled=True)


class CommandHandler:
    """Telegram bot command handlers.

    Attributes:
        scraper: Listing scraper used for on-demand requests.
        subscribers: Registry that /start adds chats to.
        recent_limit: Number of postings returned by /last.
    """

    def __init__(
        self,
        scraper: ListingScraper,
        subscribers: SubscriberRegistry,
        recent_limit: int = 10,
    ) -> None:
        self.scraper = scraper
        self.subscribers = subscribers
        self.recent_limit = recent_limit

    def register(self, tg_app: Application) -> None:
        """Register all command handlers with the Telegram Application."""
        tg_app.add_handler(TgCmdHandler("start", self._cmd_start))
        tg_app.add_handler(TgCmdHandler("latest", self._cmd_latest))
        tg_app.add_handler(TgCmdHandler("last", self._cmd_last))
        logger.info("Registered 3 Telegram commands")

    async def _reply(self, update: Update, text: str) -> None:
        await update.effective_message.reply_text(
            text, parse_mode=ParseMode.HTML, link_preview_options=_NO_PREVIEW,
        )

    async def _cmd_start(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE,
    ) -> None:
        """Handle /start — subscribe the chat."""
        self.subscribers.add(update.effective_chat.id)
        await self._reply(update, format_welcome(self.recent_limit))

    async def _cmd_latest(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE,
    ) -> None:
        """Handle /latest — scrape and send the most recent posting."""
        await self._reply(update, format_working())

        posting = await self.scraper.scrape_latest()
        if posting is None:
            await self._reply(update, format_no_updates())
            return
        await self._reply(update, render_posting(posting))

    async def _cmd_last(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE,
    ) -> None:
        """Handle /last — scrape and send the most recent postings."""
        await self._reply(update, format_working(self.recent_limit))

        postings = await self.scraper.scrape_recent(self.recent_limit)
        if not postings:
            await self._reply(update, format_no_updates())
            return
        for posting in postings:
            await self._reply(update, render_posting(posting))
