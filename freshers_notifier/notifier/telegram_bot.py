"""Freshers Notifier — Telegram Bot Client.

Sends messages to arbitrary chats through python-telegram-bot and
classifies the outcome, so the dispatcher can tell a chat that blocked
the bot (drop the subscriber) from a passing network problem (log it).
Failed sends are not retried; the next posting is the next attempt.
"""

from __future__ import annotations

import enum
from typing import Union

from telegram import Bot, LinkPreviewOptions
from telegram.constants import ParseMode
from telegram.error import Forbidden, TelegramError

from freshers_notifier.utils.logger import get_logger

logger = get_logger(__name__)

_SAFE_LEN = 4000  # Telegram caps messages at 4096

ChatId = Union[int, str]

_NO_PREVIEW = LinkPreviewOptions(is_disabled=True)


class DeliveryResult(enum.Enum):
    """Outcome of delivering one message to one chat."""

    SENT = "sent"
    FORBIDDEN = "forbidden"  # blocked by the user / kicked from the chat
    FAILED = "failed"


class TelegramNotifier:
    """Async Telegram sender with HTML formatting and link previews off.

    Attributes:
        bot: The python-telegram-bot Bot used for API calls.
    """

    def __init__(self, bot: Bot) -> None:
        self.bot = bot

    async def initialize(self) -> bool:
        """Verify the token by calling getMe.

        Returns:
            True if connected successfully, False otherwise.
        """
        try:
            me = await self.bot.get_me()
            logger.info("Telegram bot connected: @%s", me.username)
            return True
        except TelegramError as e:
            logger.error("Telegram bot connection failed: %s", e)
            return False

    async def send(self, chat_id: ChatId, text: str) -> DeliveryResult:
        """Deliver a message to one chat.

        Messages longer than Telegram's limit are split at line
        boundaries and sent in order; delivery stops at the first
        failing chunk.

        Args:
            chat_id: Target chat id or @channel username.
            text: HTML formatted message.

        Returns:
            DeliveryResult classifying the outcome.
        """
        if not text:
            return DeliveryResult.FAILED

        for chunk in split_message(text, _SAFE_LEN):
            try:
                await self.bot.send_message(
                    chat_id=chat_id,
                    text=chunk,
                    parse_mode=ParseMode.HTML,
                    link_preview_options=_NO_PREVIEW,
                )
            except Forbidden as e:
                logger.warning("Chat %s rejected delivery: %s", chat_id, e)
                return DeliveryResult.FORBIDDEN
            except TelegramError as e:
                logger.error("Telegram error sending to %s: %s", chat_id, e)
                return DeliveryResult.FAILED

        return DeliveryResult.SENT


def split_message(text: str, max_len: int = _SAFE_LEN) -> list[str]:
    """Split long text at paragraph or line boundaries.

    Tries double newlines first, then single newlines, then a hard cut.

    Args:
        text: Full message text.
        max_len: Maximum characters per chunk.

    Returns:
        List of text chunks, each at most max_len characters.
    """
    if len(text) <= max_len:
        return [text]

    chunks: list[str] = []
    remaining = text

    while len(remaining) > max_len:
        cut_point = remaining.rfind("\n\n", 0, max_len)
        if cut_point <= 0:
            cut_point = remaining.rfind("\n", 0, max_len)
        if cut_point <= 0:
            cut_point = max_len

        chunks.append(remaining[:cut_point].rstrip())
        remaining = remaining[cut_point:].lstrip("\n")

    if remaining.strip():
        chunks.append(remaining.strip())

    return chunks
