"""Freshers Notifier — Notification Dispatcher.

Fans one rendered message out to every subscriber plus the public
broadcast channel. Deliveries run concurrently and fail independently:
a chat that blocked the bot is unsubscribed, any other failure is
logged, and no failure ever stops the remaining deliveries.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from freshers_notifier.notifier.subscribers import SubscriberRegistry
from freshers_notifier.notifier.telegram_bot import ChatId, DeliveryResult, TelegramNotifier
from freshers_notifier.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class BroadcastReport:
    """Per-recipient outcome of one broadcast.

    Attributes:
        delivered: Chats (subscribers and channel) that received the message.
        removed: Subscribers dropped because they rejected delivery.
        failed: Chats whose delivery failed for any other reason.
    """

    delivered: list[ChatId] = field(default_factory=list)
    removed: list[ChatId] = field(default_factory=list)
    failed: list[ChatId] = field(default_factory=list)


class NotificationDispatcher:
    """Delivers messages to all subscribers and the broadcast channel.

    Attributes:
        telegram: Telegram sender.
        subscribers: Registry of opted-in chats; shrinks on rejection.
        channel_id: Fixed public channel, never unsubscribed.
    """

    def __init__(
        self,
        telegram: TelegramNotifier,
        subscribers: SubscriberRegistry,
        channel_id: ChatId,
    ) -> None:
        self.telegram = telegram
        self.subscribers = subscribers
        self.channel_id = channel_id

    async def _deliver(self, chat_id: ChatId, text: str) -> DeliveryResult:
        try:
            return await self.telegram.send(chat_id, text)
        except Exception as e:
            logger.error("Unexpected error delivering to %s: %s", chat_id, e)
            return DeliveryResult.FAILED

    async def broadcast(self, message: str) -> BroadcastReport:
        """Send message to every current subscriber and to the channel.

        Args:
            message: HTML formatted message.

        Returns:
            BroadcastReport with the outcome for each recipient.
        """
        recipients = list(self.subscribers.all())
        results = await asyncio.gather(
            self._deliver(self.channel_id, message),
            *(self._deliver(chat_id, message) for chat_id in recipients),
        )
        channel_result, subscriber_results = results[0], results[1:]

        report = BroadcastReport()

        if channel_result is DeliveryResult.SENT:
            report.delivered.append(self.channel_id)
        else:
            logger.error("Broadcast channel %s did not receive the message", self.channel_id)
            report.failed.append(self.channel_id)

        for chat_id, result in zip(recipients, subscriber_results):
            if result is DeliveryResult.SENT:
                report.delivered.append(chat_id)
            elif result is DeliveryResult.FORBIDDEN:
                self.subscribers.remove(chat_id)
                report.removed.append(chat_id)
            else:
                report.failed.append(chat_id)

        logger.info(
            "Broadcast: %d delivered, %d removed, %d failed",
            len(report.delivered), len(report.removed), len(report.failed),
        )
        return report
