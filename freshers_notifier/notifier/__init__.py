"""Freshers Notifier — Notifier Package.

Telegram notification system. Components:
  - formatters: HTML message builders
  - telegram_bot: Per-chat sender with delivery classification
  - subscribers: In-memory registry of opted-in chats
  - dispatcher: Fan-out to subscribers and the broadcast channel
  - commands: /start, /latest and /last handlers
"""

from freshers_notifier.notifier.formatters import render_posting
from freshers_notifier.notifier.telegram_bot import DeliveryResult, TelegramNotifier
from freshers_notifier.notifier.subscribers import SubscriberRegistry
from freshers_notifier.notifier.dispatcher import BroadcastReport, NotificationDispatcher
from freshers_notifier.notifier.commands import CommandHandler

__all__ = [
    "render_posting",
    "DeliveryResult",
    "TelegramNotifier",
    "SubscriberRegistry",
    "BroadcastReport",
    "NotificationDispatcher",
    "CommandHandler",
]
