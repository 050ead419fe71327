"""Freshers Notifier — Subscriber Registry.

In-memory set of Telegram chats that opted in with /start. Not
persisted; the registry starts empty on every restart.
"""

from __future__ import annotations

from freshers_notifier.utils.logger import get_logger

logger = get_logger(__name__)


class SubscriberRegistry:
    """Set of chat ids that receive broadcasts."""

    def __init__(self) -> None:
        self._chat_ids: set[int] = set()

    def add(self, chat_id: int) -> bool:
        """Subscribe a chat. Returns False if it was already subscribed."""
        if chat_id in self._chat_ids:
            return False
        self._chat_ids.add(chat_id)
        logger.info("Subscriber added: %s (total: %d)", chat_id, len(self._chat_ids))
        return True

    def remove(self, chat_id: int) -> None:
        """Unsubscribe a chat; unknown ids are ignored."""
        if chat_id in self._chat_ids:
            self._chat_ids.discard(chat_id)
            logger.info("Subscriber removed: %s (total: %d)", chat_id, len(self._chat_ids))

    def all(self) -> frozenset[int]:
        """Snapshot of the current subscribers."""
        return frozenset(self._chat_ids)

    def __contains__(self, chat_id: object) -> bool:
        return chat_id in self._chat_ids

    def __len__(self) -> int:
        return len(self._chat_ids)
