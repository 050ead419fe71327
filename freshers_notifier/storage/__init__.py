"""Freshers Notifier — Persistent dedup state."""

from freshers_notifier.storage.dedup_store import DedupStore

__all__ = ["DedupStore"]
