"""Freshers Notifier — Shared utilities (logging, URL handling)."""

from freshers_notifier.utils.logger import get_logger, set_console_level
from freshers_notifier.utils.urls import normalize_url

__all__ = ["get_logger", "set_console_level", "normalize_url"]
