"""Freshers Notifier — job posting watcher with Telegram fan-out."""

__version__ = "1.0.0"
