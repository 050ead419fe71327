"""Freshers Notifier — Scraper Package.

Components:
  - SiteClient: Async HTTP client for the source site
  - FieldExtractor / LabelledParagraphExtractor: Detail page field extraction
  - ListingScraper: Index page reader that builds complete Postings
"""

from freshers_notifier.scraper.client import SiteClient
from freshers_notifier.scraper.fields import (
    ExtractionError,
    FieldExtractor,
    LabelledParagraphExtractor,
)
from freshers_notifier.scraper.listing import ListingScraper

__all__ = [
    "SiteClient",
    "ExtractionError",
    "FieldExtractor",
    "LabelledParagraphExtractor",
    "ListingScraper",
]
