"""Freshers Notifier — Data Models.

Dataclasses for the entities that flow through the system: posting
references found on the index page, the field mapping extracted from a
detail page, and the finished Posting handed to the notifier.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


# ═══════════════════════════════════════════════════════════
# Field Mapping
# ═══════════════════════════════════════════════════════════


class Fields(dict):
    """Labelled fields extracted from a detail page.

    A plain dict of label → value whose missing keys read as an empty
    string. Lookups never raise, but absent keys are not materialised,
    so membership tests and equality only see fields actually found.
    """

    def __missing__(self, key: str) -> str:
        return ""


# ═══════════════════════════════════════════════════════════
# Scraper Models
# ═══════════════════════════════════════════════════════════


@dataclass(frozen=True)
class PostingRef:
    """A posting link as seen on the index page.

    Attributes:
        title: Display title of the link.
        raw_url: href exactly as found in the markup (used for fetching).
        url: Canonical form of raw_url (used as the dedup key).
    """

    title: str
    raw_url: str
    url: str


@dataclass(frozen=True)
class Posting:
    """One scraped job posting.

    Immutable once constructed. Two postings with the same canonical
    url describe the same real-world event, whatever their titles or
    details say.

    Attributes:
        title: Posting title from the index page.
        url: Canonical URL — the dedup identity.
        details: Read-only label → value mapping from the detail page.
    """

    title: str
    url: str
    details: Mapping[str, str] = field(default_factory=Fields, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "details", MappingProxyType(Fields(self.details)),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (for logging and debug dumps)."""
        return {
            "title": self.title,
            "url": self.url,
            "details": dict(self.details),
        }
