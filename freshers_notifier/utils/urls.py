"""Freshers Notifier — URL Canonicalization.

Postings are deduplicated by URL. The source site decorates links with
tracking parameters, anchors and inconsistent trailing slashes, so every
URL is reduced to a canonical key before it is compared or stored.
"""

from __future__ import annotations

from typing import Optional


def normalize_url(raw: Optional[str]) -> str:
    """Reduce a raw posting URL to its canonical dedup key.

    Drops the query string and fragment, then the trailing path separator:

      "https://x.com/a/?ref=1#frag" → "https://x.com/a"
      "https://x.com/a/"            → "https://x.com/a"
      None                          → ""

    Args:
        raw: URL as found in the page markup, or None.

    Returns:
        Canonical URL string (empty for empty input).
    """
    if not raw:
        return ""

    url = raw.strip()
    url = url.split("?", 1)[0]
    url = url.split("#", 1)[0]
    # All trailing "/" go, not just one: normalize(normalize(u)) == normalize(u)
    return url.rstrip("/")
