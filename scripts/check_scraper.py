"""Freshers Notifier — Live Scraper Check.

Runs the scraper against the live source site without touching the
dedup store or Telegram:
  1. Loads real config
  2. Scrapes the latest posting and prints its rendered message
  3. Scrapes the last N postings
  4. Reports extraction success rate per field

Run: python scripts/check_scraper.py [N]
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# Telegram settings are not used here
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "test-token")
os.environ.setdefault("TELEGRAM_CHANNEL_ID", "@test")

from freshers_notifier.config import load_config
from freshers_notifier.notifier.formatters import render_posting
from freshers_notifier.scraper.client import SiteClient
from freshers_notifier.scraper.listing import ListingScraper
from freshers_notifier.utils.logger import get_logger

logger = get_logger(__name__)

REPORT_FIELDS = [
    "Company Name", "Job Role", "Job Location", "Qualifications",
    "Batch", "Experience", "Salary", "Apply Link",
]


def _print_separator(char: str = "═", width: int = 70) -> None:
    logger.info(char * width)


async def run_check(limit: int) -> None:
    """Run the live scraper check."""
    config = load_config()
    logger.info("Config loaded: index_url=%s", config.scraper.index_url)

    async with SiteClient(config.scraper) as client:
        scraper = ListingScraper(config.scraper, client)

        _print_separator()
        logger.info("  STEP 1: Latest posting")
        _print_separator()

        latest = await scraper.scrape_latest()
        if latest is None:
            logger.error("  No latest posting could be scraped")
        else:
            logger.info("  URL: %s", latest.url)
            for line in render_posting(latest).splitlines():
                logger.info("  %s", line)

        _print_separator()
        logger.info("  STEP 2: Last %d postings", limit)
        _print_separator()

        postings = await scraper.scrape_recent(limit)
        for i, posting in enumerate(postings, 1):
            logger.info("  %d. %s", i, posting.title)
            logger.info("     %s (%d fields)", posting.url, len(posting.details))

        _print_separator()
        logger.info("  STEP 3: Extraction Quality Report")
        _print_separator()

        for field in REPORT_FIELDS:
            filled = sum(1 for p in postings if p.details.get(field))
            pct = (filled / len(postings) * 100) if postings else 0
            status = "✅" if pct == 100 else "⚠️" if pct >= 50 else "❌"
            logger.info("  %s %-16s %d/%d (%.0f%%)", status, field, filled, len(postings), pct)

        logger.info("  Requests made: %d", client.total_requests)


if __name__ == "__main__":
    asyncio.run(run_check(int(sys.argv[1]) if len(sys.argv) > 1 else 3))
