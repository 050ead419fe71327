"""Freshers Notifier — Listing Scraper.

Reads the index page, picks the most recent posting links and turns
each one into a complete Posting by extracting its detail page.

Detail pages are always fetched one after another, never concurrently,
to keep the load on the source site to a single in-flight request per
caller.
"""

from __future__ import annotations

from typing import Optional
from urllib.parse import urljoin

from selectolax.parser import HTMLParser

from freshers_notifier.config import ScraperConfig
from freshers_notifier.models import Posting, PostingRef
from freshers_notifier.scraper.client import SiteClient
from freshers_notifier.scraper.fields import FieldExtractor, LabelledParagraphExtractor
from freshers_notifier.utils.logger import get_logger
from freshers_notifier.utils.urls import normalize_url

logger = get_logger(__name__)


class ListingScraper:
    """Builds Postings from the index page and their detail pages.

    Attributes:
        config: Scraper configuration (index URL, posting selector).
        client: Shared SiteClient used for every fetch.
        extractor: Field extraction strategy for detail pages.
    """

    def __init__(
        self,
        config: ScraperConfig,
        client: SiteClient,
        extractor: Optional[FieldExtractor] = None,
    ) -> None:
        self.config = config
        self.client = client
        self.extractor = extractor or LabelledParagraphExtractor()

    def parse_index(self, html: str, limit: int) -> list[PostingRef]:
        """Collect the first `limit` posting references in document order.

        Links without an href are ignored. Relative hrefs are resolved
        against the index URL.

        Args:
            html: Index page HTML.
            limit: Maximum number of references to return.

        Returns:
            List of PostingRef, possibly empty.
        """
        refs: list[PostingRef] = []
        if limit <= 0:
            return refs

        tree = HTMLParser(html)
        for link in tree.css(self.config.posting_selector):
            href = (link.attributes.get("href") or "").strip()
            if not href:
                continue
            raw_url = urljoin(self.config.index_url, href)
            refs.append(PostingRef(
                title=link.text(strip=True),
                raw_url=raw_url,
                url=normalize_url(raw_url),
            ))
            if len(refs) >= limit:
                break

        return refs

    async def _fetch_refs(self, limit: int) -> Optional[list[PostingRef]]:
        """Fetch the index page once and enumerate references.

        Returns:
            References (possibly empty), or None if the index could not
            be fetched or parsed.
        """
        html = await self.client.get_page(self.config.index_url)
        if html is None:
            logger.error("Index page unavailable: %s", self.config.index_url)
            return None

        try:
            refs = self.parse_index(html, limit)
        except Exception as e:
            logger.error("Failed to parse index page: %s", e)
            return None

        logger.info("Index page: %d posting reference(s)", len(refs))
        return refs

    async def scrape_posting(self, ref: PostingRef) -> Optional[Posting]:
        """Fetch one detail page and build its Posting.

        All-or-nothing: any fetch, parse or extraction fault yields None.

        Args:
            ref: Reference taken from the index page.

        Returns:
            The complete Posting, or None.
        """
        html = await self.client.get_page(ref.raw_url)
        if html is None:
            logger.warning("Detail page unavailable: %s", ref.raw_url)
            return None

        try:
            fields = self.extractor.extract(HTMLParser(html))
        except Exception as e:
            logger.warning("Extraction failed for %s: %s", ref.raw_url, e)
            return None

        logger.info("Parsed posting: %s (%d fields)", ref.title[:60], len(fields))
        return Posting(title=ref.title, url=ref.url, details=fields)

    async def scrape_latest(self) -> Optional[Posting]:
        """Return the most recent posting, or None if there is none to report."""
        refs = await self._fetch_refs(1)
        if not refs:
            if refs is not None:
                logger.info("No postings found on index page")
            return None

        return await self.scrape_posting(refs[0])

    async def scrape_recent(self, limit: int) -> list[Posting]:
        """Return up to `limit` most recent postings in index order.

        Each call re-fetches the index. Detail pages are fetched
        sequentially; postings whose extraction fails are skipped.

        Args:
            limit: Number of index references to consider.

        Returns:
            Successfully extracted postings, in document order.
        """
        refs = await self._fetch_refs(limit)
        if not refs:
            return []

        postings: list[Posting] = []
        for i, ref in enumerate(refs, 1):
            logger.info("  [%d/%d] %s", i, len(refs), ref.title[:60])
            posting = await self.scrape_posting(ref)
            if posting is not None:
                postings.append(posting)

        logger.info(
            "Recent scrape complete: %d/%d postings extracted",
            len(postings), len(refs),
        )
        return postings
