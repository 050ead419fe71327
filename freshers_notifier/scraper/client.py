"""Freshers Notifier — Async HTTP Client.

Thin wrapper around httpx.AsyncClient for fetching the listing and
detail pages. Every failure (timeout, connection error, non-2xx status)
is logged and reported as None; nothing is retried within a call, the
next poll cycle is the retry.
"""

from __future__ import annotations

from typing import Optional

import httpx

from freshers_notifier.config import ScraperConfig
from freshers_notifier.utils.logger import get_logger

logger = get_logger(__name__)

# ── Browser-like headers common to all requests ──────────
_COMMON_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-IN,en;q=0.9",
    "Connection": "keep-alive",
}


class SiteClient:
    """Async HTTP client for the source site.

    The underlying httpx.AsyncClient is created lazily and shared by
    the poll loop and on-demand commands; each call issues its own
    independent request.

    Attributes:
        config: Scraper configuration.
        total_requests: Running count of successful requests this session.
    """

    def __init__(
        self,
        config: ScraperConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: ScraperConfig from the app configuration.
            transport: Optional httpx transport (tests pass a MockTransport).
        """
        self.config = config
        self.total_requests: int = 0
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers={**_COMMON_HEADERS, "User-Agent": self.config.user_agent},
                follow_redirects=True,
                timeout=httpx.Timeout(self.config.timeout_seconds),
                transport=self._transport,
            )
        return self._client

    async def get_page(self, url: str) -> Optional[str]:
        """Fetch a page and return its HTML.

        Args:
            url: Absolute URL of the page.

        Returns:
            Response body as text, or None if the request failed.
        """
        if not url:
            logger.warning("Refusing to fetch an empty URL")
            return None

        logger.debug("Fetching %s", url)
        try:
            resp = await self._get_client().get(url)
            resp.raise_for_status()
        except httpx.TimeoutException:
            logger.warning("Timeout fetching %s", url)
            return None
        except httpx.HTTPStatusError as e:
            logger.warning("HTTP %d for %s", e.response.status_code, url)
            return None
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Request failed for %s: %s", url, e)
            return None

        self.total_requests += 1
        return resp.text

    async def close(self) -> None:
        """Close the underlying httpx client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.debug("HTTP client closed (total requests: %d)", self.total_requests)

    async def __aenter__(self) -> "SiteClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
