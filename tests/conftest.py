# tests/conftest.py
from __future__ import annotations

from typing import Callable, Union

import httpx
import pytest

from freshers_notifier.config import ScraperConfig
from freshers_notifier.notifier.dispatcher import NotificationDispatcher
from freshers_notifier.notifier.subscribers import SubscriberRegistry
from freshers_notifier.notifier.telegram_bot import DeliveryResult
from freshers_notifier.scraper.client import SiteClient
from freshers_notifier.scraper.fields import FieldExtractor
from freshers_notifier.scraper.listing import ListingScraper

INDEX_URL = "https://jobs.test/"
CHANNEL_ID = "@freshers_channel"


# ---------------------------------------------------------------------
# HTML builders
# ---------------------------------------------------------------------
def index_html(*slugs: str) -> str:
    """Index page with one '.entry-title > a' per slug, in order."""
    articles = "\n".join(
        f'<article><h2 class="entry-title">'
        f'<a href="{INDEX_URL}{slug}/?utm_source=home">{slug.title()} Hiring</a>'
        f"</h2></article>"
        for slug in slugs
    )
    return f"<html><body><main>{articles}</main></body></html>"


def detail_html(*paragraphs: str) -> str:
    body = "\n".join(paragraphs)
    return f'<html><body><div class="job-desc-content">{body}</div></body></html>'


def standard_detail(company: str = "Acme") -> str:
    return detail_html(
        f"<p><strong>Company Name:</strong> {company}</p>",
        f'<p><strong>Company Website:</strong> <a href="https://company.test">{company}</a></p>',
        "<p><strong>Job Role:</strong> Graduate Engineer Trainee</p>",
        "<p><strong>Batch:</strong> 2024</p>",
        '<p><strong>Apply Link:</strong> <a href="https://careers.test/apply">Click Here</a></p>',
    )


# ---------------------------------------------------------------------
# HTTP fakes
# ---------------------------------------------------------------------
Page = Union[str, int]


class FakeSite:
    """Serves canned pages through an httpx.MockTransport and records requests."""

    def __init__(self, pages: dict[str, Page]) -> None:
        self.pages = pages
        self.requested: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        page = self.pages.get(url, 404)
        if isinstance(page, int):
            return httpx.Response(page, text="error")
        return httpx.Response(200, text=page, headers={"Content-Type": "text/html"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def scraper_config() -> ScraperConfig:
    return ScraperConfig(index_url=INDEX_URL, timeout_seconds=5)


@pytest.fixture
def make_scraper(scraper_config) -> Callable[..., tuple[ListingScraper, FakeSite]]:
    def _make(
        pages: dict[str, Page], extractor: FieldExtractor | None = None,
    ) -> tuple[ListingScraper, FakeSite]:
        site = FakeSite(pages)
        client = SiteClient(scraper_config, transport=site.transport)
        return ListingScraper(scraper_config, client, extractor=extractor), site

    return _make


# ---------------------------------------------------------------------
# Telegram fakes
# ---------------------------------------------------------------------
class FakeTelegram:
    """Stands in for TelegramNotifier: records sends, returns scripted results."""

    def __init__(self, outcomes: dict | None = None) -> None:
        self.outcomes = outcomes or {}
        self.sent: list[tuple] = []

    async def send(self, chat_id, text: str) -> DeliveryResult:
        self.sent.append((chat_id, text))
        outcome = self.outcomes.get(chat_id, DeliveryResult.SENT)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def sends_to(self, chat_id) -> int:
        return sum(1 for target, _ in self.sent if target == chat_id)


@pytest.fixture
def fake_telegram() -> FakeTelegram:
    return FakeTelegram()


@pytest.fixture
def subscribers() -> SubscriberRegistry:
    return SubscriberRegistry()


@pytest.fixture
def dispatcher(fake_telegram, subscribers) -> NotificationDispatcher:
    return NotificationDispatcher(fake_telegram, subscribers, CHANNEL_ID)
