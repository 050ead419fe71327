# tests/test_poller.py
import asyncio
import json

from freshers_notifier.models import Posting
from freshers_notifier.notifier.dispatcher import NotificationDispatcher
from freshers_notifier.notifier.subscribers import SubscriberRegistry
from freshers_notifier.poller import IDLE, POLLING, PollLoop
from freshers_notifier.storage.dedup_store import DedupStore
from tests.conftest import CHANNEL_ID, FakeTelegram, INDEX_URL, index_html, standard_detail

POSTING_K = Posting(
    title="Acme Hiring",
    url="https://jobs.test/acme-hiring",
    details={"Company Name": "Acme", "Batch": "2024"},
)


class StubScraper:
    """Returns scripted results from scrape_latest(), one per call."""

    def __init__(self, *results) -> None:
        self.results = list(results)
        self.calls = 0

    async def scrape_latest(self):
        self.calls += 1
        return self.results.pop(0) if self.results else None


class SpyStore(DedupStore):
    def __init__(self, path, fail_flush: bool = False) -> None:
        super().__init__(path)
        self.flushes = 0
        self.fail_flush = fail_flush

    def flush(self) -> bool:
        self.flushes += 1
        if self.fail_flush:
            return False
        return super().flush()


def build(tmp_path, scraper, fail_flush=False, subscriber_ids=(7,)):
    store = SpyStore(tmp_path / "seen.json", fail_flush=fail_flush)
    store.load()
    store.flushes = 0
    telegram = FakeTelegram()
    registry = SubscriberRegistry()
    for chat_id in subscriber_ids:
        registry.add(chat_id)
    loop = PollLoop(scraper, store, NotificationDispatcher(telegram, registry, CHANNEL_ID))
    return loop, store, telegram


def test_new_posting_is_recorded_flushed_and_broadcast(tmp_path):
    loop, store, telegram = build(tmp_path, StubScraper(POSTING_K))

    result = asyncio.run(loop.tick())

    assert result == POSTING_K
    assert store.contains(POSTING_K.url)
    assert store.flushes == 1
    assert json.loads((tmp_path / "seen.json").read_text()) == [POSTING_K.url]
    assert telegram.sends_to(CHANNEL_ID) == 1
    assert telegram.sends_to(7) == 1
    assert "Acme Hiring" in telegram.sent[0][1]
    assert loop.state == IDLE


def test_second_tick_with_same_key_is_a_no_op(tmp_path):
    drifted = Posting(title="Acme Hiring (Updated)", url=POSTING_K.url, details={})
    loop, store, telegram = build(tmp_path, StubScraper(POSTING_K, drifted))

    asyncio.run(loop.tick())
    sends_after_first = len(telegram.sent)
    result = asyncio.run(loop.tick())

    assert result is None
    assert len(telegram.sent) == sends_after_first
    assert store.flushes == 1


def test_nothing_scraped_is_a_no_op(tmp_path):
    loop, store, telegram = build(tmp_path, StubScraper(None))

    assert asyncio.run(loop.tick()) is None
    assert telegram.sent == []
    assert store.flushes == 0
    assert len(store) == 0


def test_flush_failure_still_broadcasts(tmp_path):
    loop, store, telegram = build(tmp_path, StubScraper(POSTING_K), fail_flush=True)

    asyncio.run(loop.tick())

    assert telegram.sends_to(CHANNEL_ID) == 1
    assert store.contains(POSTING_K.url)


def test_dedup_survives_restart(tmp_path):
    first, _, _ = build(tmp_path, StubScraper(POSTING_K))
    asyncio.run(first.tick())

    restarted, store, telegram = build(tmp_path, StubScraper(POSTING_K))

    assert store.contains(POSTING_K.url)
    assert asyncio.run(restarted.tick()) is None
    assert telegram.sent == []


def test_tick_while_polling_is_dropped(tmp_path):
    release = asyncio.Event()

    class BlockingScraper(StubScraper):
        async def scrape_latest(self):
            self.calls += 1
            await release.wait()
            return POSTING_K

    scraper = BlockingScraper()
    loop, _, telegram = build(tmp_path, scraper)

    async def scenario():
        first = asyncio.create_task(loop.tick())
        await asyncio.sleep(0)
        state_during = loop.state
        skipped = await loop.tick()
        release.set()
        return state_during, skipped, await first

    state_during, skipped, first_result = asyncio.run(scenario())

    assert state_during == POLLING
    assert skipped is None
    assert first_result == POSTING_K
    assert scraper.calls == 1
    assert telegram.sends_to(CHANNEL_ID) == 1
    assert loop.state == IDLE


def test_scraper_exception_returns_loop_to_idle(tmp_path):
    class BrokenScraper:
        async def scrape_latest(self):
            raise RuntimeError("selector exploded")

    loop, store, telegram = build(tmp_path, BrokenScraper())

    assert asyncio.run(loop.tick()) is None
    assert loop.state == IDLE
    assert telegram.sent == []


def test_end_to_end_with_real_scraper(tmp_path, make_scraper):
    scraper, site = make_scraper({
        INDEX_URL: index_html("acme-hiring"),
        f"{INDEX_URL}acme-hiring/?utm_source=home": standard_detail("Acme"),
    })
    loop, store, telegram = build(tmp_path, scraper)

    async def two_ticks():
        return await loop.tick(), await loop.tick()

    first, second = asyncio.run(two_ticks())

    assert first.url == "https://jobs.test/acme-hiring"
    assert second is None
    assert telegram.sends_to(CHANNEL_ID) == 1
    assert "<b>Company:</b> Acme" in telegram.sent[0][1]
