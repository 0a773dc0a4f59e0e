# api/services/liturgy/feed_client.py
"""
Daily readings feed client.

The feed publishes one item per day; item links embed the date as MMDDYY
(".../bible/readings/082925.cfm"). The item for the requested day is
preferred, otherwise the newest item is used.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

import feedparser
import requests

from core.config import Settings
from utils.errors import FetchResult
from utils.http_retry import get_with_retry

logger = logging.getLogger(__name__)

SOURCE = "liturgy-feed"


@dataclass(frozen=True)
class FeedItem:
    """One entry of the readings feed."""
    title: str
    link: str
    description: str
    pub_date: str = ""
    guid: str = ""

    @classmethod
    def from_entry(cls, entry) -> "FeedItem":
        return cls(
            title=(entry.get("title") or "").strip(),
            link=entry.get("link") or "",
            description=entry.get("description") or entry.get("summary") or "",
            pub_date=entry.get("published") or "",
            guid=entry.get("id") or "",
        )


def mmddyy(day: date) -> str:
    return day.strftime("%m%d%y")


def pick_item(items: list[FeedItem], day: date) -> Optional[FeedItem]:
    """The item whose link carries the day's MMDDYY key, else the first item."""
    if not items:
        return None
    key = mmddyy(day)
    for item in items:
        if key in item.link:
            return item
    logger.info(f"No feed item for {key}; using newest item '{items[0].title}'")
    return items[0]


class LiturgyFeedClient:
    """
    Fetches and parses the daily readings RSS feed.

    Usage:
        client = LiturgyFeedClient(Settings())
        result = client.fetch_item(date.today())
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.feed_url = settings.liturgy_feed_url
        self._timeout = settings.request_timeout
        self._max_retries = settings.http_max_retries
        self._session = session or requests.Session()

    def fetch_items(self) -> FetchResult[list]:
        """Download the feed and return every item, newest first."""
        try:
            response = get_with_retry(
                self.feed_url,
                headers={"Accept": "application/rss+xml, application/xml"},
                timeout=self._timeout,
                max_retries=self._max_retries,
                session=self._session,
            )
        except RuntimeError as e:
            logger.warning(f"Liturgy feed request failed: {e}")
            return FetchResult.failed(SOURCE, self.feed_url, str(e))

        parsed = feedparser.parse(response.content)
        if parsed.bozo and not parsed.entries:
            reason = f"unparseable feed: {parsed.get('bozo_exception')}"
            logger.warning(f"Liturgy feed could not be parsed: {reason}")
            return FetchResult.failed(SOURCE, self.feed_url, reason)

        return FetchResult.success([FeedItem.from_entry(e) for e in parsed.entries])

    def fetch_item(self, day: date) -> FetchResult[FeedItem]:
        """Fetch the feed item for day."""
        items = self.fetch_items()
        if not items.ok:
            return FetchResult(failure=items.failure)

        item = pick_item(items.value, day)
        if item is None:
            return FetchResult.failed(SOURCE, self.feed_url, "feed has no items")
        return FetchResult.success(item)
