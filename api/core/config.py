# core/config.py
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env
load_dotenv()

# ---- SCRIPTURE TEXT PROVIDER ----
BIBLE_API_KEY = os.getenv("BIBLE_API_KEY", "")
BIBLE_API_BASE_URL = os.getenv("BIBLE_API_BASE_URL", "https://api.scripture.api.bible/v1")
# World English Bible, replaced by a Catholic-friendly version when one is listed
BIBLE_ID = os.getenv("BIBLE_ID", "de4e12af7f28f599-02")
BIBLE_VERSION_NAME = os.getenv("BIBLE_VERSION_NAME", "World English Bible")

# ---- IMAGE GENERATION PROVIDER ----
IMAGE_API_KEY = os.getenv("IMAGE_API_KEY", os.getenv("GEMINI_API_KEY", ""))
IMAGE_API_ENDPOINT = os.getenv(
    "IMAGE_API_ENDPOINT",
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-2.5-flash-image-preview:generateContent",
)

# ---- LITURGICAL FEED ----
LITURGY_FEED_URL = os.getenv("LITURGY_FEED_URL", "https://bible.usccb.org/readings.rss")
APP_TZ = os.getenv("APP_TZ", "America/New_York")

# ---- CACHES / LIMITS ----
DEVOTIONAL_CACHE_PATH = os.getenv(
    "DEVOTIONAL_CACHE_PATH",
    str(Path.home() / ".cache" / "daily-light"),
)
MAX_RANGE_VERSES = int(os.getenv("MAX_RANGE_VERSES", "20"))
VERSE_FETCH_WORKERS = min(int(os.getenv("VERSE_FETCH_WORKERS", "8")), 20)
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "15"))
IMAGE_REQUEST_TIMEOUT = int(os.getenv("IMAGE_REQUEST_TIMEOUT", "120"))
# Fetch failures are surfaced to the caller; raise only to tolerate flaky providers
HTTP_MAX_RETRIES = max(int(os.getenv("HTTP_MAX_RETRIES", "1")), 1)

_max_entries = os.getenv("SCRIPTURE_CACHE_MAX_ENTRIES")
SCRIPTURE_CACHE_MAX_ENTRIES: Optional[int] = int(_max_entries) if _max_entries else None


@dataclass(frozen=True)
class Settings:
    """Snapshot of configuration handed to services at construction time."""
    bible_api_key: str = BIBLE_API_KEY
    bible_api_base_url: str = BIBLE_API_BASE_URL
    bible_id: str = BIBLE_ID
    bible_version_name: str = BIBLE_VERSION_NAME
    image_api_key: str = IMAGE_API_KEY
    image_api_endpoint: str = IMAGE_API_ENDPOINT
    liturgy_feed_url: str = LITURGY_FEED_URL
    app_tz: str = APP_TZ
    cache_path: str = DEVOTIONAL_CACHE_PATH
    max_range_verses: int = MAX_RANGE_VERSES
    verse_fetch_workers: int = VERSE_FETCH_WORKERS
    request_timeout: int = REQUEST_TIMEOUT
    image_request_timeout: int = IMAGE_REQUEST_TIMEOUT
    http_max_retries: int = HTTP_MAX_RETRIES
    scripture_cache_max_entries: Optional[int] = SCRIPTURE_CACHE_MAX_ENTRIES

    @property
    def image_cache_path(self) -> Path:
        """Directory holding generated artwork (JPEG, one file per cache key)."""
        return Path(self.cache_path) / "images"
