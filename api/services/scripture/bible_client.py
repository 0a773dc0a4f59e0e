# api/services/scripture/bible_client.py
"""
Scripture text provider client (API.Bible).

The provider is verse-granular: one request per passage id such as
"JHN.3.16". Every call returns a FetchResult; nothing is raised for
network or HTTP failures so callers can aggregate partial results.
"""

import logging
from typing import Optional, Protocol

import requests
from bs4 import BeautifulSoup

from core.config import Settings
from utils.errors import FetchResult, InvalidReference
from utils.http_retry import get_with_retry

from .models import Verse
from .reference_parser import reference_from_api

logger = logging.getLogger(__name__)

SOURCE = "bible-api"

# Order of preference when choosing a default translation
PREFERRED_VERSIONS = [
    "revised standard version", "rsv-ce", "rsv",
    "new revised standard version", "nrsv-ce", "nrsv",
    "nabre", "douay", "catholic", "nab",
    "world english bible", "web", "american standard",
]


class ScriptureTextProvider(Protocol):
    """What the verse fetcher needs from a text provider."""

    def fetch_verse_text(self, api_reference: str,
                         bible_id: Optional[str] = None) -> FetchResult[str]:
        ...


def clean_passage_html(html: str) -> str:
    """Strip markup from provider passage content."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    text = soup.get_text(" ", strip=True)
    return " ".join(text.split())


def _data(payload) -> dict:
    """The "data" object of an API response; {} when absent, null or not an object."""
    data = payload.get("data") if isinstance(payload, dict) else None
    return data if isinstance(data, dict) else {}


class BibleAPIClient:
    """
    Client for the API.Bible REST service.

    Usage:
        client = BibleAPIClient(Settings())

        result = client.fetch_verse_text("JHN.3.16")
        if result.ok:
            print(result.value)
        else:
            print(result.failure)
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.base_url = settings.bible_api_base_url.rstrip("/")
        self.api_key = settings.bible_api_key
        self.bible_id = settings.bible_id
        self.version_name = settings.bible_version_name
        self._timeout = settings.request_timeout
        self._max_retries = settings.http_max_retries
        self._session = session or requests.Session()

        if not self.api_key:
            logger.warning("BIBLE_API_KEY not set; scripture fetches will fail upstream")

    def _headers(self) -> dict:
        return {"api-key": self.api_key, "Accept": "application/json"}

    def _get_json(self, path: str, target: str,
                  params: Optional[dict] = None) -> FetchResult[dict]:
        url = f"{self.base_url}{path}"
        try:
            response = get_with_retry(
                url,
                headers=self._headers(),
                params=params,
                timeout=self._timeout,
                max_retries=self._max_retries,
                session=self._session,
            )
            return FetchResult.success(response.json())
        except RuntimeError as e:
            logger.warning(f"Bible API request for {target} failed: {e}")
            return FetchResult.failed(SOURCE, target, str(e))
        except ValueError as e:
            logger.warning(f"Bible API returned unparseable JSON for {target}: {e}")
            return FetchResult.failed(SOURCE, target, f"unparseable response: {e}")

    def fetch_verse_text(self, api_reference: str,
                         bible_id: Optional[str] = None) -> FetchResult[str]:
        """
        Fetch the text of one passage.

        Args:
            api_reference: Passage id, e.g. "JHN.3.16" or "MAT.5.3-12"
            bible_id: Translation id; defaults to the selected version

        Returns:
            FetchResult with the HTML-free text
        """
        bible = bible_id or self.bible_id
        result = self._get_json(f"/bibles/{bible}/passages/{api_reference}", api_reference)
        if not result.ok:
            return FetchResult(failure=result.failure)

        content = _data(result.value).get("content")
        if content is None:
            return FetchResult.failed(SOURCE, api_reference, "response missing passage content")
        return FetchResult.success(clean_passage_html(content))

    def fetch_verse(self, api_reference: str, bible_id: Optional[str] = None) -> FetchResult[Verse]:
        """Fetch one passage as a Verse carrying its parsed reference."""
        try:
            ref = reference_from_api(api_reference)
        except InvalidReference as e:
            return FetchResult.failed(SOURCE, api_reference, str(e))

        text = self.fetch_verse_text(api_reference, bible_id)
        if not text.ok:
            return FetchResult(failure=text.failure)

        return FetchResult.success(Verse(
            text=text.value,
            reference=ref,
            book_name=ref.book,
            chapter=ref.chapter,
            verse_number=ref.start_verse,
        ))

    def list_versions(self) -> FetchResult[list]:
        """List the translations available to this API key."""
        result = self._get_json("/bibles", "bibles")
        if not result.ok:
            return FetchResult(failure=result.failure)
        data = result.value.get("data") if isinstance(result.value, dict) else None
        return FetchResult.success(data if isinstance(data, list) else [])

    def select_best_catholic_version(self) -> bool:
        """
        Switch the default translation to the most Catholic-friendly one listed.

        Returns:
            True if a preferred version was selected
        """
        versions = self.list_versions()
        if not versions.ok:
            logger.info(f"Keeping default Bible version {self.version_name}")
            return False

        for preferred in PREFERRED_VERSIONS:
            for version in versions.value:
                name = str(version.get("name", "")).lower()
                abbr = str(version.get("abbreviation", "")).lower()
                if preferred in name or preferred in abbr:
                    self.bible_id = version["id"]
                    self.version_name = version.get("name", self.version_name)
                    logger.info(f"Selected Bible version: {self.version_name} ({self.bible_id})")
                    return True

        logger.info(f"Using default Bible version: {self.version_name}")
        return False

    def search(self, query: str, limit: int = 10,
               bible_id: Optional[str] = None) -> FetchResult[list]:
        """
        Keyword search.

        Returns:
            FetchResult with a list of {"reference": "JHN.3.16", "text": "..."}
        """
        bible = bible_id or self.bible_id
        result = self._get_json(
            f"/bibles/{bible}/search", f"search:{query}",
            params={"query": query, "limit": limit},
        )
        if not result.ok:
            return FetchResult(failure=result.failure)

        verses = _data(result.value).get("verses") or []
        return FetchResult.success([
            {"reference": v.get("id", ""), "text": clean_passage_html(v.get("text", ""))}
            for v in verses
            if v.get("id")
        ])
