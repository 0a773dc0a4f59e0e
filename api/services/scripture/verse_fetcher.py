# api/services/scripture/verse_fetcher.py
"""
Verse range fetcher.

The text provider only serves single verses, so a range such as
"MAT.25.14-30" is resolved by one request per verse. Requests run on a
bounded thread pool; results are always returned in ascending verse order.
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from utils.errors import InvalidReference

from .bible_client import ScriptureTextProvider
from .models import Verse
from .reference_parser import CODE_TO_BOOK, ScriptureReference, parse_api_range

logger = logging.getLogger(__name__)

DEFAULT_MAX_EXTRA_VERSES = 20
MAX_WORKERS = 20


def clean_verse_text(text: str, verse_number: int) -> str:
    """
    Remove a leading verse number the provider may prepend.

    "9But concerning brotherly love" -> "But concerning brotherly love"
    """
    cleaned = text.strip()
    cleaned = re.sub(rf"^\[?{verse_number}(?!\d)\]?[.,;:]?\s*", "", cleaned)
    return cleaned.strip()


class VerseRangeFetcher:
    """
    Resolve a verse range into an ordered list of Verse objects.

    At most max_extra_verses + 1 verses are fetched per range. A failure on
    one verse is logged and skipped. If every verse fails, the start verse
    is retried alone; if that fails too, the result is empty.

    Usage:
        fetcher = VerseRangeFetcher(BibleAPIClient(settings))
        verses = fetcher.fetch_range("MAT", 25, 14, 30)
    """

    def __init__(self, provider: ScriptureTextProvider,
                 max_extra_verses: int = DEFAULT_MAX_EXTRA_VERSES,
                 max_workers: int = 8,
                 bible_id: Optional[str] = None):
        self.provider = provider
        self.max_extra_verses = max_extra_verses
        self.max_workers = max(1, min(max_workers, MAX_WORKERS))
        self.bible_id = bible_id

    def _fetch_one(self, book_code: str, chapter: int, verse_number: int) -> Optional[Verse]:
        api_ref = f"{book_code}.{chapter}.{verse_number}"
        try:
            result = self.provider.fetch_verse_text(api_ref, self.bible_id)
        except Exception as e:
            # Provider bugs count as a failed verse, not a failed range
            logger.warning(f"Provider raised fetching {api_ref}: {e}")
            return None

        if not result.ok:
            logger.warning(f"Failed to fetch verse {api_ref}: {result.failure}")
            return None

        book = CODE_TO_BOOK.get(book_code.upper(), book_code)
        return Verse(
            text=clean_verse_text(result.value or "", verse_number),
            reference=ScriptureReference(book, chapter, verse_number),
            book_name=book,
            chapter=chapter,
            verse_number=verse_number,
        )

    def fetch_range(self, book_code: str, chapter: int, start_verse: int,
                    end_verse: Optional[int] = None) -> list[Verse]:
        """
        Fetch verses start_verse..min(end_verse, start_verse + 20), inclusive.

        Args:
            book_code: 3-letter API code ("MAT")
            chapter: Chapter number
            start_verse: First verse
            end_verse: Last verse (None for a single verse)

        Returns:
            Verses ordered by verse number; may have gaps, may be empty
        """
        if chapter < 1 or start_verse < 1:
            logger.warning(f"Invalid chapter/verse {book_code}.{chapter}.{start_verse}")
            return []

        end = end_verse if end_verse is not None and end_verse >= start_verse else start_verse
        last = min(end, start_verse + self.max_extra_verses)
        numbers = list(range(start_verse, last + 1))

        if end > last:
            logger.info(
                f"Capping {book_code}.{chapter}.{start_verse}-{end} "
                f"at verse {last} ({len(numbers)} verses)"
            )

        if len(numbers) == 1:
            verse = self._fetch_one(book_code, chapter, start_verse)
            return [verse] if verse else []

        workers = min(self.max_workers, len(numbers))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            fetched = list(executor.map(
                lambda n: self._fetch_one(book_code, chapter, n), numbers
            ))

        verses = sorted((v for v in fetched if v is not None), key=lambda v: v.verse_number)
        if verses:
            return verses

        logger.warning(
            f"Every verse of {book_code}.{chapter}.{start_verse}-{end} failed; "
            f"retrying verse {start_verse} alone"
        )
        verse = self._fetch_one(book_code, chapter, start_verse)
        return [verse] if verse else []

    def fetch_passage(self, api_reference: str) -> list[Verse]:
        """
        Fetch a passage given in API format ("JHN.13.34" or "MAT.25.14-30").

        Returns:
            Verses ordered by verse number, empty if the reference is malformed
            or every fetch failed
        """
        try:
            code, chapter, start, end = parse_api_range(api_reference)
        except InvalidReference as e:
            logger.warning(f"Cannot fetch malformed reference {api_reference!r}: {e}")
            return []
        return self.fetch_range(code, chapter, start, end)

    def fetch_reference(self, ref: ScriptureReference) -> list[Verse]:
        """Fetch every verse of a ScriptureReference (subject to the cap)."""
        return self.fetch_range(ref.book_code, ref.chapter, ref.start_verse, ref.end_verse)
