# api/services/scripture/scripture_service.py
"""
Scripture access with caching.

Resolves references into Readings through the verse range fetcher and
keeps resolved Readings in the scripture cache. Failed fetches are never
cached, so the next request tries the provider again.
"""

import logging
from typing import Optional, Union

from services.cache import ScriptureCache
from utils.errors import FetchResult, InvalidReference

from .models import Reading, Verse
from .reference_parser import (
    ScriptureReference,
    format_api_reference,
    parse_display_reference,
    reference_from_api,
)
from .themes import DEFAULT_THEME, detect_theme, theme_keyword
from .verse_fetcher import VerseRangeFetcher

logger = logging.getLogger(__name__)

SOURCE = "scripture"


class ScriptureService:
    """
    Cache-checked scripture lookup.

    Usage:
        service = ScriptureService(fetcher, client, ScriptureCache())
        result = service.get_scripture("Matthew 5:3-12")
        if result.ok:
            print(result.value.text)
    """

    def __init__(self, fetcher: VerseRangeFetcher, searcher=None,
                 cache: Optional[ScriptureCache] = None,
                 version_name: str = ""):
        self.fetcher = fetcher
        self.searcher = searcher
        self.cache = cache if cache is not None else ScriptureCache()
        self.version_name = version_name

    def get_scripture(self, reference: Union[ScriptureReference, str]) -> FetchResult[Reading]:
        """
        Resolve a reference to a Reading.

        Args:
            reference: ScriptureReference or display text ("John 3:16")

        Returns:
            FetchResult with the Reading; a failure when no verse could be fetched

        Raises:
            InvalidReference: reference is a string that does not parse
        """
        ref = reference if isinstance(reference, ScriptureReference) else parse_display_reference(reference)

        cached = self.cache.get(ref)
        if cached is not None:
            return FetchResult.success(cached)

        verses = self.fetcher.fetch_reference(ref)
        if not verses:
            return FetchResult.failed(SOURCE, ref.api_format, "no verses could be fetched")

        reading = Reading(
            title=ref.display_text,
            subtitle=self.version_name,
            verses=tuple(verses),
            theme=detect_theme(" ".join(v.text for v in verses)),
            reference=ref,
        )
        self.cache.store(ref, reading)
        return FetchResult.success(reading)

    def fetch_reading(self, api_references: list[str], title: str,
                      subtitle: str = "") -> Optional[Reading]:
        """
        Fetch several API references and combine them into one Reading.

        The combined text becomes a single Verse whose reference is the
        first passage, marked "+" when more passages follow.

        Returns:
            The Reading, or None when nothing could be fetched
        """
        texts = []
        first_ref = None
        first_verse = None

        for api_ref in api_references:
            verses = self.fetcher.fetch_passage(api_ref)
            if not verses:
                logger.warning(f"No text for {api_ref} in '{title}'")
                continue
            if first_ref is None:
                first_ref = api_ref
                first_verse = verses[0]
            texts.append(" ".join(v.text for v in verses))

        if not texts:
            return None

        try:
            ref = reference_from_api(first_ref)
        except InvalidReference as e:
            # The fetcher reads a reversed range as its start verse; so do we
            logger.warning(f"Using start verse for {first_ref!r}: {e}")
            ref = first_verse.reference

        label = ref.display_text
        if len(api_references) > 1:
            label += "+"
        text = " ".join(texts)

        return Reading(
            title=title,
            subtitle=subtitle or label,
            verses=(Verse(
                text=text,
                reference=label,
                book_name=ref.book,
                chapter=ref.chapter,
                verse_number=ref.start_verse,
            ),),
            theme=detect_theme(text),
            liturgical_context=title,
            reference=ref,
        )

    def search_scripture(self, query: str, limit: int = 10) -> list[Reading]:
        """Best-effort keyword search; any failure yields an empty list."""
        if not query or not query.strip() or self.searcher is None:
            return []

        result = self.searcher.search(query.strip(), limit=limit)
        if not result.ok:
            logger.warning(f"Scripture search for {query!r} failed: {result.failure}")
            return []

        readings = []
        for hit in result.value:
            label = format_api_reference(hit["reference"])
            try:
                ref = reference_from_api(hit["reference"])
            except InvalidReference:
                ref = None
            readings.append(Reading(
                title=label,
                subtitle=self.version_name,
                verses=(Verse(
                    text=hit["text"],
                    reference=ref or label,
                    book_name=ref.book if ref else label,
                    chapter=ref.chapter if ref else 1,
                    verse_number=ref.start_verse if ref else 1,
                ),),
                theme=detect_theme(hit["text"]),
                reference=ref,
            ))
        return readings

    def related_scriptures(self, reading: Reading, related_references=(),
                           limit: int = 3) -> list[Reading]:
        """
        Passages related to a reading.

        Explicitly related references come first, in order; passages that
        cannot be resolved are skipped. Up to `limit` thematic search hits
        follow. The reading itself and duplicates are left out.

        Args:
            reading: The reading to find relatives for
            related_references: Display references known to be related
            limit: Maximum number of thematic search hits

        Returns:
            Related readings, possibly empty
        """
        seen = {reading.title}
        related = []

        for reference in related_references:
            try:
                result = self.get_scripture(reference)
            except InvalidReference as e:
                logger.warning(f"Skipping related reference {reference!r}: {e}")
                continue
            if result.ok and result.value.title not in seen:
                seen.add(result.value.title)
                related.append(result.value)

        theme = reading.theme or detect_theme(reading.text)
        if theme == DEFAULT_THEME:
            return related

        thematic = 0
        for hit in self.search_scripture(theme_keyword(theme), limit=limit + len(seen)):
            if thematic >= limit:
                break
            if hit.title in seen:
                continue
            seen.add(hit.title)
            related.append(hit)
            thematic += 1
        return related
