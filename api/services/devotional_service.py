# api/services/devotional_service.py
"""
Devotional Service

Application context wiring the scripture, liturgy, saints and art services
together. One instance is built at startup and handed to the HTTP layer;
nothing here is a module-level singleton.

Usage:
    service = DevotionalService(Settings())
    day = service.get_todays_liturgy()
    art = service.generate_art("Matthew 5:3")
"""

import logging
import threading
from datetime import date
from typing import Optional, Union

import requests

from core.config import Settings
from services.art import GeminiImageProvider, GeneratedImage, ImageGenerator, ScriptureContext
from services.art.image_generator import ImageProvider, cache_key, render_placeholder
from services.cache import ImageCache, ScriptureCache
from services.liturgy import (
    LiturgicalDay,
    LiturgicalDayAssembler,
    LiturgyFeedClient,
    Saint,
    SaintsDirectory,
    entry_for,
)
from services.liturgy.assembler import FeedSource
from services.scripture import (
    BibleAPIClient,
    BibleScene,
    CollectionsDirectory,
    DailyReadingService,
    Reading,
    ScriptureReference,
    ScriptureService,
    Verse,
    VerseRangeFetcher,
    parse_display_reference,
)
from utils.errors import FetchResult, GenerationFailure

logger = logging.getLogger(__name__)

# Mass reading title -> art context
_READING_CONTEXTS = {
    "Responsorial Psalm": ScriptureContext.PSALM,
    "Gospel": ScriptureContext.GOSPEL,
}


class DevotionalService:
    """
    Facade over the devotional core.

    Collaborators can be injected (tests pass fakes); anything not given is
    built from settings.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 session: Optional[requests.Session] = None,
                 text_provider=None,
                 feed: Optional[FeedSource] = None,
                 image_provider: Optional[ImageProvider] = None,
                 saints: Optional[SaintsDirectory] = None,
                 image_cache: Optional[ImageCache] = None,
                 collections: Optional[CollectionsDirectory] = None):
        self.settings = settings or Settings()
        session = session or requests.Session()

        client = text_provider or BibleAPIClient(self.settings, session=session)
        self.fetcher = VerseRangeFetcher(
            client,
            max_extra_verses=self.settings.max_range_verses,
            max_workers=self.settings.verse_fetch_workers,
        )
        self.scripture = ScriptureService(
            self.fetcher,
            searcher=client if hasattr(client, "search") else None,
            cache=ScriptureCache(self.settings.scripture_cache_max_entries),
            version_name=self.settings.bible_version_name,
        )
        self.daily = DailyReadingService(self.scripture)
        self.collections = collections or CollectionsDirectory()

        self.saints = saints or SaintsDirectory()
        self.assembler = LiturgicalDayAssembler(
            feed or LiturgyFeedClient(self.settings, session=session),
            saints=self.saints,
            tz=self.settings.app_tz,
        )

        self.images = ImageGenerator(
            image_provider or GeminiImageProvider(self.settings, session=session),
            image_cache or ImageCache(self.settings.image_cache_path),
        )

    # ------------------------------------------------------------------
    # Liturgy
    # ------------------------------------------------------------------

    def today(self) -> date:
        return self.assembler.today()

    def get_todays_liturgy(self, today: Optional[date] = None) -> Optional[LiturgicalDay]:
        """Cached-or-fresh liturgical day; None only if nothing was ever assembled."""
        return self.assembler.get_todays_liturgy(today)

    def refresh_liturgy(self, today: Optional[date] = None) -> Optional[LiturgicalDay]:
        return self.assembler.refresh(today)

    def load_full_readings(self, day: Optional[date] = None) -> list[Reading]:
        """
        The day's readings with full scripture text where possible.

        Days in the static lectionary are resolved through the scripture
        provider; any reading that cannot be fetched keeps the feed text.
        Other days return the feed readings as extracted.
        """
        day = day or self.today()
        liturgical_day = self.get_todays_liturgy(day)
        feed_readings = {}
        if liturgical_day is not None and liturgical_day.date == day:
            feed_readings = {r.title: r for r in liturgical_day.readings.all_readings}

        entry = entry_for(day)
        if entry is None:
            return list(feed_readings.values())

        readings = []
        for title, api_ref in entry.mass_structure():
            reading = self.scripture.fetch_reading([api_ref], title)
            if reading is None:
                reading = feed_readings.get(title)
                if reading is not None:
                    logger.info(f"Using feed text for {title} on {day.isoformat()}")
            if reading is not None:
                readings.append(reading)
        return readings

    # ------------------------------------------------------------------
    # Scripture
    # ------------------------------------------------------------------

    def get_scripture(self, reference: Union[ScriptureReference, str]) -> FetchResult[Reading]:
        """Cache-checked scripture lookup. Raises InvalidReference for bad strings."""
        return self.scripture.get_scripture(reference)

    def search_scripture(self, query: str, limit: int = 10) -> list[Reading]:
        return self.scripture.search_scripture(query, limit=limit)

    def related_scriptures(self, reading: Reading, related_references=(),
                           limit: int = 3) -> list[Reading]:
        return self.scripture.related_scriptures(reading, related_references, limit=limit)

    # ------------------------------------------------------------------
    # Devotions
    # ------------------------------------------------------------------

    def daily_reading(self, day: Optional[date] = None) -> Reading:
        """The rotating reading of the day; never None."""
        return self.daily.reading_for(day or self.today())

    def scene_reading(self, scene: BibleScene) -> Optional[Reading]:
        """Scripture for one scene of a collection, or None when nothing could be fetched."""
        return self.scripture.fetch_reading(
            list(scene.references),
            title=scene.title,
            subtitle=scene.description,
        )

    # ------------------------------------------------------------------
    # Art
    # ------------------------------------------------------------------

    def generate_art(self, target: Union[Verse, Reading, ScriptureReference, str],
                     context: Optional[ScriptureContext] = None,
                     cancel: Optional[threading.Event] = None) -> GeneratedImage:
        """
        Artwork for a verse, a reading or a reference.

        References are resolved to text first. If the text cannot be
        fetched the placeholder is returned; nothing is cached for it.

        Raises:
            InvalidReference: target is a string that does not parse
        """
        if isinstance(target, str):
            target = parse_display_reference(target)

        if isinstance(target, ScriptureReference):
            result = self.get_scripture(target)
            if not result.ok:
                logger.warning(f"No text for artwork of {target}: {result.failure}")
                return GeneratedImage(
                    render_placeholder(),
                    cache_key(target.display_text, self.images.style),
                    placeholder=True,
                    failure=GenerationFailure(str(result.failure)),
                )
            target = result.value

        if isinstance(target, Reading):
            context = context or _READING_CONTEXTS.get(target.title)
            verse = self._reading_as_verse(target)
        else:
            verse = target

        return self.images.generate(
            verse,
            context=context,
            liturgical_day=self.assembler.current(),
            cancel=cancel,
        )

    @staticmethod
    def _reading_as_verse(reading: Reading) -> Verse:
        if len(reading.verses) == 1:
            return reading.verses[0]
        ref = reading.reference
        first = reading.verses[0] if reading.verses else None
        return Verse(
            text=reading.text,
            reference=ref or reading.title,
            book_name=ref.book if ref else (first.book_name if first else reading.title),
            chapter=ref.chapter if ref else 1,
            verse_number=ref.start_verse if ref else 1,
        )

    # ------------------------------------------------------------------
    # Saints
    # ------------------------------------------------------------------

    def todays_saint(self, today: Optional[date] = None) -> Optional[Saint]:
        return self.saints.saint_for(today or self.today())

    def saint_readings(self, saint: Saint) -> Optional[Reading]:
        """Scripture associated with a saint's vocation, combined into one Reading."""
        return self.scripture.fetch_reading(
            saint.related_references(),
            title=f"Scripture for {saint.name}",
        )

    def generate_saint_art(self, saint: Saint,
                           cancel: Optional[threading.Event] = None) -> GeneratedImage:
        return self.images.generate_saint_art(saint, cancel=cancel)
