# api/services/scripture/__init__.py
"""
Scripture services.

This package provides:
- ScriptureReference: Structured, hashable scripture citation
- parse_display_reference / to_api_format / parse_api_reference: Reference conversions
- find_references: Extract references from liturgical text
- Verse, Reading: Scripture content values
- BibleAPIClient: Verse text provider client
- VerseRangeFetcher: Concurrent per-verse range resolution
- ScriptureService: Cache-checked scripture lookup, search and related passages
- DailyReadingService: Rotating reading of the day with built-in fallbacks
- CollectionsDirectory: Curated collections of biblical scenes
"""

from .bible_client import BibleAPIClient, ScriptureTextProvider, clean_passage_html
from .scene_collections import BibleCollection, BibleScene, CollectionCategory, CollectionsDirectory
from .daily_readings import DailyPassage, DailyReadingService
from .models import Reading, Verse
from .reference_parser import (
    BOOK_TO_CODE,
    CODE_TO_BOOK,
    ScriptureReference,
    extract_first_reference,
    find_references,
    format_api_reference,
    is_valid_reference,
    normalize_book_name,
    parse_api_range,
    parse_api_reference,
    parse_display_reference,
    reference_from_api,
    to_api_format,
)
from .scripture_service import ScriptureService
from .themes import detect_theme, theme_keyword
from .verse_fetcher import VerseRangeFetcher, clean_verse_text

__all__ = [
    "BibleAPIClient",
    "ScriptureTextProvider",
    "clean_passage_html",
    "BibleCollection",
    "BibleScene",
    "CollectionCategory",
    "CollectionsDirectory",
    "DailyPassage",
    "DailyReadingService",
    "Reading",
    "Verse",
    "BOOK_TO_CODE",
    "CODE_TO_BOOK",
    "ScriptureReference",
    "extract_first_reference",
    "find_references",
    "format_api_reference",
    "is_valid_reference",
    "normalize_book_name",
    "parse_api_range",
    "parse_api_reference",
    "parse_display_reference",
    "reference_from_api",
    "to_api_format",
    "ScriptureService",
    "detect_theme",
    "theme_keyword",
    "VerseRangeFetcher",
    "clean_verse_text",
]
