# api/services/liturgy/__init__.py
"""
Liturgy services.

Provides:
- Season, color and rank classification
- Mass readings extraction from the daily readings feed
- The Liturgical Day Assembler
- The saints directory and static lectionary
"""

from .assembler import AssemblerState, LiturgicalDay, LiturgicalDayAssembler
from .calendar import (
    LiturgicalColor,
    LiturgicalRank,
    LiturgicalSeason,
    determine_color,
    determine_rank,
    determine_season,
    extract_commemorations,
    highest_precedence,
)
from .content_extractor import (
    MassReadings,
    clean_html_content,
    extract_lectionary_info,
    extract_mass_readings,
)
from .feed_client import FeedItem, LiturgyFeedClient
from .lectionary import LectionaryEntry, entry_for
from .saints import Saint, SaintsDirectory

__all__ = [
    "AssemblerState",
    "LiturgicalDay",
    "LiturgicalDayAssembler",
    "LiturgicalColor",
    "LiturgicalRank",
    "LiturgicalSeason",
    "determine_color",
    "determine_rank",
    "determine_season",
    "extract_commemorations",
    "highest_precedence",
    "MassReadings",
    "clean_html_content",
    "extract_lectionary_info",
    "extract_mass_readings",
    "FeedItem",
    "LiturgyFeedClient",
    "LectionaryEntry",
    "entry_for",
    "Saint",
    "SaintsDirectory",
]
