# api/services/liturgy/calendar.py
"""
Liturgical classification: season, color, rank.

The season table is a deliberately simplified month/day approximation.
It does not compute the movable date of Easter, so Lent and Easter Time
boundaries are only roughly right. Color and art theme selection depend on
these exact boundaries.
"""

from datetime import date
from enum import Enum
from typing import Callable, Iterable, Optional, TypeVar

T = TypeVar("T")


class LiturgicalSeason(Enum):
    ADVENT = "Advent"
    CHRISTMAS_TIME = "Christmas Time"
    LENT = "Lent"
    EASTER_TIME = "Easter Time"
    ORDINARY_TIME = "Ordinary Time"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def theme_description(self) -> str:
        return _SEASON_THEMES[self]

    @property
    def art_theme(self) -> str:
        """Visual vocabulary used when generating artwork in this season."""
        return _SEASON_ART[self]

    @property
    def default_color(self) -> "LiturgicalColor":
        if self in (LiturgicalSeason.ADVENT, LiturgicalSeason.LENT):
            return LiturgicalColor.VIOLET
        if self in (LiturgicalSeason.CHRISTMAS_TIME, LiturgicalSeason.EASTER_TIME):
            return LiturgicalColor.WHITE
        return LiturgicalColor.GREEN


_SEASON_THEMES = {
    LiturgicalSeason.ADVENT: "Preparation and expectation for Christ's coming",
    LiturgicalSeason.CHRISTMAS_TIME: "Celebration of the Incarnation",
    LiturgicalSeason.LENT: "Penance, prayer, and preparation for Easter",
    LiturgicalSeason.EASTER_TIME: "Celebration of Christ's Resurrection",
    LiturgicalSeason.ORDINARY_TIME: "Growth in Christian discipleship",
}

_SEASON_ART = {
    LiturgicalSeason.ADVENT: "expectation, hope, Mary and Joseph, purple tones, candlelight",
    LiturgicalSeason.CHRISTMAS_TIME: "nativity, angels, shepherds, gold and white, joy, celebration",
    LiturgicalSeason.LENT: "desert, cross, purple tones, penance, solitude, reflection",
    LiturgicalSeason.EASTER_TIME: "resurrection, empty tomb, white and gold, alleluia, new life",
    LiturgicalSeason.ORDINARY_TIME: "teaching, parables, green tones, daily Christian life",
}


class LiturgicalColor(Enum):
    WHITE = "White"
    RED = "Red"
    GREEN = "Green"
    VIOLET = "Violet"
    ROSE = "Rose"
    GOLD = "Gold"
    BLACK = "Black"


class LiturgicalRank(Enum):
    """
    Celebration rank. Lower priority number means higher precedence, so
    sorting ascending puts the celebration that wins first:
    SOLEMNITY < FEAST < MEMORIAL < OPTIONAL_MEMORIAL < FERIAL.
    """
    SOLEMNITY = "Solemnity"
    FEAST = "Feast"
    MEMORIAL = "Memorial"
    OPTIONAL_MEMORIAL = "Optional Memorial"
    FERIAL = "Ferial"

    @property
    def priority(self) -> int:
        return _RANK_PRIORITY[self]

    def __lt__(self, other):
        if not isinstance(other, LiturgicalRank):
            return NotImplemented
        return self.priority < other.priority

    def __le__(self, other):
        if not isinstance(other, LiturgicalRank):
            return NotImplemented
        return self.priority <= other.priority

    def __gt__(self, other):
        if not isinstance(other, LiturgicalRank):
            return NotImplemented
        return self.priority > other.priority

    def __ge__(self, other):
        if not isinstance(other, LiturgicalRank):
            return NotImplemented
        return self.priority >= other.priority


_RANK_PRIORITY = {
    LiturgicalRank.SOLEMNITY: 1,
    LiturgicalRank.FEAST: 2,
    LiturgicalRank.MEMORIAL: 3,
    LiturgicalRank.OPTIONAL_MEMORIAL: 4,
    LiturgicalRank.FERIAL: 5,
}


def highest_precedence(items: Iterable[T],
                       rank_of: Callable[[T], LiturgicalRank]) -> Optional[T]:
    """
    Pick the item whose rank takes precedence. Ties keep input order.

    Used both for saints sharing a feast day and for coinciding celebrations.
    """
    best = None
    for item in items:
        if best is None or rank_of(item) < rank_of(best):
            best = item
    return best


def determine_season(day: date) -> LiturgicalSeason:
    """Simplified season table (no Easter computation)."""
    month, dom = day.month, day.day

    if month == 12:
        return LiturgicalSeason.ADVENT if dom <= 24 else LiturgicalSeason.CHRISTMAS_TIME
    if month == 1:
        # Until the Baptism of the Lord
        return LiturgicalSeason.CHRISTMAS_TIME if dom <= 13 else LiturgicalSeason.ORDINARY_TIME
    if month in (2, 3):
        return LiturgicalSeason.LENT
    if month == 4:
        return LiturgicalSeason.EASTER_TIME
    if month == 5:
        return LiturgicalSeason.EASTER_TIME if dom <= 15 else LiturgicalSeason.ORDINARY_TIME
    return LiturgicalSeason.ORDINARY_TIME


# Keyword rules take precedence over the season default, first match wins
_COLOR_KEYWORDS = [
    ("martyr", LiturgicalColor.RED),
    ("virgin", LiturgicalColor.WHITE),
    ("angel", LiturgicalColor.WHITE),
    ("pope", LiturgicalColor.WHITE),
    ("bishop", LiturgicalColor.WHITE),
]


def determine_color(title: str, season: LiturgicalSeason) -> LiturgicalColor:
    lowered = (title or "").lower()
    for keyword, color in _COLOR_KEYWORDS:
        if keyword in lowered:
            return color
    return season.default_color


def determine_rank(title: str) -> LiturgicalRank:
    lowered = (title or "").lower()

    if "solemnity" in lowered:
        return LiturgicalRank.SOLEMNITY
    if "feast" in lowered:
        return LiturgicalRank.FEAST
    if "optional memorial" in lowered:
        return LiturgicalRank.OPTIONAL_MEMORIAL
    if "memorial" in lowered:
        return LiturgicalRank.MEMORIAL
    return LiturgicalRank.FERIAL


def extract_commemorations(title: str) -> list[str]:
    """Split a feed title on commas into name-like segments."""
    return [part.strip() for part in (title or "").split(",") if part.strip()]
