# api/services/liturgy/assembler.py
"""
Liturgical Day Assembler.

Combines the feed item for a date with season, color and rank
classification into one immutable LiturgicalDay. The latest good value is
held in a single slot and replaced whole; a failed refresh keeps it.

State: IDLE -> LOADING -> READY | FAILED
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Protocol
from zoneinfo import ZoneInfo

from utils.errors import FetchResult

from .calendar import (
    LiturgicalColor,
    LiturgicalRank,
    LiturgicalSeason,
    determine_color,
    determine_rank,
    determine_season,
    extract_commemorations,
)
from .content_extractor import MassReadings, extract_mass_readings
from .feed_client import FeedItem
from .saints import SaintsDirectory

logger = logging.getLogger(__name__)


class FeedSource(Protocol):
    def fetch_item(self, day: date) -> FetchResult[FeedItem]:
        ...


class AssemblerState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class LiturgicalDay:
    """One date's observance. Superseded on the next refresh, never mutated."""
    date: date
    title: str
    season: LiturgicalSeason
    color: LiturgicalColor
    rank: LiturgicalRank
    readings: MassReadings
    commemorations: tuple = field(default_factory=tuple)

    @property
    def gospel(self):
        return self.readings.gospel

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "title": self.title,
            "season": self.season.display_name,
            "season_theme": self.season.theme_description,
            "color": self.color.value,
            "rank": self.rank.value,
            "commemorations": list(self.commemorations),
            "readings": self.readings.to_dict(),
        }


def assemble_day(day: date, item: FeedItem) -> LiturgicalDay:
    """Build a LiturgicalDay from one feed item."""
    season = determine_season(day)
    return LiturgicalDay(
        date=day,
        title=item.title,
        season=season,
        color=determine_color(item.title, season),
        rank=determine_rank(item.title),
        readings=extract_mass_readings(item.description),
        commemorations=tuple(extract_commemorations(item.title)),
    )


class LiturgicalDayAssembler:
    """
    Holds the current LiturgicalDay and refreshes it on request.

    Usage:
        assembler = LiturgicalDayAssembler(LiturgyFeedClient(settings))
        day = assembler.get_todays_liturgy()
    """

    def __init__(self, feed: FeedSource,
                 saints: Optional[SaintsDirectory] = None,
                 tz: str = "UTC"):
        self.feed = feed
        self.saints = saints
        self.tz = ZoneInfo(tz)

        self._lock = threading.Lock()
        self._state = AssemblerState.IDLE
        self._current: Optional[LiturgicalDay] = None
        self._error: Optional[str] = None

    def today(self) -> date:
        return datetime.now(self.tz).date()

    @property
    def state(self) -> AssemblerState:
        with self._lock:
            return self._state

    @property
    def error(self) -> Optional[str]:
        """Message of the last failed refresh, cleared by the next success."""
        with self._lock:
            return self._error

    def current(self) -> Optional[LiturgicalDay]:
        """Latest successfully assembled day, possibly from an earlier date."""
        with self._lock:
            return self._current

    def _fail(self, message: str) -> None:
        with self._lock:
            self._state = AssemblerState.FAILED
            self._error = message
        logger.error(f"Liturgical day refresh failed: {message}")

    def refresh(self, today: Optional[date] = None) -> Optional[LiturgicalDay]:
        """
        Fetch and assemble the liturgical day.

        Args:
            today: Date to assemble (defaults to today in the configured zone)

        Returns:
            The new LiturgicalDay, or None if the refresh failed (the
            previous value stays available through current())
        """
        day = today or self.today()
        with self._lock:
            self._state = AssemblerState.LOADING

        try:
            result = self.feed.fetch_item(day)
            if not result.ok:
                self._fail(str(result.failure))
                return None
            assembled = assemble_day(day, result.value)
        except Exception as e:
            self._fail(f"{type(e).__name__}: {e}")
            return None

        with self._lock:
            self._current = assembled
            self._state = AssemblerState.READY
            self._error = None

        logger.info(
            f"Assembled {day.isoformat()}: {assembled.title} "
            f"({assembled.season.display_name}, {assembled.color.value}, {assembled.rank.value})"
        )
        if assembled.readings.degraded:
            logger.warning(f"Degraded readings for {day.isoformat()}: {', '.join(assembled.readings.degraded)}")
        self._log_saint_alignment(assembled)
        return assembled

    def _log_saint_alignment(self, liturgical_day: LiturgicalDay) -> None:
        if self.saints is None:
            return
        saint = self.saints.saint_for(liturgical_day.date)
        if saint is None:
            return
        if saint.aligns_with(liturgical_day):
            logger.info(f"{saint.name} is celebrated in today's liturgy")
        else:
            logger.info(f"{saint.name} is not named in '{liturgical_day.title}'")

    def get_todays_liturgy(self, today: Optional[date] = None) -> Optional[LiturgicalDay]:
        """
        Cached-or-fresh LiturgicalDay for today.

        Returns the held value when it is already for today; otherwise
        refreshes, falling back to the held (stale) value if that fails.
        """
        day = today or self.today()
        held = self.current()
        if held is not None and held.date == day:
            return held
        return self.refresh(day) or held
