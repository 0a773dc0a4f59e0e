# api/services/scripture/daily_readings.py
"""
Daily devotional reading.

A short list of well-loved passages rotates by day of the year. The day's
passage is fetched through the scripture service; when nothing can be
fetched, a built-in reading for the same day stands in, so there is always
a reading to show.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date

from .models import Reading, Verse
from .reference_parser import ScriptureReference
from .scripture_service import ScriptureService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyPassage:
    """One slot of the daily rotation."""
    title: str
    subtitle: str
    references: tuple
    theme: str


DAILY_ROTATION = (
    DailyPassage("The Beatitudes", "Jesus teaches on the mountain",
                 ("MAT.5.3", "MAT.5.4", "MAT.5.5", "MAT.5.6"),
                 "Blessings and the Kingdom of Heaven"),
    DailyPassage("The Lord's Prayer", "Jesus teaches us to pray",
                 ("MAT.6.9", "MAT.6.10", "MAT.6.11"),
                 "Perfect prayer from Christ"),
    DailyPassage("Psalm of Trust", "The Lord is my shepherd",
                 ("PSA.23.1", "PSA.23.2", "PSA.23.3", "PSA.23.4"),
                 "God's protection and providence"),
    DailyPassage("Love Chapter", "Greatest gift of love",
                 ("1CO.13.4", "1CO.13.5", "1CO.13.7", "1CO.13.8"),
                 "Divine love and charity"),
    DailyPassage("Good Shepherd", "Jesus protects His flock",
                 ("JHN.10.11", "JHN.10.14"),
                 "Christ's protective love"),
    DailyPassage("Living Water", "Jesus and the Samaritan woman",
                 ("JHN.4.13", "JHN.4.14"),
                 "Spiritual refreshment"),
    DailyPassage("Bread of Life", "Jesus feeds the multitude",
                 ("JHN.6.35",),
                 "Christ as spiritual nourishment"),
)


def _static(title, subtitle, ref, text, theme, context) -> Reading:
    return Reading(
        title=title,
        subtitle=subtitle,
        verses=(Verse(text=text, reference=ref, book_name=ref.book,
                      chapter=ref.chapter, verse_number=ref.start_verse),),
        theme=theme,
        liturgical_context=context,
        reference=ref,
    )


# World English Bible text
STATIC_READINGS = (
    _static("The Beatitudes", "Jesus teaches on the mountain",
            ScriptureReference("Matthew", 5, 3),
            "Blessed are the poor in spirit, for theirs is the Kingdom of Heaven.",
            "Blessings and the Kingdom of Heaven", "Sermon on the Mount"),
    _static("The Lord is My Shepherd", "Psalm of David",
            ScriptureReference("Psalms", 23, 1, 2),
            "Yahweh is my shepherd: I shall lack nothing. He makes me lie down in green "
            "pastures. He leads me beside still waters.",
            "God's protection and providence", "Beloved prayer of comfort"),
    _static("The Lord's Prayer", "Jesus teaches us to pray",
            ScriptureReference("Matthew", 6, 9, 10),
            "Our Father in heaven, may your name be kept holy. Let your Kingdom come. "
            "Let your will be done on earth as it is in heaven.",
            "Perfect prayer from Christ", "Central prayer of the Mass"),
    _static("The Gift of Love", "St. Paul's hymn to love",
            ScriptureReference("1 Corinthians", 13, 4),
            "Love is patient and is kind. Love doesn't envy. Love doesn't brag, "
            "is not proud.",
            "Divine love and charity", "Popular wedding reading"),
    _static("The Creation", "God creates the world",
            ScriptureReference("Genesis", 1, 1),
            "In the beginning, God created the heavens and the earth.",
            "God as Creator of all", "Easter Vigil reading"),
    _static("The Nativity", "Angels announce Christ's birth",
            ScriptureReference("Luke", 2, 11),
            "For there is born to you today, in David's city, a Savior, who is Christ the Lord.",
            "The Incarnation and God's gift to humanity", "Christmas Gospel"),
    _static("Jesus Calms the Storm", "Christ shows power over nature",
            ScriptureReference("Mark", 4, 39),
            "He awoke, and rebuked the wind, and said to the sea, \"Peace! Be still!\" "
            "The wind ceased, and there was a great calm.",
            "Faith in Jesus during life's storms", "Gospel of trust in Divine Providence"),
    _static("The Good Shepherd", "Jesus protects His flock",
            ScriptureReference("John", 10, 11),
            "I am the good shepherd. The good shepherd lays down his life for the sheep.",
            "Christ's protective love for His people", "Good Shepherd Sunday"),
    _static("The Transfiguration", "Jesus reveals His glory",
            ScriptureReference("Matthew", 17, 2),
            "He was changed before them. His face shone like the sun, and his garments "
            "became as white as the light.",
            "Divine glory revealed in Christ", "Feast of the Transfiguration"),
    _static("The Wedding at Cana", "Jesus' first miracle",
            ScriptureReference("John", 2, 7),
            "Jesus said to them, \"Fill the water pots with water.\" So they filled them "
            "up to the brim.",
            "Christ's blessing on marriage and family", "Wedding liturgy"),
)


def _slot(day: date, count: int) -> int:
    return (day.timetuple().tm_yday - 1) % count


class DailyReadingService:
    """
    The devotional reading of the day.

    Usage:
        daily = DailyReadingService(scripture_service)
        reading = daily.reading_for(date.today())
    """

    def __init__(self, scripture: ScriptureService,
                 rotation: tuple = DAILY_ROTATION,
                 fallbacks: tuple = STATIC_READINGS):
        self.scripture = scripture
        self.rotation = rotation
        self.fallbacks = fallbacks

    def passage_for(self, day: date) -> DailyPassage:
        return self.rotation[_slot(day, len(self.rotation))]

    def fallback_for(self, day: date) -> Reading:
        return self.fallbacks[_slot(day, len(self.fallbacks))]

    def reading_for(self, day: date) -> Reading:
        """
        Fetch the day's rotating passage.

        Args:
            day: Calendar day; its day of the year picks the passage

        Returns:
            The fetched Reading, or the built-in reading for the day when
            nothing could be fetched
        """
        passage = self.passage_for(day)
        reading = self.scripture.fetch_reading(
            list(passage.references), passage.title, subtitle=passage.subtitle,
        )
        if reading is None:
            fallback = self.fallback_for(day)
            logger.info(f"Daily reading '{passage.title}' unavailable; using '{fallback.title}'")
            return fallback
        return replace(reading, theme=passage.theme)

