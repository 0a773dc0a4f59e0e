# api/services/liturgy/saints.py
"""
Saints directory.

A small static directory of saints keyed by recurring feast day ("MM-dd").
When several saints share a day, the one whose celebration ranks highest
is the saint of the day.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .calendar import LiturgicalRank, LiturgicalSeason, highest_precedence

logger = logging.getLogger(__name__)

SHORT_BIOGRAPHY_LENGTH = 200


@dataclass(frozen=True)
class Saint:
    """
    A saint with a recurring annual feast.

    Attributes:
        id: Stable slug ("augustine-hippo")
        name: Display name ("Saint Augustine of Hippo")
        feast_day: "MM-dd"
        title: "Bishop and Doctor of the Church", "Virgin and Mystic", ...
        biography: Full biography
        patron_of: Patronages, most notable first
        iconography_symbols: Symbols used for generated artwork
        rank: Rank of the feast
    """
    id: str
    name: str
    feast_day: str
    title: str
    biography: str
    rank: LiturgicalRank = LiturgicalRank.MEMORIAL
    patron_of: tuple = field(default_factory=tuple)
    lived_period: str = ""
    birth_place: Optional[str] = None
    key_virtues: tuple = field(default_factory=tuple)
    famous_quote: Optional[str] = None
    miracles_attributed: tuple = field(default_factory=tuple)
    canonization_date: Optional[str] = None
    iconography_symbols: tuple = field(default_factory=tuple)
    associated_prayers: tuple = field(default_factory=tuple)

    @property
    def full_title(self) -> str:
        return f"{self.title} {self.name}" if self.title else self.name

    @property
    def short_biography(self) -> str:
        if len(self.biography) > SHORT_BIOGRAPHY_LENGTH:
            return self.biography[:SHORT_BIOGRAPHY_LENGTH] + "..."
        return self.biography

    @property
    def art_prompt(self) -> str:
        symbols = ", ".join(self.iconography_symbols)
        return (
            f"Catholic saint iconography of {self.name}, {self.title}, "
            f"with traditional symbols: {symbols}, golden halo, religious robes, "
            f"divine light, traditional Catholic art style"
        )

    @property
    def month(self) -> int:
        return int(self.feast_day[:2])

    @property
    def day_of_month(self) -> int:
        return int(self.feast_day[-2:])

    def related_references(self) -> list[str]:
        """Single-verse API references related to the saint's vocation."""
        if "Martyr" in self.title:
            return ["REV.7.9", "ROM.8.35", "MAT.10.28"]
        if "Bishop" in self.title:
            return ["1TI.3.1", "TIT.1.7", "JHN.10.11"]
        if "Virgin" in self.title or "Mystic" in self.title:
            return ["MAT.25.1", "1CO.7.25", "REV.14.4"]
        if "Mothers" in self.patron_of:
            return ["PRO.31.10", "LUK.1.46", "1TI.2.15"]
        return ["HEB.12.1", "1CO.4.16", "GAL.2.20"]

    def aligns_with(self, day) -> bool:
        """True when a liturgical day's title or commemorations name this saint."""
        if self.name in day.title:
            return True
        return any(self.name in c for c in day.commemorations)

    def notification_content(self) -> tuple[str, str]:
        """(title, body) for a daily saint notification."""
        patron = self.patron_of[0] if self.patron_of else "the faithful"
        title = f"Today's Saint: {self.name}"
        body = f"{self.title} • Patron of {patron} • {self.famous_quote or self.short_biography}"
        return title, body

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "feast_day": self.feast_day,
            "title": self.title,
            "full_title": self.full_title,
            "rank": self.rank.value,
            "biography": self.biography,
            "short_biography": self.short_biography,
            "patron_of": list(self.patron_of),
            "lived_period": self.lived_period,
            "birth_place": self.birth_place,
            "key_virtues": list(self.key_virtues),
            "famous_quote": self.famous_quote,
            "miracles_attributed": list(self.miracles_attributed),
            "canonization_date": self.canonization_date,
            "iconography_symbols": list(self.iconography_symbols),
            "associated_prayers": list(self.associated_prayers),
            "related_references": self.related_references(),
        }


SAINTS = [
    Saint(
        id="john-baptist",
        name="Saint John the Baptist",
        feast_day="08-29",
        title="Forerunner of Christ",
        biography=(
            "John the Baptist was the forerunner of Jesus Christ, preparing the way for the "
            "Messiah through his preaching of repentance and baptism. Born to Elizabeth and "
            "Zechariah, he lived as an ascetic in the desert, wearing camel's hair and eating "
            "locusts and wild honey. He baptized Jesus in the Jordan River and boldly proclaimed "
            "Him as the 'Lamb of God who takes away the sins of the world.' John was imprisoned "
            "and eventually beheaded by King Herod Antipas for condemning the king's unlawful "
            "marriage. He is venerated as the greatest of the prophets and the last of the Old "
            "Testament figures."
        ),
        rank=LiturgicalRank.MEMORIAL,
        patron_of=("Baptism", "Converts", "Epilepsy", "Hailstorms", "Lambs"),
        lived_period="c. 6 BC - c. 30 AD",
        birth_place="Judea",
        key_virtues=("Courage", "Humility", "Truth-telling", "Asceticism"),
        famous_quote="He must increase, but I must decrease.",
        miracles_attributed=("Prophetic visions", "Recognition of Christ in the womb"),
        canonization_date="Pre-Congregation (ancient)",
        iconography_symbols=(
            "Lamb of God", "Baptismal shell", "Camel hair garment",
            "Scroll with 'Ecce Agnus Dei'", "Severed head on platter",
        ),
        associated_prayers=("Prayer to St. John the Baptist", "Baptismal prayers"),
    ),
    Saint(
        id="augustine-hippo",
        name="Saint Augustine of Hippo",
        feast_day="08-28",
        title="Bishop and Doctor of the Church",
        biography=(
            "Augustine of Hippo was one of the most influential theologians in the history of "
            "Christianity. Born in North Africa to Saint Monica, he lived a worldly life in his "
            "youth before experiencing a profound conversion to Christianity at age 31. His "
            "'Confessions' remains one of the most important spiritual autobiographies ever "
            "written. As Bishop of Hippo, he defended orthodox Catholic teaching against various "
            "heresies and developed much of the theological foundation for Western Christianity. "
            "His works on grace, original sin, and the Trinity shaped Catholic doctrine for "
            "centuries."
        ),
        rank=LiturgicalRank.MEMORIAL,
        patron_of=("Theologians", "Printers", "Brewers", "Sore eyes"),
        lived_period="354-430 AD",
        birth_place="Thagaste, North Africa (modern-day Algeria)",
        key_virtues=("Wisdom", "Conversion", "Theological insight", "Pastoral care"),
        famous_quote=(
            "You have made us for yourself, O Lord, and our hearts are restless "
            "until they rest in you."
        ),
        miracles_attributed=("Healing of the sick through prayer", "Prophetic visions"),
        canonization_date="Pre-Congregation (ancient)",
        iconography_symbols=(
            "Bishop's mitre and crosier", "Book representing his writings", "Flaming heart",
            "Child with shell (Trinity vision)", "Black Augustinian habit",
        ),
        associated_prayers=("Prayer to St. Augustine", "Prayer for Theologians"),
    ),
    Saint(
        id="monica",
        name="Saint Monica",
        feast_day="08-27",
        title="Mother and Widow",
        biography=(
            "Monica was the mother of Saint Augustine and is venerated as the patron saint of "
            "mothers and wives. Born in North Africa, she was married to a pagan husband, "
            "Patricius, whom she eventually converted to Christianity through her prayers and "
            "example. Her son Augustine lived a dissolute life for many years, causing Monica "
            "great sorrow. She prayed unceasingly for his conversion for over 15 years, following "
            "him from Africa to Italy. Her perseverance was rewarded when Augustine converted to "
            "Christianity and was baptized by Saint Ambrose in Milan. She died shortly after, "
            "having seen her prayers answered."
        ),
        rank=LiturgicalRank.MEMORIAL,
        patron_of=("Mothers", "Wives", "Abuse victims", "Difficult marriages", "Disappointing children"),
        lived_period="c. 331-387 AD",
        birth_place="Thagaste, North Africa (modern-day Algeria)",
        key_virtues=("Perseverance in prayer", "Patience", "Maternal love", "Faith"),
        famous_quote="Nothing is far from God.",
        miracles_attributed=("Conversion of her husband", "Conversion of her son Augustine"),
        canonization_date="Pre-Congregation (ancient)",
        iconography_symbols=(
            "Tears of supplication", "Black widow's veil",
            "Book representing her son's Confessions", "Praying hands", "Heart pierced with sorrow",
        ),
        associated_prayers=("Prayer to St. Monica for Children", "Prayer for Mothers"),
    ),
    Saint(
        id="rose-lima",
        name="Saint Rose of Lima",
        feast_day="08-30",
        title="Virgin and Mystic",
        biography=(
            "Rose of Lima was the first canonized saint of the Americas. Born in Lima, Peru, she "
            "was known for her extraordinary beauty, which she deliberately marred to avoid "
            "marriage and worldly attention. She lived as a Dominican tertiary in her family's "
            "garden, practicing severe penances and experiencing mystical visions. She dedicated "
            "her life to prayer, penance, and caring for the poor and sick. Her deep devotion to "
            "Christ and her mystical experiences made her a model of sanctity for the New World. "
            "She died at age 31 and was canonized by Pope Clement X in 1671."
        ),
        rank=LiturgicalRank.MEMORIAL,
        patron_of=("Americas", "Peru", "Philippines", "Embroiderers", "Florists", "Gardeners"),
        lived_period="1586-1617",
        birth_place="Lima, Peru",
        key_virtues=("Penance", "Mystical prayer", "Charity", "Humility"),
        famous_quote="Apart from the cross there is no other ladder by which we may get to heaven.",
        miracles_attributed=("Mystical visions", "Healing of the sick", "Levitation during prayer"),
        canonization_date="April 12, 1671",
        iconography_symbols=(
            "Crown of roses", "Cross", "Dominican habit", "Crown of thorns", "Baby Jesus", "Anchor",
        ),
        associated_prayers=("Prayer to St. Rose of Lima", "Prayer for the Americas"),
    ),
]


def _contains_any(text: str, needles: tuple) -> bool:
    return any(n in text for n in needles)


# Season -> predicate over a saint
_SEASON_FILTERS = {
    LiturgicalSeason.ADVENT: lambda s: _contains_any(s.name, ("Mary", "Joseph", "John")),
    LiturgicalSeason.CHRISTMAS_TIME: lambda s: _contains_any(s.name, ("Stephen", "Innocent", "Family")),
    LiturgicalSeason.LENT: lambda s: bool({"Conversion", "Penance", "Asceticism"} & set(s.key_virtues)),
    LiturgicalSeason.EASTER_TIME: lambda s: _contains_any(s.title, ("Martyr", "Apostle")),
    LiturgicalSeason.ORDINARY_TIME: lambda s: True,
}


class SaintsDirectory:
    """
    Lookup over a fixed list of saints.

    Usage:
        directory = SaintsDirectory()
        saint = directory.saint_for(date(2025, 8, 28))
    """

    def __init__(self, saints: Optional[list[Saint]] = None):
        self._saints = list(SAINTS if saints is None else saints)
        logger.info(f"Loaded {len(self._saints)} saints")

    def __len__(self) -> int:
        return len(self._saints)

    @property
    def all_saints(self) -> list[Saint]:
        return list(self._saints)

    def get(self, saint_id: str) -> Optional[Saint]:
        for saint in self._saints:
            if saint.id == saint_id:
                return saint
        return None

    def lookup_by_feast_day(self, feast_day: str) -> Optional[Saint]:
        """
        Saint of the day for an "MM-dd" key.

        Among saints sharing the day, the highest-ranking wins; ties keep
        directory order.
        """
        candidates = [s for s in self._saints if s.feast_day == feast_day]
        return highest_precedence(candidates, lambda s: s.rank)

    def saint_for(self, day: date) -> Optional[Saint]:
        return self.lookup_by_feast_day(day.strftime("%m-%d"))

    def search(self, query: str) -> list[Saint]:
        """Case-insensitive match on name, title, patronages or virtues."""
        q = (query or "").strip().lower()
        if not q:
            return []
        return [
            s for s in self._saints
            if q in s.name.lower()
            or q in s.title.lower()
            or q in " ".join(s.patron_of).lower()
            or q in " ".join(s.key_virtues).lower()
        ]

    def saints_for_month(self, month: int) -> list[Saint]:
        """Saints whose feast falls in month, by day of month."""
        return sorted(
            (s for s in self._saints if s.month == month),
            key=lambda s: s.day_of_month,
        )

    def saints_for_season(self, season: LiturgicalSeason) -> list[Saint]:
        """Saints traditionally associated with a liturgical season."""
        return [s for s in self._saints if _SEASON_FILTERS[season](s)]
