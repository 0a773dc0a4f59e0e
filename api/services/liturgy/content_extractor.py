# api/services/liturgy/content_extractor.py
"""
Mass readings extraction from liturgical feed descriptions.

Each reading type has an ordered list of named pattern policies. The first
policy that matches supplies the fragment; later policies only cover label
spelling variants. Fragments go through clean_html_content(), which never
returns an empty string.

The Gospel is always populated: when no Gospel policy yields usable text,
the whole cleaned description (truncated) stands in for it.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from services.scripture.models import Reading, Verse
from services.scripture.reference_parser import extract_first_reference

logger = logging.getLogger(__name__)

READING_FALLBACK_TEXT = "Today's reading from the liturgy"
GOSPEL_FALLBACK_TEXT = "Today's Gospel reading from the liturgy"
GOSPEL_FALLBACK_LENGTH = 200
MIN_TEXT_LENGTH = 10

_FLAGS = re.IGNORECASE | re.DOTALL
_UNTIL_NEXT_LABEL = r"(.*?)(?=<strong>|$)"
_BR = r"\s*<br\s*/?>"
# "Gospel" as a label of its own, not the tail of "Verse Before the Gospel"
_GOSPEL = r"(?<![A-Za-z] )Gospel"

_ENTITIES = [
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&amp;", "&"),
    ("&nbsp;", " "),
    ("&apos;", "'"),
]

# Longest labels first so "Gospel Acclamation" goes before "Gospel".
# Case-sensitive: the feed writes labels in Title Case, prose uses lower case.
_LABEL_WORDS = re.compile(
    r"\b(?:Gospel Acclamation|Responsorial Psalm|Readings for the|"
    r"Memorial of the Passion of|First Reading|Second Reading|"
    r"Reading 1|Reading 2|Alleluia|Gospel|Psalm)\b",
)

_MARKUP_INDICATORS = ("<", "href=", "class=")
_SENTENCE_SPLIT = re.compile(r"[.,;:!?\"'()\[\]{}–—-]")


@dataclass(frozen=True)
class PatternPolicy:
    """A named extraction pattern; group 1 captures the reading body."""
    name: str
    pattern: re.Pattern

    def match(self, description: str) -> Optional[str]:
        found = self.pattern.search(description)
        return found.group(1) if found else None


def _policy(name: str, regex: str) -> PatternPolicy:
    return PatternPolicy(name, re.compile(regex, _FLAGS))


@dataclass(frozen=True)
class ReadingKind:
    """How to find and label one reading type."""
    key: str
    title: str
    book_name: str
    policies: tuple


FIRST_READING = ReadingKind(
    key="first_reading",
    title="First Reading",
    book_name="Scripture",
    policies=(
        _policy("reading-1", rf"Reading 1</strong>{_BR}{_UNTIL_NEXT_LABEL}"),
        _policy("first-reading", rf"First Reading</strong>{_BR}{_UNTIL_NEXT_LABEL}"),
        _policy("reading-i", rf"<strong>Reading I</strong>{_UNTIL_NEXT_LABEL}"),
    ),
)

SECOND_READING = ReadingKind(
    key="second_reading",
    title="Second Reading",
    book_name="Scripture",
    policies=(
        _policy("reading-2", rf"Reading 2</strong>{_BR}{_UNTIL_NEXT_LABEL}"),
        _policy("second-reading", rf"Second Reading</strong>{_BR}{_UNTIL_NEXT_LABEL}"),
        _policy("reading-ii", rf"<strong>Reading II</strong>{_UNTIL_NEXT_LABEL}"),
    ),
)

RESPONSORIAL_PSALM = ReadingKind(
    key="responsorial_psalm",
    title="Responsorial Psalm",
    book_name="Psalms",
    policies=(
        _policy("responsorial-psalm", rf"Responsorial Psalm</strong>{_BR}{_UNTIL_NEXT_LABEL}"),
        _policy("psalm-br", rf"Psalm</strong>{_BR}{_UNTIL_NEXT_LABEL}"),
        _policy("psalm", rf"<strong>Psalm</strong>{_UNTIL_NEXT_LABEL}"),
    ),
)

ALLELUIA = ReadingKind(
    key="alleluia",
    title="Gospel Acclamation",
    book_name="Liturgy",
    policies=(
        _policy("alleluia-br", rf"Alleluia</strong>{_BR}{_UNTIL_NEXT_LABEL}"),
        _policy("gospel-acclamation", rf"Gospel Acclamation</strong>{_BR}{_UNTIL_NEXT_LABEL}"),
        _policy("verse-before-gospel", rf"Verse Before the Gospel</strong>{_BR}{_UNTIL_NEXT_LABEL}"),
        _policy("alleluia", rf"<strong>Alleluia</strong>{_UNTIL_NEXT_LABEL}"),
    ),
)

GOSPEL = ReadingKind(
    key="gospel",
    title="Gospel",
    book_name="Gospel",
    policies=(
        _policy("gospel-br", rf"{_GOSPEL}</strong>{_BR}{_UNTIL_NEXT_LABEL}"),
        _policy("gospel-strong", rf"{_GOSPEL}</strong>{_UNTIL_NEXT_LABEL}"),
        _policy("gospel-bare", rf"{_GOSPEL}(?! Acclamation){_UNTIL_NEXT_LABEL}"),
        _policy("strong-gospel", rf"<strong>Gospel</strong>{_UNTIL_NEXT_LABEL}"),
        _policy("after-gospel-br", rf"gospel.*?<br\s*/?>{_UNTIL_NEXT_LABEL}"),
        _policy("after-gospel-tag", r"gospel.*?>(.*?)(?=</?strong>|$)"),
    ),
)


@dataclass(frozen=True)
class MassReadings:
    """
    The readings of one Mass. gospel is always present; the others are
    None when the feed did not carry them.
    """
    lectionary: str
    gospel: Reading
    first_reading: Optional[Reading] = None
    responsorial_psalm: Optional[Reading] = None
    second_reading: Optional[Reading] = None
    alleluia: Optional[Reading] = None
    degraded: tuple = field(default_factory=tuple)

    @property
    def all_readings(self) -> list[Reading]:
        """Readings in liturgical order: First, Psalm, Second, Alleluia, Gospel."""
        ordered = [
            self.first_reading,
            self.responsorial_psalm,
            self.second_reading,
            self.alleluia,
            self.gospel,
        ]
        return [r for r in ordered if r is not None]

    def to_dict(self) -> dict:
        return {
            "lectionary": self.lectionary,
            "first_reading": self.first_reading.to_dict() if self.first_reading else None,
            "responsorial_psalm": self.responsorial_psalm.to_dict() if self.responsorial_psalm else None,
            "second_reading": self.second_reading.to_dict() if self.second_reading else None,
            "alleluia": self.alleluia.to_dict() if self.alleluia else None,
            "gospel": self.gospel.to_dict(),
            "degraded": list(self.degraded),
        }


def _is_too_short(text: str) -> bool:
    # A short fragment of two or more words is still real content
    return not text or (len(text) < MIN_TEXT_LENGTH and len(text.split()) < 2)


def _salvage_marked_up(text: str) -> str:
    """Last resort for text that still carries markup after tag stripping."""
    for segment in _SENTENCE_SPLIT.split(text):
        candidate = segment.strip()
        if (
            len(candidate) >= 20
            and not any(m in candidate for m in ("<", "href", "class"))
            and re.search(r"[A-Za-z]", candidate)
        ):
            return candidate
    return re.sub(r"[^a-zA-Z0-9\s.,:;!?'-]", "", text)


def clean_html_content(html: str, fallback: str = READING_FALLBACK_TEXT) -> str:
    """
    Reduce an HTML fragment to plain reading text.

    1. Decode the common named entities.
    2. Strip tags (three passes for shallow nesting) and residual entities.
    3. If markup survives, keep the first clean sentence segment of at
       least 20 characters, else whitelist characters.
    4. Remove reading labels that leaked into the body.
    5. Collapse whitespace. Empty or too-short text becomes fallback.
    """
    text = html or ""

    for entity, char in _ENTITIES:
        text = text.replace(entity, char)

    for _ in range(3):
        text = re.sub(r"<[^>]*>", " ", text)

    text = re.sub(r"&[a-zA-Z0-9#]+;", "", text)

    if any(marker in text for marker in _MARKUP_INDICATORS):
        logger.warning("Markup survived tag stripping; salvaging plain sentences")
        text = _salvage_marked_up(text)

    text = _LABEL_WORDS.sub("", text)
    text = re.sub(r"\s+", " ", text).strip()

    if _is_too_short(text):
        return fallback
    return text


def extract_lectionary_info(description: str) -> str:
    """"Lectionary: 123" when the feed states it, else a coarse label."""
    match = re.search(r"Lectionary:\s*(\d+)", description or "")
    if match:
        return match.group(0)

    lowered = (description or "").lower()
    if "sunday" in lowered:
        return "Sunday Lectionary"
    if "weekday" in lowered:
        return "Weekday Lectionary"
    return "Daily Lectionary"


def _build_reading(kind: ReadingKind, text: str, subtitle: str) -> Reading:
    return Reading(
        title=kind.title,
        subtitle=subtitle,
        verses=(Verse(text=text, reference=kind.title, book_name=kind.book_name),),
        theme="Daily Mass Reading",
        liturgical_context=kind.title,
        reference=extract_first_reference(text),
    )


def _extract(kind: ReadingKind, description: str) -> tuple[Optional[str], Optional[str]]:
    """Return (policy name, cleaned text) for the first matching policy."""
    for policy in kind.policies:
        fragment = policy.match(description)
        if fragment is None:
            continue
        return policy.name, clean_html_content(fragment)
    return None, None


def extract_mass_readings(description: str) -> MassReadings:
    """
    Extract the readings from one feed item's HTML description.

    Never raises. Non-Gospel readings without a matching policy are None.

    Args:
        description: Raw HTML-bearing description

    Returns:
        MassReadings with a non-empty Gospel
    """
    description = description or ""
    found = {}
    degraded = []

    for kind in (FIRST_READING, RESPONSORIAL_PSALM, SECOND_READING, ALLELUIA):
        policy, text = _extract(kind, description)
        if policy is None:
            continue
        if text == READING_FALLBACK_TEXT:
            degraded.append(kind.key)
            logger.warning(f"{kind.title} matched '{policy}' but cleaned to fallback text")
        found[kind.key] = _build_reading(kind, text, "From today's Mass")

    gospel_text = None
    for policy in GOSPEL.policies:
        fragment = policy.match(description)
        if fragment is None:
            continue
        text = clean_html_content(fragment)
        if text != READING_FALLBACK_TEXT:
            gospel_text = text
            logger.debug(f"Gospel extracted with policy '{policy.name}'")
            break

    if gospel_text is None:
        degraded.append(GOSPEL.key)
        whole = clean_html_content(description, fallback=GOSPEL_FALLBACK_TEXT)
        gospel_text = whole[:GOSPEL_FALLBACK_LENGTH].strip() or GOSPEL_FALLBACK_TEXT
        logger.warning("No Gospel policy matched; using truncated description")

    return MassReadings(
        lectionary=extract_lectionary_info(description),
        gospel=_build_reading(GOSPEL, gospel_text, "From today's liturgy"),
        degraded=tuple(degraded),
        **found,
    )
