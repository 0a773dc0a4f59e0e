# api/services/art/prompts.py
"""
Image prompt construction.

A passage is classified into a ScriptureContext (by book first, then by
wording). Each context carries a fixed visual style and a fixed block of
content guidance. The liturgical season's art theme is appended when a
liturgical day is known.
"""

from enum import Enum
from typing import Optional

from services.scripture.themes import detect_theme

GOSPEL_BOOKS = ("Matthew", "Mark", "Luke", "John")

STYLE_REQUIREMENTS = [
    "Sacred and reverent",
    "Appropriate for Catholic worship",
    "Beautiful and inspiring",
    "Natural, cinematic style",
    "Contemporary Catholic art approach",
    "Clean composition with symbolic elements",
    "Peaceful and meditative",
    "Soft, harmonious colors",
    "Accessible modern interpretation",
    "High detail and artistic quality",
]

SAINT_ART_STYLE = [
    "Catholic iconographic style",
    "golden halo, divine light",
    "traditional religious art",
    "peaceful expression",
    "sacred atmosphere",
    "renaissance style religious painting",
]


class ScriptureContext(Enum):
    NARRATIVE = "narrative"
    PSALM = "psalm"
    PARABLE = "parable"
    PROPHECY = "prophecy"
    EPISTLE = "epistle"
    GOSPEL = "gospel"
    WISDOM = "wisdom"
    APOCALYPTIC = "apocalyptic"
    LAW = "law"

    @property
    def display_name(self) -> str:
        return _CONTEXT_NAMES[self]

    @property
    def image_style(self) -> str:
        return _CONTEXT_STYLES[self]

    @property
    def content_guidance(self) -> str:
        return _CONTEXT_GUIDANCE[self]

    @classmethod
    def from_value(cls, value: Optional[str]) -> Optional["ScriptureContext"]:
        """Lenient lookup by value or member name; None for unknown tags."""
        if not value:
            return None
        key = value.strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        return None


_CONTEXT_NAMES = {
    ScriptureContext.NARRATIVE: "Biblical Narrative",
    ScriptureContext.PSALM: "Psalm/Prayer",
    ScriptureContext.PARABLE: "Parable",
    ScriptureContext.PROPHECY: "Prophecy",
    ScriptureContext.EPISTLE: "Letter/Teaching",
    ScriptureContext.GOSPEL: "Gospel Account",
    ScriptureContext.WISDOM: "Wisdom Literature",
    ScriptureContext.APOCALYPTIC: "Apocalyptic",
    ScriptureContext.LAW: "Law/Commandment",
}

_CONTEXT_STYLES = {
    ScriptureContext.NARRATIVE: "realistic biblical scene illustration showing the events described",
    ScriptureContext.PSALM: "ethereal worship scene with divine light and spiritual atmosphere",
    ScriptureContext.PARABLE: "symbolic visual metaphor illustrating the spiritual lesson",
    ScriptureContext.PROPHECY: "mystical visionary art with prophetic symbolism",
    ScriptureContext.EPISTLE: "illuminated manuscript style with decorative elements",
    ScriptureContext.GOSPEL: "sacred traditional art depicting Christ and disciples",
    ScriptureContext.WISDOM: "contemplative scene showing wisdom and understanding",
    ScriptureContext.APOCALYPTIC: "dramatic heavenly vision with divine imagery",
    ScriptureContext.LAW: "solemn tablets or scrolls with divine authority",
}

_CONTEXT_GUIDANCE = {
    ScriptureContext.NARRATIVE: (
        "Show the people and setting of the passage in period-accurate dress and "
        "landscape, focused on the central moment of the story."
    ),
    ScriptureContext.PSALM: (
        "Convey prayer and praise rather than a literal event; light, sky and "
        "nature may stand for the presence of God."
    ),
    ScriptureContext.PARABLE: (
        "Depict the everyday images of the parable so that the spiritual lesson "
        "reads clearly through them."
    ),
    ScriptureContext.PROPHECY: (
        "Suggest vision and promise; the prophet may be present, with the "
        "foretold things shown symbolically."
    ),
    ScriptureContext.EPISTLE: (
        "Favor symbolic and textual elements: a letter, a lamp, a gathered "
        "community, decorative borders."
    ),
    ScriptureContext.GOSPEL: (
        "Center on Christ with reverent, recognizable depiction; disciples and "
        "crowds stay secondary to Him."
    ),
    ScriptureContext.WISDOM: (
        "Quiet, reflective composition; an elder, a scholar or a natural scene "
        "that invites contemplation."
    ),
    ScriptureContext.APOCALYPTIC: (
        "Heavenly throne-room imagery, angels and light; awe without horror."
    ),
    ScriptureContext.LAW: (
        "Stone tablets, scrolls or Sinai; convey covenant and divine authority."
    ),
}


def detect_context(text: str, book: str) -> ScriptureContext:
    """Classify a passage, by book first and then by its wording."""
    book = book or ""
    if "psalm" in book.lower():
        return ScriptureContext.PSALM
    if book in GOSPEL_BOOKS:
        return ScriptureContext.GOSPEL
    if "Corinthians" in book or "Timothy" in book or book == "Romans":
        return ScriptureContext.EPISTLE
    if book in ("Proverbs", "Ecclesiastes"):
        return ScriptureContext.WISDOM
    if book == "Revelation":
        return ScriptureContext.APOCALYPTIC

    lowered = (text or "").lower()
    if "parable" in lowered or "like a" in lowered or "kingdom of heaven is like" in lowered:
        return ScriptureContext.PARABLE
    if "thus says the lord" in lowered or "oracle" in lowered:
        return ScriptureContext.PROPHECY
    if "thou shalt" in lowered or "commandment" in lowered:
        return ScriptureContext.LAW
    return ScriptureContext.NARRATIVE


def liturgical_guidance(liturgical_day) -> str:
    """Seasonal block for the prompt; empty when no liturgical day is known."""
    if liturgical_day is None:
        return ""
    season = liturgical_day.season
    return (
        f"Liturgical context: {liturgical_day.title}\n"
        f"Season: {season.display_name} - {season.theme_description}\n"
        f"Liturgical color: {liturgical_day.color.value}\n"
        f"Seasonal art enhancement: {season.art_theme}"
    )


def build_prompt(text: str, citation: str, context: ScriptureContext,
                 theme: Optional[str] = None, liturgical_day=None) -> str:
    """
    Compose the image generation prompt.

    Args:
        text: Literal scripture text
        citation: Human-readable reference ("Matthew 5:3")
        context: Passage classification
        theme: Devotional theme (detected from text when omitted)
        liturgical_day: Current LiturgicalDay, if any

    Returns:
        Prompt text
    """
    lines = [
        f'Create a natural style cinematic biblical scene depicting: "{text}"',
        "",
        f"Biblical context: {citation}",
        f"Theme: {theme or detect_theme(text)}",
        f"Scripture type: {context.display_name}",
        f"Visual style: {context.image_style}",
        f"Content guidance: {context.content_guidance}",
    ]

    seasonal = liturgical_guidance(liturgical_day)
    if seasonal:
        lines += ["", seasonal]

    lines += ["", "Style requirements:"]
    lines += [f"- {req}" for req in STYLE_REQUIREMENTS]
    return "\n".join(lines)


def build_saint_prompt(saint) -> str:
    """Iconographic prompt for a saint."""
    return ",\n".join([saint.art_prompt] + SAINT_ART_STYLE)
