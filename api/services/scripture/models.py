# api/services/scripture/models.py
"""
Scripture content values: Verse and Reading.

Both are immutable once constructed. A Reading groups one or more verses
under a title; a single-verse Reading may hold a pre-combined block of text.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from .reference_parser import ScriptureReference


@dataclass(frozen=True)
class Verse:
    """
    One verse (or one block of liturgical text) with its citation.

    Attributes:
        text: Scripture content, HTML-free
        reference: ScriptureReference, or a loose label such as "Gospel"
        book_name: Display book name ("Matthew", or "Gospel" for feed text)
        chapter: Chapter number
        verse_number: Verse number
    """
    text: str
    reference: Union[ScriptureReference, str]
    book_name: str
    chapter: int = 1
    verse_number: int = 1

    @property
    def reference_text(self) -> str:
        return str(self.reference)

    @property
    def content_identity(self) -> str:
        """Stable identity used for artwork cache keys."""
        return f"{self.reference_text}|{self.text}"

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "reference": self.reference_text,
            "book": self.book_name,
            "chapter": self.chapter,
            "verse": self.verse_number,
        }


@dataclass(frozen=True)
class Reading:
    """
    A titled passage used in a Mass or a devotional.

    Attributes:
        title: "Gospel", "First Reading", "The Beatitudes", ...
        subtitle: Short description
        verses: Ordered verses (ascending verse number when fetched)
        theme: Devotional theme
        liturgical_context: Where the reading sits in the liturgy, if anywhere
        reference: The passage this reading resolves, when known
    """
    title: str
    subtitle: str
    verses: tuple[Verse, ...] = field(default_factory=tuple)
    theme: str = ""
    liturgical_context: Optional[str] = None
    reference: Optional[ScriptureReference] = None

    def __post_init__(self):
        if not isinstance(self.verses, tuple):
            object.__setattr__(self, "verses", tuple(self.verses))

    @property
    def text(self) -> str:
        """All verse text joined with single spaces."""
        return " ".join(v.text for v in self.verses if v.text)

    @property
    def is_empty(self) -> bool:
        return not self.verses

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "theme": self.theme,
            "liturgical_context": self.liturgical_context,
            "reference": self.reference.display_text if self.reference else None,
            "text": self.text,
            "verses": [v.to_dict() for v in self.verses],
        }
