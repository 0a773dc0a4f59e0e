# api/services/scripture/reference_parser.py
"""
Scripture reference model and parser.

Handles the two formats the devotional core works with:
- Display format: "John 3:16", "Matthew 25:14-30", "Genesis 1,3", "Ps 23"
- API format (3-letter book codes): "JHN.3.16", "MAT.25.14-30"

Also extracts references from free liturgical text ("Reading 1 Dt 4:1-2, 6-8").
"""

import re
from dataclasses import dataclass
from typing import Optional

from utils.errors import InvalidReference


# Canonical book name to 3-letter API code (USFM identifiers).
# Covers the 66 books of the shared canon plus the deuterocanonical books
# read at Mass.
BOOK_TO_CODE = {
    # Pentateuch
    "Genesis": "GEN",
    "Exodus": "EXO",
    "Leviticus": "LEV",
    "Numbers": "NUM",
    "Deuteronomy": "DEU",

    # Historical Books
    "Joshua": "JOS",
    "Judges": "JDG",
    "Ruth": "RUT",
    "1 Samuel": "1SA",
    "2 Samuel": "2SA",
    "1 Kings": "1KI",
    "2 Kings": "2KI",
    "1 Chronicles": "1CH",
    "2 Chronicles": "2CH",
    "Ezra": "EZR",
    "Nehemiah": "NEH",
    "Tobit": "TOB",
    "Judith": "JDT",
    "Esther": "EST",
    "1 Maccabees": "1MA",
    "2 Maccabees": "2MA",

    # Wisdom
    "Job": "JOB",
    "Psalms": "PSA",
    "Proverbs": "PRO",
    "Ecclesiastes": "ECC",
    "Song of Songs": "SNG",
    "Wisdom": "WIS",
    "Sirach": "SIR",

    # Prophets
    "Isaiah": "ISA",
    "Jeremiah": "JER",
    "Lamentations": "LAM",
    "Baruch": "BAR",
    "Ezekiel": "EZK",
    "Daniel": "DAN",
    "Hosea": "HOS",
    "Joel": "JOL",
    "Amos": "AMO",
    "Obadiah": "OBA",
    "Jonah": "JON",
    "Micah": "MIC",
    "Nahum": "NAM",
    "Habakkuk": "HAB",
    "Zephaniah": "ZEP",
    "Haggai": "HAG",
    "Zechariah": "ZEC",
    "Malachi": "MAL",

    # Gospels and Acts
    "Matthew": "MAT",
    "Mark": "MRK",
    "Luke": "LUK",
    "John": "JHN",
    "Acts": "ACT",

    # Epistles
    "Romans": "ROM",
    "1 Corinthians": "1CO",
    "2 Corinthians": "2CO",
    "Galatians": "GAL",
    "Ephesians": "EPH",
    "Philippians": "PHP",
    "Colossians": "COL",
    "1 Thessalonians": "1TH",
    "2 Thessalonians": "2TH",
    "1 Timothy": "1TI",
    "2 Timothy": "2TI",
    "Titus": "TIT",
    "Philemon": "PHM",
    "Hebrews": "HEB",
    "James": "JAS",
    "1 Peter": "1PE",
    "2 Peter": "2PE",
    "1 John": "1JN",
    "2 John": "2JN",
    "3 John": "3JN",
    "Jude": "JUD",

    # Revelation
    "Revelation": "REV",
}

CODE_TO_BOOK = {code: book for book, code in BOOK_TO_CODE.items()}

# Alternate spellings and lectionary abbreviations. Matched case-sensitively,
# like the canonical names.
BOOK_ALIASES = {
    "Gen": "Genesis", "Gn": "Genesis",
    "Ex": "Exodus", "Exod": "Exodus",
    "Lev": "Leviticus", "Lv": "Leviticus",
    "Num": "Numbers", "Nm": "Numbers",
    "Deut": "Deuteronomy", "Dt": "Deuteronomy",
    "Josh": "Joshua", "Jos": "Joshua",
    "Judg": "Judges", "Jgs": "Judges",
    "Ru": "Ruth",
    "1 Sam": "1 Samuel", "1 Sm": "1 Samuel",
    "2 Sam": "2 Samuel", "2 Sm": "2 Samuel",
    "1 Kgs": "1 Kings",
    "2 Kgs": "2 Kings",
    "1 Chr": "1 Chronicles",
    "2 Chr": "2 Chronicles",
    "Neh": "Nehemiah",
    "Tb": "Tobit",
    "Jdt": "Judith",
    "Est": "Esther", "Esth": "Esther",
    "1 Mc": "1 Maccabees", "1 Macc": "1 Maccabees",
    "2 Mc": "2 Maccabees", "2 Macc": "2 Maccabees",
    "Jb": "Job",
    "Ps": "Psalms", "Psalm": "Psalms", "Pss": "Psalms",
    "Prv": "Proverbs", "Prov": "Proverbs",
    "Eccl": "Ecclesiastes", "Qoh": "Ecclesiastes",
    "Song": "Song of Songs", "Sg": "Song of Songs",
    "Song of Solomon": "Song of Songs",
    "Wis": "Wisdom",
    "Sir": "Sirach", "Ecclesiasticus": "Sirach",
    "Is": "Isaiah", "Isa": "Isaiah",
    "Jer": "Jeremiah",
    "Lam": "Lamentations",
    "Bar": "Baruch",
    "Ez": "Ezekiel", "Ezek": "Ezekiel",
    "Dn": "Daniel", "Dan": "Daniel",
    "Hos": "Hosea",
    "Jl": "Joel",
    "Am": "Amos",
    "Ob": "Obadiah", "Obad": "Obadiah",
    "Jon": "Jonah", "Jnh": "Jonah",
    "Mi": "Micah", "Mic": "Micah",
    "Na": "Nahum", "Nah": "Nahum",
    "Hb": "Habakkuk", "Hab": "Habakkuk",
    "Zep": "Zephaniah", "Zeph": "Zephaniah",
    "Hg": "Haggai", "Hag": "Haggai",
    "Zec": "Zechariah", "Zech": "Zechariah",
    "Mal": "Malachi",
    "Mt": "Matthew", "Matt": "Matthew",
    "Mk": "Mark",
    "Lk": "Luke",
    "Jn": "John",
    "Rom": "Romans",
    "1 Cor": "1 Corinthians",
    "2 Cor": "2 Corinthians",
    "Gal": "Galatians",
    "Eph": "Ephesians",
    "Phil": "Philippians",
    "Col": "Colossians",
    "1 Thes": "1 Thessalonians", "1 Thess": "1 Thessalonians",
    "2 Thes": "2 Thessalonians", "2 Thess": "2 Thessalonians",
    "1 Tm": "1 Timothy", "1 Tim": "1 Timothy",
    "2 Tm": "2 Timothy", "2 Tim": "2 Timothy",
    "Ti": "Titus", "Tit": "Titus",
    "Phlm": "Philemon",
    "Heb": "Hebrews",
    "Jas": "James",
    "1 Pt": "1 Peter", "1 Pet": "1 Peter",
    "2 Pt": "2 Peter", "2 Pet": "2 Peter",
    "1 Jn": "1 John",
    "2 Jn": "2 John",
    "3 Jn": "3 John",
    "Jude": "Jude",
    "Rv": "Revelation", "Rev": "Revelation", "Apocalypse": "Revelation",
}


@dataclass(frozen=True)
class ScriptureReference:
    """
    A structured scripture citation.

    Equality and hashing are by (book, chapter, start_verse, end_verse), so
    "Jn 3:16", "John 3:16" and "John 3:16-16" all name the same passage.
    display_text and api_format are derived on access and never stored.

    Attributes:
        book: Canonical book name (e.g., "John", "1 Thessalonians")
        chapter: Chapter number (positive)
        start_verse: First verse (positive)
        end_verse: Last verse of a range, None for a single verse
    """
    book: str
    chapter: int
    start_verse: int = 1
    end_verse: Optional[int] = None

    def __post_init__(self):
        if self.chapter < 1:
            raise InvalidReference(f"Chapter must be positive: {self.chapter}")
        if self.start_verse < 1:
            raise InvalidReference(f"Verse must be positive: {self.start_verse}")
        if self.end_verse is not None:
            if self.end_verse < self.start_verse:
                raise InvalidReference(
                    f"Range end {self.end_verse} precedes start {self.start_verse}"
                )
            if self.end_verse == self.start_verse:
                object.__setattr__(self, "end_verse", None)

    @property
    def is_range(self) -> bool:
        return self.end_verse is not None

    @property
    def verse_count(self) -> int:
        if self.end_verse:
            return self.end_verse - self.start_verse + 1
        return 1

    @property
    def book_code(self) -> str:
        return book_code(self.book)

    @property
    def display_text(self) -> str:
        """Human-readable form: "John 3:16" or "Matthew 25:14-30"."""
        if self.end_verse:
            return f"{self.book} {self.chapter}:{self.start_verse}-{self.end_verse}"
        return f"{self.book} {self.chapter}:{self.start_verse}"

    @property
    def api_format(self) -> str:
        """Provider form: "JHN.3.16" or "MAT.25.14-30"."""
        return to_api_format(self)

    def verse(self, number: int) -> "ScriptureReference":
        """Return the single-verse reference for one verse of this passage."""
        return ScriptureReference(self.book, self.chapter, number)

    def to_dict(self) -> dict:
        return {
            "book": self.book,
            "chapter": self.chapter,
            "start_verse": self.start_verse,
            "end_verse": self.end_verse,
            "display": self.display_text,
            "api": self.api_format,
        }

    def __str__(self) -> str:
        return self.display_text


def normalize_book_name(name: str) -> str:
    """
    Map a book name or lectionary abbreviation to its canonical name.

    Matching is case-sensitive. Unknown names are returned unchanged so that
    callers still get a reference (whose API code may not resolve upstream).
    """
    name = re.sub(r"\s+", " ", name.strip().rstrip("."))

    # Roman numeral prefixes: "I John" -> "1 John"
    match = re.match(r"^(III|II|I)\s+(.+)$", name)
    if match:
        num = {"I": "1", "II": "2", "III": "3"}[match.group(1)]
        name = f"{num} {match.group(2)}"

    # "1John" -> "1 John"
    name = re.sub(r"^([1-3])(?=[A-Za-z])", r"\1 ", name)

    if name in BOOK_TO_CODE:
        return name
    return BOOK_ALIASES.get(name, name)


def book_code(book: str) -> str:
    """3-letter API code for a book; unmapped names fall back to their first 3 letters."""
    code = BOOK_TO_CODE.get(book) or BOOK_TO_CODE.get(normalize_book_name(book))
    if code:
        return code
    return book.replace(" ", "")[:3].upper()


# "Book C:V", "Book C:V-V2", "Book C,V", "Book C" (verse defaults to 1).
# Verse suffixes like "21b" are tolerated and dropped.
_DISPLAY_PATTERN = re.compile(
    r"^(?P<book>(?:[1-3]\s?|I{1,3}\s)?[A-Za-z][A-Za-z .]*?)\.?\s+"
    r"(?P<chapter>\d+)"
    r"(?:\s*[:,]\s*(?P<start>\d+)[a-d]?"
    r"(?:\s*[-–—]\s*(?P<end>\d+)[a-d]?)?)?$"
)


def parse_display_reference(text: str) -> ScriptureReference:
    """
    Parse a human-readable reference.

    Handles:
    - "John 3:16"
    - "Matthew 25:14-30" (hyphen or en-dash)
    - "Genesis 1,3" (comma variant)
    - "Ps 23" / "Psalm 23" (chapter only, verse defaults to 1)
    - "1 Thessalonians 4:9-11", "1Thess 4:9", "I John 1:5"

    Args:
        text: The reference string

    Returns:
        ScriptureReference

    Raises:
        InvalidReference: If the string is not a reference
    """
    if not text or not text.strip():
        raise InvalidReference("Empty reference")

    cleaned = re.sub(r"\s+", " ", text.strip())
    match = _DISPLAY_PATTERN.match(cleaned)
    if not match:
        raise InvalidReference(f"Could not parse reference: {text!r}")

    start = match.group("start")
    end = match.group("end")
    return ScriptureReference(
        book=normalize_book_name(match.group("book")),
        chapter=int(match.group("chapter")),
        start_verse=int(start) if start else 1,
        end_verse=int(end) if end else None,
    )


def to_api_format(ref: ScriptureReference) -> str:
    """
    Convert a reference to the provider's dotted format.

    "John 3:16" -> "JHN.3.16", "Matthew 25:14-30" -> "MAT.25.14-30".
    Pure function of the reference fields.
    """
    code = book_code(ref.book)
    if ref.end_verse:
        return f"{code}.{ref.chapter}.{ref.start_verse}-{ref.end_verse}"
    return f"{code}.{ref.chapter}.{ref.start_verse}"


def parse_api_range(code: str) -> tuple[str, int, int, Optional[int]]:
    """
    Split an API reference into (book_code, chapter, start_verse, end_verse).

    "MAT.25.14-30" -> ("MAT", 25, 14, 30); "JHN.3.16" -> ("JHN", 3, 16, None)

    Raises:
        InvalidReference: Fewer than 3 segments or non-numeric parts
    """
    parts = (code or "").strip().split(".")
    if len(parts) < 3:
        raise InvalidReference(f"API reference needs BOOK.CHAPTER.VERSE: {code!r}")

    book, chapter, verses = parts[0], parts[1], parts[2]
    start, _, end = verses.partition("-")
    try:
        return (
            book,
            int(chapter),
            int(start),
            int(end) if end else None,
        )
    except ValueError:
        raise InvalidReference(f"Non-numeric chapter or verse in {code!r}")


def parse_api_reference(code: str) -> tuple[str, int, int]:
    """
    Parse "BBB.C.V" into (book, chapter, verse).

    Known codes map back to the canonical book name; unknown codes are
    returned as the book name unchanged. For a range the start verse is
    returned.

    Raises:
        InvalidReference: Fewer than 3 segments
    """
    code_part, chapter, start, _ = parse_api_range(code)
    return CODE_TO_BOOK.get(code_part.upper(), code_part), chapter, start


def reference_from_api(code: str) -> ScriptureReference:
    """Build a ScriptureReference from an API-format string."""
    code_part, chapter, start, end = parse_api_range(code)
    return ScriptureReference(
        book=CODE_TO_BOOK.get(code_part.upper(), code_part),
        chapter=chapter,
        start_verse=start,
        end_verse=end,
    )


def format_api_reference(code: str) -> str:
    """
    Convert an API reference to display text.

    "1TH.4.9-11" -> "1 Thessalonians 4:9-11". Strings that do not parse are
    returned unchanged.
    """
    try:
        return reference_from_api(code).display_text
    except InvalidReference:
        return code


def _book_alternation() -> str:
    names = list(BOOK_TO_CODE) + list(BOOK_ALIASES)
    # Longest first so "1 John" wins over "John"
    names.sort(key=len, reverse=True)
    return "|".join(re.escape(n) for n in names)


_BOOKS = _book_alternation()

# Ordered extraction patterns for free text: most specific first.
_TEXT_PATTERNS = [
    # "John 3:16", "1 Cor 13:4-8", "Dt 4:1-2"
    re.compile(
        rf"(?<![A-Za-z])(?:{_BOOKS})\.?\s+\d+:\d+[a-d]?(?:\s*[-–—]\s*\d+[a-d]?)?(?![\d:])"
    ),
    # "Genesis 1, 3"
    re.compile(
        rf"(?<![A-Za-z])(?:{_BOOKS})\.?\s+\d+,\s*\d+[a-d]?(?:\s*[-–—]\s*\d+[a-d]?)?"
    ),
    # "Ps 23", "Psalm 23"
    re.compile(r"(?<![A-Za-z])(?:Psalms?|Ps)\.?\s+\d+(?![\d:,])"),
]


def find_references(text: str) -> list[ScriptureReference]:
    """
    Find all scripture references in a block of liturgical text.

    Malformed candidates are skipped. Results keep first-seen order and are
    de-duplicated by passage identity.

    Args:
        text: Free text (titles, reading headers, descriptions)

    Returns:
        List of ScriptureReference objects found
    """
    if not text:
        return []

    found = []
    spans = []
    seen = set()

    for pattern in _TEXT_PATTERNS:
        for match in pattern.finditer(text):
            # A less specific pattern must not re-match inside an earlier hit
            if any(s <= match.start() < e for s, e in spans):
                continue
            try:
                ref = parse_display_reference(match.group())
            except InvalidReference:
                continue
            spans.append(match.span())
            if ref not in seen:
                seen.add(ref)
                found.append((match.start(), ref))

    found.sort(key=lambda item: item[0])
    return [ref for _, ref in found]


def extract_first_reference(text: str) -> Optional[ScriptureReference]:
    """Return the earliest reference in text, or None."""
    refs = find_references(text)
    return refs[0] if refs else None


def is_valid_reference(ref_string: str) -> bool:
    """
    Check if a string is a valid scripture reference.

    Args:
        ref_string: String to check

    Returns:
        True if valid reference, False otherwise
    """
    try:
        parse_display_reference(ref_string)
        return True
    except InvalidReference:
        return False
