# api/tests/test_liturgy_calendar.py
"""
Tests for liturgical classification, the saints directory and the
static lectionary.

Run with: python tests/test_liturgy_calendar.py
"""

import os
import sys
from datetime import date

# Add api directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.liturgy import (
    LiturgicalColor,
    LiturgicalRank,
    LiturgicalSeason,
    Saint,
    SaintsDirectory,
    determine_color,
    determine_rank,
    determine_season,
    entry_for,
    extract_commemorations,
    highest_precedence,
)


def test_determine_season():
    """Test the simplified season table."""
    print("\n=== Testing determine_season ===")

    cases = [
        (date(2025, 12, 1), LiturgicalSeason.ADVENT),
        (date(2025, 12, 24), LiturgicalSeason.ADVENT),
        (date(2025, 12, 25), LiturgicalSeason.CHRISTMAS_TIME),
        (date(2026, 1, 13), LiturgicalSeason.CHRISTMAS_TIME),
        (date(2026, 1, 14), LiturgicalSeason.ORDINARY_TIME),
        (date(2026, 2, 1), LiturgicalSeason.LENT),
        (date(2026, 3, 31), LiturgicalSeason.LENT),
        (date(2026, 4, 10), LiturgicalSeason.EASTER_TIME),
        (date(2026, 5, 15), LiturgicalSeason.EASTER_TIME),
        (date(2026, 5, 16), LiturgicalSeason.ORDINARY_TIME),
        (date(2025, 8, 30), LiturgicalSeason.ORDINARY_TIME),
    ]
    for day, expected in cases:
        assert determine_season(day) == expected, (day, determine_season(day))
    print(f"✓ {len(cases)} boundary dates classified")

    assert LiturgicalSeason.LENT.display_name == "Lent"
    assert "Penance" in LiturgicalSeason.LENT.theme_description
    assert "desert" in LiturgicalSeason.LENT.art_theme
    print("✓ Season metadata")


def test_determine_color():
    """Test keyword colors and season defaults."""
    print("\n=== Testing determine_color ===")

    ordinary = LiturgicalSeason.ORDINARY_TIME
    assert determine_color("Memorial of Saint Lawrence, Deacon and Martyr", ordinary) == LiturgicalColor.RED
    assert determine_color("Saint Agnes, Virgin and Martyr", ordinary) == LiturgicalColor.RED
    assert determine_color("Saint Clare, Virgin", ordinary) == LiturgicalColor.WHITE
    assert determine_color("Saint Augustine, Bishop and Doctor", ordinary) == LiturgicalColor.WHITE
    print("✓ Keyword rules, first match wins")

    assert determine_color("Tuesday of the First Week", LiturgicalSeason.ADVENT) == LiturgicalColor.VIOLET
    assert determine_color("Tuesday", LiturgicalSeason.LENT) == LiturgicalColor.VIOLET
    assert determine_color("Christmas Day", LiturgicalSeason.CHRISTMAS_TIME) == LiturgicalColor.WHITE
    assert determine_color("Monday", LiturgicalSeason.EASTER_TIME) == LiturgicalColor.WHITE
    assert determine_color("Saturday", ordinary) == LiturgicalColor.GREEN
    assert determine_color("", ordinary) == LiturgicalColor.GREEN
    print("✓ Season defaults")


def test_determine_rank():
    """Test rank detection and ordering."""
    print("\n=== Testing determine_rank ===")

    assert determine_rank("Solemnity of the Assumption") == LiturgicalRank.SOLEMNITY
    assert determine_rank("Feast of the Transfiguration") == LiturgicalRank.FEAST
    assert determine_rank("Optional Memorial of Saint Rose") == LiturgicalRank.OPTIONAL_MEMORIAL
    assert determine_rank("Memorial of Saint Monica") == LiturgicalRank.MEMORIAL
    assert determine_rank("Saturday of the Twenty-first Week") == LiturgicalRank.FERIAL
    print("✓ Rank from title")

    ranks = sorted(LiturgicalRank, reverse=True)
    ranks.sort()
    assert ranks == [
        LiturgicalRank.SOLEMNITY,
        LiturgicalRank.FEAST,
        LiturgicalRank.MEMORIAL,
        LiturgicalRank.OPTIONAL_MEMORIAL,
        LiturgicalRank.FERIAL,
    ]
    assert LiturgicalRank.SOLEMNITY < LiturgicalRank.FERIAL
    assert LiturgicalRank.MEMORIAL >= LiturgicalRank.FEAST
    print("✓ Ascending sort puts the highest rank first")

    items = [("a", LiturgicalRank.MEMORIAL), ("b", LiturgicalRank.FEAST), ("c", LiturgicalRank.FEAST)]
    assert highest_precedence(items, lambda i: i[1]) == ("b", LiturgicalRank.FEAST)
    assert highest_precedence([], lambda i: i[1]) is None
    print("✓ highest_precedence keeps input order on ties")


def test_extract_commemorations():
    """Test title splitting."""
    print("\n=== Testing extract_commemorations ===")

    assert extract_commemorations("Memorial of Saint Augustine, Bishop and Doctor of the Church") == [
        "Memorial of Saint Augustine",
        "Bishop and Doctor of the Church",
    ]
    assert extract_commemorations("") == []
    assert extract_commemorations(" , ,") == []
    print("✓ Comma-separated segments")


def test_saints_directory():
    """Test saint lookup."""
    print("\n=== Testing SaintsDirectory ===")

    directory = SaintsDirectory()
    assert len(directory) == 4

    saint = directory.saint_for(date(2025, 8, 28))
    assert saint.name == "Saint Augustine of Hippo"
    assert directory.lookup_by_feast_day("08-29").id == "john-baptist"
    assert directory.saint_for(date(2025, 1, 1)) is None
    print("✓ Lookup by feast day")

    assert directory.get("rose-lima").feast_day == "08-30"
    assert directory.get("nobody") is None
    print("✓ Lookup by id")

    assert [s.id for s in directory.search("thagaste")] == []
    assert {s.id for s in directory.search("mothers")} == {"monica"}
    assert {s.id for s in directory.search("BISHOP")} == {"augustine-hippo"}
    assert directory.search("  ") == []
    print("✓ Search")

    assert [s.day_of_month for s in directory.saints_for_month(8)] == [27, 28, 29, 30]
    assert directory.saints_for_month(3) == []
    print("✓ Month listing sorted by day")

    lent = {s.id for s in directory.saints_for_season(LiturgicalSeason.LENT)}
    assert lent == {"john-baptist", "augustine-hippo", "rose-lima"}
    assert {s.id for s in directory.saints_for_season(LiturgicalSeason.ADVENT)} == {"john-baptist"}
    assert len(directory.saints_for_season(LiturgicalSeason.ORDINARY_TIME)) == 4
    print("✓ Season filters")


def test_shared_feast_day():
    """Test that the highest-ranking saint wins a shared day."""
    print("\n=== Testing shared feast days ===")

    optional = Saint("a", "Saint A", "10-01", "Virgin", "Bio A", rank=LiturgicalRank.OPTIONAL_MEMORIAL)
    feast = Saint("b", "Saint B", "10-01", "Apostle", "Bio B", rank=LiturgicalRank.FEAST)
    directory = SaintsDirectory([optional, feast])

    assert directory.lookup_by_feast_day("10-01").id == "b"
    print("✓ Feast outranks optional memorial")


def test_saint_details():
    """Test derived saint fields."""
    print("\n=== Testing Saint ===")

    directory = SaintsDirectory()
    augustine = directory.get("augustine-hippo")
    monica = directory.get("monica")
    rose = directory.get("rose-lima")

    assert augustine.full_title == "Bishop and Doctor of the Church Saint Augustine of Hippo"
    assert augustine.short_biography.endswith("...")
    assert len(augustine.short_biography) == 203
    assert "Bishop's mitre and crosier" in augustine.art_prompt
    print("✓ full_title, short_biography, art_prompt")

    assert augustine.related_references()[0] == "1TI.3.1"
    assert rose.related_references()[0] == "MAT.25.1"
    assert monica.related_references()[0] == "PRO.31.10"
    print("✓ Related scripture by vocation")

    title, body = monica.notification_content()
    assert title == "Today's Saint: Saint Monica"
    assert body == "Mother and Widow • Patron of Mothers • Nothing is far from God."
    print("✓ Notification content")

    data = rose.to_dict()
    assert data["rank"] == "Memorial"
    assert data["patron_of"][0] == "Americas"
    print("✓ to_dict")


def test_lectionary():
    """Test the static lectionary entries."""
    print("\n=== Testing lectionary ===")

    entry = entry_for(date(2025, 8, 30))
    assert entry.first_reading == "1TH.4.9-11"
    assert not entry.has_second_reading
    assert [t for t, _ in entry.mass_structure()] == [
        "First Reading", "Responsorial Psalm", "Gospel Acclamation", "Gospel",
    ]
    print("✓ Weekday structure")

    sunday = entry_for(date(2025, 8, 31))
    assert sunday.has_second_reading
    assert sunday.all_references() == ["DEU.4.1-2", "PSA.15.2-5", "JAS.1.17-18", "JAS.1.18", "MRK.7.1-8"]
    print("✓ Sunday carries a second reading")

    assert entry_for(date(2025, 10, 1)) is None
    print("✓ Unknown day")


def main():
    """Run all tests."""
    test_determine_season()
    test_determine_color()
    test_determine_rank()
    test_extract_commemorations()
    test_saints_directory()
    test_shared_feast_day()
    test_saint_details()
    test_lectionary()
    print("\nAll liturgy calendar tests passed!")


if __name__ == "__main__":
    main()
