# api/tests/test_scripture_service.py
"""
Tests for cache-checked scripture lookup and search.

Run with: python tests/test_scripture_service.py
"""

import os
import sys

# Add api directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fakes import FakeTextProvider, chapter_texts
from services.cache import ScriptureCache
from services.scripture import (
    Reading,
    ScriptureReference,
    ScriptureService,
    VerseRangeFetcher,
    detect_theme,
    theme_keyword,
)
from utils.errors import FetchResult, InvalidReference


def make_service(texts, fail=None, searcher=True):
    provider = FakeTextProvider(texts, fail=fail)
    service = ScriptureService(
        VerseRangeFetcher(provider),
        searcher=provider if searcher else None,
        cache=ScriptureCache(),
        version_name="World English Bible",
    )
    return service, provider


def test_get_scripture():
    """Test lookup and caching."""
    print("\n=== Testing get_scripture ===")

    texts = {
        "MAT.5.3": "Blessed are the poor in spirit, for theirs is the kingdom of heaven.",
        "MAT.5.4": "Blessed are those who mourn, for they will be comforted.",
    }
    service, provider = make_service(texts)

    result = service.get_scripture("Mt 5:3-4")
    assert result.ok
    reading = result.value
    assert reading.title == "Matthew 5:3-4"
    assert reading.subtitle == "World English Bible"
    assert [v.verse_number for v in reading.verses] == [3, 4]
    assert reading.text.startswith("Blessed are the poor in spirit")
    assert reading.theme == "Blessings and Beatitudes"
    assert reading.reference == ScriptureReference("Matthew", 5, 3, 4)
    print("✓ Range resolved into a Reading")

    calls = len(provider.calls)
    again = service.get_scripture(ScriptureReference("Matthew", 5, 3, 4))
    assert again.value is reading
    assert len(provider.calls) == calls
    print("✓ Second lookup served from cache")


def test_failures_not_cached():
    """Test that a failed lookup is retried next time."""
    print("\n=== Testing uncached failures ===")

    service, provider = make_service({})
    result = service.get_scripture("John 3:16")
    assert not result.ok
    assert result.failure.target == "JHN.3.16"
    assert ScriptureReference("John", 3, 16) not in service.cache
    print(f"✓ Failure returned: {result.failure}")

    provider.texts["JHN.3.16"] = "For God so loved the world"
    result = service.get_scripture("John 3:16")
    assert result.ok
    assert result.value.text == "For God so loved the world"
    print("✓ Next lookup reaches the provider again")


def test_invalid_reference():
    """Test that malformed strings raise."""
    print("\n=== Testing invalid reference ===")

    service, _ = make_service({})
    try:
        service.get_scripture("not a verse")
        assert False, "Should have raised InvalidReference"
    except InvalidReference as e:
        print(f"✓ Raised: {e}")


def test_fetch_reading():
    """Test combining several passages into one Reading."""
    print("\n=== Testing fetch_reading ===")

    texts = chapter_texts("JAS", 1, 17, 18, template="Verse {verse} of James")
    texts.update(chapter_texts("MRK", 7, 1, 2, template="Verse {verse} of Mark"))
    service, provider = make_service(texts)

    reading = service.fetch_reading(["JAS.1.17-18", "MRK.7.1-2"], "Scripture for Saint James")
    assert reading.title == "Scripture for Saint James"
    assert reading.subtitle == "James 1:17-18+"
    assert reading.text == "Verse 17 of James Verse 18 of James Verse 1 of Mark Verse 2 of Mark"
    assert len(reading.verses) == 1
    assert reading.reference == ScriptureReference("James", 1, 17, 18)
    print("✓ Passages combined, label marks more passages")

    reading = service.fetch_reading(["XXX.1.1", "MRK.7.1"], "Gospel", subtitle="Sunday")
    assert reading.subtitle == "Sunday"
    assert reading.verses[0].reference == "Mark 7:1+"
    print("✓ Missing passages skipped")

    assert service.fetch_reading(["XXX.1.1"], "Nothing") is None
    print("✓ Nothing fetched yields None")

    provider.texts.update(chapter_texts("MAT", 25, 30, 30, template="Verse {verse} of Matthew"))
    reading = service.fetch_reading(["MAT.25.30-14"], "Gospel")
    assert reading.text == "Verse 30 of Matthew"
    assert reading.reference == ScriptureReference("Matthew", 25, 30)
    assert reading.subtitle == "Matthew 25:30"
    print("✓ Reversed range read as its start verse")


def test_search_scripture():
    """Test best-effort search."""
    print("\n=== Testing search_scripture ===")

    service, _ = make_service({
        "1JN.4.8": "Whoever does not love does not know God, for God is love.",
        "HEB.11.1": "Now faith is the assurance of things hoped for.",
    })
    results = service.search_scripture("love")
    assert len(results) == 1
    assert results[0].title == "1 John 4:8"
    assert results[0].theme == "Love and Charity"
    print("✓ Hits converted to Readings")

    assert service.search_scripture("   ") == []
    no_search, _ = make_service({}, searcher=False)
    assert no_search.search_scripture("love") == []
    print("✓ Empty query or no searcher")

    class FailingSearcher:
        def search(self, query, limit=10):
            return FetchResult.failed("bible-api", "search", "HTTP 500")

    service.searcher = FailingSearcher()
    assert service.search_scripture("love") == []
    print("✓ Failed search yields no results")


def test_related_scriptures():
    """Test explicit relatives followed by thematic hits."""
    print("\n=== Testing related_scriptures ===")

    service, _ = make_service({
        "JHN.3.16": "For God so loved the world that he gave his only Son.",
        "HEB.11.1": "Now faith is the assurance of things hoped for.",
        "1JN.4.8": "Whoever does not love does not know God, for God is love.",
        "ROM.5.8": "But God commends his own love toward us.",
    })
    reading = service.get_scripture("John 3:16").value
    assert reading.theme == "Love and Charity"

    related = service.related_scriptures(
        reading, ["Hebrews 11:1", "not a verse", "Romans 8:28"], limit=1,
    )
    assert [r.title for r in related] == ["Hebrews 11:1", "1 John 4:8"]
    print("✓ Unresolvable relatives skipped, one thematic hit")

    related = service.related_scriptures(reading)
    assert [r.title for r in related] == ["1 John 4:8", "Romans 5:8"]
    print("✓ The reading itself is never related")

    related = service.related_scriptures(reading, ["Romans 5:8"])
    assert [r.title for r in related] == ["Romans 5:8", "1 John 4:8"]
    print("✓ No duplicates between relatives and hits")

    plain = Reading(title="Genesis 1:1", subtitle="", theme="Scripture Meditation")
    assert service.related_scriptures(plain) == []
    print("✓ No thematic search without a theme")


def test_theme_keyword():
    """Test mapping themes back to search keywords."""
    print("\n=== Testing theme_keyword ===")

    assert theme_keyword("Love and Charity") == "love"
    assert theme_keyword(detect_theme("Pray without ceasing")) == "pray"
    assert theme_keyword("Divine love and charity") == "Divine love and charity"
    print("✓ Known themes map to keywords, others pass through")


def test_detect_theme():
    """Test theme keywords."""
    print("\n=== Testing detect_theme ===")

    assert detect_theme("Love one another") == "Love and Charity"
    assert detect_theme("Your faith has saved you") == "Faith and Trust"
    assert detect_theme("Pray without ceasing") == "Prayer and Devotion"
    assert detect_theme("In the beginning") == "Scripture Meditation"
    assert detect_theme(None) == "Scripture Meditation"
    print("✓ First keyword wins, default otherwise")


def main():
    """Run all tests."""
    test_get_scripture()
    test_failures_not_cached()
    test_invalid_reference()
    test_fetch_reading()
    test_search_scripture()
    test_related_scriptures()
    test_theme_keyword()
    test_detect_theme()
    print("\nAll scripture service tests passed!")


if __name__ == "__main__":
    main()
