# api/tests/test_caches.py
"""
Tests for the scripture and image caches.

Run with: python tests/test_caches.py
"""

import os
import sys
import tempfile
import threading

# Add api directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.cache import ImageCache, ReadWriteLock, ScriptureCache
from services.scripture.reference_parser import ScriptureReference, parse_display_reference


def test_structural_keys():
    """Test that independently built references share an entry."""
    print("\n=== Testing structural keys ===")

    cache = ScriptureCache()
    cache.store(parse_display_reference("Jn 3:16"), "For God so loved the world")

    assert cache.get(ScriptureReference("John", 3, 16)) == "For God so loved the world"
    assert ScriptureReference("John", 3, 16, 16) in cache
    assert cache.get(ScriptureReference("John", 3, 17)) is None
    print("✓ Equal references hit the same entry")

    cache.store(ScriptureReference("John", 3, 16), "replaced")
    assert cache.get(parse_display_reference("John 3:16")) == "replaced"
    assert len(cache) == 1
    print("✓ Last writer wins")


def test_stats_and_clear():
    """Test statistics and clearing."""
    print("\n=== Testing stats and clear ===")

    cache = ScriptureCache()
    ref = ScriptureReference("Romans", 8, 28)
    cache.get(ref)
    cache.store(ref, "All things work together for good")
    cache.get(ref)

    stats = cache.get_stats()
    assert stats["entries"] == 1
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["max_entries"] is None
    print(f"✓ Stats: {stats}")

    assert cache.clear() == 1
    assert len(cache) == 0
    assert cache.clear() == 0
    print("✓ Clear")


def test_lru_bound():
    """Test the optional LRU bound."""
    print("\n=== Testing LRU bound ===")

    cache = ScriptureCache(max_entries=2)
    a = ScriptureReference("Genesis", 1, 1)
    b = ScriptureReference("Genesis", 1, 2)
    c = ScriptureReference("Genesis", 1, 3)

    cache.store(a, "a")
    cache.store(b, "b")
    assert cache.get(a) == "a"  # a is now most recent
    cache.store(c, "c")

    assert a in cache
    assert b not in cache
    assert c in cache
    assert len(cache) == 2
    print("✓ Least recently used entry evicted")


def test_concurrent_access():
    """Test concurrent readers and writers."""
    print("\n=== Testing concurrent access ===")

    cache = ScriptureCache()
    refs = [ScriptureReference("Psalms", 119, v) for v in range(1, 51)]
    errors = []

    def writer(offset):
        for ref in refs[offset::5]:
            cache.store(ref, f"text {ref.start_verse}")

    def reader():
        try:
            for ref in refs:
                value = cache.get(ref)
                assert value is None or value == f"text {ref.start_verse}"
        except AssertionError as e:
            errors.append(e)

    threads = [threading.Thread(target=writer, args=(i,)) for i in range(5)]
    threads += [threading.Thread(target=reader) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    assert len(cache) == 50
    print("✓ No torn reads, every write landed")

    stats = cache.get_stats()
    assert stats["hits"] + stats["misses"] == 5 * len(refs)
    print("✓ Every concurrent lookup counted")


def test_rwlock_excludes_writers():
    """Test that a writer waits for an active reader."""
    print("\n=== Testing ReadWriteLock ===")

    lock = ReadWriteLock()
    order = []
    reader_in = threading.Event()
    release_reader = threading.Event()

    def reader():
        with lock.read():
            reader_in.set()
            release_reader.wait(timeout=5)
            order.append("reader-done")

    def writer():
        reader_in.wait(timeout=5)
        with lock.write():
            order.append("writer")

    r = threading.Thread(target=reader)
    w = threading.Thread(target=writer)
    r.start()
    w.start()
    reader_in.wait(timeout=5)
    release_reader.set()
    r.join()
    w.join()

    assert order == ["reader-done", "writer"]
    print("✓ Writer ran after the reader released")


def test_image_cache_memory_and_disk():
    """Test the image cache tiers."""
    print("\n=== Testing ImageCache ===")

    with tempfile.TemporaryDirectory() as tmp:
        cache = ImageCache(os.path.join(tmp, "images"))
        assert cache.get("abc_natural_style") is None
        assert "abc_natural_style" not in cache

        cache.set("abc_natural_style", b"\xff\xd8jpeg")
        assert cache.get("abc_natural_style") == b"\xff\xd8jpeg"
        assert os.path.exists(os.path.join(tmp, "images", "abc_natural_style.jpg"))
        print("✓ Stored in memory and on disk")

        fresh = ImageCache(os.path.join(tmp, "images"))
        assert fresh.memory_size() == 0
        assert "abc_natural_style" in fresh
        assert fresh.get("abc_natural_style") == b"\xff\xd8jpeg"
        assert fresh.memory_size() == 1
        print("✓ A new cache instance reads from disk")

    try:
        ImageCache(tempfile.gettempdir()).get("../escape")
        assert False, "Should have raised ValueError"
    except ValueError as e:
        print(f"✓ Unsafe key rejected: {e}")


def main():
    """Run all tests."""
    test_structural_keys()
    test_stats_and_clear()
    test_lru_bound()
    test_concurrent_access()
    test_rwlock_excludes_writers()
    test_image_cache_memory_and_disk()
    print("\nAll cache tests passed!")


if __name__ == "__main__":
    main()
