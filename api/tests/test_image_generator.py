# api/tests/test_image_generator.py
"""
Tests for prompt building, the image generator and the Gemini provider.

Run with: python tests/test_image_generator.py
"""

import base64
import io
import os
import sys
import tempfile
import threading
from datetime import date

import requests
from PIL import Image

# Add api directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.config import Settings
from fakes import FakeImageProvider, FakeResponse, FakeSession, png_bytes
from services.art import (
    GeminiImageProvider,
    ImageGenerator,
    ScriptureContext,
    build_prompt,
    cache_key,
    detect_context,
    render_placeholder,
)
from services.art.image_generator import extract_image_data, to_jpeg
from services.art.prompts import build_saint_prompt, liturgical_guidance
from services.cache import ImageCache
from services.liturgy import SaintsDirectory
from services.liturgy.assembler import assemble_day
from services.liturgy.feed_client import FeedItem
from services.scripture import ScriptureReference, Verse
from utils.errors import GenerationFailure


BEATITUDE = Verse(
    text="Blessed are the poor in spirit, for theirs is the kingdom of heaven.",
    reference=ScriptureReference("Matthew", 5, 3),
    book_name="Matthew",
    chapter=5,
    verse_number=3,
)


def is_jpeg(data):
    return data[:2] == b"\xff\xd8"


def test_detect_context():
    """Test passage classification."""
    print("\n=== Testing detect_context ===")

    assert detect_context("The Lord is my shepherd", "Psalms") == ScriptureContext.PSALM
    assert detect_context("Blessed are the meek", "Matthew") == ScriptureContext.GOSPEL
    assert detect_context("Love is patient", "1 Corinthians") == ScriptureContext.EPISTLE
    assert detect_context("Vanity of vanities", "Ecclesiastes") == ScriptureContext.WISDOM
    assert detect_context("I saw a new heaven", "Revelation") == ScriptureContext.APOCALYPTIC
    assert detect_context("The kingdom of heaven is like a mustard seed", "Gospel") == ScriptureContext.PARABLE
    assert detect_context("Thus says the Lord", "Jeremiah") == ScriptureContext.PROPHECY
    assert detect_context("This commandment I give you", "Deuteronomy") == ScriptureContext.LAW
    assert detect_context("In the beginning", "Genesis") == ScriptureContext.NARRATIVE
    print("✓ Book first, then wording")

    assert ScriptureContext.from_value("Gospel") == ScriptureContext.GOSPEL
    assert ScriptureContext.from_value("unknown") is None
    assert ScriptureContext.from_value(None) is None
    print("✓ from_value")


def test_build_prompt():
    """Test prompt composition."""
    print("\n=== Testing build_prompt ===")

    prompt = build_prompt(BEATITUDE.text, "Matthew 5:3", ScriptureContext.GOSPEL)
    assert prompt.startswith('Create a natural style cinematic biblical scene depicting: "Blessed are')
    assert "Biblical context: Matthew 5:3" in prompt
    assert "Theme: Blessings and Beatitudes" in prompt
    assert "Scripture type: Gospel Account" in prompt
    assert "Liturgical context" not in prompt
    print("✓ Base prompt")

    item = FeedItem(title="Memorial of Saint Lawrence, Deacon and Martyr", link="", description="")
    day = assemble_day(date(2025, 8, 10), item)
    prompt = build_prompt(BEATITUDE.text, "Matthew 5:3", ScriptureContext.GOSPEL,
                          theme="Poverty of Spirit", liturgical_day=day)
    assert "Theme: Poverty of Spirit" in prompt
    assert "Liturgical color: Red" in prompt
    assert "Season: Ordinary Time" in prompt
    assert liturgical_guidance(None) == ""
    print("✓ Liturgical season woven in")

    saint = SaintsDirectory().get("rose-lima")
    assert "Crown of roses" in build_saint_prompt(saint)
    print("✓ Saint prompt")


def test_cache_key():
    """Test key determinism."""
    print("\n=== Testing cache_key ===")

    key = cache_key(BEATITUDE.content_identity)
    assert key == cache_key(BEATITUDE.content_identity, "natural_style")
    assert key.endswith("_natural_style")
    assert len(key.split("_")[0]) == 40
    assert key != cache_key(BEATITUDE.content_identity, "icon_style")
    assert key != cache_key("Matthew 5:4|Blessed are those who mourn")
    print(f"✓ {key}")


def test_placeholder():
    """Test the deterministic placeholder."""
    print("\n=== Testing render_placeholder ===")

    data = render_placeholder()
    assert is_jpeg(data)
    assert render_placeholder() == data
    with Image.open(io.BytesIO(data)) as img:
        assert img.size == (1024, 1024)
    print(f"✓ {len(data)} bytes, stable across calls")


def test_generate_and_cache():
    """Test generation, the cache hit path and persistence."""
    print("\n=== Testing ImageGenerator ===")

    with tempfile.TemporaryDirectory() as tmp:
        provider = FakeImageProvider()
        generator = ImageGenerator(provider, ImageCache(tmp))

        first = generator.generate(BEATITUDE)
        assert not first.cached
        assert not first.placeholder
        assert is_jpeg(first.data)
        assert len(provider.prompts) == 1
        assert "Scripture type: Gospel Account" in provider.prompts[0]
        print("✓ Miss calls the provider and re-encodes as JPEG")

        second = generator.generate(BEATITUDE)
        assert second.cached
        assert second.data == first.data
        assert len(provider.prompts) == 1
        print("✓ Hit makes no provider call")

        restarted = ImageGenerator(FakeImageProvider(failing=True), ImageCache(tmp))
        third = restarted.generate(BEATITUDE)
        assert third.cached
        assert third.data == first.data
        print("✓ Disk cache survives a new generator")

        other_style = generator.generate(BEATITUDE, style="icon_style")
        assert not other_style.cached
        assert len(provider.prompts) == 2
        print("✓ Style is part of the key")


def test_failure_yields_uncached_placeholder():
    """Test provider failure handling."""
    print("\n=== Testing provider failure ===")

    with tempfile.TemporaryDirectory() as tmp:
        cache = ImageCache(tmp)
        generator = ImageGenerator(FakeImageProvider(failing=True), cache)

        image = generator.generate(BEATITUDE)
        assert image.placeholder
        assert image.data == render_placeholder()
        assert image.failure.reason == "provider down"
        assert image.cache_key not in cache
        print("✓ Placeholder returned, nothing cached")

        generator.provider = FakeImageProvider(payload=b"not an image")
        image = generator.generate(BEATITUDE)
        assert image.placeholder
        assert image.cache_key not in cache
        print("✓ Unreadable provider bytes also yield the placeholder")

        generator.provider = FakeImageProvider()
        image = generator.generate(BEATITUDE)
        assert not image.placeholder
        assert image.cache_key in cache
        print("✓ Next request retries the provider")


def test_transport_errors_yield_placeholder():
    """Test that errors raised during the provider call still give a placeholder."""
    print("\n=== Testing provider transport errors ===")

    settings = Settings(image_api_key="secret", image_api_endpoint="https://gen.test/generate",
                        http_max_retries=1)

    with tempfile.TemporaryDirectory() as tmp:
        cache = ImageCache(tmp)
        broken = FakeSession(requests.exceptions.ChunkedEncodingError("connection broken mid-body"))
        generator = ImageGenerator(GeminiImageProvider(settings, session=broken), cache)

        image = generator.generate(BEATITUDE)
        assert image.placeholder
        assert "connection broken mid-body" in image.failure.reason
        assert image.cache_key not in cache
        print("✓ Broken response body becomes a placeholder")

        class RaisingProvider:
            def generate(self, prompt):
                raise KeyError("candidates")

        generator.provider = RaisingProvider()
        image = generator.generate(BEATITUDE)
        assert image.placeholder
        assert image.data == render_placeholder()
        assert image.cache_key not in cache
        print("✓ A raising provider becomes a placeholder")


def test_cancellation():
    """Test cancelled requests."""
    print("\n=== Testing cancellation ===")

    with tempfile.TemporaryDirectory() as tmp:
        cache = ImageCache(tmp)
        provider = FakeImageProvider()
        generator = ImageGenerator(provider, cache)

        cancel = threading.Event()
        cancel.set()
        image = generator.generate(BEATITUDE, cancel=cancel)
        assert image.placeholder
        assert provider.prompts == []
        print("✓ Cancelled before the call: no provider call")

        class CancellingProvider:
            def __init__(self, event):
                self.event = event

            def generate(self, prompt):
                self.event.set()
                return png_bytes()

        cancel = threading.Event()
        generator.provider = CancellingProvider(cancel)
        image = generator.generate(BEATITUDE, cancel=cancel)
        assert not image.placeholder
        assert image.cache_key not in cache
        print("✓ Cancelled during the call: result returned but not cached")


def test_saint_art():
    """Test saint artwork."""
    print("\n=== Testing generate_saint_art ===")

    with tempfile.TemporaryDirectory() as tmp:
        provider = FakeImageProvider()
        generator = ImageGenerator(provider, ImageCache(tmp))
        saint = SaintsDirectory().get("augustine-hippo")

        image = generator.generate_saint_art(saint)
        assert not image.placeholder
        assert "Saint Augustine of Hippo" in provider.prompts[0]
        assert generator.generate_saint_art(saint).cached
        print("✓ Saint art generated and cached")


def test_extract_image_data():
    """Test response parsing."""
    print("\n=== Testing extract_image_data ===")

    raw = png_bytes()
    encoded = base64.b64encode(raw).decode("ascii")

    payload = {"candidates": [{"content": {"parts": [
        {"text": "Here is your image"},
        {"inlineData": {"mimeType": "image/png", "data": encoded}},
    ]}}]}
    assert extract_image_data(payload) == raw
    print("✓ inlineData")

    payload = {"candidates": [{"content": {"parts": [{"imageData": encoded}]}}]}
    assert extract_image_data(payload) == raw
    print("✓ imageData")

    assert extract_image_data({}) is None
    assert extract_image_data({"candidates": []}) is None
    assert extract_image_data([]) is None
    assert extract_image_data({"candidates": [{"content": {"parts": [{"imageData": "%%%"}]}}]}) is None
    print("✓ Missing or invalid data")

    try:
        to_jpeg(b"garbage")
        assert False, "Should have raised ValueError"
    except ValueError:
        print("✓ to_jpeg rejects garbage")


def test_gemini_provider():
    """Test the Gemini provider against canned responses."""
    print("\n=== Testing GeminiImageProvider ===")

    settings = Settings(image_api_key="secret", image_api_endpoint="https://gen.test/generate",
                        http_max_retries=1)
    raw = png_bytes()
    payload = {"candidates": [{"content": {"parts": [
        {"inlineData": {"data": base64.b64encode(raw).decode("ascii")}},
    ]}}]}

    session = FakeSession(FakeResponse(200, payload))
    result = GeminiImageProvider(settings, session=session).generate("A lamb on a hill")
    assert result == raw
    method, url, kwargs = session.requests[0]
    assert (method, url) == ("POST", "https://gen.test/generate")
    assert kwargs["headers"]["x-goog-api-key"] == "secret"
    assert kwargs["json"]["contents"][0]["parts"][0]["text"] == "A lamb on a hill"
    print("✓ Image bytes decoded")

    result = GeminiImageProvider(settings, session=FakeSession(FakeResponse(200, {"candidates": []}))).generate("x")
    assert isinstance(result, GenerationFailure)
    assert result.status == 200
    print("✓ No image data is a failure")

    result = GeminiImageProvider(settings, session=FakeSession(FakeResponse(500))).generate("x")
    assert isinstance(result, GenerationFailure)
    print(f"✓ HTTP error is a failure: {result.reason}")

    unconfigured = GeminiImageProvider(Settings(image_api_key=""), session=FakeSession())
    assert isinstance(unconfigured.generate("x"), GenerationFailure)
    print("✓ Missing key is a failure without a request")


def main():
    """Run all tests."""
    test_detect_context()
    test_build_prompt()
    test_cache_key()
    test_placeholder()
    test_generate_and_cache()
    test_failure_yields_uncached_placeholder()
    test_transport_errors_yield_placeholder()
    test_cancellation()
    test_saint_art()
    test_extract_image_data()
    test_gemini_provider()
    print("\nAll image generator tests passed!")


if __name__ == "__main__":
    main()
