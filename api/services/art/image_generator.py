# api/services/art/image_generator.py
"""
Sacred art generation with a content-keyed image cache.

Flow for one request:
1. Cache key = sha256(content identity + style tag)
2. Cache hit (memory, then disk) returns without any provider call
3. Miss: build the prompt, call the provider, re-encode as JPEG, store
4. Any provider failure yields the deterministic placeholder, which is
   never cached

Generation never raises to the caller.
"""

import base64
import binascii
import hashlib
import io
import logging
import threading
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Protocol, Union

import requests
from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from core.config import Settings
from services.cache import ImageCache
from services.scripture.models import Verse
from utils.errors import GenerationFailure
from utils.http_retry import post_with_retry

from .prompts import ScriptureContext, build_prompt, build_saint_prompt, detect_context

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "natural_style"
JPEG_QUALITY = 80
PLACEHOLDER_SIZE = 1024


class ImageProvider(Protocol):
    """Turns a prompt into encoded image bytes, or reports why it could not."""

    def generate(self, prompt: str) -> Union[bytes, GenerationFailure]:
        ...


@dataclass(frozen=True)
class GeneratedImage:
    """
    JPEG bytes plus how they were obtained.

    Attributes:
        data: JPEG-encoded image
        cache_key: Content-derived key
        cached: Served from the cache without a provider call
        placeholder: Provider failed (or was skipped); data is the placeholder
        failure: Why the placeholder was used, if it was
    """
    data: bytes
    cache_key: str
    cached: bool = False
    placeholder: bool = False
    failure: Optional[GenerationFailure] = None


def cache_key(content_identity: str, style: str = DEFAULT_STYLE) -> str:
    """Deterministic, filesystem-safe key for (content, style)."""
    digest = hashlib.sha256(f"{content_identity}|{style}".encode("utf-8")).hexdigest()
    return f"{digest[:40]}_{style}"


def to_jpeg(raw: bytes) -> bytes:
    """
    Decode any Pillow-readable image and re-encode it as RGB JPEG.

    Raises:
        ValueError: Bytes are not a readable image
    """
    try:
        with Image.open(io.BytesIO(raw)) as img:
            rgb = img.convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Unreadable image data: {e}")

    out = io.BytesIO()
    rgb.save(out, format="JPEG", quality=JPEG_QUALITY)
    return out.getvalue()


# Deep blue at the center, deep purple midway, deep green at the edge
_GRADIENT_STOPS = [(0.0, (26, 51, 102)), (0.5, (77, 26, 77)), (1.0, (51, 77, 26))]


def _gradient_lut(channel: int) -> list[int]:
    lut = []
    for i in range(256):
        t = i / 255
        for (t0, c0), (t1, c1) in zip(_GRADIENT_STOPS, _GRADIENT_STOPS[1:]):
            if t <= t1:
                frac = (t - t0) / (t1 - t0)
                lut.append(round(c0[channel] + (c1[channel] - c0[channel]) * frac))
                break
    return lut


def _draw_centered(draw: ImageDraw.ImageDraw, width: int, center_y: float,
                   text: str, font, fill) -> None:
    left, top, right, bottom = draw.multiline_textbbox((0, 0), text, font=font, align="center")
    x = (width - (right - left)) / 2 - left
    y = center_y - (bottom - top) / 2 - top
    draw.multiline_text((x, y), text, font=font, fill=fill, align="center")


@lru_cache(maxsize=1)
def render_placeholder(size: int = PLACEHOLDER_SIZE) -> bytes:
    """
    The fallback artwork: radial gradient, faint cross, "Sacred Art" title.

    Identical bytes on every call for the same size.
    """
    radius = Image.radial_gradient("L").resize((size, size))
    base = Image.merge("RGB", [radius.point(_gradient_lut(c)) for c in range(3)]).convert("RGBA")

    overlay = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)
    faint = (255, 255, 255, 26)
    draw.line([(size / 2, size * 0.3), (size / 2, size * 0.7)], fill=faint, width=3)
    draw.line([(size * 0.4, size / 2), (size * 0.6, size / 2)], fill=faint, width=3)

    title_font = ImageFont.load_default(size=32)
    body_font = ImageFont.load_default(size=18)
    _draw_centered(draw, size, size * 0.2 + 25, "Sacred Art", title_font, (255, 255, 255, 255))
    _draw_centered(draw, size, size * 0.75 + 50,
                   "Image generation ready!\n\nConnecting to AI service...",
                   body_font, (255, 255, 255, 230))

    image = Image.alpha_composite(base, overlay).convert("RGB")
    out = io.BytesIO()
    image.save(out, format="JPEG", quality=JPEG_QUALITY)
    return out.getvalue()


def extract_image_data(payload: dict) -> Optional[bytes]:
    """
    Pull the first base64 image out of a generateContent response.

    Looks at candidates[0].content.parts[*] for inlineData.data, then the
    older imageData field.
    """
    if not isinstance(payload, dict):
        return None
    candidates = payload.get("candidates") or []
    if not candidates:
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []

    for part in parts:
        encoded = (part.get("inlineData") or {}).get("data") or part.get("imageData")
        if not encoded:
            continue
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            logger.warning("Image part was not valid base64; trying next part")
    return None


class GeminiImageProvider:
    """
    Image generation through the Gemini generateContent endpoint.

    Usage:
        provider = GeminiImageProvider(Settings())
        result = provider.generate("A shepherd with his flock at dawn")
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.endpoint = settings.image_api_endpoint
        self.api_key = settings.image_api_key
        self._timeout = settings.image_request_timeout
        self._max_retries = settings.http_max_retries
        self._session = session or requests.Session()

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def generate(self, prompt: str) -> Union[bytes, GenerationFailure]:
        if not self.is_configured():
            return GenerationFailure("IMAGE_API_KEY not configured")

        try:
            response = post_with_retry(
                self.endpoint,
                json={"contents": [{"parts": [{"text": prompt}]}]},
                headers={"Content-Type": "application/json", "x-goog-api-key": self.api_key},
                timeout=self._timeout,
                max_retries=self._max_retries,
                session=self._session,
            )
        except (RuntimeError, requests.RequestException) as e:
            return GenerationFailure(str(e))

        try:
            payload = response.json()
        except ValueError as e:
            return GenerationFailure(f"Unparseable response: {e}", response.status_code)

        data = extract_image_data(payload)
        if data is None:
            return GenerationFailure("Response contained no image data", response.status_code)
        return data


class ImageGenerator:
    """
    Generates and caches artwork for scripture passages and saints.

    Usage:
        generator = ImageGenerator(GeminiImageProvider(settings), ImageCache(path))
        image = generator.generate(verse, ScriptureContext.GOSPEL)
        Path("art.jpg").write_bytes(image.data)
    """

    def __init__(self, provider: ImageProvider, cache: ImageCache,
                 style: str = DEFAULT_STYLE):
        self.provider = provider
        self.cache = cache
        self.style = style

    def _render(self, key: str, prompt: str,
                cancel: Optional[threading.Event]) -> GeneratedImage:
        if cancel is not None and cancel.is_set():
            logger.info(f"Generation for {key} cancelled before provider call")
            return GeneratedImage(render_placeholder(), key, placeholder=True,
                                  failure=GenerationFailure("cancelled"))

        try:
            result = self.provider.generate(prompt)
        except Exception as e:
            # Provider bugs become a placeholder, never an error for the caller
            logger.warning(f"Image provider raised for {key}: {e}; using placeholder")
            return GeneratedImage(render_placeholder(), key, placeholder=True,
                                  failure=GenerationFailure(str(e)))

        if isinstance(result, GenerationFailure):
            logger.warning(f"Image generation failed for {key}: {result.reason}; using placeholder")
            return GeneratedImage(render_placeholder(), key, placeholder=True, failure=result)

        try:
            jpeg = to_jpeg(result)
        except ValueError as e:
            logger.warning(f"Provider returned unusable image for {key}: {e}; using placeholder")
            return GeneratedImage(render_placeholder(), key, placeholder=True,
                                  failure=GenerationFailure(str(e)))

        # A cancelled request must not publish its result
        if cancel is not None and cancel.is_set():
            logger.info(f"Generation for {key} cancelled; discarding result")
            return GeneratedImage(jpeg, key)

        self.cache.set(key, jpeg)
        logger.info(f"Generated and cached artwork {key}")
        return GeneratedImage(jpeg, key)

    def generate(self, verse: Verse,
                 context: Optional[ScriptureContext] = None,
                 theme: Optional[str] = None,
                 liturgical_day=None,
                 style: Optional[str] = None,
                 cancel: Optional[threading.Event] = None) -> GeneratedImage:
        """
        Artwork for a verse or combined reading.

        Args:
            verse: Passage to depict (its content identity keys the cache)
            context: Passage classification (detected from the verse if omitted)
            theme: Devotional theme for the prompt
            liturgical_day: Supplies the season's art theme
            style: Style tag, part of the cache key
            cancel: Set by the caller to abandon the request

        Returns:
            GeneratedImage, never raises
        """
        style = style or self.style
        key = cache_key(verse.content_identity, style)

        cached = self.cache.get(key)
        if cached is not None:
            return GeneratedImage(cached, key, cached=True)

        context = context or detect_context(verse.text, verse.book_name)
        prompt = build_prompt(
            verse.text, verse.reference_text, context,
            theme=theme, liturgical_day=liturgical_day,
        )
        return self._render(key, prompt, cancel)

    def generate_saint_art(self, saint, cancel: Optional[threading.Event] = None) -> GeneratedImage:
        """Iconographic artwork for a saint, cached like scripture art."""
        key = cache_key(f"saint:{saint.id}|{saint.short_biography}", self.style)

        cached = self.cache.get(key)
        if cached is not None:
            return GeneratedImage(cached, key, cached=True)

        return self._render(key, build_saint_prompt(saint), cancel)
