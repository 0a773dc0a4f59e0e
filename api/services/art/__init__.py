# api/services/art/__init__.py
"""
Sacred art generation.

Provides:
- ScriptureContext classification and prompt building
- ImageGenerator with a content-keyed memory + disk cache
- GeminiImageProvider for the image generation API
"""

from .image_generator import (
    GeminiImageProvider,
    GeneratedImage,
    ImageGenerator,
    cache_key,
    render_placeholder,
)
from .prompts import ScriptureContext, build_prompt, detect_context, detect_theme

__all__ = [
    "GeminiImageProvider",
    "GeneratedImage",
    "ImageGenerator",
    "cache_key",
    "render_placeholder",
    "ScriptureContext",
    "build_prompt",
    "detect_context",
    "detect_theme",
]
