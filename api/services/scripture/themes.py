# api/services/scripture/themes.py
"""Devotional theme detection from scripture wording."""

# First keyword found wins
_THEMES = [
    ("love", "Love and Charity"),
    ("faith", "Faith and Trust"),
    ("hope", "Hope and Perseverance"),
    ("forgive", "Forgiveness and Mercy"),
    ("pray", "Prayer and Devotion"),
    ("blessed", "Blessings and Beatitudes"),
]

DEFAULT_THEME = "Scripture Meditation"


def detect_theme(text: str) -> str:
    lowered = (text or "").lower()
    for keyword, theme in _THEMES:
        if keyword in lowered:
            return theme
    return DEFAULT_THEME


def theme_keyword(theme: str) -> str:
    """The search keyword behind a detected theme; other themes pass through."""
    for keyword, name in _THEMES:
        if name == theme:
            return keyword
    return theme
