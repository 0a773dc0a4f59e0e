"""
Cache Services

In-process caches shared across request threads:
- ScriptureCache: resolved scripture keyed by ScriptureReference
- ImageCache: generated artwork (JPEG) in memory and on disk
"""

from .image_cache import ImageCache
from .rwlock import ReadWriteLock
from .scripture_cache import ScriptureCache

__all__ = ["ImageCache", "ReadWriteLock", "ScriptureCache"]
