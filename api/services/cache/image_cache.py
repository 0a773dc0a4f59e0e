"""
Image Cache

Generated artwork keyed by a content-derived cache key. Entries live in
memory and as JPEG files ("<key>.jpg") under the cache directory, so
artwork survives restarts.
"""

import logging
import re
from pathlib import Path
from typing import Dict, Optional, Union

from .rwlock import ReadWriteLock

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class ImageCache:
    """Memory + disk cache of JPEG bytes with a single-writer discipline."""

    def __init__(self, cache_dir: Union[str, Path]):
        self.cache_dir = Path(cache_dir)
        self._memory: Dict[str, bytes] = {}
        self._lock = ReadWriteLock()

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Unsafe image cache key: {key!r}")
        return self.cache_dir / f"{key}.jpg"

    def get(self, key: str) -> Optional[bytes]:
        """Return cached JPEG bytes from memory, then disk; None on a miss."""
        with self._lock.read():
            data = self._memory.get(key)
        if data is not None:
            logger.debug(f"Image cache hit (memory) for {key}")
            return data

        path = self._path(key)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Failed to read cached image {path}: {e}")
            return None

        with self._lock.write():
            self._memory.setdefault(key, data)
        logger.debug(f"Image cache hit (disk) for {key}")
        return data

    def set(self, key: str, data: bytes) -> None:
        """Store JPEG bytes in memory and persist them to disk."""
        path = self._path(key)
        with self._lock.write():
            self._memory[key] = data
            try:
                self.cache_dir.mkdir(parents=True, exist_ok=True)
                tmp = path.with_suffix(".tmp")
                tmp.write_bytes(data)
                tmp.replace(path)
            except OSError as e:
                logger.warning(f"Failed to write cache file {path}: {e}")

    def __contains__(self, key: str) -> bool:
        with self._lock.read():
            if key in self._memory:
                return True
        return self._path(key).exists()

    def memory_size(self) -> int:
        with self._lock.read():
            return len(self._memory)
