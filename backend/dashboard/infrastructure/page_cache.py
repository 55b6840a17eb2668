"""Page Cache: process-local store of rendered route payloads.

Invariants:
    - Keys are request targets: path plus optional "?query"
    - revalidate_path(p) drops every key whose path component equals p
      and bumps p's generation
    - set_if_current never stores a payload computed before the last
      revalidation of its path
    - No TTL, no size-based eviction; invalidation is the only way out

Design Decisions:
    - Module-level singleton like db_manager: single-process uvicorn, entries
      are lost on restart and recomputed on next access
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)


def _path_of(key: str) -> str:
    return key.split("?", 1)[0]


class PageCache:
    def __init__(self):
        self._entries: dict[str, Any] = {}
        self._generations: dict[str, int] = {}

    def get(self, key: str) -> Any | None:
        return self._entries.get(key)

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = value

    def generation(self, path: str) -> int:
        """Revalidation count for `path`. Read it before computing a payload."""
        return self._generations.get(path, 0)

    def set_if_current(self, key: str, value: Any, generation: int) -> bool:
        """Store `value` unless its path was revalidated since `generation`."""
        path = _path_of(key)
        if self.generation(path) != generation:
            logger.debug(
                f"Discarding stale payload for {key}", extra={"path": key},
            )
            return False
        self._entries[key] = value
        return True

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def revalidate_path(self, path: str) -> int:
        """Invalidate all cached variants of `path`. Returns the number dropped."""
        self._generations[path] = self.generation(path) + 1
        stale = [k for k in self._entries if _path_of(k) == path]
        for key in stale:
            del self._entries[key]
        logger.info(
            f"Revalidated {path} ({len(stale)} cached entries dropped)",
            extra={"path": path},
        )
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()


page_cache = PageCache()


def get_page_cache() -> PageCache:
    """FastAPI dependency for the process-wide page cache."""
    return page_cache
