"""Cache-aside protocol for the recipe list.

Three explicit steps, each in one place:

1. read()       - try the snapshot; None means "go to the store"
2. populate()   - after a store read, write the snapshot back
3. invalidate() - after every committed write, drop the snapshot

Known staleness window: a list that read the store before a concurrent
write committed can populate() after that write's invalidate(). The stale
snapshot then lives until the next write.
"""

import logging

from recipes_api.entities import RecipeEntity
from recipes_api.errors import CacheError
from recipes_api.protocols import SnapshotCache

logger = logging.getLogger(__name__)


class RecipeListCache:
    """Cache-aside wrapper around an optional SnapshotCache.

    With no backend every read is a miss and populate/invalidate do
    nothing, so callers never branch on whether caching is enabled.
    """

    def __init__(self, backend: SnapshotCache | None = None) -> None:
        self._backend = backend

    @property
    def enabled(self) -> bool:
        return self._backend is not None

    def read(self) -> list[RecipeEntity] | None:
        """Return the cached list, or None on a miss.

        Raises:
            CacheError: If the backend fails (distinct from a miss)
        """
        if self._backend is None:
            return None

        recipes = self._backend.get()
        if recipes is None:
            logger.info("Recipe list not found in cache, querying the store")
        else:
            logger.info("Recipe list served from cache (%d recipes)", len(recipes))
        return recipes

    def populate(self, recipes: list[RecipeEntity]) -> None:
        """Write the list back to the cache. Failures are logged only."""
        if self._backend is None:
            return

        try:
            self._backend.set(recipes)
        except CacheError as e:
            logger.error("Failed to write recipe list to cache: %s", e)
            return
        logger.info("Cached recipe list (%d recipes)", len(recipes))

    def invalidate(self, reason: str) -> None:
        """Drop the snapshot after a write. Failures are logged only.

        Args:
            reason: What changed, for the log line
        """
        if self._backend is None:
            return

        try:
            removed = self._backend.delete()
        except CacheError as e:
            logger.error("Failed to invalidate cached recipe list after %s: %s", reason, e)
            return
        logger.info("%s, cached recipe list %s", reason, "removed" if removed else "was not cached")

    def is_healthy(self) -> bool | None:
        """Backend health, or None when caching is disabled."""
        if self._backend is None:
            return None
        return self._backend.health_check()
