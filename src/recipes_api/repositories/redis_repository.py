"""Redis implementation of SnapshotCache.

The whole recipe list is stored as one JSON document under a single key,
written without expiration. It's the default implementation and satisfies
the SnapshotCache protocol.
"""

import json
import logging
from datetime import datetime
from typing import Any

import redis

from recipes_api.config import get_redis_client, settings
from recipes_api.entities import RecipeEntity
from recipes_api.errors import CacheError

logger = logging.getLogger(__name__)


def _encode(recipes: list[RecipeEntity]) -> str:
    return json.dumps(
        [
            {
                "id": recipe.id,
                "name": recipe.name,
                "instructions": recipe.instructions,
                "ingredients": recipe.ingredients,
                "tags": recipe.tags,
                "published_at": recipe.published_at.isoformat(),
            }
            for recipe in recipes
        ]
    )


def _decode(raw: bytes | str) -> list[RecipeEntity]:
    items: list[dict[str, Any]] = json.loads(raw)
    return [
        RecipeEntity(
            id=item["id"],
            name=item["name"],
            instructions=item["instructions"],
            ingredients=item["ingredients"],
            tags=item["tags"],
            published_at=datetime.fromisoformat(item["published_at"]),
        )
        for item in items
    ]


class RedisSnapshotCache:
    """Redis implementation of the recipe list cache.

    This class satisfies the SnapshotCache protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key: str | None = None,
    ) -> None:
        """Initialize the Redis snapshot cache.

        Args:
            redis_client: Redis client instance. If None, creates default.
            key: Key holding the snapshot. Defaults to settings.
        """
        self._client = redis_client or get_redis_client()
        self._key = key or settings.cache_key

    @classmethod
    def create(
        cls,
        redis_client: redis.Redis | None = None,
        key: str | None = None,
    ) -> "RedisSnapshotCache":
        """Factory method to create RedisSnapshotCache with defaults.

        Args:
            redis_client: Redis client. If None, builds one from settings.
            key: Snapshot key. If None, uses settings.

        Returns:
            Configured RedisSnapshotCache
        """
        return cls(redis_client=redis_client, key=key)

    def get(self) -> list[RecipeEntity] | None:
        """Read the snapshot.

        A snapshot that cannot be decoded is logged and reported as a
        miss so the next read repopulates it.

        Returns:
            The cached recipes, or None on a miss

        Raises:
            CacheError: If Redis cannot be queried
        """
        try:
            raw = self._client.get(self._key)
        except redis.RedisError as e:
            raise CacheError(str(e)) from e

        if raw is None:
            return None

        try:
            return _decode(raw)  # type: ignore[arg-type]
        except (ValueError, KeyError, TypeError) as e:
            logger.warning("Discarding unreadable snapshot under %r: %s", self._key, e)
            return None

    def set(self, recipes: list[RecipeEntity]) -> None:
        """Write the snapshot with no expiration.

        Raises:
            CacheError: If the list cannot be encoded or Redis rejects the write
        """
        try:
            payload = _encode(recipes)
        except (TypeError, ValueError) as e:
            raise CacheError(f"Cannot encode recipe list: {e}") from e

        try:
            self._client.set(self._key, payload)
        except redis.RedisError as e:
            raise CacheError(str(e)) from e

    def delete(self) -> bool:
        """Remove the snapshot.

        Raises:
            CacheError: If Redis cannot be reached
        """
        try:
            result: int = self._client.delete(self._key)  # type: ignore[assignment]
        except redis.RedisError as e:
            raise CacheError(str(e)) from e
        return result > 0

    def ping(self) -> None:
        """Ping the server.

        Raises:
            CacheError: If Redis cannot be reached
        """
        try:
            self._client.ping()
        except redis.RedisError as e:
            raise CacheError(str(e)) from e

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            self.ping()
            return True
        except CacheError:
            return False

    def close(self) -> None:
        """Release the client's connection pool."""
        self._client.close()

