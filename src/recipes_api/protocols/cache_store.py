"""Snapshot cache protocol.

Defines the interface for a key-value cache holding one serialized
snapshot of the full recipe list.

Implementations can include:
- Redis (default)
- In-memory caches for tests
"""

from typing import Protocol, runtime_checkable

from recipes_api.entities import RecipeEntity


@runtime_checkable
class SnapshotCache(Protocol):
    """Protocol for the recipe list cache backend.

    A miss is reported as None, never as an exception. Backend failures
    raise CacheError.
    """

    def get(self) -> list[RecipeEntity] | None:
        """Read the cached snapshot.

        Returns:
            The cached recipes, or None on a miss
        """
        ...

    def set(self, recipes: list[RecipeEntity]) -> None:
        """Write the snapshot with no expiration."""
        ...

    def delete(self) -> bool:
        """Remove the snapshot.

        Returns:
            True if an entry was removed, False if there was none
        """
        ...

    def health_check(self) -> bool:
        """Check if the cache backend is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...
