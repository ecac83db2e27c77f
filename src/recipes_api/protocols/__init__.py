"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (MongoDB -> in-memory, Redis -> none)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from recipes_api.protocols import RecipeStore, SnapshotCache

    store: RecipeStore = MongoRecipeRepository.create()
    cache: SnapshotCache = RedisSnapshotCache.create()
    ```
"""

from .cache_store import SnapshotCache
from .recipe_store import RecipeStore

__all__ = [
    "RecipeStore",
    "SnapshotCache",
]
