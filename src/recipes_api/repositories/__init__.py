"""Repository layer for data access.

This layer abstracts external dependencies (MongoDB, Redis)
behind protocol-based interfaces. This enables:
- Easy swapping of implementations
- Unit testing with in-memory implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from recipes_api.protocols import RecipeStore, SnapshotCache

from .mongo_repository import MongoRecipeRepository
from .redis_repository import RedisSnapshotCache

__all__ = [
    "RecipeStore",
    "SnapshotCache",
    "MongoRecipeRepository",
    "RedisSnapshotCache",
]
