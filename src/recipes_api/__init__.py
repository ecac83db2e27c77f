"""Recipes API - CRUD and tag search over recipes with a cached list.

This package provides a layered architecture:

Layers:
    - protocols: Interface contracts (RecipeStore, SnapshotCache)
    - repositories: Data access implementations (MongoDB, Redis)
    - services: Business logic and cache-aside policy
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from recipes_api.repositories import MongoRecipeRepository, RedisSnapshotCache
    from recipes_api.services import RecipeService

    service = RecipeService.create(
        store=MongoRecipeRepository.create(),
        cache=RedisSnapshotCache.create(),
    )
    ```

For HTTP API:
    ```python
    from recipes_api.api.app import app
    ```
"""

from recipes_api.config import get_mongo_client, get_redis_client, settings
from recipes_api.dto import RecipeRequest, RecipeResponse
from recipes_api.entities import RecipeEntity
from recipes_api.errors import ClientInputError, InternalError
from recipes_api.handlers import RecipeHandler
from recipes_api.protocols import RecipeStore, SnapshotCache
from recipes_api.repositories import MongoRecipeRepository, RedisSnapshotCache
from recipes_api.services import RecipeListCache, RecipeService

__all__ = [
    # Configuration
    "settings",
    "get_mongo_client",
    "get_redis_client",
    # Errors
    "ClientInputError",
    "InternalError",
    # Protocols (interfaces)
    "RecipeStore",
    "SnapshotCache",
    # Services (business logic)
    "RecipeService",
    "RecipeListCache",
    # Handlers (HTTP)
    "RecipeHandler",
    # Repositories (data access)
    "MongoRecipeRepository",
    "RedisSnapshotCache",
    # Entities (domain models)
    "RecipeEntity",
    # DTOs (API contracts)
    "RecipeRequest",
    "RecipeResponse",
]
