"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from recipes_api.services import RecipeService

    # Using factory method (recommended)
    service = RecipeService.create(store=store, cache=cache)

    # Or manual creation
    service = RecipeService(store=store, cache=RecipeListCache(cache))
    ```
"""

from .recipe_cache import RecipeListCache
from .recipe_service import RecipeService

__all__ = [
    "RecipeListCache",
    "RecipeService",
]
