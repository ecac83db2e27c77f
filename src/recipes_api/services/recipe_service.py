"""Recipe service for core business logic.

This service mediates all access to persisted recipes, coordinating
the store (data access) and the list cache (cache-aside).
"""

from datetime import datetime, timezone
from typing import Any, Callable

from pydantic import ValidationError

from recipes_api.dto import RecipeRequest
from recipes_api.entities import RecipeEntity
from recipes_api.errors import ClientInputError, describe_validation_errors
from recipes_api.protocols import RecipeStore, SnapshotCache
from recipes_api.services.recipe_cache import RecipeListCache


def utc_now() -> datetime:
    """Current UTC time truncated to milliseconds (MongoDB's precision)."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def parse_candidate(candidate: Any) -> RecipeRequest:
    """Bind a decoded JSON body to the recipe shape.

    Raises:
        ClientInputError: If the body is not structurally a recipe
    """
    if isinstance(candidate, RecipeRequest):
        return candidate
    try:
        return RecipeRequest.model_validate(candidate)
    except ValidationError as e:
        raise ClientInputError(describe_validation_errors(e.errors())) from e


class RecipeService:
    """Core recipe orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - RecipeStore: MongoDB in production, in-memory in tests
    - SnapshotCache: Redis, or None to disable caching

    Store and cache failures propagate as InternalError subclasses;
    nothing is retried.

    Example:
        ```python
        from recipes_api.repositories import MongoRecipeRepository, RedisSnapshotCache
        from recipes_api.services import RecipeService

        service = RecipeService.create(
            store=MongoRecipeRepository.create(),
            cache=RedisSnapshotCache.create(),
        )

        # Or without caching
        service = RecipeService.create(store=MongoRecipeRepository.create())
        ```
    """

    def __init__(
        self,
        store: RecipeStore,
        cache: RecipeListCache | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the recipe service.

        Args:
            store: Recipe storage backend (required).
            cache: Cache-aside wrapper. Defaults to a disabled cache.
            clock: Source of publication timestamps.
        """
        self._store = store
        self._cache = cache or RecipeListCache()
        self._clock = clock

    @classmethod
    def create(
        cls,
        store: RecipeStore,
        cache: SnapshotCache | None = None,
    ) -> "RecipeService":
        """Factory method to create RecipeService from raw backends.

        Args:
            store: Recipe storage backend (required).
            cache: Snapshot cache backend. If None, caching is disabled.

        Returns:
            Configured RecipeService instance
        """
        return cls(store=store, cache=RecipeListCache(cache))

    def list_recipes(self) -> list[RecipeEntity]:
        """List every recipe, cache first.

        Business logic:
        1. Try the cached snapshot
        2. On a miss, read the store
        3. Write the result back to the cache (best effort)

        Returns:
            All stored recipes
        """
        recipes = self._cache.read()
        if recipes is not None:
            return recipes

        recipes = self._store.find_all()
        self._cache.populate(recipes)
        return recipes

    def create_recipe(self, candidate: Any) -> RecipeEntity:
        """Validate and store a new recipe.

        Business logic:
        1. Bind the candidate to the recipe shape
        2. Assign a fresh id and the publication time
        3. Insert, then invalidate the cached list

        Args:
            candidate: Decoded JSON body (or a RecipeRequest)

        Returns:
            The stored recipe

        Raises:
            ClientInputError: If the candidate is malformed (nothing is stored)
        """
        request = parse_candidate(candidate)
        recipe = RecipeEntity(
            id=self._store.new_id(),
            name=request.name,
            instructions=list(request.instructions),
            ingredients=list(request.ingredients),
            tags=list(request.tags),
            published_at=self._clock(),
        )

        self._store.insert(recipe)
        self._cache.invalidate(f"Inserted recipe {recipe.id}")
        return recipe

    def update_recipe(self, recipe_id: str, candidate: Any) -> int:
        """Overwrite name, instructions, ingredients and tags of a recipe.

        The update is unconditional: no existence check and no concurrency
        control. Id and publication time are never touched.

        Args:
            recipe_id: Identifier from the request path
            candidate: Decoded JSON body (or a RecipeRequest)

        Returns:
            Number of records matched (0 when the id is unknown or malformed)

        Raises:
            ClientInputError: If the candidate is malformed
        """
        request = parse_candidate(candidate)
        matched = self._store.update(
            recipe_id,
            name=request.name,
            instructions=list(request.instructions),
            ingredients=list(request.ingredients),
            tags=list(request.tags),
        )
        self._cache.invalidate(f"Updated recipe {recipe_id} (matched {matched})")
        return matched

    def delete_recipe(self, recipe_id: str) -> int:
        """Delete a recipe.

        Args:
            recipe_id: Identifier from the request path

        Returns:
            Number of records deleted (0 when the id is unknown or malformed)
        """
        deleted = self._store.delete(recipe_id)
        self._cache.invalidate(f"Deleted recipe {recipe_id} (deleted {deleted})")
        return deleted

    def search_by_tag(self, tag: str) -> list[RecipeEntity]:
        """Find recipes carrying exactly `tag`. Never touches the cache."""
        return self._store.find_by_tag(tag)

    def is_healthy(self) -> tuple[bool, bool | None]:
        """Check backend reachability.

        Returns:
            (store healthy, cache healthy or None when caching is disabled)
        """
        return self._store.health_check(), self._cache.is_healthy()

    @property
    def cache_enabled(self) -> bool:
        """Whether list results are cached."""
        return self._cache.enabled

