"""
Shared fixtures: in-memory backends standing in for MongoDB and Redis.
"""

import uuid
from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from recipes_api.api.app import create_app
from recipes_api.entities import RecipeEntity
from recipes_api.errors import CacheError, StoreError
from recipes_api.handlers import RecipeHandler
from recipes_api.services import RecipeService


class InMemoryRecipeStore:
    """Dict-backed RecipeStore keeping insertion order."""

    def __init__(self) -> None:
        self._recipes: dict[str, RecipeEntity] = {}
        self.fail = False
        self.find_all_calls = 0

    def _check(self) -> None:
        if self.fail:
            raise StoreError("connection refused")

    def new_id(self) -> str:
        return uuid.uuid4().hex[:24]

    def find_all(self) -> list[RecipeEntity]:
        self._check()
        self.find_all_calls += 1
        return list(self._recipes.values())

    def find_by_tag(self, tag: str) -> list[RecipeEntity]:
        self._check()
        return [recipe for recipe in self._recipes.values() if tag in recipe.tags]

    def insert(self, recipe: RecipeEntity) -> None:
        self._check()
        self._recipes[recipe.id] = recipe

    def update(self, recipe_id, name, instructions, ingredients, tags) -> int:
        self._check()
        if recipe_id not in self._recipes:
            return 0
        self._recipes[recipe_id] = replace(
            self._recipes[recipe_id],
            name=name,
            instructions=instructions,
            ingredients=ingredients,
            tags=tags,
        )
        return 1

    def delete(self, recipe_id: str) -> int:
        self._check()
        return 1 if self._recipes.pop(recipe_id, None) is not None else 0

    def health_check(self) -> bool:
        return not self.fail

    def count(self) -> int:
        return len(self._recipes)


class InMemorySnapshotCache:
    """SnapshotCache holding one list, with per-operation failure switches."""

    def __init__(self) -> None:
        self.snapshot: list[RecipeEntity] | None = None
        self.fail_reads = False
        self.fail_writes = False
        self.fail_deletes = False
        self.deletes = 0

    def get(self) -> list[RecipeEntity] | None:
        if self.fail_reads:
            raise CacheError("cache read timed out")
        return None if self.snapshot is None else list(self.snapshot)

    def set(self, recipes: list[RecipeEntity]) -> None:
        if self.fail_writes:
            raise CacheError("OOM command not allowed")
        self.snapshot = list(recipes)

    def delete(self) -> bool:
        if self.fail_deletes:
            raise CacheError("connection reset")
        self.deletes += 1
        existed = self.snapshot is not None
        self.snapshot = None
        return existed

    def health_check(self) -> bool:
        return not (self.fail_reads or self.fail_writes or self.fail_deletes)


TEA = {
    "name": "Tea",
    "instructions": ["Boil water", "Add leaves"],
    "ingredients": ["water", "tea leaves"],
    "tags": ["drink"],
}


@pytest.fixture
def store():
    """Create an empty in-memory store."""
    return InMemoryRecipeStore()


@pytest.fixture
def cache():
    """Create an empty in-memory snapshot cache."""
    return InMemorySnapshotCache()


@pytest.fixture
def service(store, cache):
    """Create a recipe service with caching enabled."""
    return RecipeService.create(store=store, cache=cache)


@pytest.fixture
def client(service):
    """Create a test client over the in-memory backends."""
    return TestClient(create_app(RecipeHandler(recipe_service=service)))


@pytest.fixture
def uncached_client(store):
    """Create a test client with caching disabled."""
    service = RecipeService.create(store=store)
    return TestClient(create_app(RecipeHandler(recipe_service=service)))


@pytest.fixture
def strict_client(service):
    """Create a test client answering 400 for malformed bodies."""
    handler = RecipeHandler(recipe_service=service, client_error_status=400)
    return TestClient(create_app(handler))


@pytest.fixture
def tea():
    """Body of the round-trip example recipe."""
    return {key: list(value) if isinstance(value, list) else value for key, value in TEA.items()}
