"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from recipes_api.config import Settings, settings
from recipes_api.errors import InternalError
from recipes_api.handlers import RecipeHandler
from recipes_api.repositories import MongoRecipeRepository, RedisSnapshotCache
from recipes_api.services import RecipeService

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> RecipeHandler:
    """Dependency injection for RecipeHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The RecipeHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "recipe_handler", None)
    if handler is None:
        raise RuntimeError("RecipeHandler not initialized. Check lifespan setup.")
    return handler


def connect_store(config: Settings) -> MongoRecipeRepository:
    """Connect to MongoDB and verify it answers, or exit the process."""
    store = MongoRecipeRepository.create(
        db_name=config.mongo_db,
        collection_name=config.mongo_collection,
    )
    try:
        store.ping()
    except InternalError as e:
        logger.critical("Cannot reach MongoDB (database %r): %s", config.mongo_db, e)
        store.close()
        raise SystemExit(1) from e

    logger.info("Connected to MongoDB database %r", config.mongo_db)
    return store


def connect_cache(config: Settings) -> RedisSnapshotCache:
    """Connect to Redis and verify it answers, or exit the process."""
    cache = RedisSnapshotCache.create(key=config.cache_key)
    try:
        cache.ping()
    except InternalError as e:
        logger.critical("Cannot reach Redis: %s", e)
        cache.close()
        raise SystemExit(1) from e

    logger.info("Connected to Redis, caching recipe list under %r", config.cache_key)
    return cache


def connect_backends(
    config: Settings,
) -> tuple[MongoRecipeRepository, RedisSnapshotCache | None]:
    """Connect the store and, when enabled, the cache.

    If the cache cannot be reached the already-open store is closed
    before the process exits.
    """
    store = connect_store(config)
    if not config.cache_enabled:
        logger.info("Caching disabled, every list reads MongoDB")
        return store, None

    try:
        return store, connect_cache(config)
    except SystemExit:
        store.close()
        raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Store (MongoDB) and, when enabled, cache (Redis) - both pinged,
       an unreachable backend terminates the process
    2. Service (business logic) - stored in app.state.recipe_service
    3. Handler (HTTP endpoints) - stored in app.state.recipe_handler

    A handler injected through create_app() skips all of this.

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Closes backend clients and removes services from app.state
    """
    if getattr(app.state, "recipe_handler", None) is not None:
        yield
        return

    store, cache = connect_backends(settings)

    recipe_service = RecipeService.create(store=store, cache=cache)
    recipe_handler = RecipeHandler(
        recipe_service=recipe_service,
        client_error_status=settings.client_error_status,
    )

    # Store in app.state (FastAPI pattern)
    app.state.recipe_service = recipe_service
    app.state.recipe_handler = recipe_handler

    logger.info("Recipe service initialized")

    yield

    # Cleanup - remove from app.state
    del app.state.recipe_handler
    del app.state.recipe_service
    store.close()
    if cache is not None:
        cache.close()
    logger.info("Recipe service shut down")


# Type alias for cleaner dependency injection
HandlerDep = Annotated[RecipeHandler, Depends(get_handler)]
