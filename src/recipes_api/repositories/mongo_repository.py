"""MongoDB implementation of RecipeStore.

Recipes live in one collection as
``{_id: ObjectId, name, instructions, ingredients, tags, publishedAt}``.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from recipes_api.config import get_mongo_client, settings
from recipes_api.entities import RecipeEntity
from recipes_api.errors import StoreError

logger = logging.getLogger(__name__)

# Matches no document; stands in for identifiers that fail to parse
NULL_OBJECT_ID = ObjectId("0" * 24)


def to_object_id(recipe_id: str) -> ObjectId:
    """Parse a hex identifier, mapping malformed input to NULL_OBJECT_ID."""
    if ObjectId.is_valid(recipe_id):
        return ObjectId(recipe_id)
    logger.warning("Malformed recipe id %r matches no record", recipe_id)
    return NULL_OBJECT_ID


def _published_at(doc: dict[str, Any]) -> datetime:
    published_at = doc.get("publishedAt")
    if isinstance(published_at, datetime):
        return published_at
    # Older documents lack publishedAt; the ObjectId carries creation time
    if isinstance(doc["_id"], ObjectId):
        return doc["_id"].generation_time
    return datetime.fromtimestamp(0, timezone.utc)


def _strings(values: Any) -> list[str]:
    return [str(value) for value in values or []]


def _to_entity(doc: dict[str, Any]) -> RecipeEntity:
    name = doc.get("name")
    return RecipeEntity(
        id=str(doc["_id"]),
        name="" if name is None else str(name),
        instructions=_strings(doc.get("instructions")),
        ingredients=_strings(doc.get("ingredients")),
        tags=_strings(doc.get("tags")),
        published_at=_published_at(doc),
    )


def _to_document(recipe: RecipeEntity) -> dict[str, Any]:
    return {
        "_id": ObjectId(recipe.id),
        "name": recipe.name,
        "instructions": recipe.instructions,
        "ingredients": recipe.ingredients,
        "tags": recipe.tags,
        "publishedAt": recipe.published_at,
    }


class MongoRecipeRepository:
    """MongoDB implementation of the recipe store.

    This class satisfies the RecipeStore protocol through structural
    typing - no explicit inheritance needed.

    Every pymongo failure is re-raised as StoreError carrying the driver's
    message.
    """

    def __init__(
        self,
        collection: Collection,
        client: MongoClient | None = None,
    ) -> None:
        """Initialize the Mongo recipe repository.

        Args:
            collection: The recipes collection.
            client: Owning client, used for pings and closing.
        """
        self._collection = collection
        self._client = client

    @classmethod
    def create(
        cls,
        client: MongoClient | None = None,
        db_name: str | None = None,
        collection_name: str | None = None,
    ) -> "MongoRecipeRepository":
        """Factory method to create MongoRecipeRepository with defaults.

        Args:
            client: Mongo client. If None, builds one from settings.
            db_name: Database name. If None, uses settings.
            collection_name: Collection name. If None, uses settings.

        Returns:
            Configured MongoRecipeRepository
        """
        client = client or get_mongo_client()
        collection = client[db_name or settings.mongo_db][
            collection_name or settings.mongo_collection
        ]
        return cls(collection=collection, client=client)

    def new_id(self) -> str:
        return str(ObjectId())

    def find_all(self) -> list[RecipeEntity]:
        return self._find({})

    def find_by_tag(self, tag: str) -> list[RecipeEntity]:
        # Equality against an array field matches any element
        return self._find({"tags": tag})

    def _find(self, query: dict[str, Any]) -> list[RecipeEntity]:
        try:
            return [_to_entity(doc) for doc in self._collection.find(query)]
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    def insert(self, recipe: RecipeEntity) -> None:
        try:
            self._collection.insert_one(_to_document(recipe))
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    def update(
        self,
        recipe_id: str,
        name: str,
        instructions: list[str],
        ingredients: list[str],
        tags: list[str],
    ) -> int:
        try:
            result = self._collection.update_one(
                {"_id": to_object_id(recipe_id)},
                {
                    "$set": {
                        "name": name,
                        "instructions": instructions,
                        "ingredients": ingredients,
                        "tags": tags,
                    }
                },
            )
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        return result.matched_count

    def delete(self, recipe_id: str) -> int:
        try:
            result = self._collection.delete_one({"_id": to_object_id(recipe_id)})
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        return result.deleted_count

    def ping(self) -> None:
        """Ping the primary.

        Raises:
            StoreError: If the server cannot be reached
        """
        client = self._client or self._collection.database.client
        try:
            client.admin.command("ping")
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    def health_check(self) -> bool:
        """Check if MongoDB is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            self.ping()
            return True
        except StoreError:
            return False

    def close(self) -> None:
        """Close the owning client, if this repository created one."""
        if self._client is not None:
            self._client.close()

    @property
    def collection(self) -> Collection:
        """Get the underlying collection."""
        return self._collection
