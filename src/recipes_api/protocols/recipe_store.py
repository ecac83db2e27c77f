"""Recipe store protocol.

Defines the interface for any document store that can hold recipe
records and answer the handful of filtered queries the service needs.

Implementations can include:
- MongoDB (default)
- In-memory stores for tests
"""

from typing import Protocol, runtime_checkable

from recipes_api.entities import RecipeEntity


@runtime_checkable
class RecipeStore(Protocol):
    """Protocol for recipe storage backends.

    Identifiers are passed around as strings. Parsing them into the
    store-native format is the implementation's job; an identifier it
    cannot parse must simply match no record.

    Every method raises StoreError on backend failure.
    """

    def new_id(self) -> str:
        """Generate a fresh, globally unique record identifier."""
        ...

    def find_all(self) -> list[RecipeEntity]:
        """Return every stored recipe in store iteration order."""
        ...

    def find_by_tag(self, tag: str) -> list[RecipeEntity]:
        """Return recipes whose tags contain exactly `tag`."""
        ...

    def insert(self, recipe: RecipeEntity) -> None:
        """Insert a new recipe (its id is already assigned)."""
        ...

    def update(
        self,
        recipe_id: str,
        name: str,
        instructions: list[str],
        ingredients: list[str],
        tags: list[str],
    ) -> int:
        """Overwrite the editable fields of the matching recipe.

        Returns:
            Number of records matched (0 or 1)
        """
        ...

    def delete(self, recipe_id: str) -> int:
        """Delete the matching recipe.

        Returns:
            Number of records deleted (0 or 1)
        """
        ...

    def health_check(self) -> bool:
        """Check if the store is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...
