"""HTTP handlers for recipe operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes and error mapping.
"""

from typing import Any

from fastapi import HTTPException, status

from recipes_api.dto import HealthCheckResponse, MessageResponse, RecipeResponse
from recipes_api.entities import RecipeEntity
from recipes_api.errors import ClientInputError, InternalError
from recipes_api.services import RecipeService


def to_response(recipe: RecipeEntity) -> RecipeResponse:
    return RecipeResponse(
        id=recipe.id,
        name=recipe.name,
        instructions=recipe.instructions,
        ingredients=recipe.ingredients,
        tags=recipe.tags,
        published_at=recipe.published_at,
    )


class RecipeHandler:
    """HTTP handlers for recipe operations.

    This handler delegates business logic to RecipeService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes
    - Error handling and responses

    Methods are synchronous: FastAPI runs them in its thread pool, so a
    slow backend call only blocks its own request.

    Example:
        ```python
        from recipes_api.handlers import RecipeHandler

        handler = RecipeHandler(recipe_service=service)

        @app.get("/recipes", response_model=list[RecipeResponse])
        def list_recipes():
            return handler.list_recipes()
        ```
    """

    def __init__(
        self,
        recipe_service: RecipeService,
        client_error_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        """Initialize the recipe handler.

        Args:
            recipe_service: The recipe service for business logic (required).
            client_error_status: Status for malformed bodies (500 keeps
                compatibility with existing clients, 400 is stricter).
        """
        self._recipes = recipe_service
        self._client_error_status = client_error_status

    @property
    def client_error_status(self) -> int:
        return self._client_error_status

    def _client_error(self, error: ClientInputError) -> HTTPException:
        return HTTPException(status_code=self._client_error_status, detail=str(error))

    @staticmethod
    def _internal_error(error: InternalError) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(error),
        )

    def list_recipes(self) -> list[RecipeResponse]:
        """Handle GET /recipes requests.

        Raises:
            HTTPException: 500 if the store or cache fails
        """
        try:
            recipes = self._recipes.list_recipes()
        except InternalError as e:
            raise self._internal_error(e) from e

        return [to_response(recipe) for recipe in recipes]

    def create_recipe(self, payload: Any) -> RecipeResponse:
        """Handle POST /recipes requests.

        Args:
            payload: The decoded JSON body

        Returns:
            The stored recipe with its server-assigned id and timestamp

        Raises:
            HTTPException: client error status for a malformed body,
                500 if the store fails
        """
        try:
            recipe = self._recipes.create_recipe(payload)
        except ClientInputError as e:
            raise self._client_error(e) from e
        except InternalError as e:
            raise self._internal_error(e) from e

        return to_response(recipe)

    def update_recipe(self, recipe_id: str, payload: Any) -> MessageResponse:
        """Handle PUT /recipes/{id} requests.

        Succeeds whether or not a recipe matched the id.
        """
        try:
            self._recipes.update_recipe(recipe_id, payload)
        except ClientInputError as e:
            raise self._client_error(e) from e
        except InternalError as e:
            raise self._internal_error(e) from e

        return MessageResponse(message="Recipe has been updated")

    def delete_recipe(self, recipe_id: str) -> MessageResponse:
        """Handle DELETE /recipes/{id} requests.

        Succeeds whether or not a recipe matched the id.
        """
        try:
            self._recipes.delete_recipe(recipe_id)
        except InternalError as e:
            raise self._internal_error(e) from e

        return MessageResponse(message="Recipe has been deleted")

    def search_recipes(self, tag: str) -> list[RecipeResponse]:
        """Handle GET /recipes/search requests."""
        try:
            recipes = self._recipes.search_by_tag(tag)
        except InternalError as e:
            raise self._internal_error(e) from e

        return [to_response(recipe) for recipe in recipes]

    def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        store_healthy, cache_healthy = self._recipes.is_healthy()
        is_healthy = store_healthy and cache_healthy is not False

        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            store_healthy=store_healthy,
            cache_healthy=cache_healthy,
        )
