import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, FastAPI, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from recipes_api.api.dependencies import HandlerDep, lifespan
from recipes_api.config import configure_logging, settings
from recipes_api.dto import (
    ErrorResponse,
    HealthCheckResponse,
    MessageResponse,
    RecipeResponse,
)
from recipes_api.errors import describe_validation_errors
from recipes_api.handlers import RecipeHandler

logger = logging.getLogger(__name__)

API_TITLE = "Recipes API"
API_VERSION = "1.0.0"
API_DESCRIPTION = "CRUD and tag search over recipes stored in MongoDB, with a Redis list cache"

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}
BODY_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {
        "model": ErrorResponse,
        "description": "Invalid input (only with STRICT_CLIENT_ERRORS, otherwise 500)",
    },
    **ERROR_RESPONSES,
}

RECIPE_EXAMPLE = {
    "name": "Tea",
    "instructions": ["Boil water", "Add leaves"],
    "ingredients": ["water", "tea leaves"],
    "tags": ["drink"],
}

RecipeBody = Annotated[
    Any,
    Body(
        description="Recipe fields: name, instructions[], ingredients[], tags[]",
        examples=[RECIPE_EXAMPLE],
    ),
]

router = APIRouter(tags=["recipes"])


@router.get(
    "/recipes",
    response_model=list[RecipeResponse],
    summary="Returns list of recipes",
    responses=ERROR_RESPONSES,
)
def list_recipes(handler: HandlerDep) -> list[RecipeResponse]:
    """List every recipe, served from the cache when a snapshot exists."""
    return handler.list_recipes()


@router.post(
    "/recipes",
    response_model=RecipeResponse,
    summary="Create a new recipe",
    responses=BODY_ERROR_RESPONSES,
)
def create_recipe(handler: HandlerDep, payload: RecipeBody) -> RecipeResponse:
    """Store a recipe; the server assigns `id` and `published_at`."""
    return handler.create_recipe(payload)


@router.get(
    "/recipes/search",
    response_model=list[RecipeResponse],
    summary="Search recipes based on tags",
    responses=ERROR_RESPONSES,
)
def search_recipes(
    handler: HandlerDep,
    tag: Annotated[str, Query(description="recipe tag")] = "",
) -> list[RecipeResponse]:
    """Recipes whose tags contain exactly `tag`. Never cached."""
    return handler.search_recipes(tag)


@router.put(
    "/recipes/{recipe_id}",
    response_model=MessageResponse,
    summary="Update an existing recipe",
    responses=BODY_ERROR_RESPONSES,
)
def update_recipe(recipe_id: str, handler: HandlerDep, payload: RecipeBody) -> MessageResponse:
    """Overwrite name, instructions, ingredients and tags of a recipe."""
    return handler.update_recipe(recipe_id, payload)


@router.delete(
    "/recipes/{recipe_id}",
    response_model=MessageResponse,
    summary="Delete an existing recipe",
    responses=ERROR_RESPONSES,
)
def delete_recipe(recipe_id: str, handler: HandlerDep) -> MessageResponse:
    """Remove a recipe."""
    return handler.delete_recipe(recipe_id)


@router.get(
    "/health",
    response_model=HealthCheckResponse,
    tags=["health"],
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": HealthCheckResponse}},
)
def health(handler: HandlerDep, response: Response) -> HealthCheckResponse:
    """Health check endpoint. Answers 503 when a backend is unreachable."""
    result = handler.health_check()
    if result.status != "healthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return result


@router.get("/", tags=["health"])
def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "description": API_DESCRIPTION,
        "endpoints": {
            "recipes": "/recipes",
            "search": "/recipes/search?tag=",
            "health": "/health",
            "docs": "/docs",
        },
    }


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTP error as {"error": "<message>"}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON never reaches the service; answer like any bad body."""
    return JSONResponse(
        status_code=request.app.state.client_error_status,
        content={"error": describe_validation_errors(list(exc.errors()))},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything that escaped the handlers still answers {"error": "<message>"}."""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc) or type(exc).__name__},
    )


def create_app(handler: RecipeHandler | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        handler: Pre-built handler. When given, the lifespan does not
            connect to MongoDB or Redis (tests inject in-memory backends).

    Returns:
        Configured FastAPI app
    """
    configure_logging()

    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.include_router(router)

    if handler is not None:
        app.state.recipe_handler = handler
        app.state.client_error_status = handler.client_error_status
    else:
        app.state.client_error_status = settings.client_error_status

    return app


app = create_app()


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "recipes_api.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    main()
