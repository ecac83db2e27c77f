"""Error types shared across layers.

Repositories translate backend exceptions into these, the service raises
them for bad input, and the handler layer maps them to HTTP status codes.
"""


class RecipeAPIError(Exception):
    """Base class for all recipes API errors."""


class ClientInputError(RecipeAPIError):
    """The request body is not a structurally valid recipe."""


class InternalError(RecipeAPIError):
    """A backend (store or cache) operation failed."""


class StoreError(InternalError):
    """The document store rejected or failed an operation."""


class CacheError(InternalError):
    """The cache backend failed an operation (a miss is not an error)."""


def describe_validation_errors(errors: list[dict]) -> str:
    """Flatten pydantic/FastAPI validation errors into one line.

    Example: ``"tags.0: Input should be a valid string"``
    """
    parts = []
    for error in errors:
        loc = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        msg = error.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "invalid request body"
