"""Response DTOs for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class RecipeResponse(BaseModel):
    """Response DTO for a stored recipe."""

    id: str = Field(..., description="Server-assigned identifier (24 hex characters)")
    name: str = Field(..., description="Recipe name")
    instructions: list[str] = Field(..., description="Ordered preparation steps")
    ingredients: list[str] = Field(..., description="Ordered ingredient lines")
    tags: list[str] = Field(..., description="Tags used by tag search")
    published_at: datetime = Field(..., description="Creation time (UTC)")


class MessageResponse(BaseModel):
    """Response DTO for update and delete confirmations."""

    message: str = Field(..., description="Human-readable status message")


class ErrorResponse(BaseModel):
    """Response DTO for every error path."""

    error: str = Field(..., description="What went wrong, including backend error text")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    store_healthy: bool = Field(..., description="Whether MongoDB is reachable")
    cache_healthy: bool | None = Field(
        None,
        description="Whether Redis is reachable (null when caching is disabled)",
    )
