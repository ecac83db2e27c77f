"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class RecipeRequest(BaseModel):
    """Request DTO for creating or replacing a recipe.

    Binding is structural only: missing fields fall back to empty values,
    wrong types are rejected and unknown fields (including a client `id`)
    are ignored.
    """

    name: str = Field("", description="Recipe name")
    instructions: list[str] = Field(
        default_factory=list,
        description="Ordered preparation steps",
    )
    ingredients: list[str] = Field(
        default_factory=list,
        description="Ordered ingredient lines",
    )
    tags: list[str] = Field(default_factory=list, description="Tags used by tag search")
