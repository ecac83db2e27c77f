"""Recipe domain entity."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RecipeEntity:
    """Domain entity for a stored recipe.

    This is an internal representation used by services and repositories.
    For API contracts, use the DTO classes from the dto package.

    Attributes:
        id: Store-native identifier (hex string), assigned at creation
        name: Recipe name
        instructions: Ordered preparation steps
        ingredients: Ordered ingredient lines
        tags: Free-form tags used by tag search
        published_at: Creation time (UTC), never changed by updates
    """

    id: str
    name: str
    published_at: datetime
    instructions: list[str] = field(default_factory=list)
    ingredients: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
