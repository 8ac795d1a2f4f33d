"""Recipe data: what one serving of a dish consumes."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class RecipeItem(BaseModel):
    """Quantity of one ingredient needed per serving."""

    ingredient_name: str = Field(..., min_length=1)
    quantity_needed: float = Field(..., gt=0, allow_inf_nan=False)


class Dish(BaseModel):
    """A menu dish. Only the recipe matters to the ledger."""

    name: str = Field(..., min_length=1)
    price: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    category: Optional[str] = None
    recipe: List[RecipeItem] = Field(default_factory=list)

    @field_validator("recipe")
    @classmethod
    def unique_ingredients(cls, v: List[RecipeItem]) -> List[RecipeItem]:
        seen = set()
        for item in v:
            key = item.ingredient_name.lower()
            if key in seen:
                raise ValueError(f"Duplicate ingredient in recipe: {item.ingredient_name}")
            seen.add(key)
        return v
