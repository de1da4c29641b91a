from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from brewbook.app.db.models import DrinkType, Temperature
from brewbook.app.schemas.recipe import GeneratedRecipe, RecipeRead


class GenerationRequest(BaseModel):
    seed_recipe_id: Optional[int] = Field(None, alias="seedRecipeId")
    ingredients: Optional[List[str]] = None
    style: Optional[str] = None
    type: Optional[DrinkType] = None
    temperature: Optional[Temperature] = None
    count: int = Field(3, ge=1, le=10)

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def require_seed_ingredients_or_style(self) -> "GenerationRequest":
        has_ingredients = any(i.strip() for i in self.ingredients or [])
        has_style = bool(self.style and self.style.strip())
        if self.seed_recipe_id is None and not has_ingredients and not has_style:
            raise ValueError("At least one of ingredients, seedRecipeId, or style must be provided")
        return self


class GenerationResult(BaseModel):
    recipes: List[GeneratedRecipe]
    seed_recipe: Optional[RecipeRead] = None
    similar_recipes: List[RecipeRead] = Field(default_factory=list)
    tokens_used: int = 0


class RemixRequest(BaseModel):
    recipe_id: int = Field(alias="recipeId")

    model_config = ConfigDict(populate_by_name=True)


class RemixResponse(BaseModel):
    recipes: List[GeneratedRecipe]


class ImageRequest(BaseModel):
    recipe_id: int = Field(alias="recipeId")
    style: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class ImageResponse(BaseModel):
    success: bool
    image_url: str
    recipe_id: int


class SearchRequest(BaseModel):
    query: str = Field(min_length=1)
    limit: int = Field(10, ge=1, le=50)
    type: Optional[DrinkType] = None
    temperature: Optional[Temperature] = None


class SearchResponse(BaseModel):
    success: bool = True
    query: str
    results: List[RecipeRead]
    count: int


class DrinkOfDayResponse(BaseModel):
    drink: RecipeRead
