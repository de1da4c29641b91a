from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from brewbook.app.db.models import Difficulty, DrinkType, Temperature

REQUIRED_RECIPE_FIELDS = (
    "title",
    "type",
    "temperature",
    "tags",
    "ingredients",
    "steps",
    "equipment",
    "seasonal_tags",
    "flavor_profile",
)


def _strip_items(value: List[str], label: str) -> List[str]:
    cleaned = [item.strip() for item in value]
    if any(not item for item in cleaned):
        raise ValueError(f"{label} cannot be empty")
    return cleaned


class RecipeBase(BaseModel):
    title: str
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    type: DrinkType = DrinkType.COFFEE
    temperature: Temperature = Temperature.HOT
    ingredients: List[str] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    difficulty: Optional[Difficulty] = None
    prep_time_minutes: Optional[int] = None
    total_time_minutes: Optional[int] = None
    servings: Optional[int] = None
    equipment: List[str] = Field(default_factory=list)
    seasonal_tags: List[str] = Field(default_factory=list)
    flavor_profile: List[str] = Field(default_factory=list)
    image_url: Optional[str] = None


class RecipeCreate(RecipeBase):
    title: str = Field(min_length=2)
    video_url: Optional[str] = None

    @field_validator("ingredients")
    @classmethod
    def validate_ingredients(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("At least one ingredient is required")
        return _strip_items(value, "Ingredient")

    @field_validator("steps")
    @classmethod
    def validate_steps(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("At least one step is required")
        return _strip_items(value, "Step")


class RecipeUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=2)
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    type: Optional[DrinkType] = None
    temperature: Optional[Temperature] = None
    ingredients: Optional[List[str]] = None
    steps: Optional[List[str]] = None
    difficulty: Optional[Difficulty] = None
    prep_time_minutes: Optional[int] = None
    total_time_minutes: Optional[int] = None
    servings: Optional[int] = None
    equipment: Optional[List[str]] = None
    seasonal_tags: Optional[List[str]] = None
    flavor_profile: Optional[List[str]] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None

    @field_validator(*REQUIRED_RECIPE_FIELDS, mode="before")
    @classmethod
    def reject_null(cls, value, info: ValidationInfo):
        # Omit a field to leave it unchanged; these columns cannot be cleared.
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    @field_validator("ingredients", "steps")
    @classmethod
    def validate_non_empty(cls, value: List[str], info: ValidationInfo) -> List[str]:
        if not value:
            raise ValueError("At least one item is required")
        return _strip_items(value, "Ingredient" if info.field_name == "ingredients" else "Step")


class RecipeRead(RecipeBase):
    id: int
    author_id: Optional[str] = None
    video_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class GeneratedRecipe(RecipeBase):
    """A model-produced recipe candidate; not persisted until a user saves it."""

    @field_validator("type", "temperature", "difficulty", mode="before")
    @classmethod
    def lower_enum_values(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("tags", "ingredients", "steps", "equipment", "seasonal_tags", "flavor_profile", mode="before")
    @classmethod
    def none_to_list(cls, value):
        return [] if value is None else value


class SavedStatus(BaseModel):
    recipe_id: int
    saved: bool
