"""Prompt templates for recipe generation.

The closing JSON block is read back by the generation pipeline, so its
field names must stay in sync with GeneratedRecipe.
"""

from typing import Optional, Sequence

from brewbook.app.schemas.generation import GenerationRequest
from brewbook.app.schemas.recipe import RecipeBase

GENERATION_FIELDS = (
    "title",
    "description",
    "tags",
    "type",
    "temperature",
    "ingredients",
    "steps",
    "difficulty",
    "prep_time_minutes",
    "total_time_minutes",
    "servings",
    "equipment",
    "seasonal_tags",
    "flavor_profile",
)

GENERATION_SYSTEM_PROMPT = (
    "You are an expert barista and mixologist specializing in coffee, matcha, ube, and tea drinks. "
    "Generate creative, detailed recipes with precise measurements and clear steps. "
    "Always return valid JSON matching the specified schema."
)

DRINK_OF_DAY_SYSTEM_PROMPT = (
    "You are an expert barista. Generate one seasonal specialty drink recipe. "
    "Return exactly one recipe with title, description, tags, type, temperature, ingredients, steps, "
    "difficulty, prep_time_minutes, total_time_minutes, servings, equipment, seasonal_tags, and flavor_profile."
)

DEFAULT_IMAGE_STYLE = "photographic, professional food photography, warm lighting"
IMAGE_PROMPT_LIMIT = 1000


def _value(enum_or_none, default: str) -> str:
    return enum_or_none.value if enum_or_none is not None else default


def closing_schema_block(type_example: str = "coffee", temperature_example: str = "hot") -> str:
    return f"""

Return JSON with this exact structure:
{{
  "recipes": [
    {{
      "title": "Recipe Name",
      "description": "Brief description",
      "tags": ["tag1", "tag2"],
      "type": "{type_example}",
      "temperature": "{temperature_example}",
      "ingredients": ["2 tbsp ingredient", "1 cup ingredient"],
      "steps": ["Step 1", "Step 2"],
      "difficulty": "medium",
      "prep_time_minutes": 5,
      "total_time_minutes": 10,
      "servings": 1,
      "equipment": ["equipment1", "equipment2"],
      "seasonal_tags": ["summer", "winter"],
      "flavor_profile": ["sweet", "spicy"]
    }}
  ]
}}"""


def build_rag_prompt(
    request: GenerationRequest,
    seed_recipe: Optional[RecipeBase] = None,
    similar_recipes: Sequence[RecipeBase] = (),
) -> str:
    prompt = f"Generate {request.count} creative drink recipes. "

    ingredients = [i.strip() for i in request.ingredients or [] if i.strip()]
    if ingredients:
        prompt += f"Use these ingredients: {', '.join(ingredients)}. "
    if request.style and request.style.strip():
        prompt += f"Style: {request.style.strip()}. "
    if request.type is not None:
        prompt += f"Type: {request.type.value}. "
    if request.temperature is not None:
        prompt += f"Temperature: {request.temperature.value}. "

    if seed_recipe is not None:
        prompt += (
            "\n\nSeed Recipe for inspiration:\n"
            f"Title: {seed_recipe.title}\n"
            f"Ingredients: {', '.join(seed_recipe.ingredients)}\n"
            f"Steps: {' | '.join(seed_recipe.steps)}"
        )

    if similar_recipes:
        prompt += "\n\nSimilar recipes for reference:\n"
        for i, recipe in enumerate(similar_recipes, start=1):
            prompt += f"{i}. {recipe.title}: {', '.join(recipe.ingredients)}\n"

    prompt += closing_schema_block(
        _value(request.type, "coffee"), _value(request.temperature, "hot")
    )
    return prompt


def build_image_prompt(recipe: RecipeBase, style: Optional[str] = None) -> str:
    style = style or DEFAULT_IMAGE_STYLE
    prompt = (
        f"A beautiful, appetizing photo of a {recipe.type.value} drink: {recipe.title}. "
        f"{recipe.description or ''} "
        f"Style: {style}. "
        "Professional food photography, perfect lighting, appealing presentation."
    )
    return prompt[:IMAGE_PROMPT_LIMIT]


def build_drink_of_day_prompt(seed: str = "") -> str:
    return f"Generate a seasonal specialty coffee, matcha, ube, or tea drink. Seed: {seed}"
