"""Retrieval-augmented recipe generation, semantic search and image generation."""

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from brewbook.app.core.errors import GenerationParseError, LLMError
from brewbook.app.db import models
from brewbook.app.schemas.generation import GenerationRequest, GenerationResult
from brewbook.app.schemas.recipe import GeneratedRecipe, RecipeBase, RecipeRead
from brewbook.app.services import recipes_service
from brewbook.app.services.llm_client import LLMClient, strip_code_fence
from brewbook.app.services.rag_prompt import (
    DRINK_OF_DAY_SYSTEM_PROMPT,
    GENERATION_SYSTEM_PROMPT,
    build_drink_of_day_prompt,
    build_image_prompt,
    build_rag_prompt,
)

logger = logging.getLogger(__name__)

SIMILAR_RECIPE_LIMIT = 3


def parse_generation_reply(content: Optional[str]) -> List[Dict[str, Any]]:
    """Recipe objects from a model reply.

    ``{"recipes": [...]}`` is used as is; a ``recipes`` object or a bare
    top-level recipe object is wrapped in a one-element list.
    """
    if not content:
        raise GenerationParseError("No response from model")
    try:
        parsed = json.loads(strip_code_fence(content))
    except json.JSONDecodeError as exc:
        raise GenerationParseError("Invalid JSON response from model") from exc
    if not isinstance(parsed, dict):
        raise GenerationParseError("Model reply is not a JSON object")

    recipes = parsed.get("recipes", parsed)
    if isinstance(recipes, dict):
        recipes = [recipes]
    if not isinstance(recipes, list) or not recipes or not all(isinstance(r, dict) for r in recipes):
        raise GenerationParseError("Model reply does not contain recipe objects")
    return recipes


def normalize_candidates(
    candidates: List[Dict[str, Any]], request: Optional[GenerationRequest] = None
) -> List[GeneratedRecipe]:
    default_type = request.type.value if request and request.type else models.DrinkType.COFFEE.value
    default_temperature = (
        request.temperature.value if request and request.temperature else models.Temperature.HOT.value
    )
    recipes: List[GeneratedRecipe] = []
    for candidate in candidates:
        data = dict(candidate)
        data["type"] = data.get("type") or default_type
        data["temperature"] = data.get("temperature") or default_temperature
        data["difficulty"] = data.get("difficulty") or models.Difficulty.MEDIUM.value
        data["servings"] = data.get("servings") or 1
        try:
            recipes.append(GeneratedRecipe.model_validate(data))
        except ValidationError as exc:
            raise GenerationParseError(
                f"Generated recipe has an unexpected shape ({exc.error_count()} errors)"
            ) from exc
    return recipes


def build_similarity_query(request: GenerationRequest) -> str:
    parts = [*(request.ingredients or []), request.style or ""]
    parts.append(request.type.value if request.type else "")
    parts.append(request.temperature.value if request.temperature else "")
    return " ".join(p.strip() for p in parts if p and p.strip())


def content_for_embedding(recipe: models.Recipe) -> str:
    parts = [
        recipe.title,
        recipe.description or "",
        *(recipe.tags or []),
        *(recipe.ingredients or []),
        *(recipe.steps or []),
        recipe.type.value if recipe.type else "",
        recipe.temperature.value if recipe.temperature else "",
        *(recipe.flavor_profile or []),
        *(recipe.seasonal_tags or []),
    ]
    return " ".join(parts)


class RecipeGenerationPipeline:
    def __init__(self, db: Session, llm: LLMClient):
        self.db = db
        self.llm = llm

    async def search_similar_recipes(
        self,
        query: str,
        limit: int = 5,
        type_: Optional[models.DrinkType] = None,
        temperature: Optional[models.Temperature] = None,
    ) -> List[models.Recipe]:
        query_embedding = await self.llm.embed(query)
        return recipes_service.nearest_recipes(
            self.db, query_embedding, limit=limit, type_=type_, temperature=temperature
        )

    async def index_recipe(self, recipe_id: int) -> models.RecipeEmbedding:
        recipe = recipes_service.get_recipe_or_404(self.db, recipe_id)
        content = content_for_embedding(recipe)
        embedding = await self.llm.embed(content)
        return recipes_service.upsert_embedding(self.db, recipe.id, embedding, content)

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        seed_recipe: Optional[models.Recipe] = None
        if request.seed_recipe_id is not None:
            seed_recipe = recipes_service.get_recipe(self.db, request.seed_recipe_id)
            if seed_recipe is None:
                logger.warning("Seed recipe %s not found; generating without it", request.seed_recipe_id)

        similar: List[models.Recipe] = []
        search_query = build_similarity_query(request)
        if search_query:
            similar = await self.search_similar_recipes(
                search_query,
                limit=SIMILAR_RECIPE_LIMIT,
                type_=request.type,
                temperature=request.temperature,
            )

        seed_read = RecipeRead.model_validate(seed_recipe) if seed_recipe is not None else None
        similar_read = [RecipeRead.model_validate(r) for r in similar]
        prompt = build_rag_prompt(request, seed_read, similar_read)

        completion = await self.llm.chat_json(
            GENERATION_SYSTEM_PROMPT, prompt, temperature=0.8, max_tokens=2000
        )
        recipes = normalize_candidates(parse_generation_reply(completion.content), request)
        logger.info(
            "Generated %d recipes (seed=%s, similar=%d, tokens=%d)",
            len(recipes),
            request.seed_recipe_id,
            len(similar_read),
            completion.tokens_used,
        )

        if request.seed_recipe_id is not None:
            recipes_service.record_generation(
                self.db,
                prompt=prompt,
                seed_recipe_id=seed_recipe.id if seed_recipe is not None else None,
                generated_recipes=[r.model_dump(mode="json") for r in recipes],
                model_used=completion.model,
                tokens_used=completion.tokens_used,
            )

        return GenerationResult(
            recipes=recipes,
            seed_recipe=seed_read,
            similar_recipes=similar_read,
            tokens_used=completion.tokens_used,
        )

    async def remix(self, recipe_id: int) -> List[GeneratedRecipe]:
        recipe = recipes_service.get_recipe_or_404(self.db, recipe_id)
        request = GenerationRequest(
            seed_recipe_id=recipe.id,
            type=recipe.type,
            temperature=recipe.temperature,
            count=3,
        )
        result = await self.generate(request)
        return result.recipes

    async def generate_recipe_image(self, recipe: RecipeBase, style: Optional[str] = None) -> str:
        prompt = build_image_prompt(recipe, style)
        return await self.llm.generate_image(prompt)

    async def generate_drink_of_the_day(self, seed: str = "") -> Optional[GeneratedRecipe]:
        """One seasonal drink from the model, or None when anything goes wrong."""
        try:
            completion = await self.llm.chat_json(
                DRINK_OF_DAY_SYSTEM_PROMPT,
                build_drink_of_day_prompt(seed),
                temperature=0.7,
                max_tokens=1000,
            )
            if not completion.content:
                return None
            parsed = json.loads(strip_code_fence(completion.content))
            if not isinstance(parsed, dict):
                return None
            drink = parsed.get("recipe") or parsed
            if not isinstance(drink, dict):
                return None
            return normalize_candidates([drink])[0]
        except (LLMError, GenerationParseError, json.JSONDecodeError) as exc:
            logger.error("Error generating drink of the day: %s", exc)
            return None
