import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from brewbook.app.api.deps import (
    get_current_user,
    get_db_session,
    get_drink_cache,
    get_generation_pipeline,
)
from brewbook.app.core.errors import GenerationError, LLMError
from brewbook.app.schemas.auth import CurrentUser
from brewbook.app.schemas.generation import (
    DrinkOfDayResponse,
    GenerationRequest,
    GenerationResult,
    ImageRequest,
    ImageResponse,
    RemixRequest,
    RemixResponse,
    SearchRequest,
    SearchResponse,
)
from brewbook.app.schemas.recipe import RecipeRead
from brewbook.app.services import recipes_service
from brewbook.app.services.drink_of_day import DrinkOfDayCache, get_drink_of_the_day
from brewbook.app.services.generation_service import RecipeGenerationPipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ai"])


@contextmanager
def reraise_unexpected(message: str) -> Iterator[None]:
    """Map unexpected failures to a logged 500 carrying `message`."""
    try:
        yield
    except (HTTPException, GenerationError, LLMError):
        raise
    except Exception as exc:
        logger.exception("%s: %s", message, exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message) from exc


@router.post("/generate", response_model=GenerationResult)
async def generate_recipes(
    payload: GenerationRequest,
    pipeline: RecipeGenerationPipeline = Depends(get_generation_pipeline),
    current_user: CurrentUser = Depends(get_current_user),
):
    with reraise_unexpected("Failed to generate recipes"):
        return await pipeline.generate(payload)


@router.post("/remix", response_model=RemixResponse)
async def remix_recipe(
    payload: RemixRequest,
    pipeline: RecipeGenerationPipeline = Depends(get_generation_pipeline),
    current_user: CurrentUser = Depends(get_current_user),
):
    with reraise_unexpected("Failed to remix recipe"):
        recipes = await pipeline.remix(payload.recipe_id)
        return RemixResponse(recipes=recipes)


@router.post("/generate-image", response_model=ImageResponse)
async def generate_image(
    payload: ImageRequest,
    db: Session = Depends(get_db_session),
    pipeline: RecipeGenerationPipeline = Depends(get_generation_pipeline),
    current_user: CurrentUser = Depends(get_current_user),
):
    with reraise_unexpected("Failed to generate image"):
        recipe = recipes_service.get_recipe_or_404(db, payload.recipe_id)
        image_url = await pipeline.generate_recipe_image(RecipeRead.model_validate(recipe), payload.style)
        if not image_url:
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to generate image")
        recipes_service.set_image_url(db, recipe.id, image_url)
        return ImageResponse(success=True, image_url=image_url, recipe_id=recipe.id)


@router.post("/search", response_model=SearchResponse)
async def search_recipes(
    payload: SearchRequest,
    pipeline: RecipeGenerationPipeline = Depends(get_generation_pipeline),
):
    with reraise_unexpected("Failed to search recipes"):
        recipes = await pipeline.search_similar_recipes(
            payload.query,
            limit=payload.limit,
            type_=payload.type,
            temperature=payload.temperature,
        )
        results = [RecipeRead.model_validate(r) for r in recipes]
        return SearchResponse(query=payload.query, results=results, count=len(results))


@router.get("/drink-of-day", response_model=DrinkOfDayResponse)
async def drink_of_day(
    db: Session = Depends(get_db_session),
    pipeline: RecipeGenerationPipeline = Depends(get_generation_pipeline),
    cache: DrinkOfDayCache = Depends(get_drink_cache),
):
    with reraise_unexpected("Failed to get drink of the day"):
        drink = await get_drink_of_the_day(db, pipeline, cache)
    if drink is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to get drink of the day"
        )
    return DrinkOfDayResponse(drink=drink)
