import logging
from functools import partial
from typing import List, Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from brewbook.app.api.deps import (
    get_current_user,
    get_db_session,
    get_generation_pipeline,
    get_http_client,
)
from brewbook.app.core.config import get_settings
from brewbook.app.core.errors import LLMError
from brewbook.app.db import models
from brewbook.app.schemas.auth import CurrentUser
from brewbook.app.schemas.recipe import RecipeCreate
from brewbook.app.schemas.scrape import SavedRecipe, ScrapeRequest, ScrapeResponse
from brewbook.app.services import recipes_service
from brewbook.app.services.generation_service import RecipeGenerationPipeline
from brewbook.app.services.url_parsing.models import ScrapeResult
from brewbook.app.services.web_scraper import ScrapeOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scrape"])


def recipe_from_scrape(result: ScrapeResult) -> RecipeCreate:
    data = result.data
    return RecipeCreate(
        title=data.title,
        description=data.excerpt,
        ingredients=data.ingredients or [],
        steps=data.steps or [],
        image_url=data.image_url,
        type=models.DrinkType.COFFEE,
        temperature=models.Temperature.ICED,
    )


def _save_result(
    db: Session, result: ScrapeResult, author_id: str
) -> tuple[ScrapeResult, Optional[models.Recipe]]:
    try:
        recipe = recipes_service.create_recipe(db, recipe_from_scrape(result), author_id=author_id)
    except ValidationError as exc:
        message = "; ".join(err.get("msg", "invalid value") for err in exc.errors())
        return result.model_copy(update={"success": False, "error": f"Failed to save recipe: {message}"}), None
    except Exception as exc:  # noqa: BLE001
        db.rollback()
        logger.error("Error saving scraped recipe from %s: %s", result.source.url, exc)
        return result.model_copy(update={"success": False, "error": f"Failed to save recipe: {exc}"}), None
    return result, recipe


@router.post("/scrape", response_model=ScrapeResponse)
async def scrape_urls(
    payload: ScrapeRequest,
    db: Session = Depends(get_db_session),
    client: httpx.AsyncClient = Depends(get_http_client),
    pipeline: RecipeGenerationPipeline = Depends(get_generation_pipeline),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        orchestrator = ScrapeOrchestrator.from_settings(
            client,
            get_settings(),
            source_sink=partial(recipes_service.upsert_external_source, db),
        )
        scraped = await orchestrator.scrape_batch(payload.urls)

        results: List[ScrapeResult] = []
        saved: List[SavedRecipe] = []
        for result in scraped:
            if result.success and result.data is not None:
                result, recipe = _save_result(db, result, current_user.id)
                if recipe is not None:
                    saved.append(SavedRecipe(id=recipe.id, title=recipe.title, url=result.source.url))
                    try:
                        await pipeline.index_recipe(recipe.id)
                    except LLMError as exc:
                        logger.warning("Scraped recipe %s saved without embedding: %s", recipe.id, exc)
            if not result.success:
                logger.info("Scrape of %s failed: %s", result.source.url, result.error)
            results.append(result)
    except Exception:
        logger.exception("Failed to scrape URLs")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to scrape URLs")

    return ScrapeResponse(
        success=True,
        scraped=len(results),
        successful=sum(1 for r in results if r.success),
        saved=len(saved),
        results=results,
        saved_recipes=saved,
    )
