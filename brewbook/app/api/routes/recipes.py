import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from brewbook.app.api.deps import get_current_user, get_db_session, get_generation_pipeline
from brewbook.app.core.errors import LLMError
from brewbook.app.db import models
from brewbook.app.schemas.auth import CurrentUser
from brewbook.app.schemas.recipe import RecipeCreate, RecipeRead, RecipeUpdate, SavedStatus
from brewbook.app.services import recipes_service
from brewbook.app.services.generation_service import RecipeGenerationPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.post("", response_model=RecipeRead, status_code=status.HTTP_201_CREATED)
async def create_recipe(
    payload: RecipeCreate,
    db: Session = Depends(get_db_session),
    pipeline: RecipeGenerationPipeline = Depends(get_generation_pipeline),
    current_user: CurrentUser = Depends(get_current_user),
):
    recipe = recipes_service.create_recipe(db, payload, author_id=current_user.id)
    try:
        await pipeline.index_recipe(recipe.id)
    except LLMError as exc:
        logger.warning("Recipe %s saved without embedding: %s", recipe.id, exc)
    return recipe


@router.get("", response_model=List[RecipeRead])
def list_recipes(
    type: Optional[models.DrinkType] = Query(None),
    temperature: Optional[models.Temperature] = Query(None),
    q: Optional[str] = Query(None),
    db: Session = Depends(get_db_session),
):
    return recipes_service.list_recipes(db, type_=type, temperature=temperature, q=q)


@router.get("/saved", response_model=List[RecipeRead])
def list_saved_recipes(
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    return recipes_service.list_saved_recipes(db, current_user.id)


@router.get("/{recipe_id}", response_model=RecipeRead)
def get_recipe(recipe_id: int, db: Session = Depends(get_db_session)):
    return recipes_service.get_recipe_or_404(db, recipe_id)


@router.patch("/{recipe_id}", response_model=RecipeRead)
def update_recipe(
    recipe_id: int,
    payload: RecipeUpdate,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    return recipes_service.update_recipe(db, recipe_id, payload)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_recipe(
    recipe_id: int,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    recipes_service.delete_recipe(db, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{recipe_id}/save", response_model=SavedStatus, status_code=status.HTTP_201_CREATED)
def save_recipe(
    recipe_id: int,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    recipes_service.save_recipe(db, current_user.id, recipe_id)
    return SavedStatus(recipe_id=recipe_id, saved=True)


@router.get("/{recipe_id}/save", response_model=SavedStatus)
def saved_status(
    recipe_id: int,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    recipes_service.get_recipe_or_404(db, recipe_id)
    return SavedStatus(recipe_id=recipe_id, saved=recipes_service.is_recipe_saved(db, current_user.id, recipe_id))


@router.delete("/{recipe_id}/save", status_code=status.HTTP_204_NO_CONTENT)
def unsave_recipe(
    recipe_id: int,
    db: Session = Depends(get_db_session),
    current_user: CurrentUser = Depends(get_current_user),
):
    recipes_service.unsave_recipe(db, current_user.id, recipe_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
