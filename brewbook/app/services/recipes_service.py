import logging
from datetime import date, datetime, time
from typing import List, Optional, Sequence

import numpy as np
from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from brewbook.app.db import models
from brewbook.app.schemas.recipe import REQUIRED_RECIPE_FIELDS, RecipeCreate, RecipeUpdate
from brewbook.app.services.url_parsing.models import ScrapeResult

logger = logging.getLogger(__name__)

DRINK_OF_DAY_TAG = "drink-of-day"


def get_recipe(db: Session, recipe_id: int) -> Optional[models.Recipe]:
    return db.get(models.Recipe, recipe_id)


def get_recipe_or_404(db: Session, recipe_id: int) -> models.Recipe:
    recipe = get_recipe(db, recipe_id)
    if recipe is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found")
    return recipe


def list_recipes(
    db: Session,
    type_: Optional[models.DrinkType] = None,
    temperature: Optional[models.Temperature] = None,
    q: Optional[str] = None,
) -> List[models.Recipe]:
    stmt = select(models.Recipe).order_by(models.Recipe.created_at.desc(), models.Recipe.id.desc())
    if type_ is not None:
        stmt = stmt.where(models.Recipe.type == type_)
    if temperature is not None:
        stmt = stmt.where(models.Recipe.temperature == temperature)
    if q:
        pattern = f"%{q.strip()}%"
        stmt = stmt.where(
            or_(models.Recipe.title.ilike(pattern), models.Recipe.description.ilike(pattern))
        )
    return list(db.scalars(stmt))


def create_recipe(db: Session, data: RecipeCreate, author_id: Optional[str] = None) -> models.Recipe:
    recipe = models.Recipe(author_id=author_id, **data.model_dump(mode="python"))
    db.add(recipe)
    db.commit()
    db.refresh(recipe)
    return recipe


def update_recipe(db: Session, recipe_id: int, data: RecipeUpdate) -> models.Recipe:
    recipe = get_recipe_or_404(db, recipe_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field in REQUIRED_RECIPE_FIELDS:
            continue
        setattr(recipe, field, value)
    db.add(recipe)
    db.commit()
    db.refresh(recipe)
    return recipe


def delete_recipe(db: Session, recipe_id: int) -> None:
    recipe = get_recipe_or_404(db, recipe_id)
    db.delete(recipe)
    db.commit()


def set_image_url(db: Session, recipe_id: int, image_url: str) -> None:
    recipe = get_recipe_or_404(db, recipe_id)
    recipe.image_url = image_url
    db.commit()


def upsert_external_source(db: Session, result: ScrapeResult) -> models.ExternalSource:
    source = result.source
    try:
        record = db.scalars(
            select(models.ExternalSource).where(models.ExternalSource.url == source.url)
        ).first()
        if record is None:
            record = models.ExternalSource(url=source.url)
            db.add(record)
        record.domain = source.domain
        record.title = result.data.title if result.data else None
        record.excerpt = result.data.excerpt if result.data else None
        record.content_type = source.content_type.value
        record.robots_txt_allowed = source.robots_allowed
        record.last_scraped = datetime.utcnow()
        db.commit()
    except SQLAlchemyError:
        # The session is shared with the rest of the scrape request.
        db.rollback()
        raise
    return record


def upsert_embedding(
    db: Session, recipe_id: int, embedding: Sequence[float], content_for_embedding: str
) -> models.RecipeEmbedding:
    record = db.scalars(
        select(models.RecipeEmbedding).where(models.RecipeEmbedding.recipe_id == recipe_id)
    ).first()
    if record is None:
        record = models.RecipeEmbedding(recipe_id=recipe_id)
        db.add(record)
    record.embedding = [float(v) for v in embedding]
    record.content_for_embedding = content_for_embedding
    db.commit()
    return record


def nearest_recipes(
    db: Session,
    query_embedding: Sequence[float],
    limit: int = 5,
    type_: Optional[models.DrinkType] = None,
    temperature: Optional[models.Temperature] = None,
) -> List[models.Recipe]:
    """Recipes ordered by Euclidean distance between stored and query embeddings."""
    stmt = select(models.RecipeEmbedding, models.Recipe).join(
        models.Recipe, models.Recipe.id == models.RecipeEmbedding.recipe_id
    )
    if type_ is not None:
        stmt = stmt.where(models.Recipe.type == type_)
    if temperature is not None:
        stmt = stmt.where(models.Recipe.temperature == temperature)
    rows = db.execute(stmt).all()

    query = np.asarray(query_embedding, dtype=float)
    scored = []
    for embedding, recipe in rows:
        vector = np.asarray(embedding.embedding, dtype=float)
        if vector.shape != query.shape:
            logger.warning(
                "Skipping embedding for recipe %s with dimension %s (query has %s)",
                recipe.id,
                vector.shape,
                query.shape,
            )
            continue
        scored.append((float(np.linalg.norm(vector - query)), recipe.id, recipe))
    scored.sort(key=lambda item: (item[0], item[1]))
    return [recipe for _, _, recipe in scored[:limit]]


def record_generation(
    db: Session,
    prompt: str,
    seed_recipe_id: Optional[int],
    generated_recipes: list,
    model_used: str,
    tokens_used: int,
) -> models.RecipeGeneration:
    record = models.RecipeGeneration(
        prompt=prompt,
        seed_recipe_id=seed_recipe_id,
        generated_recipes=generated_recipes,
        model_used=model_used,
        tokens_used=tokens_used,
    )
    db.add(record)
    db.commit()
    return record


def find_drink_of_day(db: Session, today: Optional[date] = None) -> Optional[models.Recipe]:
    start = datetime.combine(today or datetime.utcnow().date(), time.min)
    stmt = (
        select(models.Recipe)
        .where(models.Recipe.created_at >= start)
        .order_by(models.Recipe.created_at.desc())
    )
    for recipe in db.scalars(stmt):
        if DRINK_OF_DAY_TAG in (recipe.tags or []):
            return recipe
    return None


def save_recipe(db: Session, user_id: str, recipe_id: int) -> models.SavedRecipe:
    """Bookmark a recipe for a user; saving twice keeps the first bookmark."""
    get_recipe_or_404(db, recipe_id)
    existing = _saved_entry(db, user_id, recipe_id)
    if existing is not None:
        return existing
    entry = models.SavedRecipe(user_id=user_id, recipe_id=recipe_id)
    db.add(entry)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        existing = _saved_entry(db, user_id, recipe_id)
        if existing is None:
            raise
        return existing
    db.refresh(entry)
    return entry


def unsave_recipe(db: Session, user_id: str, recipe_id: int) -> None:
    entry = _saved_entry(db, user_id, recipe_id)
    if entry is None:
        return
    db.delete(entry)
    db.commit()


def list_saved_recipes(db: Session, user_id: str) -> List[models.Recipe]:
    stmt = (
        select(models.Recipe)
        .join(models.SavedRecipe, models.SavedRecipe.recipe_id == models.Recipe.id)
        .where(models.SavedRecipe.user_id == user_id)
        .order_by(models.SavedRecipe.created_at.desc(), models.SavedRecipe.id.desc())
    )
    return list(db.scalars(stmt))


def is_recipe_saved(db: Session, user_id: str, recipe_id: int) -> bool:
    return _saved_entry(db, user_id, recipe_id) is not None


def _saved_entry(db: Session, user_id: str, recipe_id: int) -> Optional[models.SavedRecipe]:
    return db.scalars(
        select(models.SavedRecipe).where(
            models.SavedRecipe.user_id == user_id,
            models.SavedRecipe.recipe_id == recipe_id,
        )
    ).first()
