"""Drink of the day: a per-process, time-limited cache over a stored or generated recipe."""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from brewbook.app.core.errors import LLMError
from brewbook.app.schemas.recipe import RecipeCreate, RecipeRead
from brewbook.app.services import recipes_service
from brewbook.app.services.generation_service import RecipeGenerationPipeline

logger = logging.getLogger(__name__)


class DrinkOfDayCache:
    """Holds one drink until ``expires_at``.

    Not locked and not shared between processes: two concurrent refreshes
    may both generate and store a drink. The later one wins the cache.
    """

    def __init__(self, ttl: timedelta, clock: Callable[[], datetime] = datetime.utcnow):
        self.ttl = ttl
        self.value: Optional[RecipeRead] = None
        self.expires_at: Optional[datetime] = None
        self._clock = clock

    def get(self) -> Optional[RecipeRead]:
        if self.value is None or self.expires_at is None:
            return None
        if self._clock() >= self.expires_at:
            return None
        return self.value

    def set(self, value: RecipeRead) -> None:
        self.value = value
        self.expires_at = self._clock() + self.ttl

    def clear(self) -> None:
        self.value = None
        self.expires_at = None


async def get_drink_of_the_day(
    db: Session, pipeline: RecipeGenerationPipeline, cache: DrinkOfDayCache
) -> Optional[RecipeRead]:
    cached = cache.get()
    if cached is not None:
        return cached

    existing = recipes_service.find_drink_of_day(db)
    if existing is not None:
        drink = RecipeRead.model_validate(existing)
        cache.set(drink)
        return drink

    generated = await pipeline.generate_drink_of_the_day()
    if generated is None:
        return None

    data = generated.model_dump()
    data["tags"] = [*data.get("tags", []), recipes_service.DRINK_OF_DAY_TAG]
    try:
        payload = RecipeCreate(**data)
    except ValidationError as exc:
        logger.error("Generated drink of the day is not a valid recipe: %s", exc)
        return None

    stored = recipes_service.create_recipe(db, payload, author_id=None)
    try:
        await pipeline.index_recipe(stored.id)
    except LLMError as exc:
        logger.warning("Failed to index drink of the day %s: %s", stored.id, exc)

    drink = RecipeRead.model_validate(stored)
    cache.set(drink)
    return drink
