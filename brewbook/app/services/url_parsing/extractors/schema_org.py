"""Schema.org JSON-LD recipe extraction."""

import json
import logging
from typing import Any, Iterable, List, Optional

from bs4 import BeautifulSoup

from brewbook.app.services.url_parsing.models import ExtractedContent
from brewbook.app.services.url_parsing.parsing_utils import (
    clean_text,
    coerce_text,
    extract_image,
    extract_ingredient_list,
    extract_instruction_text,
)

logger = logging.getLogger(__name__)


def _is_recipe(obj: dict) -> bool:
    obj_type = obj.get("@type")
    if not obj_type:
        return False
    types = [obj_type] if isinstance(obj_type, str) else obj_type
    if not isinstance(types, list):
        return False
    return any(str(t).lower() == "recipe" for t in types)


def _candidates(data: Any) -> Iterable[dict]:
    if isinstance(data, list):
        for item in data:
            yield from _candidates(item)
    elif isinstance(data, dict):
        yield data
        graph = data.get("@graph")
        if isinstance(graph, list):
            yield from _candidates(graph)


def _to_content(obj: dict, page_title: str) -> ExtractedContent:
    title = obj.get("name")
    ingredients: List[str] = extract_ingredient_list(obj.get("recipeIngredient"))
    steps: List[str] = extract_instruction_text(obj.get("recipeInstructions"))
    return ExtractedContent(
        title=title.strip() if isinstance(title, str) and title.strip() else page_title,
        excerpt=coerce_text(obj.get("description")) or "",
        ingredients=ingredients,
        steps=steps,
        image_url=extract_image(obj.get("image")),
        prep_time=coerce_text(obj.get("prepTime")),
        total_time=coerce_text(obj.get("totalTime")),
        servings=coerce_text(obj.get("recipeYield")),
        difficulty=coerce_text(obj.get("recipeDifficulty")),
        cuisine=coerce_text(obj.get("recipeCuisine")),
        course=coerce_text(obj.get("recipeCategory")),
    )


def try_extract_structured(html: str) -> Optional[ExtractedContent]:
    """Return the first schema.org Recipe embedded as JSON-LD, or None."""
    try:
        soup = BeautifulSoup(html or "", "lxml")
    except Exception as exc:  # noqa: BLE001
        logger.warning("Unable to parse HTML for JSON-LD: %s", exc)
        return None

    page_title = clean_text(soup.title.get_text()) if soup.title else ""
    scripts = soup.find_all("script", attrs={"type": "application/ld+json"})
    logger.debug("Found %d JSON-LD script blocks", len(scripts))

    for idx, script in enumerate(scripts):
        raw_json = script.string or script.get_text()
        if not raw_json or not raw_json.strip():
            continue
        try:
            data = json.loads(raw_json)
        except json.JSONDecodeError as exc:
            logger.warning(
                "JSON-LD block %d failed to parse: %s (first 200 chars: %s)",
                idx,
                exc,
                raw_json[:200],
            )
            continue

        for obj in _candidates(data):
            if _is_recipe(obj):
                content = _to_content(obj, page_title)
                logger.info(
                    "JSON-LD recipe found: title=%s, ingredients=%d, steps=%d",
                    content.title[:50],
                    len(content.ingredients or []),
                    len(content.steps or []),
                )
                return content
    return None
