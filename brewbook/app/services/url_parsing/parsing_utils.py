"""General parsing utilities for recipe extraction."""

import re
from typing import Any, List, Optional


def clean_text(text: str) -> str:
    """Normalize whitespace in text."""
    return re.sub(r"\s+", " ", text or "").strip()


def coerce_text(value: Any) -> Optional[str]:
    """Flatten a schema.org scalar-ish value (string, number, list) to a string."""
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, list):
        parts = [coerce_text(item) for item in value]
        joined = ", ".join(p for p in parts if p)
        return joined or None
    if isinstance(value, dict):
        return coerce_text(value.get("name") or value.get("text"))
    return None


def extract_image(value: Any) -> Optional[str]:
    """Extract image URL from the string, list and ImageObject forms schema.org allows."""
    if isinstance(value, str):
        return value or None
    if isinstance(value, dict):
        url = value.get("url") or value.get("contentUrl")
        return url if isinstance(url, str) and url else None
    if isinstance(value, list):
        for item in value:
            found = extract_image(item)
            if found:
                return found
    return None


def extract_instruction_text(instructions: Any) -> List[str]:
    """Map recipeInstructions to one string per step, preferring `text` then `name`.

    Entries without usable text are skipped.
    """
    if isinstance(instructions, str):
        return [instructions]
    if not isinstance(instructions, list):
        return []
    steps: List[str] = []
    for entry in instructions:
        if isinstance(entry, str):
            if entry.strip():
                steps.append(entry)
        elif isinstance(entry, dict):
            text_val = entry.get("text") or entry.get("name")
            if text_val:
                steps.append(text_val if isinstance(text_val, str) else str(text_val))
    return steps


def extract_ingredient_list(value: Any) -> List[str]:
    """recipeIngredient as listed; a bare string becomes a single entry."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, list):
        return [item if isinstance(item, str) else str(item) for item in value]
    return []
