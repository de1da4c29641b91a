"""Heuristic recipe extraction from raw HTML.

Used when a page carries no schema.org Recipe. Each field is filled by an
ordered list of independent strategies; the first one that yields a
non-empty result wins. Results are approximate and some pages will produce
nothing for ingredients or steps; that is reported as absent fields rather
than as an error.
"""

import logging
import re
from functools import partial
from typing import Callable, List, Optional, Sequence

from bs4 import BeautifulSoup

from brewbook.app.services.url_parsing.models import ExtractedContent
from brewbook.app.services.url_parsing.parsing_utils import clean_text

logger = logging.getLogger(__name__)

Strategy = Callable[[BeautifulSoup], Optional[List[str]]]

HEADING_TAGS = ["h2", "h3", "h4", "h5", "h6"]
SCAN_TAGS = ("li", "p", "div")

INGREDIENT_HEADING_RE = re.compile(r"ingredients?|what you'll need|you'll need", re.I)
STEP_HEADING_RE = re.compile(r"instructions?|directions?|how to|steps?", re.I)

UNIT_KEYWORDS = ("cup", "tbsp", "tsp", "ounce", "gram", "pound")
ACTION_KEYWORDS = ("step", "add", "mix", "pour", "stir", "heat")

# Unanchored on purpose: these can pick up unrelated numbers elsewhere on the page.
PREP_TIME_RE = re.compile(r"prep.*?time.*?(\d+)", re.I)
TOTAL_TIME_RE = re.compile(r"total.*?time.*?(\d+)", re.I)
SERVINGS_RE = re.compile(r"servings?.*?(\d+)", re.I)
DIFFICULTY_RE = re.compile(r"difficulty.*?(easy|medium|hard)", re.I)


def extract_title(soup: BeautifulSoup) -> str:
    return clean_text(soup.title.get_text()) if soup.title else ""


def extract_excerpt(soup: BeautifulSoup) -> str:
    meta = soup.find("meta", attrs={"name": re.compile(r"^description$", re.I)})
    if not meta:
        return ""
    return clean_text(meta.get("content") or "")


def heading_section_items(soup: BeautifulSoup, heading_re: re.Pattern) -> Optional[List[str]]:
    """List items after the first matching heading, up to the next heading."""
    for heading in soup.find_all(HEADING_TAGS):
        if not heading_re.search(heading.get_text(" ", strip=True)):
            continue
        items: List[str] = []
        for element in heading.find_all_next(HEADING_TAGS + ["li"]):
            if element.name in HEADING_TAGS:
                break
            if element.find_parent("li") is not None:
                continue
            text = clean_text(element.get_text(" ", strip=True))
            if text:
                items.append(text)
        return items or None
    return None


def keyword_scan(
    soup: BeautifulSoup,
    *,
    min_len: int,
    max_len: int,
    keywords: Sequence[str],
    limit: int,
) -> Optional[List[str]]:
    """Scan list items, then paragraphs, then leaf divs for keyword-bearing lines."""
    for tag in SCAN_TAGS:
        matches: List[str] = []
        for element in soup.find_all(tag):
            if tag == "div" and element.find(True) is not None:
                continue
            text = clean_text(element.get_text(" ", strip=True))
            lowered = text.lower()
            if not (min_len < len(text) < max_len):
                continue
            if "http" in lowered:
                continue
            if any(keyword in lowered for keyword in keywords):
                matches.append(text)
        if matches:
            return matches[:limit]
    return None


INGREDIENT_STRATEGIES: List[Strategy] = [
    partial(heading_section_items, heading_re=INGREDIENT_HEADING_RE),
    partial(keyword_scan, min_len=10, max_len=200, keywords=UNIT_KEYWORDS, limit=20),
]

STEP_STRATEGIES: List[Strategy] = [
    partial(heading_section_items, heading_re=STEP_HEADING_RE),
    partial(keyword_scan, min_len=20, max_len=500, keywords=ACTION_KEYWORDS, limit=15),
]


def first_non_empty(strategies: Sequence[Strategy], soup: BeautifulSoup) -> Optional[List[str]]:
    for strategy in strategies:
        try:
            found = strategy(soup)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Heuristic strategy %s failed: %s", strategy, exc)
            continue
        if found:
            return found
    return None


def _search(pattern: re.Pattern, html: str) -> Optional[str]:
    match = pattern.search(html)
    return match.group(1) if match else None


def extract_heuristic(html: str) -> ExtractedContent:
    """Best-effort extraction; never raises."""
    html = html or ""
    try:
        soup = BeautifulSoup(html, "lxml")
    except Exception as exc:  # noqa: BLE001
        logger.warning("Unable to parse HTML for heuristics: %s", exc)
        return ExtractedContent()

    ingredients = first_non_empty(INGREDIENT_STRATEGIES, soup)
    steps = first_non_empty(STEP_STRATEGIES, soup)
    logger.info(
        "Heuristic extraction: ingredients=%d, steps=%d",
        len(ingredients or []),
        len(steps or []),
    )

    difficulty = _search(DIFFICULTY_RE, html)
    return ExtractedContent(
        title=extract_title(soup),
        excerpt=extract_excerpt(soup),
        ingredients=ingredients,
        steps=steps,
        prep_time=_search(PREP_TIME_RE, html),
        total_time=_search(TOTAL_TIME_RE, html),
        servings=_search(SERVINGS_RE, html),
        difficulty=difficulty.lower() if difficulty else None,
    )


def extract_social_meta(html: str) -> ExtractedContent:
    """Social pages only expose a title and a description worth keeping."""
    try:
        soup = BeautifulSoup(html or "", "lxml")
    except Exception as exc:  # noqa: BLE001
        logger.warning("Unable to parse social page HTML: %s", exc)
        return ExtractedContent()
    return ExtractedContent(title=extract_title(soup), excerpt=extract_excerpt(soup))
