"""Pydantic models for URL scraping and recipe extraction."""

import enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ContentCategory(str, enum.Enum):
    """What kind of site a domain looks like."""

    SOCIAL = "social"
    RECIPE_SITE = "recipe_site"
    BLOG = "blog"
    OTHER = "other"


class ExtractionRoute(str, enum.Enum):
    """Which extractor handles a page."""

    SOCIAL_META = "social_meta"
    RECIPE = "recipe"


class RobotsDecision(BaseModel):
    """Outcome of a robots.txt check for a single URL."""

    allowed: bool = True
    crawl_delay_seconds: float = 0


class ExtractedContent(BaseModel):
    """Content pulled out of one fetched page."""

    title: str = ""
    excerpt: str = ""
    ingredients: Optional[List[str]] = None
    steps: Optional[List[str]] = None
    image_url: Optional[str] = None
    prep_time: Optional[str] = None
    total_time: Optional[str] = None
    servings: Optional[str] = None
    difficulty: Optional[str] = None
    cuisine: Optional[str] = None
    course: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class ScrapeSource(BaseModel):
    url: str
    domain: str
    content_type: ContentCategory = ContentCategory.OTHER
    robots_allowed: bool = True


class ScrapeResult(BaseModel):
    """Result of scraping one URL; failures are reported, never raised."""

    success: bool
    data: Optional[ExtractedContent] = None
    error: Optional[str] = None
    source: ScrapeSource
