from typing import List

from pydantic import BaseModel, Field

from brewbook.app.services.url_parsing.models import ScrapeResult


class ScrapeRequest(BaseModel):
    urls: List[str] = Field(min_length=1)


class SavedRecipe(BaseModel):
    id: int
    title: str
    url: str


class ScrapeResponse(BaseModel):
    success: bool = True
    scraped: int
    successful: int
    saved: int
    results: List[ScrapeResult]
    saved_recipes: List[SavedRecipe] = Field(default_factory=list)
