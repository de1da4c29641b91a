import json
from functools import partial

import httpx
import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from brewbook.app.api.routes.scrape import recipe_from_scrape
from brewbook.app.db import models
from brewbook.app.db.base import Base
from brewbook.app.services import recipes_service
from brewbook.app.services.url_parsing.models import ExtractedContent, ScrapeResult, ScrapeSource
from brewbook.app.services.url_parsing.robots import RobotsPolicyChecker
from brewbook.app.services.web_scraper import ScrapeOrchestrator

FIRST_URL = "https://coffee-recipes.com/olla"
SECOND_URL = "https://coffee-recipes.com/bombon"


def recipe_page(name):
    return "<html><head><script type=\"application/ld+json\">%s</script></head></html>" % json.dumps(
        {
            "@type": "Recipe",
            "name": name,
            "recipeIngredient": ["1 shot espresso", "1 tbsp condensed milk"],
            "recipeInstructions": ["Layer milk and espresso."],
        }
    )


@pytest.fixture
def standalone_session():
    # Separate engine so a real rollback does not touch the shared test transaction.
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(bind=engine)
    session = Session(engine, autoflush=False)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def scrape_result(url):
    return ScrapeResult(
        success=True,
        data=ExtractedContent(title="Cafe Bombon"),
        source=ScrapeSource(url=url, domain="coffee-recipes.com"),
    )


def test_failed_upsert_leaves_session_usable(standalone_session):
    db = standalone_session
    # A pending duplicate makes the next commit violate the unique url index.
    db.add(models.ExternalSource(url=FIRST_URL, domain="coffee-recipes.com"))

    with pytest.raises(SQLAlchemyError):
        recipes_service.upsert_external_source(db, scrape_result(FIRST_URL))

    record = recipes_service.upsert_external_source(db, scrape_result(SECOND_URL))
    assert record.id is not None
    urls = db.scalars(select(models.ExternalSource.url)).all()
    assert urls == [SECOND_URL]


@pytest.mark.asyncio
async def test_batch_continues_after_sink_failure(standalone_session):
    db = standalone_session
    pages = {FIRST_URL: recipe_page("Cafe de Olla"), SECOND_URL: recipe_page("Cafe Bombon")}

    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url in pages:
            return httpx.Response(200, text=pages[url])
        return httpx.Response(404)

    db.add(models.ExternalSource(url=FIRST_URL, domain="coffee-recipes.com"))
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        orchestrator = ScrapeOrchestrator(
            client,
            user_agent="test-agent",
            robots=RobotsPolicyChecker(client, user_agent="test-agent"),
            batch_delay_seconds=0,
            source_sink=partial(recipes_service.upsert_external_source, db),
        )
        results = await orchestrator.scrape_batch([FIRST_URL, SECOND_URL])

    assert [r.success for r in results] == [True, True]
    sources = db.scalars(select(models.ExternalSource)).all()
    assert [s.url for s in sources] == [SECOND_URL]
    assert sources[0].title == "Cafe Bombon"

    recipe = recipes_service.create_recipe(db, recipe_from_scrape(results[1]), author_id="1")
    assert db.get(models.Recipe, recipe.id).title == "Cafe Bombon"
