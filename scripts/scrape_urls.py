#!/usr/bin/env python
"""
Scrape recipe pages from the command line and print the results as JSON.

With --save, successful results are stored as recipes the same way the
/scrape endpoint stores them, and their sources are recorded.
"""
import argparse
import asyncio
import json
import logging
import sys
from functools import partial
from pathlib import Path

import httpx
from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(REPO_ROOT / ".env")

from brewbook.app.api.routes.scrape import recipe_from_scrape  # noqa: E402
from brewbook.app.core.config import get_settings  # noqa: E402
from brewbook.app.core.logging_config import configure_logging  # noqa: E402
from brewbook.app.db.session import SessionLocal  # noqa: E402
from brewbook.app.services import recipes_service  # noqa: E402
from brewbook.app.services.web_scraper import ScrapeOrchestrator  # noqa: E402

logger = logging.getLogger("scrape_urls")


async def run(urls, save: bool) -> int:
    settings = get_settings()
    timeout = httpx.Timeout(settings.scraper_timeout_seconds, connect=5.0)
    with SessionLocal() as db:
        sink = partial(recipes_service.upsert_external_source, db) if save else None
        async with httpx.AsyncClient(timeout=timeout) as client:
            orchestrator = ScrapeOrchestrator.from_settings(client, settings, source_sink=sink)
            results = await orchestrator.scrape_batch(urls)

        for result in results:
            if save and result.success and result.data is not None:
                try:
                    recipe = recipes_service.create_recipe(db, recipe_from_scrape(result))
                    logger.info("Saved %s as recipe %s", result.source.url, recipe.id)
                except ValueError as exc:
                    logger.warning("Not saving %s: %s", result.source.url, exc)
            print(json.dumps(result.model_dump(mode="json")))

    return 0 if all(r.success for r in results) else 1


def main():
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("urls", nargs="+", help="pages to scrape, in order")
    parser.add_argument("--save", action="store_true", help="store successful results as recipes")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args()

    configure_logging(args.log_level or get_settings().log_level)
    sys.exit(asyncio.run(run(args.urls, args.save)))


if __name__ == "__main__":
    main()
