"""Scrape orchestration: robots policy, classification, fetch and extraction per URL."""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence

import httpx

from brewbook.app.core.config import Settings
from brewbook.app.core.errors import FetchFailed, PolicyDenied
from brewbook.app.services.url_parsing.classifier import classify_domain, route_for
from brewbook.app.services.url_parsing.extractors import (
    extract_heuristic,
    extract_social_meta,
    try_extract_structured,
)
from brewbook.app.services.url_parsing.html_fetcher import domain_of, fetch_html, is_private_host
from brewbook.app.services.url_parsing.models import (
    ContentCategory,
    ExtractedContent,
    ExtractionRoute,
    ScrapeResult,
    ScrapeSource,
)
from brewbook.app.services.url_parsing.robots import RobotsPolicyChecker

logger = logging.getLogger(__name__)

SourceSink = Callable[[ScrapeResult], None]
Sleep = Callable[[float], Awaitable[None]]


def extract_content(html: str, route: ExtractionRoute) -> ExtractedContent:
    if route is ExtractionRoute.SOCIAL_META:
        return extract_social_meta(html)
    structured = try_extract_structured(html)
    if structured is not None:
        return structured
    logger.info("No JSON-LD recipe found, falling back to heuristics")
    return extract_heuristic(html)


class ScrapeOrchestrator:
    """Scrapes URLs one at a time.

    Each URL yields exactly one ScrapeResult; errors are captured on the
    result and never abort a batch. Batches run sequentially with a pause
    between requests.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        user_agent: str,
        robots: RobotsPolicyChecker,
        respect_robots: bool = False,
        batch_delay_seconds: float = 1.0,
        source_sink: Optional[SourceSink] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._client = client
        self._user_agent = user_agent
        self._robots = robots
        self._respect_robots = respect_robots
        self._batch_delay_seconds = batch_delay_seconds
        self._source_sink = source_sink
        self._sleep = sleep

    @classmethod
    def from_settings(
        cls,
        client: httpx.AsyncClient,
        settings: Settings,
        source_sink: Optional[SourceSink] = None,
    ) -> "ScrapeOrchestrator":
        return cls(
            client,
            user_agent=settings.scraper_user_agent,
            robots=RobotsPolicyChecker(client, user_agent=settings.scraper_robots_agent),
            respect_robots=settings.scraper_respect_robots,
            batch_delay_seconds=settings.scraper_batch_delay_seconds,
            source_sink=source_sink,
        )

    async def scrape_one(self, url: str) -> ScrapeResult:
        domain = ""
        category = ContentCategory.OTHER
        robots_allowed = True
        try:
            domain = domain_of(url)
            if is_private_host(domain):
                raise FetchFailed("URL points to a private or disallowed host")
            decision = await self._robots.check(url)
            robots_allowed = decision.allowed
            if not decision.allowed:
                if self._respect_robots:
                    raise PolicyDenied("Access denied by robots.txt")
                logger.warning("robots.txt disallows %s; scraping anyway (robots policy not enforced)", url)

            if decision.crawl_delay_seconds > 0:
                logger.info("Respecting crawl delay of %ss for %s", decision.crawl_delay_seconds, domain)
                await self._sleep(decision.crawl_delay_seconds)

            category = classify_domain(domain)
            html = await fetch_html(self._client, url, self._user_agent)
            data = extract_content(html, route_for(category))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Scrape failed for %s: %s", url, exc)
            return ScrapeResult(
                success=False,
                error=str(exc) or exc.__class__.__name__,
                source=ScrapeSource(
                    url=url,
                    domain=domain,
                    content_type=category,
                    robots_allowed=robots_allowed,
                ),
            )

        result = ScrapeResult(
            success=True,
            data=data,
            source=ScrapeSource(
                url=url,
                domain=domain,
                content_type=category,
                robots_allowed=robots_allowed,
            ),
        )
        self._record_source(result)
        return result

    async def scrape_batch(self, urls: Sequence[str]) -> List[ScrapeResult]:
        results: List[ScrapeResult] = []
        for index, url in enumerate(urls):
            results.append(await self.scrape_one(url))
            if index < len(urls) - 1 and self._batch_delay_seconds > 0:
                await self._sleep(self._batch_delay_seconds)
        logger.info(
            "Scraped %d URLs: %d succeeded, %d failed",
            len(results),
            sum(1 for r in results if r.success),
            sum(1 for r in results if not r.success),
        )
        return results

    def _record_source(self, result: ScrapeResult) -> None:
        if self._source_sink is None:
            return
        try:
            self._source_sink(result)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to record external source %s: %s", result.source.url, exc)
