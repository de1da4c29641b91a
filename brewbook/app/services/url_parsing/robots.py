"""robots.txt policy checks for the scraper."""

import logging
from typing import Optional
from urllib.parse import urlparse

import httpx

from brewbook.app.services.url_parsing.models import RobotsDecision

logger = logging.getLogger(__name__)


class RobotsPolicyChecker:
    """Fetches robots.txt for a URL's origin and decides whether it may be scraped.

    The decision is best effort and fails open: a missing, unreachable or
    non-2xx robots.txt allows everything with no crawl delay.

    Disallow rules are matched by substring containment against the full URL
    rather than by path prefix. This is looser than the robots.txt standard
    (``Disallow: /a`` also blocks ``/b?next=/a``) and is kept on purpose.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        user_agent: str = "BrewBookBot/1.0 (+https://brewbook.app/bot)",
        agent_name: Optional[str] = None,
    ) -> None:
        self._client = client
        self._user_agent = user_agent
        self._agent_name = (agent_name or user_agent.split("/")[0]).strip().lower()

    async def check(self, url: str) -> RobotsDecision:
        parsed = urlparse(url)
        robots_url = f"{parsed.scheme}://{parsed.netloc}/robots.txt"
        try:
            response = await self._client.get(robots_url, headers={"User-Agent": self._user_agent})
        except httpx.HTTPError as exc:
            logger.warning("Error checking robots.txt for %s: %s", url, exc)
            return RobotsDecision()
        if not response.is_success:
            logger.debug("No robots.txt at %s (status %s)", robots_url, response.status_code)
            return RobotsDecision()
        return self.evaluate(response.text, url)

    def evaluate(self, robots_text: str, url: str) -> RobotsDecision:
        """Apply robots.txt rules to ``url``."""
        current_agent = ""
        allowed = True
        delay = 0.0
        for line in robots_text.splitlines():
            trimmed = line.strip().lower()
            if trimmed.startswith("user-agent:"):
                current_agent = trimmed[len("user-agent:"):].strip()
                continue
            if current_agent not in ("*", self._agent_name):
                continue
            if trimmed.startswith("disallow:"):
                path = trimmed[len("disallow:"):].strip()
                # An empty Disallow line allows everything.
                if path and path in url.lower():
                    allowed = False
            elif trimmed.startswith("crawl-delay:"):
                try:
                    delay = max(delay, float(trimmed[len("crawl-delay:"):].strip()))
                except ValueError:
                    continue
        return RobotsDecision(allowed=allowed, crawl_delay_seconds=delay)
