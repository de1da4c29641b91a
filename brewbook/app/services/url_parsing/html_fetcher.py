"""HTML fetching and URL validation utilities."""

import ipaddress
import logging
from urllib.parse import urlparse

import httpx

from brewbook.app.core.errors import FetchFailed

logger = logging.getLogger(__name__)


def is_private_host(host: str) -> bool:
    """Check if a host is private/localhost."""
    hostname = host.split(":")[0]
    try:
        ip = ipaddress.ip_address(hostname)
        return ip.is_private or ip.is_loopback
    except ValueError:
        return hostname.lower() in {"localhost"}


def domain_of(url: str) -> str:
    """Hostname of a URL; raises ValueError when the URL is not http(s)."""
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(f"Invalid URL: {url}")
    return (parsed.hostname or "").lower()


async def fetch_html(client: httpx.AsyncClient, url: str, user_agent: str) -> str:
    """GET a page and return its decoded text; network errors and non-2xx raise FetchFailed."""
    if is_private_host(urlparse(url).hostname or ""):
        raise FetchFailed("URL points to a private or disallowed host")

    headers = {
        "User-Agent": user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
    }
    try:
        response = await client.get(url, headers=headers, follow_redirects=True)
    except httpx.TimeoutException as exc:
        raise FetchFailed(f"Timed out fetching {url}") from exc
    except httpx.HTTPError as exc:
        raise FetchFailed(f"Network error: {exc}") from exc

    if not response.is_success:
        raise FetchFailed(f"HTTP {response.status_code}")

    logger.debug(
        "Fetched %s (%d bytes, %s)",
        url,
        len(response.content),
        response.headers.get("content-type", "unknown"),
    )
    return response.text
