"""URL scraping package.

This package provides the pieces the scrape orchestrator composes: robots.txt
policy checks, domain classification, HTML fetching, and content extraction
from schema.org JSON-LD or heuristic HTML parsing.
"""

from brewbook.app.services.url_parsing.classifier import classify_domain, route_for
from brewbook.app.services.url_parsing.html_fetcher import (
    domain_of,
    fetch_html,
    is_private_host,
)
from brewbook.app.services.url_parsing.models import (
    ContentCategory,
    ExtractedContent,
    ExtractionRoute,
    RobotsDecision,
    ScrapeResult,
    ScrapeSource,
)
from brewbook.app.services.url_parsing.parsing_utils import (
    clean_text,
    coerce_text,
    extract_image,
    extract_ingredient_list,
    extract_instruction_text,
)
from brewbook.app.services.url_parsing.robots import RobotsPolicyChecker

__all__ = [
    # Models
    "ContentCategory",
    "ExtractedContent",
    "ExtractionRoute",
    "RobotsDecision",
    "ScrapeResult",
    "ScrapeSource",
    # Policy and classification
    "RobotsPolicyChecker",
    "classify_domain",
    "route_for",
    # HTML fetching
    "domain_of",
    "fetch_html",
    "is_private_host",
    # Parsing utilities
    "clean_text",
    "coerce_text",
    "extract_image",
    "extract_ingredient_list",
    "extract_instruction_text",
]
