"""Domain classification and extractor routing."""

from brewbook.app.services.url_parsing.models import ContentCategory, ExtractionRoute

SOCIAL_DOMAINS = (
    "instagram.com",
    "tiktok.com",
    "twitter.com",
    "x.com",
    "facebook.com",
    "pinterest.com",
    "youtube.com",
)
BLOG_KEYWORDS = ("blog", "medium.com", "wordpress.com", "coffeecopycat.com")
RECIPE_KEYWORDS = ("recipe", "food", "cooking")


def _matches(domain: str, keywords) -> bool:
    return any(keyword in domain for keyword in keywords)


def _is_social(domain: str) -> bool:
    # "x.com" is a suffix of many unrelated hosts, so it only counts as the whole host.
    for keyword in SOCIAL_DOMAINS:
        if keyword == "x.com":
            if domain == keyword or domain.endswith(".x.com"):
                return True
        elif keyword in domain:
            return True
    return False


def classify_domain(domain: str) -> ContentCategory:
    """First match wins: social, blog, recipe keywords, then other."""
    domain = (domain or "").lower()
    if _is_social(domain):
        return ContentCategory.SOCIAL
    if _matches(domain, BLOG_KEYWORDS):
        return ContentCategory.BLOG
    if _matches(domain, RECIPE_KEYWORDS):
        return ContentCategory.RECIPE_SITE
    return ContentCategory.OTHER


def route_for(category: ContentCategory) -> ExtractionRoute:
    """Blogs and unknown sites go through the recipe extractor as well."""
    if category is ContentCategory.SOCIAL:
        return ExtractionRoute.SOCIAL_META
    return ExtractionRoute.RECIPE
