"""Recipe extractors for different parsing strategies."""

from brewbook.app.services.url_parsing.extractors.heuristic import (
    extract_heuristic,
    extract_social_meta,
)
from brewbook.app.services.url_parsing.extractors.schema_org import try_extract_structured

__all__ = [
    "extract_heuristic",
    "extract_social_meta",
    "try_extract_structured",
]
