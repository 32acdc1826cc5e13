"""
External API Integrations

Clients for third-party APIs used in company research:
- Bright Data: web search, page scraping and social profile data
- Perplexity: online search model for the researcher role
- Config: Unified configuration and client management
"""

from .brightdata import (
    BrightDataClient,
    BrightDataError,
    SearchResult,
    SearchResponse,
    ScrapedPage,
    SocialProfileData,
    extract_social_links,
)
from .perplexity import (
    PerplexityClient,
    PerplexityError,
    PerplexityResult,
)
from .config import (
    ExternalAPIConfig,
    ExternalAPIClients,
)

__all__ = [
    # Bright Data
    "BrightDataClient",
    "BrightDataError",
    "SearchResult",
    "SearchResponse",
    "ScrapedPage",
    "SocialProfileData",
    "extract_social_links",
    # Perplexity
    "PerplexityClient",
    "PerplexityError",
    "PerplexityResult",
    # Config
    "ExternalAPIConfig",
    "ExternalAPIClients",
]
