"""
Domain Filtering Utilities

Shared domain exclusion logic for competitor identification:
- Competitor-fallback search results ("best roofing companies in Denver")
- Competitor names returned by the research model

Review aggregators, home-service directories and social platforms rank for
"best <trade> in <city>" searches but are never competitors themselves, so
their result titles ("THE BEST 10 Roofing in Denver, CO - Yelp") must never
be treated as company names.
"""

import logging
from typing import Optional, Set
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


# =============================================================================
# EXCLUDED DOMAINS
# =============================================================================

# Social Media Platforms
SOCIAL_MEDIA = {
    "facebook.com", "fb.com", "fb.me",
    "twitter.com", "x.com", "t.co",
    "instagram.com",
    "linkedin.com", "lnkd.in",
    "tiktok.com",
    "pinterest.com", "pin.it",
    "reddit.com",
    "nextdoor.com",
    "threads.net",
}

# Video Platforms
VIDEO_PLATFORMS = {
    "youtube.com", "youtu.be",
    "vimeo.com",
}

# Review Aggregators
REVIEW_AGGREGATORS = {
    "yelp.com",
    "yellowpages.com",
    "trustpilot.com",
    "bbb.org",
    "birdeye.com",
    "consumeraffairs.com",
    "superpages.com",
}

# Home-Service Lead Marketplaces & Directories
HOME_SERVICE_DIRECTORIES = {
    "angi.com", "angieslist.com",
    "homeadvisor.com",
    "thumbtack.com",
    "houzz.com",
    "porch.com",
    "buildzoom.com",
    "manta.com",
    "expertise.com",
    "threebestrated.com",
    "networx.com",
    "bark.com",
    "mapquest.com",
    "chamberofcommerce.com",
}

# Search Engines & General Platforms
TECH_GIANTS = {
    "google.com", "maps.google.com", "goo.gl",
    "bing.com",
    "apple.com",
    "amazon.com",
    "microsoft.com",
}

# Reference & Media
REFERENCE_SITES = {
    "wikipedia.org",
    "quora.com",
    "forbes.com",
    "usnews.com",
    "medium.com",
}

GOVERNMENT_PATTERNS = {
    ".gov",
    ".edu",
    ".mil",
}

EXCLUDED_DOMAINS: Set[str] = (
    SOCIAL_MEDIA |
    VIDEO_PLATFORMS |
    REVIEW_AGGREGATORS |
    HOME_SERVICE_DIRECTORIES |
    TECH_GIANTS |
    REFERENCE_SITES
)


def extract_domain(url_or_domain: Optional[str]) -> str:
    """
    Normalize a URL or bare domain to a lowercase host without "www.".

    "https://www.Yelp.com/biz/acme" -> "yelp.com"
    """
    if not url_or_domain:
        return ""

    value = url_or_domain.strip().lower()
    if "://" not in value:
        value = "https://" + value

    try:
        host = urlparse(value).hostname or ""
    except ValueError:
        return ""

    if host.startswith("www."):
        host = host[4:]
    return host


def _matches(domain: str, candidates: Set[str]) -> bool:
    return domain in candidates or any(domain.endswith("." + d) for d in candidates)


def is_excluded_domain(domain: Optional[str]) -> bool:
    """
    Check if a domain should be excluded from competitor candidates.

    Matching strategies:
    1. Exact match against known domains
    2. Subdomain match (m.yelp.com -> yelp.com)
    3. Government/educational TLD patterns

    Args:
        domain: Domain or URL to check

    Returns:
        True if the domain is an aggregator/platform, False if it may be a competitor
    """
    domain_lower = extract_domain(domain)
    if not domain_lower:
        return True

    if _matches(domain_lower, EXCLUDED_DOMAINS):
        return True

    for pattern in GOVERNMENT_PATTERNS:
        if domain_lower.endswith(pattern) or (pattern + ".") in domain_lower:
            return True

    return False


def filter_competitor_domains(items: list, source: str = "unknown") -> list:
    """
    Filter a list of domains/URLs, removing excluded platforms.

    Args:
        items: Strings, or dicts carrying a 'domain' or 'url' key
        source: Description of where these came from (for logging)

    Returns:
        Filtered list with excluded platforms removed
    """
    filtered = []
    excluded_count = 0

    for item in items:
        if isinstance(item, str):
            domain = item
        elif isinstance(item, dict):
            domain = item.get("domain") or item.get("url", "")
        else:
            domain = getattr(item, "domain", "") or getattr(item, "url", "")

        if is_excluded_domain(domain):
            excluded_count += 1
            logger.debug(f"Excluded platform domain from {source}: {domain}")
        else:
            filtered.append(item)

    if excluded_count > 0:
        logger.info(f"Filtered {excluded_count} platform domains from {source}")

    return filtered


def get_exclusion_reason(domain: str) -> Optional[str]:
    """
    Get the reason why a domain is excluded.

    Args:
        domain: Domain to check

    Returns:
        Reason string if excluded, None if it may be a competitor
    """
    domain_lower = extract_domain(domain)
    if not domain_lower:
        return "Empty domain"

    if _matches(domain_lower, SOCIAL_MEDIA):
        return "Social media platform"

    if _matches(domain_lower, VIDEO_PLATFORMS):
        return "Video platform"

    if _matches(domain_lower, REVIEW_AGGREGATORS):
        return "Review aggregator"

    if _matches(domain_lower, HOME_SERVICE_DIRECTORIES):
        return "Home-service directory"

    if _matches(domain_lower, TECH_GIANTS):
        return "Search engine or general platform"

    if _matches(domain_lower, REFERENCE_SITES):
        return "Reference/media site"

    for pattern in GOVERNMENT_PATTERNS:
        if domain_lower.endswith(pattern) or (pattern + ".") in domain_lower:
            return "Government/educational site"

    return None
