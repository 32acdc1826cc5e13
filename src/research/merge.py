"""
Research Bundle Merging

Fuses the researcher's bundle with social discovery output. URLs that
came from the web (scraped or searched) beat the model's guesses.
"""

import logging
from typing import Dict, Iterable, List, Optional

from .models import (
    CompanyProfile,
    DirectoryListing,
    RawResearchBundle,
    SocialDiscoveryResult,
)

logger = logging.getLogger(__name__)


def normalize_url(url: Optional[str]) -> Optional[str]:
    """Add https:// when missing and drop trailing slashes."""
    if not url or not isinstance(url, str):
        return None
    url = url.strip()
    if not url or url.lower() in ("null", "none", "n/a"):
        return None
    if not url.lower().startswith(("http://", "https://")):
        url = "https://" + url
    return url.rstrip("/")


def dedupe_preserving_order(items: Iterable[str]) -> List[str]:
    seen = set()
    unique = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def dedupe_listings(listings: Iterable[DirectoryListing]) -> List[DirectoryListing]:
    seen = set()
    unique = []
    for listing in listings:
        key = (normalize_url(listing.url) or "").lower()
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(listing)
    return unique


def merge_social_discovery(
    bundle: RawResearchBundle,
    discovery: Optional[SocialDiscoveryResult],
) -> RawResearchBundle:
    """
    Combine the researcher's bundle with social discovery.

    Args:
        bundle: Output of deep research
        discovery: Output of social discovery (may be None or empty)

    Returns:
        New bundle; discovery URLs override model-reported ones
    """
    social: Dict[str, Optional[str]] = {
        platform: normalize_url(url) for platform, url in bundle.social_profiles.items()
    }

    has_discovery = discovery is not None and not discovery.is_empty

    overridden = []
    if has_discovery:
        for platform, url in discovery.social_links.items():
            normalized = normalize_url(url)
            if not normalized:
                continue
            if social.get(platform) and social[platform] != normalized:
                overridden.append(platform)
            social[platform] = normalized

    if overridden:
        logger.info(f"Discovered links replaced model guesses for: {', '.join(overridden)}")

    profile_data = list(bundle.social_profile_data)
    if has_discovery:
        profile_data.extend(p.to_dict() if hasattr(p, "to_dict") else p for p in discovery.profiles)

    sources = list(bundle.sources)
    if has_discovery:
        sources.extend(discovery.sources)

    return RawResearchBundle(
        company_info=dict(bundle.company_info),
        social_profiles=social,
        directory_listings=dedupe_listings(
            DirectoryListing(name=d.name, url=normalize_url(d.url), category=d.category)
            for d in bundle.directory_listings
            if normalize_url(d.url)
        ),
        reviews=list(bundle.reviews),
        competitors=dedupe_preserving_order(bundle.competitors),
        website_analysis=dict(bundle.website_analysis),
        sources=dedupe_preserving_order(sources),
        social_profile_data=profile_data,
    )


def apply_discovered_links(
    profile: CompanyProfile,
    discovered: Dict[str, str],
) -> CompanyProfile:
    """Overlay web-discovered social links on a structured profile."""
    for platform, url in discovered.items():
        normalized = normalize_url(url)
        if normalized:
            profile.social_links[platform] = normalized
    return profile
