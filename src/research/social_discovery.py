"""
Social Discovery

Finds a company's social profiles from real web data rather than model
guesses:
1. Scrape the company website and take its outbound social links
2. Search each still-missing platform with a site: query
3. Pull follower/engagement data for Instagram, LinkedIn and YouTube

Links scraped from the company's own website are authoritative. Every
step fails independently.
"""

import logging
from typing import List, Optional, Tuple, TYPE_CHECKING

from src.integrations.brightdata import BrightDataError, SocialProfileData
from src.utils.concurrency import gather_successes
from src.utils.domain_filter import extract_domain

from .models import SocialDiscoveryResult

if TYPE_CHECKING:
    from src.integrations.brightdata import BrightDataClient

logger = logging.getLogger(__name__)


# Platforms searched when the website did not link them
SEARCH_PLATFORMS = ["facebook", "instagram", "linkedin", "twitter", "youtube"]

# Platforms with a profile dataset
ENRICH_PLATFORMS = ["instagram", "linkedin", "youtube"]

PLATFORM_DOMAINS = {
    "facebook": ["facebook.com", "fb.com"],
    "instagram": ["instagram.com"],
    "linkedin": ["linkedin.com"],
    "twitter": ["twitter.com", "x.com"],
    "youtube": ["youtube.com"],
    "tiktok": ["tiktok.com"],
}


def belongs_to_platform(url: str, platform: str) -> bool:
    domain = extract_domain(url)
    return any(domain == d or domain.endswith("." + d) for d in PLATFORM_DOMAINS.get(platform, []))


class SocialDiscovery:
    """
    Social link discovery backed by the web search/scrape provider.

    No-op when the provider is not configured.
    """

    def __init__(
        self,
        provider: Optional["BrightDataClient"] = None,
        timeout: Optional[float] = 10.0,
    ):
        self.provider = provider
        self.timeout = timeout

    async def discover(
        self,
        company_name: Optional[str],
        website_url: Optional[str] = None,
        result: Optional[SocialDiscoveryResult] = None,
    ) -> SocialDiscoveryResult:
        """
        Discover social links for a company.

        Args:
            company_name: Name to search for
            website_url: Company website (scheme optional)
            result: Filled in place when given, so a caller that times out keeps what landed

        Returns:
            SocialDiscoveryResult (empty when no provider is configured)
        """
        result = result if result is not None else SocialDiscoveryResult()
        if self.provider is None:
            logger.info("Social discovery skipped: search provider not configured")
            return result

        if website_url:
            await self._scrape_website(website_url, result)

        if company_name:
            await self._search_platforms(company_name, result)

        result.profiles = await self._enrich_profiles(result)

        logger.info(
            f"Social discovery found {len(result.social_links)} links "
            f"({len(result.scraped_platforms)} from website), {len(result.profiles)} profiles enriched"
        )
        return result

    async def _scrape_website(self, website_url: str, result: SocialDiscoveryResult) -> None:
        try:
            page = await self.provider.scrape(website_url)
        except BrightDataError as e:
            logger.warning(f"Website scrape failed for {website_url}: {e}")
            return

        for platform, url in page.social_links.items():
            result.social_links[platform] = url
            result.scraped_platforms.append(platform)
        if page.social_links:
            result.sources.append(page.url)

    async def _search_platforms(self, company_name: str, result: SocialDiscoveryResult) -> None:
        missing = [p for p in SEARCH_PLATFORMS if p not in result.social_links]
        found = await gather_successes(
            [self._search_platform(company_name, platform) for platform in missing],
            label="social search",
            timeout=self.timeout,
        )
        for platform, url, query in found:
            if platform not in result.social_links:
                result.social_links[platform] = url
                result.sources.append(query)

    async def _search_platform(
        self,
        company_name: str,
        platform: str,
    ) -> Optional[Tuple[str, str, str]]:
        query = f'"{company_name}" site:{platform}.com'
        try:
            serp = await self.provider.search(query, num_results=5)
        except BrightDataError as e:
            logger.warning(f"Social search failed for {platform}: {e}")
            return None

        for item in serp.results:
            if belongs_to_platform(item.url, platform):
                return platform, item.url, query
        return None

    async def _enrich_profiles(self, result: SocialDiscoveryResult) -> List[SocialProfileData]:
        targets = [p for p in ENRICH_PLATFORMS if result.social_links.get(p)]
        if not targets:
            return []

        return await gather_successes(
            [self._fetch_profile(platform, result.social_links[platform]) for platform in targets],
            label="social enrichment",
            timeout=self.timeout,
        )

    async def _fetch_profile(self, platform: str, url: str) -> Optional[SocialProfileData]:
        profile = await self.provider.get_social_profile(platform, url)
        return profile if profile.has_data else None
