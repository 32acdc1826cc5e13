"""
Deep Research Execution

Second model phase. The researcher (an online search model) runs the
strategy's queries and returns everything it can find about the company:
contact details, services, social profiles, directory listings, reviews,
competitors and a quick website assessment.
"""

import logging
from typing import Optional, Tuple, TYPE_CHECKING

from src.llm.errors import ModelInvocationError, ParseError
from src.llm.json_utils import parse_model_response
from src.llm.router import ModelRole

from .industries import get_industry_directories
from .models import (
    DirectoryListing,
    LinkCategory,
    RawResearchBundle,
    ResearchRequest,
    ResearchStrategy,
    ReviewSummary,
)
from .schemas import DeepResearchResponse

if TYPE_CHECKING:
    from src.llm.invoker import ModelInvoker

logger = logging.getLogger(__name__)


RESEARCH_USER_PROMPT = """You are an expert research investigator for trade-service companies. Conduct COMPREHENSIVE research on this company to gather ALL available information for SEO and conversion optimization.

TARGET:
- Website: {website}
- Company Name: {company_name}
- Location: {location}
- Industry: {industry}

RESEARCH MISSION:
1. Find ALL social media profiles (Facebook, Instagram, LinkedIn, Twitter, YouTube, TikTok, Pinterest, Nextdoor)
2. Find ALL directory listings (BBB, Angi, HomeAdvisor, Yelp, Google Business, Houzz, Thumbtack, Porch)
3. Find manufacturer certifications if applicable. Industry directories to check: {directories}
4. Identify main competitors in the area
5. Analyze the website for SEO factors
6. Find review ratings across platforms
7. Identify USPs and trust signals
8. Find contact information (phone, email, address)
9. Find service areas and services offered

Search using these strategies: {queries}

Respond with comprehensive JSON:
{{
  "companyInfo": {{
    "name": "official company name",
    "tagline": "company tagline if found",
    "phone": "phone number",
    "email": "email address",
    "address": "full address",
    "city": "city",
    "state": "state",
    "stateAbbr": "XX",
    "zipCode": "zip",
    "services": ["service1", "service2"],
    "serviceAreas": ["city1", "city2"],
    "yearsInBusiness": number,
    "employeeCount": "range",
    "certifications": ["cert1", "cert2"],
    "awards": ["award1"],
    "usps": ["unique selling point 1", "usp 2"]
  }},
  "socialProfiles": {{
    "facebook": "full URL or null",
    "instagram": "full URL or null",
    "linkedin": "full URL or null",
    "twitter": "full URL or null",
    "youtube": "full URL or null",
    "tiktok": "full URL or null",
    "pinterest": "full URL or null",
    "nextdoor": "full URL or null"
  }},
  "directoryListings": [
    {{"name": "BBB", "url": "full url", "category": "directory"}},
    {{"name": "Yelp", "url": "full url", "category": "review_platform"}}
  ],
  "reviews": [
    {{"platform": "Google", "rating": 4.8, "count": 150}}
  ],
  "competitors": ["competitor 1", "competitor 2", "competitor 3"],
  "websiteAnalysis": {{
    "hasSSL": true,
    "mobileOptimized": true,
    "pageSpeed": "estimate",
    "contentQuality": "assessment",
    "localSEO": "assessment",
    "missingElements": ["element1", "element2"]
  }},
  "sources": ["source URL 1", "source URL 2"]
}}"""


def resolve_targets(
    request: ResearchRequest,
    strategy: Optional[ResearchStrategy],
) -> Tuple[str, Optional[str], Optional[str]]:
    """Name, location and industry: request first, then strategy suggestions."""
    name = request.company_name or (strategy.suggested_company_name if strategy else None) or request.display_name
    location = request.location or (strategy.suggested_location if strategy else None)
    industry = request.industry_type or (strategy.suggested_industry if strategy else None)
    return name, location, industry


def fallback_bundle(company_name: Optional[str]) -> RawResearchBundle:
    return RawResearchBundle(company_info={"name": company_name} if company_name else {})


class DeepResearcher:
    """Runs the researcher model over the strategy's queries."""

    def __init__(self, invoker: "ModelInvoker", max_queries: int = 5):
        self.invoker = invoker
        self.max_queries = max_queries

    async def research(
        self,
        request: ResearchRequest,
        strategy: ResearchStrategy,
    ) -> RawResearchBundle:
        """
        Gather raw facts about the company.

        Args:
            request: Validated research request
            strategy: Plan from the strategy phase

        Returns:
            RawResearchBundle (only the known name on failure)
        """
        name, location, industry = resolve_targets(request, strategy)
        queries = strategy.search_queries[: self.max_queries]

        prompt = RESEARCH_USER_PROMPT.format(
            website=request.website_url or "Not provided",
            company_name=name or "Unknown",
            location=location or "Unknown",
            industry=industry or "Unknown",
            queries=", ".join(queries) or "general web search",
            directories=", ".join(
                f"{d.name} ({d.url})" for d in get_industry_directories(industry)
            ) or "none known",
        )

        try:
            text = await self.invoker.invoke(
                ModelRole.RESEARCHER,
                prompt,
                max_tokens=4000,
                temperature=0.5,
            )
            response = parse_model_response(text, DeepResearchResponse)
        except (ModelInvocationError, ParseError) as e:
            logger.warning(f"Deep research failed, continuing with known data: {e}")
            return fallback_bundle(request.company_name or name)

        bundle = RawResearchBundle(
            company_info=dict(response.company_info),
            social_profiles={
                str(platform): (url.strip() if isinstance(url, str) and url.strip() and url.strip().lower() != "null" else None)
                for platform, url in response.social_profiles.items()
            },
            directory_listings=[
                DirectoryListing(
                    name=item.name or item.url,
                    url=item.url,
                    category=LinkCategory.coerce(item.category),
                )
                for item in response.directory_listings
                if item.url
            ],
            reviews=[
                ReviewSummary(platform=item.platform, rating=item.rating, count=item.count)
                for item in response.reviews
                if item.platform
            ],
            competitors=response.competitors,
            website_analysis=dict(response.website_analysis),
            sources=response.sources,
        )
        if not bundle.company_info.get("name") and name:
            bundle.company_info["name"] = name

        logger.info(
            f"Deep research found {len(bundle.directory_listings)} listings, "
            f"{len(bundle.reviews)} review sources, {len(bundle.competitors)} competitors"
        )
        return bundle
