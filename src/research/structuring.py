"""
Data Structuring

Third model phase. The analyst cleans the raw research bundle into the
canonical CompanyProfile, scores the USPs, lists trust signals and CTAs,
and sorts the extra links it found into categories.

Every link the analyst returns is stamped as AI-suggested and unverified.
"""

import json
import logging
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

from src.llm.errors import ModelInvocationError, ParseError
from src.llm.json_utils import parse_model_response
from src.llm.router import ModelRole

from .merge import normalize_url
from .models import (
    AdditionalLink,
    CompanyProfile,
    CompetitorAnalysis,
    ConversionInsights,
    RawResearchBundle,
    normalize_social_links,
)
from .schemas import AdditionalLinkItem, StructuringResponse

if TYPE_CHECKING:
    from src.llm.invoker import ModelInvoker

logger = logging.getLogger(__name__)


# =============================================================================
# PROMPTS
# =============================================================================


STRUCTURING_SYSTEM_PROMPT = "You are a data analyst. Always respond with valid JSON only, no markdown."


STRUCTURING_USER_PROMPT = """Analyze this research data and structure it for optimal SEO and conversion performance.

RAW RESEARCH DATA:
{raw_research}

ANALYSIS TASKS:
1. Clean and validate all data
2. Identify strengths and weaknesses vs competitors
3. Calculate USP strength score (1-10)
4. Identify trust signals for conversions
5. Recommend CTAs based on industry
6. Note any data quality issues or gaps

Respond with structured JSON:
{{
  "profile": {{
    "name": "cleaned company name",
    "tagline": "tagline",
    "website": "{website}",
    "phone": "formatted phone",
    "email": "email",
    "address": "formatted address",
    "state": "full state name",
    "stateAbbr": "XX",
    "headquarters": "city",
    "zipCode": "zip",
    "cities": ["service area cities"],
    "industryType": "detected industry",
    "services": ["cleaned services list"],
    "usps": ["unique selling points"],
    "certifications": ["certifications"],
    "awards": ["awards"],
    "yearsInBusiness": number,
    "audience": "homeowners|commercial|both",
    "valueProposition": "one sentence value proposition",
    "brandVoice": "professional|friendly|etc",
    "writingStyle": "suggested style"
  }},
  "socialLinks": {{
    "facebook": "url or null",
    "instagram": "url or null",
    "linkedin": "url or null",
    "twitter": "url or null",
    "youtube": "url or null",
    "tiktok": "url or null",
    "yelp": "url or null",
    "googleBusiness": "url or null"
  }},
  "additionalLinks": [
    {{
      "name": "Platform Name",
      "url": "full url",
      "category": "directory|manufacturer|networking|review_platform"
    }}
  ],
  "competitorAnalysis": {{
    "competitors": ["competitor names"],
    "strengthsWeaknesses": ["Our strength: X", "Our weakness: Y"],
    "opportunities": ["opportunity 1", "opportunity 2"]
  }},
  "conversionInsights": {{
    "uspStrength": 8,
    "trustSignals": ["BBB Accredited", "5-star Google rating", "Licensed & Insured"],
    "ctaRecommendations": ["Get Free Estimate", "Schedule Consultation", "View Our Work"]
  }},
  "analystNotes": "Data quality assessment and recommendations"
}}"""


FALLBACK_NOTES = "Analysis failed - using raw data"


@dataclass
class StructuredResearch:
    """Output of the structuring phase."""
    profile: CompanyProfile
    notes: str = ""
    is_fallback: bool = False


def build_ai_links(items: List[AdditionalLinkItem]) -> List[AdditionalLink]:
    """Stamp AI provenance on model-returned links, dropping empties and duplicates."""
    links = []
    seen = set()
    for index, item in enumerate(items):
        url = normalize_url(item.url)
        if not url:
            continue
        key = url.lower()
        if key in seen:
            continue
        seen.add(key)
        links.append(
            AdditionalLink.ai_suggested(
                name=item.name or url,
                url=url,
                category=item.category,
                link_id=item.id,
                index=index,
                added_at=item.added_at,
            )
        )
    return links


def fallback_structured(
    company_name: Optional[str],
    website_url: Optional[str],
) -> StructuredResearch:
    profile = CompanyProfile(name=company_name, website=website_url)
    profile.conversion_insights = ConversionInsights(usp_strength=5)
    return StructuredResearch(profile=profile, notes=FALLBACK_NOTES, is_fallback=True)


class DataStructurer:
    """Turns a raw research bundle into a CompanyProfile."""

    def __init__(self, invoker: "ModelInvoker"):
        self.invoker = invoker

    async def structure(
        self,
        bundle: RawResearchBundle,
        company_name: Optional[str] = None,
        website_url: Optional[str] = None,
    ) -> StructuredResearch:
        """
        Structure raw research.

        Args:
            bundle: Merged raw research
            company_name: Known company name (kept if the analyst drops it)
            website_url: Known website (kept if the analyst drops it)

        Returns:
            StructuredResearch
        """
        prompt = STRUCTURING_USER_PROMPT.format(
            raw_research=json.dumps(bundle.to_dict(), indent=2, default=str),
            website=website_url or "",
        )

        try:
            text = await self.invoker.invoke(
                ModelRole.ANALYST,
                prompt,
                system=STRUCTURING_SYSTEM_PROMPT,
                max_tokens=4000,
                temperature=0.4,
            )
            response = parse_model_response(text, StructuringResponse)
        except (ModelInvocationError, ParseError) as e:
            logger.warning(f"Structuring failed, using raw data: {e}")
            return fallback_structured(company_name, website_url)

        profile = CompanyProfile.from_dict(response.profile)
        profile.name = profile.name or company_name
        profile.website = website_url or profile.website

        profile.social_links = {
            platform: normalize_url(url)
            for platform, url in normalize_social_links(response.social_links).items()
            if normalize_url(url)
        }
        profile.additional_links = build_ai_links(response.additional_links)
        profile.competitor_analysis = CompetitorAnalysis.from_dict(response.competitor_analysis)
        profile.conversion_insights = ConversionInsights.from_dict(response.conversion_insights)
        if not profile.competitors:
            profile.competitors = list(profile.competitor_analysis.competitors)

        logger.info(
            f"Structured profile for {profile.name or 'unknown company'}: "
            f"{len(profile.services)} services, {len(profile.additional_links)} links"
        )
        return StructuredResearch(profile=profile, notes=response.notes)
