"""
Quick Research

Lightweight variant of deep research: takes an existing, partially
filled profile and suggests values only for the fields it is missing.
One optional web search and website scrape, then one researcher call.
"""

import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from src.integrations.brightdata import BrightDataError
from src.llm.errors import ModelInvocationError, ParseError
from src.llm.json_utils import parse_model_response
from src.llm.router import ModelRole

from .models import CompanyProfile, QuickResearchResult

if TYPE_CHECKING:
    from src.integrations.brightdata import BrightDataClient
    from src.llm.invoker import ModelInvoker

logger = logging.getLogger(__name__)


RESEARCHABLE_FIELDS = [
    ("name", "Company Name"),
    ("phone", "Phone Number"),
    ("email", "Email"),
    ("address", "Address"),
    ("services", "Services"),
    ("usps", "Unique Selling Points"),
    ("certifications", "Certifications"),
    ("cities", "Service Areas"),
    ("competitors", "Competitors"),
    ("primarySiteKeyword", "Primary Keyword"),
    ("secondarySiteKeywords", "Secondary Keywords"),
    ("valueProposition", "Value Proposition"),
    ("brandVoice", "Brand Voice"),
]


SUGGESTION_SYSTEM_PROMPT = "You are a business research assistant. Respond with valid JSON only."

SUGGESTION_USER_PROMPT = """Based on this company profile information, suggest realistic values for the missing fields.

KNOWN INFORMATION:
{context}

MISSING FIELDS TO FILL:
{missing_fields}

Based on the company type and location, provide realistic suggestions for the missing fields.
For services: suggest common services for this industry type.
For USPs: suggest differentiators common for this industry.
For certifications: suggest relevant industry certifications.
For cities: suggest nearby cities if headquarters is known.
For competitors: suggest common competitor types in the area.
For keywords: suggest SEO keywords based on services and location.
For value proposition: craft a compelling value statement.
For brand voice: suggest appropriate tone (professional, friendly, etc.).

Respond with JSON only:
{{
  "services": ["service1", "service2"] or null,
  "usps": ["usp1", "usp2"] or null,
  "certifications": ["cert1"] or null,
  "cities": ["city1", "city2"] or null,
  "competitors": ["competitor type 1"] or null,
  "primarySiteKeyword": "main keyword" or null,
  "secondarySiteKeywords": ["keyword1", "keyword2"] or null,
  "valueProposition": "value statement" or null,
  "brandVoice": "suggested voice" or null
}}

Only include fields that are in the missing list. Use null for fields you cannot reasonably suggest."""


def find_missing_researchable(profile: CompanyProfile) -> List[str]:
    """Researchable field keys that are empty on the profile."""
    data = profile.to_dict()
    missing = []
    for key, _label in RESEARCHABLE_FIELDS:
        value = data.get(key)
        if not value:
            missing.append(key)
    return missing


def build_context(profile: CompanyProfile) -> str:
    parts = []
    if profile.name:
        parts.append(f"Company: {profile.name}")
    if profile.website:
        parts.append(f"Website: {profile.website}")
    if profile.industry_type:
        parts.append(f"Industry: {profile.industry_type}")
    if profile.headquarters:
        parts.append(f"City: {profile.headquarters}")
    if profile.state:
        parts.append(f"State: {profile.state}")
    if profile.services:
        parts.append(f"Services: {', '.join(profile.services)}")
    if profile.tagline:
        parts.append(f"Tagline: {profile.tagline}")
    return "\n".join(parts)


def build_search_query(profile: CompanyProfile) -> str:
    if profile.name:
        extras = [profile.headquarters, profile.state, profile.industry_type]
        return " ".join([f'"{profile.name}"'] + [e for e in extras if e])
    return profile.website or ""


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


class QuickResearcher:
    """Suggests values for a profile's missing fields."""

    def __init__(
        self,
        invoker: "ModelInvoker",
        provider: Optional["BrightDataClient"] = None,
    ):
        self.invoker = invoker
        self.provider = provider

    async def research(self, profile: CompanyProfile) -> QuickResearchResult:
        """
        Research the missing fields of an existing profile.

        Args:
            profile: Current (partial) profile

        Returns:
            QuickResearchResult
        """
        if not profile.name and not profile.website:
            return QuickResearchResult(
                success=False,
                error="Please add your company name or website first to enable quick research",
            )

        missing = find_missing_researchable(profile)
        logger.info(f"Quick research for {profile.name or profile.website}: missing {', '.join(missing) or 'nothing'}")
        if not missing:
            return QuickResearchResult(success=True)

        suggestions: Dict[str, Any] = {}
        fields_found: List[str] = []
        sources_used: List[str] = []

        if self.provider is not None:
            await self._web_research(profile, suggestions, fields_found, sources_used)

        remaining = [f for f in missing if f not in fields_found]
        if remaining:
            ai_suggestions = await self._suggest(profile, remaining)
            for key, value in ai_suggestions.items():
                if not _is_empty(value) and key not in suggestions:
                    suggestions[key] = value
                    fields_found.append(key)

        logger.info(f"Quick research complete: {', '.join(fields_found) or 'no fields found'}")
        return QuickResearchResult(
            success=True,
            suggestions=suggestions,
            fields_found=fields_found,
            sources_used=sources_used,
        )

    async def _web_research(
        self,
        profile: CompanyProfile,
        suggestions: Dict[str, Any],
        fields_found: List[str],
        sources_used: List[str],
    ) -> None:
        query = build_search_query(profile)
        try:
            serp = await self.provider.search(query, num_results=5)
            sources_used.extend(r.url for r in serp.results[:3])
        except BrightDataError as e:
            logger.warning(f"Quick research search failed: {e}")

        if profile.website and not profile.social_links:
            try:
                page = await self.provider.scrape(profile.website)
            except BrightDataError as e:
                logger.warning(f"Website scrape failed: {e}")
                return
            if page.social_links:
                suggestions["socialLinks"] = page.social_links
                fields_found.append("socialLinks")
            sources_used.append(profile.website)

    async def _suggest(self, profile: CompanyProfile, missing: List[str]) -> Dict[str, Any]:
        prompt = SUGGESTION_USER_PROMPT.format(
            context=build_context(profile),
            missing_fields=", ".join(missing),
        )
        try:
            text = await self.invoker.invoke(
                ModelRole.RESEARCHER,
                prompt,
                system=SUGGESTION_SYSTEM_PROMPT,
                max_tokens=1500,
                temperature=0.7,
            )
            data = parse_model_response(text, Dict[str, Any])
        except (ModelInvocationError, ParseError) as e:
            logger.warning(f"AI suggestions failed: {e}")
            return {}

        return {key: data[key] for key in missing if key in data and data[key] is not None}
