"""
Competitor-based Fallback Research

When research on the company itself comes back thin, learn from the
companies that rank for "best <industry> companies in <location>":
- Their names (competitor list)
- Related searches (keyword seeds)
- People-also-ask questions (content-gap seeds)
- Typical selling points for the trade (one strategist call)
- Default services for the industry
"""

import logging
import re
from typing import List, Optional, TYPE_CHECKING

from src.integrations.brightdata import BrightDataError
from src.llm.errors import ModelInvocationError, ParseError
from src.llm.json_utils import parse_model_response
from src.llm.router import ModelRole
from src.utils.domain_filter import filter_competitor_domains

from .industries import get_default_services, get_default_usps
from .models import CompetitorResearch

if TYPE_CHECKING:
    from src.integrations.brightdata import BrightDataClient
    from src.llm.invoker import ModelInvoker

logger = logging.getLogger(__name__)


USP_SYSTEM_PROMPT = "You are a local marketing strategist. Respond with a JSON array of strings only."

USP_USER_PROMPT = """List the 5 most common unique selling points that successful {industry} companies in {location} use to win customers.

Known local competitors: {competitors}

Respond with a JSON array of exactly 5 short phrases, for example:
["24/7 Emergency Service", "Free Estimates", "Licensed & Insured", "Family Owned", "Lifetime Warranty"]"""


# "Top 10 Roofers in Denver", "The Best 10 Roofing in Denver, CO"
LISTICLE_TITLE = re.compile(
    r"^\s*(the\s+)?((best|top)\s+\d+|\d+\s+best)\b|^\s*(the\s+)?(best|top)\s+.+\s+in\s+",
    re.IGNORECASE,
)
TITLE_SEPARATORS = re.compile(r"\s+[-|–—·:]\s+")


def company_name_from_title(title: str) -> Optional[str]:
    """"Acme Roofing | Denver's Trusted Roofer" -> "Acme Roofing"."""
    if not title:
        return None
    name = TITLE_SEPARATORS.split(title.strip())[0].strip()
    if not name or LISTICLE_TITLE.search(name) or len(name) > 60:
        return None
    return name


class CompetitorResearcher:
    """Gathers competitor-derived seeds for a thin profile."""

    def __init__(
        self,
        provider: Optional["BrightDataClient"],
        invoker: "ModelInvoker",
        max_candidates: int = 5,
    ):
        self.provider = provider
        self.invoker = invoker
        self.max_candidates = max_candidates

    async def research(self, industry: str, location: str) -> CompetitorResearch:
        """
        Research what similar local companies look like.

        Args:
            industry: Trade, e.g. "roofing"
            location: Service area, e.g. "Denver, CO"

        Returns:
            CompetitorResearch (parts left empty when their source failed)
        """
        logger.info(f"Running competitor research: {industry} in {location}")
        result = CompetitorResearch(services=get_default_services(industry))

        if self.provider is not None:
            await self._search_competitors(industry, location, result)
        else:
            logger.info("Competitor search skipped: search provider not configured")

        result.usps = await self._generate_usps(industry, location, result.competitors)

        logger.info(
            f"Competitor research: {len(result.competitors)} competitors, "
            f"{len(result.keywords)} keywords, {len(result.content_gaps)} content gaps"
        )
        return result

    async def _search_competitors(
        self,
        industry: str,
        location: str,
        result: CompetitorResearch,
    ) -> None:
        query = f"best {industry} companies in {location}"
        try:
            serp = await self.provider.search(query, num_results=10)
        except BrightDataError as e:
            logger.warning(f"Competitor search failed: {e}")
            return

        for item in filter_competitor_domains(serp.results, source="competitor search"):
            if len(result.competitors) >= self.max_candidates:
                break
            name = company_name_from_title(item.title)
            if name and name not in result.competitors:
                result.competitors.append(name)
                result.sources.append(item.url)

        result.keywords = list(serp.related_searches)
        result.content_gaps = list(serp.paa_questions)

    async def _generate_usps(
        self,
        industry: str,
        location: str,
        competitors: List[str],
    ) -> List[str]:
        prompt = USP_USER_PROMPT.format(
            industry=industry,
            location=location,
            competitors=", ".join(competitors) or "None found",
        )
        try:
            text = await self.invoker.invoke(
                ModelRole.STRATEGIST,
                prompt,
                system=USP_SYSTEM_PROMPT,
                max_tokens=500,
                temperature=0.7,
            )
            usps = parse_model_response(text, List[str])
        except (ModelInvocationError, ParseError) as e:
            logger.warning(f"USP generation failed, using industry defaults: {e}")
            return get_default_usps(industry)

        return [u.strip() for u in usps if u and u.strip()][:5]
