"""
Research Strategy Planner

First phase of deep research. The strategist turns the seed fields into
a search plan:
- Queries for social profiles, directory listings and certifications
- Platforms to prioritise
- Competitor keywords
- Best guesses for name, location and industry when they were not given

Any model or parse failure yields a fixed fallback plan.
"""

import logging
from typing import Optional, TYPE_CHECKING

from src.llm.errors import ModelInvocationError, ParseError
from src.llm.json_utils import parse_model_response
from src.llm.router import ModelRole

from .models import ResearchRequest, ResearchStrategy
from .schemas import StrategyResponse

if TYPE_CHECKING:
    from src.llm.invoker import ModelInvoker

logger = logging.getLogger(__name__)


# =============================================================================
# PROMPTS
# =============================================================================


STRATEGY_SYSTEM_PROMPT = "You are a research strategist for a local SEO team. Always respond with valid JSON only."


STRATEGY_USER_PROMPT = """Create a research strategy to gather ALL available information about this trade-service company for local SEO.

TARGET COMPANY:
- Website: {website}
- Company Name: {company_name}
- Location: {location}
- Industry: {industry}

The strategy must cover:
1. Search queries to find ALL social media profiles
2. Search queries to find ALL directory listings (BBB, Angi, Yelp, HomeAdvisor, etc.)
3. Search queries to find manufacturer certifications
4. Keywords to find local competitors
5. What to look for on their website for SEO analysis

Respond in this JSON format:
{{
  "searchQueries": [
    "company name + facebook",
    "company name + reviews",
    "company name + bbb",
    "company name + city + service"
  ],
  "priorityPlatforms": ["facebook", "google business", "bbb", "yelp", "angi"],
  "competitorKeywords": ["keyword + city", "service + near me"],
  "suggestedCompanyName": "if discoverable from website",
  "suggestedLocation": "city, state if discoverable",
  "suggestedIndustry": "industry type if discoverable",
  "strategistNotes": "Strategic observations and recommendations"
}}"""


FALLBACK_PLATFORMS = ["facebook", "google", "bbb", "yelp"]


def fallback_strategy(request: ResearchRequest) -> ResearchStrategy:
    """Fixed plan used when the strategist is unavailable."""
    name = request.display_name
    return ResearchStrategy(
        search_queries=[
            f'"{name}" site:facebook.com',
            f'"{name}" site:bbb.org',
            f'"{name}" reviews',
        ],
        priority_platforms=list(FALLBACK_PLATFORMS),
        competitor_keywords=[f"{request.industry_type or 'service'} {request.location or ''}".strip()],
        notes="Using fallback strategy due to AI error",
        is_fallback=True,
    )


# =============================================================================
# STRATEGIST
# =============================================================================


class ResearchStrategist:
    """Plans the searches the rest of the pipeline runs."""

    def __init__(self, invoker: "ModelInvoker"):
        self.invoker = invoker

    async def plan(self, request: ResearchRequest) -> ResearchStrategy:
        """
        Build a research strategy for a company.

        Args:
            request: Validated research request

        Returns:
            ResearchStrategy (is_fallback=True if the model could not be used)
        """
        prompt = STRATEGY_USER_PROMPT.format(
            website=request.website_url or "Not provided",
            company_name=request.company_name or "Unknown - need to discover",
            location=request.location or "Unknown - need to discover",
            industry=request.industry_type or "Unknown - need to discover",
        )

        try:
            text = await self.invoker.invoke(
                ModelRole.STRATEGIST,
                prompt,
                system=STRATEGY_SYSTEM_PROMPT,
                max_tokens=2000,
                temperature=0.7,
            )
            response = parse_model_response(text, StrategyResponse)
        except (ModelInvocationError, ParseError) as e:
            logger.warning(f"Strategy generation failed, using fallback: {e}")
            return fallback_strategy(request)

        strategy = ResearchStrategy(
            search_queries=response.search_queries,
            priority_platforms=response.priority_platforms,
            competitor_keywords=response.competitor_keywords,
            suggested_company_name=_clean(response.suggested_company_name),
            suggested_location=_clean(response.suggested_location),
            suggested_industry=_clean(response.suggested_industry),
            notes=response.notes,
        )

        logger.info(
            f"Strategy ready: {len(strategy.search_queries)} queries, "
            f"platforms={', '.join(strategy.priority_platforms[:5]) or 'none'}"
        )
        return strategy


def _clean(value: Optional[str]) -> Optional[str]:
    """Drop placeholder echoes like "if discoverable from website"."""
    if not value:
        return None
    value = value.strip()
    if not value or "discoverable" in value.lower() or value.lower() in ("unknown", "null", "n/a"):
        return None
    return value

