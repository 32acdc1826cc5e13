"""
SEO Recommendations

Final model phase. The strategist reads the finished profile and
competitor data and proposes target keywords, content gaps, a local SEO
score and the top actions to take.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from src.llm.errors import ModelInvocationError, ParseError
from src.llm.json_utils import parse_model_response
from src.llm.router import ModelRole

from .models import CompanyProfile, CompetitorResearch, SeoInsights
from .schemas import SeoRecommendationResponse

if TYPE_CHECKING:
    from src.llm.invoker import ModelInvoker

logger = logging.getLogger(__name__)


MAX_KEYWORDS = 10
MAX_RECOMMENDATIONS = 5

FALLBACK_RECOMMENDATIONS = [
    "Complete your company profile",
    "Add social media links",
    "Gather customer reviews",
]


SEO_SYSTEM_PROMPT = "You are an SEO strategist for local service businesses. Respond with valid JSON only."

SEO_USER_PROMPT = """Based on this company profile, provide strategic local SEO recommendations.

COMPANY PROFILE:
{profile}

COMPETITOR DATA:
{competitor_data}

SEARCH DEMAND SEEDS:
- Related searches: {keywords}
- Questions people ask: {questions}

PROVIDE:
1. Top 10 primary keywords to target (include location-based)
2. Content gaps to exploit
3. Local SEO score (1-100) based on available data
4. Top 5 actionable SEO recommendations

Respond in JSON:
{{
  "seoInsights": {{
    "primaryKeywords": ["keyword 1", "keyword 2", "location + service"],
    "contentGaps": ["missing blog topic 1", "underserved keyword"],
    "localSEOScore": 75,
    "recommendations": [
      "Create service area pages for each city",
      "Add more customer reviews",
      "Optimize Google Business Profile",
      "Build backlinks from local directories",
      "Create before/after content"
    ]
  }},
  "strategistNotes": "Strategic summary and priority actions"
}}"""


@dataclass
class SeoRecommendation:
    insights: SeoInsights
    notes: str = ""
    is_fallback: bool = False


def fallback_seo(competitor_research: Optional[CompetitorResearch] = None) -> SeoRecommendation:
    gaps = list(competitor_research.content_gaps) if competitor_research else []
    return SeoRecommendation(
        insights=SeoInsights(
            primary_keywords=[],
            content_gaps=gaps,
            local_seo_score=50,
            recommendations=list(FALLBACK_RECOMMENDATIONS),
        ),
        notes="Using fallback recommendations",
        is_fallback=True,
    )


class SeoAdvisor:
    """Produces SEO insights for a structured profile."""

    def __init__(self, invoker: "ModelInvoker"):
        self.invoker = invoker

    async def recommend(
        self,
        profile: CompanyProfile,
        competitor_research: Optional[CompetitorResearch] = None,
    ) -> SeoRecommendation:
        """
        Generate SEO recommendations.

        Args:
            profile: Structured (and possibly backfilled) profile
            competitor_research: Seeds from the competitor fallback, if it ran

        Returns:
            SeoRecommendation
        """
        profile_data = profile.to_dict()
        for key in ("seoInsights", "competitorAnalysis", "additionalLinks"):
            profile_data.pop(key, None)

        prompt = SEO_USER_PROMPT.format(
            profile=json.dumps(profile_data, indent=2, default=str),
            competitor_data=json.dumps(profile.competitor_analysis.to_dict(), indent=2),
            keywords=", ".join(competitor_research.keywords) if competitor_research and competitor_research.keywords else "None",
            questions="; ".join(competitor_research.content_gaps) if competitor_research and competitor_research.content_gaps else "None",
        )

        try:
            text = await self.invoker.invoke(
                ModelRole.STRATEGIST,
                prompt,
                system=SEO_SYSTEM_PROMPT,
                max_tokens=2000,
                temperature=0.6,
            )
            response = parse_model_response(text, SeoRecommendationResponse)
        except (ModelInvocationError, ParseError) as e:
            logger.warning(f"SEO recommendations failed, using fallback: {e}")
            return fallback_seo(competitor_research)

        item = response.seo_insights
        insights = SeoInsights(
            primary_keywords=item.primary_keywords[:MAX_KEYWORDS],
            content_gaps=item.content_gaps,
            local_seo_score=max(1, min(100, int(round(item.local_seo_score)))),
            recommendations=item.recommendations[:MAX_RECOMMENDATIONS],
        )
        if not insights.content_gaps and competitor_research:
            insights.content_gaps = list(competitor_research.content_gaps)

        logger.info(
            f"SEO insights: {len(insights.primary_keywords)} keywords, "
            f"local score {insights.local_seo_score}"
        )
        return SeoRecommendation(insights=insights, notes=response.notes)
