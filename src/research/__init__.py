"""
Company Research

AI research pipeline that turns a website and/or company name into a
structured CompanyProfile:

1. Strategy - plan searches
2. Social Discovery - find real social profile links
3. Deep Research - gather raw facts
4. Structuring - build the profile
5. Data Quality - score, and fall back to competitor research if thin
6. SEO - keywords and recommendations

Usage:
    from src.research import run_deep_research

    result = await run_deep_research(
        website_url="acmeroofing.com",
        company_name="Acme Roofing",
        location="Denver, CO",
        industry_type="roofing",
    )
"""

from .models import (
    AdditionalLink,
    AudienceType,
    CompanyProfile,
    CompetitorAnalysis,
    CompetitorResearch,
    ConversionInsights,
    DataQualityAssessment,
    DeepResearchResult,
    DirectoryListing,
    LinkCategory,
    MissingField,
    Priority,
    QuickResearchResult,
    RawResearchBundle,
    ResearchRequest,
    ResearchStrategy,
    ResearchValidationError,
    ReviewSummary,
    SeoInsights,
    SocialDiscoveryResult,
    SocialPlatform,
)
from .confidence import CONFIDENCE_RUBRIC, compute_confidence
from .quality import CRITICAL_FIELDS, assess_data_quality, backfill_from_competitor_research
from .orchestrator import ResearchOrchestrator, run_deep_research, run_quick_research

__all__ = [
    # Models
    "AdditionalLink",
    "AudienceType",
    "CompanyProfile",
    "CompetitorAnalysis",
    "CompetitorResearch",
    "ConversionInsights",
    "DataQualityAssessment",
    "DeepResearchResult",
    "DirectoryListing",
    "LinkCategory",
    "MissingField",
    "Priority",
    "QuickResearchResult",
    "RawResearchBundle",
    "ResearchRequest",
    "ResearchStrategy",
    "ResearchValidationError",
    "ReviewSummary",
    "SeoInsights",
    "SocialDiscoveryResult",
    "SocialPlatform",
    # Scoring
    "CONFIDENCE_RUBRIC",
    "compute_confidence",
    "CRITICAL_FIELDS",
    "assess_data_quality",
    "backfill_from_competitor_research",
    # Entry points
    "ResearchOrchestrator",
    "run_deep_research",
    "run_quick_research",
]
