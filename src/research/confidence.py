"""
Per-field Confidence Scoring

Fixed rubric: each field scores a constant when present, 0 when absent.
Services and USPs scale with how many were found. Recomputed every run.
"""

from typing import Callable, Dict, Optional, Tuple

from .models import CompanyProfile, ConfidenceMap, RawResearchBundle


def _count_scaled(base: int, step: int, cap: int) -> Callable[[int], int]:
    return lambda n: min(cap, base + n * step) if n > 0 else 0


_services_score = _count_scaled(60, 5, 90)
_usps_score = _count_scaled(50, 5, 80)

# field -> (score when present, presence check)
CONFIDENCE_RUBRIC: Dict[str, Tuple[int, Callable[[CompanyProfile], bool]]] = {
    "name": (95, lambda p: bool(p.name)),
    "phone": (90, lambda p: bool(p.phone)),
    "email": (85, lambda p: bool(p.email)),
    "address": (80, lambda p: bool(p.address)),
    "state": (85, lambda p: bool(p.state)),
    "headquarters": (75, lambda p: bool(p.headquarters)),
    "cities": (70, lambda p: bool(p.cities)),
    "industryType": (85, lambda p: bool(p.industry_type)),
    "socialLinks": (90, lambda p: any(p.social_links.values())),
    "additionalLinks": (85, lambda p: bool(p.additional_links)),
    "certifications": (80, lambda p: bool(p.certifications)),
    "yearsInBusiness": (70, lambda p: bool(p.years_in_business)),
    "competitorAnalysis": (80, lambda p: bool(p.competitor_analysis.competitors)),
    "seoInsights": (85, lambda p: bool(p.seo_insights.primary_keywords)),
    "brandVoice": (65, lambda p: bool(p.brand_voice)),
    "writingStyle": (65, lambda p: bool(p.writing_style)),
    "audience": (75, lambda p: p.audience is not None),
}

REVIEW_DATA_SCORE = 85


def compute_confidence(
    profile: CompanyProfile,
    raw: Optional[RawResearchBundle] = None,
) -> ConfidenceMap:
    """
    Score every rubric field for a profile.

    Args:
        profile: Structured profile
        raw: Raw research bundle (review data lives there)

    Returns:
        {"name": 95, "phone": 0, ...}
    """
    scores: ConfidenceMap = {}

    for field_name, (score, present) in CONFIDENCE_RUBRIC.items():
        scores[field_name] = score if present(profile) else 0

    scores["services"] = _services_score(len(profile.services))
    scores["usps"] = _usps_score(len(profile.usps))
    scores["reviewData"] = REVIEW_DATA_SCORE if raw is not None and raw.reviews else 0

    return scores
