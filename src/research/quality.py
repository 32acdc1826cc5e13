"""
Data Quality Assessment

Scores how much of the critical profile checklist research filled, lists
what is missing with user-facing prompts, and backfills empty fields
from competitor research when too little was found.
"""

import logging
from dataclasses import dataclass
from typing import Callable, List

from .models import (
    CompanyProfile,
    CompetitorResearch,
    DataQualityAssessment,
    MissingField,
    Priority,
)

logger = logging.getLogger(__name__)


DEFAULT_LIMITED_INFO_THRESHOLD = 40


@dataclass(frozen=True)
class CriticalField:
    field: str
    label: str
    priority: Priority
    prompt: str
    present: Callable[[CompanyProfile], bool]


CRITICAL_FIELDS: List[CriticalField] = [
    CriticalField(
        "name", "Company Name", Priority.HIGH,
        "What is your company's official business name?",
        lambda p: bool(p.name),
    ),
    CriticalField(
        "industryType", "Industry", Priority.HIGH,
        "What type of services does your company provide (e.g. roofing, HVAC, plumbing)?",
        lambda p: bool(p.industry_type),
    ),
    CriticalField(
        "services", "Services", Priority.HIGH,
        "List the main services you offer to customers.",
        lambda p: bool(p.services),
    ),
    CriticalField(
        "phone", "Phone Number", Priority.MEDIUM,
        "What phone number should customers call?",
        lambda p: bool(p.phone),
    ),
    CriticalField(
        "headquarters", "Headquarters City", Priority.MEDIUM,
        "Which city is your business based in?",
        lambda p: bool(p.headquarters),
    ),
    CriticalField(
        "usps", "Unique Selling Points", Priority.MEDIUM,
        "What sets you apart from competitors (warranties, free estimates, certifications)?",
        lambda p: bool(p.usps),
    ),
    CriticalField(
        "audience", "Target Audience", Priority.LOW,
        "Do you mainly serve homeowners, commercial clients, or both?",
        lambda p: p.audience is not None,
    ),
    CriticalField(
        "valueProposition", "Value Proposition", Priority.LOW,
        "In one sentence, why should a customer choose you?",
        lambda p: bool(p.value_proposition),
    ),
]

_PRIORITY_ORDER = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


def find_missing_fields(profile: CompanyProfile) -> List[MissingField]:
    """Critical fields the profile does not have, in checklist order."""
    return [
        MissingField(field=c.field, label=c.label, priority=c.priority, prompt=c.prompt)
        for c in CRITICAL_FIELDS
        if not c.present(profile)
    ]


def assess_data_quality(
    profile: CompanyProfile,
    threshold: int = DEFAULT_LIMITED_INFO_THRESHOLD,
    used_competitor_research: bool = False,
) -> DataQualityAssessment:
    """
    Score a profile against the critical checklist.

    Args:
        profile: Structured profile
        threshold: Scores below this mark the profile as limited
        used_competitor_research: Whether a backfill pass already ran

    Returns:
        DataQualityAssessment
    """
    missing = find_missing_fields(profile)
    found = len(CRITICAL_FIELDS) - len(missing)
    # Half-up rounding: 1/8 -> 13, 3/8 -> 38
    score = int(100 * found / len(CRITICAL_FIELDS) + 0.5)

    actions = [
        f"Add your {m.label.lower()}: {m.prompt}"
        for m in sorted(missing, key=lambda m: _PRIORITY_ORDER[m.priority])
    ]
    if used_competitor_research:
        actions.append("Review the suggested services and selling points based on similar local companies")

    return DataQualityAssessment(
        score=score,
        limited_info=score < threshold,
        used_competitor_research=used_competitor_research,
        missing_fields=missing,
        recommended_actions=actions,
    )


def backfill_from_competitor_research(
    profile: CompanyProfile,
    research: CompetitorResearch,
) -> List[str]:
    """
    Fill EMPTY profile fields from competitor research. Never overwrites.

    Returns:
        Names of the fields that were filled
    """
    filled = []

    if not profile.services and research.services:
        profile.services = list(research.services)
        filled.append("services")

    if not profile.usps and research.usps:
        profile.usps = list(research.usps)
        filled.append("usps")

    if not profile.competitors and research.competitors:
        profile.competitors = list(research.competitors)
        filled.append("competitors")

    if not profile.competitor_analysis.competitors and research.competitors:
        profile.competitor_analysis.competitors = list(research.competitors)
        filled.append("competitorAnalysis.competitors")

    if not profile.seo_insights.content_gaps and research.content_gaps:
        profile.seo_insights.content_gaps = list(research.content_gaps)
        filled.append("seoInsights.contentGaps")

    if filled:
        logger.info(f"Backfilled from competitor research: {', '.join(filled)}")

    return filled
