"""
Company Research Data Models

Defines all types used by the research pipeline for:
- Research requests and search strategy
- Raw research bundles and social discovery
- The canonical company profile and its nested insights
- Confidence, data quality and competitor-fallback results

Every record serializes to the camelCase wire shape with to_dict().
"""

import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from src.utils.domain_filter import extract_domain


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ResearchValidationError(ValueError):
    """Request cannot be researched (no company name and no website)."""


# =============================================================================
# ENUMS
# =============================================================================


class LinkCategory(str, Enum):
    """Category of an additional profile link."""
    DIRECTORY = "directory"  # Angi, HomeAdvisor, Yellow Pages
    MANUFACTURER = "manufacturer"  # GAF, Owens Corning, Carrier dealer pages
    NETWORKING = "networking"  # Chamber of commerce, Nextdoor, Alignable
    REVIEW_PLATFORM = "review_platform"  # BBB, Yelp, Trustpilot

    @classmethod
    def coerce(cls, value: Any) -> "LinkCategory":
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower().replace(" ", "_").replace("-", "_")
        if normalized in ("review", "reviews", "review_site"):
            return cls.REVIEW_PLATFORM
        try:
            return cls(normalized)
        except ValueError:
            return cls.DIRECTORY


class Priority(str, Enum):
    """How urgently a missing field should be collected."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AudienceType(str, Enum):
    """Who the company sells to."""
    HOMEOWNERS = "homeowners"
    COMMERCIAL = "commercial"
    BOTH = "both"
    PROPERTY = "property"  # Property managers

    @classmethod
    def coerce(cls, value: Any) -> Optional["AudienceType"]:
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower()
        if not normalized:
            return None
        aliases = {
            "residential": cls.HOMEOWNERS,
            "homeowner": cls.HOMEOWNERS,
            "b2c": cls.HOMEOWNERS,
            "business": cls.COMMERCIAL,
            "b2b": cls.COMMERCIAL,
            "mixed": cls.BOTH,
            "property managers": cls.PROPERTY,
            "property_managers": cls.PROPERTY,
        }
        if normalized in aliases:
            return aliases[normalized]
        try:
            return cls(normalized)
        except ValueError:
            return None


class SocialPlatform(str, Enum):
    """Social/profile platforms tracked in socialLinks."""
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    LINKEDIN = "linkedin"
    TWITTER = "twitter"
    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    YELP = "yelp"
    GOOGLE_BUSINESS = "googleBusiness"


SOCIAL_PLATFORM_KEYS = [p.value for p in SocialPlatform]


# =============================================================================
# COERCION HELPERS
# =============================================================================


def _pick(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value.lower() in ("null", "none", "n/a", "unknown"):
        return None
    return value


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    items = []
    for item in value:
        text = _as_str(item)
        if text and text not in items:
            items.append(text)
    return items


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        digits = "".join(ch for ch in value if ch.isdigit())
        return int(digits) if digits else None
    return None


def normalize_social_links(value: Any) -> Dict[str, str]:
    """Keep only known platforms with a non-empty URL."""
    if not isinstance(value, dict):
        return {}
    links = {}
    for key, url in value.items():
        key = "googleBusiness" if key in ("google_business", "googlebusiness", "google") else key
        url = _as_str(url)
        if key in SOCIAL_PLATFORM_KEYS and url:
            links[key] = url
    return links


# =============================================================================
# REQUEST & STRATEGY
# =============================================================================


@dataclass
class ResearchRequest:
    """Seed fields for a deep research run."""
    website_url: Optional[str] = None
    company_name: Optional[str] = None
    location: Optional[str] = None
    industry_type: Optional[str] = None

    def __post_init__(self):
        self.website_url = _as_str(self.website_url)
        self.company_name = _as_str(self.company_name)
        self.location = _as_str(self.location)
        self.industry_type = _as_str(self.industry_type)

    def validate(self) -> None:
        if not self.website_url and not self.company_name:
            raise ResearchValidationError("Website URL or company name required")

    @property
    def display_name(self) -> str:
        """Company name, or the website host when no name was given."""
        return self.company_name or extract_domain(self.website_url) or ""


@dataclass
class ResearchStrategy:
    """Search plan produced by the strategist. Ephemeral."""
    search_queries: List[str] = field(default_factory=list)
    priority_platforms: List[str] = field(default_factory=list)
    competitor_keywords: List[str] = field(default_factory=list)
    suggested_company_name: Optional[str] = None
    suggested_location: Optional[str] = None
    suggested_industry: Optional[str] = None
    notes: str = ""
    is_fallback: bool = False


# =============================================================================
# RAW RESEARCH
# =============================================================================


@dataclass
class DirectoryListing:
    name: str
    url: str
    category: LinkCategory = LinkCategory.DIRECTORY

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "url": self.url, "category": self.category.value}


@dataclass
class ReviewSummary:
    platform: str
    rating: Optional[float] = None
    count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"platform": self.platform, "rating": self.rating, "count": self.count}


@dataclass
class RawResearchBundle:
    """
    Everything gathered before structuring.

    Union of the researcher's output and social discovery; discovery wins
    on social URL conflicts.
    """
    company_info: Dict[str, Any] = field(default_factory=dict)
    social_profiles: Dict[str, Optional[str]] = field(default_factory=dict)
    directory_listings: List[DirectoryListing] = field(default_factory=list)
    reviews: List[ReviewSummary] = field(default_factory=list)
    competitors: List[str] = field(default_factory=list)
    website_analysis: Dict[str, Any] = field(default_factory=dict)
    sources: List[str] = field(default_factory=list)
    social_profile_data: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "companyInfo": self.company_info,
            "socialProfiles": self.social_profiles,
            "directoryListings": [d.to_dict() for d in self.directory_listings],
            "reviews": [r.to_dict() for r in self.reviews],
            "competitors": self.competitors,
            "websiteAnalysis": self.website_analysis,
            "sources": self.sources,
            "socialProfileData": self.social_profile_data,
        }


@dataclass
class SocialDiscoveryResult:
    """Social links found by scraping the website and searching platforms."""
    social_links: Dict[str, str] = field(default_factory=dict)
    profiles: List[Any] = field(default_factory=list)  # SocialProfileData
    sources: List[str] = field(default_factory=list)
    scraped_platforms: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.social_links or self.profiles or self.sources)


# =============================================================================
# PROFILE
# =============================================================================


@dataclass
class AdditionalLink:
    """
    A directory / manufacturer / networking / review link on the profile.

    AI-suggested links start unverified; a user confirming or editing a
    link takes ownership of it.
    """
    id: str
    name: str
    url: str
    category: LinkCategory = LinkCategory.DIRECTORY
    is_verified: bool = False
    is_ai_suggested: bool = True
    added_at: str = field(default_factory=utc_now_iso)
    verified_at: Optional[str] = None

    @classmethod
    def ai_suggested(
        cls,
        name: str,
        url: str,
        category: Any = LinkCategory.DIRECTORY,
        link_id: Optional[str] = None,
        index: int = 0,
        added_at: Optional[str] = None,
    ) -> "AdditionalLink":
        return cls(
            id=link_id or f"ai-{int(time.time() * 1000)}-{index}",
            name=name,
            url=url,
            category=LinkCategory.coerce(category),
            is_verified=False,
            is_ai_suggested=True,
            added_at=added_at or utc_now_iso(),
        )

    @classmethod
    def manual(cls, name: str, url: str, category: Any = LinkCategory.DIRECTORY) -> "AdditionalLink":
        now = utc_now_iso()
        return cls(
            id=f"manual-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}",
            name=name,
            url=url,
            category=LinkCategory.coerce(category),
            is_verified=True,
            is_ai_suggested=False,
            added_at=now,
            verified_at=now,
        )

    def confirm(self) -> "AdditionalLink":
        self.is_verified = True
        self.is_ai_suggested = False
        self.verified_at = utc_now_iso()
        return self

    def edit(self, name: Optional[str] = None, url: Optional[str] = None, category: Any = None) -> "AdditionalLink":
        if name is not None:
            self.name = name
        if url is not None:
            self.url = url
        if category is not None:
            self.category = LinkCategory.coerce(category)
        return self.confirm()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdditionalLink":
        return cls(
            id=_as_str(data.get("id")) or f"link-{uuid.uuid4().hex[:8]}",
            name=_as_str(data.get("name")) or "",
            url=_as_str(data.get("url")) or "",
            category=LinkCategory.coerce(data.get("category")),
            is_verified=bool(_pick(data, "isVerified", "is_verified")),
            is_ai_suggested=bool(_pick(data, "isAiSuggested", "is_ai_suggested")),
            added_at=_as_str(_pick(data, "addedAt", "added_at")) or utc_now_iso(),
            verified_at=_as_str(_pick(data, "verifiedAt", "verified_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "category": self.category.value,
            "isVerified": self.is_verified,
            "isAiSuggested": self.is_ai_suggested,
            "addedAt": self.added_at,
        }
        if self.verified_at:
            data["verifiedAt"] = self.verified_at
        return data


@dataclass
class CompetitorAnalysis:
    competitors: List[str] = field(default_factory=list)
    strengths_weaknesses: List[str] = field(default_factory=list)
    opportunities: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "CompetitorAnalysis":
        data = data if isinstance(data, dict) else {}
        return cls(
            competitors=_as_str_list(data.get("competitors")),
            strengths_weaknesses=_as_str_list(_pick(data, "strengthsWeaknesses", "strengths_weaknesses")),
            opportunities=_as_str_list(data.get("opportunities")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "competitors": self.competitors,
            "strengthsWeaknesses": self.strengths_weaknesses,
            "opportunities": self.opportunities,
        }


@dataclass
class SeoInsights:
    primary_keywords: List[str] = field(default_factory=list)
    content_gaps: List[str] = field(default_factory=list)
    local_seo_score: int = 50  # 1-100
    recommendations: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "SeoInsights":
        data = data if isinstance(data, dict) else {}
        score = _as_int(_pick(data, "localSeoScore", "local_seo_score"))
        return cls(
            primary_keywords=_as_str_list(_pick(data, "primaryKeywords", "primary_keywords")),
            content_gaps=_as_str_list(_pick(data, "contentGaps", "content_gaps")),
            local_seo_score=max(1, min(100, score)) if score is not None else 50,
            recommendations=_as_str_list(data.get("recommendations")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "primaryKeywords": self.primary_keywords,
            "contentGaps": self.content_gaps,
            "localSeoScore": self.local_seo_score,
            "recommendations": self.recommendations,
        }


@dataclass
class ConversionInsights:
    usp_strength: int = 5  # 0-10
    trust_signals: List[str] = field(default_factory=list)
    cta_recommendations: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "ConversionInsights":
        data = data if isinstance(data, dict) else {}
        strength = _as_int(_pick(data, "uspStrength", "usp_strength"))
        return cls(
            usp_strength=max(0, min(10, strength)) if strength is not None else 5,
            trust_signals=_as_str_list(_pick(data, "trustSignals", "trust_signals")),
            cta_recommendations=_as_str_list(_pick(data, "ctaRecommendations", "cta_recommendations")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uspStrength": self.usp_strength,
            "trustSignals": self.trust_signals,
            "ctaRecommendations": self.cta_recommendations,
        }


@dataclass
class CompanyProfile:
    """Canonical company profile. Lists and nested structures are never None."""

    # Identity
    name: Optional[str] = None
    tagline: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None
    state_abbr: Optional[str] = None
    headquarters: Optional[str] = None  # City
    zip_code: Optional[str] = None
    cities: List[str] = field(default_factory=list)

    # Business
    industry_type: Optional[str] = None
    services: List[str] = field(default_factory=list)
    usps: List[str] = field(default_factory=list)
    certifications: List[str] = field(default_factory=list)
    awards: List[str] = field(default_factory=list)
    years_in_business: Optional[int] = None
    audience: Optional[AudienceType] = None
    value_proposition: Optional[str] = None

    # Voice
    brand_voice: Optional[str] = None
    writing_style: Optional[str] = None

    # SEO targets
    primary_site_keyword: Optional[str] = None
    secondary_site_keywords: List[str] = field(default_factory=list)

    # Market
    competitors: List[str] = field(default_factory=list)
    social_links: Dict[str, str] = field(default_factory=dict)
    additional_links: List[AdditionalLink] = field(default_factory=list)

    # Insights
    competitor_analysis: CompetitorAnalysis = field(default_factory=CompetitorAnalysis)
    conversion_insights: ConversionInsights = field(default_factory=ConversionInsights)
    seo_insights: SeoInsights = field(default_factory=SeoInsights)

    last_researched_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "CompanyProfile":
        """Build from camelCase or snake_case input, tolerating junk values."""
        data = data if isinstance(data, dict) else {}
        links = data.get("additionalLinks", data.get("additional_links"))
        return cls(
            name=_as_str(data.get("name")),
            tagline=_as_str(data.get("tagline")),
            website=_as_str(data.get("website")),
            phone=_as_str(data.get("phone")),
            email=_as_str(data.get("email")),
            address=_as_str(data.get("address")),
            state=_as_str(data.get("state")),
            state_abbr=_as_str(_pick(data, "stateAbbr", "state_abbr")),
            headquarters=_as_str(data.get("headquarters")),
            zip_code=_as_str(_pick(data, "zipCode", "zip_code")),
            cities=_as_str_list(data.get("cities")),
            industry_type=_as_str(_pick(data, "industryType", "industry_type")),
            services=_as_str_list(data.get("services")),
            usps=_as_str_list(data.get("usps")),
            certifications=_as_str_list(data.get("certifications")),
            awards=_as_str_list(data.get("awards")),
            years_in_business=_as_int(_pick(data, "yearsInBusiness", "years_in_business")),
            audience=AudienceType.coerce(data.get("audience")),
            value_proposition=_as_str(_pick(data, "valueProposition", "value_proposition")),
            brand_voice=_as_str(_pick(data, "brandVoice", "brand_voice")),
            writing_style=_as_str(_pick(data, "writingStyle", "writing_style")),
            primary_site_keyword=_as_str(_pick(data, "primarySiteKeyword", "primary_site_keyword")),
            secondary_site_keywords=_as_str_list(_pick(data, "secondarySiteKeywords", "secondary_site_keywords")),
            competitors=_as_str_list(data.get("competitors")),
            social_links=normalize_social_links(_pick(data, "socialLinks", "social_links")),
            additional_links=[
                AdditionalLink.from_dict(link)
                for link in (links if isinstance(links, list) else [])
                if isinstance(link, dict) and _as_str(link.get("url"))
            ],
            competitor_analysis=CompetitorAnalysis.from_dict(_pick(data, "competitorAnalysis", "competitor_analysis")),
            conversion_insights=ConversionInsights.from_dict(_pick(data, "conversionInsights", "conversion_insights")),
            seo_insights=SeoInsights.from_dict(_pick(data, "seoInsights", "seo_insights")),
            last_researched_at=_as_str(_pick(data, "lastResearchedAt", "last_researched_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "tagline": self.tagline,
            "website": self.website,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "state": self.state,
            "stateAbbr": self.state_abbr,
            "headquarters": self.headquarters,
            "zipCode": self.zip_code,
            "cities": self.cities,
            "industryType": self.industry_type,
            "services": self.services,
            "usps": self.usps,
            "certifications": self.certifications,
            "awards": self.awards,
            "yearsInBusiness": self.years_in_business,
            "audience": self.audience.value if self.audience else None,
            "valueProposition": self.value_proposition,
            "brandVoice": self.brand_voice,
            "writingStyle": self.writing_style,
            "primarySiteKeyword": self.primary_site_keyword,
            "secondarySiteKeywords": self.secondary_site_keywords,
            "competitors": self.competitors,
            "socialLinks": self.social_links,
            "additionalLinks": [link.to_dict() for link in self.additional_links],
            "competitorAnalysis": self.competitor_analysis.to_dict(),
            "conversionInsights": self.conversion_insights.to_dict(),
            "seoInsights": self.seo_insights.to_dict(),
            "lastResearchedAt": self.last_researched_at,
        }


# =============================================================================
# QUALITY
# =============================================================================


ConfidenceMap = Dict[str, int]


@dataclass
class MissingField:
    field: str
    label: str
    priority: Priority
    prompt: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "label": self.label,
            "priority": self.priority.value,
            "prompt": self.prompt,
        }


@dataclass
class DataQualityAssessment:
    score: int  # 0-100
    limited_info: bool
    used_competitor_research: bool = False
    missing_fields: List[MissingField] = field(default_factory=list)
    recommended_actions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "limitedInfo": self.limited_info,
            "usedCompetitorResearch": self.used_competitor_research,
            "missingFields": [m.to_dict() for m in self.missing_fields],
            "recommendedActions": self.recommended_actions,
        }


@dataclass
class CompetitorResearch:
    """What similar local companies say about themselves."""
    competitors: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)  # Related searches
    content_gaps: List[str] = field(default_factory=list)  # People-also-ask
    usps: List[str] = field(default_factory=list)
    services: List[str] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.competitors or self.keywords or self.content_gaps or self.usps or self.services)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "competitors": self.competitors,
            "keywords": self.keywords,
            "contentGaps": self.content_gaps,
            "usps": self.usps,
            "services": self.services,
            "sources": self.sources,
        }


# =============================================================================
# RESULTS
# =============================================================================


@dataclass
class DeepResearchResult:
    success: bool
    profile: Optional[CompanyProfile] = None
    social_links: Dict[str, str] = field(default_factory=dict)
    additional_links: List[AdditionalLink] = field(default_factory=list)
    competitor_analysis: Optional[CompetitorAnalysis] = None
    seo_insights: Optional[SeoInsights] = None
    conversion_insights: Optional[ConversionInsights] = None
    research_sources: List[str] = field(default_factory=list)
    ai_team_notes: Dict[str, str] = field(default_factory=dict)
    confidence: ConfidenceMap = field(default_factory=dict)
    missing_fields: List[MissingField] = field(default_factory=list)
    data_quality: Optional[DataQualityAssessment] = None
    initial_data_quality: Optional[DataQualityAssessment] = None
    competitor_research: Optional[CompetitorResearch] = None
    error: Optional[str] = None

    @classmethod
    def failure(cls, error: str) -> "DeepResearchResult":
        return cls(success=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "profile": self.profile.to_dict() if self.profile else None,
            "socialLinks": self.social_links,
            "additionalLinks": [link.to_dict() for link in self.additional_links],
            "competitorAnalysis": self.competitor_analysis.to_dict() if self.competitor_analysis else None,
            "seoInsights": self.seo_insights.to_dict() if self.seo_insights else None,
            "conversionInsights": self.conversion_insights.to_dict() if self.conversion_insights else None,
            "researchSources": self.research_sources,
            "aiTeamNotes": self.ai_team_notes,
            "confidence": self.confidence,
            "missingFields": [m.to_dict() for m in self.missing_fields],
            "dataQuality": self.data_quality.to_dict() if self.data_quality else None,
            "initialDataQuality": self.initial_data_quality.to_dict() if self.initial_data_quality else None,
            "competitorResearch": self.competitor_research.to_dict() if self.competitor_research else None,
        }


@dataclass
class QuickResearchResult:
    success: bool
    suggestions: Dict[str, Any] = field(default_factory=dict)
    fields_found: List[str] = field(default_factory=list)
    sources_used: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "success": self.success,
            "suggestions": self.suggestions,
            "fieldsFound": self.fields_found,
            "sourcesUsed": self.sources_used,
        }
        if self.error:
            data["error"] = self.error
        return data
