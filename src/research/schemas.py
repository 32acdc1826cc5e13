"""
Response Contracts for Model Output

Typed shapes each research phase expects back from its model call.
Parsing goes through src.llm.json_utils.parse_model_response, so a
response that is valid JSON but the wrong shape takes the same fallback
path as a malformed one.

Field names follow the camelCase keys the prompts ask for.
"""

from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator


def _clean_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ValueError("expected a list of strings")
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _dict_or_empty(value: Any) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError("expected an object")
    return value


def _text_or_none(value: Any) -> Optional[str]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    return None


def _text_or_empty(value: Any) -> str:
    return _text_or_none(value) or ""


def _category_or_directory(value: Any) -> str:
    return _text_or_none(value) or "directory"


def _to_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.replace(",", "").strip())
        except ValueError:
            return None
    return None


StrList = Annotated[List[str], BeforeValidator(_clean_str_list)]
JsonObject = Annotated[Dict[str, Any], BeforeValidator(_dict_or_empty)]
Text = Annotated[str, BeforeValidator(_text_or_empty)]
OptionalText = Annotated[Optional[str], BeforeValidator(_text_or_none)]
Category = Annotated[str, BeforeValidator(_category_or_directory)]


class ContractModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# =============================================================================
# STRATEGY
# =============================================================================


class StrategyResponse(ContractModel):
    search_queries: StrList = Field(..., alias="searchQueries", min_length=1)
    priority_platforms: StrList = Field(default_factory=list, alias="priorityPlatforms")
    competitor_keywords: StrList = Field(default_factory=list, alias="competitorKeywords")
    suggested_company_name: OptionalText = Field(None, alias="suggestedCompanyName")
    suggested_location: OptionalText = Field(None, alias="suggestedLocation")
    suggested_industry: OptionalText = Field(None, alias="suggestedIndustry")
    notes: str = Field("", alias="strategistNotes")

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_to_str(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""


# =============================================================================
# DEEP RESEARCH
# =============================================================================


class DirectoryListingItem(ContractModel):
    name: Text = ""
    url: OptionalText = None
    category: Category = "directory"


class ReviewItem(ContractModel):
    platform: Text = ""
    rating: Optional[float] = None
    count: Optional[int] = None

    @field_validator("rating", mode="before")
    @classmethod
    def _rating(cls, value: Any) -> Any:
        return _to_float(value)

    @field_validator("count", mode="before")
    @classmethod
    def _count(cls, value: Any) -> Any:
        number = _to_float(value)
        return int(number) if number is not None else None


class DeepResearchResponse(ContractModel):
    company_info: JsonObject = Field(default_factory=dict, alias="companyInfo")
    social_profiles: JsonObject = Field(default_factory=dict, alias="socialProfiles")
    directory_listings: List[DirectoryListingItem] = Field(default_factory=list, alias="directoryListings")
    reviews: List[ReviewItem] = Field(default_factory=list)
    competitors: StrList = Field(default_factory=list)
    website_analysis: JsonObject = Field(default_factory=dict, alias="websiteAnalysis")
    sources: StrList = Field(default_factory=list)

    @field_validator("directory_listings", "reviews", mode="before")
    @classmethod
    def _objects_only(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [item for item in value if isinstance(item, dict)]
        return value


# =============================================================================
# STRUCTURING
# =============================================================================


class AdditionalLinkItem(ContractModel):
    id: OptionalText = None
    name: Text = ""
    url: OptionalText = None
    category: Category = "directory"
    added_at: OptionalText = Field(None, alias="addedAt")


class StructuringResponse(ContractModel):
    profile: Dict[str, Any]
    social_links: JsonObject = Field(default_factory=dict, alias="socialLinks")
    additional_links: List[AdditionalLinkItem] = Field(default_factory=list, alias="additionalLinks")
    competitor_analysis: JsonObject = Field(default_factory=dict, alias="competitorAnalysis")
    conversion_insights: JsonObject = Field(default_factory=dict, alias="conversionInsights")
    notes: str = Field("", alias="analystNotes")

    @field_validator("additional_links", mode="before")
    @classmethod
    def _objects_only(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [item for item in value if isinstance(item, dict)]
        return value

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_to_str(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""


# =============================================================================
# SEO
# =============================================================================


class SeoInsightsItem(ContractModel):
    primary_keywords: StrList = Field(default_factory=list, alias="primaryKeywords")
    content_gaps: StrList = Field(default_factory=list, alias="contentGaps")
    local_seo_score: float = Field(50, alias="localSEOScore")
    recommendations: StrList = Field(default_factory=list)

    @field_validator("local_seo_score", mode="before")
    @classmethod
    def _score(cls, value: Any) -> Any:
        return 50 if value is None else value


class SeoRecommendationResponse(ContractModel):
    seo_insights: SeoInsightsItem = Field(..., alias="seoInsights")
    notes: str = Field("", alias="strategistNotes")

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_to_str(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""
