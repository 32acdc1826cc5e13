"""
Pytest Configuration and Shared Fixtures

Provides scripted model/search stand-ins and sample payloads for all
test modules.
"""

import json
import pytest
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

from src.integrations.brightdata import (
    BrightDataError,
    ScrapedPage,
    SearchResponse,
    SearchResult,
    SocialProfileData,
)
from src.llm.errors import ModelInvocationError
from src.llm.router import ModelRole
from src.utils.config import Settings
from src.utils.domain_filter import extract_domain


# ============================================================================
# Test Doubles
# ============================================================================

class StubInvoker:
    """
    Scripted stand-in for ModelInvoker.

    Each role has a queue of responses (text, or an exception to raise).
    A role with an empty queue raises ModelInvocationError, so a bare
    StubInvoker() behaves like every provider being down.
    """

    def __init__(self, responses: Optional[Dict[ModelRole, List[Any]]] = None):
        self.responses = {role: list(items) for role, items in (responses or {}).items()}
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    async def invoke(
        self,
        role: ModelRole,
        prompt: str,
        system: Optional[str] = None,
        max_tokens: int = 2000,
        temperature: Optional[float] = None,
    ) -> str:
        self.calls.append({
            "role": role,
            "prompt": prompt,
            "system": system,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        queue = self.responses.get(role)
        if not queue:
            raise ModelInvocationError("No scripted response", role=role.value)
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def calls_for(self, role: ModelRole) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["role"] == role]

    async def close(self):
        self.closed = True


class FakeProvider:
    """
    In-memory Bright Data stand-in.

    pages: url -> ScrapedPage (missing urls raise BrightDataError)
    searches: query substring -> SearchResponse or exception
    profiles: platform -> SocialProfileData
    """

    def __init__(
        self,
        pages: Optional[Dict[str, Any]] = None,
        searches: Optional[Dict[str, Any]] = None,
        profiles: Optional[Dict[str, SocialProfileData]] = None,
    ):
        self.pages = pages or {}
        self.searches = searches or {}
        self.profiles = profiles or {}
        self.search = AsyncMock(side_effect=self._search)
        self.scrape = AsyncMock(side_effect=self._scrape)
        self.get_social_profile = AsyncMock(side_effect=self._get_social_profile)

    async def _search(self, query: str, num_results: int = 10, **kwargs) -> SearchResponse:
        for key, response in self.searches.items():
            if key in query:
                if isinstance(response, Exception):
                    raise response
                return response
        return SearchResponse(query=query)

    async def _scrape(self, url: str) -> ScrapedPage:
        page = self.pages.get(url)
        if page is None:
            raise BrightDataError(f"No page for {url}", status_code=404)
        if isinstance(page, Exception):
            raise page
        return page

    async def _get_social_profile(self, platform: str, url: str) -> SocialProfileData:
        return self.profiles.get(platform, SocialProfileData(platform=platform, url=url))


def make_serp(query: str, urls: List[tuple], related=None, paa=None) -> SearchResponse:
    """Build a SearchResponse from (url, title) pairs."""
    return SearchResponse(
        query=query,
        results=[
            SearchResult(url=url, title=title, domain=extract_domain(url), position=i + 1)
            for i, (url, title) in enumerate(urls)
        ],
        related_searches=list(related or []),
        paa_questions=list(paa or []),
    )


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def settings() -> Settings:
    """Settings with no provider credentials and short timeouts."""
    return Settings(
        ANTHROPIC_API_KEY=None,
        PERPLEXITY_API_KEY=None,
        BRIGHT_DATA_API_TOKEN=None,
        PHASE_TIMEOUT=5.0,
        MODEL_TIMEOUT=1.0,
        SEARCH_TIMEOUT=1.0,
    )


@pytest.fixture
def failing_invoker() -> StubInvoker:
    """Every model call fails."""
    return StubInvoker()


@pytest.fixture
def strategy_json() -> str:
    return json.dumps({
        "searchQueries": [
            '"Acme Roofing" facebook',
            '"Acme Roofing" reviews',
            '"Acme Roofing" bbb',
        ],
        "priorityPlatforms": ["facebook", "google business", "bbb"],
        "competitorKeywords": ["roofing denver", "roof repair near me"],
        "suggestedCompanyName": "Acme Roofing",
        "suggestedLocation": "Denver, CO",
        "suggestedIndustry": "roofing",
        "strategistNotes": "Strong local presence expected",
    })


@pytest.fixture
def research_json() -> str:
    return "```json\n" + json.dumps({
        "companyInfo": {
            "name": "Acme Roofing",
            "phone": "(303) 555-0100",
            "city": "Denver",
            "state": "Colorado",
            "services": ["Roof Repair", "Roof Replacement"],
        },
        "socialProfiles": {
            "facebook": "https://facebook.com/acme-guess",
            "instagram": "null",
        },
        "directoryListings": [
            {"name": "BBB", "url": "https://www.bbb.org/us/co/denver/acme", "category": "directory"},
            {"name": "Broken", "url": None},
        ],
        "reviews": [{"platform": "Google", "rating": "4.8", "count": "152"}],
        "competitors": ["Peak Roofing", "Summit Roofing"],
        "websiteAnalysis": {"hasSSL": True},
        "sources": ["https://acmeroofing.com"],
    }) + "\n```"


@pytest.fixture
def analyst_json() -> str:
    return json.dumps({
        "profile": {
            "name": "Acme Roofing",
            "website": "https://acmeroofing.com",
            "phone": "(303) 555-0100",
            "state": "Colorado",
            "stateAbbr": "CO",
            "headquarters": "Denver",
            "industryType": "roofing",
            "services": ["Roof Repair", "Roof Replacement", "Roof Inspection"],
            "usps": ["Free Estimates", "Lifetime Warranty"],
            "audience": "homeowners",
            "valueProposition": "Denver's most trusted roofer",
        },
        "socialLinks": {
            "facebook": "https://facebook.com/acme-guess",
            "yelp": "https://www.yelp.com/biz/acme-roofing-denver",
            "tiktok": None,
        },
        "additionalLinks": [
            {
                "name": "BBB",
                "url": "https://www.bbb.org/us/co/denver/acme",
                "category": "directory",
                "isVerified": True,
                "isAiSuggested": False,
            },
            {"name": "GAF", "url": "gaf.com/acme", "category": "manufacturer"},
        ],
        "competitorAnalysis": {
            "competitors": ["Peak Roofing"],
            "strengthsWeaknesses": ["Our strength: reviews"],
            "opportunities": ["Storm damage content"],
        },
        "conversionInsights": {
            "uspStrength": 8,
            "trustSignals": ["BBB Accredited"],
            "ctaRecommendations": ["Get Free Estimate"],
        },
        "analystNotes": "Good coverage",
    })


@pytest.fixture
def seo_json() -> str:
    return json.dumps({
        "seoInsights": {
            "primaryKeywords": ["roofing denver", "roof repair denver"],
            "contentGaps": ["hail damage guide"],
            "localSEOScore": 72,
            "recommendations": ["Optimize Google Business Profile"],
        },
        "strategistNotes": "Focus on storm season",
    })


# ============================================================================
# Markers
# ============================================================================

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
