"""
Tests for SEO recommendations and quick research.
"""

import json

import pytest

from src.integrations.brightdata import BrightDataError, ScrapedPage
from src.llm.router import ModelRole
from src.research.models import CompanyProfile, CompetitorResearch
from src.research.quick_research import (
    QuickResearcher,
    build_search_query,
    find_missing_researchable,
)
from src.research.seo import FALLBACK_RECOMMENDATIONS, SeoAdvisor

from conftest import FakeProvider, StubInvoker, make_serp


class TestSeoAdvisor:

    @pytest.mark.asyncio
    async def test_recommendations(self, seo_json):
        invoker = StubInvoker({ModelRole.STRATEGIST: [seo_json]})
        seo = await SeoAdvisor(invoker).recommend(CompanyProfile(name="Acme Roofing"))

        assert seo.is_fallback is False
        assert seo.insights.primary_keywords == ["roofing denver", "roof repair denver"]
        assert seo.insights.local_seo_score == 72
        assert seo.notes == "Focus on storm season"
        assert invoker.calls[0]["temperature"] == 0.6

    @pytest.mark.asyncio
    async def test_clamps_and_caps(self):
        response = json.dumps({
            "seoInsights": {
                "primaryKeywords": [f"kw {i}" for i in range(14)],
                "localSEOScore": 140,
                "recommendations": [f"rec {i}" for i in range(8)],
            },
        })
        invoker = StubInvoker({ModelRole.STRATEGIST: [response]})
        seo = await SeoAdvisor(invoker).recommend(CompanyProfile(name="Acme"))

        assert len(seo.insights.primary_keywords) == 10
        assert len(seo.insights.recommendations) == 5
        assert seo.insights.local_seo_score == 100

    @pytest.mark.asyncio
    async def test_competitor_seeds_in_prompt(self, seo_json):
        research = CompetitorResearch(keywords=["roof repair denver"], content_gaps=["How long does a roof last?"])
        invoker = StubInvoker({ModelRole.STRATEGIST: [seo_json]})
        await SeoAdvisor(invoker).recommend(CompanyProfile(name="Acme"), research)

        prompt = invoker.calls[0]["prompt"]
        assert "roof repair denver" in prompt
        assert "How long does a roof last?" in prompt

    @pytest.mark.asyncio
    async def test_failure_uses_fallback(self, failing_invoker):
        research = CompetitorResearch(content_gaps=["How long does a roof last?"])
        seo = await SeoAdvisor(failing_invoker).recommend(CompanyProfile(name="Acme"), research)

        assert seo.is_fallback is True
        assert seo.insights.local_seo_score == 50
        assert seo.insights.recommendations == FALLBACK_RECOMMENDATIONS
        assert seo.insights.content_gaps == ["How long does a roof last?"]


class TestQuickResearchHelpers:

    def test_missing_fields(self):
        profile = CompanyProfile(name="Acme", phone="555", services=["Roof Repair"])
        missing = find_missing_researchable(profile)
        assert "name" not in missing
        assert "phone" not in missing
        assert "email" in missing
        assert "primarySiteKeyword" in missing
        assert len(missing) == 10

    def test_search_query(self):
        profile = CompanyProfile(name="Acme Roofing", headquarters="Denver", state="Colorado", industry_type="roofing")
        assert build_search_query(profile) == '"Acme Roofing" Denver Colorado roofing'
        assert build_search_query(CompanyProfile(website="acmeroofing.com")) == "acmeroofing.com"


class TestQuickResearcher:

    @pytest.mark.asyncio
    async def test_requires_name_or_website(self, failing_invoker):
        result = await QuickResearcher(failing_invoker).research(CompanyProfile())
        assert result.success is False
        assert result.error == "Please add your company name or website first to enable quick research"
        assert failing_invoker.calls == []

    @pytest.mark.asyncio
    async def test_suggestions_limited_to_missing_fields(self):
        suggestions = json.dumps({
            "services": ["Should Not Appear"],
            "usps": ["Free Estimates"],
            "certifications": None,
            "brandVoice": "friendly",
        })
        invoker = StubInvoker({ModelRole.RESEARCHER: [suggestions]})
        profile = CompanyProfile(name="Acme Roofing", services=["Roof Repair"])

        result = await QuickResearcher(invoker).research(profile)

        assert result.success is True
        assert result.suggestions == {"usps": ["Free Estimates"], "brandVoice": "friendly"}
        assert result.fields_found == ["usps", "brandVoice"]
        assert invoker.calls[0]["max_tokens"] == 1500

    @pytest.mark.asyncio
    async def test_web_research(self):
        provider = FakeProvider(
            pages={"acmeroofing.com": ScrapedPage(
                url="https://acmeroofing.com",
                social_links={"facebook": "https://facebook.com/acmeroofingco"},
            )},
            searches={"Acme Roofing": make_serp("q", [
                ("https://a.com", "A"), ("https://b.com", "B"),
                ("https://c.com", "C"), ("https://d.com", "D"),
            ])},
        )
        invoker = StubInvoker({ModelRole.RESEARCHER: ['{"phone": "(303) 555-0100"}']})
        profile = CompanyProfile(name="Acme Roofing", website="acmeroofing.com")

        result = await QuickResearcher(invoker, provider).research(profile)

        assert result.suggestions["socialLinks"] == {"facebook": "https://facebook.com/acmeroofingco"}
        assert result.suggestions["phone"] == "(303) 555-0100"
        assert result.sources_used == ["https://a.com", "https://b.com", "https://c.com", "acmeroofing.com"]

    @pytest.mark.asyncio
    async def test_provider_failures_tolerated(self, failing_invoker):
        provider = FakeProvider(
            pages={"acmeroofing.com": BrightDataError("blocked", status_code=403)},
            searches={"acmeroofing.com": BrightDataError("down", status_code=503)},
        )
        result = await QuickResearcher(failing_invoker, provider).research(CompanyProfile(website="acmeroofing.com"))

        assert result.success is True
        assert result.suggestions == {}
        assert result.sources_used == []

    @pytest.mark.asyncio
    async def test_nothing_missing(self, failing_invoker):
        profile = CompanyProfile(
            name="Acme", phone="1", email="a@b.c", address="1 Main St",
            services=["a"], usps=["b"], certifications=["c"], cities=["Denver"],
            competitors=["Peak"], primary_site_keyword="roofing denver",
            secondary_site_keywords=["roof repair"], value_proposition="v", brand_voice="friendly",
        )
        result = await QuickResearcher(failing_invoker).research(profile)
        assert result.success is True
        assert result.suggestions == {}
        assert failing_invoker.calls == []
