"""
Tests for the model-driven research phases:
strategy, deep research and structuring.
"""

import json

import pytest

from src.llm.errors import ModelInvocationError
from src.llm.router import ModelRole
from src.research.deep_research import DeepResearcher, resolve_targets
from src.research.models import LinkCategory, RawResearchBundle, ResearchRequest, ResearchStrategy
from src.research.strategy import ResearchStrategist, fallback_strategy
from src.research.structuring import FALLBACK_NOTES, DataStructurer

from conftest import StubInvoker


REQUEST = ResearchRequest(
    website_url="acmeroofing.com",
    company_name="Acme Roofing",
    location="Denver, CO",
    industry_type="roofing",
)


class TestStrategy:

    @pytest.mark.asyncio
    async def test_plan_from_model(self, strategy_json):
        invoker = StubInvoker({ModelRole.STRATEGIST: [strategy_json]})
        strategy = await ResearchStrategist(invoker).plan(REQUEST)

        assert strategy.is_fallback is False
        assert len(strategy.search_queries) == 3
        assert strategy.suggested_location == "Denver, CO"
        assert strategy.notes == "Strong local presence expected"

        call = invoker.calls[0]
        assert call["max_tokens"] == 2000
        assert call["temperature"] == 0.7
        assert "acmeroofing.com" in call["prompt"]

    @pytest.mark.asyncio
    async def test_model_failure_uses_fallback(self, failing_invoker):
        strategy = await ResearchStrategist(failing_invoker).plan(REQUEST)

        assert strategy.is_fallback is True
        assert strategy.search_queries == [
            '"Acme Roofing" site:facebook.com',
            '"Acme Roofing" site:bbb.org',
            '"Acme Roofing" reviews',
        ]
        assert strategy.priority_platforms == ["facebook", "google", "bbb", "yelp"]
        assert strategy.competitor_keywords == ["roofing Denver, CO"]
        assert strategy.notes == "Using fallback strategy due to AI error"

    @pytest.mark.asyncio
    async def test_unparseable_output_uses_fallback(self):
        invoker = StubInvoker({ModelRole.STRATEGIST: ["I'm sorry, I can't help with that."]})
        strategy = await ResearchStrategist(invoker).plan(REQUEST)
        assert strategy.is_fallback is True

    def test_fallback_without_name_uses_website(self):
        strategy = fallback_strategy(ResearchRequest(website_url="https://www.acmeroofing.com"))
        assert strategy.search_queries[0] == '"acmeroofing.com" site:facebook.com'
        assert strategy.competitor_keywords == ["service"]

    @pytest.mark.asyncio
    async def test_placeholder_suggestions_dropped(self):
        response = json.dumps({
            "searchQueries": ["q"],
            "suggestedCompanyName": "if discoverable from website",
            "suggestedLocation": "Unknown",
        })
        invoker = StubInvoker({ModelRole.STRATEGIST: [response]})
        strategy = await ResearchStrategist(invoker).plan(ResearchRequest(website_url="acmeroofing.com"))
        assert strategy.suggested_company_name is None
        assert strategy.suggested_location is None


class TestResolveTargets:

    def test_request_wins_over_strategy(self):
        strategy = ResearchStrategy(suggested_company_name="Other", suggested_location="Boulder, CO")
        assert resolve_targets(REQUEST, strategy) == ("Acme Roofing", "Denver, CO", "roofing")

    def test_strategy_fills_gaps(self):
        request = ResearchRequest(website_url="acmeroofing.com")
        strategy = ResearchStrategy(
            suggested_company_name="Acme Roofing",
            suggested_location="Denver, CO",
            suggested_industry="roofing",
        )
        assert resolve_targets(request, strategy) == ("Acme Roofing", "Denver, CO", "roofing")

    def test_falls_back_to_domain(self):
        request = ResearchRequest(website_url="acmeroofing.com")
        assert resolve_targets(request, ResearchStrategy()) == ("acmeroofing.com", None, None)


class TestDeepResearch:

    @pytest.mark.asyncio
    async def test_builds_bundle(self, research_json):
        invoker = StubInvoker({ModelRole.RESEARCHER: [research_json]})
        strategy = ResearchStrategy(search_queries=[f"q{i}" for i in range(8)])
        bundle = await DeepResearcher(invoker, max_queries=5).research(REQUEST, strategy)

        assert bundle.company_info["name"] == "Acme Roofing"
        assert bundle.social_profiles["facebook"] == "https://facebook.com/acme-guess"
        assert bundle.social_profiles["instagram"] is None
        assert [d.name for d in bundle.directory_listings] == ["BBB"]
        assert bundle.directory_listings[0].category == LinkCategory.DIRECTORY
        assert bundle.reviews[0].rating == 4.8
        assert bundle.reviews[0].count == 152
        assert bundle.competitors == ["Peak Roofing", "Summit Roofing"]

        prompt = invoker.calls[0]["prompt"]
        assert "q4" in prompt
        assert "q5" not in prompt
        assert invoker.calls[0]["max_tokens"] == 4000

    @pytest.mark.asyncio
    async def test_null_item_fields_keep_bundle(self):
        response = json.dumps({
            "companyInfo": {"name": "Acme Roofing"},
            "directoryListings": [{"name": None, "url": "https://www.bbb.org/acme", "category": None}],
            "reviews": [{"platform": None, "rating": 4.9}, {"platform": "Google", "rating": 4.7}],
        })
        invoker = StubInvoker({ModelRole.RESEARCHER: [response]})
        bundle = await DeepResearcher(invoker).research(REQUEST, ResearchStrategy())

        assert bundle.directory_listings[0].name == "https://www.bbb.org/acme"
        assert bundle.directory_listings[0].category == LinkCategory.DIRECTORY
        assert [r.platform for r in bundle.reviews] == ["Google"]

    @pytest.mark.asyncio
    async def test_prompt_lists_industry_directories(self):
        invoker = StubInvoker({ModelRole.RESEARCHER: ['{"companyInfo": {}}']})
        await DeepResearcher(invoker).research(REQUEST, ResearchStrategy())

        assert "GAF Contractor Locator (gaf.com)" in invoker.calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_failure_keeps_name(self):
        invoker = StubInvoker({ModelRole.RESEARCHER: [ModelInvocationError("timeout", role="researcher")]})
        bundle = await DeepResearcher(invoker).research(REQUEST, ResearchStrategy())

        assert bundle.company_info == {"name": "Acme Roofing"}
        assert bundle.reviews == []
        assert bundle.directory_listings == []


class TestStructuring:

    @pytest.mark.asyncio
    async def test_structures_profile(self, analyst_json):
        invoker = StubInvoker({ModelRole.ANALYST: [analyst_json]})
        structured = await DataStructurer(invoker).structure(
            RawResearchBundle(),
            company_name="Acme Roofing",
            website_url="acmeroofing.com",
        )
        profile = structured.profile

        assert structured.is_fallback is False
        assert structured.notes == "Good coverage"
        assert profile.website == "acmeroofing.com"
        assert profile.services == ["Roof Repair", "Roof Replacement", "Roof Inspection"]
        assert profile.social_links == {
            "facebook": "https://facebook.com/acme-guess",
            "yelp": "https://www.yelp.com/biz/acme-roofing-denver",
        }
        assert profile.competitors == ["Peak Roofing"]
        assert profile.conversion_insights.usp_strength == 8
        assert invoker.calls[0]["temperature"] == 0.4

    @pytest.mark.asyncio
    async def test_links_stamped_as_ai_suggested(self, analyst_json):
        invoker = StubInvoker({ModelRole.ANALYST: [analyst_json]})
        structured = await DataStructurer(invoker).structure(RawResearchBundle(), company_name="Acme Roofing")
        links = structured.profile.additional_links

        assert [link.url for link in links] == ["https://www.bbb.org/us/co/denver/acme", "https://gaf.com/acme"]
        assert all(link.is_ai_suggested for link in links)
        assert not any(link.is_verified for link in links)
        assert all(link.id.startswith("ai-") for link in links)
        assert links[1].category == LinkCategory.MANUFACTURER

    @pytest.mark.asyncio
    async def test_duplicate_links_dropped(self):
        response = json.dumps({
            "profile": {"name": "Acme"},
            "additionalLinks": [
                {"name": "BBB", "url": "https://bbb.org/acme"},
                {"name": "BBB", "url": "bbb.org/acme/"},
                {"name": "Nothing", "url": ""},
            ],
        })
        invoker = StubInvoker({ModelRole.ANALYST: [response]})
        structured = await DataStructurer(invoker).structure(RawResearchBundle())
        assert len(structured.profile.additional_links) == 1

    @pytest.mark.asyncio
    async def test_numeric_link_id_keeps_profile(self):
        response = json.dumps({
            "profile": {"name": "Acme Roofing"},
            "additionalLinks": [{"id": 1, "name": None, "url": "https://bbb.org/acme", "category": None}],
        })
        invoker = StubInvoker({ModelRole.ANALYST: [response]})
        structured = await DataStructurer(invoker).structure(RawResearchBundle())

        assert structured.is_fallback is False
        link = structured.profile.additional_links[0]
        assert link.id == "1"
        assert link.name == "https://bbb.org/acme"
        assert link.is_ai_suggested is True

    @pytest.mark.asyncio
    async def test_failure_keeps_known_identity(self, failing_invoker):
        structured = await DataStructurer(failing_invoker).structure(
            RawResearchBundle(),
            company_name="Acme Roofing",
            website_url="acmeroofing.com",
        )
        assert structured.is_fallback is True
        assert structured.notes == FALLBACK_NOTES
        assert structured.profile.name == "Acme Roofing"
        assert structured.profile.website == "acmeroofing.com"
        assert structured.profile.services == []
        assert structured.profile.conversion_insights.usp_strength == 5
