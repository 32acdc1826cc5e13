"""
Tests for competitor-based fallback research and industry defaults.
"""

import json

import pytest

from src.integrations.brightdata import BrightDataError
from src.llm.router import ModelRole
from src.research.competitor_research import CompetitorResearcher, company_name_from_title
from src.research.industries import (
    get_default_services,
    get_default_usps,
    get_industry_directories,
    resolve_industry,
)

from conftest import FakeProvider, StubInvoker, make_serp


USPS = json.dumps(["Free Estimates", "Licensed & Insured", "24/7 Emergency Service",
                   "Lifetime Warranty", "Family Owned", "Extra One"])


def competitor_serp():
    return make_serp(
        "best roofing companies in Denver, CO",
        [
            ("https://www.yelp.com/search?find_desc=roofing", "THE BEST 10 Roofing in Denver, CO - Yelp"),
            ("https://peakroofing.com/", "Peak Roofing | Denver Roofing Contractor"),
            ("https://www.angi.com/companylist/denver/roofing.htm", "Top 10 Roofers in Denver - Angi"),
            ("https://summitroofs.com/", "Summit Roofs - Quality Roof Replacement"),
            ("https://bestchoiceroofing.com/", "Best Choice Roofing - Denver, CO"),
            ("https://blog.example.com/top-roofers", "Top 7 Roofing Companies in Denver"),
        ],
        related=["roofing companies near me", "roof repair denver"],
        paa=["How much does a roof cost in Denver?"],
    )


class TestIndustries:

    def test_resolve_aliases(self):
        assert resolve_industry("Roofing Contractor").key == "roofing"
        assert resolve_industry("HVAC").key == "hvac"
        assert resolve_industry(None) is None

    def test_roofing_defaults(self):
        services = get_default_services("roofing")
        assert services[:3] == ["Roof Repair", "Roof Replacement", "Roof Inspection"]
        assert len(services) == 10
        assert get_default_usps("roofing")

    def test_defaults_are_copies(self):
        get_default_services("roofing").append("Mutated")
        assert "Mutated" not in get_default_services("roofing")

    def test_directories(self):
        assert get_industry_directories("roofing")


class TestCompanyNameFromTitle:

    @pytest.mark.parametrize("title,expected", [
        ("Peak Roofing | Denver Roofing Contractor", "Peak Roofing"),
        ("Summit Roofs - Quality Roof Replacement", "Summit Roofs"),
        ("Best Choice Roofing - Denver, CO", "Best Choice Roofing"),
        ("THE BEST 10 Roofing in Denver, CO - Yelp", None),
        ("Top 7 Roofing Companies in Denver", None),
        ("10 Best Roofers Near You", None),
        ("", None),
    ])
    def test_titles(self, title, expected):
        assert company_name_from_title(title) == expected


class TestCompetitorResearcher:

    @pytest.mark.asyncio
    async def test_full_research(self):
        provider = FakeProvider(searches={"best roofing companies in Denver, CO": competitor_serp()})
        invoker = StubInvoker({ModelRole.STRATEGIST: [USPS]})

        result = await CompetitorResearcher(provider, invoker).research("roofing", "Denver, CO")

        assert result.competitors == ["Peak Roofing", "Summit Roofs", "Best Choice Roofing"]
        assert "https://peakroofing.com/" in result.sources
        assert result.keywords == ["roofing companies near me", "roof repair denver"]
        assert result.content_gaps == ["How much does a roof cost in Denver?"]
        assert len(result.usps) == 5
        assert result.services == get_default_services("roofing")

        provider.search.assert_awaited_once()
        assert provider.search.call_args.kwargs["num_results"] == 10
        assert "Peak Roofing" in invoker.calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_caps_candidates(self):
        provider = FakeProvider(searches={"best": make_serp("q", [
            (f"https://roofer{i}.com", f"Roofer {i} | Denver") for i in range(9)
        ])})
        result = await CompetitorResearcher(provider, StubInvoker(), max_candidates=5).research("roofing", "Denver")
        assert len(result.competitors) == 5

    @pytest.mark.asyncio
    async def test_search_failure_keeps_services(self):
        provider = FakeProvider(searches={"best": BrightDataError("down", status_code=503)})
        invoker = StubInvoker({ModelRole.STRATEGIST: [USPS]})

        result = await CompetitorResearcher(provider, invoker).research("roofing", "Denver, CO")

        assert result.competitors == []
        assert result.keywords == []
        assert result.services == get_default_services("roofing")
        assert len(result.usps) == 5

    @pytest.mark.asyncio
    async def test_usp_failure_uses_industry_defaults(self, failing_invoker):
        result = await CompetitorResearcher(None, failing_invoker).research("hvac", "Austin, TX")
        assert result.usps == get_default_usps("hvac")
        assert result.services == get_default_services("hvac")
        assert not result.is_empty

    @pytest.mark.asyncio
    async def test_unknown_industry(self, failing_invoker):
        result = await CompetitorResearcher(None, failing_invoker).research("astrology", "Denver")
        assert result.is_empty
