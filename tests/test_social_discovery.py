"""
Tests for social link discovery and bundle merging.
"""

import asyncio

import pytest

from src.integrations.brightdata import BrightDataError, ScrapedPage, SocialProfileData
from src.research.merge import (
    apply_discovered_links,
    dedupe_preserving_order,
    merge_social_discovery,
    normalize_url,
)
from src.research.models import (
    CompanyProfile,
    DirectoryListing,
    RawResearchBundle,
    SocialDiscoveryResult,
)
from src.research.social_discovery import SocialDiscovery, belongs_to_platform

from conftest import FakeProvider, make_serp


def acme_page() -> ScrapedPage:
    return ScrapedPage(
        url="https://acmeroofing.com",
        title="Acme Roofing",
        social_links={
            "facebook": "https://facebook.com/acmeroofingco",
            "instagram": "https://instagram.com/acmeroofing",
        },
    )


class TestBelongsToPlatform:

    def test_platform_domains(self):
        assert belongs_to_platform("https://www.facebook.com/acme", "facebook")
        assert belongs_to_platform("https://x.com/acme", "twitter")
        assert not belongs_to_platform("https://www.yelp.com/biz/acme", "facebook")
        assert not belongs_to_platform("https://notfacebook.com/acme", "facebook")


class TestSocialDiscovery:

    @pytest.mark.asyncio
    async def test_no_provider_is_noop(self):
        result = await SocialDiscovery(provider=None).discover("Acme Roofing", "acmeroofing.com")
        assert result.is_empty

    @pytest.mark.asyncio
    async def test_scraped_links_are_authoritative(self):
        provider = FakeProvider(
            pages={"acmeroofing.com": acme_page()},
            searches={
                "site:facebook.com": make_serp("fb", [("https://facebook.com/someone-else", "Acme")]),
            },
        )
        result = await SocialDiscovery(provider).discover("Acme Roofing", "acmeroofing.com")

        assert result.social_links["facebook"] == "https://facebook.com/acmeroofingco"
        assert result.scraped_platforms == ["facebook", "instagram"]
        assert "https://acmeroofing.com" in result.sources
        searched = [call.args[0] for call in provider.search.call_args_list]
        assert not any("site:facebook.com" in q for q in searched)
        assert not any("site:instagram.com" in q for q in searched)

    @pytest.mark.asyncio
    async def test_search_fills_missing_platforms(self):
        provider = FakeProvider(
            searches={
                "site:linkedin.com": make_serp("li", [
                    ("https://www.yelp.com/biz/acme", "Acme - Yelp"),
                    ("https://www.linkedin.com/company/acme-roofing", "Acme Roofing | LinkedIn"),
                ]),
            },
        )
        result = await SocialDiscovery(provider).discover("Acme Roofing")

        assert result.social_links == {"linkedin": "https://www.linkedin.com/company/acme-roofing"}
        assert '"Acme Roofing" site:linkedin.com' in result.sources
        provider.scrape.assert_not_called()

    @pytest.mark.asyncio
    async def test_failures_are_isolated(self):
        provider = FakeProvider(
            pages={"acmeroofing.com": BrightDataError("blocked", status_code=403)},
            searches={
                "site:facebook.com": BrightDataError("rate limited", status_code=429),
                "site:youtube.com": make_serp("yt", [("https://www.youtube.com/@acmeroofing", "Acme")]),
            },
        )
        result = await SocialDiscovery(provider).discover("Acme Roofing", "acmeroofing.com")
        assert result.social_links == {"youtube": "https://www.youtube.com/@acmeroofing"}

    @pytest.mark.asyncio
    async def test_slow_search_does_not_block_others(self):
        provider = FakeProvider(searches={
            "site:linkedin.com": make_serp("li", [("https://www.linkedin.com/company/acme-roofing", "Acme")]),
        })
        answer = provider.search.side_effect

        async def search(query, num_results=10, **kwargs):
            if "site:facebook.com" in query:
                await asyncio.sleep(5)
            return await answer(query, num_results, **kwargs)

        provider.search.side_effect = search
        result = await SocialDiscovery(provider, timeout=0.1).discover("Acme Roofing")

        assert result.social_links == {"linkedin": "https://www.linkedin.com/company/acme-roofing"}
        assert provider.search.call_count == 5

    @pytest.mark.asyncio
    async def test_partial_result_survives_caller_timeout(self):
        async def hang(query, num_results=10, **kwargs):
            await asyncio.sleep(5)

        provider = FakeProvider(pages={"acmeroofing.com": acme_page()})
        provider.search.side_effect = hang
        partial = SocialDiscoveryResult()

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(
                SocialDiscovery(provider, timeout=None).discover("Acme Roofing", "acmeroofing.com", result=partial),
                timeout=0.1,
            )

        assert partial.social_links["facebook"] == "https://facebook.com/acmeroofingco"

    @pytest.mark.asyncio
    async def test_enriches_supported_profiles(self):
        provider = FakeProvider(
            pages={"acmeroofing.com": acme_page()},
            profiles={
                "instagram": SocialProfileData(
                    platform="instagram",
                    url="https://instagram.com/acmeroofing",
                    username="acmeroofing",
                    followers=1200,
                ),
            },
        )
        result = await SocialDiscovery(provider).discover("Acme Roofing", "acmeroofing.com")

        assert len(result.profiles) == 1
        assert result.profiles[0].followers == 1200
        platforms = [call.args[0] for call in provider.get_social_profile.call_args_list]
        assert platforms == ["instagram"]


class TestMerge:

    def test_normalize_url(self):
        assert normalize_url("facebook.com/acme/") == "https://facebook.com/acme"
        assert normalize_url("http://acme.com") == "http://acme.com"
        assert normalize_url("null") is None
        assert normalize_url(None) is None

    def test_dedupe_preserving_order(self):
        assert dedupe_preserving_order(["b", "a", "b", "", "c", "a"]) == ["b", "a", "c"]

    def test_discovery_overrides_model_guess(self):
        bundle = RawResearchBundle(
            social_profiles={"facebook": "https://facebook.com/acme-guess", "twitter": None},
            sources=["https://acmeroofing.com"],
        )
        discovery = SocialDiscoveryResult(
            social_links={"facebook": "https://facebook.com/acmeroofingco"},
            sources=["https://acmeroofing.com", '"Acme" site:linkedin.com'],
            profiles=[SocialProfileData(platform="instagram", url="https://instagram.com/acme", followers=10)],
        )
        merged = merge_social_discovery(bundle, discovery)

        assert merged.social_profiles["facebook"] == "https://facebook.com/acmeroofingco"
        assert merged.social_profiles["twitter"] is None
        assert merged.sources == ["https://acmeroofing.com", '"Acme" site:linkedin.com']
        assert merged.social_profile_data[0]["followers"] == 10
        assert bundle.social_profiles["facebook"] == "https://facebook.com/acme-guess"

    def test_listings_normalized_and_deduped(self):
        bundle = RawResearchBundle(directory_listings=[
            DirectoryListing(name="BBB", url="bbb.org/acme"),
            DirectoryListing(name="BBB again", url="https://bbb.org/acme/"),
            DirectoryListing(name="Empty", url=""),
        ])
        merged = merge_social_discovery(bundle, None)
        assert [(d.name, d.url) for d in merged.directory_listings] == [("BBB", "https://bbb.org/acme")]

    def test_apply_discovered_links(self):
        profile = CompanyProfile(social_links={"facebook": "https://facebook.com/acme-guess"})
        apply_discovered_links(profile, {"facebook": "facebook.com/acmeroofingco"})
        assert profile.social_links["facebook"] == "https://facebook.com/acmeroofingco"
