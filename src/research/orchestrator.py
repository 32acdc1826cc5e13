"""
Company Research Orchestrator

Coordinates the deep research pipeline:
1. Strategy - plan searches (strategist)
2. Social Discovery - scrape website + platform searches (search provider)
3. Deep Research - gather raw facts (researcher)
4. Structuring - build the CompanyProfile (analyst)
5. Data Quality - score the profile, fall back to competitor research if thin
6. SEO - keywords, content gaps and recommendations (strategist)

Every phase degrades to a fallback value; only invalid input or an
unexpected error fails the run.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar, Union, TYPE_CHECKING

from src.integrations.config import ExternalAPIClients, ExternalAPIConfig
from src.llm.invoker import ModelInvoker
from src.utils.config import Settings, get_settings

from .competitor_research import CompetitorResearcher
from .confidence import compute_confidence
from .deep_research import DeepResearcher, fallback_bundle, resolve_targets
from .merge import apply_discovered_links, dedupe_preserving_order, merge_social_discovery
from .models import (
    CompanyProfile,
    CompetitorResearch,
    DeepResearchResult,
    QuickResearchResult,
    ResearchRequest,
    ResearchValidationError,
    SocialDiscoveryResult,
    utc_now_iso,
)
from .quality import assess_data_quality, backfill_from_competitor_research
from .quick_research import QuickResearcher
from .seo import SeoAdvisor, fallback_seo
from .social_discovery import SocialDiscovery
from .strategy import ResearchStrategist, fallback_strategy
from .structuring import DataStructurer, fallback_structured

if TYPE_CHECKING:
    from src.integrations.brightdata import BrightDataClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ResearchOrchestrator:
    """
    Runs deep and quick research against injected model and search clients.

    Usage:
        orchestrator = ResearchOrchestrator(invoker, provider)
        result = await orchestrator.run_deep_research(ResearchRequest(company_name="Acme Roofing"))
    """

    def __init__(
        self,
        invoker: "ModelInvoker",
        provider: Optional["BrightDataClient"] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Args:
            invoker: Role-based model invoker (or a stand-in with the same invoke())
            provider: Web search/scrape client, None when not configured
            settings: Tuning knobs (thresholds, timeouts)
        """
        settings = settings or get_settings()
        self.invoker = invoker
        self.provider = provider
        self.phase_timeout = settings.PHASE_TIMEOUT
        self.limited_info_threshold = settings.COMPETITOR_FALLBACK_THRESHOLD

        self.strategist = ResearchStrategist(invoker)
        self.social_discovery = SocialDiscovery(provider, timeout=settings.SEARCH_TIMEOUT)
        self.researcher = DeepResearcher(invoker, max_queries=settings.MAX_STRATEGY_QUERIES)
        self.structurer = DataStructurer(invoker)
        self.competitor_researcher = CompetitorResearcher(
            provider,
            invoker,
            max_candidates=settings.MAX_COMPETITOR_CANDIDATES,
        )
        self.seo_advisor = SeoAdvisor(invoker)
        self.quick_researcher = QuickResearcher(invoker, provider)

    async def _run_phase(
        self,
        name: str,
        phase: Awaitable[T],
        fallback: Callable[[], T],
    ) -> T:
        """Await a phase, taking its fallback if it exceeds the phase timeout."""
        try:
            return await asyncio.wait_for(phase, timeout=self.phase_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"{name} timed out after {self.phase_timeout}s, using fallback")
            return fallback()

    async def run_deep_research(self, request: ResearchRequest) -> DeepResearchResult:
        """
        Research a company end to end.

        Args:
            request: Seed fields (website and/or company name required)

        Returns:
            DeepResearchResult (success=False only for invalid input or unexpected errors)
        """
        try:
            request.validate()
        except ResearchValidationError as e:
            logger.warning(f"Rejected research request: {e}")
            return DeepResearchResult.failure(str(e))

        start_time = time.time()
        logger.info("=" * 60)
        logger.info(f"DEEP RESEARCH: {request.company_name or 'unknown'} ({request.website_url or 'no website'})")
        logger.info("=" * 60)
        if isinstance(self.invoker, ModelInvoker):
            logger.info(f"Model routing: {self.invoker.router.describe()}")

        try:
            result = await self._deep_research(request)
        except Exception as e:
            logger.exception(f"Deep research failed: {e}")
            return DeepResearchResult.failure(str(e) or "Research failed")

        logger.info(
            f"Deep research complete in {time.time() - start_time:.1f}s: "
            f"quality={result.data_quality.score}, "
            f"competitor_fallback={result.data_quality.used_competitor_research}"
        )
        if isinstance(self.invoker, ModelInvoker):
            logger.info(f"Model usage: {self.invoker.get_usage_summary()}")
        return result

    async def _deep_research(self, request: ResearchRequest) -> DeepResearchResult:
        # Phase 1
        logger.info("Phase 1: Creating research strategy...")
        strategy = await self._run_phase(
            "Strategy",
            self.strategist.plan(request),
            lambda: fallback_strategy(request),
        )
        name, location, industry = resolve_targets(request, strategy)

        # Phase 2
        logger.info("Phase 2: Discovering social profiles...")
        partial_discovery = SocialDiscoveryResult()
        discovery = await self._run_phase(
            "Social discovery",
            self.social_discovery.discover(name, request.website_url, result=partial_discovery),
            lambda: partial_discovery,
        )

        # Phase 3
        logger.info("Phase 3: Executing deep research...")
        raw = await self._run_phase(
            "Deep research",
            self.researcher.research(request, strategy),
            lambda: fallback_bundle(request.company_name or name),
        )
        raw = merge_social_discovery(raw, discovery)

        # Phase 4
        logger.info("Phase 4: Structuring research data...")
        structured = await self._run_phase(
            "Structuring",
            self.structurer.structure(raw, company_name=name, website_url=request.website_url),
            lambda: fallback_structured(name, request.website_url),
        )
        profile = structured.profile
        apply_discovered_links(profile, discovery.social_links)
        if not profile.industry_type and industry:
            profile.industry_type = industry

        # Phase 5
        logger.info("Phase 5: Assessing data quality...")
        initial_quality = assess_data_quality(profile, threshold=self.limited_info_threshold)
        quality = initial_quality
        competitor_research: Optional[CompetitorResearch] = None

        if initial_quality.limited_info:
            fallback_industry = industry or profile.industry_type
            fallback_location = location or _profile_location(profile)
            if fallback_industry and fallback_location:
                logger.info(
                    f"Limited info (score {initial_quality.score}), "
                    f"researching {fallback_industry} competitors in {fallback_location}"
                )
                competitor_research = await self._run_phase(
                    "Competitor research",
                    self.competitor_researcher.research(fallback_industry, fallback_location),
                    CompetitorResearch,
                )
                if competitor_research.is_empty:
                    logger.warning("Competitor research found nothing to backfill")
                backfill_from_competitor_research(profile, competitor_research)
                quality = assess_data_quality(
                    profile,
                    threshold=self.limited_info_threshold,
                    used_competitor_research=True,
                )
            else:
                logger.info(f"Limited info (score {initial_quality.score}) but no industry/location to research")

        # Phase 6
        logger.info("Phase 6: Generating SEO recommendations...")
        seo = await self._run_phase(
            "SEO",
            self.seo_advisor.recommend(profile, competitor_research),
            lambda: fallback_seo(competitor_research),
        )
        profile.seo_insights = seo.insights
        profile.last_researched_at = utc_now_iso()

        sources = list(raw.sources)
        if competitor_research is not None:
            sources.extend(competitor_research.sources)

        return DeepResearchResult(
            success=True,
            profile=profile,
            social_links=dict(profile.social_links),
            additional_links=list(profile.additional_links),
            competitor_analysis=profile.competitor_analysis,
            seo_insights=profile.seo_insights,
            conversion_insights=profile.conversion_insights,
            research_sources=dedupe_preserving_order(sources),
            ai_team_notes={
                "strategist": " | ".join(n for n in (strategy.notes, seo.notes) if n),
                "analyst": structured.notes,
            },
            confidence=compute_confidence(profile, raw),
            missing_fields=quality.missing_fields,
            data_quality=quality,
            initial_data_quality=initial_quality,
            competitor_research=competitor_research,
        )

    async def run_quick_research(self, profile: CompanyProfile) -> QuickResearchResult:
        """
        Suggest values for an existing profile's missing fields.

        Args:
            profile: Current profile

        Returns:
            QuickResearchResult
        """
        try:
            return await self._run_phase(
                "Quick research",
                self.quick_researcher.research(profile),
                lambda: QuickResearchResult(success=True),
            )
        except Exception as e:
            logger.exception(f"Quick research failed: {e}")
            return QuickResearchResult(success=False, error=str(e) or "Research failed")


def _profile_location(profile: CompanyProfile) -> Optional[str]:
    if not profile.headquarters:
        return None
    region = profile.state_abbr or profile.state
    return f"{profile.headquarters}, {region}" if region else profile.headquarters


# =============================================================================
# ENTRY POINTS
# =============================================================================


async def run_deep_research(
    website_url: Optional[str] = None,
    company_name: Optional[str] = None,
    location: Optional[str] = None,
    industry_type: Optional[str] = None,
    invoker: Optional["ModelInvoker"] = None,
    provider: Optional["BrightDataClient"] = None,
    settings: Optional[Settings] = None,
) -> DeepResearchResult:
    """
    Convenience function to run deep research.

    Clients not passed in are built from settings and closed afterwards.

    Args:
        website_url: Company website
        company_name: Company name
        location: "City, ST"
        industry_type: Trade, e.g. "roofing"
        invoker: Model invoker (optional)
        provider: Search/scrape client (optional)
        settings: Application settings (optional)

    Returns:
        DeepResearchResult
    """
    request = ResearchRequest(
        website_url=website_url,
        company_name=company_name,
        location=location,
        industry_type=industry_type,
    )
    try:
        request.validate()
    except ResearchValidationError as e:
        return DeepResearchResult.failure(str(e))

    async with _ResearchClients(invoker, provider, settings) as clients:
        orchestrator = ResearchOrchestrator(clients.invoker, clients.provider, clients.settings)
        return await orchestrator.run_deep_research(request)


async def run_quick_research(
    existing_profile: Union[CompanyProfile, Dict[str, Any]],
    invoker: Optional["ModelInvoker"] = None,
    provider: Optional["BrightDataClient"] = None,
    settings: Optional[Settings] = None,
) -> QuickResearchResult:
    """
    Convenience function to run quick research on an existing profile.

    Args:
        existing_profile: CompanyProfile or its camelCase/snake_case dict
        invoker: Model invoker (optional)
        provider: Search/scrape client (optional)
        settings: Application settings (optional)

    Returns:
        QuickResearchResult
    """
    profile = (
        existing_profile
        if isinstance(existing_profile, CompanyProfile)
        else CompanyProfile.from_dict(existing_profile)
    )

    async with _ResearchClients(invoker, provider, settings) as clients:
        orchestrator = ResearchOrchestrator(clients.invoker, clients.provider, clients.settings)
        return await orchestrator.run_quick_research(profile)


class _ResearchClients:
    """Builds missing clients from settings and closes only the ones it built."""

    def __init__(
        self,
        invoker: Optional["ModelInvoker"],
        provider: Optional["BrightDataClient"],
        settings: Optional[Settings],
    ):
        self.settings = settings or get_settings()
        self._owns_invoker = invoker is None
        self._external = ExternalAPIClients(ExternalAPIConfig.from_settings(self.settings))
        self._external.config.log_status()

        if invoker is None:
            invoker = ModelInvoker.from_settings(self.settings, perplexity_client=self._external.perplexity)
        if provider is None:
            provider = self._external.bright_data

        self.invoker = invoker
        self.provider = provider

    async def __aenter__(self) -> "_ResearchClients":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._owns_invoker:
            await self.invoker.close()
        await self._external.close()
