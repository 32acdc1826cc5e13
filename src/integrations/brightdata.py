"""
Bright Data API Client

Web search, page scraping and social profile data for company research.

Bright Data handles:
- Google SERP results (organic, related searches, people-also-ask)
- Unblocked page fetches (web_unlocker zone)
- Social profile datasets (Instagram, LinkedIn, YouTube)

API: https://brightdata.com
"""

import asyncio
import html as html_lib
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from src.utils.domain_filter import extract_domain

logger = logging.getLogger(__name__)


class BrightDataError(Exception):
    """Custom exception for Bright Data API errors."""

    def __init__(self, message: str, status_code: int = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 1
    initial_delay: float = 0.5
    max_delay: float = 4.0
    exponential_base: float = 2.0
    retryable_status_codes: tuple = (429, 500, 502, 503, 504)


# =============================================================================
# RESULT TYPES
# =============================================================================


@dataclass
class SearchResult:
    """One organic search result."""

    url: str
    title: str = ""
    domain: str = ""
    snippet: str = ""
    position: int = 0


@dataclass
class SearchResponse:
    """Search engine results page for one query."""

    query: str
    results: List[SearchResult] = field(default_factory=list)
    related_searches: List[str] = field(default_factory=list)
    paa_questions: List[str] = field(default_factory=list)


@dataclass
class ScrapedPage:
    """A fetched page with extracted metadata and outbound social links."""

    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    content: str = ""
    social_links: Dict[str, str] = field(default_factory=dict)


@dataclass
class SocialProfileData:
    """Follower/engagement metadata for one social profile."""

    platform: str
    url: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    followers: Optional[int] = None
    posts: Optional[int] = None
    engagement: Optional[float] = None
    bio: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return any(
            v is not None
            for v in (self.username, self.display_name, self.followers, self.posts, self.bio)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "platform": self.platform,
            "url": self.url,
            "username": self.username,
            "displayName": self.display_name,
            "followers": self.followers,
            "posts": self.posts,
            "engagement": self.engagement,
            "bio": self.bio,
        }


# =============================================================================
# SOCIAL LINK EXTRACTION
# =============================================================================


SOCIAL_LINK_PATTERNS: Dict[str, re.Pattern] = {
    "facebook": re.compile(r"facebook\.com/[a-zA-Z0-9._-]+", re.IGNORECASE),
    "instagram": re.compile(r"instagram\.com/[a-zA-Z0-9._-]+", re.IGNORECASE),
    "linkedin": re.compile(r"linkedin\.com/(?:company|in)/[a-zA-Z0-9._-]+", re.IGNORECASE),
    "twitter": re.compile(r"(?<![a-zA-Z0-9])(?:twitter|x)\.com/[a-zA-Z0-9._-]+", re.IGNORECASE),
    "youtube": re.compile(r"youtube\.com/(?:channel/|c/|user/|@)[a-zA-Z0-9._-]+", re.IGNORECASE),
    "tiktok": re.compile(r"tiktok\.com/@[a-zA-Z0-9._-]+", re.IGNORECASE),
}

# Share buttons and embeds, not profiles
NON_PROFILE_SEGMENTS = {
    "sharer", "sharer.php", "share", "share.php", "intent", "plugins",
    "tr", "dialog", "home.php", "hashtag", "search", "login",
}


def extract_social_links(page_html: str) -> Dict[str, str]:
    """
    Pull the first profile link per platform out of raw HTML.

    Args:
        page_html: Raw page HTML

    Returns:
        {"facebook": "https://facebook.com/acme", ...}
    """
    social_links: Dict[str, str] = {}
    if not page_html:
        return social_links

    for platform, pattern in SOCIAL_LINK_PATTERNS.items():
        for match in pattern.finditer(page_html):
            path = match.group(0)
            segment = path.split("/", 1)[1].lower() if "/" in path else ""
            if segment in NON_PROFILE_SEGMENTS:
                continue
            social_links[platform] = "https://" + path
            break

    return social_links


def html_to_text(page_html: str) -> str:
    """Strip scripts, styles and tags down to readable text."""
    text = re.sub(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", " ", page_html, flags=re.IGNORECASE)
    text = re.sub(r"<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>", " ", text, flags=re.IGNORECASE)
    text = re.sub(r"<(h[1-6]|p|div|li|td|th|br|hr)[^>]*>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"<[^>]+>", " ", text)
    text = html_lib.unescape(text)
    return re.sub(r"\s+", " ", text).strip()


def normalize_url(url: str) -> str:
    """Add a scheme to bare domains."""
    url = url.strip()
    if not url.lower().startswith(("http://", "https://")):
        url = "https://" + url
    return url


# =============================================================================
# CLIENT
# =============================================================================


class BrightDataClient:
    """
    Async client for Bright Data.

    Usage:
        client = BrightDataClient(api_token="your_token")

        serp = await client.search('"Acme Roofing" site:facebook.com', num_results=5)
        page = await client.scrape("acmeroofing.com")
        profile = await client.get_social_profile("instagram", "https://instagram.com/acme")

        await client.close()
    """

    BASE_URL = "https://api.brightdata.com"

    # Dataset ids for social profile collectors
    SOCIAL_DATASETS = {
        "instagram": "gd_lyclm20il4r5helnj",
        "linkedin": "gd_l1viktl72bvl7bjuj0",
        "youtube": "gd_lk5ns7kz21pck8jpis",
    }

    def __init__(
        self,
        api_token: str,
        retry_config: Optional[RetryConfig] = None,
        timeout: float = 10.0,
        zone: str = "web_unlocker",
    ):
        """
        Initialize Bright Data client.

        Args:
            api_token: Bright Data API token
            retry_config: Retry configuration (optional)
            timeout: Request timeout in seconds
            zone: Unlocker zone used for page fetches
        """
        self.api_token = api_token
        self.retry_config = retry_config or RetryConfig()
        self.zone = zone

        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers={
                "Authorization": f"Bearer {api_token}",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(timeout),
        )
        self._closed = False

    async def search(
        self,
        query: str,
        num_results: int = 10,
        country: str = "us",
        language: str = "en",
    ) -> SearchResponse:
        """
        Run a Google search.

        Args:
            query: Search query
            num_results: Number of organic results to request
            country: Country code
            language: Language code

        Returns:
            SearchResponse with organic results, related searches and PAA questions
        """
        if self._closed:
            raise BrightDataError("Client has been closed")

        params = {
            "query": query,
            "country": country,
            "language": language,
            "num": str(num_results),
        }

        response = await self._request_with_retry("GET", "/serp/google/search", params=params)
        data = self._decode_json(response, default={})

        return self._parse_serp(query, data)

    async def scrape(self, url: str) -> ScrapedPage:
        """
        Fetch a page and extract title, description, text and social links.

        Args:
            url: Page URL (scheme optional)

        Returns:
            ScrapedPage
        """
        if self._closed:
            raise BrightDataError("Client has been closed")

        target = normalize_url(url)
        payload = {"url": target, "format": "raw", "zone": self.zone}

        response = await self._request_with_retry("POST", "/request", json=payload)
        page_html = response.text or ""

        title_match = re.search(r"<title[^>]*>([^<]+)</title>", page_html, re.IGNORECASE)
        desc_match = re.search(
            r"<meta[^>]*name=[\"']description[\"'][^>]*content=[\"']([^\"']+)[\"']",
            page_html,
            re.IGNORECASE,
        )

        return ScrapedPage(
            url=target,
            title=html_lib.unescape(title_match.group(1).strip()) if title_match else None,
            description=html_lib.unescape(desc_match.group(1).strip()) if desc_match else None,
            content=html_to_text(page_html),
            social_links=extract_social_links(page_html),
        )

    async def get_social_profile(self, platform: str, url: str) -> SocialProfileData:
        """
        Fetch follower/engagement metadata for a social profile.

        Args:
            platform: instagram, linkedin or youtube
            url: Profile URL

        Returns:
            SocialProfileData (empty apart from platform/url if nothing came back)
        """
        if self._closed:
            raise BrightDataError("Client has been closed")

        dataset_id = self.SOCIAL_DATASETS.get(platform)
        if not dataset_id:
            raise BrightDataError(f"No profile dataset for platform: {platform}")

        response = await self._request_with_retry(
            "POST",
            "/datasets/v3/trigger",
            params={"dataset_id": dataset_id},
            json=[{"url": url}],
        )
        data = self._decode_json(response, default=[])
        record = data[0] if isinstance(data, list) and data else {}
        if not isinstance(record, dict):
            record = {}

        if platform == "instagram":
            return SocialProfileData(
                platform=platform,
                url=url,
                username=record.get("username"),
                display_name=record.get("full_name"),
                followers=record.get("followers_count"),
                posts=record.get("media_count"),
                engagement=record.get("engagement_rate"),
                bio=record.get("biography"),
            )
        if platform == "linkedin":
            return SocialProfileData(
                platform=platform,
                url=url,
                username=record.get("universal_name"),
                display_name=record.get("name"),
                followers=record.get("follower_count"),
                bio=record.get("description"),
            )
        return SocialProfileData(
            platform=platform,
            url=url,
            username=record.get("channel_id"),
            display_name=record.get("channel_name"),
            followers=record.get("subscriber_count"),
            posts=record.get("video_count"),
            bio=record.get("description"),
        )

    def _parse_serp(self, query: str, data: Any) -> SearchResponse:
        """Convert raw SERP JSON into a SearchResponse."""
        if not isinstance(data, dict):
            data = {}

        results = []
        for index, item in enumerate(data.get("organic") or []):
            if not isinstance(item, dict):
                continue
            url = item.get("link") or item.get("url") or ""
            if not url:
                continue
            results.append(
                SearchResult(
                    url=url,
                    title=item.get("title") or "",
                    domain=extract_domain(url),
                    snippet=item.get("snippet") or item.get("description") or "",
                    position=index + 1,
                )
            )

        related = []
        for item in data.get("related_searches") or []:
            text = item.get("query") if isinstance(item, dict) else item
            if isinstance(text, str) and text.strip():
                related.append(text.strip())

        paa = []
        for item in data.get("people_also_ask") or []:
            text = item.get("question") if isinstance(item, dict) else item
            if isinstance(text, str) and text.strip():
                paa.append(text.strip())

        return SearchResponse(
            query=query,
            results=results,
            related_searches=related,
            paa_questions=paa,
        )

    @staticmethod
    def _decode_json(response: httpx.Response, default: Any) -> Any:
        """Decode a JSON body, raising BrightDataError on unblock pages and other non-JSON."""
        if not response.content:
            return default
        try:
            return response.json()
        except ValueError as e:
            raise BrightDataError(
                f"Invalid JSON response: {e}",
                status_code=response.status_code,
                response=response.text[:500],
            )

    async def _request_with_retry(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
    ) -> httpx.Response:
        """Make request with retry logic."""
        config = self.retry_config
        last_exception = None

        for attempt in range(config.max_retries + 1):
            try:
                if method == "POST":
                    response = await self._client.post(endpoint, params=params, json=json)
                elif method == "GET":
                    response = await self._client.get(endpoint, params=params)
                else:
                    raise ValueError(f"Unsupported method: {method}")

                if response.status_code >= 400:
                    error_body = response.text[:500] if response.content else ""

                    if response.status_code in config.retryable_status_codes:
                        last_exception = BrightDataError(
                            f"API error: {response.status_code}",
                            status_code=response.status_code,
                            response=error_body,
                        )
                    else:
                        raise BrightDataError(
                            f"API error: {response.status_code}",
                            status_code=response.status_code,
                            response=error_body,
                        )
                else:
                    return response

            except httpx.TimeoutException as e:
                last_exception = BrightDataError(f"Request timed out: {e}")
            except httpx.RequestError as e:
                last_exception = BrightDataError(f"Request failed: {e}")

            if attempt < config.max_retries:
                delay = min(
                    config.initial_delay * (config.exponential_base**attempt),
                    config.max_delay,
                )
                logger.warning(
                    f"Bright Data request failed, retrying in {delay:.1f}s "
                    f"(attempt {attempt + 1}/{config.max_retries + 1})"
                )
                await asyncio.sleep(delay)

        raise last_exception

    async def close(self):
        """Close the HTTP client."""
        if not self._closed:
            await self._client.aclose()
            self._closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
