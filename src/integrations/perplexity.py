"""
Perplexity API Client

Online search model used for the researcher role.

Perplexity provides:
- Real-time web search answered by a language model
- Citation tracking for sources

API: https://docs.perplexity.ai/
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


class PerplexityError(Exception):
    """Custom exception for Perplexity API errors."""

    def __init__(self, message: str, status_code: int = None, response: dict = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""

    max_retries: int = 0
    initial_delay: float = 1.0
    max_delay: float = 10.0
    exponential_base: float = 2.0
    retryable_status_codes: tuple = (429, 500, 502, 503, 504)


@dataclass
class PerplexityResult:
    """Result from a Perplexity query."""

    answer: str
    citations: List[str] = field(default_factory=list)
    query: str = ""
    model: str = ""
    tokens_used: int = 0


class PerplexityClient:
    """
    Async client for Perplexity API.

    Usage:
        client = PerplexityClient(api_key="your_api_key")

        result = await client.query("What services does Acme Roofing in Denver offer?")
        # result.answer = "Acme Roofing offers..."
        # result.citations = ["https://...", ...]

        await client.close()
    """

    BASE_URL = "https://api.perplexity.ai"

    # Short aliases
    MODELS = {
        "sonar": "sonar",
        "sonar-pro": "sonar-pro",
        "reasoning": "sonar-reasoning",
        "reasoning-pro": "sonar-reasoning-pro",
    }

    def __init__(
        self,
        api_key: str,
        retry_config: Optional[RetryConfig] = None,
        default_model: str = "sonar-reasoning-pro",
        timeout: float = 60.0,
    ):
        """
        Initialize Perplexity client.

        Args:
            api_key: Perplexity API key
            retry_config: Retry configuration (optional, no retries by default)
            default_model: Default model to use
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.retry_config = retry_config or RetryConfig()
        self.default_model = self.MODELS.get(default_model, default_model)

        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(timeout),
        )
        self._closed = False

    async def query(
        self,
        question: str,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.2,
        max_tokens: int = 1024,
        return_citations: bool = True,
        search_recency_filter: Optional[str] = None,
    ) -> PerplexityResult:
        """
        Query Perplexity with a question.

        Args:
            question: The question to ask
            system_prompt: Optional system prompt for context
            model: Model to use (overrides default)
            temperature: Response temperature (0-1)
            max_tokens: Maximum tokens in response
            return_citations: Include source citations
            search_recency_filter: Filter by recency (day, week, month, year)

        Returns:
            PerplexityResult with answer and citations
        """
        if self._closed:
            raise PerplexityError("Client has been closed")

        model_name = model or self.default_model
        if model_name in self.MODELS:
            model_name = self.MODELS[model_name]

        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": question})

        payload = {
            "model": model_name,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "return_citations": return_citations,
        }

        if search_recency_filter:
            payload["search_recency_filter"] = search_recency_filter

        response = await self._request_with_retry(payload)

        choices = response.get("choices") or []
        first = choices[0] if isinstance(choices, list) and choices else {}
        message = first.get("message") if isinstance(first, dict) else None
        answer = (message.get("content") if isinstance(message, dict) else None) or ""

        citations = response.get("citations") or []
        if not isinstance(citations, list):
            citations = []

        usage = response.get("usage") or {}
        tokens_used = (usage.get("total_tokens") if isinstance(usage, dict) else None) or 0

        return PerplexityResult(
            answer=answer,
            citations=citations,
            query=question,
            model=model_name,
            tokens_used=tokens_used,
        )

    async def _request_with_retry(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Make request with retry logic."""
        config = self.retry_config
        last_exception = None

        for attempt in range(config.max_retries + 1):
            try:
                response = await self._client.post("/chat/completions", json=payload)

                if response.status_code >= 400:
                    try:
                        error_data = response.json() if response.content else {}
                    except ValueError:
                        error_data = {"raw": response.text[:500]}

                    if response.status_code in config.retryable_status_codes:
                        last_exception = PerplexityError(
                            f"API error: {response.status_code}",
                            status_code=response.status_code,
                            response=error_data,
                        )
                    else:
                        error_info = error_data.get("error") if isinstance(error_data, dict) else None
                        message = error_info.get("message") if isinstance(error_info, dict) else None
                        raise PerplexityError(
                            f"API error: {message or response.status_code}",
                            status_code=response.status_code,
                            response=error_data,
                        )
                else:
                    try:
                        data = response.json()
                    except ValueError as e:
                        raise PerplexityError(
                            f"Invalid JSON response: {e}",
                            status_code=response.status_code,
                            response={"raw": response.text[:500]},
                        )
                    if not isinstance(data, dict):
                        raise PerplexityError(
                            "Unexpected response shape",
                            status_code=response.status_code,
                            response={"raw": response.text[:500]},
                        )
                    return data

            except httpx.TimeoutException as e:
                last_exception = PerplexityError(f"Request timed out: {e}")
            except httpx.RequestError as e:
                last_exception = PerplexityError(f"Request failed: {e}")

            if attempt < config.max_retries:
                delay = min(
                    config.initial_delay * (config.exponential_base**attempt),
                    config.max_delay,
                )
                logger.warning(
                    f"Perplexity request failed, retrying in {delay:.1f}s "
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
