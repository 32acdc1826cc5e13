"""
Model Invoker

Single entry point for every model call in the research pipeline:
role in, raw text out. Provider failures and timeouts surface as
ModelInvocationError; refusals and malformed output come back as text
for the caller's parser to reject. No retries here.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from src.integrations.config import ExternalAPIClients, ExternalAPIConfig
from src.integrations.perplexity import PerplexityClient, PerplexityError
from src.utils.config import Settings, get_settings

from .client import ClaudeClient
from .errors import ModelInvocationError
from .router import ModelHandle, ModelProvider, ModelRole, ModelRouter

logger = logging.getLogger(__name__)


class ModelInvoker:
    """
    Dispatches role-based prompts to the configured providers.

    Usage:
        invoker = ModelInvoker.from_settings()
        text = await invoker.invoke(ModelRole.STRATEGIST, prompt, max_tokens=2000)
    """

    def __init__(
        self,
        router: ModelRouter,
        anthropic_api_key: Optional[str] = None,
        perplexity_client: Optional[PerplexityClient] = None,
        timeout: float = 30.0,
    ):
        """
        Args:
            router: Role -> model mapping
            anthropic_api_key: Key for strategist/analyst models (None = unconfigured)
            perplexity_client: Client for the researcher model (None = unconfigured)
            timeout: Per-call timeout in seconds
        """
        self.router = router
        self.anthropic_api_key = anthropic_api_key
        self.perplexity_client = perplexity_client
        self.timeout = timeout
        self._claude_clients: Dict[str, ClaudeClient] = {}
        self._perplexity_tokens = 0
        self._perplexity_calls = 0

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        perplexity_client: Optional[PerplexityClient] = None,
    ) -> "ModelInvoker":
        """
        Build an invoker from settings.

        The researcher client follows ExternalAPIConfig, so PERPLEXITY_ENABLED=false
        leaves the researcher role unconfigured.
        """
        settings = settings or get_settings()
        if perplexity_client is None:
            perplexity_client = ExternalAPIClients(ExternalAPIConfig.from_settings(settings)).perplexity
        return cls(
            router=ModelRouter.from_settings(settings),
            anthropic_api_key=settings.ANTHROPIC_API_KEY,
            perplexity_client=perplexity_client,
            timeout=settings.MODEL_TIMEOUT,
        )

    async def invoke(
        self,
        role: ModelRole,
        prompt: str,
        system: Optional[str] = None,
        max_tokens: int = 2000,
        temperature: Optional[float] = None,
    ) -> str:
        """
        Run one prompt against the model bound to `role`.

        Args:
            role: Which role to call
            prompt: User prompt
            system: Optional system prompt
            max_tokens: Output token cap
            temperature: Overrides the role's default temperature

        Returns:
            Raw model text

        Raises:
            ModelInvocationError: provider unconfigured, failed, or timed out
        """
        handle = self.router.resolve(role)
        temp = handle.default_temperature if temperature is None else temperature

        if handle.provider == ModelProvider.ANTHROPIC:
            call = self._invoke_claude(handle, prompt, system, max_tokens, temp)
        elif handle.provider == ModelProvider.PERPLEXITY:
            call = self._invoke_perplexity(handle, prompt, system, max_tokens, temp)
        else:
            raise ModelInvocationError(
                f"Unsupported provider: {handle.provider}",
                role=handle.role.value,
                model=handle.model,
            )

        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"{handle.role.value} call timed out after {self.timeout}s ({handle.model})")
            raise ModelInvocationError(
                f"Model call timed out after {self.timeout}s",
                role=handle.role.value,
                model=handle.model,
            )

    async def _invoke_claude(
        self,
        handle: ModelHandle,
        prompt: str,
        system: Optional[str],
        max_tokens: int,
        temperature: float,
    ) -> str:
        client = self._get_claude_client(handle)
        response = await client.complete(
            prompt,
            system=system,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        if not response.success:
            raise ModelInvocationError(
                f"Claude call failed: {response.error}",
                role=handle.role.value,
                model=handle.model,
                status_code=response.status_code,
            )
        return response.content

    async def _invoke_perplexity(
        self,
        handle: ModelHandle,
        prompt: str,
        system: Optional[str],
        max_tokens: int,
        temperature: float,
    ) -> str:
        if self.perplexity_client is None:
            raise ModelInvocationError(
                "Perplexity is not configured",
                role=handle.role.value,
                model=handle.model,
            )
        try:
            result = await self.perplexity_client.query(
                prompt,
                system_prompt=system,
                model=handle.model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except PerplexityError as e:
            logger.error(f"Perplexity error: {e}")
            raise ModelInvocationError(
                f"Perplexity call failed: {e}",
                role=handle.role.value,
                model=handle.model,
                status_code=e.status_code,
            ) from e

        self._perplexity_calls += 1
        self._perplexity_tokens += result.tokens_used
        return result.answer

    def _get_claude_client(self, handle: ModelHandle) -> ClaudeClient:
        if not self.anthropic_api_key:
            raise ModelInvocationError(
                "Anthropic is not configured",
                role=handle.role.value,
                model=handle.model,
            )
        if handle.model not in self._claude_clients:
            self._claude_clients[handle.model] = ClaudeClient(
                api_key=self.anthropic_api_key,
                model=handle.model,
                timeout=self.timeout,
            )
        return self._claude_clients[handle.model]

    def get_usage_summary(self) -> Dict[str, Any]:
        """Aggregate usage across providers."""
        claude_calls = sum(c.call_count for c in self._claude_clients.values())
        claude_tokens = sum(c.total_usage.total_tokens for c in self._claude_clients.values())
        claude_cost = sum(c.get_total_cost() for c in self._claude_clients.values())
        return {
            "claude_calls": claude_calls,
            "claude_tokens": claude_tokens,
            "claude_estimated_cost": claude_cost,
            "perplexity_calls": self._perplexity_calls,
            "perplexity_tokens": self._perplexity_tokens,
        }

    async def close(self):
        for client in self._claude_clients.values():
            await client.close()
        self._claude_clients = {}
        if self.perplexity_client is not None:
            await self.perplexity_client.close()
