"""
Tests for role routing and the model invoker.
"""

import asyncio

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock

from src.integrations.perplexity import PerplexityClient, PerplexityError, PerplexityResult
from src.llm.client import CompletionResponse, TokenUsage
from src.llm.errors import ModelInvocationError
from src.llm.invoker import ModelInvoker
from src.llm.router import ModelHandle, ModelProvider, ModelRole, ModelRouter


def perplexity_mock(**kwargs) -> MagicMock:
    client = MagicMock()
    client.query = AsyncMock(**kwargs)
    client.close = AsyncMock()
    return client


class TestModelRouter:

    def test_from_settings(self, settings):
        router = ModelRouter.from_settings(settings)
        assert router.resolve(ModelRole.STRATEGIST).provider == ModelProvider.ANTHROPIC
        assert router.resolve(ModelRole.ANALYST).default_temperature == 0.4
        assert router.resolve("researcher").model == settings.RESEARCHER_MODEL
        assert router.describe()["researcher"] == f"perplexity/{settings.RESEARCHER_MODEL}"

    def test_missing_role_rejected(self):
        handle = ModelHandle(role=ModelRole.STRATEGIST, provider=ModelProvider.ANTHROPIC, model="m")
        with pytest.raises(ValueError):
            ModelRouter({ModelRole.STRATEGIST: handle})


class TestModelInvoker:

    @pytest.mark.asyncio
    async def test_unconfigured_anthropic(self, settings):
        invoker = ModelInvoker.from_settings(settings)
        with pytest.raises(ModelInvocationError) as exc_info:
            await invoker.invoke(ModelRole.STRATEGIST, "plan")
        assert exc_info.value.role == "strategist"

    @pytest.mark.asyncio
    async def test_unconfigured_perplexity(self, settings):
        invoker = ModelInvoker.from_settings(settings)
        with pytest.raises(ModelInvocationError):
            await invoker.invoke(ModelRole.RESEARCHER, "research")

    @pytest.mark.asyncio
    async def test_perplexity_success(self, settings):
        client = perplexity_mock(return_value=PerplexityResult(answer='{"a": 1}', tokens_used=120))
        invoker = ModelInvoker(ModelRouter.from_settings(settings), perplexity_client=client)

        text = await invoker.invoke(ModelRole.RESEARCHER, "research", max_tokens=4000)

        assert text == '{"a": 1}'
        kwargs = client.query.call_args.kwargs
        assert kwargs["model"] == settings.RESEARCHER_MODEL
        assert kwargs["max_tokens"] == 4000
        assert kwargs["temperature"] == 0.5
        assert invoker.get_usage_summary()["perplexity_tokens"] == 120

    @pytest.mark.asyncio
    async def test_perplexity_error_wrapped(self, settings):
        client = perplexity_mock(side_effect=PerplexityError("API error: 429", status_code=429))
        invoker = ModelInvoker(ModelRouter.from_settings(settings), perplexity_client=client)

        with pytest.raises(ModelInvocationError) as exc_info:
            await invoker.invoke(ModelRole.RESEARCHER, "research")
        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_timeout(self, settings):
        async def slow(*args, **kwargs):
            await asyncio.sleep(1)
            return PerplexityResult(answer="late")

        client = perplexity_mock(side_effect=slow)
        invoker = ModelInvoker(ModelRouter.from_settings(settings), perplexity_client=client, timeout=0.01)

        with pytest.raises(ModelInvocationError) as exc_info:
            await invoker.invoke(ModelRole.RESEARCHER, "research")
        assert "timed out" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_claude_failure_raises(self, settings):
        invoker = ModelInvoker(ModelRouter.from_settings(settings), anthropic_api_key="test-key")
        claude = MagicMock()
        claude.complete = AsyncMock(return_value=CompletionResponse(
            content="",
            usage=TokenUsage(),
            model=settings.STRATEGIST_MODEL,
            stop_reason="error",
            success=False,
            error="overloaded",
            status_code=529,
        ))
        invoker._claude_clients[settings.STRATEGIST_MODEL] = claude

        with pytest.raises(ModelInvocationError) as exc_info:
            await invoker.invoke(ModelRole.STRATEGIST, "plan", temperature=0.9)
        assert exc_info.value.status_code == 529
        assert claude.complete.call_args.kwargs["temperature"] == 0.9

    @pytest.mark.asyncio
    async def test_claude_success(self, settings):
        invoker = ModelInvoker(ModelRouter.from_settings(settings), anthropic_api_key="test-key")
        claude = MagicMock()
        claude.complete = AsyncMock(return_value=CompletionResponse(
            content='{"searchQueries": ["q"]}',
            usage=TokenUsage(input_tokens=10, output_tokens=5),
            model=settings.ANALYST_MODEL,
            stop_reason="end_turn",
        ))
        invoker._claude_clients[settings.ANALYST_MODEL] = claude

        assert await invoker.invoke(ModelRole.ANALYST, "structure") == '{"searchQueries": ["q"]}'
        assert claude.complete.call_args.kwargs["temperature"] == 0.4

    @pytest.mark.asyncio
    async def test_close(self, settings):
        client = perplexity_mock()
        invoker = ModelInvoker(ModelRouter.from_settings(settings), perplexity_client=client)
        await invoker.close()
        client.close.assert_awaited_once()


def perplexity_on(handler) -> PerplexityClient:
    client = PerplexityClient(api_key="test-key")
    client._client = httpx.AsyncClient(
        base_url=client.BASE_URL,
        transport=httpx.MockTransport(handler),
    )
    return client


class TestPerplexityResponses:

    @pytest.mark.asyncio
    async def test_html_body_is_invocation_error(self, settings):
        client = perplexity_on(lambda request: httpx.Response(200, text="<html>Bad gateway</html>"))
        invoker = ModelInvoker(ModelRouter.from_settings(settings), perplexity_client=client)

        with pytest.raises(ModelInvocationError) as exc_info:
            await invoker.invoke(ModelRole.RESEARCHER, "research")

        assert exc_info.value.role == "researcher"
        assert exc_info.value.status_code == 200
        await invoker.close()

    @pytest.mark.asyncio
    async def test_non_object_body_is_provider_error(self):
        client = perplexity_on(lambda request: httpx.Response(200, json=["unexpected"]))

        with pytest.raises(PerplexityError):
            await client.query("research")
        await client.close()

    @pytest.mark.asyncio
    async def test_odd_choices_give_empty_answer(self):
        client = perplexity_on(lambda request: httpx.Response(200, json={
            "choices": ["not an object"],
            "citations": "https://acmeroofing.com",
            "usage": None,
        }))

        result = await client.query("research")

        assert result.answer == ""
        assert result.citations == []
        assert result.tokens_used == 0
        await client.close()


class TestPerplexityEnabledFlag:

    @pytest.mark.asyncio
    async def test_disabled_flag_leaves_researcher_unconfigured(self, settings, monkeypatch):
        monkeypatch.setenv("PERPLEXITY_ENABLED", "false")
        settings.PERPLEXITY_API_KEY = "test-key"

        invoker = ModelInvoker.from_settings(settings)

        assert invoker.perplexity_client is None
        with pytest.raises(ModelInvocationError):
            await invoker.invoke(ModelRole.RESEARCHER, "research")

    @pytest.mark.asyncio
    async def test_enabled_flag_builds_client(self, settings, monkeypatch):
        monkeypatch.delenv("PERPLEXITY_ENABLED", raising=False)
        settings.PERPLEXITY_API_KEY = "test-key"

        invoker = ModelInvoker.from_settings(settings)

        assert isinstance(invoker.perplexity_client, PerplexityClient)
        assert invoker.perplexity_client.default_model == settings.RESEARCHER_MODEL
        await invoker.close()
