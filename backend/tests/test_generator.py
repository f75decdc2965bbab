"""
Tests for GenerationPipeline: request order, spacing, retries, the
non-fatal preview step and the web3 contracts slot.
"""

import pytest

from app.core.errors import GenerationFailure, ProviderError, ProviderRateLimited
from app.core.prompts import FALLBACK_PREVIEW_HTML
from app.services.generator import GenerationPipeline
from app.services.llm_service import LLMService

from stubs import (
    RecordingSleep, StubProvider, any_call, is_contracts, is_preview, rate_limited_times, user_content,
)

WEB3_PROMPT = "Build me a web3 marketplace with wallet login and token payments"
PLAIN_PROMPT = "Build me a marketplace with login and payments"


def _pipeline(provider, store, sleep=None):
    sleep = sleep or RecordingSleep()
    llm = LLMService(provider, default_model="m", sleep=sleep)
    return GenerationPipeline(llm, store, request_delay=15, sleep=sleep), sleep


class TestGenerate:

    @pytest.mark.asyncio
    async def test_request_order_and_spacing(self, pipeline, provider, fake_sleep):
        await pipeline.generate(PLAIN_PROMPT)

        contents = [user_content(c) for c in provider.calls]
        assert contents == [
            PLAIN_PROMPT,
            f"Generate frontend code for: {PLAIN_PROMPT}",
            f"Generate backend code for: {PLAIN_PROMPT}",
            f"Generate database code for: {PLAIN_PROMPT}",
            f"Generate api code for: {PLAIN_PROMPT}",
            f"Generate preview HTML for: {PLAIN_PROMPT}",
        ]
        # one fixed delay after each code request, nothing else
        assert fake_sleep.delays == [15, 15, 15, 15]

    @pytest.mark.asyncio
    async def test_caps_and_temperatures(self, pipeline, provider):
        await pipeline.generate(PLAIN_PROMPT)

        caps = [(c["max_tokens"], c["temperature"]) for c in provider.calls]
        assert caps[0] == (400, 0.7)
        assert caps[1:5] == [(800, 0.5)] * 4
        assert caps[5] == (800, 0.3)

    @pytest.mark.asyncio
    async def test_architecture_prompt_mentions_requirements(self, pipeline, provider):
        await pipeline.generate("A blog with newsletter and search")

        system = provider.calls[0]["system"]
        assert "complete blog website" in system
        assert "Features: search, email" in system
        assert "Integrations: SendGrid" in system

    @pytest.mark.asyncio
    async def test_result_shape(self, pipeline, store):
        result = await pipeline.generate(PLAIN_PROMPT)

        assert result.explanation.startswith("reply to: ")
        assert result.requirements.type == "marketplace"
        assert result.code.frontend and result.code.backend and result.code.database and result.code.api
        assert result.code.contracts is None
        assert result.preview.url == f"/preview/{result.preview.id}"
        assert store.get(result.preview.id) is not None
        assert result.setup.setup_instructions[-1].endswith("`npm run dev`")

    @pytest.mark.asyncio
    async def test_model_override(self, pipeline, provider):
        await pipeline.generate(PLAIN_PROMPT, model="custom-model")
        assert {c["model"] for c in provider.calls} == {"custom-model"}

    @pytest.mark.asyncio
    async def test_each_run_gets_fresh_preview_id(self, pipeline, store):
        first = await pipeline.generate(PLAIN_PROMPT)
        second = await pipeline.generate(PLAIN_PROMPT)
        assert first.preview.id != second.preview.id
        assert len(store) == 2


class TestWeb3Contracts:

    @pytest.mark.asyncio
    async def test_web3_prompt_generates_contracts(self, store):
        provider = StubProvider([(is_contracts, "contract Market {}")])
        pipeline, sleep = _pipeline(provider, store)

        result = await pipeline.generate(WEB3_PROMPT)

        assert result.requirements.type == "web3"
        assert "web3-auth" in result.requirements.features
        assert "crypto-payments" in result.requirements.features
        assert result.requirements.auth.type == "web3"
        assert result.requirements.payments.provider == "web3"
        assert result.code.contracts == "contract Market {}"
        # contracts sit between the code requests and the preview
        assert is_contracts(provider.calls[5])
        assert is_preview(provider.calls[6])
        assert len(sleep.delays) == 4

    @pytest.mark.asyncio
    async def test_without_web3_words_no_contracts(self, pipeline, provider):
        result = await pipeline.generate(PLAIN_PROMPT)
        assert result.code.contracts is None
        assert not any(is_contracts(c) for c in provider.calls)


class TestPreviewStep:

    @pytest.mark.asyncio
    async def test_preview_failure_uses_fallback(self, store):
        provider = StubProvider([(is_preview, ProviderError("preview exploded"))])
        pipeline, _ = _pipeline(provider, store)

        result = await pipeline.generate(PLAIN_PROMPT)

        assert store.get(result.preview.id) == FALLBACK_PREVIEW_HTML
        assert result.code.api

    @pytest.mark.asyncio
    async def test_preview_rate_limit_exhaustion_uses_fallback(self, store):
        provider = StubProvider([(is_preview, ProviderRateLimited(retry_after="1"))])
        pipeline, sleep = _pipeline(provider, store)

        result = await pipeline.generate(PLAIN_PROMPT)

        assert store.get(result.preview.id) == FALLBACK_PREVIEW_HTML
        assert sum(1 for c in provider.calls if is_preview(c)) == 4
        assert sleep.delays == [15, 15, 15, 15, 1.0, 1.0, 1.0]

    @pytest.mark.asyncio
    async def test_empty_preview_uses_fallback(self, store):
        provider = StubProvider([(is_preview, "   ")])
        pipeline, _ = _pipeline(provider, store)

        result = await pipeline.generate(PLAIN_PROMPT)
        assert store.get(result.preview.id) == FALLBACK_PREVIEW_HTML

    @pytest.mark.asyncio
    async def test_generated_preview_is_stored(self, store):
        provider = StubProvider([(is_preview, "<html><body>Shop</body></html>")])
        pipeline, _ = _pipeline(provider, store)

        result = await pipeline.generate(PLAIN_PROMPT)
        assert store.get(result.preview.id) == "<html><body>Shop</body></html>"


class TestFailures:

    @pytest.mark.asyncio
    async def test_rate_limit_then_success(self, store):
        first_call = lambda kwargs: user_content(kwargs) == PLAIN_PROMPT
        provider = StubProvider([(first_call, rate_limited_times(2, retry_after="5"))])
        pipeline, sleep = _pipeline(provider, store)

        result = await pipeline.generate(PLAIN_PROMPT)

        assert result.explanation == "ok"
        assert sum(1 for c in provider.calls if first_call(c)) == 3
        assert len(provider.calls) == 8
        assert sleep.delays[:2] == [5.0, 5.0]

    @pytest.mark.asyncio
    async def test_always_rate_limited_aborts_after_four_calls(self, store):
        provider = StubProvider([(any_call, ProviderRateLimited())])
        pipeline, sleep = _pipeline(provider, store)

        with pytest.raises(GenerationFailure):
            await pipeline.generate(PLAIN_PROMPT)
        assert len(provider.calls) == 4
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_code_step_error_aborts_without_partial_result(self, store):
        backend = lambda kwargs: user_content(kwargs).startswith("Generate backend code")
        provider = StubProvider([(backend, ProviderError("bad request"))])
        pipeline, _ = _pipeline(provider, store)

        with pytest.raises(GenerationFailure) as exc_info:
            await pipeline.generate(PLAIN_PROMPT)

        assert isinstance(exc_info.value.__cause__, ProviderError)
        # nothing after the failing step was attempted
        assert len(provider.calls) == 3
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_contracts_error_is_fatal(self, store):
        provider = StubProvider([(is_contracts, ProviderError("solc says no"))])
        pipeline, _ = _pipeline(provider, store)

        with pytest.raises(GenerationFailure):
            await pipeline.generate(WEB3_PROMPT)
