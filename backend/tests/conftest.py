import pytest

from app.core.config import Settings
from app.services.generator import GenerationPipeline
from app.services.llm_service import LLMService
from app.services.preview_store import PreviewStore

from stubs import RecordingSleep, StubProvider


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        LLM_PROVIDER="anthropic",
        DEFAULT_MODEL="test-model",
        REQUEST_DELAY_SECONDS=15,
        MAX_RATE_LIMIT_RETRIES=3,
        DEFAULT_RETRY_AFTER_SECONDS=60,
    )


@pytest.fixture
def fake_sleep():
    return RecordingSleep()


@pytest.fixture
def store():
    return PreviewStore(capacity=10, ttl_seconds=3600)


@pytest.fixture
def provider():
    return StubProvider()


@pytest.fixture
def llm(settings, provider, fake_sleep):
    return LLMService(
        provider,
        default_model=settings.DEFAULT_MODEL,
        max_retries=settings.MAX_RATE_LIMIT_RETRIES,
        default_retry_after=settings.DEFAULT_RETRY_AFTER_SECONDS,
        sleep=fake_sleep,
    )


@pytest.fixture
def pipeline(settings, llm, store, fake_sleep):
    return GenerationPipeline.from_settings(settings, llm, store, sleep=fake_sleep)
