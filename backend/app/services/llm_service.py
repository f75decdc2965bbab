import asyncio
import logging
import math
from typing import Awaitable, Callable, Dict, List, Optional, Protocol

import anthropic
import openai
from anthropic import AsyncAnthropic
from openai import AsyncOpenAI
from pydantic import BaseModel

from app.core.config import Settings
from app.core.errors import ProviderError, ProviderRateLimited

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class ContentBlock(BaseModel):
    type: str
    text: Optional[str] = None


def extract_text(blocks: List[ContentBlock]) -> str:
    """Text of the first `text` block, or '' when the reply carries none."""
    for block in blocks:
        if block.type == "text":
            return block.text or ""
    return ""


class LLMProvider(Protocol):
    async def create_message(
        self,
        *,
        model: str,
        max_tokens: int,
        temperature: float,
        system: str,
        messages: List[Dict[str, str]],
    ) -> List[ContentBlock]:
        ...


class AnthropicProvider:
    """Messages API. SDK-level retries are off; LLMService owns the retry policy."""

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key
        self._client: Optional[AsyncAnthropic] = None

    @property
    def client(self) -> AsyncAnthropic:
        if self._client is None:
            self._client = AsyncAnthropic(api_key=self.api_key, max_retries=0)
        return self._client

    async def create_message(self, *, model, max_tokens, temperature, system, messages):
        try:
            response = await self.client.messages.create(
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
                system=system,
                messages=messages,
            )
        except anthropic.RateLimitError as e:
            raise ProviderRateLimited(str(e), retry_after=e.response.headers.get("retry-after")) from e
        except anthropic.APIError as e:
            raise ProviderError(str(e)) from e
        return [ContentBlock(type=block.type, text=getattr(block, "text", None)) for block in response.content]

    async def close(self):
        if self._client is not None:
            await self._client.close()


class OpenAICompatibleProvider:
    """Chat Completions against OpenAI or any compatible base URL."""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        self.api_key = api_key
        self.base_url = base_url
        self._client: Optional[AsyncOpenAI] = None

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url or None, max_retries=0)
        return self._client

    async def create_message(self, *, model, max_tokens, temperature, system, messages):
        # system instruction goes first, as its own message
        chat_messages = [{"role": "system", "content": system}]
        for m in messages:
            if m.get("content") and m.get("role"):
                chat_messages.append({"role": m["role"], "content": str(m["content"]).strip()})

        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=chat_messages,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except openai.RateLimitError as e:
            raise ProviderRateLimited(str(e), retry_after=e.response.headers.get("retry-after")) from e
        except openai.APIError as e:
            raise ProviderError(str(e)) from e

        if not response.choices:
            return []
        return [ContentBlock(type="text", text=response.choices[0].message.content)]

    async def close(self):
        if self._client is not None:
            await self._client.close()


def build_provider(settings: Settings) -> LLMProvider:
    provider = settings.LLM_PROVIDER.lower()
    if provider == "anthropic":
        return AnthropicProvider(api_key=settings.ANTHROPIC_API_KEY)
    if provider == "openai":
        return OpenAICompatibleProvider(api_key=settings.OPENAI_API_KEY, base_url=settings.OPENAI_BASE_URL)
    raise ValueError(f"Unknown LLM_PROVIDER: {settings.LLM_PROVIDER}")


class LLMService:
    def __init__(
        self,
        provider: LLMProvider,
        default_model: str,
        max_retries: int = 3,
        default_retry_after: float = 60.0,
        sleep: Sleep = asyncio.sleep,
    ):
        self.provider = provider
        self.default_model = default_model
        self.max_retries = max_retries
        self.default_retry_after = default_retry_after
        self.sleep = sleep

    def retry_delay(self, retry_after: Optional[str]) -> float:
        if retry_after is None:
            return self.default_retry_after
        try:
            wait = float(retry_after)
        except (TypeError, ValueError):
            return self.default_retry_after
        # inf, nan and negative hints are not usable waits
        if not math.isfinite(wait) or wait < 0:
            return self.default_retry_after
        return wait

    async def chat_completion(
        self,
        system: str,
        messages: List[Dict[str, str]],
        max_tokens: int,
        temperature: float = 0.7,
        model: str = None,
    ) -> str:
        """Single completion. Rate limits are retried with the provider's wait hint."""
        if not model:
            model = self.default_model

        for attempt in range(self.max_retries + 1):  # +1 for the initial attempt
            try:
                blocks = await self.provider.create_message(
                    model=model,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    system=system,
                    messages=messages,
                )
                return extract_text(blocks)
            except ProviderRateLimited as e:
                if attempt >= self.max_retries:
                    logger.error(f"Rate limit retries exhausted after {attempt + 1} attempts")
                    raise
                wait = self.retry_delay(e.retry_after)
                logger.warning(
                    f"Rate limited by provider, retrying in {wait:.0f}s "
                    f"(retry {attempt + 1}/{self.max_retries})"
                )
                await self.sleep(wait)

    async def close(self):
        close = getattr(self.provider, "close", None)
        if close is not None:
            await close()
