"""
Sequential generation pipeline.

One run issues, in order: an architecture overview, four code requests
(frontend, backend, database, api) spaced by a fixed delay, an optional
contracts request for web3 sites, and a preview request whose failure is
replaced by a fallback document. Any other failure aborts the run.
Runs are not cancellable: if the caller goes away mid-run, the preview
store write may or may not have happened yet.
"""

import asyncio
import logging
from typing import Optional

from app.core.config import Settings
from app.core.errors import GenerationFailure, PreviewGenerationFailure
from app.core.ids import new_token
from app.core.prompts import (
    ARCHITECTURE_PROMPT, CODE_PROMPT, CODE_USER_PROMPT, CONTRACTS_PROMPT, CONTRACTS_USER_PROMPT,
    FALLBACK_PREVIEW_HTML, PREVIEW_PROMPT, PREVIEW_USER_PROMPT,
)
from app.models.models import CodeBundle, GenerationResult, PreviewRef, Requirements, WebsiteType
from app.services.analyzer import analyze_requirements
from app.services.llm_service import LLMService, Sleep
from app.services.preview_store import PreviewStore
from app.services.setup_guide import build_setup

logger = logging.getLogger(__name__)

CODE_COMPONENTS = ("frontend", "backend", "database", "api")

ARCHITECTURE_TEMPERATURE = 0.7
CODE_TEMPERATURE = 0.5
PREVIEW_TEMPERATURE = 0.3


def preview_url(preview_id: str) -> str:
    return f"/preview/{preview_id}"


class GenerationPipeline:
    def __init__(
        self,
        llm: LLMService,
        store: PreviewStore,
        initial_max_tokens: int = 400,
        code_max_tokens: int = 800,
        preview_max_tokens: int = 800,
        request_delay: float = 15.0,
        sleep: Sleep = asyncio.sleep,
    ):
        self.llm = llm
        self.store = store
        self.initial_max_tokens = initial_max_tokens
        self.code_max_tokens = code_max_tokens
        self.preview_max_tokens = preview_max_tokens
        self.request_delay = request_delay
        self.sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, llm: LLMService, store: PreviewStore,
                      sleep: Sleep = asyncio.sleep) -> "GenerationPipeline":
        return cls(
            llm,
            store,
            initial_max_tokens=settings.INITIAL_MAX_TOKENS,
            code_max_tokens=settings.CODE_MAX_TOKENS,
            preview_max_tokens=settings.PREVIEW_MAX_TOKENS,
            request_delay=settings.REQUEST_DELAY_SECONDS,
            sleep=sleep,
        )

    async def generate(self, prompt: str, model: Optional[str] = None) -> GenerationResult:
        try:
            return await self._run(prompt, model)
        except Exception as e:
            logger.error(
                f"Error in AI generation: {e} (prompt: {prompt[:100]!r})",
                exc_info=True,
            )
            raise GenerationFailure("Failed to generate website") from e

    async def _run(self, prompt: str, model: Optional[str]) -> GenerationResult:
        requirements = analyze_requirements(prompt)
        logger.info(
            f"Generating {requirements.type.value} site, features: {', '.join(requirements.features) or 'none'}"
        )

        explanation = await self.llm.chat_completion(
            system=self._architecture_prompt(requirements),
            messages=[{"role": "user", "content": prompt}],
            max_tokens=self.initial_max_tokens,
            temperature=ARCHITECTURE_TEMPERATURE,
            model=model,
        )

        # Sequential on purpose: the fixed spacing keeps us under the per-minute request budget
        code = {}
        for component in CODE_COMPONENTS:
            code[component] = await self.llm.chat_completion(
                system=CODE_PROMPT.replace("{component}", component)
                                  .replace("{site_type}", requirements.type.value),
                messages=[{"role": "user", "content": CODE_USER_PROMPT.replace("{component}", component)
                                                                      .replace("{prompt}", prompt)}],
                max_tokens=self.code_max_tokens,
                temperature=CODE_TEMPERATURE,
                model=model,
            )
            logger.debug(f"{component} code generated, sleeping {self.request_delay}s")
            await self.sleep(self.request_delay)

        contracts = None
        if requirements.type == WebsiteType.WEB3:
            contracts = await self.llm.chat_completion(
                system=CONTRACTS_PROMPT,
                messages=[{"role": "user", "content": CONTRACTS_USER_PROMPT.replace("{prompt}", prompt)}],
                max_tokens=self.code_max_tokens,
                temperature=CODE_TEMPERATURE,
                model=model,
            )

        preview_html = await self._preview_html(prompt, model)
        preview_id = new_token()
        self.store.put(preview_id, preview_html)

        return GenerationResult(
            explanation=explanation,
            requirements=requirements,
            setup=build_setup(requirements),
            code=CodeBundle(contracts=contracts, **code),
            preview=PreviewRef(id=preview_id, url=preview_url(preview_id)),
        )

    def _architecture_prompt(self, requirements: Requirements) -> str:
        return ARCHITECTURE_PROMPT.replace("{site_type}", requirements.type.value)\
                                  .replace("{features}", ", ".join(requirements.features))\
                                  .replace("{integrations}", ", ".join(i.name for i in requirements.integrations))

    async def _preview_html(self, prompt: str, model: Optional[str]) -> str:
        try:
            return await self._request_preview(prompt, model)
        except Exception as e:
            logger.warning(f"Failed to generate preview HTML, using fallback: {e}", exc_info=True)
            return FALLBACK_PREVIEW_HTML

    async def _request_preview(self, prompt: str, model: Optional[str]) -> str:
        try:
            html = await self.llm.chat_completion(
                system=PREVIEW_PROMPT,
                messages=[{"role": "user", "content": PREVIEW_USER_PROMPT.replace("{prompt}", prompt)}],
                max_tokens=self.preview_max_tokens,
                temperature=PREVIEW_TEMPERATURE,
                model=model,
            )
        except Exception as e:
            raise PreviewGenerationFailure(str(e)) from e
        if not html.strip():
            raise PreviewGenerationFailure("Provider returned an empty preview")
        return html
