import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.api import api_router
from app.api.v1.endpoints import preview
from app.core.config import Settings, settings as default_settings
from app.core.errors import GenerationFailure, ValidationError
from app.core.logging_config import setup_logging
from app.services.generator import GenerationPipeline
from app.services.llm_service import LLMProvider, LLMService, Sleep, build_provider
from app.services.preview_store import PreviewStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{app.title} starting, provider: {app.state.settings.LLM_PROVIDER}")
    yield
    await app.state.llm.close()


def create_app(
    settings: Settings = default_settings,
    provider: Optional[LLMProvider] = None,
    preview_store: Optional[PreviewStore] = None,
    sleep: Sleep = asyncio.sleep,
) -> FastAPI:
    """Composition root: builds the provider, store and pipeline and hangs them on app.state."""
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

    llm = LLMService(
        provider if provider is not None else build_provider(settings),
        default_model=settings.DEFAULT_MODEL,
        max_retries=settings.MAX_RATE_LIMIT_RETRIES,
        default_retry_after=settings.DEFAULT_RETRY_AFTER_SECONDS,
        sleep=sleep,
    )
    store = preview_store if preview_store is not None else PreviewStore(
        capacity=settings.PREVIEW_STORE_CAPACITY,
        ttl_seconds=settings.PREVIEW_TTL_SECONDS,
    )
    app.state.settings = settings
    app.state.llm = llm
    app.state.preview_store = store
    app.state.pipeline = GenerationPipeline.from_settings(settings, llm, store, sleep=sleep)

    # CORS Configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.API_PREFIX)
    app.include_router(preview.router, prefix="/preview", tags=["Preview"])

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.warning(f"Invalid request to {request.url.path}: {exc}")
        return JSONResponse(status_code=400, content={"error": "Invalid request format"})

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Malformed body for {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "Invalid request format"})

    @app.exception_handler(GenerationFailure)
    async def generation_failure_handler(request: Request, exc: GenerationFailure):
        return JSONResponse(status_code=500, content={"error": "Failed to generate website"})

    @app.get(f"{settings.API_PREFIX}/health")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
