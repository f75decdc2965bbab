import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from app.api.deps import get_pipeline
from app.core.errors import GenerationFailure, ValidationError
from app.models.models import GenerationResult
from app.models.schemas import ChatRequest, ChatResponse, ErrorResponse, GenerateRequest, Website
from app.services.generator import GenerationPipeline

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/generate",
    response_model=GenerationResult,
    responses={500: {"model": ErrorResponse}},
)
async def generate_website(request: GenerateRequest, pipeline: GenerationPipeline = Depends(get_pipeline)):
    """Run the full pipeline for one prompt."""
    return await pipeline.generate(request.prompt, model=request.model)


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(request: ChatRequest, pipeline: GenerationPipeline = Depends(get_pipeline)):
    """Chat front door: the last message's content becomes the prompt."""
    last_message = request.messages[-1] if request.messages else None
    if last_message is None or not last_message.content:
        raise ValidationError("Last message is missing or empty")

    model = request.config.model if request.config else None
    try:
        result = await pipeline.generate(last_message.content, model=model)
    except GenerationFailure as e:
        logger.error(f"Error in AI chat: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to process request"})

    return ChatResponse(
        message=result.explanation,
        website=Website(
            requirements=result.requirements,
            setup=result.setup,
            code=result.code,
            preview=result.preview,
        ),
    )
