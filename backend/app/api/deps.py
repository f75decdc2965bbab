from fastapi import Request
from app.services.generator import GenerationPipeline
from app.services.preview_store import PreviewStore


def get_pipeline(request: Request) -> GenerationPipeline:
    return request.app.state.pipeline


def get_preview_store(request: Request) -> PreviewStore:
    return request.app.state.preview_store
