from fastapi import APIRouter
from app.api.v1.endpoints import generation, sessions

api_router = APIRouter()

api_router.include_router(generation.router, tags=["Generation"])
api_router.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])
