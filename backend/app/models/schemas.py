from pydantic import BaseModel
from typing import Optional
from app.models.models import CamelModel, CodeBundle, PreviewRef, Requirements, SetupBundle

class GenerateRequest(BaseModel):
    prompt: str
    model: Optional[str] = None

class ChatMessage(BaseModel):
    role: str = "user"
    content: Optional[str] = None

class ChatConfig(BaseModel):
    model: Optional[str] = None

class ChatRequest(BaseModel):
    messages: list[ChatMessage] = []
    config: Optional[ChatConfig] = None

class Website(CamelModel):
    requirements: Requirements
    setup: SetupBundle
    code: CodeBundle
    preview: PreviewRef

class ChatResponse(CamelModel):
    message: str
    website: Website

class SessionResponse(BaseModel):
    id: str

class ErrorResponse(BaseModel):
    error: str
