from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "Site Scaffolder"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # LLM Configuration
    LLM_PROVIDER: str = "anthropic"  # anthropic | openai
    ANTHROPIC_API_KEY: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None
    DEFAULT_MODEL: str = "claude-sonnet-4-5"

    # Output caps per request kind
    INITIAL_MAX_TOKENS: int = 400
    CODE_MAX_TOKENS: int = 800
    PREVIEW_MAX_TOKENS: int = 800

    # Static spacing between code requests, keeps us under the per-minute budget
    REQUEST_DELAY_SECONDS: float = 15.0
    MAX_RATE_LIMIT_RETRIES: int = 3
    DEFAULT_RETRY_AFTER_SECONDS: float = 60.0

    # Preview store bounds
    PREVIEW_STORE_CAPACITY: int = 500
    PREVIEW_TTL_SECONDS: float = 24 * 60 * 60

    # CORS
    BACKEND_CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000"
    ]

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
