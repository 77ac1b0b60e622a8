from pydantic_settings import BaseSettings
from functools import lru_cache
import os


class Settings(BaseSettings):
    app_name: str = "Resume Builder API"
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    log_level: str = "INFO"

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # AI/LLM Configuration
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    grading_temperature: float = 0.2  # Low randomness for repeatable scoring
    grading_timeout_seconds: float = 30.0

    # Storage - "memory" or "sql"
    storage_backend: str = "memory"
    # Supports both SQLite (local) and PostgreSQL (production)
    database_url: str = "sqlite+aiosqlite:///./resume_builder.db"

    # Student used when a request carries no studentId
    default_student_id: str = "mockUserId"
    seed_demo_profile: bool = True

    class Config:
        env_file = ".env"
        extra = "ignore"
        # Make field names case-insensitive for environment variables
        case_sensitive = False

    def get_cors_origins(self) -> list:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def has_gemini_credential(self) -> bool:
        return bool(self.gemini_api_key.strip())


@lru_cache()
def get_settings() -> Settings:
    return Settings()
