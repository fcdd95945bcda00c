"""Environment-driven configuration with Pydantic v2."""

from typing import List, Literal, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings driven entirely by environment variables."""

    # Server Configuration
    host: str = Field(default="127.0.0.1", env="HOST")
    port: int = Field(default=3010, env="PORT", ge=1024, le=65535)
    debug: bool = Field(default=False, env="DEBUG")
    cors_origins: List[str] = Field(default=["http://localhost:5173"], env="CORS_ORIGINS")

    # Content backend (idea / draft / image suggestion endpoints)
    content_api_url: str = Field(default="http://localhost:5000/api", env="CONTENT_API_URL")
    content_api_token: Optional[str] = Field(default=None, env="CONTENT_API_TOKEN")
    api_timeout: float = Field(default=15.0, env="API_TIMEOUT", ge=1.0, le=300.0)
    draft_timeout: float = Field(default=30.0, env="DRAFT_TIMEOUT", ge=1.0, le=300.0)

    # Execution Engine
    cycle_policy: Literal["lenient", "strict"] = Field(default="lenient", env="CYCLE_POLICY")

    # Logging
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    log_format: Literal["json", "console"] = Field(default="json", env="LOG_FORMAT")
    log_file: Optional[str] = Field(default=None, env="LOG_FILE")

    @field_validator("content_api_url")
    @classmethod
    def strip_trailing_slash(cls, v):
        """Normalize the base URL so paths can be appended directly."""
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "env_parse_none_str": "none",
    }
