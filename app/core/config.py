from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Project Settings
    PROJECT_NAME: str = "Warehouse Gateway"
    API_PREFIX: str = "/api"

    # API Settings
    API_VERSION: str = "0.1.0"
    DEBUG: bool = False
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    # AWS Settings (Redshift Data API)
    AWS_ACCESS_KEY_ID: Optional[str] = None
    AWS_SECRET_ACCESS_KEY: Optional[str] = None
    REDSHIFT_DEFAULT_REGION: str = "us-east-1"
    REDSHIFT_POLL_INTERVAL_SECONDS: float = 0.5
    REDSHIFT_MAX_POLL_ATTEMPTS: int = 30

    # Credential Presets
    DEFAULT_CREDENTIALS_ID: str = "SAMPLE-1"

    # OpenAI Settings
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_API_URL: str = "https://api.openai.com/v1/chat/completions"
    OPENAI_TIMEOUT_SECONDS: float = 60.0

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
