from typing import Literal, Optional, Union
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path

# Define the root directory of the opportunity_scanner package
SERVICE_ROOT_DIR = Path(__file__).parent.parent.resolve()
# Path to the repository root (two levels up from this settings.py)
PROJECT_ROOT_DIR = SERVICE_ROOT_DIR.parent

class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "OpportunityScanner"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3000

    # Security settings
    CORS_ORIGINS: Union[str, list[str]] = "http://localhost:3000,http://localhost:8080"
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: Union[str, list[str]] = "GET"
    CORS_ALLOW_HEADERS: Union[str, list[str]] = "*"

    # Database settings
    DATABASE_URL: str = f"sqlite+aiosqlite:///{PROJECT_ROOT_DIR / 'opportunities.db'}"

    @field_validator("DATABASE_URL", mode='before')
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        # Plain sqlite URLs need the async driver
        if isinstance(v, str) and v.startswith("sqlite:///"):
            return v.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    def model_post_init(self, __context) -> None:
        """Parse comma-separated strings into lists after model initialization."""
        if isinstance(self.CORS_ORIGINS, str):
            self.CORS_ORIGINS = [origin.strip() for origin in self.CORS_ORIGINS.split(',') if origin.strip()]

        if isinstance(self.CORS_ALLOW_METHODS, str):
            self.CORS_ALLOW_METHODS = [method.strip() for method in self.CORS_ALLOW_METHODS.split(',') if method.strip()]

        if isinstance(self.CORS_ALLOW_HEADERS, str):
            if self.CORS_ALLOW_HEADERS == "*":
                self.CORS_ALLOW_HEADERS = ["*"]
            else:
                self.CORS_ALLOW_HEADERS = [header.strip() for header in self.CORS_ALLOW_HEADERS.split(',') if header.strip()]

    # Language model settings. A missing key only fails at request time.
    GOOGLE_API_KEY: Optional[str] = None
    GEMINI_MODEL_NAME: str = "gemini-2.0-flash"

    # "simple" -> single gap probability, "extended" -> four sub-scores + overall score
    ANALYSIS_VARIANT: Literal["simple", "extended"] = "extended"
    TOPIC_COUNT: int = 3

    # Content fetcher settings
    REDDIT_BASE_URL: str = "https://www.reddit.com"
    FETCH_USER_AGENT: str = "Mozilla/5.0 (compatible; opportunity-scanner/0.1)"
    FETCH_TIMEOUT_SECONDS: Optional[float] = None  # None keeps the httpx default

    # Pipeline settings
    PIPELINE_MAX_CONCURRENCY: int = 1  # 1 == strictly sequential

    # Static assets served next to the API (skipped if the directory is missing)
    STATIC_DIR: str = str(PROJECT_ROOT_DIR / "public")

    # Logging configuration path (can be overridden by env var)
    LOGGING_CONFIG_PATH: str = str(SERVICE_ROOT_DIR / "config" / "logging_config.yaml")

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT_DIR / ".env"),  # Load variables from project root .env
        env_file_encoding='utf-8',
        extra='ignore'
    )

# Instantiate settings
settings = Settings()
