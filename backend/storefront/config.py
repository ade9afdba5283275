"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache), one instance per process
    - owner_email is the only admin identity; an empty value means nobody is admin

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - Schema and form-config paths default to the packaged data directory
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).parent / "data"


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://storefront:storefront@db:5432/storefront"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Store owner / project
    owner_email: str = ""
    project_id: str = "storefront"

    # Upstream services
    users_service_url: str = "https://users.heybossai.com"
    session_cookie_name: str = "session_token"
    shopping_service_url: str = "https://shopping.heybossai.com"
    platform_api_url: str = "https://api.heybossai.com/v1/run"
    platform_api_key: str = "platform-placeholder"
    external_timeout_seconds: float = 30.0

    # Anthropic
    anthropic_api_key: str = "sk-ant-placeholder"
    anthropic_max_retries: int = 3
    anthropic_timeout_seconds: int = 60
    anthropic_base_delay_ms: int = 1000
    anthropic_max_delay_ms: int = 60_000

    # Chatbot
    chatbot_model: str = "claude-haiku-4-5"
    chatbot_max_tokens: int = 300

    # Schema registry
    schemas_dir: Path = DATA_DIR / "schemas"
    form_configs_path: Path = DATA_DIR / "form_configs.json"

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
