# storefront_agent/config.py
import logging
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

logger = logging.getLogger(__name__)


class Config(BaseSettings):
    """Configuration settings for the stock & token coordinator."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=True,
        env_file_encoding='utf-8',
        extra='ignore'
    )

    app_name: str = "storefront_agent"
    LOG_LEVEL: str = Field(default="INFO")

    # Commerce Layer credentials
    CL_CLIENT_ID: str = Field(default="")
    CL_CLIENT_SECRET: str = Field(default="")
    CL_DOMAIN: str = Field(default="")
    CL_AUTH_URL: str = Field(default="https://auth.commercelayer.io")
    HTTP_TIMEOUT_SECONDS: float = Field(default=10.0)

    # Coordinator settings
    COORDINATOR_NAME: str = Field(default="openai")
    DURABLE_STORE_PATH: str = Field(default=".coordinator_store")
    STOCK_CACHE_TTL_SECONDS: float = Field(default=60.0)
    STOCK_CACHE_MAX_ENTRIES: int = Field(default=1024)
    TOKEN_REFRESH_BUFFER_SECONDS: float = Field(default=300.0)


def configure_logging(config: Config) -> None:
    """Configure root logging once from the loaded settings."""
    logging.basicConfig(level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))
    logger.debug(f"Logging configured at {config.LOG_LEVEL}")
