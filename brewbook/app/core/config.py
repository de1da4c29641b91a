import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field("sqlite:///./brewbook.db", alias="DATABASE_URL")
    auth_secret_key: str = Field("change-me", alias="AUTH_SECRET_KEY")
    auth_algorithm: str = Field("HS256", alias="AUTH_ALGORITHM")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    llm_base_url: str = Field("https://api.openai.com", alias="LLM_BASE_URL")
    openai_api_key: str | None = Field(None, alias="OPENAI_API_KEY")
    openai_org_id: str | None = Field(None, alias="OPENAI_ORG_ID")
    llm_chat_model: str = Field("gpt-4o", alias="LLM_CHAT_MODEL")
    llm_embedding_model: str = Field("text-embedding-3-large", alias="LLM_EMBEDDING_MODEL")
    llm_image_model: str = Field("dall-e-3", alias="LLM_IMAGE_MODEL")
    llm_timeout_seconds: float = Field(60.0, alias="LLM_TIMEOUT_SECONDS")
    scraper_user_agent: str = Field(
        "Mozilla/5.0 (compatible; BrewBookBot/1.0; +https://brewbook.app/bot)",
        alias="SCRAPER_USER_AGENT",
    )
    scraper_robots_agent: str = Field(
        "BrewBookBot/1.0 (+https://brewbook.app/bot)", alias="SCRAPER_ROBOTS_AGENT"
    )
    # Off by default: the admin tool reports the robots.txt decision but scrapes anyway.
    scraper_respect_robots: bool = Field(False, alias="SCRAPER_RESPECT_ROBOTS")
    scraper_batch_delay_seconds: float = Field(1.0, alias="SCRAPER_BATCH_DELAY_SECONDS")
    scraper_timeout_seconds: float = Field(15.0, alias="SCRAPER_TIMEOUT_SECONDS")
    drink_of_day_ttl_hours: float = Field(6.0, alias="DRINK_OF_DAY_TTL_HOURS")

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")


logger = logging.getLogger(__name__)


@lru_cache
def get_settings() -> Settings:
    try:
        settings = Settings()
    except PermissionError:
        logger.warning("Unable to read .env; continuing with environment variables only")
        settings = Settings(_env_file=None)
    return settings
