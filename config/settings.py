from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# Load .env file if it exists, for local development
# In production, environment variables should be set directly.
if os.path.exists(".env"):
    from dotenv import load_dotenv
    load_dotenv()

class AppSettings(BaseSettings):
    database_url: str = "sqlite:///./suitability.db"
    database_echo: bool = False
    redis_url: str = "redis://localhost:6379/0"
    draft_ttl_seconds: int = 7 * 24 * 60 * 60
    question_count: int = 40
    top_n: int = 3
    catalog_path: str = "assets/questions.yml"
    seed_catalog_on_startup: bool = True
    log_level: str = "INFO"
    service_name: str = "business-suitability"
    cors_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(env_prefix='SUITABILITY_')

# Instantiate settings
settings = AppSettings()


def get_settings() -> AppSettings:
    return settings
