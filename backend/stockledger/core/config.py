from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Stock Ledger"
    environment: str = "development"
    api_v1_prefix: str = "/api/v1"

    database_url: str = "postgresql+psycopg2://stockledger:stockledger@db:5432/stockledger"
    db_connect_retries: int = 20
    cors_origins: str = "http://localhost:3000"

    log_level: str = "INFO"
    log_json: bool = True

    default_page_size: int = 10
    max_page_size: int = 100

    seed_demo_data: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
