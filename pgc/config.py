"""Application configuration using pydantic-settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    mongodb_url: str = "mongodb://localhost:27017"
    database_name: str = "pgc"
    server_selection_timeout_ms: int = 5000
    connect_timeout_ms: int = 10000

    # Index initialization fan-out width (1 = sequential)
    index_concurrency: int = 4

    # Sign-up collection and its unique fields
    user_collection: str = "User"
    user_unique_fields: list[str] = ["email"]

    model_config = {"env_prefix": "PGC_"}

    @field_validator("index_concurrency")
    @classmethod
    def check_index_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("index_concurrency must be at least 1")
        return v


settings = Settings()
