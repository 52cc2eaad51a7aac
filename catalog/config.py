from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from the environment or a .env file."""

    # App
    APP_NAME: str = "Product Management App"
    APP_VERSION: str = "1.0.0"
    ENV: str = "production"

    # Database
    DATABASE_URL: str = "sqlite:///./database.sqlite"
    SEED_SAMPLE_DATA: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 3000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_development(self) -> bool:
        return self.ENV.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
