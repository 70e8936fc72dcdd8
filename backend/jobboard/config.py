from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./jobboard.db"

    # Auth
    secret_key: str
    access_token_ttl_minutes: int = 60 * 24 * 7  # 7 days

    # Applications
    cover_letter_min_length: int = 10
    cover_letter_max_length: int = 2000

    # Pagination
    page_size_default: int = 10
    page_size_max: int = 50

    # App
    allowed_origins: str = ""  # comma-separated
    debug: bool = False


settings = Settings()
