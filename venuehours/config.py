# Engine and storage configuration using Pydantic BaseSettings (loads from .env or defaults).

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./venue_hours.sqlite"

    HOURS_CSV: str | None = None
    FEEDS_JSON: str | None = None

    # external feed "open" wins over a canonical "closed" row
    FEED_OVERRIDES_CLOSED: bool = True

    SLOT_STEP_MINUTES: int = 15
    SLOT_WINDOW_MINUTES: int = 60
    SLOT_HORIZON_HOURS: int = 12
    NEXT_OPEN_SEARCH_DAYS: int = 7

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
