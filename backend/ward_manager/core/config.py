from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    APP_NAME: str = "Ward Manager"
    VERSION: str = "1.0.0"

    DATABASE_URL: str = "sqlite:///./ward.db"

    # Backend selection: "sql" (SQLAlchemy over DATABASE_URL) or "rest" (hosted PostgREST API)
    WARD_BACKEND: str = "sql"
    REST_BASE_URL: Optional[str] = None
    REST_API_KEY: Optional[str] = None
    REST_TIMEOUT: int = 10

    # Discharged patients stay in the daily census for this many hours
    DISCHARGE_VISIBILITY_HOURS: int = 48
    # Only transition rows that are still Active (off = last write wins)
    DISCHARGE_REQUIRE_ACTIVE: bool = False

    WARD_TIMEZONE: str = "UTC"
    DISPLAY_DATE_FORMAT: str = "%m/%d/%Y"

    SEED_DEMO_DATA: bool = True
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
