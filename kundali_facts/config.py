from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ─── Logging ──────────────────────────
    LOG_LEVEL: str = "INFO"

    # ─── Locale ───────────────────────────
    DEFAULT_LOCALE: str = "en"

    # ─── Dasha ────────────────────────────
    DASHA_YEAR_DAYS: float = 365.2425
    DASHA_DEPTH: int = 5
    PARTITION_TOLERANCE_SECONDS: float = 1.0
    YOGINI_START_RULE: str = "classical"
    YOGINI_START_LORD: Optional[str] = None

    # ─── Fetching ─────────────────────────
    FETCH_TIMEOUT_SECONDS: float = 30.0


    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
