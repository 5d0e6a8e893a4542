from pathlib import Path
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "Web Sustainability Checker"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = True

    # ── Logging ─────────────────────────────────
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    # ── PageSpeed Insights ──────────────────────
    # Without a key the report falls back to simulated PageSpeed data
    GOOGLE_PAGESPEED_API_KEY: Optional[str] = None
    PAGESPEED_API_URL: str = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
    PAGESPEED_STRATEGY: Literal["mobile", "desktop"] = "mobile"
    PAGESPEED_LOCALE: str = "en"
    PAGESPEED_TIMEOUT: float = 45.0

    # ── Direct page fetch ───────────────────────
    PAGE_FETCH_TIMEOUT: float = 10.0
    USER_AGENT: str = "Mozilla/5.0 (compatible; WebSustainabilityChecker/1.0)"

    # Static allow-list, not a lookup against the Green Web Foundation dataset
    GREEN_HOSTS: List[str] = [
        "greengeeks.com",
        "hostgator.com",
        "dreamhost.com",
        "a2hosting.com",
        "siteground.com",
        "netlify.com",
    ]

    # ── Emissions ───────────────────────────────
    EMISSIONS_RESULTS: Literal["segment", "total"] = "segment"

    # ── Report ──────────────────────────────────
    REPORT_TIMEOUT: float = 55.0

    # ── LLM annotation ──────────────────────────
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
