# core/config.py
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _int_list(value: str) -> List[int]:
    return [int(part) for part in value.split(",") if part.strip()]


def _str_list(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class Settings:
    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///library.db")
    database_pool_size: int = int(os.getenv("DATABASE_POOL_SIZE", "5"))
    database_max_overflow: int = int(os.getenv("DATABASE_MAX_OVERFLOW", "10"))
    sqlite_busy_timeout: float = float(os.getenv("SQLITE_BUSY_TIMEOUT", "30"))

    # Admin access
    api_key: str = os.getenv("API_KEY", "change-me-admin-key")

    # Circulation
    default_loan_days: int = int(os.getenv("DEFAULT_LOAN_DAYS", "14"))
    loan_period_choices: List[int] = field(
        default_factory=lambda: _int_list(os.getenv("LOAN_PERIOD_CHOICES", "7,14,21,30"))
    )

    # Reports
    report_limit: int = int(os.getenv("REPORT_LIMIT", "10"))
    report_history_limit: Optional[int] = (
        int(os.getenv("REPORT_HISTORY_LIMIT")) if os.getenv("REPORT_HISTORY_LIMIT") else None
    )

    # Pagination
    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
    max_page_size: int = int(os.getenv("MAX_PAGE_SIZE", "100"))

    # Application
    app_name: str = os.getenv("APP_NAME", "Library Desk")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    cors_origins: List[str] = field(
        default_factory=lambda: _str_list(
            os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173,http://localhost:4173")
        )
    )
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging for the API and CLI entry points"""
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
