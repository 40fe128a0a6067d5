"""
Configuration settings for the sales ledger.

Uses Pydantic Settings to load environment variables for file locations,
the on-disk date format, validation bounds, and logging.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sales_ledger.domain.dates import DateFormat


class Settings(BaseSettings):
    # Files
    sales_file: Path = Field(Path("sales.csv"), alias="SALES_FILE")
    sorted_file: Path = Field(Path("temp.csv"), alias="SORTED_FILE")
    report_file: Path = Field(Path("sales_report.txt"), alias="REPORT_FILE")

    # Records
    date_format: DateFormat = Field(DateFormat.ISO, alias="DATE_FORMAT")
    min_year: int = Field(1900, alias="MIN_YEAR")
    max_year: int = Field(2100, alias="MAX_YEAR")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
