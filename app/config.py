"""
Application configuration using Pydantic Settings.
"""

import os
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings


def get_env_file() -> str:
    """Determine which env file to use based on environment."""
    env = os.getenv("APP_ENV", "development")
    if env == "production":
        return ".env.production"
    return ".env.development"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App settings
    app_name: str = "Cashflow Calculator API"
    debug: bool = False
    log_level: str = "INFO"
    app_env: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 3001

    # CORS
    cors_origins: List[str] = ["*"]

    # Investment report defaults
    default_tenure_years: int = 20
    default_interest_rate: float = 8.5
    default_holding_period_years: int = 4
    default_plot_holding_period_years: int = 3
    default_loan_percentage: float = 85.0
    default_plot_loan_percentage: float = 75.0
    default_construction_lead_years: int = 4
    default_plot_construction_lead_years: int = 3

    class Config:
        env_file = get_env_file()
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
