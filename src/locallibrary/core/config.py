"""
Configuration module for Local Library.

This module defines the Settings class, which loads environment variables
and provides application-wide configuration, including the database URL,
logging level, catalog URL prefix and the optional per-lookup timeout.

Usage:
    Import the `settings` object in scripts, or build a `Settings()` and
    pass the values you need to the store and handlers explicitly.
"""

import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from typing import Optional

load_dotenv()

class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        DATABASE_URL (str): Database connection string.
        ENVIRONMENT (str): Current environment (e.g., 'production', 'development').
        LOG_LEVEL (str): Root logging level used by the scripts.
        CATALOG_URL_PREFIX (str): Prefix for every canonical catalog URL.
        LOOKUP_TIMEOUT_SECONDS (Optional[float]): Per-lookup timeout for aggregate fetches.
    """
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./locallibrary.db")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CATALOG_URL_PREFIX: str = "/catalog"
    LOOKUP_TIMEOUT_SECONDS: Optional[float] = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
