"""
Configuration module for bookloan.

This module defines the Settings class, which loads environment variables
and provides application-wide configuration: the database URL, CORS origins,
logging level and table bootstrap behaviour.

Usage:
    Import the `settings` object to access configuration throughout the project.
"""

import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from typing import List

load_dotenv()

class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        DATABASE_URL (str): Database connection string.
        ENVIRONMENT (str): Current environment (e.g., 'production', 'development').
        CORS_ORIGINS (str): Comma-separated list of allowed origins ("*" allows any).
        AUTO_CREATE_TABLES (bool): Create missing tables when the API starts.
        LOG_LEVEL (str): Root logging level used by the entry points.
        DB_ECHO (bool): Echo emitted SQL through the sqlalchemy.engine logger.
    """
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./library.db")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")
    AUTO_CREATE_TABLES: bool = True
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    DB_ECHO: bool = False

    @property
    def list_cors_origins(self) -> List[str]:
        """
        Returns the list of allowed origins parsed from CORS_ORIGINS.

        Returns:
            List[str]: Origins, or ["*"] when nothing usable is configured.
        """
        origins = [origin.strip() for origin in self.CORS_ORIGINS.split(',') if origin.strip()]
        return origins or ["*"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
