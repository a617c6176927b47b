"""Configuration module for the actionquery service.

This module provides centralized configuration management for the service,
including database connections, logging setup, error codes, and application
settings.

Key Components:
- settings: Application configuration loaded from environment variables and TOML files
- Database: SQLAlchemy async engine and session management
- Logging: Loguru-based logging configuration with development/production modes
- Error handling: Centralized error codes and error messages

The configuration supports multiple environments (development, testing, production)
and allows runtime configuration through environment variables while keeping
defaults in the app.toml configuration file.
"""

from actionquery.config.config import settings
from actionquery.config.db import engine, get_session
from actionquery.config.errors import ErrorCode, ErrorNames
from actionquery.config.logger import config_logger

__all__ = [
    "ErrorCode",
    "ErrorNames",
    "config_logger",
    "engine",
    "get_session",
    "settings",
]
