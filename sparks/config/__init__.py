"""
Configuration module.

Handles environment variables, API keys, and application settings.
"""

from sparks.config.config import (
    APP_ENV,
    DEBUG,
    LOG_LEVEL,
    GROQ_API_KEY,
    GROQ_MODEL,
    COMPLETION_MAX_TOKENS,
    REQUEST_TIMEOUT,
    STORAGE_BACKEND,
    SUPABASE_URL,
    SUPABASE_SERVICE_KEY,
    ALLOWED_USERNAME,
    AUTH_HEADER,
    is_production,
    is_development,
    validate_config,
    print_config_summary,
)

__all__ = [
    "APP_ENV",
    "DEBUG",
    "LOG_LEVEL",
    "GROQ_API_KEY",
    "GROQ_MODEL",
    "COMPLETION_MAX_TOKENS",
    "REQUEST_TIMEOUT",
    "STORAGE_BACKEND",
    "SUPABASE_URL",
    "SUPABASE_SERVICE_KEY",
    "ALLOWED_USERNAME",
    "AUTH_HEADER",
    "is_production",
    "is_development",
    "validate_config",
    "print_config_summary",
]
