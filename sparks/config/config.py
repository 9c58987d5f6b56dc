"""
Configuration module for Sparks.

Loads environment variables from .env file and exposes them as typed configuration values.
Uses python-dotenv for loading and provides safe defaults where appropriate.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root (parent of sparks/)
_project_root = Path(__file__).parent.parent.parent
_env_path = _project_root / ".env"
load_dotenv(_env_path)


# =============================================================================
# Application Environment
# =============================================================================

# Application environment: "development", "staging", or "production"
APP_ENV: str = os.getenv("APP_ENV", "development")

# Enable debug mode for verbose logging (only in development)
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

# Log level name passed to logging; DEBUG=true forces "DEBUG"
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


# =============================================================================
# Completion Service (Groq, OpenAI-compatible chat completions)
# =============================================================================

GROQ_API_KEY: str = os.getenv("GROQ_API_KEY", "")

GROQ_MODEL: str = os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")

# Upper bound on tokens generated per normalization
COMPLETION_MAX_TOKENS: int = int(os.getenv("COMPLETION_MAX_TOKENS", "512"))

# HTTP request timeout in seconds (completion service and record store)
REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))


# =============================================================================
# Record Store
# =============================================================================

# "supabase" for the hosted store, "memory" for local development
STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "supabase").lower()

# Project URL, e.g. https://abcd.supabase.co
SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")

# Service role key; bypasses row level security, keep server-side
SUPABASE_SERVICE_KEY: str = os.getenv("SUPABASE_SERVICE_KEY", "")


# =============================================================================
# Access Gate
# =============================================================================

# The single identity allowed to use the API. Empty means nobody.
ALLOWED_USERNAME: str = os.getenv("ALLOWED_USERNAME", "")

# Header carrying the authenticated identity, set by the auth proxy
AUTH_HEADER: str = os.getenv("AUTH_HEADER", "X-Forwarded-User")


# =============================================================================
# Helper Functions
# =============================================================================

def is_production() -> bool:
    """Check if running in production environment."""
    return APP_ENV == "production"


def is_development() -> bool:
    """Check if running in development environment."""
    return APP_ENV == "development"


def validate_config() -> list[str]:
    """
    Validate that required configuration is present.

    Returns:
        List of missing or invalid configuration keys (empty if all valid).
    """
    errors = []

    if STORAGE_BACKEND not in ("supabase", "memory"):
        errors.append(f"STORAGE_BACKEND must be 'supabase' or 'memory', got {STORAGE_BACKEND!r}")

    if is_production():
        if not GROQ_API_KEY:
            errors.append("GROQ_API_KEY is required in production")
        if STORAGE_BACKEND != "supabase":
            errors.append("STORAGE_BACKEND must be 'supabase' in production")
        if not SUPABASE_URL:
            errors.append("SUPABASE_URL is required in production")
        if not SUPABASE_SERVICE_KEY:
            errors.append("SUPABASE_SERVICE_KEY is required in production")
        if not ALLOWED_USERNAME:
            errors.append("ALLOWED_USERNAME is required in production")

    if REQUEST_TIMEOUT < 1:
        errors.append("REQUEST_TIMEOUT must be at least 1 second")

    if COMPLETION_MAX_TOKENS < 64:
        errors.append("COMPLETION_MAX_TOKENS must be at least 64")

    return errors


def print_config_summary() -> None:
    """Print a summary of current configuration (safe for logs, no secrets)."""
    print(f"  APP_ENV: {APP_ENV}")
    print(f"  DEBUG: {DEBUG}")
    print(f"  LOG_LEVEL: {LOG_LEVEL}")
    print(f"  GROQ_API_KEY: {'***' if GROQ_API_KEY else '(not set)'}")
    print(f"  GROQ_MODEL: {GROQ_MODEL}")
    print(f"  COMPLETION_MAX_TOKENS: {COMPLETION_MAX_TOKENS}")
    print(f"  REQUEST_TIMEOUT: {REQUEST_TIMEOUT}s")
    print(f"  STORAGE_BACKEND: {STORAGE_BACKEND}")
    print(f"  SUPABASE_URL: {SUPABASE_URL or '(not set)'}")
    print(f"  SUPABASE_SERVICE_KEY: {'***' if SUPABASE_SERVICE_KEY else '(not set)'}")
    print(f"  ALLOWED_USERNAME: {'***' if ALLOWED_USERNAME else '(not set)'}")
    print(f"  AUTH_HEADER: {AUTH_HEADER}")
