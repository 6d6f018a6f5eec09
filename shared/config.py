"""Shared configuration utilities."""

import os
from typing import Optional


def get_env(key: str, default: Optional[str] = None, required: bool = False) -> str:
    """Get environment variable with optional default and required validation."""
    value = os.getenv(key, default)
    if required and not value:
        raise ValueError(f"Required environment variable {key} is not set")
    return value


def get_notion_config() -> dict:
    """
    Get Notion configuration from environment.

    Read on every call so that a credential exported after import is still
    picked up by the first client construction.
    """
    return {
        "api_key": get_env("NOTION_API_KEY", ""),
        "database_id": get_env("NOTION_DATABASE_ID", ""),
    }


def get_server_config() -> dict:
    """Get registry server bind configuration from environment."""
    return {
        "host": get_env("HOST", "localhost"),
        "port": int(get_env("PORT", "3000")),
    }


def get_log_level() -> str:
    """Get the root logging level name."""
    return get_env("LOG_LEVEL", "INFO").upper()
