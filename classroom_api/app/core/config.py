"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields.  In a
production deployment you should override these via environment
variables or a ``.env`` file loaded by your process manager.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Classroom Admin API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    # Prefix under which the v1 routes are mounted, e.g. ``/api/register``.
    api_prefix: str = os.getenv("API_PREFIX", "/api")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Path to the SQLite database file.  A relative path is resolved
    # relative to the project root by the ``db`` module.  Every request
    # opens its own connection, so ``:memory:`` cannot be used here;
    # set ``STORAGE_BACKEND=memory`` instead.
    database_url: str = os.getenv("DATABASE_URL", "classroom.db")

    # Either ``sqlite`` or ``memory``.  The memory backend keeps all
    # records in process and loses them on restart.
    storage_backend: str = os.getenv("STORAGE_BACKEND", "sqlite").lower()

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
