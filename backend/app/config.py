"""Configuration for the workflow lineage backend."""

from __future__ import annotations

import os


class Config:
    """Base configuration for the Flask application."""

    SQLALCHEMY_DATABASE_URI: str = os.getenv(
        "DATABASE_URL", "sqlite:///alteryx-lineage.sqlite"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    JSONIFY_PRETTYPRINT_REGULAR: bool = False
    CORS_ALLOWED_ORIGINS: str = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:5173")
    DB_INIT_MAX_RETRIES: int = int(os.getenv("DB_INIT_MAX_RETRIES", "30"))
    DB_INIT_RETRY_DELAY: float = float(os.getenv("DB_INIT_RETRY_DELAY", "2"))
    MAX_CONTENT_LENGTH: int = int(os.getenv("MAX_UPLOAD_BYTES", str(64 * 1024 * 1024)))
    MAX_PACKAGE_MEMBER_BYTES: int = int(
        os.getenv("MAX_PACKAGE_MEMBER_BYTES", str(256 * 1024 * 1024))
    )
    IMPORT_RATE_LIMIT: str = os.getenv("IMPORT_RATE_LIMIT", "30 per minute")
