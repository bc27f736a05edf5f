"""Runtime configuration for the attraction expiry functions.

Every Lambda reads its settings from environment variables. Values are
resolved once per cold start and cached; local scripts may load a .env file
first (see backend/scripts/run_expiry_check.py).

Variables:
    ATTRACTIONS_TABLE_NAME  DynamoDB table holding attraction records
    UPLOAD_BUCKET_NAME      S3 bucket the upload trigger is bound to (optional)
    AWS_REGION              Region for DynamoDB and S3 clients
    GEMINI_API_KEY          Gemini API key (required for classification)
    GEMINI_MODEL            Gemini model name
    LOG_LEVEL               Handler log level
"""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_TABLE_NAME = "attractions"
DEFAULT_REGION = "us-east-1"
DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"

# Partition key of the attractions table
RECORD_KEY_ATTRIBUTE = "attractionId"


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one Lambda container."""

    table_name: str = DEFAULT_TABLE_NAME
    upload_bucket: Optional[str] = None
    region: str = DEFAULT_REGION
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current environment."""
        return cls(
            table_name=os.environ.get("ATTRACTIONS_TABLE_NAME", DEFAULT_TABLE_NAME),
            upload_bucket=os.environ.get("UPLOAD_BUCKET_NAME") or None,
            region=os.environ.get("AWS_REGION", DEFAULT_REGION),
            gemini_api_key=os.environ.get("GEMINI_API_KEY") or None,
            gemini_model=os.environ.get("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get cached settings, reading the environment on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
