"""
Attraction expiry library - shared code for the expiry Lambda functions.

This module provides:
- Record access (attraction_store)
- Expiry sweep (expiry_sweeper)
- Upload classification via Gemini (upload_classifier, date_extraction)
- S3 helpers, configuration and HTTP response formatting
"""

__version__ = "1.0.0"

from backend.lib.attractions.attraction_store import AttractionStore
from backend.lib.attractions.config import Settings, get_settings
from backend.lib.attractions.expiry_sweeper import SweepResult, find_due_records, sweep
from backend.lib.attractions.upload_classifier import (
    ClassificationResult,
    UploadEvent,
    classify_upload,
    record_id_from_path,
)

__all__ = [
    "AttractionStore",
    "Settings",
    "get_settings",
    "SweepResult",
    "find_due_records",
    "sweep",
    "ClassificationResult",
    "UploadEvent",
    "classify_upload",
    "record_id_from_path",
]
