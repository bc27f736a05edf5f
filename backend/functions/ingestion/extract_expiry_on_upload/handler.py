"""
Lambda: Extract Expiry On Upload

Triggered by: S3 ObjectCreated notification on the uploads bucket
Purpose: Read the expiry date off each uploaded document with Gemini and
write it onto the matching attraction

Uploads are expected at <prefix>/<attractionId>/<file>; anything else is
skipped. No response is consumed by S3, so outcomes are visible only in the
attractions table and in the logs.
"""

import logging
import os

from backend.lib.attractions.attraction_store import AttractionStore
from backend.lib.attractions.config import get_settings
from backend.lib.attractions.date_extraction import GeminiDateExtractor
from backend.lib.attractions.s3_utils import iter_event_objects
from backend.lib.attractions.upload_classifier import UploadEvent, classify_upload, skip_upload

logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))


def get_store() -> AttractionStore:
    """Build the attraction store for this invocation."""
    return AttractionStore(get_settings().table_name)


def get_extractor() -> GeminiDateExtractor:
    """Build the Gemini date extractor for this invocation."""
    return GeminiDateExtractor()


def lambda_handler(event, context):
    """
    Classify every uploaded object in an S3 notification.

    Args:
        event: {
            "Records": [
                {"s3": {"bucket": {"name": "uploads"},
                        "object": {"key": "attractions/x1/ticket.pdf"}}}
            ]
        }

    Returns:
        {
            "processed": 1,
            "results": [{"status": "classified", "record_id": "x1", ...}]
        }
    """
    uploads = [
        UploadEvent(name=obj['key'], bucket=obj['bucket'])
        for obj in iter_event_objects(event)
    ]
    logger.info(f"Received {len(uploads)} uploaded objects")

    if not uploads:
        return {"processed": 0, "results": []}

    settings = get_settings()
    store = get_store()
    # Built on the first upload that needs the model
    extractor = None

    results = []
    for upload in uploads:
        skipped = skip_upload(upload, allowed_bucket=settings.upload_bucket)
        if skipped:
            results.append(skipped.to_dict())
            continue

        try:
            if extractor is None:
                extractor = get_extractor()
            result = classify_upload(
                upload,
                store=store,
                extractor=extractor,
                allowed_bucket=settings.upload_bucket,
            )
        except Exception as e:
            logger.error(f"Failed to classify s3://{upload.bucket}/{upload.name}: {e}")
            raise
        results.append(result.to_dict())

    return {"processed": len(results), "results": results}
