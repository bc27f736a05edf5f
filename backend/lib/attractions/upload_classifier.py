"""Upload classification: read an expiry date off a new document.

Uploads are laid out as ``<prefix>/<attractionId>/<file>``. For each created
object the classifier downloads the bytes, asks the date extractor for the
expiry date and writes it onto the attraction. The store write is the last
step, so any earlier failure leaves the record untouched.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from backend.lib.attractions.attraction_store import AttractionStore
from backend.lib.attractions.date_extraction import GeminiDateExtractor
from backend.lib.attractions.s3_utils import build_s3_uri, download_object, get_content_type
from backend.lib.attractions.timestamps import format_timestamp, utc_now

logger = logging.getLogger(__name__)

# S3 defaults to these when the uploader sets no Content-Type
GENERIC_CONTENT_TYPES = {"binary/octet-stream", "application/octet-stream"}


@dataclass
class UploadEvent:
    """One finalized upload."""
    name: str
    bucket: str
    content_type: Optional[str] = None


@dataclass
class ClassificationResult:
    """Outcome of classifying one upload."""
    status: str
    file_path: str
    record_id: Optional[str] = None
    expiry_date: Optional[datetime] = None
    reason: Optional[str] = None

    def to_dict(self):
        return {
            "status": self.status,
            "file_path": self.file_path,
            "record_id": self.record_id,
            "expiry_date": format_timestamp(self.expiry_date) if self.expiry_date else None,
            "reason": self.reason,
        }


def record_id_from_path(file_path: str) -> Optional[str]:
    """Get the attraction id from an upload path.

    The id is the second "/"-separated segment:
    "uploads/abc123/file.pdf" -> "abc123". Paths with fewer segments, or an
    empty second segment, have no id.
    """
    parts = file_path.split("/")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


def resolve_content_type(event: UploadEvent, stored_content_type: Optional[str]) -> str:
    """Pick the MIME type sent to the model.

    Order: the event's declared type, then the type S3 stored, then a guess
    from the file extension. Generic binary types count as unknown.
    """
    for candidate in (event.content_type, stored_content_type):
        if candidate and candidate not in GENERIC_CONTENT_TYPES:
            return candidate
    return get_content_type(event.name)


def skip_upload(event: UploadEvent, allowed_bucket: Optional[str] = None) -> Optional[ClassificationResult]:
    """Check whether an upload should be skipped without touching S3 or the model.

    Returns:
        A "skipped" ClassificationResult, or None if the upload should be classified
    """
    if allowed_bucket and event.bucket != allowed_bucket:
        logger.warning(f"Ignoring upload from unbound bucket: {build_s3_uri(event.bucket, event.name)}")
        return ClassificationResult(status="skipped", file_path=event.name, reason="bucket_not_bound")

    if not record_id_from_path(event.name):
        logger.info(f"No attraction id in upload path, skipping: {event.name}")
        return ClassificationResult(status="skipped", file_path=event.name, reason="no_record_id")

    return None


def classify_upload(
    event: UploadEvent,
    store: AttractionStore,
    extractor: GeminiDateExtractor,
    s3_client=None,
    now: Optional[datetime] = None,
    allowed_bucket: Optional[str] = None,
) -> ClassificationResult:
    """Classify one upload and merge the expiry date into its record.

    Args:
        event: Upload to classify
        store: Attraction store to write to
        extractor: Date extractor for the document
        s3_client: Optional boto3 S3 client
        now: Invocation time for updatedAt (defaults to current UTC time)
        allowed_bucket: Only uploads from this bucket are handled, if set

    Returns:
        ClassificationResult with status "classified" or "skipped"

    Raises:
        ClientError: If the download or the store update fails
        ExpiryDateParseError: If the model reply is not a date
    """
    now = now or utc_now()

    skipped = skip_upload(event, allowed_bucket)
    if skipped:
        return skipped

    record_id = record_id_from_path(event.name)
    s3_object = download_object(event.bucket, event.name, s3_client=s3_client)
    mime_type = resolve_content_type(event, s3_object.content_type)

    expiry_date = extractor.extract_expiry_date(s3_object.data, mime_type)
    logger.info(f"Extracted expiry date {format_timestamp(expiry_date)} for attraction {record_id}")

    store.set_expiry_date(record_id, expiry_date, now)

    return ClassificationResult(
        status="classified",
        file_path=event.name,
        record_id=record_id,
        expiry_date=expiry_date,
    )
