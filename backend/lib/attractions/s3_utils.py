"""S3 utility functions for uploaded attraction documents."""

import logging
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Dict, Iterator, Optional
from urllib.parse import unquote_plus

from botocore.exceptions import ClientError

from backend.lib.attractions.aws_client import get_client

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class S3Object:
    """Downloaded object body plus the content type S3 reports for it."""
    bucket: str
    key: str
    data: bytes
    content_type: Optional[str] = None


def get_s3_client():
    """Get the shared S3 client."""
    return get_client("s3")


def download_object(bucket: str, s3_key: str, s3_client=None) -> S3Object:
    """Download an S3 object with its content type.

    Args:
        bucket: S3 bucket name
        s3_key: S3 object key
        s3_client: Optional boto3 S3 client

    Returns:
        S3Object with body bytes and ContentType (if S3 has one)

    Raises:
        ClientError: If download fails
    """
    s3 = s3_client or get_s3_client()
    try:
        logger.info(f"Downloading {build_s3_uri(bucket, s3_key)}")

        response = s3.get_object(Bucket=bucket, Key=s3_key)
        data = response["Body"].read()

        logger.info(f"Downloaded {len(data)} bytes from {build_s3_uri(bucket, s3_key)}")

        return S3Object(
            bucket=bucket,
            key=s3_key,
            data=data,
            content_type=response.get("ContentType"),
        )

    except ClientError as e:
        logger.error(f"Failed to download {build_s3_uri(bucket, s3_key)}: {e}")
        raise


def iter_event_objects(event: Dict[str, Any]) -> Iterator[Dict[str, str]]:
    """Yield bucket/key pairs from an S3 event notification.

    Object keys arrive URL-encoded in notifications ("my+file.pdf") and are
    decoded here.

    Args:
        event: S3 notification event ({"Records": [{"s3": {...}}]})

    Yields:
        {"bucket": ..., "key": ...} per record
    """
    for record in event.get("Records", []):
        s3_info = record.get("s3")
        if not s3_info:
            logger.warning(f"Skipping non-S3 record: {record.get('eventSource', 'unknown')}")
            continue
        yield {
            "bucket": s3_info["bucket"]["name"],
            "key": unquote_plus(s3_info["object"]["key"]),
        }


def get_content_type(file_path: str) -> str:
    """Get content type based on file extension.

    Args:
        file_path: Object key or file name

    Returns:
        MIME content type
    """
    suffix = PurePosixPath(file_path).suffix.lower()

    content_types = {
        ".pdf": "application/pdf",
        ".png": "image/png",
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".webp": "image/webp",
        ".heic": "image/heic",
        ".heif": "image/heif",
        ".txt": "text/plain",
    }

    return content_types.get(suffix, DEFAULT_CONTENT_TYPE)


def build_s3_uri(bucket: str, key: str) -> str:
    """Build S3 URI from bucket and key.

    Args:
        bucket: S3 bucket name
        key: S3 object key

    Returns:
        S3 URI (s3://bucket/key)
    """
    return f"s3://{bucket}/{key}"
