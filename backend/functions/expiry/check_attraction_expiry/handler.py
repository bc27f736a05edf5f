"""
Lambda: Scheduled Attraction Expiry Check

Triggered by: EventBridge rule, rate(24 hours)
Purpose: Flag every attraction whose expiryDate has passed as expired

The return value is informational only; EventBridge discards it. Failures
propagate so the invocation is marked failed and logged by Lambda.
"""

import logging
import os

from backend.lib.attractions.attraction_store import AttractionStore
from backend.lib.attractions.config import get_settings
from backend.lib.attractions.expiry_sweeper import sweep

logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))


def get_store() -> AttractionStore:
    """Build the attraction store for this invocation."""
    return AttractionStore(get_settings().table_name)


def lambda_handler(event, context):
    """
    Run the daily expiry sweep.

    Args:
        event: EventBridge scheduled event (ignored)

    Returns:
        {
            "status": "success",
            "swept_at": "2025-01-01T00:00:00.000Z",
            "updated_count": 3,
            "record_ids": ["a1", "b2", "c3"]
        }
    """
    logger.info(f"Scheduled expiry check triggered: {event}")

    try:
        result = sweep(get_store())
    except Exception as e:
        logger.error(f"Scheduled expiry check failed: {e}")
        raise

    logger.info(f"Scheduled expiry check complete: {result.updated_count} attractions expired")

    return {"status": "success", **result.to_dict()}
