"""
Lambda handler: ANY /v1/attractions/expiry-check
Run the attraction expiry sweep on demand and report the outcome
"""

import logging
import os

from backend.lib.attractions.attraction_store import AttractionStore
from backend.lib.attractions.config import get_settings
from backend.lib.attractions.expiry_sweeper import sweep
from backend.lib.attractions.response_formatter import error_response, text_response

logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))

NO_UPDATES_MESSAGE = "No documents to update"
COMPLETED_MESSAGE = "Expiry update completed"


def get_store() -> AttractionStore:
    """Build the attraction store for this invocation."""
    return AttractionStore(get_settings().table_name)


def lambda_handler(event, context):
    """
    Manual expiry check. Accepts any HTTP method; the body is ignored.

    Returns:
        200 "No documents to update"  - nothing was due
        200 "Expiry update completed" - due records were flagged
        500 "Error: <message>"        - scan or commit failed
    """
    method = (event or {}).get('httpMethod', 'UNKNOWN')
    logger.info(f"Manual expiry check requested ({method})")

    try:
        result = sweep(get_store())

        if result.updated_count == 0:
            return text_response(NO_UPDATES_MESSAGE)

        logger.info(f"Manual expiry check expired {result.updated_count} attractions")
        return text_response(COMPLETED_MESSAGE)

    except Exception as e:
        logger.error(f"Manual expiry check failed: {e}", exc_info=True)
        return error_response(e, status_code=500)
