"""DynamoDB access for attraction records.

The attractions table is keyed by ``attractionId``. Two writers touch it:
the expiry sweeper flips ``expired``/``expiredAt`` in transactions, and the
upload classifier sets ``expiryDate``/``expired``/``updatedAt`` with a single
conditional update. Neither reads a record before writing it.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, TypedDict

from botocore.exceptions import ClientError

from backend.lib.attractions.aws_client import get_client
from backend.lib.attractions.config import RECORD_KEY_ATTRIBUTE
from backend.lib.attractions.timestamps import format_timestamp

logger = logging.getLogger(__name__)

# DynamoDB rejects transactions with more actions than this
MAX_TRANSACTION_ITEMS = 100


class AttractionRecord(TypedDict, total=False):
    """Schema for an attraction item (timestamps are stored strings)."""
    attractionId: str
    expiryDate: str
    expired: bool
    expiredAt: str
    updatedAt: str


class AttractionStore:
    """Reads and writes attraction records in DynamoDB."""

    def __init__(self, table_name: str, dynamodb_client=None):
        """Initialize store.

        Args:
            table_name: DynamoDB table name
            dynamodb_client: Optional boto3 DynamoDB client
        """
        self.table_name = table_name
        self.dynamodb = dynamodb_client or get_client('dynamodb')

    def find_due_for_expiry(self, now: datetime) -> List[str]:
        """Find records whose expiry date has passed and are not yet expired.

        Follows every scan page; the result size is unbounded.

        Args:
            now: Cut-off time (records with expiryDate <= now match)

        Returns:
            Matching record ids
        """
        paginator = self.dynamodb.get_paginator('scan')
        record_ids = []

        try:
            pages = paginator.paginate(
                TableName=self.table_name,
                FilterExpression='#expiryDate <= :now AND #expired = :false',
                ProjectionExpression='#pk',
                ExpressionAttributeNames={
                    '#pk': RECORD_KEY_ATTRIBUTE,
                    '#expiryDate': 'expiryDate',
                    '#expired': 'expired',
                },
                ExpressionAttributeValues={
                    ':now': {'S': format_timestamp(now)},
                    ':false': {'BOOL': False},
                },
            )
            for page in pages:
                for item in page.get('Items', []):
                    record_ids.append(item[RECORD_KEY_ATTRIBUTE]['S'])
        except ClientError as e:
            logger.error(f"Failed to scan {self.table_name} for due records: {e}")
            raise

        logger.info(f"Found {len(record_ids)} records due for expiry in {self.table_name}")
        return record_ids

    def mark_expired(self, record_ids: List[str], now: datetime) -> int:
        """Set expired = true and expiredAt = now on every given record.

        Records are written in transactions of at most MAX_TRANSACTION_ITEMS
        updates. Each transaction is all-or-nothing; the first one that fails
        raises and the remaining ones are not attempted.

        Args:
            record_ids: Ids returned by find_due_for_expiry()
            now: Expiry time to stamp

        Returns:
            Number of records updated
        """
        expired_at = format_timestamp(now)
        total_batches = (len(record_ids) + MAX_TRANSACTION_ITEMS - 1) // MAX_TRANSACTION_ITEMS
        updated = 0

        for batch_num, i in enumerate(range(0, len(record_ids), MAX_TRANSACTION_ITEMS), 1):
            batch = record_ids[i:i + MAX_TRANSACTION_ITEMS]
            try:
                self.dynamodb.transact_write_items(
                    TransactItems=[self._expire_action(record_id, expired_at) for record_id in batch]
                )
            except ClientError as e:
                logger.error(
                    f"Expiry transaction {batch_num}/{total_batches} failed "
                    f"({len(batch)} records, {updated} already committed): {e}"
                )
                raise

            updated += len(batch)
            logger.info(f"Committed expiry transaction {batch_num}/{total_batches} ({len(batch)} records)")

        return updated

    def _expire_action(self, record_id: str, expired_at: str) -> Dict[str, Any]:
        """Build one TransactWriteItems update for the sweeper."""
        return {
            'Update': {
                'TableName': self.table_name,
                'Key': {RECORD_KEY_ATTRIBUTE: {'S': record_id}},
                'UpdateExpression': 'SET #expired = :true, #expiredAt = :now',
                'ConditionExpression': 'attribute_exists(#pk)',
                'ExpressionAttributeNames': {
                    '#pk': RECORD_KEY_ATTRIBUTE,
                    '#expired': 'expired',
                    '#expiredAt': 'expiredAt',
                },
                'ExpressionAttributeValues': {
                    ':true': {'BOOL': True},
                    ':now': {'S': expired_at},
                },
            }
        }

    def set_expiry_date(self, record_id: str, expiry_date: datetime, now: datetime) -> None:
        """Write a classified expiry date onto an existing record.

        Resets expired to false and stamps updatedAt. The write is blind
        (last write wins) but fails with ConditionalCheckFailedException when
        the record does not exist.

        Args:
            record_id: Attraction id
            expiry_date: Parsed expiry date
            now: Invocation time for updatedAt
        """
        try:
            self.dynamodb.update_item(
                TableName=self.table_name,
                Key={RECORD_KEY_ATTRIBUTE: {'S': record_id}},
                UpdateExpression='SET #expiryDate = :expiryDate, #expired = :false, #updatedAt = :now',
                ConditionExpression='attribute_exists(#pk)',
                ExpressionAttributeNames={
                    '#pk': RECORD_KEY_ATTRIBUTE,
                    '#expiryDate': 'expiryDate',
                    '#expired': 'expired',
                    '#updatedAt': 'updatedAt',
                },
                ExpressionAttributeValues={
                    ':expiryDate': {'S': format_timestamp(expiry_date)},
                    ':false': {'BOOL': False},
                    ':now': {'S': format_timestamp(now)},
                },
            )
            logger.info(f"Set expiryDate={format_timestamp(expiry_date)} on {self.table_name}/{record_id}")
        except ClientError as e:
            logger.error(f"Failed to update {self.table_name}/{record_id}: {e}")
            raise

    def get_record(self, record_id: str) -> Optional[AttractionRecord]:
        """Fetch a single record (strongly consistent).

        The sweep and the classifier never read records; this is for
        inspecting the effect of their writes.

        Returns:
            Record dict or None if not found
        """
        response = self.dynamodb.get_item(
            TableName=self.table_name,
            Key={RECORD_KEY_ATTRIBUTE: {'S': record_id}},
            ConsistentRead=True,
        )
        if 'Item' not in response:
            return None
        return self._deserialize_item(response['Item'])

    def _deserialize_item(self, item: Dict[str, Any]) -> AttractionRecord:
        """Convert DynamoDB item format to a plain dict."""
        result = {}
        for key, value in item.items():
            if 'S' in value:
                result[key] = value['S']
            elif 'BOOL' in value:
                result[key] = value['BOOL']
            elif 'N' in value:
                result[key] = float(value['N'])
            elif 'NULL' in value:
                result[key] = None
        return result
