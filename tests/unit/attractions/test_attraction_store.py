"""
Unit tests for AttractionStore (DynamoDB access).
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from backend.lib.attractions.attraction_store import MAX_TRANSACTION_ITEMS, AttractionStore


class TestFindDueForExpiry:
    """Test the due-record scan."""

    def test_matches_past_and_equal_expiry(self, store, put_attraction, sweep_time):
        put_attraction('past', expiry_date=sweep_time - timedelta(days=30))
        put_attraction('exact', expiry_date=sweep_time)
        put_attraction('future', expiry_date=sweep_time + timedelta(seconds=1))

        result = store.find_due_for_expiry(sweep_time)

        assert sorted(result) == ['exact', 'past']

    def test_skips_already_expired(self, store, put_attraction, sweep_time):
        put_attraction('done', expiry_date=sweep_time - timedelta(days=1), expired=True)

        assert store.find_due_for_expiry(sweep_time) == []

    def test_skips_unclassified_records(self, store, put_attraction, sweep_time):
        put_attraction('new')

        assert store.find_due_for_expiry(sweep_time) == []

    def test_empty_table(self, store, sweep_time):
        assert store.find_due_for_expiry(sweep_time) == []

    def test_follows_every_page(self, sweep_time):
        client = MagicMock()
        client.get_paginator.return_value.paginate.return_value = [
            {'Items': [{'attractionId': {'S': 'a1'}}, {'attractionId': {'S': 'a2'}}]},
            {'Items': [{'attractionId': {'S': 'a3'}}]},
            {},
        ]
        store = AttractionStore('t', dynamodb_client=client)

        assert store.find_due_for_expiry(sweep_time) == ['a1', 'a2', 'a3']

        kwargs = client.get_paginator.return_value.paginate.call_args[1]
        assert kwargs['ExpressionAttributeValues'][':now'] == {'S': '2025-01-01T00:00:00.000Z'}
        assert kwargs['ExpressionAttributeValues'][':false'] == {'BOOL': False}

    def test_scan_error_propagates(self, sweep_time):
        client = MagicMock()
        client.get_paginator.return_value.paginate.side_effect = ClientError(
            {'Error': {'Code': 'AccessDeniedException', 'Message': 'denied'}}, 'Scan'
        )
        store = AttractionStore('t', dynamodb_client=client)

        with pytest.raises(ClientError):
            store.find_due_for_expiry(sweep_time)


class TestMarkExpired:
    """Test the expiry transactions."""

    def test_sets_flag_and_timestamp(self, store, put_attraction, sweep_time):
        put_attraction('a1', expiry_date=sweep_time - timedelta(days=1))
        put_attraction('a2', expiry_date=sweep_time - timedelta(days=2))

        updated = store.mark_expired(['a1', 'a2'], sweep_time)

        assert updated == 2
        for record_id in ('a1', 'a2'):
            record = store.get_record(record_id)
            assert record['expired'] is True
            assert record['expiredAt'] == '2025-01-01T00:00:00.000Z'

    def test_missing_record_cancels_whole_transaction(self, store, put_attraction, sweep_time):
        put_attraction('a1', expiry_date=sweep_time - timedelta(days=1))

        with pytest.raises(ClientError):
            store.mark_expired(['a1', 'deleted'], sweep_time)

        record = store.get_record('a1')
        assert record['expired'] is False
        assert 'expiredAt' not in record
        assert store.get_record('deleted') is None

    def test_splits_into_transaction_sized_batches(self, sweep_time):
        client = MagicMock()
        store = AttractionStore('t', dynamodb_client=client)
        record_ids = [f'id{i}' for i in range(MAX_TRANSACTION_ITEMS * 2 + 5)]

        updated = store.mark_expired(record_ids, sweep_time)

        assert updated == len(record_ids)
        sizes = [len(c[1]['TransactItems']) for c in client.transact_write_items.call_args_list]
        assert sizes == [MAX_TRANSACTION_ITEMS, MAX_TRANSACTION_ITEMS, 5]

    def test_stops_at_first_failed_batch(self, sweep_time):
        client = MagicMock()
        client.transact_write_items.side_effect = [
            {},
            ClientError({'Error': {'Code': 'TransactionCanceledException', 'Message': 'cancelled'}}, 'TransactWriteItems'),
        ]
        store = AttractionStore('t', dynamodb_client=client)
        record_ids = [f'id{i}' for i in range(MAX_TRANSACTION_ITEMS * 3)]

        with pytest.raises(ClientError):
            store.mark_expired(record_ids, sweep_time)

        assert client.transact_write_items.call_count == 2


class TestSetExpiryDate:
    """Test the classifier write."""

    def test_writes_date_and_resets_flag(self, store, put_attraction, sweep_time):
        put_attraction('x1', expiry_date=datetime(2020, 1, 1), expired=True, expiredAt=sweep_time)
        now = datetime(2025, 6, 1, 12, 30, tzinfo=timezone.utc)

        store.set_expiry_date('x1', datetime(2026, 5, 10, tzinfo=timezone.utc), now)

        record = store.get_record('x1')
        assert record['expiryDate'] == '2026-05-10T00:00:00.000Z'
        assert record['expired'] is False
        assert record['updatedAt'] == '2025-06-01T12:30:00.000Z'
        # expiredAt is left as history
        assert record['expiredAt'] == '2025-01-01T00:00:00.000Z'

    def test_unknown_record_fails(self, store, sweep_time):
        with pytest.raises(ClientError) as exc_info:
            store.set_expiry_date('missing', sweep_time, sweep_time)

        assert exc_info.value.response['Error']['Code'] == 'ConditionalCheckFailedException'
        assert store.get_record('missing') is None


class TestGetRecord:
    """Test reading a record back as a plain dict."""

    def test_deserializes_attribute_types(self, store, dynamodb_client):
        dynamodb_client.put_item(
            TableName='test-attractions',
            Item={
                'attractionId': {'S': 'x1'},
                'expired': {'BOOL': True},
                'capacity': {'N': '250'},
                'note': {'NULL': True},
            },
        )

        assert store.get_record('x1') == {
            'attractionId': 'x1',
            'expired': True,
            'capacity': 250.0,
            'note': None,
        }

    def test_unknown_record(self, store):
        assert store.get_record('nope') is None
