"""
Shared pytest fixtures for attraction expiry tests.
"""

import importlib.util
import os
import sys
from datetime import datetime, timezone
from unittest.mock import MagicMock, Mock

import boto3
import pytest
from moto import mock_aws

from backend.lib.attractions import aws_client, config
from backend.lib.attractions.attraction_store import AttractionStore
from backend.lib.attractions.date_extraction import GeminiDateExtractor
from backend.lib.attractions.timestamps import format_timestamp

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../..'))

TABLE_NAME = 'test-attractions'
BUCKET_NAME = 'test-uploads'


def load_handler(module_name, relative_path):
    """Import a Lambda handler.py by path under a unique module name."""
    handler_path = os.path.join(REPO_ROOT, relative_path)
    spec = importlib.util.spec_from_file_location(module_name, handler_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Mock AWS credentials and reset cached settings/clients."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')
    monkeypatch.setenv('AWS_REGION', 'us-east-1')
    monkeypatch.setenv('ATTRACTIONS_TABLE_NAME', TABLE_NAME)
    monkeypatch.delenv('UPLOAD_BUCKET_NAME', raising=False)
    monkeypatch.delenv('GEMINI_API_KEY', raising=False)

    config.reset_settings()
    aws_client.clear_clients()
    yield
    config.reset_settings()
    aws_client.clear_clients()


@pytest.fixture
def aws():
    """Activate moto for the duration of a test."""
    with mock_aws():
        yield


@pytest.fixture
def dynamodb_client(aws):
    """Create mock DynamoDB client with the attractions table."""
    client = boto3.client('dynamodb', region_name='us-east-1')
    client.create_table(
        TableName=TABLE_NAME,
        KeySchema=[{'AttributeName': 'attractionId', 'KeyType': 'HASH'}],
        AttributeDefinitions=[{'AttributeName': 'attractionId', 'AttributeType': 'S'}],
        BillingMode='PAY_PER_REQUEST',
    )
    yield client


@pytest.fixture
def s3_client(aws):
    """Create mock S3 client with the uploads bucket."""
    s3 = boto3.client('s3', region_name='us-east-1')
    s3.create_bucket(Bucket=BUCKET_NAME)
    yield s3


@pytest.fixture
def store(dynamodb_client):
    """AttractionStore backed by the mock table."""
    return AttractionStore(TABLE_NAME, dynamodb_client=dynamodb_client)


@pytest.fixture
def put_attraction(dynamodb_client):
    """Insert an attraction item; datetimes are stored as timestamp strings."""
    def _put(attraction_id, expiry_date=None, expired=False, **extra):
        item = {
            'attractionId': {'S': attraction_id},
            'expired': {'BOOL': expired},
        }
        if expiry_date is not None:
            item['expiryDate'] = {'S': format_timestamp(expiry_date)}
        for key, value in extra.items():
            if isinstance(value, datetime):
                item[key] = {'S': format_timestamp(value)}
            else:
                item[key] = {'S': value}
        dynamodb_client.put_item(TableName=TABLE_NAME, Item=item)
    return _put


@pytest.fixture
def sweep_time():
    """Fixed sweep time."""
    return datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def mock_model():
    """Stand-in for genai.GenerativeModel returning a fixed reply."""
    model = MagicMock()
    model.generate_content.return_value = Mock(text="2025-12-31")
    return model


@pytest.fixture
def extractor(mock_model):
    """GeminiDateExtractor wired to the mock model."""
    return GeminiDateExtractor(model=mock_model)


@pytest.fixture
def mock_lambda_context():
    """Mock Lambda context object."""
    context = Mock()
    context.function_name = 'test-function'
    context.memory_limit_in_mb = 128
    context.invoked_function_arn = 'arn:aws:lambda:us-east-1:123456789012:function:test'
    context.aws_request_id = 'test-request-id'
    return context
