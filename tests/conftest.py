"""
Pytest configuration and shared fixtures for the order store.

This module provides moto-backed DynamoDB fixtures, a mocked storage adapter
for exercising store logic in isolation, and sample data used across unit and
integration tests.
"""

import os
from decimal import Decimal
from typing import Any, Dict
from unittest.mock import Mock

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws

from order_store.dal.dynamodb_handler import DynamoDBHandler
from order_store.dal.order_store import OrderStore
from order_store.models.input import CreateOrderRequest

TEST_TABLE_NAME = "test-orders-table"
TEST_REGION = "us-east-1"


# Test environment configuration
@pytest.fixture(scope="session", autouse=True)
def test_environment():
    """Set up test environment variables."""
    os.environ.update({
        "AWS_DEFAULT_REGION": TEST_REGION,
        "AWS_ACCESS_KEY_ID": "testing",
        "AWS_SECRET_ACCESS_KEY": "testing",
        "TABLE_NAME": TEST_TABLE_NAME,
        "PAGE_SIZE": "10",
        "POWERTOOLS_SERVICE_NAME": "test-order-store",
        "POWERTOOLS_METRICS_NAMESPACE": "TestOrderStore",
        "LOG_LEVEL": "DEBUG",
        "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
    })


# DynamoDB fixtures
@pytest.fixture
def dynamodb_resource():
    """Yield a boto3 DynamoDB resource backed by moto."""
    with mock_aws():
        yield boto3.resource("dynamodb", region_name=TEST_REGION)


@pytest.fixture
def orders_table(dynamodb_resource):
    """Create a mock orders table keyed by orderId."""
    table = dynamodb_resource.create_table(
        TableName=TEST_TABLE_NAME,
        KeySchema=[{"AttributeName": "orderId", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "orderId", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )
    table.wait_until_exists()
    return table


@pytest.fixture
def order_store(orders_table) -> OrderStore:
    """Order store over the mock orders table."""
    return OrderStore(handler=DynamoDBHandler(table=orders_table), page_size=10)


@pytest.fixture
def missing_table_store(dynamodb_resource) -> OrderStore:
    """Order store pointing at a table that was never created."""
    return OrderStore(handler=DynamoDBHandler(table=dynamodb_resource.Table("missing-orders-table")))


@pytest.fixture
def mock_handler() -> Mock:
    """A mocked DynamoDB adapter for driving store logic directly."""
    handler = Mock(spec=DynamoDBHandler)
    handler.table_name = "mock-orders-table"
    return handler


@pytest.fixture
def mock_store(mock_handler) -> OrderStore:
    """Order store over the mocked adapter."""
    return OrderStore(handler=mock_handler)


# Sample data fixtures
@pytest.fixture
def sample_request() -> CreateOrderRequest:
    """Create a sample order request for testing."""
    return CreateOrderRequest(
        customer_id="C1",
        pre_tax_amount=Decimal("100.00"),
        post_tax_amount=Decimal("108.00"),
    )


@pytest.fixture
def sample_item() -> Dict[str, Any]:
    """A raw orders table item as boto3 returns it."""
    return {
        "orderId": "0b7c3c0e-1111-4a5e-9c1f-2f6a8d3e4b5c",
        "customerId": "C1",
        "preTaxAmount": Decimal("100.00"),
        "postTaxAmount": Decimal("108.00"),
        "version": Decimal("3"),
    }


# Error simulation fixtures
@pytest.fixture
def mock_dynamodb_error():
    """Mock DynamoDB errors for testing error handling."""

    def create_error(error_code: str, message: str = "Test error"):
        return ClientError(
            error_response={
                "Error": {
                    "Code": error_code,
                    "Message": message,
                }
            },
            operation_name="TestOperation"
        )

    return create_error


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
