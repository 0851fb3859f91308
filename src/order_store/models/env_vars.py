"""
Environment variable models for type-safe configuration.

This module defines the Pydantic model for the environment variables that
configure the order store: table name, page size, create retry budget and the
optional local DynamoDB endpoint.
"""

from typing import Annotated, Optional

from aws_lambda_env_modeler import get_environment_variables
from pydantic import BaseModel, Field


class OrderStoreEnvVars(BaseModel):
    """Environment variables for the order store."""

    # DynamoDB table name for storing orders
    TABLE_NAME: Annotated[str, Field(
        default='orders_table',
        description='DynamoDB table name for order storage',
        min_length=1
    )] = 'orders_table'

    # Number of orders returned per listing page
    PAGE_SIZE: Annotated[int, Field(
        default=10,
        description='Maximum number of orders returned by a single scan',
        ge=1,
        le=1000
    )] = 10

    # Attempts made to find an unused order id before giving up
    MAX_CREATE_ATTEMPTS: Annotated[int, Field(
        default=10,
        description='Maximum number of order id collision retries on create',
        ge=1,
        le=100
    )] = 10

    # AWS region
    AWS_REGION: Annotated[str, Field(
        default='us-east-1',
        description='AWS region of the DynamoDB table'
    )] = 'us-east-1'

    # Local DynamoDB / localstack endpoint
    ENDPOINT_OVERRIDE: Annotated[Optional[str], Field(
        default=None,
        description='DynamoDB endpoint URL override for local testing'
    )] = None

    # Service name for observability
    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        default='order-store',
        description='Service name for AWS Powertools'
    )] = 'order-store'

    # Log level for AWS Powertools Logger
    LOG_LEVEL: Annotated[str, Field(
        default='INFO',
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'

    @property
    def uses_local_endpoint(self) -> bool:
        """Check if the store talks to a local DynamoDB endpoint."""
        return bool(self.ENDPOINT_OVERRIDE)


def get_store_env_vars() -> OrderStoreEnvVars:
    """
    Get typed environment variables for the order store.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=OrderStoreEnvVars)
