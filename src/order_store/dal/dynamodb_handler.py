"""
Thin DynamoDB adapter used by the order store.

This module wraps a boto3 ``Table`` resource and exposes the storage primitives
the order store builds on (get, conditional put, conditional update, conditional
delete and limited scan), translating botocore failures into the typed errors of
``order_store.exceptions`` and recording per-operation metrics.
"""

import time
from typing import Any, Callable, Dict, Optional

import boto3
from aws_lambda_powertools.metrics import MetricUnit
from botocore.exceptions import BotoCoreError, ClientError

from order_store.exceptions import ConditionalCheckFailedError, DALError, TableMissingError
from order_store.utils.observability import logger, metrics, tracer


class DynamoDBHandler:
    """DynamoDB table adapter with consistent error translation and metrics."""

    def __init__(
        self,
        table_name: Optional[str] = None,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        table: Optional[Any] = None,
    ):
        """
        Initialize DynamoDB handler.

        Args:
            table_name: Name of the DynamoDB table
            region_name: AWS region name
            endpoint_url: DynamoDB endpoint URL (for local testing)
            table: Existing boto3 Table resource, used instead of building one
        """
        if table is None:
            if not table_name:
                raise ValueError("table_name is required when no table resource is given")

            resource_config = {}
            if region_name:
                resource_config['region_name'] = region_name
            if endpoint_url:
                resource_config['endpoint_url'] = endpoint_url

            table = boto3.resource('dynamodb', **resource_config).Table(table_name)

        self.table = table
        self.table_name = table.name

        logger.info("DynamoDB handler initialized", extra={
            "table_name": self.table_name,
            "region_name": region_name,
            "endpoint_url": endpoint_url,
        })

    def _handle_dynamodb_errors(self, operation: str) -> Callable:
        """Decorator to handle DynamoDB errors consistently."""

        def decorator(func):
            def wrapper(*args, **kwargs):
                operation_start = time.time()
                metrics.add_metric(name=f"DynamoDB{operation}Count", unit=MetricUnit.Count, value=1)

                try:
                    result = func(*args, **kwargs)
                except ClientError as e:
                    error_code = e.response['Error']['Code']
                    error_message = e.response['Error'].get('Message', '')
                    metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)

                    if error_code == 'ConditionalCheckFailedException':
                        logger.info(f"DynamoDB {operation} condition not met", extra={
                            "table_name": self.table_name,
                            "operation": operation,
                        })
                        raise ConditionalCheckFailedError(table_name=self.table_name, operation=operation) from e

                    logger.error(f"DynamoDB {operation} error", extra={
                        "error_code": error_code,
                        "error_message": error_message,
                        "table_name": self.table_name,
                        "operation": operation,
                    })

                    if error_code == 'ResourceNotFoundException':
                        raise TableMissingError(table_name=self.table_name, operation=operation) from e

                    raise DALError(
                        message=f"DynamoDB error: {error_message}",
                        operation=operation,
                        table_name=self.table_name,
                        error_code=f"DYNAMODB_{error_code}",
                    ) from e
                except BotoCoreError as e:
                    metrics.add_metric(name=f"DynamoDB{operation}Error", unit=MetricUnit.Count, value=1)
                    logger.error(f"DynamoDB connection error during {operation}", extra={
                        "error": str(e),
                        "table_name": self.table_name,
                    })
                    raise DALError(
                        message=f"Database connection error: {str(e)}",
                        operation=operation,
                        table_name=self.table_name,
                        error_code="DATABASE_CONNECTION_ERROR",
                    ) from e

                operation_duration = (time.time() - operation_start) * 1000
                metrics.add_metric(name=f"DynamoDB{operation}Duration", unit=MetricUnit.Milliseconds, value=operation_duration)
                metrics.add_metric(name=f"DynamoDB{operation}Success", unit=MetricUnit.Count, value=1)
                return result

            return wrapper
        return decorator

    @tracer.capture_method
    def get_item(self, key: Dict[str, Any], consistent_read: bool = False) -> Optional[Dict[str, Any]]:
        """
        Get a single item from DynamoDB.

        Args:
            key: Primary key of the item to retrieve
            consistent_read: Whether to use strongly consistent read

        Returns:
            Item data or None if not found

        Raises:
            TableMissingError: If the table does not exist
            DALError: If DynamoDB operation fails
        """

        @self._handle_dynamodb_errors("GetItem")
        def _get_item():
            response = self.table.get_item(Key=key, ConsistentRead=consistent_read)
            return response.get('Item')

        return _get_item()

    @tracer.capture_method
    def put_item(self, item: Dict[str, Any], condition_expression: Optional[Any] = None) -> Dict[str, Any]:
        """
        Put an item into DynamoDB.

        Args:
            item: Item data to store
            condition_expression: Conditional expression for the put operation

        Returns:
            The stored item data

        Raises:
            TableMissingError: If the table does not exist
            ConditionalCheckFailedError: If condition check fails
            DALError: If DynamoDB operation fails
        """

        @self._handle_dynamodb_errors("PutItem")
        def _put_item():
            put_item_kwargs = {'Item': item}
            if condition_expression is not None:
                put_item_kwargs['ConditionExpression'] = condition_expression

            self.table.put_item(**put_item_kwargs)
            return item

        return _put_item()

    @tracer.capture_method
    def update_item(
        self,
        key: Dict[str, Any],
        update_expression: str,
        expression_attribute_values: Dict[str, Any],
        expression_attribute_names: Optional[Dict[str, str]] = None,
        condition_expression: Optional[Any] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Update an item in DynamoDB and return its new state.

        Args:
            key: Primary key of the item to update
            update_expression: Update expression
            expression_attribute_values: Expression attribute values
            expression_attribute_names: Expression attribute names
            condition_expression: Conditional expression for the update

        Returns:
            Updated item data (ALL_NEW)

        Raises:
            TableMissingError: If the table does not exist
            ConditionalCheckFailedError: If condition check fails
            DALError: If DynamoDB operation fails
        """

        @self._handle_dynamodb_errors("UpdateItem")
        def _update_item():
            update_kwargs = {
                'Key': key,
                'UpdateExpression': update_expression,
                'ExpressionAttributeValues': dict(expression_attribute_values),
                'ReturnValues': 'ALL_NEW',
            }

            if expression_attribute_names:
                update_kwargs['ExpressionAttributeNames'] = dict(expression_attribute_names)

            if condition_expression is not None:
                update_kwargs['ConditionExpression'] = condition_expression

            response = self.table.update_item(**update_kwargs)
            return response.get('Attributes')

        return _update_item()

    @tracer.capture_method
    def delete_item(self, key: Dict[str, Any], condition_expression: Optional[Any] = None) -> Optional[Dict[str, Any]]:
        """
        Delete an item from DynamoDB.

        Args:
            key: Primary key of the item to delete
            condition_expression: Conditional expression for the delete

        Returns:
            The item as it was before deletion (ALL_OLD), or None

        Raises:
            TableMissingError: If the table does not exist
            ConditionalCheckFailedError: If condition check fails
            DALError: If DynamoDB operation fails
        """

        @self._handle_dynamodb_errors("DeleteItem")
        def _delete_item():
            delete_kwargs = {
                'Key': key,
                'ReturnValues': 'ALL_OLD',
            }

            if condition_expression is not None:
                delete_kwargs['ConditionExpression'] = condition_expression

            response = self.table.delete_item(**delete_kwargs)
            return response.get('Attributes')

        return _delete_item()

    @tracer.capture_method
    def scan_items(
        self,
        limit: Optional[int] = None,
        exclusive_start_key: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Scan items from DynamoDB.

        Args:
            limit: Maximum number of items to evaluate
            exclusive_start_key: Pagination token

        Returns:
            Dictionary with 'items', 'count' and optional 'last_evaluated_key'

        Raises:
            TableMissingError: If the table does not exist
            DALError: If DynamoDB operation fails
        """

        @self._handle_dynamodb_errors("Scan")
        def _scan_items():
            scan_kwargs = {}

            if limit:
                scan_kwargs['Limit'] = limit

            if exclusive_start_key:
                scan_kwargs['ExclusiveStartKey'] = exclusive_start_key

            response = self.table.scan(**scan_kwargs)

            result = {
                'items': response.get('Items', []),
                'count': response.get('Count', 0),
            }

            if 'LastEvaluatedKey' in response:
                result['last_evaluated_key'] = response['LastEvaluatedKey']

            logger.debug("Scan completed successfully", extra={
                "table_name": self.table_name,
                "items_count": result['count'],
                "has_more_results": 'last_evaluated_key' in result,
            })

            return result

        return _scan_items()

    @tracer.capture_method
    def describe(self) -> Dict[str, Any]:
        """
        Describe the table.

        Returns:
            Table description with at least 'TableStatus'

        Raises:
            TableMissingError: If the table does not exist
            DALError: If DynamoDB operation fails
        """

        @self._handle_dynamodb_errors("DescribeTable")
        def _describe():
            self.table.reload()
            return {'TableStatus': self.table.table_status, 'ItemCount': self.table.item_count}

        return _describe()
