"""
DynamoDB implementation of the order store.

Orders live in a single table keyed by ``orderId``. Every mutation is one
conditional request so concurrent writers are serialized by DynamoDB itself:
creates retry on id collision, updates compare-and-increment ``version``, and
deletes require the item to exist.
"""

from datetime import datetime, timezone
from decimal import Decimal, DecimalException, InvalidOperation
from typing import Any, Dict, Optional
from uuid import uuid4

from aws_lambda_powertools.metrics import MetricUnit
from boto3.dynamodb.conditions import Attr
from boto3.dynamodb.types import DYNAMODB_CONTEXT

from order_store.dal import BaseOrderStore
from order_store.dal.dynamodb_handler import DynamoDBHandler
from order_store.exceptions import (
    ConditionalCheckFailedError,
    CorruptContinuationKeyError,
    CorruptDeleteResponseError,
    CouldNotCreateOrderError,
    DALError,
    DeleteConflictError,
    InvalidArgumentError,
    OrderNotFoundError,
    UpdateConflictError,
)
from order_store.models.input import CreateOrderRequest
from order_store.models.order import Order, OrderPage
from order_store.utils.observability import logger, metrics, tracer

ORDER_ID = 'orderId'
UPDATE_EXPRESSION = 'SET customerId = :cid, preTaxAmount = :pre, postTaxAmount = :post ADD #version :one'

DEFAULT_PAGE_SIZE = 10
DEFAULT_MAX_CREATE_ATTEMPTS = 10


class OrderStore(BaseOrderStore):
    """Order CRUD with optimistic locking and paginated listing over DynamoDB."""

    def __init__(
        self,
        handler: DynamoDBHandler,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_create_attempts: int = DEFAULT_MAX_CREATE_ATTEMPTS,
    ) -> None:
        """
        Initialize the order store.

        Args:
            handler: DynamoDB adapter for the orders table
            page_size: Number of orders scanned per listing page
            max_create_attempts: Attempts made to find an unused order id
        """
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        if max_create_attempts < 1:
            raise ValueError("max_create_attempts must be at least 1")

        super().__init__(handler.table_name)
        self.handler = handler
        self.page_size = page_size
        self.max_create_attempts = max_create_attempts

    @tracer.capture_method
    def get_order(self, order_id: str) -> Order:
        """
        Retrieve an order by its ID.

        Raises:
            InvalidArgumentError: If order_id is empty
            OrderNotFoundError: If no order has this ID
            TableMissingError: If the orders table does not exist
        """
        _require_text(order_id, 'order_id')

        item = self.handler.get_item(key={ORDER_ID: order_id}, consistent_read=True)
        if not item:
            logger.info("Order not found", extra={"order_id": order_id})
            raise OrderNotFoundError(order_id)

        tracer.put_annotation('order_id', order_id)
        return self._item_to_order(item)

    @tracer.capture_method
    def get_orders(self, exclusive_start_order_id: Optional[str] = None) -> OrderPage:
        """
        Return one page of orders, resuming after ``exclusive_start_order_id``.

        Orders come back in table scan order. ``last_evaluated_key`` on the
        returned page is the token for the next call and is only set when the
        scan reports more data.

        Raises:
            TableMissingError: If the orders table does not exist
            CorruptContinuationKeyError: If DynamoDB returns a continuation key
                without a usable orderId
        """
        exclusive_start_key = None
        if exclusive_start_order_id:
            exclusive_start_key = {ORDER_ID: exclusive_start_order_id}

        result = self.handler.scan_items(limit=self.page_size, exclusive_start_key=exclusive_start_key)
        orders = [self._item_to_order(item) for item in result['items']]

        last_evaluated_key = None
        raw_key = result.get('last_evaluated_key')
        if raw_key:
            last_evaluated_key = raw_key.get(ORDER_ID)
            if not isinstance(last_evaluated_key, str) or not last_evaluated_key:
                logger.error("Scan returned an invalid continuation key", extra={
                    "table_name": self.table_name,
                    "last_evaluated_key": raw_key,
                })
                raise CorruptContinuationKeyError(table_name=self.table_name, last_evaluated_key=raw_key)

        logger.info("Listed orders", extra={
            "table_name": self.table_name,
            "orders_count": len(orders),
            "has_more_results": last_evaluated_key is not None,
        })
        return OrderPage(orders=orders, last_evaluated_key=last_evaluated_key)

    @tracer.capture_method
    def create_order(self, request: CreateOrderRequest) -> Order:
        """
        Create an order under a freshly generated ID.

        The put is conditioned on the ID being unused. A collision regenerates
        the ID and tries again, up to ``max_create_attempts`` times.

        Returns:
            The order exactly as written, with version 1

        Raises:
            InvalidArgumentError: If a required request field is missing
            CouldNotCreateOrderError: If every attempt collided
            TableMissingError: If the orders table does not exist
        """
        if request is None:
            raise InvalidArgumentError("CreateOrderRequest was null")

        customer_id = _require_text(getattr(request, 'customer_id', None), 'customer_id')
        pre_tax_amount = _require_amount(getattr(request, 'pre_tax_amount', None), 'pre_tax_amount')
        post_tax_amount = _require_amount(getattr(request, 'post_tax_amount', None), 'post_tax_amount')

        for attempt in range(1, self.max_create_attempts + 1):
            order = Order(
                order_id=str(uuid4()),
                customer_id=customer_id,
                pre_tax_amount=pre_tax_amount,
                post_tax_amount=post_tax_amount,
                version=1,
            )
            try:
                self.handler.put_item(
                    item=self._order_to_item(order),
                    condition_expression=Attr(ORDER_ID).not_exists(),
                )
            except ConditionalCheckFailedError:
                metrics.add_metric(name="OrderCreateCollision", unit=MetricUnit.Count, value=1)
                logger.warning("Order id collision, regenerating", extra={
                    "order_id": order.order_id,
                    "attempt": attempt,
                })
                continue

            metrics.add_metric(name="OrderCreated", unit=MetricUnit.Count, value=1)
            tracer.put_annotation('order_id', order.order_id)
            logger.info("Order created", extra={"order_id": order.order_id, "attempt": attempt})
            return order

        logger.error("Could not create order", extra={
            "table_name": self.table_name,
            "attempts": self.max_create_attempts,
        })
        raise CouldNotCreateOrderError(table_name=self.table_name, attempts=self.max_create_attempts)

    @tracer.capture_method
    def update_order(self, order: Order) -> Order:
        """
        Replace the mutable fields of an order if its version still matches.

        The existence check, the version comparison, the field writes and the
        version increment are a single conditional UpdateItem.

        Returns:
            The order after the update, carrying the incremented version

        Raises:
            InvalidArgumentError: If a required field is missing
            UpdateConflictError: If the order is gone or its version moved on
            TableMissingError: If the orders table does not exist
        """
        if order is None:
            raise InvalidArgumentError("Order to update was null")

        order_id = _require_text(getattr(order, 'order_id', None), 'order_id')
        customer_id = _require_text(getattr(order, 'customer_id', None), 'customer_id')
        pre_tax_amount = _require_amount(getattr(order, 'pre_tax_amount', None), 'pre_tax_amount')
        post_tax_amount = _require_amount(getattr(order, 'post_tax_amount', None), 'post_tax_amount')
        version = getattr(order, 'version', None)
        if version is None:
            raise InvalidArgumentError("version was null", field='version')

        try:
            attributes = self.handler.update_item(
                key={ORDER_ID: order_id},
                update_expression=UPDATE_EXPRESSION,
                expression_attribute_values={
                    ':cid': customer_id,
                    ':pre': pre_tax_amount,
                    ':post': post_tax_amount,
                    ':one': 1,
                },
                expression_attribute_names={'#version': 'version'},
                condition_expression=Attr(ORDER_ID).exists() & Attr('version').eq(version),
            )
        except ConditionalCheckFailedError as e:
            metrics.add_metric(name="OrderUpdateConflict", unit=MetricUnit.Count, value=1)
            logger.info("Order missing or version mismatch", extra={
                "order_id": order_id,
                "expected_version": version,
            })
            raise UpdateConflictError(order_id=order_id, expected_version=version) from e

        updated = self._item_to_order(attributes)
        metrics.add_metric(name="OrderUpdated", unit=MetricUnit.Count, value=1)
        tracer.put_annotation('order_id', order_id)
        logger.info("Order updated", extra={"order_id": order_id, "version": updated.version})
        return updated

    @tracer.capture_method
    def delete_order(self, order_id: str) -> Order:
        """
        Delete an order and return its state from just before the delete.

        Raises:
            InvalidArgumentError: If order_id is empty
            DeleteConflictError: If the order is already gone
            TableMissingError: If the orders table does not exist
            CorruptDeleteResponseError: If DynamoDB returns no prior state
        """
        _require_text(order_id, 'order_id')

        try:
            attributes = self.handler.delete_item(
                key={ORDER_ID: order_id},
                condition_expression=Attr(ORDER_ID).exists(),
            )
        except ConditionalCheckFailedError as e:
            metrics.add_metric(name="OrderDeleteConflict", unit=MetricUnit.Count, value=1)
            logger.info("Competing delete or order missing", extra={"order_id": order_id})
            raise DeleteConflictError(order_id) from e

        if not attributes:
            logger.error("Delete succeeded without prior item state", extra={"order_id": order_id})
            raise CorruptDeleteResponseError(table_name=self.table_name, order_id=order_id)

        metrics.add_metric(name="OrderDeleted", unit=MetricUnit.Count, value=1)
        tracer.put_annotation('order_id', order_id)
        logger.info("Order deleted", extra={"order_id": order_id})
        return self._item_to_order(attributes)

    @tracer.capture_method
    def health_check(self) -> Dict[str, str]:
        """
        Perform a health check on the orders table.

        Returns:
            Dictionary with health check results
        """
        timestamp = datetime.now(timezone.utc).isoformat()
        try:
            description = self.handler.describe()
        except DALError as e:
            logger.error("DynamoDB health check failed", extra={"error_code": e.error_code})
            return {
                'status': 'unhealthy',
                'table': self.table_name,
                'error': e.error_code,
                'timestamp': timestamp,
            }

        table_status = description.get('TableStatus', 'UNKNOWN')
        logger.debug("DynamoDB health check completed", extra={"table_status": table_status})
        return {
            'status': 'healthy' if table_status == 'ACTIVE' else 'unhealthy',
            'table': self.table_name,
            'timestamp': timestamp,
        }

    def _order_to_item(self, order: Order) -> Dict[str, Any]:
        """Convert an Order into the DynamoDB item written to the table."""
        return {
            ORDER_ID: order.order_id,
            'customerId': order.customer_id,
            'preTaxAmount': order.pre_tax_amount,
            'postTaxAmount': order.post_tax_amount,
            'version': order.version,
        }

    def _item_to_order(self, item: Dict[str, Any]) -> Order:
        """
        Convert a DynamoDB item into an Order.

        Raises:
            DALError: If the item lacks required attributes
        """
        try:
            return Order(
                order_id=item[ORDER_ID],
                customer_id=item['customerId'],
                pre_tax_amount=Decimal(str(item['preTaxAmount'])),
                post_tax_amount=Decimal(str(item['postTaxAmount'])),
                version=int(item['version']),
            )
        except (KeyError, TypeError, ValueError, InvalidOperation) as e:
            logger.error(f"Failed to convert DynamoDB item to Order: {e}", extra={"item": item})
            raise DALError(
                message=f"Invalid order data in database: {e}",
                operation="ConvertItem",
                table_name=self.table_name,
                error_code="INVALID_ORDER_RECORD",
            ) from e


def _require_text(value: Optional[str], field: str) -> str:
    if not value:
        raise InvalidArgumentError(f"{field} was null or empty", field=field)
    return value


def _require_amount(value: Optional[Decimal], field: str) -> Decimal:
    if value is None:
        raise InvalidArgumentError(f"{field} was null", field=field)
    try:
        # DynamoDB numbers hold at most 38 significant digits
        amount = DYNAMODB_CONTEXT.create_decimal(value)
    except (DecimalException, TypeError) as e:
        raise InvalidArgumentError(f"{field} cannot be stored exactly: {value}", field=field) from e
    if not amount.is_finite():
        raise InvalidArgumentError(f"{field} must be a finite number", field=field)
    return value
