"""
DynamoDB Order Store.

A data access layer for orders kept in a single DynamoDB table:

- models: Pydantic domain, request and configuration models
- dal: the DynamoDB adapter and the order store built on it
- exceptions: typed errors raised by every store operation

Mutations are conditional writes: creates retry on id collision, updates use
optimistic locking on ``version``, deletes require the order to exist.
"""

__version__ = "1.0.0"

from order_store.dal import OrderStoreHandler, get_order_store
from order_store.dal.dynamodb_handler import DynamoDBHandler
from order_store.dal.order_store import OrderStore
from order_store.exceptions import (
    BaseServiceError,
    CorruptContinuationKeyError,
    CorruptDeleteResponseError,
    CouldNotCreateOrderError,
    DALError,
    DeleteConflictError,
    InvalidArgumentError,
    OrderNotFoundError,
    TableMissingError,
    UpdateConflictError,
)
from order_store.models.input import CreateOrderRequest
from order_store.models.order import Order, OrderPage
from order_store.utils.observability import metrics

__all__ = [
    "Order",
    "OrderPage",
    "CreateOrderRequest",
    "OrderStore",
    "OrderStoreHandler",
    "DynamoDBHandler",
    "get_order_store",
    "metrics",
    "BaseServiceError",
    "DALError",
    "InvalidArgumentError",
    "OrderNotFoundError",
    "TableMissingError",
    "CouldNotCreateOrderError",
    "UpdateConflictError",
    "DeleteConflictError",
    "CorruptContinuationKeyError",
    "CorruptDeleteResponseError",
]
