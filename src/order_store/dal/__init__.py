"""
Data Access Layer (DAL) for the order store.

This module provides the order store interface and the factory that builds a
DynamoDB-backed store from explicit configuration.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from order_store.models.input import CreateOrderRequest
from order_store.models.order import Order, OrderPage

if TYPE_CHECKING:
    from order_store.dal.order_store import OrderStore
    from order_store.models.env_vars import OrderStoreEnvVars


@runtime_checkable
class OrderStoreHandler(Protocol):
    """Protocol defining the order store interface."""

    def get_order(self, order_id: str) -> Order:
        """Retrieve an order by its ID."""
        ...

    def get_orders(self, exclusive_start_order_id: str | None = None) -> OrderPage:
        """Return one page of orders."""
        ...

    def create_order(self, request: CreateOrderRequest) -> Order:
        """Create a new order."""
        ...

    def update_order(self, order: Order) -> Order:
        """Update an existing order under optimistic locking."""
        ...

    def delete_order(self, order_id: str) -> Order:
        """Delete an order and return its last state."""
        ...


class BaseOrderStore(ABC):
    """Abstract base class for order store implementations."""

    def __init__(self, table_name: str) -> None:
        """
        Initialize the order store.

        Args:
            table_name: Name of the database table/collection
        """
        self.table_name = table_name

    @abstractmethod
    def get_order(self, order_id: str) -> Order:
        """Retrieve an order by its ID."""
        pass

    @abstractmethod
    def get_orders(self, exclusive_start_order_id: str | None = None) -> OrderPage:
        """Return one page of orders."""
        pass

    @abstractmethod
    def create_order(self, request: CreateOrderRequest) -> Order:
        """Create a new order."""
        pass

    @abstractmethod
    def update_order(self, order: Order) -> Order:
        """Update an existing order under optimistic locking."""
        pass

    @abstractmethod
    def delete_order(self, order_id: str) -> Order:
        """Delete an order and return its last state."""
        pass

    @abstractmethod
    def health_check(self) -> dict[str, str]:
        """Perform a health check on the data store."""
        pass


def get_order_store(env_vars: Optional['OrderStoreEnvVars'] = None) -> 'OrderStore':
    """
    Factory function to build the DynamoDB order store.

    Args:
        env_vars: Store configuration, read from the environment when omitted

    Returns:
        Order store instance
    """
    # Import here to avoid circular imports
    from order_store.dal.dynamodb_handler import DynamoDBHandler
    from order_store.dal.order_store import OrderStore
    from order_store.models.env_vars import get_store_env_vars

    if env_vars is None:
        env_vars = get_store_env_vars()

    handler = DynamoDBHandler(
        table_name=env_vars.TABLE_NAME,
        region_name=env_vars.AWS_REGION,
        endpoint_url=env_vars.ENDPOINT_OVERRIDE,
    )
    return OrderStore(
        handler=handler,
        page_size=env_vars.PAGE_SIZE,
        max_create_attempts=env_vars.MAX_CREATE_ATTEMPTS,
    )


__all__ = [
    'OrderStoreHandler',
    'BaseOrderStore',
    'get_order_store',
]
