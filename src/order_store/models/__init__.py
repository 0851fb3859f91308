"""
Order Store Models Package

This package contains the Pydantic models used by the order store: the Order
domain model, the OrderPage read model, request models and the environment
configuration model.
"""

from .input import CreateOrderRequest
from .order import Order, OrderPage

__all__ = [
    # Input models
    "CreateOrderRequest",

    # Domain models
    "Order",
    "OrderPage",
]
