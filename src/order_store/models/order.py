"""
Order domain models.

This module defines the Order entity persisted by the order store and the
OrderPage read model returned by paginated listing.
"""

from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, Field


class Order(BaseModel):
    """Core Order domain model."""

    order_id: Annotated[str, Field(
        min_length=1,
        description='Unique identifier for the order, generated by the store',
        examples=['4f1c2d7e-9a55-4a8e-b3a1-0e8f3f0c6b21']
    )]

    customer_id: Annotated[str, Field(
        min_length=1,
        description='Identifier of the customer who owns the order',
        examples=['C1']
    )]

    pre_tax_amount: Annotated[Decimal, Field(
        max_digits=38,
        description='Order amount before tax',
        examples=[Decimal('100.00')]
    )]

    post_tax_amount: Annotated[Decimal, Field(
        max_digits=38,
        description='Order amount after tax',
        examples=[Decimal('108.00')]
    )]

    version: Annotated[int, Field(
        ge=1,
        description='Optimistic locking counter, incremented on every update',
        examples=[1]
    )]


class OrderPage(BaseModel):
    """A single page of orders returned by a table scan."""

    orders: Annotated[list[Order], Field(
        default_factory=list,
        description='Orders in storage scan order'
    )]

    last_evaluated_key: Annotated[Optional[str], Field(
        default=None,
        description='orderId to resume the scan after, present only when more results exist'
    )] = None

    @property
    def has_more(self) -> bool:
        """Check if another page can be requested."""
        return self.last_evaluated_key is not None
