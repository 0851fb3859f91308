"""
Input models for order store operations.

Callers validate incoming payloads with these models before handing them to
the store.
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, Field


class CreateOrderRequest(BaseModel):
    """Request model for creating a new order."""

    customer_id: Annotated[str, Field(
        min_length=1,
        description='Identifier of the customer placing the order',
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
