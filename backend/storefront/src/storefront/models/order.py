"""Order and address records stored in DynamoDB."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AddressKind(str, Enum):
    """Role of an address attached to an order."""

    SHIPPING = "shipping"
    BILLING = "billing"


class OrderAddress(BaseModel):
    """An address record owned by one order.

    A new record is created for every confirmed payment; records are never
    updated in place.
    """

    model_config = ConfigDict(strict=True)

    address_id: str = Field(..., description="Unique address ID", examples=["ADDR-3F2A9C1B7E40"])
    order_id: str = Field(..., description="Order this address belongs to")
    kind: AddressKind
    name: str = Field(..., description="Customer display name")
    street: str
    city: str
    state: str | None = None
    postal_code: str
    country: str
    created_at: datetime


class Order(BaseModel):
    """An order as seen by the webhook receiver.

    Orders are created by the checkout flow; this service only reads
    created_at and sets the payment and address fields.
    """

    model_config = ConfigDict(strict=True)

    order_id: str = Field(..., description="Order ID from checkout metadata")
    user_id: str | None = Field(default=None, description="Owning user")
    is_paid: bool = False
    created_at: datetime
    updated_at: datetime | None = None
    shipping_address_id: str | None = None
    billing_address_id: str | None = None
