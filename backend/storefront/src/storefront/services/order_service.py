"""Order payment confirmation backed by DynamoDB.

Orders are created by the checkout flow. This service marks an order paid
and attaches freshly created shipping and billing address records, writing
all three items in one DynamoDB transaction.
"""

import datetime as dt
import logging
import uuid
from typing import Any

from botocore.exceptions import ClientError

from storefront.models import (
    Address,
    AddressKind,
    DependencyError,
    ErrorCode,
    Order,
    OrderAddress,
)

from .dynamodb import DynamoDBService, TransactionCancelledError

logger = logging.getLogger(__name__)


class OrderService:
    """Service for reading orders and confirming their payment."""

    ORDERS_TABLE = "orders"
    ADDRESSES_TABLE = "order-addresses"

    def __init__(self, db: "DynamoDBService") -> None:
        """Initialize order service.

        Args:
            db: DynamoDB service instance
        """
        self.db = db

    def _generate_address_id(self) -> str:
        """Generate a unique address ID like ADDR-3F2A9C1B7E40."""
        return f"ADDR-{uuid.uuid4().hex[:12].upper()}"

    def get_order(self, order_id: str) -> Order | None:
        """Get an order by ID.

        Args:
            order_id: Order ID

        Returns:
            Order if found, None otherwise
        """
        item = self.db.get_item(self.ORDERS_TABLE, {"order_id": order_id})
        return self._item_to_order(item) if item else None

    def mark_paid(
        self,
        order_id: str,
        *,
        customer_name: str,
        shipping_address: Address,
        billing_address: Address,
    ) -> Order:
        """Mark an order paid and create its shipping and billing addresses.

        Every call creates two new address records, so a redelivered event
        leaves the earlier records orphaned rather than updating them.

        Args:
            order_id: Order to confirm
            customer_name: Display name stored on both addresses
            shipping_address: Shipping address from the checkout session
            billing_address: Billing address from the checkout session

        Returns:
            The updated Order.

        Raises:
            DependencyError: If the order does not exist or DynamoDB fails.
        """
        now = dt.datetime.now(dt.UTC)

        shipping = self._build_address(
            order_id, AddressKind.SHIPPING, customer_name, shipping_address, now
        )
        billing = self._build_address(
            order_id, AddressKind.BILLING, customer_name, billing_address, now
        )

        transact_items = [
            {
                "Put": {
                    "TableName": self.db._table_name(self.ADDRESSES_TABLE),
                    "Item": self._address_to_attributes(address),
                    "ConditionExpression": "attribute_not_exists(address_id)",
                }
            }
            for address in (shipping, billing)
        ]
        transact_items.append(
            {
                "Update": {
                    "TableName": self.db._table_name(self.ORDERS_TABLE),
                    "Key": {"order_id": {"S": order_id}},
                    "UpdateExpression": (
                        "SET is_paid = :paid, shipping_address_id = :ship, "
                        "billing_address_id = :bill, updated_at = :now"
                    ),
                    "ConditionExpression": "attribute_exists(order_id)",
                    "ExpressionAttributeValues": {
                        ":paid": {"BOOL": True},
                        ":ship": {"S": shipping.address_id},
                        ":bill": {"S": billing.address_id},
                        ":now": {"S": now.isoformat()},
                    },
                }
            }
        )

        try:
            self.db.transact_write(transact_items)
        except TransactionCancelledError as e:
            # The order update is the last item; its condition guards existence
            if e.reasons and e.reasons[-1] == "ConditionalCheckFailed":
                logger.warning("Order %s not found, payment not recorded", order_id)
                raise DependencyError(
                    ErrorCode.ORDER_NOT_FOUND, details={"order_id": order_id}
                ) from e
            logger.error("Order %s update cancelled: %s", order_id, e.reasons)
            raise DependencyError(
                ErrorCode.ORDER_UPDATE_FAILED,
                details={"order_id": order_id, "reasons": ",".join(e.reasons)},
            ) from e
        except ClientError as e:
            logger.error("Failed to update order %s: %s", order_id, e)
            raise DependencyError(
                ErrorCode.ORDER_UPDATE_FAILED, details={"order_id": order_id}
            ) from e

        logger.info(
            "Order %s marked paid (shipping=%s, billing=%s)",
            order_id,
            shipping.address_id,
            billing.address_id,
        )

        try:
            order = self.get_order(order_id)
        except ClientError as e:
            raise DependencyError(
                ErrorCode.ORDER_UPDATE_FAILED, details={"order_id": order_id}
            ) from e
        if order is None:
            raise DependencyError(
                ErrorCode.ORDER_NOT_FOUND, details={"order_id": order_id}
            )
        return order

    def get_address(self, address_id: str) -> OrderAddress | None:
        """Get an address record by ID."""
        item = self.db.get_item(self.ADDRESSES_TABLE, {"address_id": address_id})
        return self._item_to_address(item) if item else None

    def _build_address(
        self,
        order_id: str,
        kind: AddressKind,
        name: str,
        address: Address,
        created_at: dt.datetime,
    ) -> OrderAddress:
        return OrderAddress(
            address_id=self._generate_address_id(),
            order_id=order_id,
            kind=kind,
            name=name,
            street=address.street,
            city=address.city,
            state=address.state,
            postal_code=address.postal_code,
            country=address.country,
            created_at=created_at,
        )

    def _address_to_attributes(self, address: OrderAddress) -> dict[str, Any]:
        """Convert OrderAddress to low-level DynamoDB attribute values."""
        item: dict[str, Any] = {
            "address_id": {"S": address.address_id},
            "order_id": {"S": address.order_id},
            "kind": {"S": address.kind.value},
            "name": {"S": address.name},
            "street": {"S": address.street},
            "city": {"S": address.city},
            "postal_code": {"S": address.postal_code},
            "country": {"S": address.country},
            "created_at": {"S": address.created_at.isoformat()},
        }
        if address.state:
            item["state"] = {"S": address.state}
        return item

    def _item_to_address(self, item: dict[str, Any]) -> OrderAddress:
        """Convert DynamoDB item to OrderAddress model."""
        return OrderAddress(
            address_id=item["address_id"],
            order_id=item["order_id"],
            kind=AddressKind(item["kind"]),
            name=item["name"],
            street=item["street"],
            city=item["city"],
            state=item.get("state"),
            postal_code=item["postal_code"],
            country=item["country"],
            created_at=dt.datetime.fromisoformat(item["created_at"]),
        )

    def _item_to_order(self, item: dict[str, Any]) -> Order:
        """Convert DynamoDB item to Order model."""
        return Order(
            order_id=item["order_id"],
            user_id=item.get("user_id"),
            is_paid=bool(item.get("is_paid", False)),
            created_at=dt.datetime.fromisoformat(item["created_at"]),
            updated_at=(
                dt.datetime.fromisoformat(item["updated_at"])
                if item.get("updated_at")
                else None
            ),
            shipping_address_id=item.get("shipping_address_id"),
            billing_address_id=item.get("billing_address_id"),
        )
