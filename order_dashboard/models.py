"""Domain models for order-dashboard."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class OrderStatus(str, Enum):
    """Fulfillment stage of an order."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.COMPLETED, OrderStatus.CANCELLED)

    @classmethod
    def parse(cls, value: str | OrderStatus) -> OrderStatus:
        """Resolve a status value, raising ValueError for unknown names."""
        if isinstance(value, OrderStatus):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown order status: {value!r}") from None


# Canonical forward path; cancelled sits outside it.
FORWARD_PATH: tuple[OrderStatus, ...] = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.COMPLETED,
)


def is_forward_transition(old: OrderStatus, new: OrderStatus) -> bool:
    """Whether moving from old to new follows the usual lifecycle.

    Staff may set any status from any other; this only tells a normal move
    apart from a correction.
    """
    if old.is_terminal:
        return False
    if new is OrderStatus.CANCELLED:
        return True
    if old is OrderStatus.CANCELLED or new not in FORWARD_PATH:
        return False
    return FORWARD_PATH.index(new) > FORWARD_PATH.index(old)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp into local time, or None when unusable.

    Naive values are taken as local time.
    """
    if isinstance(value, datetime):
        return value.astimezone()
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw).astimezone()
    except ValueError:
        return None


def parse_amount(value: Any) -> float:
    """Coerce a money value to a non-negative float; bad input becomes 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if amount != amount or amount < 0:
        return 0.0
    return amount


@dataclass(frozen=True)
class MenuItem:
    """A catalog dish."""

    name: str
    price: float
    icon: str


@dataclass(frozen=True)
class OrderItem:
    """One line item of an order."""

    name: str
    price: float
    quantity: int
    icon: str = ""

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "price": self.price,
            "quantity": self.quantity,
            "icon": self.icon,
        }


@dataclass(frozen=True)
class Order:
    """A customer order as fetched from the backend."""

    order_id: str
    customer_name: str
    customer_phone: str
    items: tuple[OrderItem, ...]
    total_amount: float
    status: OrderStatus
    pickup_time: str = ""
    delivery_address: str = ""
    notes: str = ""
    created_at: str = ""
    confirmed_at: str | None = None
    admin_notes: str = ""
    updated_at: str | None = None

    @property
    def is_delivery(self) -> bool:
        return bool(self.delivery_address.strip())

    @property
    def created(self) -> datetime | None:
        return parse_timestamp(self.created_at)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "orderId": self.order_id,
            "customerName": self.customer_name,
            "customerPhone": self.customer_phone,
            "items": [item.to_dict() for item in self.items],
            "totalAmount": self.total_amount,
            "status": self.status.value,
            "pickupTime": self.pickup_time,
            "deliveryAddress": self.delivery_address,
            "notes": self.notes,
            "createdAt": self.created_at,
            "confirmedAt": self.confirmed_at,
        }
        if self.admin_notes:
            result["adminNotes"] = self.admin_notes
        if self.updated_at is not None:
            result["updatedAt"] = self.updated_at
        return result


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """Uniform backend envelope."""

    success: bool
    data: T
    message: str = ""

    @classmethod
    def failure(cls, message: str, data: Any = None) -> ApiResponse[Any]:
        return cls(success=False, data=data, message=message)


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a store operation, shown to staff as a notification."""

    ok: bool
    message: str = ""
