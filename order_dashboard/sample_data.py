"""Generated demo orders and an in-memory backend that serves them."""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any

from order_dashboard.constant import SAMPLE_ADDRESSES, SAMPLE_CUSTOMERS, SAMPLE_NOTES
from order_dashboard.data import MENU_ITEMS
from order_dashboard.models import ApiResponse, Order, OrderItem, OrderStatus

logger = logging.getLogger(__name__)

_SAMPLE_STATUSES = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.COMPLETED,
]


def _iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def generate_sample_orders(count: int = 100, seed: int | None = None, now: datetime | None = None) -> list[Order]:
    """Random orders spread over the last 30 days, newest first."""
    rng = random.Random(seed)
    now = (now or datetime.now()).astimezone()
    orders: list[Order] = []

    for idx in range(count):
        created = (now - timedelta(days=rng.randrange(30))).replace(
            hour=10 + rng.randrange(10), minute=rng.randrange(60), second=0, microsecond=0
        )
        if created > now:
            created = now - timedelta(minutes=rng.randrange(1, 60))

        items: list[OrderItem] = []
        for _ in range(rng.randint(1, 4)):
            menu_item = rng.choice(MENU_ITEMS)
            items.append(
                OrderItem(name=menu_item.name, price=menu_item.price, quantity=rng.randint(1, 3), icon=menu_item.icon)
            )

        status = rng.choice(_SAMPLE_STATUSES)
        roll = rng.random()
        if roll > 0.7:
            notes = SAMPLE_NOTES[0]
        elif roll > 0.35:
            notes = SAMPLE_NOTES[1]
        else:
            notes = ""

        orders.append(
            Order(
                order_id=f"ORD{idx:03d}",
                customer_name=rng.choice(SAMPLE_CUSTOMERS),
                customer_phone=f"09{rng.randrange(10_000_000, 100_000_000):08d}",
                items=tuple(items),
                total_amount=sum(item.subtotal for item in items),
                status=status,
                pickup_time=_iso(created + timedelta(minutes=30)),
                delivery_address=rng.choice(SAMPLE_ADDRESSES),
                notes=notes,
                created_at=_iso(created),
                confirmed_at=_iso(created + timedelta(minutes=5)) if status is not OrderStatus.PENDING else None,
            )
        )

    orders.sort(key=lambda order: order.created_at, reverse=True)
    return orders


class SampleOrderSource:
    """Offline stand-in for the backend, used by ``--demo``."""

    def __init__(self, orders: list[Order] | None = None) -> None:
        self._orders: dict[str, Order] = {}
        for order in orders if orders is not None else generate_sample_orders():
            self._orders[order.order_id] = order

    def get_orders(self) -> ApiResponse[list[Order]]:
        return ApiResponse(success=True, data=list(self._orders.values()))

    def update_order_status(self, order_id: str, status: OrderStatus) -> ApiResponse[dict[str, Any]]:
        order = self._orders.get(order_id)
        if order is None:
            return ApiResponse.failure(f"Order not found: {order_id}", data={"orderId": order_id, "status": status.value})
        self._orders[order_id] = replace(order, status=status)
        logger.debug("Sample source set %s to %s", order_id, status.value)
        return ApiResponse(success=True, data={"orderId": order_id, "status": status.value})

    def confirm_order(self, order_id: str, admin_notes: str) -> ApiResponse[dict[str, Any]]:
        order = self._orders.get(order_id)
        if order is None:
            return ApiResponse.failure(f"Order not found: {order_id}", data={"orderId": order_id})
        self._orders[order_id] = replace(
            order,
            status=OrderStatus.CONFIRMED,
            admin_notes=admin_notes,
            confirmed_at=_iso(datetime.now()),
        )
        return ApiResponse(success=True, data={"message": "Order confirmed"}, message="Order confirmed")
