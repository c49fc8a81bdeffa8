"""Pytest fixtures for order-dashboard tests."""

from datetime import datetime

import pytest

from order_dashboard.models import ApiResponse, Order, OrderItem, OrderStatus


def make_order(
    order_id="ORD001",
    status=OrderStatus.PENDING,
    total=100.0,
    phone="0900000001",
    created_at="2024-06-15T10:00:00",
    items=None,
    name="王小明",
    **extra,
):
    if items is None:
        items = (OrderItem(name="滷肉飯", price=35.0, quantity=2, icon="🍚"),)
    return Order(
        order_id=order_id,
        customer_name=name,
        customer_phone=phone,
        items=tuple(items),
        total_amount=total,
        status=status,
        created_at=created_at,
        **extra,
    )


class FakeSource:
    """In-memory order source that records every call."""

    def __init__(self, orders=None, fail_with=None):
        self.orders = list(orders or [])
        self.fail_with = fail_with
        self.calls = []

    def get_orders(self):
        self.calls.append(("getOrders",))
        if self.fail_with:
            return ApiResponse.failure(self.fail_with, data=[])
        return ApiResponse(success=True, data=list(self.orders))

    def update_order_status(self, order_id, status):
        self.calls.append(("updateOrderStatus", order_id, status))
        if self.fail_with:
            return ApiResponse.failure(self.fail_with, data={"orderId": order_id, "status": status.value})
        return ApiResponse(success=True, data={"orderId": order_id, "status": status.value})

    def confirm_order(self, order_id, admin_notes):
        self.calls.append(("confirmOrder", order_id, admin_notes))
        if self.fail_with:
            return ApiResponse.failure(self.fail_with, data={"orderId": order_id})
        return ApiResponse(success=True, data={"message": "ok"})


@pytest.fixture
def order_factory():
    return make_order


@pytest.fixture
def now():
    """Fixed local "now": 2024-06-15 12:00."""
    return datetime(2024, 6, 15, 12, 0).astimezone()
