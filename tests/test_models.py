"""Tests for domain models."""

from datetime import datetime, timezone

import pytest

from order_dashboard.models import (
    Order,
    OrderItem,
    OrderStatus,
    is_forward_transition,
    parse_amount,
    parse_timestamp,
)


class TestOrderStatus:
    def test_parse_accepts_values_and_members(self):
        assert OrderStatus.parse("completed") is OrderStatus.COMPLETED
        assert OrderStatus.parse(" Ready ") is OrderStatus.READY
        assert OrderStatus.parse(OrderStatus.CANCELLED) is OrderStatus.CANCELLED

    def test_parse_unknown_raises(self):
        with pytest.raises(ValueError):
            OrderStatus.parse("shipped")

    def test_terminal_states(self):
        terminal = {status for status in OrderStatus if status.is_terminal}
        assert terminal == {OrderStatus.COMPLETED, OrderStatus.CANCELLED}


class TestForwardTransition:
    def test_canonical_path_is_forward(self):
        assert is_forward_transition(OrderStatus.PENDING, OrderStatus.CONFIRMED)
        assert is_forward_transition(OrderStatus.CONFIRMED, OrderStatus.PREPARING)
        assert is_forward_transition(OrderStatus.READY, OrderStatus.COMPLETED)

    def test_cancel_from_open_state_is_forward(self):
        assert is_forward_transition(OrderStatus.PREPARING, OrderStatus.CANCELLED)

    def test_backward_and_terminal_moves_are_corrections(self):
        assert not is_forward_transition(OrderStatus.READY, OrderStatus.PENDING)
        assert not is_forward_transition(OrderStatus.COMPLETED, OrderStatus.READY)
        assert not is_forward_transition(OrderStatus.CANCELLED, OrderStatus.PENDING)


class TestParsing:
    def test_parse_timestamp_utc_suffix(self):
        parsed = parse_timestamp("2024-06-15T02:00:00.000Z")
        assert parsed is not None
        assert parsed.astimezone(timezone.utc) == datetime(2024, 6, 15, 2, 0, tzinfo=timezone.utc)

    def test_parse_timestamp_naive_is_local(self):
        parsed = parse_timestamp("2024-06-15T10:30:00")
        assert parsed is not None
        assert (parsed.hour, parsed.minute) == (10, 30)

    @pytest.mark.parametrize("value", ["", "not a date", None, 12345])
    def test_parse_timestamp_bad_input(self, value):
        assert parse_timestamp(value) is None

    @pytest.mark.parametrize(
        "value,expected",
        [(100, 100.0), ("85.5", 85.5), (None, 0.0), ("abc", 0.0), (-5, 0.0), (True, 0.0)],
    )
    def test_parse_amount(self, value, expected):
        assert parse_amount(value) == expected


class TestOrder:
    def test_delivery_flag(self, order_factory):
        assert not order_factory().is_delivery
        assert order_factory(delivery_address="台北市大安區仁愛路四段50號").is_delivery

    def test_item_subtotal_and_count(self):
        order = Order(
            order_id="ORD1",
            customer_name="A",
            customer_phone="0911",
            items=(OrderItem("滷肉飯", 35.0, 2), OrderItem("雞肉飯", 40.0, 1)),
            total_amount=110.0,
            status=OrderStatus.PENDING,
        )
        assert [item.subtotal for item in order.items] == [70.0, 40.0]
        assert order.item_count == 3

    def test_to_dict_uses_wire_keys(self, order_factory):
        data = order_factory(admin_notes="VIP").to_dict()
        assert data["orderId"] == "ORD001"
        assert data["status"] == "pending"
        assert data["items"][0] == {"name": "滷肉飯", "price": 35.0, "quantity": 2, "icon": "🍚"}
        assert data["adminNotes"] == "VIP"
        assert "updatedAt" not in data
