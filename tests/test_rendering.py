"""Tests for rich rendering helpers."""

from conftest import make_order
from order_dashboard.models import OrderItem, OrderStatus
from order_dashboard.rendering import (
    format_buckets,
    format_currency,
    format_filter_bar,
    format_order_detail,
    format_order_row,
    format_popular_items,
    format_timestamp,
)
from order_dashboard.statistics import Bucket, PopularItem
from datetime import date


def test_format_currency():
    assert format_currency(1234.4) == "$1,234"
    assert format_currency(0) == "$0"


def test_format_timestamp_falls_back_to_raw():
    assert format_timestamp("2024-06-15T10:05:00") == "2024/06/15 10:05"
    assert format_timestamp("soon") == "soon"
    assert format_timestamp(None) == "-"


def test_filter_bar_shows_counts():
    text = format_filter_bar({"all": 3, "pending": 2, "completed": 1}, "pending").plain
    assert "全部訂單 (3)" in text
    assert "待確認 (2)" in text
    assert "可取餐 (0)" in text


def test_order_row_marks_in_flight():
    order = make_order("ORD9", status=OrderStatus.READY, total=70)

    assert "更新中" not in format_order_row(order).plain
    row = format_order_row(order, in_flight=True).plain
    assert "ORD9" in row
    assert "$70" in row
    assert "更新中" in row


def test_order_detail_pickup_vs_delivery():
    pickup = format_order_detail(make_order(items=[OrderItem("滷肉飯", 35, 2, "🍚")])).plain
    assert "取餐方式: 自取" in pickup
    assert "滷肉飯 x2  $70" in pickup

    delivery = format_order_detail(make_order(delivery_address="台北市", admin_notes="請提早")).plain
    assert "取餐方式: 外送" in delivery
    assert "外送地址: 台北市" in delivery
    assert "店家備註: 請提早" in delivery


def test_popular_items_and_buckets_empty_states():
    assert format_popular_items([]).plain == "暫無銷售資料"
    assert format_buckets([]).plain == "暫無資料"


def test_buckets_scale_to_peak():
    buckets = [
        Bucket(date(2024, 6, 14), "2024-06-14", 50, 1, 1),
        Bucket(date(2024, 6, 15), "2024-06-15", 100, 2, 2),
    ]
    lines = format_buckets(buckets).plain.splitlines()
    assert lines[1].count("█") == 2 * lines[0].count("█")


def test_popular_items_ranked_lines():
    text = format_popular_items([PopularItem("雞肉飯", 5, 200, "🍗"), PopularItem("滷肉飯", 2, 70, "🍚")]).plain
    assert text.splitlines()[0].startswith(" 1. 🍗 雞肉飯")
