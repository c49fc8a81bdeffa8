"""Rendering helpers that turn orders and statistics into rich Text."""

from __future__ import annotations

from rich.text import Text

from order_dashboard.constant import STATUS_BADGE_STYLES
from order_dashboard.data import STATUS_FILTERS, format_items_text, status_label
from order_dashboard.models import Order, OrderStatus, parse_timestamp
from order_dashboard.statistics import Bucket, PopularItem, SalesSummary

_BAR_WIDTH = 24


def badge_style(status: OrderStatus) -> str:
    """Return a consistent badge style for a status tag."""
    return STATUS_BADGE_STYLES.get(status.value, "bold")


def format_currency(amount: float) -> str:
    return f"${amount:,.0f}"


def format_timestamp(value: str | None) -> str:
    """Local "YYYY/MM/DD HH:MM", or the raw value when it cannot be parsed."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return value or "-"
    return parsed.strftime("%Y/%m/%d %H:%M")


def format_status_badge(status: OrderStatus) -> Text:
    return Text(f" {status_label(status)} ", style=badge_style(status))


def format_filter_bar(counts: dict[str, int], active: str) -> Text:
    text = Text()
    for idx, value in enumerate(STATUS_FILTERS):
        if idx > 0:
            text.append("  ")
        label = f"{status_label(value)} ({counts.get(value, 0)})"
        text.append(label, style="bold reverse" if value == active else "dim")
    return text


def format_order_row(order: Order, in_flight: bool = False) -> Text:
    """One-line summary for the order list."""
    text = Text()
    text.append_text(format_status_badge(order.status))
    text.append(f" {order.order_id} {order.customer_name} ")
    text.append(format_currency(order.total_amount), style="bold green")
    text.append(f"  {format_items_text(order.items)}", style="dim")
    if in_flight:
        text.append("  更新中...", style="italic yellow")
    return text


def format_order_detail(order: Order) -> Text:
    """Full card for the selected order."""
    text = Text()
    text.append(order.order_id, style="bold")
    text.append("  ")
    text.append_text(format_status_badge(order.status))
    text.append(f"\n{order.customer_name} • {order.customer_phone}")
    text.append(f"\n建立時間: {format_timestamp(order.created_at)}", style="dim")

    text.append("\n\n訂單內容\n", style="bold")
    if not order.items:
        text.append("  (無品項)\n", style="dim")
    for item in order.items:
        text.append(f"  {item.icon} {item.name} x{item.quantity}  {format_currency(item.subtotal)}\n")
    text.append("總金額: ", style="bold")
    text.append(format_currency(order.total_amount), style="bold green")

    text.append(f"\n\n取餐時間: {format_timestamp(order.pickup_time)}")
    text.append(f"\n取餐方式: {'外送' if order.is_delivery else '自取'}")
    if order.is_delivery:
        text.append(f"\n外送地址: {order.delivery_address}")
    if order.notes:
        text.append(f"\n顧客備註: {order.notes}")
    if order.admin_notes:
        text.append("\n店家備註: ", style="bold yellow")
        text.append(order.admin_notes, style="yellow")
    return text


def format_stat_cards(summary: SalesSummary, subtitle: str) -> Text:
    text = Text()
    cards = [
        ("💰 總營業額", format_currency(summary.total_revenue)),
        ("📦 總訂單數", f"{summary.order_count:,}"),
        ("📊 平均客單價", format_currency(summary.average_order_value)),
        ("👥 不重複顧客", f"{summary.unique_customers:,}"),
    ]
    for idx, (title, value) in enumerate(cards):
        if idx > 0:
            text.append("   ")
        text.append(f"{title} ", style="dim")
        text.append(value, style="bold")
    text.append(f"\n{subtitle}", style="dim")
    return text


def format_popular_items(items: list[PopularItem]) -> Text:
    if not items:
        return Text("暫無銷售資料", style="dim")
    text = Text()
    for rank, item in enumerate(items, start=1):
        if rank > 1:
            text.append("\n")
        text.append(f"{rank:>2}. {item.icon} {item.name}")
        text.append(f"  x{item.quantity}", style="bold")
        text.append(f"  {format_currency(item.revenue)}", style="green")
    return text


def format_buckets(buckets: list[Bucket]) -> Text:
    """Horizontal revenue bars, one row per bucket."""
    if not buckets:
        return Text("暫無資料", style="dim")
    peak = max(bucket.revenue for bucket in buckets) or 1.0
    text = Text()
    for idx, bucket in enumerate(buckets):
        if idx > 0:
            text.append("\n")
        width = int(round(bucket.revenue / peak * _BAR_WIDTH))
        text.append(f"{bucket.label:<10} ")
        text.append("█" * width, style="green")
        text.append(f" {format_currency(bucket.revenue)} ({bucket.order_count} 單 / {bucket.customer_count} 人)")
    return text
