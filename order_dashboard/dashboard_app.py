"""Main Textual app class."""

from __future__ import annotations

import logging

from rich.text import Text
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.widgets import Header, Static

from order_dashboard.confirm_modal import ConfirmModal
from order_dashboard.data import STATUS_FILTERS, status_label
from order_dashboard.models import ActionResult, Order, OrderStatus
from order_dashboard.printer import check_printer_dependencies, print_order_ticket
from order_dashboard.rendering import (
    format_buckets,
    format_filter_bar,
    format_order_detail,
    format_order_row,
    format_popular_items,
    format_stat_cards,
)
from order_dashboard.statistics import (
    DEFAULT_REVENUE_POLICY,
    DateRange,
    Granularity,
    RevenuePolicy,
    date_range_filter,
    popular_items,
    summarize,
    time_bucketed,
)
from order_dashboard.status_modal import StatusModal
from order_dashboard.store import ALL, OrderStore

logger = logging.getLogger(__name__)

# None means "every order".
STATS_RANGES: list[DateRange | None] = [None, DateRange.today(), DateRange.this_month(), DateRange.this_year()]

_POLICY_SUBTITLES = {
    RevenuePolicy.COMPLETED_ONLY: "僅計算已完成訂單",
    RevenuePolicy.EXCLUDE_CANCELLED: "計算所有未取消訂單",
}


class OrderDashboardApp(App):
    """A Textual app for tracking restaurant orders and sales."""

    TITLE = "台灣小吃店 - 店家管理系統"
    SUB_TITLE = "訂單管理與追蹤"

    CSS = """
    Screen {
        layout: vertical;
    }

    #orders-view, #stats-view {
        height: 1fr;
    }

    #orders-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #detail-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #filter-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 3;
    }

    #orders-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #stats-view {
        border: round $primary;
        padding: 1;
    }

    #stat-cards {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #stats-columns {
        height: 1fr;
    }

    #popular-items, #daily-trend {
        width: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #status-bar {
        height: 1;
        padding: 0 1;
        color: $text-muted;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    view = reactive("orders")
    status_filter = reactive(ALL)
    selected_index = reactive(None)
    range_index = reactive(0)

    BINDINGS = [
        ("j", "move_selection(1)", "Next order"),
        ("k", "move_selection(-1)", "Previous order"),
        ("down", "move_selection(1)", "Next order"),
        ("up", "move_selection(-1)", "Previous order"),
        ("f", "cycle_filter(1)", "Next filter"),
        ("F", "cycle_filter(-1)", "Previous filter"),
        ("s", "change_status", "Status"),
        ("c", "confirm_order", "Confirm"),
        ("p", "print_ticket", "Print"),
        ("r", "reload", "Refresh"),
        ("d", "cycle_range", "Date range"),
        Binding("tab", "toggle_view", "Orders/Stats", priority=True),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, store: OrderStore, policy: RevenuePolicy = DEFAULT_REVENUE_POLICY) -> None:
        super().__init__()
        self.store = store
        self.policy = policy
        self.refreshing = False
        self.system_status = ""

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="orders-view"):
            with Vertical(id="orders-pane"):
                yield Static(id="filter-bar")
                yield Static("(no orders yet)", id="orders-list")
            with Vertical(id="detail-pane"):
                yield Static("訂單內容", classes="pane-title")
                yield Static(id="order-detail")
        with Vertical(id="stats-view"):
            yield Static(id="stat-cards")
            with Horizontal(id="stats-columns"):
                yield Static(id="popular-items")
                yield Static(id="daily-trend")
        yield Static(id="status-bar")

    def on_mount(self) -> None:
        _, msg = check_printer_dependencies()
        self.system_status = msg
        logger.debug("on_mount printer_status=%r", msg)
        self._apply_view()
        self._refresh_all()
        self.action_reload()

    # Actions

    def action_reload(self) -> None:
        if self.refreshing:
            return
        self.refreshing = True
        self.system_status = "刷新中..."
        self._refresh_status_bar()
        self._load_orders()

    def action_cycle_filter(self, delta: int) -> None:
        if self.view != "orders":
            return
        idx = STATUS_FILTERS.index(self.status_filter)
        self.status_filter = STATUS_FILTERS[(idx + delta) % len(STATUS_FILTERS)]
        self.selected_index = 0 if self._visible_orders() else None
        self._refresh_orders()

    def action_move_selection(self, delta: int) -> None:
        if self.view != "orders":
            return
        orders = self._visible_orders()
        if not orders:
            return
        if self.selected_index is None:
            self.selected_index = 0 if delta > 0 else len(orders) - 1
        else:
            self.selected_index = (self.selected_index + delta) % len(orders)
        self._refresh_orders()

    def action_change_status(self) -> None:
        order = self._selected_order()
        if order is None:
            return
        if self.store.is_in_flight(order.order_id):
            self.notify(f"訂單 {order.order_id} 正在更新中", severity="warning")
            return

        def on_dismiss(status: OrderStatus | None) -> None:
            if status is not None:
                self._submit_status(order.order_id, status)
                self._refresh_orders()

        self.push_screen(StatusModal(order), on_dismiss)

    def action_confirm_order(self) -> None:
        order = self._selected_order()
        if order is None:
            return
        if order.status is not OrderStatus.PENDING:
            self.notify("只有待確認的訂單可以確認", severity="warning")
            return
        if self.store.is_in_flight(order.order_id):
            self.notify(f"訂單 {order.order_id} 正在更新中", severity="warning")
            return

        def on_dismiss(admin_notes: str | None) -> None:
            if admin_notes is not None:
                self._submit_confirm(order.order_id, admin_notes)
                self._refresh_orders()

        self.push_screen(ConfirmModal(order), on_dismiss)

    def action_print_ticket(self) -> None:
        order = self._selected_order()
        if order is None:
            return
        try:
            print_order_ticket(order)
        except Exception as exc:
            logger.warning("print_failed order_id=%s error=%r", order.order_id, exc)
            self.system_status = f"Print failed for {order.order_id}: {exc}"
            self.notify(self.system_status, severity="error")
        else:
            self.system_status = f"Printed: {order.order_id}"
        self._refresh_status_bar()

    def action_toggle_view(self) -> None:
        self.view = "stats" if self.view == "orders" else "orders"
        self.sub_title = "銷售統計與分析" if self.view == "stats" else "訂單管理與追蹤"
        self._apply_view()
        self._refresh_all()

    def action_cycle_range(self) -> None:
        if self.view != "stats":
            return
        self.range_index = (self.range_index + 1) % len(STATS_RANGES)
        self._refresh_stats()

    # Workers. Network calls run off the UI thread; results come back via call_from_thread.

    @work(thread=True, group="load")
    def _load_orders(self) -> None:
        result = self.store.load()
        self.call_from_thread(self._after_load, result)

    @work(thread=True, group="updates")
    def _submit_status(self, order_id: str, status: OrderStatus) -> None:
        result = self.store.update_status(order_id, status)
        self.call_from_thread(self._after_update, result)

    @work(thread=True, group="updates")
    def _submit_confirm(self, order_id: str, admin_notes: str) -> None:
        result = self.store.confirm_order(order_id, admin_notes)
        self.call_from_thread(self._after_update, result)

    def _after_load(self, result: ActionResult) -> None:
        self.refreshing = False
        self.system_status = result.message
        self.notify(result.message, severity="information" if result.ok else "error")
        orders = self._visible_orders()
        if not orders:
            self.selected_index = None
        elif self.selected_index is None or self.selected_index >= len(orders):
            self.selected_index = 0
        self._refresh_all()

    def _after_update(self, result: ActionResult) -> None:
        self.system_status = result.message
        self.notify(result.message, severity="information" if result.ok else "error")
        self._refresh_all()

    # Rendering

    def _visible_orders(self) -> list[Order]:
        return self.store.filter_by_status(self.status_filter)

    def _selected_order(self) -> Order | None:
        if self.view != "orders" or self.selected_index is None:
            return None
        orders = self._visible_orders()
        if not (0 <= self.selected_index < len(orders)):
            return None
        return orders[self.selected_index]

    def _apply_view(self) -> None:
        try:
            self.query_one("#orders-view").display = self.view == "orders"
            self.query_one("#stats-view").display = self.view == "stats"
        except NoMatches:
            return

    def _refresh_all(self) -> None:
        if self.view == "orders":
            self._refresh_orders()
        else:
            self._refresh_stats()
        self._refresh_status_bar()

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            half = rows // 2
            start = selected - half
            start = max(0, start)
            start = min(start, total - rows)

        return (start, start + rows)

    def _refresh_orders(self) -> None:
        try:
            filter_bar = self.query_one("#filter-bar", Static)
            orders_widget = self.query_one("#orders-list", Static)
            detail_widget = self.query_one("#order-detail", Static)
        except NoMatches:
            return

        filter_bar.update(format_filter_bar(self.store.status_counts(), self.status_filter))

        orders = self._visible_orders()
        if not orders:
            self.selected_index = None
            if self.status_filter == ALL:
                orders_widget.update("📋 暫無訂單\n尚未收到任何訂單")
            else:
                orders_widget.update(f"📋 暫無訂單\n目前沒有{status_label(self.status_filter)}的訂單")
            detail_widget.update("")
            return

        if self.selected_index is not None and self.selected_index >= len(orders):
            self.selected_index = len(orders) - 1

        visible_rows = self._visible_rows(orders_widget)
        start, end = self._window_bounds(len(orders), visible_rows, self.selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            pointer = "➤ " if idx == self.selected_index else "  "
            lines.append(pointer)
            order = orders[idx]
            lines.append_text(format_order_row(order, in_flight=self.store.is_in_flight(order.order_id)))

        if end < len(orders):
            lines.append("\n⋮", style="dim")

        orders_widget.update(lines)

        selected = self._selected_order()
        detail_widget.update(format_order_detail(selected) if selected is not None else "")

    def _refresh_stats(self) -> None:
        try:
            cards_widget = self.query_one("#stat-cards", Static)
            popular_widget = self.query_one("#popular-items", Static)
            trend_widget = self.query_one("#daily-trend", Static)
        except NoMatches:
            return

        date_range = STATS_RANGES[self.range_index]
        orders = list(self.store.orders)
        if date_range is not None:
            orders = date_range_filter(orders, date_range)
        range_label = date_range.label if date_range is not None else "全部"

        summary = summarize(orders, self.policy)
        cards_widget.update(format_stat_cards(summary, f"{range_label} · {_POLICY_SUBTITLES[self.policy]}"))

        popular = Text("熱門品項\n", style="bold")
        popular.append_text(format_popular_items(popular_items(orders, limit=10, policy=self.policy)))
        popular_widget.update(popular)

        granularity = Granularity.MONTH if date_range == DateRange.this_year() else Granularity.DAY
        trend = Text("每月營收\n" if granularity is Granularity.MONTH else "每日營收\n", style="bold")
        trend.append_text(format_buckets(time_bucketed(orders, granularity, self.policy)))
        trend_widget.update(trend)

    def _refresh_status_bar(self) -> None:
        try:
            bar = self.query_one("#status-bar", Static)
        except NoMatches:
            return
        if self.view == "orders":
            keys = "J/K move · F filter · S status · C confirm · P print · R refresh · Tab stats"
        else:
            keys = "D date range · R refresh · Tab orders"
        status = self.system_status or "Ready"
        bar.update(Text(f"{keys}  |  {status}"))
