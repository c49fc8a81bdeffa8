"""In-memory order store and status lifecycle controller."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Iterable, Protocol

from order_dashboard.models import (
    ActionResult,
    ApiResponse,
    Order,
    OrderStatus,
    is_forward_transition,
)

logger = logging.getLogger(__name__)

ALL = "all"


class OrderSource(Protocol):
    """Backend operations the store depends on."""

    def get_orders(self) -> ApiResponse[list[Order]]: ...

    def update_order_status(self, order_id: str, status: OrderStatus) -> ApiResponse[Any]: ...

    def confirm_order(self, order_id: str, admin_notes: str) -> ApiResponse[Any]: ...


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def sort_newest_first(orders: Iterable[Order]) -> list[Order]:
    """Sort by creation time, newest first.

    Equal timestamps keep their source order; orders whose timestamp cannot
    be parsed go last, also in source order.
    """
    dated: list[tuple[float, Order]] = []
    undated: list[Order] = []
    for order in orders:
        created = order.created
        if created is None:
            undated.append(order)
        else:
            dated.append((created.timestamp(), order))
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [order for _, order in dated] + undated


class OrderStore:
    """Owns the current order list and mediates every change to it.

    Reads return immutable snapshots. ``load`` replaces the list wholesale;
    ``update_status`` and ``confirm_order`` replace a single record after the
    source acknowledges the change. At most one change per order may be in
    flight at a time.
    """

    def __init__(self, source: OrderSource) -> None:
        self.source = source
        self.last_error: str | None = None
        self._orders: tuple[Order, ...] = ()
        self._in_flight: set[str] = set()
        self._lock = threading.Lock()

    @property
    def orders(self) -> tuple[Order, ...]:
        return self._orders

    def get(self, order_id: str) -> Order | None:
        for order in self._orders:
            if order.order_id == order_id:
                return order
        return None

    def load(self) -> ActionResult:
        """Replace the whole list from the source."""
        try:
            result = self.source.get_orders()
        except Exception as exc:
            # Sources are expected to return envelopes; anything else is a failed load.
            logger.exception("Order source raised during load")
            result = ApiResponse.failure(f"Failed to load orders: {exc}", data=[])

        if not result.success:
            with self._lock:
                self._orders = ()
            self.last_error = result.message or "Failed to load orders"
            logger.warning("Order load failed: %s", self.last_error)
            return ActionResult(ok=False, message=self.last_error)

        ordered = tuple(sort_newest_first(result.data or []))
        with self._lock:
            self._orders = ordered
        self.last_error = None
        logger.info("Loaded %d orders", len(ordered))
        return ActionResult(ok=True, message=f"成功載入 {len(ordered)} 筆訂單")

    def filter_by_status(self, status: OrderStatus | str = ALL) -> list[Order]:
        """Orders with the given status in store order, or all of them."""
        orders = self._orders
        if status == ALL:
            return list(orders)
        wanted = OrderStatus.parse(status)
        return [order for order in orders if order.status is wanted]

    def status_counts(self) -> dict[str, int]:
        counts = {ALL: len(self._orders)}
        for status in OrderStatus:
            counts[status.value] = 0
        for order in self._orders:
            counts[order.status.value] += 1
        return counts

    def is_in_flight(self, order_id: str) -> bool:
        with self._lock:
            return order_id in self._in_flight

    def update_status(self, order_id: str, new_status: OrderStatus | str) -> ActionResult:
        """Ask the source to change an order's status, then apply it locally.

        Any status may be set from any other; backward moves are allowed so
        staff can correct mistakes.
        """
        status = OrderStatus.parse(new_status)
        if not self._begin(order_id):
            return ActionResult(ok=False, message=f"訂單 {order_id} 正在更新中")

        try:
            current = self.get(order_id)
            if current is not None and not is_forward_transition(current.status, status):
                logger.info("Order %s moved %s -> %s outside the usual flow", order_id, current.status.value, status.value)
            result = self._call(lambda: self.source.update_order_status(order_id, status))
            if not result.success:
                logger.warning("Status update for %s failed: %s", order_id, result.message)
                return ActionResult(ok=False, message=result.message or "更新訂單狀態失敗")

            self._apply(order_id, lambda order: replace(order, status=status, updated_at=_utc_now_iso()))
            return ActionResult(ok=True, message="訂單狀態已更新！")
        finally:
            self._finish(order_id)

    def confirm_order(self, order_id: str, admin_notes: str = "") -> ActionResult:
        """Confirm a pending order and attach a staff note."""
        current = self.get(order_id)
        if current is not None and current.status is not OrderStatus.PENDING:
            return ActionResult(ok=False, message=f"訂單 {order_id} 不是待確認狀態")
        if not self._begin(order_id):
            return ActionResult(ok=False, message=f"訂單 {order_id} 正在更新中")

        notes = admin_notes.strip()
        try:
            result = self._call(lambda: self.source.confirm_order(order_id, notes))
            if not result.success:
                logger.warning("Confirm for %s failed: %s", order_id, result.message)
                return ActionResult(ok=False, message=result.message or "確認訂單失敗")

            now = _utc_now_iso()
            self._apply(
                order_id,
                lambda order: replace(
                    order,
                    status=OrderStatus.CONFIRMED,
                    admin_notes=notes,
                    confirmed_at=now,
                    updated_at=now,
                ),
            )
            return ActionResult(ok=True, message="訂單已確認！")
        finally:
            self._finish(order_id)

    def _begin(self, order_id: str) -> bool:
        with self._lock:
            if order_id in self._in_flight:
                return False
            self._in_flight.add(order_id)
            return True

    def _finish(self, order_id: str) -> None:
        with self._lock:
            self._in_flight.discard(order_id)

    def _call(self, request) -> ApiResponse[Any]:
        try:
            return request()
        except Exception as exc:
            logger.exception("Order source raised")
            return ApiResponse.failure(str(exc))

    def _apply(self, order_id: str, change) -> None:
        # The list may have been reloaded while the request was out; apply by id.
        with self._lock:
            orders = list(self._orders)
            for idx, order in enumerate(orders):
                if order.order_id == order_id:
                    orders[idx] = change(order)
                    self._orders = tuple(orders)
                    return
        logger.info("Order %s no longer in the list; local update skipped", order_id)
