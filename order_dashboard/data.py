"""Static menu data and order record parsing."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping

from order_dashboard.constant import (
    ALL_ORDERS_LABEL,
    DEFAULT_MENU,
    STATUS_LABELS,
    UNKNOWN_ITEM_ICON,
)
from order_dashboard.models import MenuItem, Order, OrderItem, OrderStatus, parse_amount

logger = logging.getLogger(__name__)

MENU_ITEMS: list[MenuItem] = [
    MenuItem(name=str(entry["name"]), price=float(entry["price"]), icon=str(entry["icon"]))
    for entry in DEFAULT_MENU
]

MENU_BY_NAME: dict[str, MenuItem] = {item.name: item for item in MENU_ITEMS}

# "all" first, then the lifecycle order used by the filter bar.
STATUS_FILTERS: list[str] = ["all"] + [status.value for status in OrderStatus]

_ITEM_SEPARATORS = re.compile(r"[,，、]")
_ITEM_SEGMENT = re.compile(r"^(?P<name>.+?)\s*[xX×*]\s*(?P<qty>\d+)$")


def status_label(status: OrderStatus | str) -> str:
    """Get the staff-facing label for a status or the "all" filter."""
    value = status.value if isinstance(status, OrderStatus) else status
    if value == "all":
        return ALL_ORDERS_LABEL
    return STATUS_LABELS.get(value, value)


def _placeholder_item(name: str, quantity: int = 1) -> OrderItem:
    return OrderItem(name=name, price=0.0, quantity=quantity, icon=UNKNOWN_ITEM_ICON)


def parse_items_text(text: str, menu: Mapping[str, MenuItem] = MENU_BY_NAME) -> list[OrderItem]:
    """Rebuild line items from a "name xN, name xN" string.

    Unknown dishes become zero-priced placeholders instead of failing the order.
    """
    items: list[OrderItem] = []
    for segment in _ITEM_SEPARATORS.split(text or ""):
        segment = segment.strip()
        if not segment:
            continue

        match = _ITEM_SEGMENT.match(segment)
        if match:
            name = match.group("name").strip()
            quantity = int(match.group("qty"))
        else:
            name = segment
            quantity = 1

        menu_item = menu.get(name)
        if menu_item is None:
            logger.warning("Unknown menu item %r in %r", name, text)
            items.append(_placeholder_item(name, quantity))
            continue
        items.append(OrderItem(name=menu_item.name, price=menu_item.price, quantity=quantity, icon=menu_item.icon))
    return items


def format_items_text(items: list[OrderItem] | tuple[OrderItem, ...]) -> str:
    """Inverse of parse_items_text, used for compact display."""
    return ", ".join(f"{item.name} x{item.quantity}" for item in items)


def _item_from_dict(raw: Any, menu: Mapping[str, MenuItem]) -> OrderItem:
    if not isinstance(raw, Mapping):
        return _placeholder_item(str(raw))

    name = str(raw.get("name") or "").strip()
    try:
        quantity = int(raw.get("quantity", 1))
    except (TypeError, ValueError):
        quantity = 1
    quantity = max(0, quantity)

    known = menu.get(name)
    if "price" in raw:
        price = parse_amount(raw.get("price"))
    elif known is not None:
        price = known.price
    else:
        price = 0.0
    icon = raw.get("icon") or (known.icon if known is not None else UNKNOWN_ITEM_ICON)
    return OrderItem(name=name, price=price, quantity=quantity, icon=str(icon))


def _parse_items(raw: Any, menu: Mapping[str, MenuItem]) -> tuple[OrderItem, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return tuple(parse_items_text(raw, menu))
    if isinstance(raw, (list, tuple)):
        return tuple(_item_from_dict(entry, menu) for entry in raw)
    logger.warning("Unsupported items payload %r", raw)
    return ()


def _text(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    if value is None:
        return ""
    return str(value)


def order_from_dict(raw: Mapping[str, Any], menu: Mapping[str, MenuItem] = MENU_BY_NAME) -> Order:
    """Build an Order from a backend record (camelCase keys).

    Raises ValueError when the record has no order id.
    """
    order_id = _text(raw, "orderId").strip()
    if not order_id:
        raise ValueError(f"Order record without orderId: {raw!r}")

    try:
        status = OrderStatus.parse(raw.get("status") or OrderStatus.PENDING)
    except ValueError:
        logger.warning("Order %s has unknown status %r; treating as pending", order_id, raw.get("status"))
        status = OrderStatus.PENDING

    confirmed_at = raw.get("confirmedAt")
    updated_at = raw.get("updatedAt")
    return Order(
        order_id=order_id,
        customer_name=_text(raw, "customerName"),
        customer_phone=_text(raw, "customerPhone").strip(),
        items=_parse_items(raw.get("items"), menu),
        total_amount=parse_amount(raw.get("totalAmount")),
        status=status,
        pickup_time=_text(raw, "pickupTime"),
        delivery_address=_text(raw, "deliveryAddress"),
        notes=_text(raw, "notes"),
        created_at=_text(raw, "createdAt"),
        confirmed_at=str(confirmed_at) if confirmed_at else None,
        admin_notes=_text(raw, "adminNotes"),
        updated_at=str(updated_at) if updated_at else None,
    )
