"""Editable static menu, status label and badge configuration."""

from __future__ import annotations

# Menu used to rebuild line items when the backend sends them as text.
DEFAULT_MENU: list[dict[str, str | float]] = [
    {"name": "滷肉飯", "price": 35, "icon": "🍚"},
    {"name": "雞肉飯", "price": 40, "icon": "🍗"},
    {"name": "蚵仔煎", "price": 65, "icon": "🍳"},
    {"name": "大腸麵線", "price": 50, "icon": "🍜"},
    {"name": "珍珠奶茶", "price": 45, "icon": "🥤"},
    {"name": "鹽酥雞", "price": 60, "icon": "🍖"},
    {"name": "甜不辣", "price": 40, "icon": "🍢"},
    {"name": "肉圓", "price": 45, "icon": "🥟"},
    {"name": "臭豆腐", "price": 55, "icon": "🧆"},
    {"name": "牛肉麵", "price": 120, "icon": "🍲"},
]

UNKNOWN_ITEM_ICON = "❓"

STATUS_LABELS: dict[str, str] = {
    "pending": "待確認",
    "confirmed": "已確認",
    "preparing": "製作中",
    "ready": "可取餐",
    "completed": "已完成",
    "cancelled": "已取消",
}

ALL_ORDERS_LABEL = "全部訂單"

STATUS_BADGE_STYLES: dict[str, str] = {
    "pending": "bold #3d2c00 on #f5d76e",
    "confirmed": "bold #ffffff on #2f6db5",
    "preparing": "bold #ffffff on #5b4fc7",
    "ready": "bold #ffffff on #8e44ad",
    "completed": "bold #0b1f0f on #5fbf72",
    "cancelled": "bold #ffffff on #b23a48",
}

SAMPLE_CUSTOMERS: list[str] = ["王小明", "陳小華", "林小美", "張小強", "李小雯", "黃小龍", "劉小婷"]

SAMPLE_ADDRESSES: list[str] = ["", "台北市信義區忠孝東路五段100號", "台北市大安區仁愛路四段50號", ""]

SAMPLE_NOTES: list[str] = ["不要加辣", "需要餐具"]
