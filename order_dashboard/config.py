"""Runtime configuration defaults for the backend, statistics and printing."""

from __future__ import annotations

import os

API_ENDPOINT = os.environ.get(
    "ORDER_DASHBOARD_API_ENDPOINT",
    "https://script.google.com/macros/s/AKfycbwy6JRELr2_uT5nhRE23nQaI_eQuf6mc7hDClE0f74bCLCsOjmj6qGgYcMmZ1sIMfud/exec",
)
REQUEST_TIMEOUT_SECONDS = float(os.environ.get("ORDER_DASHBOARD_TIMEOUT", "15"))

# Which orders count toward revenue: "completed_only" or "exclude_cancelled".
REVENUE_POLICY = os.environ.get("ORDER_DASHBOARD_REVENUE_POLICY", "completed_only")

DEBUG_LOG_PATH = os.environ.get("ORDER_DASHBOARD_DEBUG_LOG", "/tmp/order-dashboard-debug.log")

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 28
PRINTER_HEADER_FONT_SIZE = 44
PRINTER_FONT_PATH = "/System/Library/Fonts/PingFang.ttc"
PRINTER_LEFT_INDENT_PX = 16
PRINTER_TAIL_SPACER_PX = 70
