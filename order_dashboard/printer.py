"""Order ticket printing on a USB thermal printer."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from time import sleep

from order_dashboard.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_HEADER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_TAIL_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from order_dashboard.data import status_label
from order_dashboard.models import Order
from order_dashboard.rendering import format_currency, format_timestamp

# Separator tuning values.
# Keep these grouped so thermal-print behavior can be tuned in one place.
_SECTION_SEPARATOR_HEIGHT_PX = 20
_SECTION_SEPARATOR_THICKNESS_PX = 4
_SECTION_SEPARATOR_STRIPE_HEIGHT_PX = 2
_SECTION_SEPARATOR_PAUSE_SECONDS = 0.1
_LINE_EXTRA_PX = 12
_FONT_OVERRIDE_ENV = "ORDER_DASHBOARD_PRINTER_FONT_PATH"
# Ticket text is mostly CJK, so prefer fonts that cover it.
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc",
    "/usr/share/fonts/truetype/wqy/wqy-microhei.ttc",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
)


@dataclass(frozen=True)
class TicketSection:
    """A block of ticket lines printed between separators."""

    lines: list[str]
    emphasized: bool = False


def ticket_sections(order: Order) -> list[TicketSection]:
    """Lay out the ticket text for one order."""
    header = TicketSection(lines=[order.order_id], emphasized=True)

    info = [
        f"{order.customer_name} {order.customer_phone}".strip(),
        f"狀態: {status_label(order.status)}",
        f"取餐: {format_timestamp(order.pickup_time)}",
    ]
    if order.is_delivery:
        info.append(f"外送: {order.delivery_address}")
    else:
        info.append("自取")

    items = [f"{item.name} x{item.quantity}  {format_currency(item.subtotal)}" for item in order.items]
    items.append(f"總金額 {format_currency(order.total_amount)}")

    sections = [header, TicketSection(lines=info), TicketSection(lines=items)]

    notes: list[str] = []
    if order.notes:
        notes.append(f"備註: {order.notes}")
    if order.admin_notes:
        notes.append(f"店家: {order.admin_notes}")
    if notes:
        sections.append(TicketSection(lines=notes))
    return sections


def ticket_lines(order: Order) -> list[str]:
    """Flattened ticket text, in print order."""
    return [line for section in ticket_sections(order) for line in section.lines]


def resolve_printer_font_path() -> str:
    """
    Resolve a printer font path.

    Resolution order:
    1. ORDER_DASHBOARD_PRINTER_FONT_PATH (if set)
    2. PRINTER_FONT_PATH
    3. Known Linux fallbacks
    """
    env_override = os.environ.get(_FONT_OVERRIDE_ENV, "").strip()
    candidates: list[str] = []
    if env_override:
        candidates.append(env_override)
    candidates.append(PRINTER_FONT_PATH)
    candidates.extend(_LINUX_FONT_FALLBACKS)

    seen: set[str] = set()
    for candidate in candidates:
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        if Path(candidate).is_file():
            return candidate

    raise RuntimeError(
        f"No usable printer font found. Set {_FONT_OVERRIDE_ENV} to a valid .ttf/.ttc/.otf file. "
        f"Tried: {', '.join(seen)}"
    )


def check_printer_dependencies() -> tuple[bool, str]:
    """Check whether printer dependencies are importable."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        font_path = resolve_printer_font_path()
        ImageFont.truetype(font_path, PRINTER_FONT_SIZE)
    except Exception as exc:
        return (False, f"Printer deps unavailable: {exc}")
    return (True, "Printer ready")


def _fit_text_to_px(text: str, font: object, max_width_px: int) -> str:
    from PIL import Image, ImageDraw

    probe = Image.new("1", (1, 1), color=1)
    draw = ImageDraw.Draw(probe)
    if draw.textbbox((0, 0), text, font=font)[2] <= max_width_px:
        return text
    ellipsis = "..."
    trimmed = text
    while trimmed:
        candidate = f"{trimmed}{ellipsis}"
        if draw.textbbox((0, 0), candidate, font=font)[2] <= max_width_px:
            return candidate
        trimmed = trimmed[:-1]
    return ellipsis


def _render_line(text: str, font: object) -> object:
    from PIL import Image, ImageDraw

    max_width = PRINTER_WIDTH_PX - (PRINTER_LEFT_INDENT_PX * 2)
    text = _fit_text_to_px(text, font, max_width)

    probe = Image.new("1", (1, 1), color=1)
    bbox = ImageDraw.Draw(probe).textbbox((0, 0), text, font=font)
    text_height = bbox[3] - bbox[1]
    canvas_height = max(12, text_height + _LINE_EXTRA_PX)

    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    draw = ImageDraw.Draw(img)
    x = PRINTER_LEFT_INDENT_PX
    # Offset by bbox top so descenders are not clipped.
    y = (canvas_height - text_height) // 2 - bbox[1]
    draw.text((x, y), text, font=font, fill=0)
    return img


def _render_spacer(height_px: int) -> object:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def _render_section_separator() -> object:
    from PIL import Image, ImageDraw

    img = Image.new("1", (PRINTER_WIDTH_PX, _SECTION_SEPARATOR_HEIGHT_PX), color=1)
    draw = ImageDraw.Draw(img)
    top = max(0, (_SECTION_SEPARATOR_HEIGHT_PX - _SECTION_SEPARATOR_THICKNESS_PX) // 2)
    bottom = min(_SECTION_SEPARATOR_HEIGHT_PX - 1, top + _SECTION_SEPARATOR_THICKNESS_PX - 1)
    draw.rectangle((0, top, PRINTER_WIDTH_PX - 1, bottom), fill=0)
    return img


def _print_section_separator(printer: object) -> None:
    """
    Print the separator in short stripes with tiny pauses.

    This reduces instantaneous heat so the line stays crisp instead of
    bleeding into adjacent dots.
    """
    separator = _render_section_separator()
    for top in range(0, separator.height, _SECTION_SEPARATOR_STRIPE_HEIGHT_PX):
        bottom = min(separator.height, top + _SECTION_SEPARATOR_STRIPE_HEIGHT_PX)
        stripe = separator.crop((0, top, PRINTER_WIDTH_PX, bottom))
        printer.image(stripe)
        if bottom < separator.height:
            sleep(_SECTION_SEPARATOR_PAUSE_SECONDS)


def print_order_ticket(order: Order) -> None:
    """Print one order ticket and cut it."""
    try:
        from escpos.printer import Usb
        from PIL import ImageFont
    except Exception as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    font_path = resolve_printer_font_path()
    font = ImageFont.truetype(font_path, PRINTER_FONT_SIZE)
    header_font = ImageFont.truetype(font_path, PRINTER_HEADER_FONT_SIZE)

    for idx, section in enumerate(ticket_sections(order)):
        if idx > 0:
            _print_section_separator(printer)
        section_font = header_font if section.emphasized else font
        for line in section.lines:
            printer.image(_render_line(line, section_font))

    # Extra tail for easier tearing.
    printer.image(_render_spacer(PRINTER_TAIL_SPACER_PX))
    printer.cut()
