"""Status picker modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from order_dashboard.data import status_label
from order_dashboard.models import Order, OrderStatus, is_forward_transition
from order_dashboard.rendering import badge_style


class StatusModal(ModalScreen[OrderStatus | None]):
    """Centered modal to pick a new status for one order.

    Every status is offered, including earlier ones, so staff can correct
    a mistaken change.
    """

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("enter", "choose_current", "Choose"),
    ]

    CSS = """
    StatusModal {
        align: center middle;
        background: $background 60%;
    }

    #status-dialog {
        width: 48;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #status-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #status-body {
        margin-bottom: 1;
        color: white;
    }

    #status-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)

    def __init__(self, order: Order) -> None:
        super().__init__()
        self.order = order
        self.options = list(OrderStatus)
        self.cursor_index = self.options.index(order.status)

    def compose(self) -> ComposeResult:
        with Container(id="status-dialog"):
            yield Static(f"更新狀態 · {self.order.order_id}", id="status-title")
            yield Static(id="status-body")
            yield Static("J/K/↑/↓ move, Enter choose, Esc/q/Ctrl+C close", id="status-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def action_close(self) -> None:
        self.dismiss(None)

    def action_move_cursor(self, delta: int) -> None:
        self.cursor_index = (self.cursor_index + delta) % len(self.options)
        self._refresh_content()

    def action_choose_current(self) -> None:
        chosen = self.options[self.cursor_index]
        if chosen is self.order.status:
            self.dismiss(None)
            return
        self.dismiss(chosen)

    def _refresh_content(self) -> None:
        body = self.query_one("#status-body", Static)
        content = Text(style="white")
        for idx, status in enumerate(self.options):
            if idx > 0:
                content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            content.append(pointer)
            content.append(f" {status_label(status)} ", style=badge_style(status))
            if status is self.order.status:
                content.append("  (目前)", style="dim")
            elif not is_forward_transition(self.order.status, status):
                content.append("  (更正)", style="dim yellow")
        body.update(content)
