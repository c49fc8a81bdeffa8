"""Order confirmation modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from order_dashboard.models import Order

MAX_ADMIN_NOTES_LENGTH = 200


class ConfirmModal(ModalScreen[str | None]):
    """Prompt for an optional staff note before confirming a pending order.

    Dismisses with the note text (possibly empty) or None when cancelled.
    """

    CSS = """
    ConfirmModal {
        align: center middle;
        background: $background 60%;
    }

    #confirm-dialog {
        width: 64;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #confirm-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #confirm-prompt {
        color: white;
        margin-bottom: 1;
    }

    #confirm-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #confirm-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #confirm-help {
        color: #dddddd;
    }
    """

    def __init__(self, order: Order) -> None:
        super().__init__()
        self.order = order
        self.value = order.admin_notes
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="confirm-dialog"):
            yield Static(f"確認訂單 · {self.order.order_id}", id="confirm-title")
            yield Static("店家備註 (選填)", id="confirm-prompt")
            yield Static(id="confirm-value")
            yield Static(id="confirm-error")
            yield Static("Enter confirm. Backspace delete. Esc/Ctrl+C cancel.", id="confirm-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self.dismiss(self.value.strip())
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            if len(self.value) >= MAX_ADMIN_NOTES_LENGTH:
                self.error = f"備註最多 {MAX_ADMIN_NOTES_LENGTH} 字"
            else:
                self.value += event.character
                self.error = ""
            self._refresh_content()
            event.stop()

    def _refresh_content(self) -> None:
        value_widget = self.query_one("#confirm-value", Static)
        error_widget = self.query_one("#confirm-error", Static)
        value_widget.update(Text(f"{self.value}|"))
        error_widget.update(self.error or "")
