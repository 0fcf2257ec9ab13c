"""Modal screens for the TUI.

This module hides the design decisions about:
- Dialog appearance (CSS, layout)
- Button styling and variants
- Keyboard shortcuts for dialogs
- How documents are entered (file path vs. pasted text)

To change how dialogs look, modify only this file.
"""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static, TextArea

DIALOG_CSS = """
{name} {{
    align: center middle;
    background: $background 70%;
}}

.dialog {{
    width: 70;
    height: auto;
    max-height: 24;
    border: tall $accent;
    background: $surface;
    padding: 1 2;
}}

.dialog-title {{
    width: 100%;
    height: auto;
    text-align: center;
    text-style: bold;
    color: $accent;
    padding: 0 0 1 0;
    border-bottom: solid $border;
    margin-bottom: 1;
}}

.dialog-buttons {{
    width: 100%;
    height: 3;
    align: center middle;
    margin-top: 1;
}}

.dialog-buttons Button {{
    margin: 0 1;
    min-width: 10;
}}
"""


class ConfirmationScreen(ModalScreen[bool]):
    """Yes/No confirmation dialog."""

    CSS = DIALOG_CSS.format(name="ConfirmationScreen") + """
    #confirmation-prompt {
        width: 100%;
        height: auto;
        text-align: center;
        padding: 1 2;
        background: $panel;
        border: round $border;
        color: $foreground;
    }
    """

    BINDINGS = [
        Binding("y", "confirm_yes", "Yes", show=False),
        Binding("n", "confirm_no", "No", show=False),
        Binding("escape", "confirm_no", "Cancel", show=False),
    ]

    def __init__(self, prompt: str) -> None:
        super().__init__()
        self._prompt = prompt

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static("Confirmation Required", classes="dialog-title")
            yield Static(self._prompt, id="confirmation-prompt")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Yes", id="btn-yes", variant="success")
                yield Button("No", id="btn-no", variant="error")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "btn-yes")

    def action_confirm_yes(self) -> None:
        self.dismiss(True)

    def action_confirm_no(self) -> None:
        self.dismiss(False)


class FilePathScreen(ModalScreen[str | None]):
    """Ask for the path of a document to upload."""

    CSS = DIALOG_CSS.format(name="FilePathScreen")

    BINDINGS = [Binding("escape", "cancel", "Cancel", show=False)]

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static("Upload Document", classes="dialog-title")
            yield Input(placeholder="Path to a text or PDF file", id="file-path")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Attach", id="btn-attach", variant="primary")
                yield Button("Cancel", id="btn-cancel")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.dismiss(event.value.strip() or None)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-attach":
            self.dismiss(self.query_one("#file-path", Input).value.strip() or None)
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class ManualTextScreen(ModalScreen[str | None]):
    """Type or paste text to attach as a document."""

    CSS = DIALOG_CSS.format(name="ManualTextScreen") + """
    #manual-text {
        height: 10;
    }
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel", show=False)]

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Static("Input Text", classes="dialog-title")
            yield TextArea(id="manual-text")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Add as Document", id="btn-add", variant="primary")
                yield Button("Cancel", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-add":
            text = self.query_one("#manual-text", TextArea).text
            self.dismiss(text if text.strip() else None)
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)
