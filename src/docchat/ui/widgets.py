"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Chat message rendering and the empty-conversation hint
- Saved chat and document list rendering
- Status line formatting (loading / retrying / error)
- Log rendering with level filtering
"""

from datetime import datetime

from rich.markup import escape
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message
from textual.widgets import Button, Label, ListItem, ListView, Markdown, RichLog, Static, TextArea

from ..completion import CompletionStatus
from ..documents import DocumentItem
from ..llm import ChatMessage
from ..memory import SavedConversation
from .config import USAGE_HINTS, LogLevel


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button.

    The text is only cleared by the app once a send actually started,
    so a rejected message stays editable.
    """

    class Submitted(Message):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Submit message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.highlight_cursor_line = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            event.stop()
            self._submit()

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Note: ctrl+enter cannot work in terminals (terminal doesn't pass
        ctrl/shift modifiers with Enter). Use ctrl+j as the submit shortcut.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()

    def _submit(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        self.post_message(self.Submitted(text_area.text))

    @property
    def text(self) -> str:
        return self.query_one("#chat-input", TextArea).text

    def clear(self) -> None:
        self.query_one("#chat-input", TextArea).text = ""

    def set_locked(self, locked: bool) -> None:
        """Disable input once the session has used its single message."""
        self.query_one("#chat-input", TextArea).disabled = locked
        self.query_one("#send-btn", Button).disabled = locked

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class StatusLine(Static):
    """One-line request status under the chat history."""

    def show_status(self, status: CompletionStatus) -> None:
        if status.error and status.retrying:
            self.update(f"[bold yellow]{status.error}[/]")
        elif status.error:
            self.update(f"[bold red]{status.error}[/]")
        elif status.loading:
            self.update("[cyan]Waiting for the assistant...[/]")
        else:
            self.update("")
        self.set_class(status.loading, "-loading")


class ChatHistoryWidget(VerticalScroll):
    """Scrollable transcript of the active conversation."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation"
    ALLOW_MAXIMIZE = True
    ALLOW_SELECT = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._messages: list[ChatMessage] = []

    def show_transcript(self, messages: list[ChatMessage]) -> None:
        """Replace the displayed transcript."""
        self.remove_children()
        self._messages = list(messages)
        if not self._messages:
            self.mount(Static(USAGE_HINTS, classes="usage-hint"))
            self.border_subtitle = "How to use this app"
            return
        for msg in self._messages:
            self._render_message(msg)
        self.border_subtitle = f"{len(self._messages)} messages"
        self.scroll_end(animate=False)

    def get_last_response(self) -> str | None:
        for msg in reversed(self._messages):
            if msg.role == "assistant":
                return msg.content
        return None

    def _render_message(self, msg: ChatMessage) -> None:
        """Render a single message to the display."""
        if msg.role == "user":
            header_text = "> You"
            border_class = "user-message"
        else:
            header_text = "< Assistant"
            border_class = "assistant-message"

        container = Vertical(classes=f"chat-message {border_class}")
        container.compose_add_child(Static(header_text, classes="message-header"))
        if msg.role == "assistant":
            container.compose_add_child(Markdown(msg.content, classes="message-content"))
        else:
            # Plain text for user messages
            container.compose_add_child(Static(msg.content, classes="message-content", markup=False))
        self.mount(container)


class SavedChatsList(ListView):
    """Saved conversations, most recent first. Delete removes the highlighted chat."""

    BINDINGS = [
        Binding("delete", "delete_chat", "Delete Chat", show=False),
        Binding("x", "delete_chat", "Delete Chat", show=False),
    ]

    class DeleteRequested(Message):
        def __init__(self, conversation_id: str) -> None:
            super().__init__()
            self.conversation_id = conversation_id

    def show_conversations(self, conversations: list[SavedConversation], active_id: str) -> None:
        self.clear()
        if not conversations:
            self.append(ListItem(Label("No saved chats", classes="empty-label"), disabled=True))
            return
        for conversation in conversations:
            item = ListItem(Label(conversation.title, classes="chat-title"), name=conversation.id)
            if conversation.id == active_id:
                item.add_class("-active")
            self.append(item)

    def action_delete_chat(self) -> None:
        item = self.highlighted_child
        if item is not None and item.name:
            self.post_message(self.DeleteRequested(item.name))


class DocumentsList(ListView):
    """Documents attached to the active conversation. Delete detaches one."""

    BINDINGS = [
        Binding("delete", "remove_document", "Remove", show=False),
        Binding("x", "remove_document", "Remove", show=False),
    ]

    class RemoveRequested(Message):
        def __init__(self, index: int) -> None:
            super().__init__()
            self.index = index

    def show_documents(self, documents: list[DocumentItem]) -> None:
        self.clear()
        for doc in documents:
            self.append(ListItem(Label(f"{doc.name} [dim]({len(doc.content)})[/]")))

    def action_remove_document(self) -> None:
        if self.index is not None and self.highlighted_child is not None:
            self.post_message(self.RemoveRequested(self.index))


class DebugPanel(RichLog):
    """Log panel for loguru records with level filtering.

    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    def __init__(self, *args, log_level: int = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=False,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        """Set log level threshold."""
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        """Update subtitle to show current log level."""
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def add_entry(self, component: str, message: str, level: int = LogLevel.DEBUG) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (module that emitted the record)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime("%H:%M:%S")

        level_colors = {
            LogLevel.DEBUG: "dim white",
            LogLevel.INFO: "cyan",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
        }
        level_color = level_colors.get(level, "white")
        level_name = LogLevel.name(level)

        self.write(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{level_name:<7}[/] "
            f"[magenta]\\[{component}][/] {escape(message)}"
        )

    def show(self) -> None:
        """Show the log panel."""
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        """Hide the log panel."""
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
