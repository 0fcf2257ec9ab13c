"""Main Textual TUI application.

Orchestrates the UI components around a ConversationController: the
sidebar (API key, saved chats, documents), the transcript and the
single-question input.
"""

import asyncio
import contextlib

from loguru import logger
from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Footer, Header, Input, ListView, Static

from ..completion import CompletionStatus, StatusTracker
from ..config import AppConfig, configure_logging
from ..connectivity import ConnectivityMonitor
from ..session import ConversationController
from .config import CONNECTIVITY_PROBE_INTERVAL, NOTIFY_TIMEOUT, LogLevel
from .screens import ConfirmationScreen, FilePathScreen, ManualTextScreen
from .styles import APP_CSS
from .themes import DEFAULT_THEME, THEMES
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    DocumentsList,
    SavedChatsList,
    StatusLine,
)

OFFLINE_MESSAGE = "You are offline. Connect to the internet to send messages."


class DocChatApp(App):
    """Textual TUI for document-grounded chat."""

    CSS = APP_CSS
    TITLE = "DocChat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+n", "new_chat", "New Chat"),
        Binding("ctrl+o", "upload_document", "Upload"),
        Binding("ctrl+t", "input_text", "Input Text"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Log"),
    ]

    def __init__(
        self,
        controller: ConversationController,
        config: AppConfig,
        log_level: str | None = None,
    ) -> None:
        super().__init__()
        self._controller = controller
        self._config = config
        self._log_level = log_level
        self._unsubscribers: list = []
        self._log_handler: int | None = None

    @property
    def status(self) -> StatusTracker:
        return self._controller.client.status

    @property
    def connectivity(self) -> ConnectivityMonitor:
        return self._controller.client.connectivity

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        with Vertical(id="sidebar"):
            yield Static("API Key", classes="sidebar-heading")
            yield Input(placeholder="sk-...", password=True, id="api-key")
            yield Button("New Chat", id="new-chat-btn", variant="primary")
            yield Static("Saved Chats", classes="sidebar-heading")
            yield SavedChatsList(id="saved-chats")
            yield Static("Documents", classes="sidebar-heading")
            yield DocumentsList(id="documents")
            with Horizontal(id="document-buttons"):
                yield Button("Upload", id="upload-btn")
                yield Button("Text", id="text-btn")

        with Vertical(id="main"):
            yield Static(OFFLINE_MESSAGE, id="offline-banner")
            with Vertical(id="title-box"):
                yield Input(placeholder="Chat title", id="title-input")
            yield ChatHistoryWidget(id="chat-history")
            yield StatusLine(id="status-line")
            yield ChatInputBar(id="chat-input-bar")
            yield DebugPanel(id="debug-panel")

        yield Footer()

    async def on_mount(self) -> None:
        """Called when app is mounted."""
        for theme in THEMES:
            self.register_theme(theme)
        self.theme = DEFAULT_THEME

        log_panel = self.query_one("#debug-panel", DebugPanel)
        self._log_handler = configure_logging("DEBUG", sink=self._log_sink)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            logger.info("Log panel enabled with level: {}", self._log_level.upper())

        self.sub_title = f"{self._config.provider} | {self._config.model}"

        self._unsubscribers.append(self.status.subscribe(self._on_status))
        self._unsubscribers.append(self.connectivity.subscribe(self._on_connectivity))
        self._on_connectivity(self.connectivity.online)
        self.set_interval(CONNECTIVITY_PROBE_INTERVAL, self._probe_connectivity)
        self._probe_connectivity()

        api_key = await self._controller.get_api_key()
        with self.prevent(Input.Changed):
            self.query_one("#api-key", Input).value = api_key

        await self._refresh_view()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def on_unmount(self) -> None:
        """Detach listeners and give logging back to stderr."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        if self._log_handler is not None:
            with contextlib.suppress(ValueError):
                logger.remove(self._log_handler)
            self._log_handler = None

    def _log_sink(self, message) -> None:
        """Route loguru records into the log panel."""
        record = message.record
        self.query_one("#debug-panel", DebugPanel).add_entry(
            record["name"] or "docchat",
            record["message"],
            LogLevel.from_string(record["level"].name),
        )

    # ------------------------------------------------------------------
    # View refresh
    # ------------------------------------------------------------------

    async def _refresh_view(self) -> None:
        """Redraw everything that depends on the active session."""
        state = self._controller.state

        saved = await self._controller.saved_conversations()
        self.query_one("#saved-chats", SavedChatsList).show_conversations(
            saved, state.conversation_id
        )
        self._refresh_documents()
        self.query_one("#chat-history", ChatHistoryWidget).show_transcript(state.messages)

        title_box = self.query_one("#title-box")
        title_box.set_class(not state.is_new, "-visible")
        with self.prevent(Input.Changed):
            self.query_one("#title-input", Input).value = state.title

        self.query_one("#chat-input-bar", ChatInputBar).set_locked(state.message_sent)

    def _refresh_documents(self) -> None:
        documents = self._controller.state.documents.list()
        self.query_one("#documents", DocumentsList).show_documents(documents)

    def _on_status(self, status: CompletionStatus) -> None:
        self.query_one("#status-line", StatusLine).show_status(status)
        if status.loading and status.error is None:
            input_bar = self.query_one("#chat-input-bar", ChatInputBar)
            input_bar.clear()
            input_bar.set_locked(True)
            # The user message is already in the transcript
            self.query_one("#chat-history", ChatHistoryWidget).show_transcript(
                self._controller.state.messages
            )
        if status.error and status.error_clear_after:
            token = status.error_token
            self.set_timer(status.error_clear_after, lambda: self.status.clear_error(token))

    def _on_connectivity(self, online: bool) -> None:
        self.query_one("#offline-banner").set_class(not online, "-visible")

    @work(exclusive=True, group="connectivity")
    async def _probe_connectivity(self) -> None:
        await self.connectivity.probe()

    # ------------------------------------------------------------------
    # Sending
    # ------------------------------------------------------------------

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        self._controller.state.draft = event.value
        self._send()

    @work(exclusive=True, group="send")
    async def _send(self) -> None:
        outcome = await self._controller.send_message()
        await self._refresh_view()
        if outcome.ok:
            self.notify("Response received", timeout=NOTIFY_TIMEOUT)

    # ------------------------------------------------------------------
    # Sidebar events
    # ------------------------------------------------------------------

    async def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "api-key":
            await self._controller.set_api_key(event.value)
        elif event.input.id == "title-input":
            self._controller.state.title = event.value

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "title-input":
            await self._controller.rename_session(event.value)
            await self._refresh_view()
            self.notify("Chat renamed", timeout=NOTIFY_TIMEOUT)

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "new-chat-btn":
            await self.action_new_chat()
        elif event.button.id == "upload-btn":
            self.action_upload_document()
        elif event.button.id == "text-btn":
            self.action_input_text()

    async def on_list_view_selected(self, event: ListView.Selected) -> None:
        if event.list_view.id != "saved-chats" or not event.item.name:
            return
        if event.item.name == self._controller.state.conversation_id:
            return
        conversation = await self._controller.load_session(event.item.name)
        if conversation is None:
            self.notify("Chat not found", severity="warning", timeout=NOTIFY_TIMEOUT)
        await self._refresh_view()

    def on_saved_chats_list_delete_requested(self, event: SavedChatsList.DeleteRequested) -> None:
        conversation_id = event.conversation_id

        async def _confirmed(confirmed: bool | None) -> None:
            if not confirmed:
                return
            await self._controller.delete_session(conversation_id)
            await self._refresh_view()
            self.notify("Chat deleted", timeout=NOTIFY_TIMEOUT)

        self.push_screen(ConfirmationScreen("Delete this chat?"), _confirmed)

    def on_documents_list_remove_requested(self, event: DocumentsList.RemoveRequested) -> None:
        try:
            removed = self._controller.state.documents.remove(event.index)
        except IndexError:
            return
        logger.debug("Removed document {}", removed.name)
        self._refresh_documents()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def action_new_chat(self) -> None:
        """Save the current chat and start a fresh one."""
        await self._controller.create_session()
        self.status.clear_error()
        await self._refresh_view()
        self.query_one("#chat-input-bar", ChatInputBar).focus_input()

    def action_upload_document(self) -> None:
        """Attach a text or PDF file as a document."""

        def _attach(path: str | None) -> None:
            if not path:
                return
            try:
                item = self._controller.state.documents.add_file(path)
            except Exception as e:
                logger.warning("Could not read {}: {}", path, e)
                self.notify(f"Could not read file: {e}", severity="error", timeout=NOTIFY_TIMEOUT)
                return
            self._refresh_documents()
            self.notify(f"Attached {item.name}", timeout=NOTIFY_TIMEOUT)

        self.push_screen(FilePathScreen(), _attach)

    def action_input_text(self) -> None:
        """Attach typed or pasted text as a document."""

        def _attach(text: str | None) -> None:
            if text and self._controller.state.documents.add_text(text) is not None:
                self._refresh_documents()

        self.push_screen(ManualTextScreen(), _attach)

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=NOTIFY_TIMEOUT)

    def action_copy_last_response(self) -> None:
        """Copy last assistant response to clipboard."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied", timeout=NOTIFY_TIMEOUT)
        else:
            self.notify("No response to copy", severity="warning", timeout=NOTIFY_TIMEOUT)


async def run_textual_tui(config: AppConfig, log_level: str | None = None) -> None:
    """Run the Textual TUI.

    Args:
        config: Application configuration
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    from ..cli.providers import open_controller

    connectivity = ConnectivityMonitor(online=True, host=config.connectivity_host)
    status = StatusTracker()

    async with open_controller(config, connectivity=connectivity, status=status) as controller:
        app = DocChatApp(controller, config, log_level=log_level)
        try:
            await app.run_async()
        except (KeyboardInterrupt, asyncio.CancelledError):
            pass
        finally:
            await controller.save_session()
            configure_logging(config.log_level)
