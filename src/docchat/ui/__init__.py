"""Terminal UI module for docchat.

Provides a Textual-based TUI around the conversation controller.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (input bar, transcript, sidebar lists, log panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- screens.py: Modal dialogs (confirmation, document entry)
- config.py: UI constants and log levels
- app.py: Application orchestration (user interaction flow)
"""

from .app import DocChatApp, run_textual_tui
from .config import LogLevel
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    DocumentsList,
    SavedChatsList,
    StatusLine,
)

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "DebugPanel",
    "DocChatApp",
    "DocumentsList",
    "LogLevel",
    "SavedChatsList",
    "StatusLine",
    "run_textual_tui",
]
