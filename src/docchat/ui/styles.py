"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.

Layout:
- Sidebar: API key, new chat, saved chats, attached documents
- Main area: offline banner, title box, transcript, status line, input
"""

APP_CSS = """
/* ============================================
   Main Screen Layout - Sidebar + Chat Area
   ============================================ */
Screen {
    layout: horizontal;
    background: $background;
}

/* ============================================
   Sidebar
   ============================================ */
#sidebar {
    width: 36;
    height: 100%;
    background: $panel;
    border-right: solid $border;
    padding: 0 1;
}

.sidebar-heading {
    height: 1;
    margin-top: 1;
    color: $primary;
    text-style: bold;
}

#api-key {
    margin-bottom: 1;
}

#new-chat-btn {
    width: 100%;
}

#saved-chats {
    height: 1fr;
    min-height: 5;
    background: $surface;
    border: round $border;

    &:focus {
        border: round $primary;
    }

    & > ListItem.-active {
        background: $primary 25%;
        text-style: bold;
    }
}

#documents {
    height: 1fr;
    min-height: 4;
    background: $surface;
    border: round $border;

    &:focus {
        border: round $accent;
    }
}

#document-buttons {
    height: 3;
    margin-bottom: 1;

    & Button {
        width: 1fr;
        margin: 0 1 0 0;
    }
}

.empty-label {
    color: $text-muted;
}

/* ============================================
   Chat Area
   ============================================ */
#main {
    width: 1fr;
    height: 100%;
    padding: 0 1;
}

#offline-banner {
    height: auto;
    padding: 0 1;
    background: $error 20%;
    color: $error;
    text-style: bold;
    display: none;

    &.-visible {
        display: block;
    }
}

#title-box {
    height: 3;
    display: none;

    &.-visible {
        display: block;
    }
}

/* ============================================
   Chat History Panel - Primary Focus Area
   ============================================ */
#chat-history {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus {
        border: round $primary;
    }

    &:focus-within {
        border: round $primary-lighten-1;
    }
}

.usage-hint {
    padding: 1 2;
    color: $text-muted;
}

/* ============================================
   Status Line - Loading / Retry / Error
   ============================================ */
#status-line {
    height: auto;
    min-height: 1;
    padding: 0 1;

    &.-loading {
        background: $primary 10%;
    }
}

/* ============================================
   Debug/Log Panel
   ============================================ */
#debug-panel {
    height: auto;
    min-height: 6;
    max-height: 14;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-title-align: left;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    overflow-y: scroll;
    overflow-x: auto;
    scrollbar-gutter: stable;
    margin-top: 1;

    &:focus {
        border: round $warning;
    }
}

/* ============================================
   Chat Input Bar - Text Entry + Send
   ============================================ */
ChatInputBar {
    height: 5;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;

    &:disabled {
        color: $text-disabled;
    }
}

#send-btn {
    width: 10;
    height: 100%;
    margin-left: 1;
    text-style: bold;
}

/* ============================================
   Chat Messages - One Question, One Answer
   ============================================ */
.chat-message {
    width: 100%;
    height: auto;
    margin-bottom: 1;
    padding: 1 2;

    & .message-header {
        height: auto;
        text-style: bold;
    }

    & .message-content {
        height: auto;
        color: $foreground;
    }
}

.user-message {
    border-left: tall $success;
    background: $success 8%;

    & .message-header {
        color: $success;
    }
}

.assistant-message {
    border-left: tall $secondary;
    background: $secondary 8%;

    & .message-header {
        color: $secondary;
    }

    & Markdown {
        margin: 0;
        padding: 0;
    }
}

/* ============================================
   Notification Toasts
   ============================================ */
Toast {
    background: $surface;
    border: tall $border;
    padding: 0 1;

    &.-information {
        border: tall $primary;
    }

    &.-warning {
        border: tall $warning;
    }

    &.-error {
        border: tall $error;
        background: $error 12%;
    }
}

* {
    scrollbar-background: $panel;
    scrollbar-color: $surface-lighten-1;
    scrollbar-color-hover: $primary 50%;
    scrollbar-color-active: $primary;
    scrollbar-size: 1 1;
}

Header {
    background: $panel;
    height: 1;
}

/* ============================================
   Buttons
   ============================================ */
Button {
    min-width: 8;
    height: 3;
    border: tall $border;
    background: $surface;

    &:hover {
        background: $surface-lighten-1;
    }

    &:focus {
        border: tall $primary;
    }
}

Button.-primary {
    background: $primary;
    color: $background;
    border: tall $primary;
}

Button.-success {
    background: $success;
    color: $background;
    border: tall $success;
}

Button.-error {
    background: $error;
    color: $background;
    border: tall $error;
}

/* ============================================
   ListView Styling - Saved Chats and Documents
   ============================================ */
ListView > ListItem {
    padding: 0 1;
    background: transparent;

    &.-highlight {
        background: $primary 20%;
    }

    &:hover {
        background: $surface-lighten-1;
    }
}

/* ============================================
   Input Styling - API Key and Title
   ============================================ */
Input {
    border: tall $border;
    background: $surface;

    &:focus {
        border: tall $primary;
    }
}
"""
