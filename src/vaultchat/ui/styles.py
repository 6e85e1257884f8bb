"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Layout: note viewer on the left, chat panel on the right, optional
log panel along the bottom.
"""

APP_CSS = """
Screen {
    background: $background;
}

#main {
    height: 1fr;
}

/* Note viewer */
#note-viewer {
    width: 1fr;
    height: 100%;
    background: $panel;
    border: round $border;
    border-title-color: $foreground;
    border-subtitle-color: $text-muted;

    &:focus {
        border: round $primary;
    }
}

/* Chat panel */
#chat-panel {
    width: 1fr;
    height: 100%;
}

#chat-header {
    height: 3;
    padding: 0 1;
}

#chat-title {
    width: 1fr;
    content-align: left middle;
    height: 3;
    text-style: bold;
    color: $primary;
}

#mode-toggle {
    min-width: 16;

    &.mode-all {
        background: $accent 40%;
    }
}

#chat-history {
    height: 1fr;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-subtitle-color: $text-muted;
    padding: 0 1;
}

.chat-message {
    height: auto;
    margin: 1 0 0 0;
    padding: 0 1;
}

.user-message {
    border-left: thick $primary;
}

.assistant-message {
    border-left: thick $secondary;
}

.error-message {
    border-left: thick $error;
    color: $error;
}

.context-message {
    border: round $accent;
    text-style: italic;
}

.message-header {
    color: $text-muted;
    height: 1;
}

.message-content {
    height: auto;
}

/* Pending context */
#context-display {
    height: auto;
    max-height: 10;
    display: none;
    border: round $accent 60%;
    border-title-color: $accent;
    padding: 0 1;

    &.-visible {
        display: block;
    }
}

.context-item {
    height: 1;
}

.context-item-label {
    width: 1fr;
}

.context-item-label.selection {
    color: $accent;
    text-style: bold;
}

.context-remove {
    min-width: 5;
    width: 5;
    height: 1;
    border: none;
}

/* Input */
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
}

#send-btn {
    width: 14;
    min-width: 14;
    height: 100%;
    border: none;
}

/* Log panel */
#debug-panel {
    display: none;
    height: 8;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-subtitle-color: $text-muted;
    padding: 0 1;
}
"""

DIALOG_CSS = """
#dialog {
    width: 72;
    height: auto;
    max-height: 90%;
    border: tall $accent;
    background: $surface;
    padding: 1 2;
}

#dialog-title {
    width: 100%;
    text-align: center;
    text-style: bold;
    color: $accent;
    padding-bottom: 1;
}

.field-label {
    margin-top: 1;
    color: $text-muted;
}

#dialog-buttons {
    height: 3;
    margin-top: 1;
    align: center middle;
}

#dialog-buttons Button {
    margin: 0 1;
}

#model-list, #note-list {
    height: auto;
    max-height: 14;
    margin-top: 1;
}

#model-list-status {
    margin-top: 1;
    text-align: center;
}
"""
