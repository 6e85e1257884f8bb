"""User-input errors for the chat session.

These are reported as transient notices; no request is sent.
"""

from ..errors import VaultChatError


class ChatInputError(VaultChatError):
    """The send was rejected before any request was made."""


class EmptyQuestionError(ChatInputError):
    def __init__(self) -> None:
        super().__init__("Type a question first.")


class MissingApiKeyError(ChatInputError):
    def __init__(self) -> None:
        super().__init__("Set your API key in the settings first.")


class EmptySelectionError(ChatInputError):
    def __init__(self) -> None:
        super().__init__("Select some text first.")


class ChatBusyError(ChatInputError):
    def __init__(self) -> None:
        super().__init__("A request is already in progress.")
