"""Base exception for vaultchat.

Each module defines its own subclasses next to the code that raises them.
"""


class VaultChatError(Exception):
    """Base class for all vaultchat errors."""
