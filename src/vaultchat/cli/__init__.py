"""Command line interface for vaultchat."""
