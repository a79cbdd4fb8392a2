"""Command line interface for history-py."""
