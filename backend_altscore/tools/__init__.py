"""Command-line tools for offline scoring."""
