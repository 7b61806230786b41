"""Command-line interface for zipit."""
