"""Command-line interface for llynx."""
