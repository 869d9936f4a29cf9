"""Addon identity, settings documents and enabled-set reconciliation."""
