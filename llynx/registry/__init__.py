"""Clients for the installed and online addon registries."""
