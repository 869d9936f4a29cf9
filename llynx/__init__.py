"""llynx - addon manager for the Lua language server."""

__version__ = "0.1.0"
