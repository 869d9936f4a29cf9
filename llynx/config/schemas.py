"""Pydantic schemas for llynx configuration.

Configuration is resolved in three layers, each overriding the previous one:

- built-in defaults (:class:`Config`)
- the TOML configuration file (``.llynx.toml``)
- command-line flags
"""

from pydantic import BaseModel, ConfigDict, Field

from llynx.core.settings import LIBRARY_KEY
from llynx.registry.luarocks import DEFAULT_EXECUTABLE, DEFAULT_SERVER, DEFAULT_TREE

DEFAULT_CONFIG_FILE = ".llynx.toml"
DEFAULT_SETTINGS_FILE = ".vscode/settings.json"


class ConfigOverrides(BaseModel):
    """Partial configuration read from a config file or the command line.

    Unset fields leave the underlying value untouched.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    schema_: str | None = Field(default=None, alias="$schema")  # editor hint, unused
    luarocks: str | None = None
    tree: str | None = None
    settings: str | None = None
    server: str | None = None
    library_key: str | None = None
    verbose: int | None = Field(default=None, ge=0)


class Config(BaseModel):
    """Fully resolved configuration."""

    luarocks: str = DEFAULT_EXECUTABLE
    tree: str = DEFAULT_TREE
    settings: str = DEFAULT_SETTINGS_FILE
    server: str = DEFAULT_SERVER
    library_key: str = LIBRARY_KEY
    verbose: int = 0

    def extend(self, overrides: ConfigOverrides | None) -> "Config":
        """Return a copy with every value set in ``overrides`` applied."""
        if overrides is None:
            return self
        updates = overrides.model_dump(exclude_none=True, exclude={"schema_"})
        return self.model_copy(update=updates)
