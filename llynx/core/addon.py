"""Addon identity shared by the online, installed and enabled registries."""

from dataclasses import dataclass, field


@dataclass(frozen=True, order=True)
class Addon:
    """A named, versioned package of LuaLS type definitions.

    Two addons are the same addon when their ``(name, version)`` pairs are
    equal. ``location`` is informational only: for installed addons it is the
    installation directory, for enabled addons the ``types`` path recorded in
    the settings file, and for online addons it is ``None``.
    """

    name: str
    version: str
    location: str | None = field(default=None, compare=False)

    @property
    def key(self) -> tuple[str, str]:
        """Get the identity of this addon."""
        return (self.name, self.version)

    def matches(self, name_filter: str | None) -> bool:
        """Check whether the addon name contains ``name_filter``."""
        return name_filter is None or name_filter in self.name

    def __str__(self) -> str:
        return f"{self.name} {self.version}"
