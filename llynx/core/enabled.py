"""Enabled-set reconciliation.

An addon is enabled for a workspace when the ``types`` path of its installed
version appears in the settings library list. The functions in this module
compute new library lists without touching the disk; :class:`EnabledAddons`
binds them to a settings file.
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from llynx.core import paths
from llynx.core.addon import Addon
from llynx.core.errors import AddonPathError, NotInstalledError, StaleEntriesError
from llynx.core.settings import LIBRARY_KEY, SettingsFile, get_library, with_library
from llynx.utils.aggregate import collect

logger = logging.getLogger(__name__)


class InstalledLookup(Protocol):
    """Lookup into the installed registry.

    Returned addons carry their installation directory as location.
    """

    def lookup(self, name: str | None = None, version: str | None = None) -> list[Addon]: ...


def list_enabled(
    library: list[str],
    lib_prefix: str,
    name_filter: str | None = None,
) -> list[Addon]:
    """Derive the enabled addons from library entries.

    Entries that are not addon paths are skipped. Malformed addon entries are
    reported together.

    Args:
        library: Entries of the settings library field
        lib_prefix: Result of :func:`paths.tree_lib_prefix` for the tree
        name_filter: Only keep addons whose name contains this string

    Returns:
        Enabled addons in library order

    Raises:
        AddonPathError: If one entry is malformed
        AggregateError: If several entries are malformed
    """
    entries = [entry for entry in library if paths.accepts(entry, lib_prefix)]
    addons = collect(entries, lambda entry: paths.decode(entry, lib_prefix), AddonPathError)
    return [addon for addon in addons if addon.matches(name_filter)]


def is_enabled(name: str, library: list[str], lib_prefix: str) -> bool:
    """Check whether any version of ``name`` is enabled."""
    return any(addon.name == name for addon in list_enabled(library, lib_prefix, name))


def resolve_entry(name: str, installed: InstalledLookup, lib_prefix: str) -> str:
    """Get the library entry for the installed version of ``name``.

    Raises:
        NotInstalledError: If no installed addon is named ``name``
        AddonPathError: If the install location is outside the tree
    """
    addon = next((a for a in installed.lookup(name) if a.name == name), None)
    if addon is None:
        raise NotInstalledError(name)
    return paths.encode(lib_prefix, addon)


def enable_in_library(
    name: str,
    installed: InstalledLookup,
    library: list[str],
    lib_prefix: str,
) -> list[str]:
    """Compute the library list with ``name`` enabled.

    The new entry goes at the end so existing entries keep their order.
    Returns the list unchanged if the addon is already enabled.
    """
    if is_enabled(name, library, lib_prefix):
        logger.info("addon '%s' is already enabled", name)
        return list(library)

    entry = resolve_entry(name, installed, lib_prefix)
    logger.debug("Appending '%s' to the library", entry)
    return [*library, entry]


def disable_in_library(
    name: str,
    installed: InstalledLookup,
    library: list[str],
    lib_prefix: str,
) -> list[str]:
    """Compute the library list with ``name`` disabled.

    Removes every entry equal to the installed version's ``types`` path.
    Entries for other versions of the same addon are kept.
    Returns the list unchanged if the addon is not enabled.

    Raises:
        StaleEntriesError: If the addon is enabled only at other versions
    """
    if not is_enabled(name, library, lib_prefix):
        logger.info("addon '%s' is already disabled", name)
        return list(library)

    entry = resolve_entry(name, installed, lib_prefix)
    remaining = [item for item in library if item != entry]

    stale = [
        addon.version
        for addon in list_enabled(remaining, lib_prefix, name)
        if addon.name == name
    ]
    if stale and len(remaining) == len(library):
        raise StaleEntriesError(name, stale)
    if stale:
        logger.warning(
            "addon '%s' is still enabled at other versions: %s", name, ", ".join(stale)
        )
    return remaining


class EnabledAddons:
    """The enabled addons of one workspace.

    Every operation reads the settings file afresh; ``enable`` and ``disable``
    write it back only when the library list changes.
    """

    def __init__(
        self,
        tree: str,
        settings_path: Path,
        installed: InstalledLookup,
        library_key: str = LIBRARY_KEY,
    ):
        """Initialize the enabled set.

        Args:
            tree: LuaRocks tree directory, as it appears in library entries
            settings_path: Editor settings file
            installed: Installed registry used to locate addons
            library_key: Name of the settings library field
        """
        self._lib_prefix = paths.tree_lib_prefix(tree)
        self._settings = SettingsFile(settings_path, library_key)
        self._installed = installed

    @property
    def settings(self) -> SettingsFile:
        return self._settings

    @property
    def lib_prefix(self) -> str:
        return self._lib_prefix

    def list_addons(self, name_filter: str | None = None) -> list[Addon]:
        """List enabled addons."""
        library = get_library(self._settings.read()) or []
        return list_enabled(library, self._lib_prefix, name_filter)

    def enable(self, name: str) -> bool:
        """Enable an addon.

        Returns:
            True if the settings file was changed
        """
        return self._update(
            lambda library: enable_in_library(name, self._installed, library, self._lib_prefix)
        )

    def disable(self, name: str) -> bool:
        """Disable an addon.

        Returns:
            True if the settings file was changed
        """
        return self._update(
            lambda library: disable_in_library(name, self._installed, library, self._lib_prefix)
        )

    def _update(self, compute: Callable[[list[str]], list[str]]) -> bool:
        doc = self._settings.read()
        library = get_library(doc) or []
        new_library = compute(library)
        if new_library == library:
            return False
        self._settings.write(with_library(doc, new_library))
        return True

    def __repr__(self) -> str:
        return f"EnabledAddons(lib_prefix={self._lib_prefix!r}, settings={self._settings!r})"
