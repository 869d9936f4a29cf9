"""Conversion between settings library entries and addon identities.

An enabled addon is recorded in the editor settings as the path of its
``types`` directory inside the LuaRocks tree::

    <tree>/lib/luarocks/[rocks-5.x/]<name>/<version>/types

The version is the parent directory of ``types`` and the name is the parent
of the version. Strings that do not have this shape are not addon entries and
are left alone.
"""

import os
from pathlib import PurePath

from llynx.core.addon import Addon
from llynx.core.errors import AddonPathError

TYPES_DIR = "types"

PathInput = str | bytes | os.PathLike[str]


def tree_lib_prefix(tree: str | os.PathLike[str]) -> str:
    """Get the directory under which a tree installs its rocks."""
    return str(PurePath(tree) / "lib" / "luarocks")


def _as_text(path: PathInput) -> str:
    # bytes go through the filesystem encoding; undecodable bytes survive as
    # lone surrogates and are rejected in _segment()
    if isinstance(path, bytes):
        return os.fsdecode(path)
    return os.fspath(path)


def _segment(part: PurePath, path: str) -> str:
    name = part.name
    try:
        name.encode("utf-8")
    except UnicodeEncodeError as e:
        raise AddonPathError(
            f"directory {name!r} in '{path}' is not valid UTF-8", path=path
        ) from e
    return name


def accepts(path: PathInput, lib_prefix: str) -> bool:
    """Check whether a library entry refers to an addon in the tree.

    Args:
        path: Library entry from the settings file
        lib_prefix: Result of :func:`tree_lib_prefix` for the tree

    Returns:
        True for relative paths under ``lib_prefix`` ending in ``types``
    """
    candidate = PurePath(_as_text(path))
    if candidate.anchor or candidate.is_absolute():
        return False
    if candidate.name != TYPES_DIR:
        return False
    return candidate.is_relative_to(PurePath(lib_prefix))


def decode(path: PathInput, lib_prefix: str) -> Addon:
    """Derive the addon identity of an accepted library entry.

    Args:
        path: Library entry accepted by :func:`accepts`
        lib_prefix: Result of :func:`tree_lib_prefix` for the tree

    Returns:
        Addon whose location is the entry itself

    Raises:
        ValueError: If the entry is not accepted
        AddonPathError: If the name or version directory is not valid UTF-8
    """
    if not accepts(path, lib_prefix):
        raise ValueError(f"not an addon entry under '{lib_prefix}': {path!r}")

    text = _as_text(path)
    # the prefix has at least three parts, so both parents exist
    version_dir = PurePath(text).parent
    name_dir = version_dir.parent
    return Addon(
        name=_segment(name_dir, text),
        version=_segment(version_dir, text),
        location=text,
    )


def encode(lib_prefix: str, addon: Addon) -> str:
    """Render the library entry that enables an installed addon.

    Args:
        lib_prefix: Result of :func:`tree_lib_prefix` for the tree
        addon: Installed addon whose location is its installation directory

    Returns:
        The ``types`` path to record in the settings file

    Raises:
        ValueError: If the addon has no location
        AddonPathError: If the resulting entry would not be recognized as
            belonging to the tree
    """
    if addon.location is None:
        raise ValueError(f"addon '{addon.name}' has no location")

    path = str(PurePath(addon.location) / TYPES_DIR)
    if not accepts(path, lib_prefix):
        raise AddonPathError(
            f"'{path}' for addon '{addon.name}' is not a relative path under '{lib_prefix}'",
            path=path,
        )
    return path
