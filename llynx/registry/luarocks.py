"""LuaRocks client for the installed and online addon registries.

All package management is delegated to the ``luarocks`` executable. Listings
use its ``--porcelain`` output: one tab-separated record per line.
"""

from __future__ import annotations

import csv
import io
import logging
import subprocess
from pathlib import PurePath

from llynx.core.addon import Addon
from llynx.core.errors import LlynxError
from llynx.utils.filesystem import relative_to_cwd

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "luarocks"
DEFAULT_TREE = ".lls_addons"
DEFAULT_SERVER = "https://luarocks.org/m/lls-addons"

# porcelain column layouts
INSTALLED_FIELDS = ("name", "version", "status", "rocks_dir")
ONLINE_FIELDS = ("name", "version", "file_type", "source")


class LuaRocksError(LlynxError):
    """Error running LuaRocks or interpreting its output."""

    def __init__(self, message: str, command: list[str] | None = None):
        self.command = command
        super().__init__(message)


def parse_porcelain(output: str, fields: tuple[str, ...]) -> list[dict[str, str]]:
    """Parse tab-separated porcelain output into records.

    Args:
        output: Standard output of a ``--porcelain`` command
        fields: Expected column names

    Returns:
        One dictionary per non-blank line

    Raises:
        LuaRocksError: If a line has fewer columns than expected
    """
    records = []
    reader = csv.reader(io.StringIO(output), delimiter="\t")
    for line_number, row in enumerate(reader, start=1):
        if not row or not any(cell.strip() for cell in row):
            continue
        if len(row) < len(fields):
            raise LuaRocksError(
                f"unexpected LuaRocks output on line {line_number}: "
                f"expected {len(fields)} columns, got {len(row)}"
            )
        records.append(dict(zip(fields, row, strict=False)))
    return records


class LuaRocks:
    """Runs LuaRocks against one tree and one server."""

    def __init__(
        self,
        executable: str = DEFAULT_EXECUTABLE,
        tree: str = DEFAULT_TREE,
        server: str = DEFAULT_SERVER,
    ):
        """Initialize the client.

        Args:
            executable: Path to the luarocks executable, or a name on PATH
            tree: Rocks tree addons are installed into
            server: Server searched first for online addons
        """
        self._executable = executable
        self._tree = tree
        self._server = server

    @property
    def executable(self) -> str:
        return self._executable

    @property
    def tree(self) -> str:
        return self._tree

    @property
    def server(self) -> str:
        return self._server

    def _run(self, args: list[str], capture: bool = True) -> subprocess.CompletedProcess[str]:
        """Run a luarocks command.

        Args:
            args: Arguments (without the executable)
            capture: Capture output instead of passing it through to the terminal

        Returns:
            Completed process

        Raises:
            LuaRocksError: If luarocks is missing, fails, or prints undecodable text
        """
        cmd = [self._executable] + args
        logger.info("executing: %s", " ".join(cmd))
        try:
            return subprocess.run(
                cmd,
                capture_output=capture,
                text=True,
                encoding="utf-8",
                check=True,
            )
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            logger.error("LuaRocks command failed: %s - %s", " ".join(cmd), stderr)
            message = f"LuaRocks command failed with exit code {e.returncode}: {' '.join(cmd)}"
            if stderr:
                message += f"\n{stderr}"
            raise LuaRocksError(message, command=cmd) from e
        except FileNotFoundError as e:
            raise LuaRocksError(
                f"LuaRocks executable not found: {self._executable}", command=cmd
            ) from e
        except UnicodeDecodeError as e:
            raise LuaRocksError(f"while decoding LuaRocks output: {e}", command=cmd) from e

    def lookup(self, name: str | None = None, version: str | None = None) -> list[Addon]:
        """List installed addons.

        Args:
            name: Only list addons matching this name
            version: Only list this version (requires ``name``)

        Returns:
            Installed addons located at their installation directory
        """
        args = ["--tree", self._tree, "list", "--porcelain"]
        if name is not None:
            args.append(name)
            if version is not None:
                args.append(version)

        result = self._run(args)
        addons = []
        for record in parse_porcelain(result.stdout, INSTALLED_FIELDS):
            location = PurePath(record["rocks_dir"]) / record["name"] / record["version"]
            addons.append(
                Addon(
                    name=record["name"],
                    version=record["version"],
                    location=relative_to_cwd(str(location)),
                )
            )
        logger.debug("Found %d installed addon(s)", len(addons))
        return addons

    def search(self, name_filter: str | None = None) -> list[Addon]:
        """List addons available on the server.

        Args:
            name_filter: Only list addons matching this name

        Returns:
            Online addons, without location
        """
        args = [
            "--only-server",
            self._server,
            "search",
            "--porcelain",
            name_filter if name_filter is not None else "--all",
        ]
        result = self._run(args)

        seen: set[tuple[str, str]] = set()
        addons = []
        for record in parse_porcelain(result.stdout, ONLINE_FIELDS):
            # each version is listed once per file type (rockspec, src, all, ...)
            if record["file_type"] != "rockspec":
                continue
            addon = Addon(name=record["name"], version=record["version"])
            if addon.key in seen:
                continue
            seen.add(addon.key)
            addons.append(addon)
        logger.debug("Found %d online addon(s)", len(addons))
        return addons

    def install(self, name: str, version: str | None = None) -> None:
        """Install an addon into the tree."""
        args = ["--tree", self._tree, "install", name]
        if version is not None:
            args.append(version)
        self._run(args, capture=False)

    def remove(self, name: str, version: str | None = None) -> None:
        """Remove an addon from the tree."""
        args = ["--tree", self._tree, "remove", name]
        if version is not None:
            args.append(version)
        self._run(args, capture=False)

    def __repr__(self) -> str:
        return f"LuaRocks(executable={self._executable!r}, tree={self._tree!r})"
