"""Shared fixtures for llynx tests."""

import json
import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from llynx.core.addon import Addon

SAY_INSTALL_DIR = ".lls_addons/lib/luarocks/rocks-5.1/say/1.4.1-3"
SAY_ENTRY = ".lls_addons/lib/luarocks/rocks-5.1/say/1.4.1-3/types"


class FakeInstalled:
    """Installed registry backed by a fixed list of addons."""

    def __init__(self, addons: list[Addon]):
        self.addons = addons
        self.calls: list[tuple[str | None, str | None]] = []

    def lookup(self, name: str | None = None, version: str | None = None) -> list[Addon]:
        self.calls.append((name, version))
        return [
            addon
            for addon in self.addons
            if (name is None or name in addon.name)
            and (version is None or addon.version == version)
        ]


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory."""
    path = Path(tempfile.mkdtemp(prefix="llynx_test_"))
    yield path
    if path.exists():
        shutil.rmtree(path)


@pytest.fixture
def say_addon() -> Addon:
    """The 'say' addon as reported by the installed registry."""
    return Addon(name="say", version="1.4.1-3", location=SAY_INSTALL_DIR)


@pytest.fixture
def installed(say_addon: Addon) -> FakeInstalled:
    """Installed registry containing 'say' and 'luassert'."""
    return FakeInstalled(
        [
            say_addon,
            Addon(
                name="luassert",
                version="1.9.0-1",
                location=".lls_addons/lib/luarocks/rocks-5.1/luassert/1.9.0-1",
            ),
        ]
    )


@pytest.fixture
def empty_installed() -> FakeInstalled:
    """Installed registry with nothing installed."""
    return FakeInstalled([])


@pytest.fixture
def settings_path(temp_dir: Path) -> Path:
    """Path to a (not yet created) workspace settings file."""
    return temp_dir / ".vscode" / "settings.json"


@pytest.fixture
def settings_with_say(settings_path: Path) -> Path:
    """Settings file enabling 'say' next to unrelated settings."""
    settings_path.parent.mkdir(parents=True)
    settings_path.write_text(
        json.dumps(
            {
                "editor.tabSize": 4,
                "Lua.workspace.library": ["${3rd}/love2d/library", SAY_ENTRY],
                "Lua.diagnostics.globals": ["vim"],
            }
        )
    )
    return settings_path
