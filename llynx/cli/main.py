"""Main CLI application for llynx."""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from llynx import __version__
from llynx.config.parser import ConfigError, resolve_config, save_config
from llynx.config.schemas import DEFAULT_CONFIG_FILE, Config, ConfigOverrides
from llynx.core.addon import Addon
from llynx.core.enabled import EnabledAddons
from llynx.core.errors import LlynxError
from llynx.registry.luarocks import LuaRocks
from llynx.utils.aggregate import AggregateError

app = typer.Typer(
    name="llynx",
    help="Manage LuaLS addons with LuaRocks",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)

logger = logging.getLogger("llynx")


class ListSource(str, Enum):
    """Registry to list addons from."""

    online = "online"
    installed = "installed"
    enabled = "enabled"


def setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2=DEBUG, 3+=DEBUG with source locations
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logger.setLevel(level)

    if not logger.handlers:
        handler = RichHandler(
            console=error_console,
            show_time=verbosity >= 2,
            show_path=verbosity >= 3,
            rich_tracebacks=True,
        )
        handler.setLevel(level)
        logger.addHandler(handler)
    else:
        for h in logger.handlers:
            h.setLevel(level)


def print_error(message: str) -> None:
    """Report a failure on stderr."""
    error_console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    """Report a completed change."""
    console.print(f"[green]✓[/green] {message}")


def fail(context: str, error: Exception) -> typer.Exit:
    """Report an error with context and build the exit to raise."""
    print_error(f"{context}\n{error}")
    return typer.Exit(1)


def get_config(ctx: typer.Context) -> Config:
    config: Config = ctx.obj
    return config


def get_luarocks(config: Config) -> LuaRocks:
    return LuaRocks(executable=config.luarocks, tree=config.tree, server=config.server)


def get_enabled(config: Config) -> EnabledAddons:
    return EnabledAddons(
        tree=config.tree,
        settings_path=Path(config.settings),
        installed=get_luarocks(config),
        library_key=config.library_key,
    )


def print_addons(addons: list[Addon], title: str) -> None:
    """Print addons grouped by name, sorted by name then version."""
    if not addons:
        logger.error("no addons found matching criteria")
        return

    table = Table(title=title)
    table.add_column("Addon", style="cyan")
    table.add_column("Version", style="green")

    last_name = None
    for addon in sorted(addons):
        table.add_row(addon.name if addon.name != last_name else "", addon.version)
        last_name = addon.name

    console.print(table)


@app.callback()
def callback(
    ctx: typer.Context,
    config_file: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help=f"Configuration file for frequently used flags (defaults to {DEFAULT_CONFIG_FILE})",
        ),
    ] = None,
    luarocks: Annotated[
        str | None,
        typer.Option("--luarocks", "-l", help="Path to the LuaRocks executable"),
    ] = None,
    tree: Annotated[
        str | None,
        typer.Option("--tree", "-t", help="Rocks tree directory for addons"),
    ] = None,
    settings: Annotated[
        str | None,
        typer.Option("--settings", help="Editor settings file to modify"),
    ] = None,
    server: Annotated[
        str | None,
        typer.Option("--server", help="Server searched first for addons"),
    ] = None,
    library_key: Annotated[
        str | None,
        typer.Option("--library-key", help="Settings key holding the library list"),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v info, -vv debug, -vvv trace)",
        ),
    ] = 0,
) -> None:
    """llynx - add LuaLS addons to a workspace using LuaRocks."""
    cli_overrides = ConfigOverrides(
        luarocks=luarocks,
        tree=tree,
        settings=settings,
        server=server,
        library_key=library_key,
        verbose=verbose or None,
    )
    try:
        config = resolve_config(cli_overrides, config_file)
    except ConfigError as e:
        setup_logging(verbose)
        print_error(str(e))
        raise typer.Exit(1) from e

    setup_logging(config.verbose)
    logger.debug("Using configuration: %s", config)
    ctx.obj = config


@app.command()
def version() -> None:
    """Show the llynx version."""
    console.print(f"llynx {__version__}")


@app.command("list")
def list_addons(
    ctx: typer.Context,
    source: Annotated[
        ListSource,
        typer.Argument(help="Which addons to list"),
    ] = ListSource.installed,
    name_filter: Annotated[
        str | None,
        typer.Option("--filter", "-f", help="Only include addons with this string in their names"),
    ] = None,
) -> None:
    """List online, installed, or enabled addons."""
    config = get_config(ctx)
    try:
        if source is ListSource.enabled:
            addons = get_enabled(config).list_addons(name_filter)
        elif source is ListSource.online:
            addons = get_luarocks(config).search(name_filter)
        else:
            addons = [
                addon
                for addon in get_luarocks(config).lookup(name_filter)
                if addon.matches(name_filter)
            ]
    except (LlynxError, AggregateError) as e:
        raise fail("while listing addons", e) from e

    print_addons(addons, f"{source.value.capitalize()} Addons")


@app.command()
def install(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="The addon to install")],
    addon_version: Annotated[
        str | None,
        typer.Argument(metavar="VERSION", help="The version to install"),
    ] = None,
) -> None:
    """Install an addon."""
    config = get_config(ctx)
    try:
        get_luarocks(config).install(name, addon_version)
    except LlynxError as e:
        raise fail(f"while installing '{name}'", e) from e
    print_success(f"Installed {name}")


@app.command()
def remove(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="The addon to remove")],
    addon_version: Annotated[
        str | None,
        typer.Argument(metavar="VERSION", help="The specific version to remove"),
    ] = None,
    disable_first: Annotated[
        bool,
        typer.Option("--disable", "-d", help="Disable the addon in the workspace first"),
    ] = False,
) -> None:
    """Remove an addon."""
    config = get_config(ctx)
    if disable_first:
        logger.info("disabling '%s' first...", name)
        try:
            get_enabled(config).disable(name)
        except (LlynxError, AggregateError) as e:
            raise fail(f"while disabling '{name}' before uninstalling", e) from e

    try:
        get_luarocks(config).remove(name, addon_version)
    except LlynxError as e:
        raise fail(f"while removing '{name}'", e) from e
    print_success(f"Removed {name}")


@app.command()
def enable(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="The addon to enable")],
) -> None:
    """Enable an addon for the current workspace."""
    config = get_config(ctx)
    try:
        changed = get_enabled(config).enable(name)
    except (LlynxError, AggregateError) as e:
        raise fail(f"while enabling '{name}'", e) from e

    if changed:
        print_success(f"Enabled {name} in {config.settings}")
    else:
        console.print(f"{name} is already enabled")


@app.command()
def disable(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="The addon to disable")],
) -> None:
    """Disable an addon for the current workspace."""
    config = get_config(ctx)
    try:
        changed = get_enabled(config).disable(name)
    except (LlynxError, AggregateError) as e:
        raise fail(f"while disabling '{name}'", e) from e

    if changed:
        print_success(f"Disabled {name} in {config.settings}")
    else:
        console.print(f"{name} is already disabled")


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file"),
    ] = False,
) -> None:
    """Write a config file with the current settings.

    Creates .llynx.toml in the current directory.
    """
    config = get_config(ctx)
    path = Path(DEFAULT_CONFIG_FILE)

    if path.exists() and not force:
        print_error(f"{path} already exists")
        print_error("To overwrite it, use --force")
        raise typer.Exit(1)

    try:
        save_config(path, config)
    except OSError as e:
        raise fail(f"while writing '{path}'", e) from e
    print_success(f"Created {path}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
