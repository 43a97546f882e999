from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from toolver import installs, plugins, resolver, runner
from toolver.config import Config
from toolver.errors import ToolverError

app = typer.Typer(
    no_args_is_help=True,
    help=(
        "Resolve the active version of asdf-managed tools.\n\n"
        "[bold magenta]Resolution Order[/]\n"
        "- [cyan]ASDF_<TOOL>_VERSION[/cyan] environment variable\n"
        "- [cyan].tool-versions[/cyan] (and legacy files) from the directory upwards\n"
        "- [cyan].tool-versions[/cyan] in the home directory\n\n"
        "Set [cyan]ASDF_IGNORE_PATCH[/cyan], [cyan]ASDF_IGNORE_MINOR[/cyan] or "
        "[cyan]ASDF_IGNORE_VERSION[/cyan] to let [green]which[/green] and "
        "[green]match[/green] fall back to installed versions."
    ),
    rich_markup_mode="rich",
)
console = Console()

NOT_SET = "______"


def _handle_error(err: ToolverError) -> None:
    console.print(f"[red]{err.format()}[/red]")
    raise typer.Exit(code=1)


def _start_dir(directory: Path | None) -> Path:
    return (directory or Path.cwd()).absolute()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each resolution step."),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s [%(name)s] %(message)s",
            force=True,
        )


@app.command()
def current(
    plugin_name: str | None = typer.Argument(None, metavar="PLUGIN", help="Plugin to resolve; all when omitted."),
    directory: Path | None = typer.Option(None, "--dir", "-d", help="Directory to resolve from."),
) -> None:
    """Show the active version of one or every installed plugin."""
    conf = Config.load()
    start = _start_dir(directory)
    try:
        if plugin_name is None:
            selected = plugins.list_plugins(conf)
        else:
            selected = [plugins.get_plugin(conf, plugin_name)]
        rows = []
        missing = False
        for plugin in selected:
            tool_versions, found = resolver.resolve_version(conf, plugin, start)
            if not found:
                missing = missing or plugin_name is not None
                rows.append((plugin.name, NOT_SET, "No version is set", "-"))
                continue
            source = tool_versions.source
            if tool_versions.directory is not None:
                source = str(tool_versions.directory / tool_versions.source)
            installed = all(
                installs.is_installed(conf, plugin, version)
                for version in tool_versions.versions
                if version != runner.SYSTEM_VERSION
            )
            rows.append(
                (plugin.name, " ".join(tool_versions.versions), source, "yes" if installed else "no")
            )
    except ToolverError as err:
        _handle_error(err)

    if not rows:
        console.print("No plugins installed. Run: asdf plugin add <name>")
        return

    table = Table(box=box.SIMPLE_HEAVY, show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Version")
    table.add_column("Source")
    table.add_column("Installed", justify="center")
    for row in rows:
        table.add_row(*row)
    console.print(table)
    if missing:
        raise typer.Exit(code=1)


@app.command()
def which(
    plugin_name: str = typer.Argument(..., metavar="PLUGIN"),
    directory: Path | None = typer.Option(None, "--dir", "-d", help="Directory to resolve from."),
) -> None:
    """Print the install path of the selected version."""
    conf = Config.load()
    try:
        plugin = plugins.get_plugin(conf, plugin_name)
        version, _ = runner.select_version(conf, plugin, _start_dir(directory))
    except ToolverError as err:
        _handle_error(err)
    if version == runner.SYSTEM_VERSION:
        typer.echo(runner.SYSTEM_VERSION)
        return
    typer.echo(str(installs.install_path(conf, plugin, version)))


@app.command()
def match(
    plugin_name: str = typer.Argument(..., metavar="PLUGIN"),
    versions: list[str] = typer.Argument(..., help="Requested versions."),
) -> None:
    """Print the installed version that the ignore policies select."""
    conf = Config.load()
    try:
        plugin = plugins.get_plugin(conf, plugin_name)
    except ToolverError as err:
        _handle_error(err)
    best = resolver.find_best_matching_version(conf, plugin, versions)
    if not best:
        _handle_error(
            ToolverError(
                "No installed version matches.",
                "Set ASDF_IGNORE_PATCH, ASDF_IGNORE_MINOR or ASDF_IGNORE_VERSION.",
            )
        )
    typer.echo(best)
