"""
CLAUDY — Command Line
Validate plugins, verify the marketplace, list and scaffold plugins.

Usage:
    claudy validate <plugin> [--strict] [--json]
    claudy verify [--deep] [--strict] [--json]
    claudy list [--json]
    claudy info <plugin>
    claudy new <plugin> --description TEXT --author NAME [--command NAME] [--agent NAME]
    claudy tui
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .builder import AgentSpec, CommandSpec, PluginBuilder, PluginMetadata
from .catalog import install_hint, list_plugins, plugin_info
from .config import ConfigStore
from .discovery import available_plugins, resolve_plugin
from .errors import ClaudyError, PluginNotFoundError
from .marketplace import MarketplaceVerifier
from .report import plugins_table, render_marketplace_report, render_plugin_info, render_plugin_report
from .validator import PluginValidator

logger = logging.getLogger(__name__)

console = Console()
error_console = Console(stderr=True)


def setup_logging(level: str) -> None:
    pkg_logger = logging.getLogger("claudy")
    pkg_logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in pkg_logger.handlers):
        pkg_logger.addHandler(RichHandler(console=error_console, show_path=False, rich_tracebacks=True))


class Context:
    def __init__(self, root: Path) -> None:
        self.root = root
        self.store = ConfigStore(root)

    @property
    def config(self):
        return self.store.load()


pass_ctx = click.make_pass_decorator(Context)


def _echo_json(payload: object) -> None:
    click.echo(json.dumps(payload, indent=2))


@click.group()
@click.version_option(__version__, prog_name="claudy")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Marketplace checkout root.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, root: Path, verbose: bool) -> None:
    """Claude Code plugin marketplace toolkit."""
    state = Context(root.resolve())
    setup_logging("DEBUG" if verbose else state.config.log_level)
    logger.debug("Marketplace root: %s", state.root)
    ctx.obj = state


@cli.command()
@click.argument("name", required=False)
@click.option("--strict", is_flag=True, help="Treat warnings as failures.")
@click.option("--json", "as_json", is_flag=True, help="Emit the report as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Only show problems.")
@pass_ctx
def validate(state: Context, name: str | None, strict: bool, as_json: bool, quiet: bool) -> None:
    """Validate one plugin's structure and manifests."""
    plugins_dir = state.store.plugins_dir
    if not name:
        console.print("Usage: claudy validate <plugin-name>\n")
        console.print("Available plugins:")
        for label in available_plugins(plugins_dir):
            console.print(f"  {label}")
        sys.exit(1)

    try:
        plugin_dir = resolve_plugin(plugins_dir, name)
    except PluginNotFoundError as e:
        available = ", ".join(e.available) or "none"
        raise click.ClickException(f"{e}\nAvailable plugins: {available}") from e
    except ClaudyError as e:
        raise click.ClickException(str(e)) from e

    strict = strict or state.config.strict
    report = PluginValidator(state.config).validate(plugin_dir, name)
    if as_json:
        _echo_json(report.model_dump() | {"errors": report.errors, "warnings": report.warnings})
    else:
        render_plugin_report(console, report, strict=strict, quiet=quiet)
    sys.exit(0 if report.ok_for(strict) else 1)


@cli.command()
@click.option("--deep", is_flag=True, help="Run full plugin validation for each plugin.")
@click.option("--strict", is_flag=True, help="Treat warnings as failures.")
@click.option("--json", "as_json", is_flag=True, help="Emit the report as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Only show problems.")
@pass_ctx
def verify(state: Context, deep: bool, strict: bool, as_json: bool, quiet: bool) -> None:
    """Verify the marketplace manifest and every plugin it lists."""
    strict = strict or state.config.strict
    report = MarketplaceVerifier(state.root, state.config).verify(deep=deep)
    if as_json:
        _echo_json(report.model_dump() | {"errors": report.errors, "warnings": report.warnings})
    else:
        render_marketplace_report(console, report, strict=strict, quiet=quiet)
    sys.exit(0 if report.ok_for(strict) else 1)


@cli.command("list")
@click.option("--json", "as_json", is_flag=True, help="Emit the listing as JSON.")
@pass_ctx
def list_cmd(state: Context, as_json: bool) -> None:
    """List available plugins with their descriptions."""
    summaries = list_plugins(state.store.plugins_dir)
    if as_json:
        _echo_json([s.model_dump() for s in summaries])
        return

    console.print(plugins_table(summaries))
    marketplace = state.config.marketplace_name
    console.print("\nTo show plugin info:\n  claudy info <plugin-name>")
    console.print("\nTo validate a plugin:\n  claudy validate <plugin-name>")
    console.print(f"\nTo install via Claude Code:\n  {install_hint('<plugin-name>', marketplace)}")


@cli.command()
@click.argument("name")
@pass_ctx
def info(state: Context, name: str) -> None:
    """Show a plugin's manifest details, commands and agents."""
    try:
        summary = plugin_info(state.store.plugins_dir, name)
    except ClaudyError as e:
        raise click.ClickException(str(e)) from e
    render_plugin_info(console, summary, install_hint(name, state.config.marketplace_name))


@cli.command()
@click.argument("name")
@click.option("--description", required=True, help="One-line plugin description.")
@click.option("--author", required=True, help="Author name for plugin.json.")
@click.option("--version", "version", default="1.0.0", show_default=True)
@click.option("--tag", "tags", multiple=True, help="Keyword (repeatable).")
@click.option("--command", "commands", multiple=True, help="Command name to scaffold (repeatable).")
@click.option("--agent", "agents", multiple=True, help="Agent name to scaffold (repeatable).")
@pass_ctx
def new(
    state: Context,
    name: str,
    description: str,
    author: str,
    version: str,
    tags: tuple[str, ...],
    commands: tuple[str, ...],
    agents: tuple[str, ...],
) -> None:
    """Scaffold a new plugin under the plugins directory."""
    try:
        builder = PluginBuilder().with_metadata(
            PluginMetadata(name=name, version=version, description=description, author=author, tags=list(tags))
        )
        for cmd in commands:
            builder.add_command(CommandSpec(name=cmd, description=f"{cmd} command", prompt="<!-- Add the command prompt -->"))
        for agent in agents:
            builder.add_agent(AgentSpec(name=agent, description=f"{agent} agent", instructions="<!-- Add detailed instructions -->"))
        written = builder.write(state.store.plugins_dir / name)
    except ValidationError as e:
        raise click.ClickException(f"Invalid plugin definition: {e.errors()[0]['msg']}") from e
    except ClaudyError as e:
        raise click.ClickException(str(e)) from e

    console.print(f"[#9ece6a]✓[/] Created {name} ({len(written)} files)")
    for path in written:
        console.print(f"  [#565f89]{path.relative_to(state.root)}[/]")


@cli.command()
@pass_ctx
def tui(state: Context) -> None:
    """Browse the marketplace in a terminal UI."""
    from .app import ClaudyApp

    ClaudyApp(state.root).run()


def main() -> None:
    cli()
