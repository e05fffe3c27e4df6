"""dusk-mcp command-line interface.

Runs the Laravel Dusk MCP server over stdio and offers a few helpers for
checking what the server will see.
"""

import asyncio
import json
from pathlib import Path

import click

from dusk_mcp.config import load_config, setup_logging
from dusk_mcp.context import resolve_initial_project
from dusk_mcp.dispatcher import ToolDispatcher
from dusk_mcp.projects import default_search_paths, find_laravel_projects, inspect_project
from dusk_mcp.server import serve as run_server
from dusk_mcp.version import __version__

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group()
@click.version_option(version=__version__, prog_name="dusk-mcp")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config.yaml (default: ~/.dusk-mcp/config.yaml)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """Laravel Dusk MCP server.

    Exposes Dusk test running, test listing, environment checks, screenshot
    cleanup, ChromeDriver installation and the development server as MCP
    tools, and Dusk screenshots and logs as MCP resources.
    """
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config_path)


@cli.command()
@click.option(
    "--project",
    "-p",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Laravel project to start with (default: $LARAVEL_PATH or cwd)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Logging level (default: $DUSK_MCP_LOG_LEVEL or INFO)",
)
@click.pass_context
def serve(ctx: click.Context, project: Path | None, log_level: str | None) -> None:
    """Run the MCP server on stdin/stdout."""
    config = ctx.obj["config"]
    setup_logging(log_level or config.log_level)

    async def _main() -> None:
        active = await resolve_initial_project(config, project)
        await run_server(ToolDispatcher(active, config))

    try:
        asyncio.run(_main())
    except KeyboardInterrupt:
        pass


@cli.command()
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output as JSON",
)
@click.pass_context
def projects(ctx: click.Context, json_output: bool) -> None:
    """List Laravel projects found in the common locations."""
    config = ctx.obj["config"]

    async def _discover() -> list:
        found = await find_laravel_projects(default_search_paths(config.search_paths))
        return await asyncio.gather(*(inspect_project(path) for path in found))

    contexts = asyncio.run(_discover())

    if json_output:
        click.echo(json.dumps([c.to_dict() for c in contexts], indent=2))
        return

    if not contexts:
        click.echo("No Laravel projects found in common locations.")
        return

    for context in contexts:
        status = "Dusk installed" if context.has_test_runner else "Dusk not installed"
        click.echo(f"{context.path} ({status})")
