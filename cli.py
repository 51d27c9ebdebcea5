#!/usr/bin/env python3
"""
Calculator MCP CLI Tool

Command-line interface for running the calculator app, starting the MCP
server, or evaluating key sequences.
"""

import subprocess
import sys

import click

from calculator_mcp import apps  # noqa: F401  # Required for app auto-registration
from calculator_mcp.core.base import AppRegistry
from calculator_mcp.core.engine import CalculatorEngine


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """Calculator MCP - Terminal calculator with MCP interface."""
    pass


@cli.command()
def server():
    """Start the MCP server."""
    from calculator_mcp.server.mcp_server import main as server_main

    click.echo("Starting Calculator MCP Server...", err=True)
    server_main()


@cli.command()
def list_apps():
    """List all available applications."""
    app_configs = AppRegistry.list_apps()
    if not app_configs:
        click.echo("No applications available.")
        return

    click.echo("Available applications:")
    click.echo()

    for app_config in app_configs:
        click.echo(f"  {app_config.name}")
        click.echo(f"    Description: {app_config.description}")
        click.echo(f"    Version: {app_config.version}")
        click.echo(f"    Tags: {', '.join(app_config.tags)}")
        click.echo()


@cli.command()
@click.argument('app_name')
@click.option('--web', is_flag=True, help='Run in web browser mode')
@click.option('--port', default=8000, help='Port for web mode')
def run(app_name: str, web: bool, port: int):
    """Run a specific application."""
    app_class = AppRegistry.get_app_class(app_name)
    if not app_class:
        click.echo(f"Unknown application: {app_name}", err=True)
        click.echo("Use 'calculator-mcp list-apps' to see available applications.", err=True)
        sys.exit(1)

    if web:
        click.echo(f"Starting {app_name} in web mode on port {port}...")
        module_path = f"{app_class.__module__}:{app_class.__name__}"
        cmd = ["textual", "serve", module_path, "--port", str(port)]
        subprocess.run(cmd)
    else:
        click.echo(f"Starting {app_name} in terminal mode...")
        app = app_class()
        app.run()


@cli.command()
@click.argument('app_name')
def info(app_name: str):
    """Get detailed information about an application."""
    app_class = AppRegistry.get_app_class(app_name)
    if not app_class:
        click.echo(f"Unknown application: {app_name}", err=True)
        sys.exit(1)

    config = app_class.get_config()

    click.echo(f"Application: {config.name}")
    click.echo(f"Description: {config.description}")
    click.echo(f"Version: {config.version}")
    click.echo(f"Author: {config.author}")
    click.echo(f"Tags: {', '.join(config.tags)}")
    click.echo(f"Requires Web: {config.requires_web}")
    click.echo(f"Requires Sudo: {config.requires_sudo}")

    bindings = getattr(app_class, 'BINDINGS', [])
    if bindings:
        click.echo("\nKey Bindings:")
        for key, _action, description in bindings:
            click.echo(f"  {key}: {description}")


@cli.command(name="eval")
@click.argument('keys')
@click.option('--raw', is_flag=True, help='Print the unformatted display value')
def eval_keys(keys: str, raw: bool):
    """Press KEYS on a fresh calculator and print the display.

    Example: calculator-mcp eval '7+3='
    """
    try:
        engine = CalculatorEngine().press_sequence(keys)
    except ValueError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    click.echo(engine.display if raw else engine.formatted_display)


if __name__ == "__main__":
    cli()
