"""CLI: dioxide config show|set-url|set-debug"""

import json

import click
from rich.console import Console

from dioxide import config as config_mod

console = Console()


@click.group()
def config():
    """Client configuration."""


@config.command("show")
def config_show():
    """Print the effective configuration."""
    cfg = config_mod.load_config()
    click.echo(json.dumps(cfg.model_dump(), indent=2))


@config.command("set-url")
@click.argument("service_url")
def config_set_url(service_url: str):
    """Set the RPC service endpoint."""
    cfg = config_mod.load_config()
    cfg.service_url = service_url
    config_mod.save_config(cfg)
    console.print(f"[green]Service URL set to {service_url}[/green]")


@config.command("set-debug")
@click.argument("state", type=click.Choice(["on", "off"]))
def config_set_debug(state: str):
    """Turn request/response debug logging on or off."""
    cfg = config_mod.load_config()
    cfg.debug = state == "on"
    config_mod.save_config(cfg)
    console.print(f"[green]Debug logging {state}.[/green]")
