"""
Dioxide CLI: `dioxide` command.

Commands:
  dioxide config show|set-url|set-debug   Client configuration
  dioxide call <uri> <method>             Make one or more RPC calls
"""

import asyncio
import logging
from typing import Callable, Optional

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
    from rich.table import Table
except ImportError:
    raise SystemExit("CLI requires extras: pip install dioxide[cli]")

from dioxide import config as config_mod
from dioxide.client import AsyncDioxide
from dioxide.stats import CallStats
from dioxide.transport.base import Transport

console = Console()


# Factory for the transport `dioxide call` uses. None means the client creates
# and owns an HttpTransport; tests set it to route calls to a mock endpoint.
transport_factory: Optional[Callable[[], Transport]] = None


def _get_client(service_url: Optional[str], debug: bool) -> AsyncDioxide:
    cfg = config_mod.load_config()
    if not (service_url or cfg.service_url):
        console.print("[red]No service URL. Pass --url or run `dioxide config set-url`.[/red]")
        raise SystemExit(1)
    if debug or cfg.debug:
        logging.basicConfig(level=logging.INFO, format="%(message)s", handlers=[RichHandler(console=console)])
    return AsyncDioxide(
        service_url=service_url,
        debug=True if debug else None,
        transport=transport_factory() if transport_factory else None,
        config=cfg,
    )


def _run(coro):
    return asyncio.run(coro)


def stats_table(stats: CallStats) -> Table:
    table = Table(title="RPC Stats")
    table.add_column("Call", style="bold")
    table.add_column("Invocations", justify="right")
    table.add_column("Success", justify="right")
    table.add_column("Errors", justify="right")
    table.add_column("Avg ms", justify="right")
    for key, entry in sorted(stats.snapshot().items()):
        table.add_row(
            key,
            str(entry.invocation_count),
            str(entry.success_count),
            str(entry.error_count),
            f"{entry.average_millis:.1f}",
        )
    return table


@click.group()
@click.version_option("0.1.0")
def main():
    """Dioxide CLI: JSON-over-HTTP RPC client."""


# Register subcommands from separate modules
from dioxide.cli.call import call_cmd
from dioxide.cli.config import config

main.add_command(call_cmd)
main.add_command(config)


if __name__ == "__main__":
    main()
