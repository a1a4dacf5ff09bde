"""CLI: dioxide call"""

import json
from typing import Optional

import click
from rich.console import Console

from dioxide.orchestrator import CallState

console = Console()


def _get_client(service_url, debug):
    from dioxide.cli.main import _get_client
    return _get_client(service_url, debug)


def _run(coro):
    from dioxide.cli.main import _run
    return _run(coro)


def _parse_payload(ctx, param, value):
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}")


@click.command("call")
@click.argument("uri")
@click.argument("method")
@click.option("-p", "--payload", default=None, callback=_parse_payload, help="Method arguments as JSON.")
@click.option("--session-id", default=None)
@click.option("--device-id", default=None)
@click.option("--url", "service_url", default=None, help="Override the configured service URL.")
@click.option("-n", "--repeat", default=1, type=click.IntRange(min=1))
@click.option("--debug", is_flag=True)
@click.option("--json-output", "--json", is_flag=True)
def call_cmd(uri: str, method: str, payload, session_id: Optional[str], device_id: Optional[str],
             service_url: Optional[str], repeat: int, debug: bool, json_output: bool):
    """Call METHOD on URI and print the response."""
    from dioxide.cli.main import stats_table

    async def _call() -> int:
        client = _get_client(service_url, debug)
        failures = 0
        try:
            for _ in range(repeat):
                request = client.request(uri, method, payload=payload, session_id=session_id, device_id=device_id)
                rpc_call = await client.execute(request)
                if rpc_call.state is CallState.SUCCEEDED:
                    response = rpc_call.response
                    if json_output:
                        click.echo(response.to_json())
                    else:
                        color = "green" if response.is_success() else "yellow"
                        console.print(f"[{color}]{response.status_code}[/{color}] {response.message}")
                        if response.payload is not None:
                            console.print_json(json.dumps(response.payload))
                else:
                    failures += 1
                    if json_output:
                        click.echo(json.dumps({"request_id": request.request_id, "error": str(rpc_call.error)}))
                    else:
                        console.print(f"[red]Call failed:[/red] {rpc_call.error}")
        finally:
            await client.close()
        if not json_output:
            console.print(stats_table(client.stats))
        return failures

    if _run(_call()):
        raise SystemExit(1)
