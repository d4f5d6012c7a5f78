"""
Route command - forward one device to another.
"""

import time
from typing import Optional

import typer

from cli.state import console, get_state, open_input, open_output
from midilink.routing.router import route as route_endpoints
from midilink.routing.router import unroute


def route(
    ctx: typer.Context,
    source: Optional[str] = typer.Argument(None, help="Input device name or pattern"),
    sink: Optional[str] = typer.Argument(None, help="Output device name or pattern"),
    delay: Optional[float] = typer.Option(
        None, "--delay", "-d", help="Delay every message by this many milliseconds"
    ),
    duration: float = typer.Option(
        0.0, "--duration", help="Stop after this many seconds (0 = until Ctrl-C)"
    ),
) -> None:
    """
    Forward every message from SOURCE to SINK unchanged.

    Examples:

        midilink route keystation fluid

        midilink route keystation fluid --delay 250
    """
    state = get_state(ctx)
    source_endpoint = open_input(state, source)
    sink_endpoint = open_output(state, sink)

    scheduler = state.scheduler if delay is not None else None
    route_endpoints(source_endpoint, sink_endpoint, delay_ms=delay, scheduler=scheduler)

    suffix = f" (+{delay:g} ms)" if delay is not None else ""
    console.print(
        f"Routing [cyan]{source_endpoint.name}[/cyan] -> "
        f"[magenta]{sink_endpoint.name}[/magenta]{suffix} (Ctrl-C to stop)"
    )

    start = time.monotonic()
    try:
        while duration <= 0 or time.monotonic() - start < duration:
            time.sleep(0.05)
    except KeyboardInterrupt:
        pass
    finally:
        unroute(source_endpoint)
        state.finish(timeout=5.0)
        source_endpoint.close()
        sink_endpoint.close()
