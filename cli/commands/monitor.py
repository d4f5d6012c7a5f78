"""
Monitor command - print decoded events arriving at an input.
"""

import threading
import time
from typing import Optional

import typer

from cli.display.tables import format_event
from cli.state import console, get_state, open_input
from midilink.models.event import ChannelVoiceEvent
from midilink.routing.dispatcher import on_events
from midilink.routing.router import unroute


class EventPrinter:
    """Handler printing each event with a running count."""

    def __init__(self):
        self.count = 0
        self._lock = threading.Lock()

    def __call__(self, event: ChannelVoiceEvent) -> None:
        with self._lock:
            self.count += 1
            count = self.count
        console.print(format_event(event, count))


def monitor(
    ctx: typer.Context,
    port: Optional[str] = typer.Argument(None, help="Input device name or pattern"),
    timeout: float = typer.Option(
        30.0, "--timeout", "-t", help="Listen duration in seconds (0 = until Ctrl-C)"
    ),
) -> None:
    """
    Print every channel-voice and system message arriving at an input.

    Sysex messages are not shown.

    Examples:

        midilink monitor keystation

        midilink monitor "usb.*midi" --timeout 0
    """
    state = get_state(ctx)
    source = open_input(state, port)
    printer = EventPrinter()

    on_events(source, printer)
    console.print(f"Listening on [cyan]{source.name}[/cyan] (Ctrl-C to stop)")

    start = time.monotonic()
    try:
        while timeout <= 0 or time.monotonic() - start < timeout:
            time.sleep(0.05)
    except KeyboardInterrupt:
        pass
    finally:
        unroute(source)
        source.close()

    console.print(f"Total messages received: {printer.count}")
