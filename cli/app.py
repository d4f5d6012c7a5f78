"""
midilink - MIDI device routing and playback from the command line.

List ports, monitor inputs, route devices together and send notes or
sysex to synthesizers.
"""

from typing import Optional

import typer

from cli.commands.monitor import monitor
from cli.commands.notes import note, play
from cli.commands.ports import ports
from cli.commands.route import route
from cli.commands.sysex import sysex
from cli.state import build_state, console, fail, setup_logging
from midilink import __version__
from midilink.errors import ConfigurationError

# Main app
app = typer.Typer(
    name="midilink",
    help="Route, monitor and play MIDI devices.",
    add_completion=False,
    rich_markup_mode="rich",
)

app.command(name="ports")(ports)
app.command(name="monitor")(monitor)
app.command(name="route")(route)
app.command(name="note")(note)
app.command(name="play")(play)
app.command(name="sysex")(sysex)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]midilink[/bold] version {__version__}")
    console.print("[dim]MIDI device routing and playback[/dim]")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="INI config file (default: $MIDILINK_CONFIG)"
    ),
    backend: Optional[str] = typer.Option(
        None, "--backend", "-b", help="Device backend: mido or virtual"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    version_flag: bool = typer.Option(False, "--version", "-V", help="Show version"),
) -> None:
    """
    midilink - Route, monitor and play MIDI devices.

    [bold]Quick Start:[/bold]

        midilink ports                       # List MIDI ports
        midilink monitor keystation          # Print incoming events

    [bold]Routing:[/bold]

        midilink route keystation fluid      # Forward input to output
        midilink route keystation fluid -d 250

    [bold]Playback:[/bold]

        midilink note 60 -p fluid            # One note
        midilink play 60,64,67 -p fluid      # A sequence
        midilink sysex "F0 7E 7F 09 01 F7" -p fluid

    Device arguments are case-insensitive regular expressions matched
    against device names and descriptions.
    """
    if version_flag:
        version()
        raise typer.Exit()

    setup_logging(verbose)

    try:
        ctx.obj = build_state(config, backend)
    except (ConfigurationError, ValueError) as e:
        fail(str(e))

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
