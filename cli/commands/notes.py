"""
Note commands - play single notes and note sequences.
"""

from typing import Optional

import typer

from cli.state import console, fail, get_state, open_output, parse_int_list
from midilink.errors import MidiError
from midilink.sequencer import Sequencer


def note(
    ctx: typer.Context,
    note_number: int = typer.Argument(..., help="Note number (0-127, 60 = middle C)"),
    port: Optional[str] = typer.Option(None, "--port", "-p", help="Output device name or pattern"),
    velocity: Optional[int] = typer.Option(None, "--velocity", "-v", help="Velocity (0-127)"),
    duration: float = typer.Option(500.0, "--duration", "-d", help="Duration in milliseconds"),
    channel: Optional[int] = typer.Option(None, "--channel", "-c", help="MIDI channel (0-15)"),
) -> None:
    """
    Play one note.

    Examples:

        midilink note 60 --port fluid

        midilink note 64 -p fluid -v 80 -d 1000 -c 9
    """
    state = get_state(ctx)
    velocity = state.config.velocity if velocity is None else velocity
    channel = state.config.channel if channel is None else channel

    sink = open_output(state, port)
    try:
        Sequencer(state.scheduler).note(sink, note_number, velocity, duration, channel)
        state.finish()
    except MidiError as e:
        fail(str(e))
    finally:
        sink.close()

    console.print(f"Played note {note_number} on [magenta]{sink.name}[/magenta]")


def play(
    ctx: typer.Context,
    notes: str = typer.Argument(..., help="Note numbers, e.g. '60,64,67'"),
    port: Optional[str] = typer.Option(None, "--port", "-p", help="Output device name or pattern"),
    velocities: Optional[str] = typer.Option(
        None, "--velocities", "-v", help="Velocities, one per note (default: config velocity)"
    ),
    durations: Optional[str] = typer.Option(
        None, "--durations", "-d", help="Durations in ms, one per note (default: 250 each)"
    ),
    channel: Optional[int] = typer.Option(None, "--channel", "-c", help="MIDI channel (0-15)"),
) -> None:
    """
    Play a sequence of notes, one after another.

    Examples:

        midilink play 60,64,67 --port fluid

        midilink play "60 64 67" -p fluid -v 100,90,80 -d 200,300,250
    """
    state = get_state(ctx)
    channel = state.config.channel if channel is None else channel

    note_list = parse_int_list(notes, "notes")
    velocity_list = (
        parse_int_list(velocities, "velocities")
        if velocities
        else [state.config.velocity] * len(note_list)
    )
    duration_list = parse_int_list(durations, "durations") if durations else [250] * len(note_list)

    sink = open_output(state, port)
    try:
        Sequencer(state.scheduler).play(
            sink, note_list, velocity_list, duration_list, channel, strict=True
        )
        state.finish()
    except MidiError as e:
        fail(str(e))
    finally:
        sink.close()

    total = sum(duration_list)
    console.print(
        f"Played {len(note_list)} notes ({total} ms) on [magenta]{sink.name}[/magenta]"
    )
