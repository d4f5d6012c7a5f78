"""
Ports command - list MIDI devices.
"""

import typer

from cli.display.tables import display_device_table
from cli.state import get_state
from midilink.devices.registry import midi_devices, midi_ports, midi_sinks, midi_sources


def ports(
    ctx: typer.Context,
    inputs: bool = typer.Option(False, "--inputs", "-i", help="Only devices that can send to us"),
    outputs: bool = typer.Option(False, "--outputs", "-o", help="Only devices we can send to"),
    all_devices: bool = typer.Option(
        False, "--all", "-a", help="Include software synthesizers and sequencers"
    ),
) -> None:
    """
    List available MIDI devices.

    Examples:

        midilink ports

        midilink ports --inputs
    """
    state = get_state(ctx)

    if inputs:
        devices, title = midi_sources(state.backend), "MIDI Inputs"
    elif outputs:
        devices, title = midi_sinks(state.backend), "MIDI Outputs"
    elif all_devices:
        devices, title = midi_devices(state.backend), "MIDI Devices"
    else:
        devices, title = midi_ports(state.backend), "MIDI Ports"

    display_device_table(devices, title=title)
