"""
Rich displays for devices and events.
"""

from typing import Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from midilink.devices.base import MAX_IO_PORTS, MidiDevice
from midilink.models.event import ChannelVoiceEvent, MessageType

console = Console()

# Colour per event command
EVENT_STYLES = {
    MessageType.NOTE_ON: "green",
    MessageType.NOTE_OFF: "dim green",
    MessageType.CONTROL_CHANGE: "cyan",
    MessageType.PROGRAM_CHANGE: "magenta",
    MessageType.PITCH_BEND: "yellow",
    MessageType.CHANNEL_PRESSURE: "blue",
    MessageType.POLY_PRESSURE: "blue",
}


def port_count(count: int) -> str:
    """Render a source/sink count, MAX_IO_PORTS as unlimited."""
    return "∞" if count >= MAX_IO_PORTS else str(count)


def display_device_table(devices: Sequence[MidiDevice], title: str = "MIDI Devices") -> None:
    """Display devices with their metadata."""
    if not devices:
        console.print("[yellow]No MIDI devices found.[/yellow]")
        return

    table = Table(title=title, box=box.ROUNDED)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Name", style="bold", no_wrap=True)
    table.add_column("Description")
    table.add_column("Vendor", style="dim")
    table.add_column("Version", style="dim")
    table.add_column("Sources", justify="right", style="cyan")
    table.add_column("Sinks", justify="right", style="magenta")

    for i, device in enumerate(devices):
        info = device.info
        table.add_row(
            str(i),
            info.name,
            info.description,
            info.vendor,
            info.version,
            port_count(info.max_sources),
            port_count(info.max_sinks),
        )

    console.print(table)


def format_event(event: ChannelVoiceEvent, count: int = 0) -> Text:
    """
    Format one event as a single line.

    Returns:
        e.g. "#  3 note_on           ch= 1  d1= 60  d2=100  [90 3C 64]"
    """
    text = Text()
    text.append(f"#{count:3d} ", style="dim")

    if event.command == MessageType.UNKNOWN:
        label, style = str(event.status), "white"
    else:
        label, style = str(event.command), EVENT_STYLES.get(event.command, "white")
    text.append(f"{label:<22s}", style=style)

    if event.raw_status < 0xF0:
        text.append(f"ch={event.channel + 1:2d}  ")
        text.append(f"d1={event.data1:3d}  d2={event.data2:3d}  ")

    if event.raw:
        text.append("[" + " ".join(f"{b:02X}" for b in event.raw) + "]", style="dim")

    return text
