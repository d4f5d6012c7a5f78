"""
Sysex command - send system-exclusive messages.
"""

from pathlib import Path
from typing import List, Optional

import typer

from cli.display.hex_view import display_sysex
from cli.state import console, fail, get_state, open_output
from midilink.codec.sysex import parse_hex, split_messages
from midilink.errors import MidiError
from midilink.models.sysex import SysexPayload
from midilink.sequencer import Sequencer


def _load_payloads(data: Optional[str], file: Optional[Path]) -> List[SysexPayload]:
    if file is not None:
        if not file.exists():
            fail(f"File not found: {file}")
        payloads = split_messages(file.read_bytes())
        if not payloads:
            fail(f"No SysEx messages found in {file}")
        return payloads

    if not data:
        fail("Give hex data or --file")

    try:
        return [parse_hex(data)]
    except MidiError as e:
        fail(str(e))


def sysex(
    ctx: typer.Context,
    data: Optional[str] = typer.Argument(None, help="Hex bytes, e.g. 'F0 7E 7F 09 01 F7'"),
    port: Optional[str] = typer.Option(None, "--port", "-p", help="Output device name or pattern"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Send every message in a .syx file"),
    show: bool = typer.Option(False, "--show", "-s", help="Show a hex dump of each message"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Parse and show, do not send"),
) -> None:
    """
    Send system-exclusive data.

    Hex digits are case-insensitive; commas and whitespace between
    bytes are ignored.

    Examples:

        midilink sysex "F0 7E 7F 09 01 F7" --port fluid

        midilink sysex --file style.syx --port qy70 --show
    """
    state = get_state(ctx)
    payloads = _load_payloads(data, file)

    if show or dry_run:
        for i, payload in enumerate(payloads):
            display_sysex(payload, title=f"SysEx {i + 1}/{len(payloads)}")
    if dry_run:
        return

    sink = open_output(state, port)
    sequencer = Sequencer(state.scheduler)
    try:
        for payload in payloads:
            sequencer.sysex(sink, payload)
    except MidiError as e:
        fail(str(e))
    finally:
        sink.close()

    total = sum(len(p) for p in payloads)
    console.print(
        f"Sent {len(payloads)} SysEx message(s), {total} bytes, to [magenta]{sink.name}[/magenta]"
    )
