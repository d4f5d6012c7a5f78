"""
midilink - device-agnostic MIDI messaging, routing and scheduling.

This library provides tools to:
- Decode and encode short MIDI messages and sysex payloads
- Find and open MIDI inputs and outputs (mido or virtual backends)
- Route one device to another, or receive decoded events
- Play notes and note sequences on a shared scheduler pool

Example usage:
    from midilink import midi_in, midi_out, on_events, route, Sequencer

    keyboard = midi_in("keystation")
    synth = midi_out("fluid")

    # Forward the keyboard straight to the synth
    route(keyboard, synth)

    # Or watch what the keyboard sends
    on_events(keyboard, lambda event: print(event.command, event.note))

    # Play an arpeggio, durations in milliseconds
    Sequencer().play(synth, [60, 64, 67], [100, 100, 100], [200, 300, 250])
"""

__version__ = "0.1.0"
__author__ = "midilink Contributors"

from midilink.codec.message import decode, decode_bytes, encode
from midilink.codec.sysex import from_bytes, parse_hex
from midilink.devices.base import DeviceInfo, MidiInput, MidiOutput
from midilink.devices.registry import (
    find_device,
    midi_devices,
    midi_in,
    midi_out,
    midi_ports,
    midi_sinks,
    midi_sources,
)
from midilink.models.event import ChannelVoiceEvent, MessageType
from midilink.models.sysex import Binary, HexString, SysexPayload
from midilink.routing.dispatcher import on_events
from midilink.routing.router import route, unroute
from midilink.scheduler.pool import SchedulerPool, default_scheduler
from midilink.sequencer import Sequencer

__all__ = [
    "decode",
    "decode_bytes",
    "encode",
    "from_bytes",
    "parse_hex",
    "DeviceInfo",
    "MidiInput",
    "MidiOutput",
    "find_device",
    "midi_devices",
    "midi_in",
    "midi_out",
    "midi_ports",
    "midi_sinks",
    "midi_sources",
    "ChannelVoiceEvent",
    "MessageType",
    "Binary",
    "HexString",
    "SysexPayload",
    "on_events",
    "route",
    "unroute",
    "SchedulerPool",
    "default_scheduler",
    "Sequencer",
]
