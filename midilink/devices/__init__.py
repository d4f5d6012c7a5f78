"""MIDI devices, endpoints and backends."""

from midilink.devices.base import (
    ASAP,
    MAX_IO_PORTS,
    DeviceInfo,
    Endpoint,
    MidiDevice,
    MidiInput,
    MidiOutput,
    Receiver,
)
from midilink.devices.registry import (
    Backend,
    find_device,
    get_backend,
    midi_devices,
    midi_in,
    midi_out,
    midi_ports,
    midi_sinks,
    midi_sources,
)
from midilink.devices.virtual import VirtualBackend, VirtualDevice

__all__ = [
    "ASAP",
    "MAX_IO_PORTS",
    "DeviceInfo",
    "Endpoint",
    "MidiDevice",
    "MidiInput",
    "MidiOutput",
    "Receiver",
    "Backend",
    "find_device",
    "get_backend",
    "midi_devices",
    "midi_in",
    "midi_out",
    "midi_ports",
    "midi_sinks",
    "midi_sources",
    "VirtualBackend",
    "VirtualDevice",
]
