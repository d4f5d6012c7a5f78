"""
Device enumeration, lookup and opening.

    sources = midi_sources()
    keyboard = midi_in("keystation")       # regex, case-insensitive
    synth = midi_out(find_device(midi_sinks(), "fluid"))

Lookups never raise: a name that matches nothing gives None and a
logged warning. Opening a device that exists but cannot be opened
raises DeviceUnavailableError.
"""

import logging
import re
from typing import Dict, List, Optional, Protocol, Sequence, Union

from midilink.devices.base import MidiDevice, MidiInput, MidiOutput
from midilink.devices.mido_backend import MidoBackend
from midilink.devices.virtual import VirtualBackend

logger = logging.getLogger(__name__)

DEFAULT_BACKEND = "mido"

BACKENDS = {
    MidoBackend.name: MidoBackend,
    VirtualBackend.name: VirtualBackend,
}

_instances: Dict[str, "Backend"] = {}


class Backend(Protocol):
    """Source of MidiDevice objects."""

    name: str

    def list_devices(self) -> List[MidiDevice]:
        ...


def get_backend(name: Optional[str] = None) -> Backend:
    """
    Return the shared backend instance for a name.

    Args:
        name: "mido" or "virtual" (default "mido")

    Raises:
        ValueError: If the name is not a known backend
    """
    name = name or DEFAULT_BACKEND
    if name not in BACKENDS:
        raise ValueError(f"Unknown backend {name!r}, expected one of {sorted(BACKENDS)}")
    if name not in _instances:
        _instances[name] = BACKENDS[name]()
    return _instances[name]


def midi_devices(backend: Optional[Backend] = None) -> List[MidiDevice]:
    """All devices the backend reports."""
    return (backend or get_backend()).list_devices()


def midi_ports(backend: Optional[Backend] = None) -> List[MidiDevice]:
    """Hardware and virtual ports, without software synths or sequencers."""
    return [d for d in midi_devices(backend) if d.is_port]


def midi_sources(backend: Optional[Backend] = None) -> List[MidiDevice]:
    """Ports that can provide input."""
    return [d for d in midi_ports(backend) if d.info.max_sources != 0]


def midi_sinks(backend: Optional[Backend] = None) -> List[MidiDevice]:
    """Ports that can accept output."""
    return [d for d in midi_ports(backend) if d.info.max_sinks != 0]


def _compile(pattern: str) -> "re.Pattern":
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error:
        # Not a valid regex; match it literally
        return re.compile(re.escape(pattern), re.IGNORECASE)


def find_device(devices: Sequence[MidiDevice], pattern: str) -> Optional[MidiDevice]:
    """
    Find the first device whose name or description matches.

    Args:
        devices: Devices in enumeration order
        pattern: Regular expression, matched case-insensitively anywhere
            in the name or description

    Returns:
        First matching device, or None
    """
    regex = _compile(pattern)
    for device in devices:
        if regex.search(device.info.name) or regex.search(device.info.description):
            return device
    return None


def _resolve(
    device: Union[str, MidiDevice], candidates: Sequence[MidiDevice]
) -> Optional[MidiDevice]:
    if isinstance(device, MidiDevice):
        return device
    return find_device(candidates, device)


def midi_in(
    device: Union[str, MidiDevice], backend: Optional[Backend] = None
) -> Optional[MidiInput]:
    """
    Open an input device for reading.

    Args:
        device: A device, or a pattern matched against midi_sources()
        backend: Backend to search (default mido)

    Returns:
        Opened input endpoint, or None if nothing matched

    Raises:
        DeviceUnavailableError: If the device cannot be opened
    """
    candidates = midi_sources(backend) if isinstance(device, str) else []
    source = _resolve(device, candidates)
    if source is None:
        logger.warning("Did not find a matching MIDI input device for: %s", device)
        return None

    source.open()
    return MidiInput(source)


def midi_out(
    device: Union[str, MidiDevice], backend: Optional[Backend] = None
) -> Optional[MidiOutput]:
    """
    Open an output device for writing.

    Args:
        device: A device, or a pattern matched against midi_sinks()
        backend: Backend to search (default mido)

    Returns:
        Opened output endpoint, or None if nothing matched

    Raises:
        DeviceUnavailableError: If the device cannot be opened
    """
    candidates = midi_sinks(backend) if isinstance(device, str) else []
    sink = _resolve(device, candidates)
    if sink is None:
        logger.warning("Did not find a matching MIDI output device for: %s", device)
        return None

    sink.open()
    return MidiOutput(sink)
