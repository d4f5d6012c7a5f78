"""
mido-backed devices.

Wraps mido input and output ports in the MidiDevice interface. mido
picks the platform transport (python-rtmidi by default), so port names
are whatever the OS reports:

    backend = MidoBackend()
    for device in backend.list_devices():
        print(device.info)
"""

import logging
from importlib.metadata import version
from typing import List, Optional

import mido

from midilink.devices.base import ASAP, DeviceInfo, MidiDevice, Receiver
from midilink.errors import DeviceUnavailableError, MalformedInputError

logger = logging.getLogger(__name__)


def _backend_name() -> str:
    try:
        return mido.backend.name
    except (AttributeError, ImportError):
        return "mido"


def _mido_version() -> str:
    return version("mido")


class MidoInputDevice(MidiDevice):
    """A mido input port."""

    def __init__(self, port_name: str):
        super().__init__(
            DeviceInfo(
                name=port_name,
                description="MIDI input port",
                vendor=_backend_name(),
                version=_mido_version(),
                max_sources=1,
                max_sinks=0,
            )
        )
        self._port = None
        self._receiver: Optional[Receiver] = None

    def _open_transport(self) -> None:
        self._port = mido.open_input(self.info.name)

    def _close_transport(self) -> None:
        if self._port is not None:
            self._port.callback = None
            self._port.close()
            self._port = None

    def set_receiver(self, receiver: Optional[Receiver]) -> None:
        if self._port is None:
            raise DeviceUnavailableError(f"{self.info.name} is not open")
        self._receiver = receiver
        self._port.callback = self._on_message if receiver is not None else None

    def _on_message(self, message: "mido.Message") -> None:
        receiver = self._receiver
        if receiver is not None:
            receiver.send(bytes(message.bytes()), message.time)


class MidoOutputDevice(MidiDevice):
    """A mido output port."""

    def __init__(self, port_name: str):
        super().__init__(
            DeviceInfo(
                name=port_name,
                description="MIDI output port",
                vendor=_backend_name(),
                version=_mido_version(),
                max_sources=0,
                max_sinks=1,
            )
        )
        self._port = None

    def _open_transport(self) -> None:
        self._port = mido.open_output(self.info.name)

    def _close_transport(self) -> None:
        if self._port is not None:
            self._port.close()
            self._port = None

    def transmit(self, message: bytes, timestamp: float = ASAP) -> None:
        # mido has no scheduled delivery; every message goes out immediately
        if self._port is None:
            raise DeviceUnavailableError(f"{self.info.name} is not open")
        try:
            msg = mido.Message.from_bytes(list(message))
        except ValueError as e:
            raise MalformedInputError(
                f"Cannot send {bytes(message).hex(' ')} to {self.info.name}: {e}"
            ) from e
        self._port.send(msg)


class MidoBackend:
    """Enumerates mido input and output ports."""

    name = "mido"

    def list_devices(self) -> List[MidiDevice]:
        """
        List available ports, inputs first.

        Returns:
            Devices in enumeration order
        """
        devices: List[MidiDevice] = []
        devices.extend(MidoInputDevice(name) for name in mido.get_input_names())
        devices.extend(MidoOutputDevice(name) for name in mido.get_output_names())
        logger.debug("mido reported %d device(s)", len(devices))
        return devices
