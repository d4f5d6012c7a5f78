"""
In-process virtual devices.

A VirtualDevice is a loopback: whatever is sent to it is handed to its
subscribed receiver, and every message is kept in its history. Useful
when no hardware is attached, and in tests.
"""

import threading
import time
from typing import List, Optional, Sequence, Tuple

from midilink.devices.base import ASAP, MAX_IO_PORTS, DeviceInfo, MidiDevice, Receiver


class VirtualDevice(MidiDevice):
    """
    Loopback device acting as both source and sink.

    Args:
        name: Device name
        description: Device description
        is_port: False to present the device as a software synth
    """

    def __init__(
        self,
        name: str = "midilink loopback",
        description: str = "Virtual loopback port",
        is_port: bool = True,
    ):
        super().__init__(
            DeviceInfo(
                name=name,
                description=description,
                vendor="midilink",
                version="1.0",
                max_sources=MAX_IO_PORTS,
                max_sinks=MAX_IO_PORTS,
            )
        )
        self.is_port = is_port
        self.history: List[Tuple[bytes, float]] = []
        self._receiver: Optional[Receiver] = None
        self._lock = threading.Lock()

    def _open_transport(self) -> None:
        pass

    def set_receiver(self, receiver: Optional[Receiver]) -> None:
        with self._lock:
            self._receiver = receiver

    def transmit(self, message: bytes, timestamp: float = ASAP) -> None:
        if timestamp == ASAP:
            # microseconds, like most hardware timestamps
            timestamp = time.monotonic() * 1_000_000
        with self._lock:
            self.history.append((bytes(message), timestamp))
            receiver = self._receiver
        if receiver is not None:
            receiver.send(bytes(message), timestamp)

    def sent_messages(self) -> List[bytes]:
        """Messages received so far, oldest first."""
        with self._lock:
            return [message for message, _ in self.history]


class VirtualBackend:
    """Backend holding a fixed list of virtual devices."""

    name = "virtual"

    def __init__(self, devices: Optional[Sequence[MidiDevice]] = None):
        self.devices: List[MidiDevice] = list(devices) if devices is not None else [VirtualDevice()]

    def add_device(self, device: MidiDevice) -> None:
        self.devices.append(device)

    def list_devices(self) -> List[MidiDevice]:
        return list(self.devices)
