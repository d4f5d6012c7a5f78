"""
Device and endpoint model.

A MidiDevice is something a backend found: a hardware port, a virtual
port, a software synth. Opening a device yields an endpoint:

    MidiInput  - a source; one receiver gets every incoming message
    MidiOutput - a sink; send() delivers raw bytes

Receivers follow a two-method contract, send(message, timestamp) and
close(), so anything with those methods can be subscribed to an input.
"""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Protocol

from midilink.errors import DeviceUnavailableError, MidiError

logger = logging.getLogger(__name__)

# Unlimited sources/sinks; kept positive so counts compare naturally
MAX_IO_PORTS = 2**31 - 1

# Timestamp hint meaning "deliver as soon as possible"
ASAP = -1


def normalize_port_count(count: int) -> int:
    """Map a negative (unlimited) port count to MAX_IO_PORTS."""
    return MAX_IO_PORTS if count < 0 else count


@dataclass(frozen=True)
class DeviceInfo:
    """
    Device metadata.

    Attributes:
        name: Display name
        description: Longer description
        vendor: Vendor or backend name
        version: Version string
        max_sources: Concurrent sources supported (MAX_IO_PORTS = unlimited)
        max_sinks: Concurrent sinks supported (MAX_IO_PORTS = unlimited)
    """

    name: str
    description: str = ""
    vendor: str = ""
    version: str = ""
    max_sources: int = 0
    max_sinks: int = 0

    def __post_init__(self):
        object.__setattr__(self, "max_sources", normalize_port_count(self.max_sources))
        object.__setattr__(self, "max_sinks", normalize_port_count(self.max_sinks))

    def __str__(self) -> str:
        return f"{self.name} - {self.description}" if self.description else self.name


class Receiver(Protocol):
    """Anything that accepts raw messages from a source."""

    def send(self, message: bytes, timestamp: float) -> None:
        ...

    def close(self) -> None:
        ...


class MidiDevice(ABC):
    """
    Base class for backend devices.

    Subclasses implement _open_transport() and, depending on direction,
    set_receiver() for sources and transmit() for sinks.
    """

    # False for software synthesizers and sequencers
    is_port = True

    def __init__(self, info: DeviceInfo):
        self.info = info
        self._is_open = False
        self._open_lock = threading.Lock()

    def __repr__(self) -> str:
        state = "open" if self._is_open else "closed"
        return f"<{type(self).__name__} {self.info.name!r} {state}>"

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def description(self) -> str:
        return self.info.description

    @property
    def is_open(self) -> bool:
        return self._is_open

    def open(self) -> None:
        """
        Open the device. Does nothing if it is already open.

        Raises:
            DeviceUnavailableError: If the transport cannot be opened
        """
        with self._open_lock:
            if self._is_open:
                return
            try:
                self._open_transport()
            except DeviceUnavailableError:
                raise
            except (OSError, IOError, RuntimeError, ValueError) as e:
                raise DeviceUnavailableError(f"Cannot open {self.info.name}: {e}") from e
            self._is_open = True
        logger.info("Opened MIDI device %s", self.info.name)

    def close(self) -> None:
        """Close the device if it is open."""
        with self._open_lock:
            if not self._is_open:
                return
            self._close_transport()
            self._is_open = False
        logger.info("Closed MIDI device %s", self.info.name)

    @abstractmethod
    def _open_transport(self) -> None:
        """Open the underlying transport."""

    def _close_transport(self) -> None:
        """Close the underlying transport."""

    def set_receiver(self, receiver: Optional[Receiver]) -> None:
        """Install the receiver for incoming messages (None detaches)."""
        raise MidiError(f"{self.info.name} is not a MIDI source")

    def transmit(self, message: bytes, timestamp: float = ASAP) -> None:
        """Deliver raw message bytes."""
        raise MidiError(f"{self.info.name} is not a MIDI sink")


class Endpoint:
    """An opened device."""

    def __init__(self, device: MidiDevice):
        self.device = device

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"

    @property
    def info(self) -> DeviceInfo:
        return self.device.info

    @property
    def name(self) -> str:
        return self.device.info.name

    @property
    def description(self) -> str:
        return self.device.info.description

    def close(self) -> None:
        """Close the underlying device."""
        self.device.close()


class MidiInput(Endpoint):
    """
    A source endpoint.

    Holds at most one receiver; subscribing another one replaces it.
    """

    def __init__(self, device: MidiDevice):
        super().__init__(device)
        self._receiver: Optional[Receiver] = None

    @property
    def receiver(self) -> Optional[Receiver]:
        """The active receiver, if any."""
        return self._receiver

    def subscribe(self, receiver: Optional[Receiver]) -> None:
        """
        Install the single receiver for incoming messages.

        Args:
            receiver: New receiver, or None to detach the current one
        """
        self._receiver = receiver
        self.device.set_receiver(receiver)


class MidiOutput(Endpoint):
    """A sink endpoint."""

    def send(self, message: bytes, timestamp: float = ASAP) -> None:
        """
        Send raw message bytes.

        Args:
            message: Complete MIDI message
            timestamp: Delivery hint; ASAP (-1) means immediately
        """
        self.device.transmit(bytes(message), timestamp)
