"""
Decoded event dispatch.

on_events() installs a single handler that receives a ChannelVoiceEvent
for every short message arriving at an input:

    def show(event):
        print(event.command, event.note, event.velocity)

    on_events(midi_in("keystation"), show)

Sysex messages do not reach the handler.
"""

import logging
from typing import Callable

from midilink.codec.message import decode_bytes
from midilink.devices.base import MidiInput
from midilink.errors import MalformedInputError
from midilink.models.event import ChannelVoiceEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[ChannelVoiceEvent], object]


class EventReceiver:
    """Receiver decoding short messages for one handler."""

    def __init__(self, source: MidiInput, handler: EventHandler):
        self.source = source
        self.handler = handler

    def __repr__(self) -> str:
        return f"<EventReceiver {self.source.name!r} -> {self.handler!r}>"

    def send(self, message: bytes, timestamp: float) -> None:
        try:
            event = decode_bytes(message, source=self.source, timestamp=timestamp)
        except MalformedInputError as e:
            logger.debug("Ignoring malformed message from %s: %s", self.source.name, e)
            return

        if event is None:
            logger.debug("Ignoring sysex message from %s (%d bytes)", self.source.name, len(message))
            return

        self.handler(event)

    def close(self) -> None:
        # The source belongs to whoever opened it
        pass


def on_events(source: MidiInput, handler: EventHandler) -> EventReceiver:
    """
    Call handler with every decoded event arriving at source.

    Replaces any receiver (route or handler) already on the source.

    Args:
        source: Input endpoint
        handler: Called once per short message, tagged with source
            and the transport timestamp

    Returns:
        The installed receiver
    """
    receiver = EventReceiver(source, handler)
    source.subscribe(receiver)
    return receiver
