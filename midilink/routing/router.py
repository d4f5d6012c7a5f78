"""
Source-to-sink routing.

route() connects an input endpoint straight to an output endpoint.
Messages are forwarded byte for byte, never decoded:

    keyboard = midi_in("keystation")
    synth = midi_out("fluid")
    route(keyboard, synth)

A source has one receiver at a time, so routing it again (or attaching
an event handler with on_events) replaces the previous route.
"""

import logging
from typing import Optional

from midilink.devices.base import MidiInput, MidiOutput
from midilink.scheduler.pool import SchedulerPool, default_scheduler

logger = logging.getLogger(__name__)


class ForwardingReceiver:
    """
    Receiver passing every message to a sink.

    Args:
        sink: Output endpoint
        delay_ms: Optional delivery delay in milliseconds
        scheduler: Pool used for delayed delivery
    """

    def __init__(
        self,
        sink: MidiOutput,
        delay_ms: Optional[float] = None,
        scheduler: Optional[SchedulerPool] = None,
    ):
        self.sink = sink
        self.delay_ms = delay_ms
        self.scheduler = scheduler

    def __repr__(self) -> str:
        return f"<ForwardingReceiver -> {self.sink.name!r}>"

    def send(self, message: bytes, timestamp: float) -> None:
        if self.delay_ms is None:
            self.sink.send(message, timestamp)
            return

        pool = self.scheduler or default_scheduler()
        pool.after(self.delay_ms, lambda: self.sink.send(message, timestamp))

    def close(self) -> None:
        pass


def route(
    source: MidiInput,
    sink: MidiOutput,
    delay_ms: Optional[float] = None,
    scheduler: Optional[SchedulerPool] = None,
) -> ForwardingReceiver:
    """
    Forward everything arriving at source to sink.

    Args:
        source: Input endpoint
        sink: Output endpoint
        delay_ms: Delay each message by this many milliseconds
        scheduler: Pool for delayed delivery (default: process-wide pool)

    Returns:
        The installed receiver
    """
    receiver = ForwardingReceiver(sink, delay_ms, scheduler)

    previous = source.receiver
    if previous is not None:
        logger.info("Replacing receiver %r on %s", previous, source.name)

    source.subscribe(receiver)
    logger.debug("Routed %s -> %s", source.name, sink.name)
    return receiver


def unroute(source: MidiInput) -> None:
    """Detach whatever receiver is installed on source."""
    source.subscribe(None)
    logger.debug("Detached receiver from %s", source.name)
