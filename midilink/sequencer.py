"""
Note playback and outgoing messages.

    seq = Sequencer()
    seq.note(synth, 60, 100, 500)                  # C4 for half a second
    seq.play(synth, [60, 64, 67], [100] * 3, [200, 300, 250])
    seq.control(synth, 7, 90)                      # channel volume
    seq.sysex(synth, HexString("F0 7E 7F 09 01 F7"))  # GM system on

Durations are milliseconds. note() and play() return as soon as their
tasks are queued; the note-offs and later notes are sent from scheduler
worker threads.
"""

import logging
import time
from typing import List, Optional, Sequence, Union

from midilink.codec.message import encode
from midilink.codec.sysex import to_payload
from midilink.devices.base import ASAP, MidiOutput
from midilink.models.event import MessageType
from midilink.models.sysex import SysexPayload, SysexSource
from midilink.scheduler.pool import ScheduledTask, SchedulerPool, default_scheduler
from midilink.utils.validation import (
    validate_channel,
    validate_equal_lengths,
    validate_midi_value,
)

logger = logging.getLogger(__name__)


class Sequencer:
    """
    Sends notes, controls and sysex to output endpoints.

    Args:
        scheduler: Pool for delayed events (default: process-wide pool)
    """

    def __init__(self, scheduler: Optional[SchedulerPool] = None):
        self._scheduler = scheduler

    @property
    def scheduler(self) -> SchedulerPool:
        return self._scheduler or default_scheduler()

    def note_on(self, sink: MidiOutput, note: int, velocity: int, channel: int = 0) -> None:
        """Send a note-on message now."""
        sink.send(encode(MessageType.NOTE_ON, channel, note, velocity), ASAP)

    def note_off(self, sink: MidiOutput, note: int, channel: int = 0) -> None:
        """Send a note-off message (velocity 0) now."""
        sink.send(encode(MessageType.NOTE_OFF, channel, note, 0), ASAP)

    def control(self, sink: MidiOutput, control: int, value: int, channel: int = 0) -> None:
        """Send a control change message now."""
        sink.send(encode(MessageType.CONTROL_CHANGE, channel, control, value), ASAP)

    def sysex(self, sink: MidiOutput, source: Union[SysexSource, SysexPayload]) -> SysexPayload:
        """
        Send a system-exclusive message now.

        The bytes are handed to the sink exactly as given, so the payload
        should carry its own F0 ... F7 framing. Sinks that only carry
        complete MIDI messages (mido ports) reject unframed data.

        Args:
            sink: Output endpoint
            source: HexString, Binary or SysexPayload

        Returns:
            The payload that was sent

        Raises:
            MalformedInputError: If the input cannot be parsed, or the sink
                rejects the bytes
        """
        payload = to_payload(source)
        if not payload.is_framed:
            logger.warning("Sysex payload %s is not framed by F0 ... F7", payload.hex())
        sink.send(payload.data, ASAP)
        return payload

    def note(
        self,
        sink: MidiOutput,
        note: int,
        velocity: int,
        duration_ms: float,
        channel: int = 0,
    ) -> ScheduledTask:
        """
        Send note-on now and schedule the matching note-off.

        Args:
            sink: Output endpoint
            note: Note number (0-127)
            velocity: Velocity (0-127)
            duration_ms: Time until note-off, in milliseconds
            channel: MIDI channel (0-15)

        Returns:
            The scheduled note-off task
        """
        self.note_on(sink, note, velocity, channel)
        return self.scheduler.after(duration_ms, lambda: self.note_off(sink, note, channel))

    def play(
        self,
        sink: MidiOutput,
        notes: Sequence[int],
        velocities: Sequence[int],
        durations: Sequence[float],
        channel: int = 0,
        strict: bool = False,
    ) -> List[ScheduledTask]:
        """
        Play notes one after another.

        Note i starts at the sum of the durations before it. Every start
        is measured from one instant read at the top of this call, so scheduling latency does not build up along
        the sequence. Playback stops at the end of the shortest of the
        three sequences.

        Args:
            sink: Output endpoint
            notes: Note numbers
            velocities: Velocities, one per note
            durations: Durations in milliseconds, one per note
            channel: MIDI channel (0-15)
            strict: Raise instead of truncating when lengths differ

        Returns:
            One scheduled task per note (each sends note-on, then
            schedules its note-off)

        Raises:
            MalformedInputError: If a note, velocity or the channel is out
                of range, or if strict and the lengths differ
        """
        if strict:
            validate_equal_lengths(notes=notes, velocities=velocities, durations=durations)

        triples = list(zip(notes, velocities, durations))
        validate_channel(channel)
        for n, v, _ in triples:
            validate_midi_value(n, "note")
            validate_midi_value(v, "velocity")

        scheduler = self.scheduler
        reference = time.monotonic()
        tasks = []
        start = 0.0
        for n, v, d in triples:
            task = self._note_task(sink, n, v, d, channel)
            tasks.append(scheduler.after(start, task, reference=reference))
            start += d
        return tasks

    def _note_task(self, sink: MidiOutput, note: int, velocity: int, duration_ms: float, channel: int):
        return lambda: self.note(sink, note, velocity, duration_ms, channel)


_default_sequencer = Sequencer()


def note_on(sink: MidiOutput, note: int, velocity: int, channel: int = 0) -> None:
    _default_sequencer.note_on(sink, note, velocity, channel)


def note_off(sink: MidiOutput, note: int, channel: int = 0) -> None:
    _default_sequencer.note_off(sink, note, channel)


def control(sink: MidiOutput, control_number: int, value: int, channel: int = 0) -> None:
    _default_sequencer.control(sink, control_number, value, channel)


def sysex(sink: MidiOutput, source: Union[SysexSource, SysexPayload]) -> SysexPayload:
    return _default_sequencer.sysex(sink, source)


def note(
    sink: MidiOutput, note_number: int, velocity: int, duration_ms: float, channel: int = 0
) -> ScheduledTask:
    return _default_sequencer.note(sink, note_number, velocity, duration_ms, channel)


def play(
    sink: MidiOutput,
    notes: Sequence[int],
    velocities: Sequence[int],
    durations: Sequence[float],
    channel: int = 0,
) -> List[ScheduledTask]:
    return _default_sequencer.play(sink, notes, velocities, durations, channel)
