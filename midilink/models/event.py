"""
Semantic MIDI event model.

A ChannelVoiceEvent is what the codec produces for every short message:
the channel, the symbolic command and status, and the two data bytes.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from midilink.devices.base import MidiInput


class MessageType(str, Enum):
    """Symbols for MIDI commands and status bytes."""

    # Channel-voice commands
    NOTE_OFF = "note_off"
    NOTE_ON = "note_on"
    POLY_PRESSURE = "poly_pressure"
    CONTROL_CHANGE = "control_change"
    PROGRAM_CHANGE = "program_change"
    CHANNEL_PRESSURE = "channel_pressure"
    PITCH_BEND = "pitch_bend"

    # System common / real-time
    SYSTEM_EXCLUSIVE = "system_exclusive"
    MIDI_TIME_CODE = "midi_time_code"
    SONG_POSITION_POINTER = "song_position_pointer"
    SONG_SELECT = "song_select"
    TUNE_REQUEST = "tune_request"
    END_OF_EXCLUSIVE = "end_of_exclusive"
    TIMING_CLOCK = "timing_clock"
    START = "start"
    CONTINUE = "continue"
    STOP = "stop"
    ACTIVE_SENSING = "active_sensing"
    SYSTEM_RESET = "system_reset"

    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ChannelVoiceEvent:
    """
    A decoded short MIDI message.

    Attributes:
        channel: MIDI channel (0-15)
        command: Command symbol; note-on with velocity 0 reads as NOTE_OFF
        status: Symbol for the status byte (channel nibble ignored)
        raw_status: Status byte exactly as received
        data1: First data byte (note number, CC number, ...)
        data2: Second data byte (velocity, CC value, ...)
        source: Input endpoint the message arrived on, if any
        timestamp: Transport timestamp; only meaningful for ordering
        raw: Raw message bytes
    """

    channel: int
    command: MessageType
    status: MessageType
    raw_status: int
    data1: int = 0
    data2: int = 0
    source: Optional["MidiInput"] = field(default=None, compare=False, repr=False)
    timestamp: Optional[float] = None
    raw: bytes = b""

    @property
    def note(self) -> int:
        """Note number for note events."""
        return self.data1

    @property
    def velocity(self) -> int:
        """Velocity for note events."""
        return self.data2

    @property
    def is_note_on(self) -> bool:
        return self.command == MessageType.NOTE_ON

    @property
    def is_note_off(self) -> bool:
        return self.command == MessageType.NOTE_OFF

    def tagged(self, source: "MidiInput", timestamp: Optional[float]) -> "ChannelVoiceEvent":
        """Return a copy carrying its origin endpoint and timestamp."""
        return replace(self, source=source, timestamp=timestamp)
