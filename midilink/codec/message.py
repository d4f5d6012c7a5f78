"""
Short MIDI message codec.

Translates between raw short messages and ChannelVoiceEvent records.

Short message layout:
    [status | channel] [data1] [data2]

Where:
    - status: high nibble 0x8-0xE for channel-voice commands,
      full byte 0xF1-0xFF for system common / real-time messages
    - channel: low nibble, 0-15
    - data1/data2: 7-bit data bytes (absent for some messages)

The two lookup tables below are built once at import time and exposed
as read-only mappings.
"""

from types import MappingProxyType
from typing import Any, Mapping, Optional

from midilink.errors import MalformedInputError
from midilink.models.event import ChannelVoiceEvent, MessageType
from midilink.utils.validation import validate_channel, validate_midi_value

NOTE_OFF = 0x80
NOTE_ON = 0x90
POLY_PRESSURE = 0xA0
CONTROL_CHANGE = 0xB0
PROGRAM_CHANGE = 0xC0
CHANNEL_PRESSURE = 0xD0
PITCH_BEND = 0xE0
SYSTEM_EXCLUSIVE = 0xF0

COMMANDS: Mapping[int, MessageType] = MappingProxyType(
    {
        NOTE_OFF: MessageType.NOTE_OFF,
        NOTE_ON: MessageType.NOTE_ON,
        POLY_PRESSURE: MessageType.POLY_PRESSURE,
        CONTROL_CHANGE: MessageType.CONTROL_CHANGE,
        PROGRAM_CHANGE: MessageType.PROGRAM_CHANGE,
        CHANNEL_PRESSURE: MessageType.CHANNEL_PRESSURE,
        PITCH_BEND: MessageType.PITCH_BEND,
    }
)

STATUSES: Mapping[int, MessageType] = MappingProxyType(
    {
        SYSTEM_EXCLUSIVE: MessageType.SYSTEM_EXCLUSIVE,
        0xF1: MessageType.MIDI_TIME_CODE,
        0xF2: MessageType.SONG_POSITION_POINTER,
        0xF3: MessageType.SONG_SELECT,
        0xF6: MessageType.TUNE_REQUEST,
        0xF7: MessageType.END_OF_EXCLUSIVE,
        0xF8: MessageType.TIMING_CLOCK,
        0xFA: MessageType.START,
        0xFB: MessageType.CONTINUE,
        0xFC: MessageType.STOP,
        0xFE: MessageType.ACTIVE_SENSING,
        0xFF: MessageType.SYSTEM_RESET,
    }
)

# Union of both tables, keyed by raw integer
SYMBOLS: Mapping[int, MessageType] = MappingProxyType({**STATUSES, **COMMANDS})

CODES: Mapping[MessageType, int] = MappingProxyType({v: k for k, v in SYMBOLS.items()})

# Commands carrying a single data byte
_SINGLE_DATA_BYTE = (PROGRAM_CHANGE, CHANNEL_PRESSURE)


def lookup(code: int) -> MessageType:
    """Map a raw command or status code to its symbol, UNKNOWN if unmapped."""
    return SYMBOLS.get(code, MessageType.UNKNOWN)


def _status_symbol(raw_status: int) -> MessageType:
    # Channel-voice status bytes carry the channel in the low nibble
    if raw_status < SYSTEM_EXCLUSIVE:
        return lookup(raw_status & 0xF0)
    return lookup(raw_status)


def decode(
    raw_status: int,
    raw_command: int,
    channel: int,
    data1: int,
    data2: int,
    source: Any = None,
    timestamp: Optional[float] = None,
    raw: bytes = b"",
) -> ChannelVoiceEvent:
    """
    Decode the raw fields of a short message into an event.

    Values are passed through without range checks; only the symbol
    mapping is applied. A note-on with velocity 0 is reported with
    command NOTE_OFF, while status and data bytes stay verbatim.
    Only channel-voice commands map to a command symbol, so system
    messages (raw_command 0xF0) decode with command UNKNOWN.

    Args:
        raw_status: Full status byte (e.g. 0x93)
        raw_command: Command part of the status byte (e.g. 0x90)
        channel: MIDI channel
        data1: First data byte
        data2: Second data byte
        source: Endpoint the message came from
        timestamp: Transport timestamp
        raw: Raw message bytes

    Returns:
        Decoded ChannelVoiceEvent

    Example:
        >>> decode(0x90, 0x90, 0, 60, 0).command
        <MessageType.NOTE_OFF: 'note_off'>
    """
    if raw_command == NOTE_ON and data2 == 0:
        command = MessageType.NOTE_OFF
    else:
        # System messages have no command; their meaning is in status
        command = COMMANDS.get(raw_command, MessageType.UNKNOWN)

    return ChannelVoiceEvent(
        channel=channel,
        command=command,
        status=_status_symbol(raw_status),
        raw_status=raw_status,
        data1=data1,
        data2=data2,
        source=source,
        timestamp=timestamp,
        raw=raw,
    )


def decode_bytes(
    frame: bytes, source: Any = None, timestamp: Optional[float] = None
) -> Optional[ChannelVoiceEvent]:
    """
    Decode a raw short message.

    Args:
        frame: Message bytes, status byte first
        source: Endpoint the message came from
        timestamp: Transport timestamp

    Returns:
        Decoded event, or None for a system-exclusive frame

    Raises:
        MalformedInputError: If the frame is empty or lacks a status byte
    """
    if not frame:
        raise MalformedInputError("Empty MIDI message")

    frame = bytes(frame)
    status = frame[0]
    if status < 0x80:
        raise MalformedInputError(f"Message does not start with a status byte: 0x{status:02X}")
    if status == SYSTEM_EXCLUSIVE:
        return None

    data1 = frame[1] if len(frame) > 1 else 0
    data2 = frame[2] if len(frame) > 2 else 0

    return decode(
        raw_status=status,
        raw_command=status & 0xF0,
        channel=status & 0x0F,
        data1=data1,
        data2=data2,
        source=source,
        timestamp=timestamp,
        raw=frame,
    )


def encode(command: MessageType, channel: int, data1: int = 0, data2: int = 0) -> bytes:
    """
    Encode a channel-voice command into raw message bytes.

    Program change and channel pressure produce 2-byte messages,
    every other command produces 3 bytes.

    Args:
        command: Channel-voice command symbol
        channel: MIDI channel (0-15)
        data1: First data byte (0-127)
        data2: Second data byte (0-127)

    Returns:
        Raw message bytes

    Raises:
        MalformedInputError: If the command is not a channel-voice command
            or a value is out of range

    Example:
        >>> encode(MessageType.NOTE_ON, 1, 60, 100).hex()
        '913c64'
    """
    code = CODES.get(command)
    if code is None or code not in COMMANDS:
        raise MalformedInputError(f"Not a channel-voice command: {command}")

    validate_channel(channel)
    validate_midi_value(data1, "data1")
    validate_midi_value(data2, "data2")

    status = code | channel
    if code in _SINGLE_DATA_BYTE:
        return bytes([status, data1])
    return bytes([status, data1, data2])


def event_to_bytes(event: ChannelVoiceEvent) -> bytes:
    """
    Re-encode a decoded event.

    A zero-velocity note-on keeps its original NOTE_ON status, so the
    rewritten command does not change the bytes on the wire.
    """
    command = event.status if event.status in COMMANDS.values() else event.command
    return encode(command, event.channel, event.data1, event.data2)
