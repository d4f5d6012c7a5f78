"""Data models for MIDI events and sysex payloads."""

from midilink.models.event import ChannelVoiceEvent, MessageType
from midilink.models.sysex import Binary, HexString, SysexPayload, SysexSource

__all__ = [
    "ChannelVoiceEvent",
    "MessageType",
    "Binary",
    "HexString",
    "SysexPayload",
    "SysexSource",
]
