"""Codecs for short MIDI messages and sysex payloads."""

from midilink.codec.message import (
    COMMANDS,
    STATUSES,
    SYMBOLS,
    decode,
    decode_bytes,
    encode,
    event_to_bytes,
    lookup,
)
from midilink.codec.sysex import from_bytes, parse_hex, split_messages, to_payload

__all__ = [
    "COMMANDS",
    "STATUSES",
    "SYMBOLS",
    "decode",
    "decode_bytes",
    "encode",
    "event_to_bytes",
    "lookup",
    "from_bytes",
    "parse_hex",
    "split_messages",
    "to_payload",
]
