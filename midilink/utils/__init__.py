"""Utility functions for midilink."""

from midilink.utils.validation import (
    ValidationError,
    validate_byte,
    validate_channel,
    validate_equal_lengths,
    validate_midi_value,
)

__all__ = [
    "ValidationError",
    "validate_byte",
    "validate_channel",
    "validate_equal_lengths",
    "validate_midi_value",
]
