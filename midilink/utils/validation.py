"""
Value validation utilities for outgoing MIDI data.
"""

from typing import Sequence

from midilink.errors import MalformedInputError


class ValidationError(MalformedInputError):
    """Raised when a MIDI value is out of range."""

    pass


def validate_midi_value(value: int, name: str = "value") -> None:
    """
    Validate that a value is in MIDI data range (0-127).

    Args:
        value: The value to validate
        name: Name of the value for error messages

    Raises:
        ValidationError: If value is out of range
    """
    if not 0 <= value <= 127:
        raise ValidationError(f"{name} must be 0-127, got {value}")


def validate_channel(channel: int) -> None:
    """
    Validate a zero-based MIDI channel number (0-15).

    Args:
        channel: Channel number

    Raises:
        ValidationError: If channel is out of range
    """
    if not 0 <= channel <= 15:
        raise ValidationError(f"MIDI channel must be 0-15, got {channel}")


def validate_byte(value: int, index: int = 0) -> int:
    """
    Validate a single byte value and return it as unsigned.

    Signed bytes (-128..-1) are accepted and converted with two's
    complement, so data copied from signed byte arrays survives intact.

    Args:
        value: Byte value
        index: Position of the value, used in error messages

    Returns:
        The unsigned byte value (0-255)

    Raises:
        ValidationError: If the value does not fit in a byte
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Byte at index {index} must be an integer, got {value!r}")
    if not -128 <= value <= 255:
        raise ValidationError(f"Byte at index {index} out of range: {value}")
    return value & 0xFF


def validate_equal_lengths(**sequences: Sequence) -> None:
    """
    Validate that all named sequences have the same length.

    Raises:
        ValidationError: If the lengths differ
    """
    lengths = {name: len(seq) for name, seq in sequences.items()}
    if len(set(lengths.values())) > 1:
        detail = ", ".join(f"{name}={length}" for name, length in lengths.items())
        raise ValidationError(f"Sequence lengths differ: {detail}")
