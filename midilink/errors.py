"""
Exception types raised by midilink.

Every error the library raises derives from MidiError so callers can
catch one type at the boundary (the CLI does exactly that).
"""


class MidiError(Exception):
    """Base class for midilink errors."""

    pass


class MalformedInputError(MidiError, ValueError):
    """
    Raised when input cannot be turned into a valid MIDI value.

    Examples: an odd number of hex digits in a sysex string, a byte value
    outside 0-255, a channel outside 0-15 when encoding, or note lists of
    different lengths passed to a strict playback call.
    """

    pass


class DeviceNotFoundError(MidiError, LookupError):
    """Raised when no device matches a name or pattern."""

    pass


class DeviceUnavailableError(MidiError):
    """Raised when a device exists but cannot be opened."""

    pass


class SchedulerError(MidiError):
    """Raised when a task cannot be submitted to a scheduler pool."""

    pass


class ConfigurationError(MidiError):
    """Raised when configuration loading fails."""

    pass
