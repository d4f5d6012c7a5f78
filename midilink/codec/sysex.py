"""
Sysex byte parser.

Turns hex strings or integer sequences into SysexPayload objects.

Hex strings are case-insensitive and may separate bytes with commas
or whitespace, so all of these are the same payload:

    "F0 43 10 F7"
    "f0,43,10,f7"
    "F04310F7"
"""

from typing import Iterable, List, Union

from midilink.errors import MalformedInputError
from midilink.models.sysex import Binary, HexString, SysexPayload, SysexSource
from midilink.utils.validation import validate_byte

SYSEX_START = 0xF0
SYSEX_END = 0xF7

SEPARATORS = frozenset(" ,\t\n\r\f")

HEX_DIGITS = {c: int(c, 16) for c in "0123456789abcdefABCDEF"}


def _nibbles(text: str) -> List[int]:
    nibbles = []
    for position, char in enumerate(text):
        if char in SEPARATORS:
            continue
        value = HEX_DIGITS.get(char)
        if value is None:
            raise MalformedInputError(f"Invalid hex character {char!r} at position {position}")
        nibbles.append(value)
    return nibbles


def parse_hex(text: str) -> SysexPayload:
    """
    Parse a hex string into a sysex payload.

    Args:
        text: Hex digits, optionally separated by commas or whitespace

    Returns:
        Parsed payload

    Raises:
        MalformedInputError: On a non-hex character or an odd digit count

    Example:
        >>> parse_hex("1A 2b,3C").data
        b'\\x1a+<'
    """
    nibbles = _nibbles(text)

    if len(nibbles) % 2:
        raise MalformedInputError(
            f"Odd number of hex digits ({len(nibbles)}): trailing nibble has no pair"
        )

    data = bytearray()
    for i in range(0, len(nibbles), 2):
        data.append(((nibbles[i] << 4) | nibbles[i + 1]) & 0xFF)

    return SysexPayload(bytes(data))


def from_bytes(seq: Union[bytes, bytearray, Iterable[int]]) -> SysexPayload:
    """
    Build a sysex payload from integers.

    Args:
        seq: Byte values; signed bytes (-128..-1) are converted

    Returns:
        Payload with the same bytes

    Raises:
        MalformedInputError: If a value does not fit in a byte
    """
    if isinstance(seq, (bytes, bytearray)):
        return SysexPayload(bytes(seq))

    return SysexPayload(bytes(validate_byte(value, i) for i, value in enumerate(seq)))


def to_payload(source: Union[SysexSource, SysexPayload]) -> SysexPayload:
    """
    Resolve tagged sysex input into a payload.

    Args:
        source: HexString, Binary, or an already-built SysexPayload

    Returns:
        Resolved payload

    Raises:
        MalformedInputError: If the input is malformed or not tagged
    """
    if isinstance(source, SysexPayload):
        return source
    if isinstance(source, HexString):
        return parse_hex(source.text)
    if isinstance(source, Binary):
        return from_bytes(source.data)
    raise MalformedInputError(
        f"Sysex input must be HexString, Binary or SysexPayload, got {type(source).__name__}"
    )


def split_messages(data: Union[bytes, bytearray]) -> List[SysexPayload]:
    """
    Split a byte stream (e.g. a .syx file) into framed sysex messages.

    Bytes outside an F0 ... F7 frame are skipped, as is an unterminated
    trailing frame.

    Args:
        data: Raw bytes

    Returns:
        One payload per F0 ... F7 frame, F0 and F7 included
    """
    messages = []
    start = None

    for i, byte in enumerate(data):
        if byte == SYSEX_START:
            start = i
        elif byte == SYSEX_END and start is not None:
            messages.append(SysexPayload(bytes(data[start : i + 1])))
            start = None

    return messages
