"""
System-exclusive payload model.

Sysex data reaches the library in one of two encodings, and the caller
states which one by wrapping it:

    HexString("F0 43 10 4C 00 00 7E 00 F7")
    Binary([0xF0, 0x43, 0x10, 0x4C, 0x00, 0x00, 0x7E, 0x00, 0xF7])

Both resolve to a SysexPayload, an immutable run of bytes with no
further interpretation.
"""

from dataclasses import dataclass
from typing import Iterator, Sequence, Union


@dataclass(frozen=True)
class SysexPayload:
    """Raw system-exclusive bytes, sent verbatim."""

    data: bytes = b""

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[int]:
        return iter(self.data)

    def __bytes__(self) -> bytes:
        return self.data

    @property
    def is_framed(self) -> bool:
        """True if the payload starts with F0 and ends with F7."""
        return len(self.data) >= 2 and self.data[0] == 0xF0 and self.data[-1] == 0xF7

    def hex(self, sep: str = " ") -> str:
        """Uppercase hex representation, e.g. 'F0 43 F7'."""
        return sep.join(f"{b:02X}" for b in self.data)


@dataclass(frozen=True)
class HexString:
    """Sysex bytes written as hex digits, optionally separated."""

    text: str


@dataclass(frozen=True)
class Binary:
    """Sysex bytes given as integers."""

    data: Sequence[int]


SysexSource = Union[HexString, Binary]
