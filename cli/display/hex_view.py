"""
Hex dump display utilities.
"""

from rich.console import Console
from rich.panel import Panel

from midilink.models.sysex import SysexPayload

console = Console()


def format_hex_lines(data: bytes, bytes_per_line: int = 16, max_lines: int = 32) -> list:
    """Format data as offset / hex / ASCII lines with rich markup."""
    lines = []
    end = min(len(data), max_lines * bytes_per_line)

    for offset in range(0, end, bytes_per_line):
        chunk = data[offset : offset + bytes_per_line]

        hex_parts = []
        for i, b in enumerate(chunk):
            if i == 8:
                hex_parts.append(" ")  # Extra space at midpoint
            if b in (0xF0, 0xF7):
                hex_parts.append(f"[bold yellow]{b:02X}[/bold yellow]")
            else:
                hex_parts.append(f"{b:02X}")
        hex_str = " ".join(hex_parts)
        pad = " " * (3 * (bytes_per_line - len(chunk)) + (1 if len(chunk) <= 8 else 0))

        ascii_str = "".join(chr(b) if 32 <= b < 127 else "." for b in chunk)

        lines.append(f"[dim]{offset:04X}[/dim]  {hex_str}{pad}  [cyan]{ascii_str}[/cyan]")

    if len(data) > end:
        remaining = len(data) - end
        lines.append(f"[dim]... {remaining} more bytes ...[/dim]")

    return lines


def display_sysex(payload: SysexPayload, title: str = "SysEx") -> None:
    """Display a sysex payload as a hex dump panel."""
    status = "[green]framed[/green]" if payload.is_framed else "[yellow]unframed[/yellow]"
    lines = format_hex_lines(payload.data)
    lines.append("")
    lines.append(f"[dim]{len(payload)} bytes,[/dim] {status}")
    console.print(
        Panel("\n".join(lines), title=f"[bold]{title}[/bold]", border_style="blue", expand=False)
    )
