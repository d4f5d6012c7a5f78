"""
CLI display modules.
"""

from cli.display.tables import display_device_table, format_event, port_count
from cli.display.hex_view import display_sysex, format_hex_lines

__all__ = [
    "display_device_table",
    "format_event",
    "port_count",
    "display_sysex",
    "format_hex_lines",
]
