"""Filters, orientation helpers, transform broadcasting, DBus remote decoding and referee protocol tools."""

__version__ = "0.1.0"

__all__ = [
    "crc",
    "dbus",
    "filters",
    "graph",
    "lowpass",
    "orientation",
    "protocol",
    "tf_broadcast",
]