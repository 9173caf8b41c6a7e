"""A client UI graphic with change tracking."""

from __future__ import annotations

import struct
from dataclasses import replace

from rmtoolkit.protocol import GraphConfig, GraphType

__all__ = ["Graph"]


def _f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


class Graph:
    """One UI graphic: its wire configuration plus optional title and content text.

    ``config`` may be modified directly; the setters below cover the fields
    whose encoding or limits need care.
    """

    def __init__(self, config: GraphConfig | None = None, title: str = "", content: str = "") -> None:
        self.config = replace(config) if config is not None else GraphConfig()
        self.title = title
        self.content = ""
        self._last_config = GraphConfig()
        self._last_title = ""
        self._last_content = ""
        self.set_content(content)

    def characters(self) -> str:
        """Return the text shown by a string graphic: title followed by content."""
        return self.title + self.content

    def set_content(self, content: str) -> None:
        """Set the content; a non-empty text sets ``end_angle`` to its byte length."""
        self.content = content
        if self.title or self.content:
            self.config.end_angle = len(self.characters().encode("utf-8"))

    def set_int_num(self, num: int) -> None:
        """Spread an integer over the radius, end_x and end_y fields."""
        self.config.radius = num & 1023
        self.config.end_x = (num >> 10) & 2047
        self.config.end_y = num >> 21

    def set_float_num(self, data: float) -> None:
        """Encode a number as thousandths through ``set_int_num``."""
        self.set_int_num(int(_f32(_f32(data) * 1000.0)))

    def set_start_angle(self, start_angle: int) -> None:
        """Set the start angle; values outside 0..360 are ignored."""
        if 0 <= start_angle <= 360:
            self.config.start_angle = start_angle

    def set_end_angle(self, end_angle: int) -> None:
        """Set the end angle; values outside 0..360 are ignored."""
        if 0 <= end_angle <= 360:
            self.config.end_angle = end_angle

    def is_repeated(self) -> bool:
        """Whether nothing changed since the last ``update_last_config``."""
        return (
            self.config == self._last_config
            and self.title == self._last_title
            and self.content == self._last_content
        )

    def is_string(self) -> bool:
        return self.config.graphic_type == GraphType.STRING

    def update_last_config(self) -> None:
        """Remember the current state as the last one sent."""
        self._last_content = self.content
        self._last_title = self.title
        self._last_config = replace(self.config)