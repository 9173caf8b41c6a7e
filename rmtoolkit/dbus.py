"""Receiver for the remote-control DBus serial link (18-byte frames at 100 kbaud, 8E1)."""

from __future__ import annotations

import argparse
import logging
import time
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Protocol

import serial

__all__ = [
    "RawDbusData",
    "DbusData",
    "unpack_frame",
    "DBus",
    "open_dbus_port",
    "DBusNode",
    "main",
]

_log = logging.getLogger(__name__)

FRAME_LENGTH = 18
_CHANNEL_OFFSET = 1024
_CHANNEL_RANGE = 660
_DEAD_ZONE = 10
_MOUSE_SCALE = 1600.0
_READ_TIMEOUTS = 10
_MIN_BYTES = 17
DEFAULT_PORT = "/dev/usbDbus"
DEFAULT_RATE = 60.0


def _int16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def _dead_zone(value: int) -> int:
    return 0 if -_DEAD_ZONE <= value <= _DEAD_ZONE else value


@dataclass(frozen=True)
class RawDbusData:
    """Decoded frame values before scaling."""

    ch0: int = 0
    ch1: int = 0
    ch2: int = 0
    ch3: int = 0
    s0: int = 0
    s1: int = 0
    wheel: int = 0
    x: int = 0
    y: int = 0
    z: int = 0
    l: int = 0  # noqa: E741
    r: int = 0
    key: int = 0


@dataclass(frozen=True)
class DbusData:
    """Scaled stick, switch, mouse and keyboard state."""

    ch_r_x: float = 0.0
    ch_r_y: float = 0.0
    ch_l_x: float = 0.0
    ch_l_y: float = 0.0
    m_x: float = 0.0
    m_y: float = 0.0
    m_z: float = 0.0
    wheel: float = 0.0
    s_l: int = 0
    s_r: int = 0
    p_l: int = 0
    p_r: int = 0
    key_w: bool = False
    key_s: bool = False
    key_a: bool = False
    key_d: bool = False
    key_shift: bool = False
    key_ctrl: bool = False
    key_q: bool = False
    key_e: bool = False
    key_r: bool = False
    key_f: bool = False
    key_g: bool = False
    key_z: bool = False
    key_x: bool = False
    key_c: bool = False
    key_v: bool = False
    key_b: bool = False
    stamp: float = 0.0


_LOW_KEYS = ("key_w", "key_s", "key_a", "key_d", "key_shift", "key_ctrl", "key_q", "key_e")
_HIGH_KEYS = ("key_r", "key_f", "key_g", "key_z", "key_x", "key_c", "key_v", "key_b")


def unpack_frame(frame: Sequence[int] | bytes) -> RawDbusData:
    """Decode an 18-byte frame.

    Raises ValueError if the frame has the wrong length or a stick channel
    lies outside +/-660.
    """
    b = bytes(frame)
    if len(b) != FRAME_LENGTH:
        raise ValueError(f"frame must be {FRAME_LENGTH} bytes, got {len(b)}")
    ch0 = ((b[0] | b[1] << 8) & 0x07FF) - _CHANNEL_OFFSET
    ch1 = ((b[1] >> 3 | b[2] << 5) & 0x07FF) - _CHANNEL_OFFSET
    ch2 = ((b[2] >> 6 | b[3] << 2 | b[4] << 10) & 0x07FF) - _CHANNEL_OFFSET
    ch3 = ((b[4] >> 1 | b[5] << 7) & 0x07FF) - _CHANNEL_OFFSET
    ch0, ch1, ch2, ch3 = (_dead_zone(c) for c in (ch0, ch1, ch2, ch3))
    s0 = (b[5] >> 4) & 0x0003
    s1 = ((b[5] >> 4) & 0x000C) >> 2
    if any(abs(c) > _CHANNEL_RANGE for c in (ch0, ch1, ch2, ch3)):
        raise ValueError("stick channel out of range")
    return RawDbusData(
        ch0=ch0,
        ch1=ch1,
        ch2=ch2,
        ch3=ch3,
        s0=s0,
        s1=s1,
        wheel=_int16((b[16] | b[17] << 8) - _CHANNEL_OFFSET),
        x=_int16(b[6] | b[7] << 8),
        y=_int16(b[8] | b[9] << 8),
        z=_int16(b[10] | b[11] << 8),
        l=b[12],
        r=b[13],
        key=b[14] | b[15] << 8,
    )


class DBus:
    """Collects bytes into a sliding 18-byte window and decodes the latest frame."""

    def __init__(self) -> None:
        self._buffer: deque[int] = deque([0] * FRAME_LENGTH, maxlen=FRAME_LENGTH)
        self._raw = RawDbusData()
        self._is_success = False
        self._is_update = False

    def read(self, read_byte: Callable[[], bytes]) -> None:
        """Read bytes until ten empty reads, then decode the window.

        ``read_byte`` returns one byte, or an empty bytes object when nothing
        is waiting.
        """
        timeouts = 0
        count = 0
        while timeouts < _READ_TIMEOUTS:
            chunk = read_byte()
            if not chunk:
                timeouts += 1
                continue
            for byte in chunk:
                self._buffer.append(byte)
                count += 1
        try:
            self._raw = unpack_frame(self._buffer)
            self._is_success = True
        except ValueError:
            self._is_success = False
        if count < _MIN_BYTES:
            self._raw = RawDbusData()
            self._is_update = False
        else:
            self._is_update = True

    def get_data(self, previous: DbusData | None = None) -> DbusData:
        """Return the scaled state, built on ``previous``.

        If the last frame was invalid ``previous`` is returned unchanged. A
        switch reading of zero keeps the previous switch value, and the stamp
        only advances when fresh bytes were received.
        """
        if previous is None:
            previous = DbusData()
        if not self._is_success:
            return previous
        raw = self._raw
        changes: dict[str, object] = {
            "ch_r_x": raw.ch0 / 660.0,
            "ch_r_y": raw.ch1 / 660.0,
            "ch_l_x": raw.ch2 / 660.0,
            "ch_l_y": raw.ch3 / 660.0,
            "m_x": raw.x / _MOUSE_SCALE,
            "m_y": raw.y / _MOUSE_SCALE,
            "m_z": raw.z / _MOUSE_SCALE,
            "wheel": raw.wheel / 660.0,
            "p_l": raw.l,
            "p_r": raw.r,
        }
        if raw.s1 != 0:
            changes["s_l"] = raw.s1
        if raw.s0 != 0:
            changes["s_r"] = raw.s0
        for bit, name in enumerate(_LOW_KEYS):
            changes[name] = bool(raw.key >> bit & 1)
        for bit, name in enumerate(_HIGH_KEYS):
            changes[name] = bool(raw.key >> (8 + bit) & 1)
        if self._is_update:
            changes["stamp"] = time.time()
        return replace(previous, **changes)


def open_dbus_port(path: str) -> serial.Serial:
    """Open the serial device at 100000 baud, 8 data bits, even parity, 1 stop bit."""
    return serial.Serial(
        port=path,
        baudrate=100000,
        bytesize=serial.EIGHTBITS,
        parity=serial.PARITY_EVEN,
        stopbits=serial.STOPBITS_ONE,
        timeout=0,
        xonxoff=False,
        rtscts=False,
        dsrdtr=False,
    )


class _Port(Protocol):
    def read(self, size: int = ...) -> bytes: ...


class DBusNode:
    """Reads the port once per ``run`` and hands the state to ``output``."""

    def __init__(self, port: _Port, output: Callable[[DbusData], None]) -> None:
        self._port = port
        self._output = output
        self._dbus = DBus()
        self.data = DbusData()

    def run(self) -> DbusData:
        self._dbus.read(lambda: self._port.read(1))
        self.data = self._dbus.get_data(self.data)
        self._output(self.data)
        return self.data


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Read the remote-control receiver and print its state.")
    parser.add_argument("--serial-port", default=DEFAULT_PORT)
    parser.add_argument("--rate", type=float, default=DEFAULT_RATE, help="loop rate in Hz")
    args = parser.parse_args(argv)
    try:
        port = open_dbus_port(args.serial_port)
    except serial.SerialException as exc:
        _log.error("Unable to open dbus: %s", exc)
        return 1
    node = DBusNode(port, lambda data: print(data, flush=True))
    period = 1.0 / args.rate
    try:
        with port:
            while True:
                started = time.monotonic()
                node.run()
                remaining = period - (time.monotonic() - started)
                if remaining > 0:
                    time.sleep(remaining)
    except KeyboardInterrupt:
        pass
    return 0