# rmtoolkit

Building blocks for the software of small competition robots:

- **Filters** (`rmtoolkit.filters`): `MovingAverageFilter`,
  `ButterworthFilter`, `DigitalLpFilter`, `DerivLpFilter`, `FF01Filter`,
  `FF02Filter`, `AverageFilter` (ignores jumps larger than a limit),
  `RampFilter` (rate limiter) and `OneEuroFilter`. Every filter has
  `input(value)`, `output()` and `clear()`; `RampFilter.clear` takes an
  optional starting value and `RampFilter.set_acc` changes its rate.
  `min_abs(value, limit)` clips a value's magnitude, keeping its sign.
- **Time-stamped low-pass filter** (`rmtoolkit.lowpass.LowPassFilter`):
  a second-order Butterworth low-pass whose step is taken from the
  times passed to `input(value, time)` (the current time if omitted).
- **Orientation helpers** (`rmtoolkit.orientation`): `quat_to_rpy`,
  `yaw_from_quat`, `average_quaternion` and
  `rotation_matrix_to_quaternion`. Quaternions are `(x, y, z, w)`.
- **Transform broadcasting** (`rmtoolkit.tf_broadcast`):
  `TfBroadcaster` sends batches of `TransformStamped` through a publish
  callable you supply, dropping a batch if a publish is already in
  progress; `StaticTfBroadcaster` keeps the latest transform per child
  frame and republishes the whole set.
- **DBus remote receiver** (`rmtoolkit.dbus`): `unpack_frame` decodes an
  18-byte remote-control frame into a `RawDbusData`; `DBus` collects
  bytes and produces scaled `DbusData` (sticks, switches, mouse,
  keyboard); `open_dbus_port` opens the receiver's serial port at
  100000 baud, 8E1; `DBusNode` ties a port to an output callable.
- **Referee protocol** (`rmtoolkit.crc`, `rmtoolkit.protocol`,
  `rmtoolkit.graph`): the CRC-8/CRC-16 frame checksums, command, robot
  and client identifiers as `IntEnum`s, packed `FrameHeader`,
  `InteractiveDataHeader` and `GraphConfig` structures,
  `decode_payload` for the fixed-layout referee commands, and `Graph`,
  a client UI graphic with change tracking.

## Installation

```
pip install rmtoolkit
```

For running the tests:

```
pip install "rmtoolkit[test]"
pytest
```

## Examples

Smoothing a noisy signal:

```python
from rmtoolkit.filters import OneEuroFilter, RampFilter

smoother = OneEuroFilter(120.0, 2.543785, 0.000001, 1.0)
for sample in (0.1, 0.3, 0.2, 0.25):
    smoother.input(sample)
print(smoother.output())

ramp = RampFilter(2.0, 0.01)   # at most 2 units/s, stepped every 10 ms
ramp.input(1.0)
print(ramp.output())           # 0.02
```

Filtering with time stamps (the first sample only records its time):

```python
from rmtoolkit.lowpass import LowPassFilter

lp = LowPassFilter(20.0)
for step, value in enumerate((0.0, 1.0, 1.0, 1.0), start=1):
    lp.input(value, step * 0.001)
print(lp.output())
```

Orientation:

```python
import math
from rmtoolkit.orientation import quat_to_rpy, yaw_from_quat

q = (0.0, 0.0, math.sin(0.25), math.cos(0.25))   # 0.5 rad about z
roll, pitch, yaw = quat_to_rpy(q)
print(yaw_from_quat(q))                          # 0.5
```

Framing a referee message (the checksum functions return new bytes):

```python
from rmtoolkit.crc import append_crc8, verify_crc8, append_crc16, verify_crc16

header = append_crc8(b"\xa5\x0a\x00\x01\x00")
assert verify_crc8(header)

frame = append_crc16(header + b"\x01\x00" + bytes(10) + b"\x00\x00")
assert verify_crc16(frame)
```

Decoding a referee payload:

```python
from rmtoolkit.protocol import RefereeCmdId, decode_payload

fields = decode_payload(RefereeCmdId.GAME_RESULT_CMD, b"\x01")
print(fields["winner"])   # 1
```

Decoding a remote-control frame:

```python
from rmtoolkit.dbus import unpack_frame

raw = unpack_frame(frame)   # frame: 18 bytes; ValueError if malformed
print(raw.ch0, raw.s0, raw.key)
```

## Command line

The `rm-dbus` command opens the receiver's serial port, reads it in a
loop and prints the decoded `DbusData` each cycle:

```
rm-dbus --serial-port /dev/usbDbus --rate 60
```

Both options shown are the defaults. It exits with status 1 if the port
cannot be opened, and stops on Ctrl-C.

## What it does not do

The package does not connect to any robot middleware: transforms and
remote-control state are handed to callables you provide. There is no
referee program: nothing reads referee frames from a serial port,
publishes game data, or sends UI graphics to the client; the referee
modules only provide checksums, identifiers, structure packing,
payload decoding and the `Graph` object.