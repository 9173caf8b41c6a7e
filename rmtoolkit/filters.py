"""Scalar signal filters: moving average, biquad low-pass variants, ramp and 1-euro."""

from __future__ import annotations

import math
import struct

__all__ = [
    "MovingAverageFilter",
    "ButterworthFilter",
    "DigitalLpFilter",
    "DerivLpFilter",
    "FF01Filter",
    "FF02Filter",
    "AverageFilter",
    "RampFilter",
    "OneEuroFilter",
    "min_abs",
]


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def min_abs(value: float, limit: float) -> float:
    """Return ``value`` with its magnitude clipped to ``limit``, keeping its sign."""
    sign = -1.0 if value < 0.0 else 1.0
    return sign * min(abs(value), limit)


class MovingAverageFilter:
    """Mean of the last ``num_data`` inputs, with missing samples counted as zero."""

    def __init__(self, num_data: int) -> None:
        if num_data <= 0:
            raise ValueError("num_data must be positive")
        self._num_data = num_data
        self._buffer = [0.0] * num_data
        self._idx = 0
        self._sum = 0.0

    def input(self, value: float) -> None:
        self._sum -= self._buffer[self._idx]
        self._sum += value
        self._buffer[self._idx] = value
        self._idx = (self._idx + 1) % self._num_data

    def output(self) -> float:
        return self._sum / self._num_data

    def clear(self) -> None:
        self._sum = 0.0
        self._buffer = [0.0] * self._num_data


class ButterworthFilter:
    """FIR approximation of a Butterworth impulse response over a sample window."""

    def __init__(self, num_sample: int, dt: float, cutoff_frequency: float) -> None:
        if num_sample <= 0:
            raise ValueError("num_sample must be positive")
        self._num_sample = num_sample
        self._dt = dt
        self._cutoff = cutoff_frequency
        self._buffer = [0.0] * num_sample
        self._value = 0.0

    def input(self, value: float) -> None:
        self._buffer = [value] + self._buffer[:-1]
        sqrt_2 = math.sqrt(2.0)
        total = 0.0
        for j, sample in enumerate(self._buffer):
            t = j * self._dt
            total += (
                sqrt_2
                / self._cutoff
                * sample
                * math.exp(-1.0 / sqrt_2 * t)
                * math.sin(self._cutoff / sqrt_2 * t)
                * self._dt
            )
        self._value = total

    def output(self) -> float:
        return self._value

    def clear(self) -> None:
        self._buffer = [0.0] * self._num_sample


class _BiquadFilter:
    """Second-order IIR section with two past inputs and two past outputs."""

    def __init__(self, in1: float, in2: float, in3: float, out1: float, out2: float) -> None:
        self._in1 = in1
        self._in2 = in2
        self._in3 = in3
        self._out1 = out1
        self._out2 = out2
        self._in_prev = [0.0, 0.0]
        self._out_prev = [0.0, 0.0]
        self._out = 0.0

    def _compute(self, value: float) -> float:
        return (
            self._in1 * value
            + self._in2 * self._in_prev[0]
            + self._in3 * self._in_prev[1]
            + self._out1 * self._out_prev[0]
            + self._out2 * self._out_prev[1]
        )

    def _push(self, value: float) -> None:
        self._out = self._compute(value)
        self._in_prev = [value, self._in_prev[0]]
        self._out_prev = [self._out, self._out_prev[0]]

    def _reset(self) -> None:
        self._in_prev = [0.0, 0.0]
        self._out_prev = [0.0, 0.0]


class DigitalLpFilter(_BiquadFilter):
    """Discrete second-order low-pass filter with cut-off ``w_c`` and sample time ``t_s``."""

    def __init__(self, w_c: float, t_s: float) -> None:
        x = t_s * t_s * w_c * w_c
        den = _f32(2500 * x + 7071 * t_s * w_c + 10000)
        super().__init__(
            2500 * x / den,
            5000 * x / den,
            2500 * x / den,
            -(5000 * x - 20000) / den,
            -(2500 * x - 7071 * t_s * w_c + 10000) / den,
        )

    def input(self, value: float) -> None:
        self._push(value)

    def output(self) -> float:
        return self._out

    def clear(self) -> None:
        self._reset()


class DerivLpFilter(_BiquadFilter):
    """Low-pass filtered derivative of the input signal."""

    def __init__(self, w_c: float, t_s: float) -> None:
        a = 1.4142
        x = t_s * t_s * w_c * w_c
        den = 4 + 2 * a * w_c * t_s + x
        super().__init__(
            2 * t_s * w_c * w_c / den,
            0.0,
            -2.0 * t_s * w_c * w_c / den,
            -1.0 * (-8 + x * 2) / den,
            -1.0 * (4 - 2 * a * w_c * t_s + x) / den,
        )

    def input(self, value: float) -> None:
        self._push(value)

    def output(self) -> float:
        return self._out

    def clear(self) -> None:
        self._reset()


class FF01Filter(_BiquadFilter):
    """Feed-forward filter for an inertia-and-damping plant model."""

    def __init__(self, t_s: float, w_c: float) -> None:
        t_s = _f32(t_s)
        w_c = _f32(w_c)
        a = 1.4142
        inertia = 0.00008
        damping = 0.0002
        x = t_s * t_s * w_c * w_c
        den = 4 + 2 * a * w_c * t_s + x
        super().__init__(
            damping * x + 2 * inertia * t_s * w_c * w_c,
            2 * damping * x,
            damping * x - 2 * inertia * t_s * w_c * w_c,
            -1.0 * (-8 + x * 2) / den,
            -1.0 * (4 - 2 * a * w_c * t_s + x) / den,
        )

    def input(self, value: float) -> None:
        self._push(value)

    def output(self) -> float:
        return self._out

    def clear(self) -> None:
        self._reset()


class FF02Filter(_BiquadFilter):
    """Feed-forward filter for a pure inertia plant model."""

    def __init__(self, t_s: float, w_c: float) -> None:
        t_s = _f32(t_s)
        w_c = _f32(w_c)
        inertia = 0.003216
        a = 1.4142
        x = t_s * t_s * w_c * w_c
        den = 4 + 2 * a * w_c * t_s + x
        super().__init__(
            inertia * 2 * t_s * w_c * w_c / den,
            0.0,
            -2.0 * inertia * t_s * w_c * w_c / den,
            -1.0 * (-8 + x * 2) / den,
            -1.0 * (4 - 2 * a * w_c * t_s + x) / den,
        )

    def input(self, value: float) -> None:
        # Both history slots take the newest sample.
        self._out = self._compute(value)
        self._in_prev = [value, value]
        self._out_prev = [self._out, self._out]

    def output(self) -> float:
        return self._out

    def clear(self) -> None:
        self._reset()


class AverageFilter:
    """First-order smoothing that ignores updates larger than ``limit``."""

    def __init__(self, dt: float, t_const: float, limit: float) -> None:
        self._dt = dt
        self._t_const = t_const
        self._limit = limit
        self._est = 0.0

    def input(self, value: float) -> None:
        update = value - self._est
        if abs(update) > self._limit:
            update = 0.0
        self._est += (self._dt / (self._dt + self._t_const)) * update

    def output(self) -> float:
        return self._est

    def clear(self) -> None:
        self._est = 0.0


class RampFilter:
    """Limits how fast the output follows the input, at ``acc`` per unit time."""

    def __init__(self, acc: float, dt: float) -> None:
        self._acc = acc
        self._dt = dt
        self._last = 0.0

    def input(self, value: float) -> None:
        self._last += min_abs(value - self._last, self._acc * self._dt)

    def output(self) -> float:
        return self._last

    def clear(self, last_value: float = 0.0) -> None:
        self._last = last_value

    def set_acc(self, acc: float) -> None:
        self._acc = acc


class OneEuroFilter:
    """Speed-adaptive low-pass filter with a cut-off that rises with the signal's rate."""

    def __init__(self, freq: float, mincutoff: float, beta: float, dcutoff: float) -> None:
        self.freq = freq
        self.mincutoff = mincutoff
        self.beta = beta
        self.dcutoff = dcutoff
        self._first = True
        self._x_prev = 0.0
        self._hatx_prev = 0.0
        self._dhatx_prev = 0.0
        self._filtered = 0.0

    @staticmethod
    def _alpha(cutoff: float, freq: float) -> float:
        te = 1.0 / freq
        tau = 1.0 / (2.0 * math.pi * cutoff)
        return 1.0 / (1.0 + tau / te)

    def input(self, value: float) -> None:
        dx = 0.0
        if self._first:
            self._dhatx_prev = dx
        else:
            dx = (value - self._x_prev) * self.freq
        a_d = self._alpha(self.dcutoff, self.freq)
        edx = a_d * dx + (1 - a_d) * self._dhatx_prev
        self._dhatx_prev = edx
        cutoff = self.mincutoff + self.beta * abs(edx)
        if self._first:
            self._hatx_prev = value
        a = self._alpha(cutoff, self.freq)
        self._filtered = a * value + (1 - a) * self._hatx_prev
        self._hatx_prev = self._filtered
        self._first = False

    def output(self) -> float:
        return self._filtered

    def clear(self) -> None:
        self._first = True
        self._x_prev = 0.0
        self._hatx_prev = 0.0
        self._dhatx_prev = 0.0