import pytest

from rmtoolkit.filters import (
    AverageFilter,
    ButterworthFilter,
    DerivLpFilter,
    DigitalLpFilter,
    FF01Filter,
    FF02Filter,
    MovingAverageFilter,
    OneEuroFilter,
    RampFilter,
    min_abs,
)


def test_min_abs_clips_and_keeps_sign():
    assert min_abs(-5.0, 2.0) == -2.0
    assert min_abs(5.0, 2.0) == 2.0
    assert min_abs(1.0, 2.0) == 1.0


def test_moving_average_constant_input():
    f = MovingAverageFilter(4)
    for _ in range(4):
        f.input(3.0)
    assert f.output() == pytest.approx(3.0)


def test_moving_average_partial_window_counts_zeros():
    f = MovingAverageFilter(4)
    f.input(8.0)
    assert f.output() == pytest.approx(8.0 / 4)


def test_moving_average_window_slides():
    f = MovingAverageFilter(2)
    for value in (100.0, 1.0, 1.0):
        f.input(value)
    assert f.output() == pytest.approx(1.0)


def test_moving_average_clear():
    f = MovingAverageFilter(3)
    f.input(5.0)
    f.clear()
    assert f.output() == 0.0


def test_moving_average_rejects_zero_window():
    with pytest.raises(ValueError):
        MovingAverageFilter(0)


def test_butterworth_first_output_is_zero():
    f = ButterworthFilter(10, 0.01, 5.0)
    f.input(7.0)
    assert f.output() == 0.0


def test_butterworth_linear():
    a = ButterworthFilter(10, 0.01, 5.0)
    b = ButterworthFilter(10, 0.01, 5.0)
    for v in (1.0, 2.0, -1.0, 4.0):
        a.input(v)
        b.input(2 * v)
    assert b.output() == pytest.approx(2 * a.output())


def test_butterworth_clear_resets_history():
    f = ButterworthFilter(5, 0.01, 5.0)
    for v in (1.0, 2.0, 3.0):
        f.input(v)
    f.clear()
    f.input(0.0)
    f.input(0.0)
    assert f.output() == 0.0


def test_digital_lp_unity_dc_gain():
    f = DigitalLpFilter(20.0, 0.001)
    for _ in range(5000):
        f.input(2.0)
    assert f.output() == pytest.approx(2.0, rel=1e-4)


def test_digital_lp_clear_repeats_sequence():
    f = DigitalLpFilter(20.0, 0.001)
    seq = (1.0, -2.0, 3.0)
    for v in seq:
        f.input(v)
    first = f.output()
    f.clear()
    for v in seq:
        f.input(v)
    assert f.output() == pytest.approx(first)


def test_deriv_lp_constant_gives_zero_derivative():
    f = DerivLpFilter(50.0, 0.001)
    for _ in range(5000):
        f.input(4.0)
    assert f.output() == pytest.approx(0.0, abs=1e-6)


def test_deriv_lp_linear():
    a = DerivLpFilter(50.0, 0.001)
    b = DerivLpFilter(50.0, 0.001)
    for v in (1.0, 3.0, 2.0):
        a.input(v)
        b.input(-3 * v)
    assert b.output() == pytest.approx(-3 * a.output())


def test_ff01_zero_input_zero_output():
    f = FF01Filter(0.001, 30.0)
    for _ in range(10):
        f.input(0.0)
    assert f.output() == 0.0


def test_ff01_linear():
    a = FF01Filter(0.001, 30.0)
    b = FF01Filter(0.001, 30.0)
    for v in (1.0, 0.5, -2.0):
        a.input(v)
        b.input(2 * v)
    assert b.output() == pytest.approx(2 * a.output())


def test_ff02_clear_repeats_sequence():
    f = FF02Filter(0.001, 30.0)
    seq = (1.0, 2.0, 4.0)
    for v in seq:
        f.input(v)
    first = f.output()
    f.clear()
    for v in seq:
        f.input(v)
    assert f.output() == pytest.approx(first)


def test_average_filter_step():
    f = AverageFilter(1.0, 1.0, 10.0)
    f.input(4.0)
    assert f.output() == pytest.approx(2.0)


def test_average_filter_ignores_outlier():
    f = AverageFilter(1.0, 1.0, 10.0)
    f.input(100.0)
    assert f.output() == 0.0


def test_average_filter_clear():
    f = AverageFilter(1.0, 1.0, 10.0)
    f.input(4.0)
    f.clear()
    assert f.output() == 0.0


def test_ramp_filter_limits_step_then_settles():
    f = RampFilter(1.0, 0.5)
    f.input(10.0)
    assert f.output() == pytest.approx(0.5)
    for _ in range(30):
        f.input(10.0)
    assert f.output() == pytest.approx(10.0)


def test_ramp_filter_clear_and_set_acc():
    f = RampFilter(1.0, 1.0)
    f.clear(3.0)
    assert f.output() == 3.0
    f.set_acc(100.0)
    f.input(-5.0)
    assert f.output() == pytest.approx(-5.0)
    f.clear()
    assert f.output() == 0.0


def test_one_euro_first_sample_passes_through():
    f = OneEuroFilter(120.0, 2.543785, 0.000001, 1.0)
    f.input(5.0)
    assert f.output() == pytest.approx(5.0)


def test_one_euro_constant_stays_constant_and_clear():
    f = OneEuroFilter(120.0, 2.543785, 0.000001, 1.0)
    for _ in range(10):
        f.input(5.0)
    assert f.output() == pytest.approx(5.0)
    f.clear()
    f.input(-1.0)
    assert f.output() == pytest.approx(-1.0)


def test_one_euro_smooths_step():
    f = OneEuroFilter(120.0, 2.543785, 0.000001, 1.0)
    f.input(0.0)
    f.input(10.0)
    assert 0.0 < f.output() < 10.0