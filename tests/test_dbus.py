import io
import struct

import pytest

from rmtoolkit.dbus import DBus, DBusNode, DbusData, RawDbusData, unpack_frame

CENTER = 1024


def make_frame(ch=(CENTER, CENTER, CENTER, CENTER), s0=0, s1=0, x=0, y=0, z=0, l=0, r=0, key=0, wheel=CENTER):
    bits = ch[0] | ch[1] << 11 | ch[2] << 22 | ch[3] << 33 | s0 << 44 | s1 << 46
    return bits.to_bytes(6, "little") + struct.pack("<hhhBBHH", x, y, z, l, r, key, wheel)


def feeder(data):
    stream = io.BytesIO(bytes(data))
    return lambda: stream.read(1)


def test_centered_frame_decodes_to_zero():
    raw = unpack_frame(make_frame(s0=1, s1=3))
    assert raw == RawDbusData(s0=1, s1=3)


def test_dead_zone():
    raw = unpack_frame(make_frame(ch=(CENTER + 10, CENTER - 10, CENTER + 11, CENTER - 11)))
    assert (raw.ch0, raw.ch1, raw.ch2, raw.ch3) == (0, 0, 11, -11)


def test_channel_limits():
    raw = unpack_frame(make_frame(ch=(CENTER + 660, CENTER - 660, CENTER, CENTER)))
    assert (raw.ch0, raw.ch1) == (660, -660)
    with pytest.raises(ValueError):
        unpack_frame(make_frame(ch=(CENTER + 661, CENTER, CENTER, CENTER)))


def test_wrong_length_rejected():
    with pytest.raises(ValueError):
        unpack_frame(bytes(17))


def test_mouse_and_buttons_round_trip():
    raw = unpack_frame(make_frame(x=-5, y=300, z=-1600, l=1, r=0, key=0xBEEF, wheel=CENTER - 20))
    assert (raw.x, raw.y, raw.z) == (-5, 300, -1600)
    assert (raw.l, raw.r, raw.key, raw.wheel) == (1, 0, 0xBEEF, -20)


def test_read_and_scale():
    dbus = DBus()
    frame = make_frame(ch=(CENTER + 660, CENTER - 660, CENTER, CENTER), s0=2, s1=1,
                       x=1600, l=1, key=0x0101, wheel=CENTER + 660)
    dbus.read(feeder(frame))
    data = dbus.get_data(DbusData())
    assert data.ch_r_x == 1.0
    assert data.ch_r_y == -1.0
    assert data.ch_l_x == 0.0
    assert data.m_x == 1.0
    assert data.wheel == 1.0
    assert (data.s_l, data.s_r, data.p_l, data.p_r) == (1, 2, 1, 0)
    assert data.key_w and data.key_r
    assert not any([data.key_s, data.key_e, data.key_f, data.key_b])
    assert data.stamp > 0


def test_high_key_bit():
    dbus = DBus()
    dbus.read(feeder(make_frame(key=0x8080)))
    data = dbus.get_data()
    assert data.key_b and data.key_e
    assert not data.key_w


def test_zero_switch_keeps_previous():
    dbus = DBus()
    dbus.read(feeder(make_frame(s0=0, s1=0)))
    data = dbus.get_data(DbusData(s_l=3, s_r=2))
    assert (data.s_l, data.s_r) == (3, 2)


def test_invalid_frame_returns_previous():
    dbus = DBus()
    previous = DbusData(ch_r_x=0.5, s_l=1, stamp=7.0)
    dbus.read(feeder(b"\x01\x02\x03\x04\x05"))
    assert dbus.get_data(previous) == previous


def test_no_new_bytes_zeroes_state_and_keeps_stamp():
    dbus = DBus()
    dbus.read(feeder(make_frame(ch=(CENTER + 300, CENTER, CENTER, CENTER), s1=2, key=1)))
    first = dbus.get_data()
    assert first.ch_r_x == 300 / 660.0
    dbus.read(feeder(b""))
    second = dbus.get_data(first)
    assert second.ch_r_x == 0.0
    assert second.key_w is False
    assert second.s_l == first.s_l
    assert second.stamp == first.stamp


def test_window_uses_latest_bytes():
    dbus = DBus()
    stale = make_frame(ch=(CENTER + 100, CENTER, CENTER, CENTER))
    fresh = make_frame(ch=(CENTER - 100, CENTER, CENTER, CENTER))
    dbus.read(feeder(stale + fresh))
    assert dbus.get_data().ch_r_x == -100 / 660.0


def test_node_run_publishes():
    published = []
    port = io.BytesIO(make_frame(ch=(CENTER, CENTER + 660, CENTER, CENTER), s0=1))
    node = DBusNode(port, published.append)
    result = node.run()
    assert published == [result]
    assert result.ch_r_y == 1.0
    assert result.s_r == 1
    assert node.data == result