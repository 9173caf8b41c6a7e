import struct

import pytest

from rmtoolkit.crc import append_crc8, verify_crc8
from rmtoolkit.protocol import (
    FrameHeader,
    GraphConfig,
    GraphType,
    InteractiveDataHeader,
    RefereeCmdId,
    decode_payload,
    unpack_frame_header,
    unpack_graph_config,
)


def test_frame_header_wire_layout():
    header = FrameHeader(sof=0xA5, data_length=0x1234, seq=7, crc_8=0x99)
    assert header.pack() == bytes([0xA5, 0x34, 0x12, 0x07, 0x99])


def test_frame_header_round_trip():
    header = FrameHeader(sof=0xA5, data_length=300, seq=42, crc_8=17)
    assert unpack_frame_header(header.pack() + b"extra") == header


def test_frame_header_with_crc_verifies():
    packed = append_crc8(FrameHeader(sof=0xA5, data_length=10, seq=3).pack())
    assert verify_crc8(packed)
    assert unpack_frame_header(packed).data_length == 10


def test_frame_header_too_short():
    with pytest.raises(ValueError):
        unpack_frame_header(b"\xa5\x00")


def test_interactive_header_pack():
    header = InteractiveDataHeader(data_cmd_id=0x0101, sender_id=3, receiver_id=0x0103)
    assert struct.unpack("<HHH", header.pack()) == (0x0101, 3, 0x0103)


def test_graph_config_round_trip():
    config = GraphConfig(
        graphic_id=b"abc",
        operate_type=2,
        graphic_type=GraphType.STRING,
        layer=5,
        color=8,
        start_angle=300,
        end_angle=12,
        width=700,
        start_x=1900,
        start_y=1000,
        radius=1000,
        end_x=2000,
        end_y=1500,
    )
    packed = config.pack()
    assert len(packed) == 15
    assert unpack_graph_config(packed) == config


def test_graph_config_operation_in_first_bits():
    packed = GraphConfig(operate_type=1).pack()
    assert packed[3] == 1
    assert sum(packed) == 1


def test_graph_config_end_y_in_top_bits():
    packed = GraphConfig(end_y=2047).pack()
    assert packed[11:15] == bytes([0x00, 0x00, 0xE0, 0xFF])


def test_graph_config_truncates_to_width():
    config = GraphConfig()
    config.start_x = (1 << 11) + 5
    assert config.start_x == 5


def test_graph_config_rejects_bad_id():
    with pytest.raises(ValueError):
        GraphConfig(graphic_id=b"ab")


def test_unpack_graph_config_too_short():
    with pytest.raises(ValueError):
        unpack_graph_config(b"\x00" * 14)


def test_decode_game_status_bitfields():
    game_type, progress, remain, stamp = 4, 3, 120, 99
    payload = bytes([game_type | progress << 4]) + struct.pack("<HQ", remain, stamp)
    fields = decode_payload(RefereeCmdId.GAME_STATUS_CMD, payload)
    assert fields == {
        "game_type": game_type,
        "game_progress": progress,
        "stage_remain_time": remain,
        "sync_time_stamp": stamp,
    }


def test_decode_robot_hp_accepts_int_id():
    values = list(range(100, 116))
    fields = decode_payload(0x0003, struct.pack("<16H", *values))
    assert fields["red_1_robot_hp"] == values[0]
    assert fields["reserved_1"] == values[4]
    assert fields["blue_base_hp"] == values[15]


def test_decode_robot_status():
    payload = struct.pack("<BBHHHHHB", 3, 2, 150, 200, 40, 240, 60, 0b101)
    fields = decode_payload(RefereeCmdId.ROBOT_STATUS_CMD, payload)
    assert fields["robot_id"] == 3
    assert fields["chassis_power_limit"] == 60
    assert fields["mains_power_gimbal_output"] == 1
    assert fields["mains_power_chassis_output"] == 0
    assert fields["mains_power_shooter_output"] == 1


def test_decode_event_data_crosses_bytes():
    be_hit_time, target, reserved = 300, 5, 257
    bits = 1 | 1 << 4 | 2 << 5 | be_hit_time << 9 | target << 18 | reserved << 23
    fields = decode_payload(RefereeCmdId.FIELD_EVENTS_CMD, bits.to_bytes(4, "little"))
    assert fields["nan_overlapping_supply_station_state"] == 1
    assert fields["large_power_rune_state"] == 1
    assert fields["central_elevated_ground_state"] == 2
    assert fields["be_hit_time"] == be_hit_time
    assert fields["be_hit_target"] == target
    assert fields["reserved"] == reserved


def test_decode_shoot_data_float():
    payload = struct.pack("<BBBf", 1, 2, 10, 15.5)
    fields = decode_payload(RefereeCmdId.SHOOT_DATA_CMD, payload)
    assert fields["bullet_speed"] == 15.5
    assert fields["bullet_freq"] == 10


def test_decode_map_sentry_arrays():
    dx = tuple(range(-24, 25))
    dy = tuple(reversed(dx))
    payload = struct.pack("<BHH49b49bH", 3, 10, 20, *dx, *dy, 7)
    fields = decode_payload(RefereeCmdId.MAP_SENTRY_CMD, payload)
    assert fields["delta_x"] == dx
    assert fields["delta_y"] == dy
    assert fields["sender_id"] == 7


def test_decode_sentry_info_bits_after_word():
    info, out_of_war, remaining = 0xDEADBEEF, 1, 1000
    payload = struct.pack("<IH", info, out_of_war | remaining << 1)
    fields = decode_payload(RefereeCmdId.SENTRY_INFO_CMD, payload)
    assert fields["sentry_info"] == info
    assert fields["is_out_of_war"] == out_of_war
    assert fields["remaining_bullets_can_supply"] == remaining


def test_decode_rejects_short_payload():
    with pytest.raises(ValueError):
        decode_payload(RefereeCmdId.ROBOT_POS_CMD, b"\x00" * 11)


def test_decode_rejects_unknown_command():
    with pytest.raises(ValueError):
        decode_payload(0x7777, b"")


def test_decode_rejects_command_without_layout():
    with pytest.raises(ValueError):
        decode_payload(RefereeCmdId.CUSTOM_CLIENT_CMD, b"\x00" * 32)